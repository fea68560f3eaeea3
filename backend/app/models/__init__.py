# Import all models so Base.metadata is populated for create_all.
from app.models.agent import Agent  # noqa: F401
from app.models.session import Session  # noqa: F401
from app.models.audit import AuditLogEntry  # noqa: F401
from app.models.provider import (  # noqa: F401
    Provider,
    ProviderStateLicense,
    ProviderVestaPrivilege,
)
from app.models.facility import Facility, FacilityContact, FacilityPreliveInfo  # noqa: F401
from app.models.credential import ProviderFacilityCredential  # noqa: F401
from app.models.comm_log import CommLog  # noqa: F401
