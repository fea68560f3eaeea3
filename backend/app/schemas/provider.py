import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from app.models.provider import InitialOrRenewal, PrivilegeTier
from app.schemas.common import OptionalDate, OptionalEmail


class ProviderCreate(BaseModel):
    first_name: str | None = Field(None, max_length=255)
    middle_name: str | None = Field(None, max_length=255)
    last_name: str | None = Field(None, max_length=255)
    degree: str | None = Field(None, max_length=50)
    email: OptionalEmail = None
    phone: str | None = Field(None, max_length=50)
    notes: str | None = None


class ProviderUpdate(BaseModel):
    first_name: str | None = Field(None, min_length=1, max_length=255)
    middle_name: str | None = Field(None, max_length=255)
    last_name: str | None = Field(None, min_length=1, max_length=255)
    degree: str | None = Field(None, max_length=50)
    email: OptionalEmail = None
    phone: str | None = Field(None, max_length=50)
    notes: str | None = None


class ProviderRead(BaseModel):
    id: uuid.UUID
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    degree: str | None = None
    email: str | None = None
    phone: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# ── State licenses ──


class LicenseFields(BaseModel):
    state: str | None = Field(None, max_length=2)
    status: str | None = Field(None, max_length=100)
    path: str | None = Field(None, max_length=100)
    priority: str | None = Field(None, max_length=50)
    initial_or_renewal: InitialOrRenewal | None = None
    starts_at: OptionalDate = None
    expires_at: OptionalDate = None
    number: str | None = Field(None, max_length=100)


class LicenseCreate(LicenseFields):
    provider_id: uuid.UUID


class LicenseUpdate(LicenseFields):
    pass


class LicenseRead(BaseModel):
    id: uuid.UUID
    provider_id: uuid.UUID | None = None
    state: str | None = None
    status: str | None = None
    path: str | None = None
    priority: str | None = None
    initial_or_renewal: InitialOrRenewal | None = None
    starts_at: date | None = None
    expires_at: date | None = None
    number: str | None = None
    updated_at: datetime

    model_config = {"from_attributes": True}


# ── Vesta privileges ──


class PrivilegeFields(BaseModel):
    privilege_tier: PrivilegeTier | None = None
    current_priv_init_date: OptionalDate = None
    current_priv_end_date: OptionalDate = None
    term_date: OptionalDate = None
    term_reason: str | None = Field(None, max_length=500)


class PrivilegeCreate(PrivilegeFields):
    provider_id: uuid.UUID


class PrivilegeUpdate(PrivilegeFields):
    pass


class PrivilegeRead(BaseModel):
    id: uuid.UUID
    provider_id: uuid.UUID | None = None
    privilege_tier: PrivilegeTier | None = None
    current_priv_init_date: date | None = None
    current_priv_end_date: date | None = None
    term_date: date | None = None
    term_reason: str | None = None
    past_privileges: list | None = None
    updated_at: datetime

    model_config = {"from_attributes": True}
