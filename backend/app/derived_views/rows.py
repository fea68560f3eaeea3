"""Flat dashboard row variants, one per record kind.

Every field besides ``id`` and the display names may be null and means
"unknown", never false or zero. Dates and timestamps stay ISO strings so a
malformed value degrades at sort/display time instead of failing the load.
"""

import enum
from typing import Literal

from pydantic import BaseModel, Field


class ViewKey(str, enum.Enum):
    provider_facility = "provider_facility"
    facility_provider = "facility_provider"
    facility_prelive = "facility_prelive"
    provider_license = "provider_license"
    provider_privileges = "provider_privileges"


VIEW_LABELS: dict[ViewKey, str] = {
    ViewKey.provider_facility: "Provider-Level Facility Credentials",
    ViewKey.facility_provider: "Facility-Level Provider Credentials",
    ViewKey.facility_prelive: "Facility Pre-Live Details",
    ViewKey.provider_license: "Provider-Level State License Overview",
    ViewKey.provider_privileges: "Provider Vesta Privileges",
}


class _Row(BaseModel):
    model_config = {"frozen": True}

    id: str
    updated_at: str | None = None


class ProviderFacilityRow(_Row):
    kind: Literal["pfc"] = "pfc"
    provider_id: str | None = None
    provider_name: str = "Unnamed Provider"
    provider_degree: str | None = None
    facility_id: str | None = None
    facility_name: str = "Unnamed Facility"
    facility_state: str | None = None
    priority: str | None = None
    privileges: str | None = None
    decision: str | None = None
    facility_type: str | None = None
    application_required: bool | None = None


class FacilityPreliveRow(_Row):
    kind: Literal["prelive"] = "prelive"
    facility_id: str | None = None
    facility_name: str = "Unnamed Facility"
    facility_state: str | None = None
    priority: str | None = None
    go_live_date: str | None = None
    credentialing_due_date: str | None = None
    board_meeting_date: str | None = None
    temps_possible: bool | None = None
    payor_enrollment_required: bool | None = None
    roles_needed: tuple[str, ...] = ()


class ProviderLicenseRow(_Row):
    kind: Literal["license"] = "license"
    provider_id: str | None = None
    provider_name: str = "Unnamed Provider"
    provider_degree: str | None = None
    state: str | None = None
    priority: str | None = None
    status: str | None = None
    path: str | None = None
    initial_or_renewal: str | None = None
    starts_at: str | None = None
    expires_at: str | None = None


class PastPrivilege(BaseModel):
    model_config = {"frozen": True}

    approved_at: str | None = None
    expires_at: str | None = None
    tier: str | None = None


class ProviderPrivilegeRow(_Row):
    kind: Literal["privilege"] = "privilege"
    provider_id: str | None = None
    provider_name: str = "Unnamed Provider"
    provider_degree: str | None = None
    privilege_tier: str | None = None
    current_priv_init_date: str | None = None
    current_priv_end_date: str | None = None
    term_date: str | None = None
    term_reason: str | None = None
    past_privileges: tuple[PastPrivilege, ...] = ()


DashboardRow = ProviderFacilityRow | FacilityPreliveRow | ProviderLicenseRow | ProviderPrivilegeRow


class DashboardSnapshot(BaseModel):
    """Rows fetched once per load. Treated as immutable by the pipeline."""

    model_config = {"frozen": True}

    provider_facility_rows: tuple[ProviderFacilityRow, ...] = Field(default=())
    facility_prelive_rows: tuple[FacilityPreliveRow, ...] = Field(default=())
    provider_license_rows: tuple[ProviderLicenseRow, ...] = Field(default=())
    provider_privilege_rows: tuple[ProviderPrivilegeRow, ...] = Field(default=())
