import uuid
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from app.models.credential import FormSize
from app.models.facility import FacilityStatus
from app.schemas.common import OptionalDate, OptionalEmail


class FacilityCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    state: str | None = Field(None, max_length=2)
    proxy: str | None = Field(None, max_length=255)
    status: FacilityStatus = FacilityStatus.active
    email: OptionalEmail = None
    address: str | None = Field(None, max_length=500)
    yearly_volume: int | None = Field(None, ge=0)
    modalities: list[str] | None = None
    tat_sla: str | None = Field(None, max_length=100)


class FacilityUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    state: str | None = Field(None, max_length=2)
    proxy: str | None = Field(None, max_length=255)
    status: FacilityStatus | None = None
    email: OptionalEmail = None
    address: str | None = Field(None, max_length=500)
    yearly_volume: int | None = Field(None, ge=0)
    modalities: list[str] | None = None
    tat_sla: str | None = Field(None, max_length=100)


class FacilityRead(BaseModel):
    id: uuid.UUID
    name: str | None = None
    state: str | None = None
    proxy: str | None = None
    status: FacilityStatus
    email: str | None = None
    address: str | None = None
    yearly_volume: int | None = None
    modalities: list[str] | None = None
    tat_sla: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class FacilityListParams(BaseModel):
    page: int = Field(1, ge=1)
    page_size: int = Field(15, ge=5, le=50)
    search: str | None = None
    active_only: bool = False
    sort_by: Literal["name", "state", "created_at"] = "name"
    sort_order: Literal["asc", "desc"] = "asc"


class FacilityPage(BaseModel):
    items: list[FacilityRead]
    total: int
    page: int
    page_size: int
    total_pages: int


# ── Contacts ──


class ContactCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    title: str | None = Field(None, max_length=255)
    email: OptionalEmail = None
    phone: str | None = Field(None, max_length=50)
    is_primary: bool = False


class ContactUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    title: str | None = Field(None, max_length=255)
    email: OptionalEmail = None
    phone: str | None = Field(None, max_length=50)
    is_primary: bool | None = None


class ContactPrimaryToggle(BaseModel):
    is_primary: bool


class ContactRead(BaseModel):
    id: uuid.UUID
    facility_id: uuid.UUID
    name: str
    title: str | None = None
    email: str | None = None
    phone: str | None = None
    is_primary: bool

    model_config = {"from_attributes": True}


# ── Pre-live ──


class PreliveFields(BaseModel):
    priority: str | None = Field(None, max_length=50)
    go_live_date: OptionalDate = None
    board_meeting_date: OptionalDate = None
    credentialing_due_date: OptionalDate = None
    temps_possible: bool | None = None
    payor_enrollment_required: bool | None = None
    roles_needed: list[str] | None = None


class PreliveCreate(PreliveFields):
    pass


class PreliveUpdate(PreliveFields):
    pass


class PreliveRead(BaseModel):
    id: uuid.UUID
    facility_id: uuid.UUID | None = None
    priority: str | None = None
    go_live_date: date | None = None
    board_meeting_date: date | None = None
    credentialing_due_date: date | None = None
    temps_possible: bool | None = None
    payor_enrollment_required: bool | None = None
    roles_needed: list | None = None
    updated_at: datetime

    model_config = {"from_attributes": True}


# ── Provider-facility credentials ──


class PfcFields(BaseModel):
    facility_type: str | None = Field(None, max_length=100)
    privileges: str | None = Field(None, max_length=255)
    decision: str | None = Field(None, max_length=100)
    notes: str | None = None
    priority: str | None = Field(None, max_length=50)
    form_size: FormSize | None = None
    application_required: bool | None = None


class PfcCreate(PfcFields):
    provider_id: uuid.UUID


class PfcUpdate(PfcFields):
    pass


class PfcRead(BaseModel):
    id: uuid.UUID
    provider_id: uuid.UUID | None = None
    facility_id: uuid.UUID | None = None
    facility_type: str | None = None
    privileges: str | None = None
    decision: str | None = None
    notes: str | None = None
    priority: str | None = None
    form_size: FormSize | None = None
    application_required: bool | None = None
    updated_at: datetime

    model_config = {"from_attributes": True}
