import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from app.models.comm_log import RelatedType


class CommLogCreate(BaseModel):
    related_type: RelatedType
    related_id: uuid.UUID
    comm_type: str = Field(..., min_length=1, max_length=100)
    subject: str | None = Field(None, max_length=500)
    notes: str | None = None


class CommLogUpdate(BaseModel):
    comm_type: str = Field(..., min_length=1, max_length=100)
    subject: str | None = Field(None, max_length=500)
    notes: str | None = None


class CommLogRead(BaseModel):
    id: uuid.UUID
    related_type: RelatedType
    related_id: uuid.UUID
    comm_type: str
    subject: str | None = None
    notes: str | None = None
    created_by: uuid.UUID | None = None
    last_updated_by: uuid.UUID | None = None
    created_by_name: str | None = None
    last_updated_by_name: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
