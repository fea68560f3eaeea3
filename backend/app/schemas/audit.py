import uuid
from datetime import datetime

from pydantic import BaseModel


class AuditLogEntryRead(BaseModel):
    id: uuid.UUID
    table_name: str
    record_id: uuid.UUID | None = None
    action: str
    actor_id: uuid.UUID | None = None
    actor_email: str | None = None
    old_data: dict
    new_data: dict
    created_at: datetime

    model_config = {"from_attributes": True}


class AuditLogPage(BaseModel):
    rows: list[AuditLogEntryRead]
    total: int
