import enum
import uuid

from sqlalchemy import Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin, generate_uuid


class RelatedType(str, enum.Enum):
    provider = "provider"
    facility = "facility"


class CommLog(TimestampMixin, Base):
    """One logged interaction (email, call, portal note) about a provider or facility."""

    __tablename__ = "comm_logs"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    related_type: Mapped[RelatedType] = mapped_column(
        Enum(RelatedType, native_enum=False), nullable=False
    )
    related_id: Mapped[uuid.UUID] = mapped_column(nullable=False, index=True)
    comm_type: Mapped[str] = mapped_column(String(100), nullable=False)
    subject: Mapped[str | None] = mapped_column(String(500), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("agents.id", ondelete="SET NULL"), nullable=True
    )
    last_updated_by: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("agents.id", ondelete="SET NULL"), nullable=True
    )
