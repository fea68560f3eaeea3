import enum
import uuid

from sqlalchemy import Boolean, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin, generate_uuid


class FormSize(str, enum.Enum):
    small = "small"
    medium = "medium"
    large = "large"
    x_large = "x-large"
    online = "online"


class ProviderFacilityCredential(TimestampMixin, Base):
    """Credentialing status of one provider at one facility (PFC)."""

    __tablename__ = "provider_facility_credentials"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    provider_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("providers.id"), nullable=True, index=True
    )
    facility_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("facilities.id"), nullable=True, index=True
    )
    facility_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    priority: Mapped[str | None] = mapped_column(String(50), nullable=True)
    privileges: Mapped[str | None] = mapped_column(String(255), nullable=True)
    decision: Mapped[str | None] = mapped_column(String(100), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    form_size: Mapped[FormSize | None] = mapped_column(
        Enum(FormSize, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=True,
    )
    application_required: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
