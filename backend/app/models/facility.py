import enum
import uuid
from datetime import date

from sqlalchemy import BigInteger, Boolean, Date, Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from app.models.base import Base, TimestampMixin, generate_uuid


class FacilityStatus(str, enum.Enum):
    active = "Active"
    inactive = "Inactive"
    in_progress = "In Progress"


class Facility(TimestampMixin, Base):
    __tablename__ = "facilities"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    state: Mapped[str | None] = mapped_column(String(2), nullable=True)
    proxy: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[FacilityStatus] = mapped_column(
        Enum(FacilityStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        default=FacilityStatus.active,
        nullable=False,
    )
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    yearly_volume: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    modalities: Mapped[list | None] = mapped_column(JSON, nullable=True)
    tat_sla: Mapped[str | None] = mapped_column(String(100), nullable=True)


class FacilityContact(TimestampMixin, Base):
    __tablename__ = "facility_contacts"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    facility_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("facilities.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class FacilityPreliveInfo(TimestampMixin, Base):
    """Readiness tracking for a facility before it goes live."""

    __tablename__ = "facility_prelive_info"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    facility_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("facilities.id"), nullable=True, index=True
    )
    priority: Mapped[str | None] = mapped_column(String(50), nullable=True)
    go_live_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    board_meeting_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    credentialing_due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    temps_possible: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    payor_enrollment_required: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    roles_needed: Mapped[list | None] = mapped_column(JSON, nullable=True)
