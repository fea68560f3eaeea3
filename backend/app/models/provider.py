import enum
import uuid
from datetime import date

from sqlalchemy import Date, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from app.models.base import Base, TimestampMixin, generate_uuid


class InitialOrRenewal(str, enum.Enum):
    initial = "initial"
    renewal = "renewal"


class PrivilegeTier(str, enum.Enum):
    inactive = "Inactive"
    full = "Full"
    temp = "Temp"
    in_progress = "In Progress"


class Provider(TimestampMixin, Base):
    __tablename__ = "providers"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    first_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    middle_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    degree: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class ProviderStateLicense(TimestampMixin, Base):
    __tablename__ = "provider_state_licenses"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    provider_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("providers.id"), nullable=True, index=True
    )
    state: Mapped[str | None] = mapped_column(String(2), nullable=True)
    status: Mapped[str | None] = mapped_column(String(100), nullable=True)
    path: Mapped[str | None] = mapped_column(String(100), nullable=True)
    priority: Mapped[str | None] = mapped_column(String(50), nullable=True)
    initial_or_renewal: Mapped[InitialOrRenewal | None] = mapped_column(
        Enum(InitialOrRenewal, native_enum=False), nullable=True
    )
    starts_at: Mapped[date | None] = mapped_column(Date, nullable=True)
    expires_at: Mapped[date | None] = mapped_column(Date, nullable=True)
    number: Mapped[str | None] = mapped_column(String(100), nullable=True)


class ProviderVestaPrivilege(TimestampMixin, Base):
    """Clinical privilege status a provider holds with Vesta itself."""

    __tablename__ = "provider_vesta_privileges"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    provider_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("providers.id"), nullable=True, index=True
    )
    privilege_tier: Mapped[PrivilegeTier | None] = mapped_column(
        Enum(PrivilegeTier, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=True,
    )
    current_priv_init_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    current_priv_end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    term_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    term_reason: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # [{"approved_at": ..., "expires_at": ..., "tier": ...}]
    past_privileges: Mapped[list | None] = mapped_column(JSON, nullable=True)
