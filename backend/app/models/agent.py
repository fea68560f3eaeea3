import enum
import uuid

from sqlalchemy import Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin, generate_uuid


class AgentRole(str, enum.Enum):
    user = "user"
    admin = "admin"
    superadmin = "superadmin"


class Team(str, enum.Enum):
    IN = "IN"
    US = "US"


class Agent(TimestampMixin, Base):
    """Credentialing staff member. The only kind of account that can sign in."""

    __tablename__ = "agents"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    team: Mapped[Team] = mapped_column(Enum(Team, native_enum=False), nullable=False)
    team_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    role: Mapped[AgentRole] = mapped_column(
        Enum(AgentRole, native_enum=False),
        default=AgentRole.user,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    @property
    def display_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p).strip()
