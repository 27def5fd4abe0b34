from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, query_expression, relationship

from .base import Base


class Level(str, enum.Enum):
    """Skill tiers in promotion order."""

    TRAINEE = "TRAINEE"
    JUNIOR = "JUNIOR"
    MIDDLE = "MIDDLE"
    SENIOR = "SENIOR"
    LEAD = "LEAD"

    @classmethod
    def ordered(cls) -> tuple[Level, ...]:
        return tuple(cls)

    @property
    def rank(self) -> int:
        return self.ordered().index(self)


class Role(str, enum.Enum):
    """Membership role within a department.

    Lower rank means more privilege; a user's overall role is the
    lowest-ranked role among their memberships.
    """

    DEVELOPER = "developer"
    MANAGER = "manager"
    HEAD_OF_DEPARTMENT = "headOfDepartment"
    TECH_LEAD = "techLead"
    ADMIN = "admin"

    @classmethod
    def by_privilege(cls) -> tuple[Role, ...]:
        return (cls.ADMIN, cls.TECH_LEAD, cls.HEAD_OF_DEPARTMENT, cls.MANAGER, cls.DEVELOPER)

    @classmethod
    def from_rank(cls, rank: int | None) -> Role:
        if rank is None:
            return cls.DEVELOPER
        return cls.by_privilege()[rank]

    @property
    def rank(self) -> int:
        return self.by_privilege().index(self)


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class UserModel(Base):
    """SQLAlchemy model for users table."""

    __tablename__ = "users"
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    first_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    level: Mapped[Level] = mapped_column(
        Enum(Level, name="user_level", values_callable=_enum_values),
        default=Level.TRAINEE,
        nullable=False,
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    blocked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    need_congratulate: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # Aggregates filled per query by the user scopes
    role_rank: Mapped[int | None] = query_expression()
    last_datetime_pass: Mapped[datetime | None] = query_expression()
    competencies_count: Mapped[int | None] = query_expression()

    memberships: Mapped[list[UserDepartment]] = relationship(
        back_populates="user",
        cascade="all,delete-orphan",
    )
    departments: Mapped[list[Department]] = relationship(
        secondary="user_departments",
        order_by="Department.name",
        viewonly=True,
    )
    competencies: Mapped[list[UserCompetence]] = relationship(
        back_populates="user",
        cascade="all,delete-orphan",
        order_by=lambda: UserCompetence.updated_at.desc(),
    )
    unavailability: Mapped[list[UserUnavailability]] = relationship(
        back_populates="user",
        cascade="all,delete-orphan",
        order_by="UserUnavailability.starts_at",
    )

    @property
    def role(self) -> Role:
        return Role.from_rank(self.role_rank)

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, email={self.email}, level={self.level.value})>"


class Department(Base):
    __tablename__ = "departments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    memberships: Mapped[list[UserDepartment]] = relationship(
        back_populates="department",
        cascade="all,delete-orphan",
    )


class UserDepartment(Base):
    """Membership of a user in a department, carrying the per-department role."""

    __tablename__ = "user_departments"
    __table_args__ = (
        UniqueConstraint("user_id", "department_id", name="uq_user_department"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    department_id: Mapped[int] = mapped_column(
        ForeignKey("departments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[Role] = mapped_column(
        Enum(Role, name="user_department_role", values_callable=_enum_values),
        default=Role.DEVELOPER,
        nullable=False,
    )

    user: Mapped[UserModel] = relationship(back_populates="memberships")
    department: Mapped[Department] = relationship(back_populates="memberships")


class Specialization(Base):
    __tablename__ = "specializations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)

    competencies: Mapped[list[Competence]] = relationship(back_populates="specialization")


class Competence(Base):
    __tablename__ = "competencies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    specialization_id: Mapped[int] = mapped_column(
        ForeignKey("specializations.id", ondelete="RESTRICT"), nullable=False
    )

    specialization: Mapped[Specialization] = relationship(back_populates="competencies")


class UserCompetence(Base):
    """A competence held by a user; updated_at is the last assessment time."""

    __tablename__ = "user_competencies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    competence_id: Mapped[int] = mapped_column(
        ForeignKey("competencies.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        index=True,
    )

    user: Mapped[UserModel] = relationship(back_populates="competencies")
    competence: Mapped[Competence] = relationship()


class UserUnavailability(Base):
    __tablename__ = "user_unavailability"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    starts_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ends_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    user: Mapped[UserModel] = relationship(back_populates="unavailability")


__all__ = [
    "Level",
    "Role",
    "UserModel",
    "Department",
    "UserDepartment",
    "Specialization",
    "Competence",
    "UserCompetence",
    "UserUnavailability",
]
