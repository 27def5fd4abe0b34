from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from skillmap.infrastructure.db.models import Role, UserModel


@dataclass(frozen=True, slots=True)
class UserQuery:
    """Normalized filter for directory listings. ``None`` fields are not applied."""

    search: str | None = None
    departments: tuple[str, ...] | None = None
    role: Role | None = None
    updated_between: tuple[datetime, datetime] | None = None


@dataclass(frozen=True, slots=True)
class StatisticQuery:
    """Filter for the developer statistics listing."""

    updated_between: tuple[datetime, datetime] | None = None
    departments: tuple[str, ...] | None = None


@dataclass(slots=True)
class DepartmentGroup:
    """Users of one department, in directory order."""

    name: str
    users: list[UserModel] = field(default_factory=list)
