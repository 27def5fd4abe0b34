"""Department visibility rules for directory callers."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from skillmap.infrastructure.db.models import Role

PRIVILEGED_ROLES: frozenset[Role] = frozenset(
    {Role.ADMIN, Role.TECH_LEAD, Role.HEAD_OF_DEPARTMENT}
)
DIRECTORY_ROLES: frozenset[Role] = PRIVILEGED_ROLES | {Role.MANAGER}


class _Named(Protocol):
    name: str


class DirectoryMember(Protocol):
    @property
    def role(self) -> Role: ...

    @property
    def departments(self) -> Iterable[_Named]: ...


def department_names(member: DirectoryMember) -> list[str]:
    return [department.name for department in member.departments]


def visible_departments(caller: DirectoryMember) -> list[str] | None:
    """Departments a caller's listings are limited to, or None for no limit.

    Managers only ever see their own departments, whatever the request asked for.
    """
    if caller.role is Role.MANAGER:
        return department_names(caller)
    return None


def is_forbidden_department(caller: DirectoryMember, target: DirectoryMember | None) -> bool:
    """True when a manager asks for a user outside all of their departments."""
    if caller.role is not Role.MANAGER:
        return False
    if target is None:
        return True
    own = set(department_names(caller))
    return not any(name in own for name in department_names(target))
