"""Composable query scopes for the user directory.

Each scope is a plain function returning a SQLAlchemy clause, loader option or
ordering; services combine them into one ``select(UserModel)`` per read.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import ColumnElement, Select, and_, case, func, or_, select
from sqlalchemy.orm import selectinload, with_expression
from skillmap.domain.models import UserQuery
from skillmap.infrastructure.db.models import (
    Competence,
    Department,
    Level,
    Role,
    UserCompetence,
    UserDepartment,
    UserModel,
)

Window = tuple[datetime, datetime]


def level_order() -> ColumnElement[int]:
    return case({level: level.rank for level in Level}, value=UserModel.level)


def role_rank() -> ColumnElement[int]:
    rank = case({role: role.rank for role in Role}, value=UserDepartment.role)
    return (
        select(func.min(rank))
        .where(UserDepartment.user_id == UserModel.id)
        .correlate(UserModel)
        .scalar_subquery()
    )


def last_datetime_pass() -> ColumnElement[datetime]:
    return (
        select(func.max(UserCompetence.updated_at))
        .where(UserCompetence.user_id == UserModel.id)
        .correlate(UserModel)
        .scalar_subquery()
    )


def _assessed_within(window: Window | None) -> list[ColumnElement[bool]]:
    if window is None:
        return []
    start, end = window
    return [UserCompetence.updated_at >= start, UserCompetence.updated_at < end]


def competencies_count(window: Window | None = None) -> ColumnElement[int]:
    return (
        select(func.count(UserCompetence.id))
        .where(UserCompetence.user_id == UserModel.id, *_assessed_within(window))
        .correlate(UserModel)
        .scalar_subquery()
    )


def department_sort_key(departments: Sequence[str] | None = None) -> ColumnElement[str]:
    """First department name (alphabetically) a user holds among ``departments``."""
    stmt = (
        select(func.min(Department.name))
        .join(UserDepartment, UserDepartment.department_id == Department.id)
        .where(UserDepartment.user_id == UserModel.id)
    )
    if departments is not None:
        stmt = stmt.where(Department.name.in_(departments))
    return stmt.correlate(UserModel).scalar_subquery()


# --- where clauses ---


def active() -> ColumnElement[bool]:
    return UserModel.blocked.is_(False)


def matches_search(search: str) -> ColumnElement[bool]:
    return or_(
        UserModel.first_name.icontains(search, autoescape=True),
        UserModel.last_name.icontains(search, autoescape=True),
    )


def in_departments(names: Sequence[str]) -> ColumnElement[bool]:
    return UserModel.memberships.any(UserDepartment.department.has(Department.name.in_(names)))


def holds_role(*roles: Role) -> ColumnElement[bool]:
    return UserModel.memberships.any(UserDepartment.role.in_(roles))


def holds_role_in(names: Sequence[str], *roles: Role) -> ColumnElement[bool]:
    """One membership carrying one of ``roles`` inside one of ``names``."""
    return UserModel.memberships.any(
        and_(
            UserDepartment.role.in_(roles),
            UserDepartment.department.has(Department.name.in_(names)),
        )
    )


def assessed_between(window: Window | None) -> ColumnElement[bool]:
    return UserModel.competencies.any(*_assessed_within(window))


def user_conditions(query: UserQuery) -> list[ColumnElement[bool]]:
    conditions: list[ColumnElement[bool]] = []
    if query.search is not None:
        conditions.append(matches_search(query.search))
    if query.departments is not None and query.role is not None:
        conditions.append(holds_role_in(query.departments, query.role))
    elif query.departments is not None:
        conditions.append(in_departments(query.departments))
    elif query.role is not None:
        conditions.append(holds_role(query.role))
    if query.updated_between is not None:
        conditions.append(assessed_between(query.updated_between))
    return conditions


# --- ordering ---


def directory_order(departments: Sequence[str] | None = None) -> tuple[Any, ...]:
    return (
        department_sort_key(departments).asc().nulls_last(),
        level_order(),
        UserModel.last_name.asc(),
        UserModel.first_name.asc(),
        UserModel.id,
    )


def statistic_order(departments: Sequence[str] | None = None) -> tuple[Any, ...]:
    return (
        level_order(),
        UserModel.last_name.asc(),
        UserModel.first_name.asc(),
        department_sort_key(departments).asc().nulls_last(),
        UserModel.id,
    )


# --- loaders ---


def with_competencies_count(window: Window | None = None) -> Any:
    return with_expression(UserModel.competencies_count, competencies_count(window))


def with_competence_detail(window: Window | None = None) -> Any:
    relation = UserModel.competencies
    if window is not None:
        relation = UserModel.competencies.and_(*_assessed_within(window))
    return (
        selectinload(relation)
        .selectinload(UserCompetence.competence)
        .selectinload(Competence.specialization)
    )


def directory_select(
    *options: Any, departments: Sequence[str] | None = None
) -> Select[tuple[UserModel]]:
    """Base user read: role, last pass and departments always resolved.

    With ``departments`` set, only those departments are loaded onto each user.
    """
    department_relation = UserModel.departments
    if departments is not None:
        department_relation = UserModel.departments.and_(Department.name.in_(departments))
    return (
        select(UserModel)
        .options(
            with_expression(UserModel.role_rank, role_rank()),
            with_expression(UserModel.last_datetime_pass, last_datetime_pass()),
            selectinload(department_relation),
            *options,
        )
        .execution_options(populate_existing=True)
    )
