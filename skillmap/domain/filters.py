from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from skillmap.domain.models import StatisticQuery, UserQuery
from skillmap.domain.periods import Period, resolve_period
from skillmap.infrastructure.db.models import Role


def _unique(names: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(name for name in names if name))


def build_user_query(
    *,
    search: str | None = None,
    departments: Iterable[str] | None = None,
    role: Role | str | None = None,
    period: Period | str | None = None,
    restriction: Iterable[str] | None = None,
    now: datetime | None = None,
) -> UserQuery:
    """Normalize listing parameters.

    A caller restriction replaces the requested departments outright.
    """
    search = search.strip() if search else None
    if restriction is not None:
        departments = restriction

    return UserQuery(
        search=search or None,
        departments=_unique(departments) if departments is not None else None,
        role=Role(role) if role is not None else None,
        updated_between=resolve_period(period, now) if period is not None else None,
    )


def build_statistic_query(
    *,
    period: Period | str | None = None,
    restriction: Iterable[str] | None = None,
    now: datetime | None = None,
) -> StatisticQuery:
    return StatisticQuery(
        updated_between=resolve_period(period, now) if period is not None else None,
        departments=_unique(restriction) if restriction is not None else None,
    )
