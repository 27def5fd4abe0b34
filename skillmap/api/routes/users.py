from __future__ import annotations

from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from skillmap.api.deps import get_current_user, get_db_session, require_roles
from skillmap.api.schemas.users import (
    DepartmentUsers,
    UserItem,
    UsersByDepartmentsResponse,
    UserStatistic,
    UserUpdate,
    UserWithStatistic,
)
from skillmap.domain.filters import build_statistic_query, build_user_query
from skillmap.domain.models import UserQuery
from skillmap.domain.periods import Period
from skillmap.domain.policy import DIRECTORY_ROLES, is_forbidden_department, visible_departments
from skillmap.domain.services import UserConflictError, UserNotFoundError, UserService
from skillmap.infrastructure.db.models import Role, UserModel

router = APIRouter(prefix="/users", tags=["Users"])
logger = structlog.get_logger()

directory_access = require_roles(DIRECTORY_ROLES)


def _directory_query(
    caller: UserModel,
    search: str | None,
    departments: list[str] | None,
    role: Role | None,
    period: Period | None,
) -> UserQuery:
    return build_user_query(
        search=search,
        departments=departments,
        role=role,
        period=period,
        restriction=visible_departments(caller),
    )


@router.get("", response_model=list[UserItem], summary="Filtered user list")
async def list_users(
    search: str | None = Query(None, max_length=128),
    departments: list[str] | None = Query(None),  # noqa: B008
    role: Role | None = None,
    period: Period | None = None,
    session: AsyncSession = Depends(get_db_session),
    caller: UserModel = Depends(directory_access),
) -> list[UserItem]:
    """Non-blocked users matching the filters; managers only see their own departments."""
    query = _directory_query(caller, search, departments, role, period)
    users = await UserService(session).list_all(query)
    return [UserItem.model_validate(user) for user in users]


@router.get("/examiners", response_model=list[UserItem], summary="Privileged users")
async def list_examiners(
    session: AsyncSession = Depends(get_db_session),
    _: UserModel = Depends(require_roles([Role.ADMIN])),
) -> list[UserItem]:
    users = await UserService(session).list_examiners()
    return [UserItem.model_validate(user) for user in users]


@router.get("/me", response_model=UserItem, summary="Current user")
async def get_me(caller: UserModel = Depends(get_current_user)) -> UserItem:
    return UserItem.model_validate(caller)


@router.patch("/congratulated", response_model=UserItem, summary="Acknowledge level change")
async def congratulated(
    session: AsyncSession = Depends(get_db_session),
    caller: UserModel = Depends(require_roles([Role.DEVELOPER])),
) -> UserItem:
    user = await UserService(session).congratulate(caller)
    return UserItem.model_validate(user)


@router.get(
    "/by-departments",
    response_model=UsersByDepartmentsResponse,
    summary="Users grouped by department",
)
async def list_users_by_departments(
    search: str | None = Query(None, max_length=128),
    departments: list[str] | None = Query(None),  # noqa: B008
    role: Role | None = None,
    period: Period | None = None,
    session: AsyncSession = Depends(get_db_session),
    caller: UserModel = Depends(directory_access),
) -> UsersByDepartmentsResponse:
    query = _directory_query(caller, search, departments, role, period)
    groups = await UserService(session).list_by_departments(query)
    return UsersByDepartmentsResponse(
        departments=[
            DepartmentUsers(
                name=group.name,
                users=[UserItem.model_validate(user) for user in group.users],
            )
            for group in groups
        ]
    )


@router.get(
    "/statistic",
    response_model=list[UserWithStatistic],
    summary="Developers statistic for given period",
)
async def get_statistic_for_all_users(
    period: Period | None = None,
    session: AsyncSession = Depends(get_db_session),
    caller: UserModel = Depends(directory_access),
) -> list[UserWithStatistic]:
    query = build_statistic_query(period=period, restriction=visible_departments(caller))
    users = await UserService(session).list_with_statistics(query)
    return [UserWithStatistic.model_validate(user) for user in users]


@router.get("/{user_id}", response_model=UserItem, summary="User detail")
async def get_user(
    user_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    caller: UserModel = Depends(directory_access),
) -> UserItem:
    user = await UserService(session).get_by_id(str(user_id))
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if is_forbidden_department(caller, user):
        logger.warning("user_forbidden_department", caller_id=caller.id, target_id=user.id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden department")

    return UserItem.model_validate(user)


@router.patch("/{user_id}", response_model=UserItem, summary="Edit user (admin-only)")
async def update_user(
    user_id: UUID,
    payload: UserUpdate,
    session: AsyncSession = Depends(get_db_session),
    caller: UserModel = Depends(require_roles([Role.ADMIN])),
) -> UserItem:
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    try:
        user = await UserService(session).update_user(str(user_id), changes)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except UserConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    logger.info(
        "user_edited",
        admin_user=caller.id,
        user_id=user.id,
        updated_fields=sorted(changes),
    )
    return UserItem.model_validate(user)


@router.get("/{user_id}/statistic", response_model=UserStatistic, summary="User statistic")
async def get_statistic_for_user(
    user_id: str,
    session: AsyncSession = Depends(get_db_session),
    caller: UserModel = Depends(directory_access),
) -> UserStatistic:
    """Department visibility is checked before existence on this route."""
    user = await UserService(session).get_by_id_with_competencies(user_id)

    if is_forbidden_department(caller, user):
        logger.warning("user_forbidden_department", caller_id=caller.id, target_id=user_id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden department")
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    return UserStatistic.model_validate(user)
