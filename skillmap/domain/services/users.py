from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from skillmap.domain.levels import apply_user_changes, next_level
from skillmap.domain.models import DepartmentGroup, StatisticQuery, UserQuery
from skillmap.domain.policy import PRIVILEGED_ROLES
from skillmap.infrastructure.db.models import Level, Role, UserModel
from skillmap.infrastructure.repositories import users as scopes

logger = structlog.get_logger()


class UserServiceError(Exception):
    """Base exception for user directory errors."""


class UserNotFoundError(UserServiceError):
    """Raised when the requested user does not exist."""


class UserConflictError(UserServiceError):
    """Raised when an update collides with another user's unique fields."""


class UserService:
    """Reads and updates over the user directory."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, user_id: str) -> UserModel | None:
        stmt = scopes.directory_select().where(UserModel.id == user_id, scopes.active())
        return await self.session.scalar(stmt)

    async def get_caller(self, user_id: str) -> UserModel | None:
        """Load the authenticated user; blocked accounts resolve to None."""
        return await self.get_by_id(user_id)

    async def get_by_id_with_competencies(self, user_id: str) -> UserModel | None:
        # Blocked users stay visible here, unlike every other read.
        stmt = scopes.directory_select(scopes.with_competence_detail()).where(
            UserModel.id == user_id
        )
        return await self.session.scalar(stmt)

    async def list_all(self, query: UserQuery) -> list[UserModel]:
        stmt = (
            scopes.directory_select(departments=query.departments)
            .where(scopes.active(), *scopes.user_conditions(query))
            .order_by(*scopes.directory_order(query.departments))
        )
        users = list((await self.session.scalars(stmt)).all())
        logger.info(
            "users_listed",
            count=len(users),
            search=query.search,
            departments=list(query.departments) if query.departments is not None else None,
            role=query.role.value if query.role else None,
        )
        return users

    async def list_by_departments(self, query: UserQuery) -> list[DepartmentGroup]:
        allowed = set(query.departments) if query.departments is not None else None
        groups: dict[str, DepartmentGroup] = {}

        for user in await self.list_all(query):
            for department in user.departments:
                if allowed is not None and department.name not in allowed:
                    continue
                groups.setdefault(department.name, DepartmentGroup(department.name)).users.append(
                    user
                )

        ordered = [groups[name] for name in sorted(groups)]
        for group in ordered:
            group.users.sort(key=lambda u: (u.level.rank, u.last_name or "", u.first_name or ""))
        return ordered

    async def list_examiners(self) -> list[UserModel]:
        stmt = (
            scopes.directory_select()
            .where(scopes.active(), scopes.holds_role(*PRIVILEGED_ROLES))
            .order_by(UserModel.last_name, UserModel.first_name, UserModel.id)
        )
        return list((await self.session.scalars(stmt)).all())

    async def list_with_statistics(self, query: StatisticQuery) -> list[UserModel]:
        """Developers with at least one competence assessed inside the window."""
        window = query.updated_between
        stmt = scopes.directory_select(
            scopes.with_competencies_count(window),
            scopes.with_competence_detail(window),
            departments=query.departments,
        ).where(scopes.active(), scopes.assessed_between(window))
        if query.departments is not None:
            stmt = stmt.where(scopes.holds_role_in(query.departments, Role.DEVELOPER))
        else:
            stmt = stmt.where(scopes.holds_role(Role.DEVELOPER))
        stmt = stmt.order_by(*scopes.statistic_order(query.departments))
        return list((await self.session.scalars(stmt)).all())

    async def update_user(self, user_id: str, changes: Mapping[str, Any]) -> UserModel:
        user = await self.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(f"User '{user_id}' not found")

        apply_user_changes(user, changes)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            logger.warning("user_update_conflict", user_id=user_id, updated_fields=sorted(changes))
            raise UserConflictError("A user with this email already exists") from exc
        return await self._reload(user_id)

    async def level_up(self, user_id: str, current_level: Level | str) -> UserModel:
        user = await self.session.get(UserModel, user_id)
        if user is None:
            raise UserNotFoundError(f"User '{user_id}' not found")

        level = next_level(current_level)
        apply_user_changes(user, {"level": level})
        await self.session.commit()
        logger.info(
            "user_level_up",
            user_id=user_id,
            from_level=Level(current_level).value,
            to_level=level.value,
        )
        return await self._reload(user_id)

    async def congratulate(self, user: UserModel) -> UserModel:
        apply_user_changes(user, {"need_congratulate": False})
        await self.session.commit()
        logger.info("user_congratulated", user_id=user.id)
        return await self._reload(user.id)

    async def find_or_create(self, email: str) -> tuple[UserModel, bool]:
        """Find a user by exact email regardless of blocked state, creating one if missing."""
        email = email.strip()
        existing = await self.session.scalar(select(UserModel.id).where(UserModel.email == email))
        if existing is not None:
            return await self._reload(existing), False

        user = UserModel(email=email)
        try:
            self.session.add(user)
            await self.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent insert of the same email
            await self.session.rollback()
            winner = await self.session.scalar(
                select(UserModel.id).where(UserModel.email == email)
            )
            if winner is None:
                raise
            return await self._reload(winner), False

        logger.info("user_created", user_id=user.id, email=email)
        return await self._reload(user.id), True

    async def _reload(self, user_id: str) -> UserModel:
        stmt = scopes.directory_select().where(UserModel.id == user_id)
        user = await self.session.scalar(stmt)
        if user is None:
            raise UserNotFoundError(f"User '{user_id}' not found")
        return user
