from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Iterable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from skillmap.core.auth import TokenError, create_access_token, decode_access_token
from skillmap.domain.services import UserService
from skillmap.infrastructure.db.models import Role, UserModel
from skillmap.infrastructure.db.session import get_session
from structlog.contextvars import bind_contextvars

bearer_scheme = HTTPBearer(auto_error=False)


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Provide an async SQLAlchemy session for API handlers."""
    async for session in get_session():
        yield session


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> UserModel:
    """Resolve the authenticated user, with departments and role, from a bearer token."""
    if credentials is None:
        raise _unauthorized("Missing bearer token")

    try:
        payload = decode_access_token(credentials.credentials)
    except TokenError as exc:
        raise _unauthorized(str(exc)) from exc

    user = await UserService(session).get_caller(payload["sub"])
    if user is None:
        raise _unauthorized("Unknown or blocked user")

    bind_contextvars(user_id=user.id)
    return user


def require_roles(
    required_roles: Iterable[Role | str],
) -> Callable[..., Awaitable[UserModel]]:
    """Dependency factory enforcing that the caller's role is one of the required roles."""
    required_roles = [role.value if isinstance(role, Role) else role for role in required_roles]
    allowed = {role.value for role in Role}

    invalid_roles = [role for role in required_roles if role not in allowed]
    if invalid_roles:
        joined_roles = ", ".join(invalid_roles)
        raise ValueError(f"Unsupported role(s) requested: {joined_roles}")

    required = {Role(role) for role in required_roles}

    async def dependency(user: UserModel = Depends(get_current_user)) -> UserModel:  # noqa: B008
        if user.role not in required:
            raise _forbidden("Insufficient role privileges")
        return user

    return dependency


def issue_smoke_token(user_id: str, *, email: str | None = None) -> str:
    """Generate a signed token for manual smoke testing."""
    return create_access_token(user_id, email=email)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
