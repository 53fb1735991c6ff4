"""API Dependencies"""

from typing import Optional
from fastapi import Cookie, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from study_portal.config import settings
from study_portal.core.exceptions import ForbiddenError, UnauthorizedError
from study_portal.database import get_db, get_session_factory
from study_portal.models.user import User
from study_portal.policy import access
from study_portal.services.identity_service import resolve_user

__all__ = [
    "get_db",
    "get_session_factory",
    "get_optional_user",
    "get_current_user",
    "require_teacher",
    "require_student",
]


async def get_optional_user(
    db: AsyncSession = Depends(get_db),
    auth_token: Optional[str] = Cookie(None, alias=settings.AUTH_COOKIE_NAME, include_in_schema=False),
) -> Optional[User]:
    """
    Resolve the user from the auth cookie.

    Returns:
        The active user, or None for any missing, invalid or expired credential
    """
    return await resolve_user(db, auth_token)


async def get_current_user(
    user: Optional[User] = Depends(get_optional_user),
) -> User:
    """
    Require an authenticated user.

    Raises:
        UnauthorizedError: If no active user could be resolved
    """
    if user is None:
        raise UnauthorizedError()
    return user


async def require_teacher(
    current_user: User = Depends(get_current_user),
) -> User:
    """Require the TEACHER role (403 otherwise)."""
    if not access.is_teacher(current_user):
        raise ForbiddenError("Teacher access required")
    return current_user


async def require_student(
    current_user: User = Depends(get_current_user),
) -> User:
    """Require the STUDENT role (403 otherwise)."""
    if not access.is_student(current_user):
        raise ForbiddenError("Student access required")
    return current_user
