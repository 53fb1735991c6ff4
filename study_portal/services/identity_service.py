"""Identity Resolver: auth cookie token -> active user, or None"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from study_portal.core.security import decode_token
from study_portal.models.user import User
from study_portal.services.user_service import UserService

logger = logging.getLogger(__name__)


async def resolve_user(db: AsyncSession, token: Optional[str]) -> Optional[User]:
    """
    Resolve the request's user from a signed access token.

    Every failure (no token, bad signature, expiry, wrong token type,
    malformed subject, unknown or inactive user) yields None; callers
    decide whether that means 401.
    """
    if not token:
        return None

    payload = decode_token(token)
    if not payload or payload.get("type") != "access":
        return None

    try:
        user_id = UUID(str(payload.get("sub")))
    except ValueError:
        return None

    user = await UserService.get_user_by_id(db, user_id)
    if user is None:
        return None
    if not user.is_active:
        logger.warning("Rejected token for inactive user", extra={"user_id": str(user.id)})
        return None
    return user
