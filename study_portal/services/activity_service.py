"""Activity (audit) log writes"""

from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from study_portal.models.activity import ActivityLog
from study_portal.models.enums import ActivityAction


async def record(
    db: AsyncSession,
    user_id: UUID,
    action: ActivityAction,
    resource: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    *,
    commit: bool = True,
) -> ActivityLog:
    """Append an activity entry. With commit=False the caller owns the transaction."""
    entry = ActivityLog(
        user_id=user_id,
        action=action.value,
        resource=resource,
        details=details,
    )
    db.add(entry)
    if commit:
        await db.commit()
    return entry
