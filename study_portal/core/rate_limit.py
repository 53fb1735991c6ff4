"""Rate Limiter (slowapi)"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from study_portal.config import settings

# Applied to every route through SlowAPIMiddleware in main.py
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.RATE_LIMIT_PER_MINUTE}/minute"],
    enabled=settings.RATE_LIMIT_ENABLED,
)
