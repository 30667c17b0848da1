"""
Rate Limiting
One slowapi limiter per application, configured from that app's settings
"""
from fastapi import HTTPException, Request, status
from limits import parse
from loguru import logger
from slowapi import Limiter
from slowapi.util import get_remote_address

from core.config import Settings


def build_limiter(config: Settings) -> Limiter:
    """Limiter owned by one app; counters live in its own in-memory storage"""
    return Limiter(key_func=get_remote_address, enabled=config.RATE_LIMIT_ENABLED)


async def enforce_auth_rate_limit(request: Request) -> None:
    """Throttle sign-up and login per client address"""
    limiter: Limiter = request.app.state.limiter
    if not limiter.enabled:
        return

    client = get_remote_address(request)
    limit = parse(request.app.state.settings.AUTH_RATE_LIMIT)
    if not limiter.limiter.hit(limit, "auth", client):
        logger.warning(f"Auth rate limit exceeded for {client}")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limit exceeded. Please try again later.",
        )
