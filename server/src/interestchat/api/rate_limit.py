"""Rate limiting for HTTP API endpoints.

Uses SlowAPI to keep polling clients from hammering the stats endpoint.
"""

from collections.abc import Callable

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.util import get_remote_address

from interestchat.settings import get_settings

# Create the limiter instance using IP address as the key
limiter = Limiter(key_func=get_remote_address)


def create_rate_limit_dependency(limit_string: str, name: str) -> Callable:
    """Create a rate limit dependency for use with FastAPI routers.

    Args:
        limit_string: Rate limit in format "requests/period" (e.g., "30/minute")
        name: Unique name for this rate limit (used by SlowAPI for tracking)

    Returns:
        An async dependency function that applies rate limiting
    """
    # SlowAPI tracks limits by function identity, so decorate once here
    @limiter.limit(limit_string)
    async def _check_limit(request: Request, response: Response) -> None:
        pass

    _check_limit.__name__ = f"_check_limit_{name}"

    async def rate_limit_dependency(request: Request, response: Response) -> None:
        """Apply rate limiting to this request."""
        if not get_settings().rate_limiting_enabled:
            return

        await _check_limit(request, response)

    return rate_limit_dependency


stats_rate_limit = create_rate_limit_dependency(get_settings().stats_rate_limit, "stats")
