"""Route-level rate limiting for endpoints that send email."""

from fastapi import Request, Response

from warden.core.dependencies.services import ContainerDep
from warden.core.exceptions import RateLimitExceededError
from warden.core.rate_limiting.ratelimiter import client_identifier


async def mail_rate_limit(request: Request, response: Response, container: ContainerDep) -> None:
    """Applies the stricter ``mail`` limiter.

    Raises:
        RateLimitExceededError: When the caller has used up the window.
    """
    if not container.settings.RATE_LIMIT_ENABLED:
        return
    result = await container.mail_limiter.check(client_identifier(request))
    if not result.allowed:
        raise RateLimitExceededError(retry_after=result.reset_after, limit=result.limit)
    response.headers.update(result.headers())
