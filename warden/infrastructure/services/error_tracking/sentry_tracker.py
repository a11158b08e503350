"""Error tracking backed by Sentry.

When ``SENTRY_DSN`` is empty the SDK is never initialised and
``capture_exception`` only logs; control flow is the same either way.
"""

import sentry_sdk
import structlog

from warden.core.config.settings import settings
from warden.domain.interfaces.error_tracking import IErrorTracker

logger = structlog.get_logger(__name__)


def init_sentry() -> bool:
    """Initialises the Sentry SDK when a DSN is configured. Returns whether it did."""
    if not settings.SENTRY_DSN:
        return False
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.APP_ENV,
        release=f"{settings.PROJECT_NAME}@{settings.VERSION}",
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        send_default_pii=False,
    )
    logger.info("Sentry initialised", environment=settings.APP_ENV)
    return True


class SentryErrorTracker(IErrorTracker):
    def capture_exception(self, exc: BaseException, **context) -> None:
        logger.error(
            "Captured exception",
            error_type=type(exc).__name__,
            error=str(exc),
            **context,
        )
        with sentry_sdk.new_scope() as scope:
            for key, value in context.items():
                scope.set_extra(key, value)
            scope.capture_exception(exc)
