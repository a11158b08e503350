"""Application initialization: environment, logging and error tracking."""

from dotenv import load_dotenv

from warden.core.config.settings import settings
from warden.core.logging import configure_logging
from warden.infrastructure.services.error_tracking.sentry_tracker import init_sentry


def initialize_application() -> None:
    """Load ``.env`` into the process, configure logging, start Sentry if configured."""
    load_dotenv(override=False)
    configure_logging(log_level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
    init_sentry()
