from .cache import ICache
from .clock import IClock
from .error_tracking import IErrorTracker
from .mail import IMailTransport
from .repositories import IUserRepository
from .storage import IObjectStorage

__all__ = [
    "ICache",
    "IClock",
    "IErrorTracker",
    "IMailTransport",
    "IObjectStorage",
    "IUserRepository",
]
