from abc import ABC, abstractmethod
from datetime import datetime


class IClock(ABC):
    """Source of the current instant (timezone-aware, UTC)."""

    @abstractmethod
    def now(self) -> datetime:
        raise NotImplementedError
