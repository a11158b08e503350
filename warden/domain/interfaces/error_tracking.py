from abc import ABC, abstractmethod


class IErrorTracker(ABC):
    """Out-of-band error sink. Reporting never alters control flow."""

    @abstractmethod
    def capture_exception(self, exc: BaseException, **context) -> None:
        raise NotImplementedError
