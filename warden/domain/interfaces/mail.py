from abc import ABC, abstractmethod
from typing import Sequence


class IMailTransport(ABC):
    """Outbound email delivery (SMTP in production)."""

    @abstractmethod
    async def send(self, to: Sequence[str], subject: str, html_body: str) -> None:
        """Delivers one HTML message. Raises on transport failure."""
        raise NotImplementedError
