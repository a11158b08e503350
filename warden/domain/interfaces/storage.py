from abc import ABC, abstractmethod


class IObjectStorage(ABC):
    """Object store holding user avatars."""

    @abstractmethod
    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        """Stores ``data`` under ``key`` and returns its public URL.

        Raises:
            FileUploadError: If the store rejects the object.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Removes ``key``; a missing object is not an error.

        Raises:
            FileUploadError: If the store fails.
        """
        raise NotImplementedError
