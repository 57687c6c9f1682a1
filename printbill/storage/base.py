from abc import ABC, abstractmethod


class StorageBackend(ABC):
    """Blob storage. Implementations raise ``UploadFailedError`` on transport errors."""

    @abstractmethod
    def save(self, key: str, data: bytes, content_type: str = "application/pdf") -> str:
        """Save data and return the storage key."""
        ...

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Retrieve file data by key."""
        ...

    @abstractmethod
    def get_url(self, key: str) -> str:
        """Return a URL any client can fetch the object from."""
        ...

    @abstractmethod
    def key_for_url(self, url: str) -> str | None:
        """Map a URL produced by ``get_url`` back to its key, or None if foreign."""
        ...
