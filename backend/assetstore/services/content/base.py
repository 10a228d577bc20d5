"""Content store interface: write and read raw asset bytes by id. Implementations: local (dev disk) or S3."""
from abc import ABC, abstractmethod
from typing import BinaryIO


class ContentStore(ABC):
    """Abstract blob storage for asset content, addressed by asset id."""

    @abstractmethod
    def write(self, asset_id: str, stream: BinaryIO) -> int:
        """Consume and close stream, upsert it under asset_id, return the byte length the backend reports after the write."""
        ...

    @abstractmethod
    def read(self, asset_id: str) -> BinaryIO:
        """Return a lazily-read stream for asset_id. Raise ContentNotFoundError if missing. Caller closes it."""
        ...
