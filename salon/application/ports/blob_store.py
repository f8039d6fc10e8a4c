from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class UploadSlot:
    url: str
    token: str


class BlobStorePort(ABC):
    @abstractmethod
    def create_upload_slot(self) -> UploadSlot:
        """Return a single-use write destination. Nothing is stored until bytes are uploaded."""
        raise NotImplementedError

    @abstractmethod
    def upload(self, slot: UploadSlot, data: bytes, content_type: str) -> str:
        """
        Write raw bytes to a slot obtained from create_upload_slot.

        Returns the storage id of the new blob. Raises StorageError when the
        write does not complete; a failed write is never visible.
        """
        raise NotImplementedError

    @abstractmethod
    def resolve(self, storage_id: str) -> str | None:
        """Return a fetchable URL for a stored blob, or None if the id is unknown."""
        raise NotImplementedError

    @abstractmethod
    def store(self, data: bytes, content_type: str) -> str:
        """Persist bytes and return a new storage id. Raises StorageError on failure."""
        raise NotImplementedError
