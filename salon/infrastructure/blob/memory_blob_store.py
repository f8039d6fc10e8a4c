from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from uuid import uuid4

from salon.application.exceptions import StorageError
from salon.application.ports.blob_store import BlobStorePort, UploadSlot


@dataclass(frozen=True)
class StoredBlob:
    data: bytes
    content_type: str


class MemoryBlobStore(BlobStorePort):
    """In-process blob store. Ids are img_1, img_2, ... and URLs are <base_url>/<id>."""

    def __init__(self, base_url: str = "https://store") -> None:
        self._base_url = base_url.rstrip("/")
        self._blobs: dict[str, StoredBlob] = {}
        self._open_slots: set[str] = set()
        self._counter = 0
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def create_upload_slot(self) -> UploadSlot:
        token = uuid4().hex
        with self._lock:
            self._open_slots.add(token)
        return UploadSlot(url=f"{self._base_url}/upload/{token}", token=token)

    def upload(self, slot: UploadSlot, data: bytes, content_type: str) -> str:
        with self._lock:
            if slot.token not in self._open_slots:
                raise StorageError("Upload slot is unknown or already used.")
            self._open_slots.discard(slot.token)
        return self._put(data, content_type)

    def resolve(self, storage_id: str) -> str | None:
        with self._lock:
            if storage_id not in self._blobs:
                return None
        return f"{self._base_url}/{storage_id}"

    def store(self, data: bytes, content_type: str) -> str:
        return self.upload(self.create_upload_slot(), data, content_type)

    def read(self, storage_id: str) -> StoredBlob | None:
        with self._lock:
            return self._blobs.get(storage_id)

    def _put(self, data: bytes, content_type: str) -> str:
        if not data:
            raise StorageError("Refusing to store an empty payload.")
        with self._lock:
            self._counter += 1
            storage_id = f"img_{self._counter}"
            self._blobs[storage_id] = StoredBlob(data=bytes(data), content_type=content_type or "application/octet-stream")
        self._logger.info("Blob stored", extra={"storage_id": storage_id})
        return storage_id
