from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from uuid import uuid4


class UploadStatus(str, Enum):
    pending = "pending"
    uploading = "uploading"
    stored = "stored"
    failed = "failed"


@dataclass
class UploadedAsset:
    """
    One user-submitted image in flight.

    Status moves pending -> uploading -> stored | failed and only through the
    mark_* methods, so storage_id is set exactly when the asset is stored.
    Once stored the raw bytes are released; the blob store holds the copy.
    """

    data: bytes
    content_type: str
    epoch: int
    filename: str | None = None
    asset_id: str = field(default_factory=lambda: uuid4().hex[:12])
    status: UploadStatus = UploadStatus.pending
    storage_id: str | None = None

    def mark_uploading(self) -> None:
        if self.status is not UploadStatus.pending:
            raise ValueError(f"Asset {self.asset_id} cannot start uploading from {self.status.value}.")
        self.status = UploadStatus.uploading

    def mark_stored(self, storage_id: str) -> None:
        if self.status is not UploadStatus.uploading:
            raise ValueError(f"Asset {self.asset_id} cannot be stored from {self.status.value}.")
        if not storage_id:
            raise ValueError("storage_id is required to mark an asset stored.")
        self.storage_id = storage_id
        self.data = b""
        self.status = UploadStatus.stored

    def mark_failed(self) -> None:
        if self.status is UploadStatus.stored:
            raise ValueError(f"Asset {self.asset_id} is already stored.")
        self.storage_id = None
        self.status = UploadStatus.failed

    @property
    def is_stored(self) -> bool:
        return self.status is UploadStatus.stored
