from __future__ import annotations

import logging

from salon.application.exceptions import StorageError
from salon.application.ports.blob_store import BlobStorePort
from salon.domain.entities.uploaded_asset import UploadedAsset


class UploadAssetUseCase:
    def __init__(self, blob_store: BlobStorePort) -> None:
        self._blob_store = blob_store
        self._logger = logging.getLogger(__name__)

    def execute(self, asset: UploadedAsset) -> str:
        """Upload an asset's bytes through a fresh slot. Updates the asset status in place."""
        asset.mark_uploading()
        try:
            slot = self._blob_store.create_upload_slot()
            storage_id = self._blob_store.upload(slot, asset.data, asset.content_type)
        except StorageError as e:
            asset.mark_failed()
            self._logger.error(
                "Asset upload failed",
                extra={"asset_id": asset.asset_id, "reason": str(e)},
            )
            raise

        asset.mark_stored(storage_id)
        self._logger.info(
            "Asset stored",
            extra={"asset_id": asset.asset_id, "storage_id": storage_id},
        )
        return storage_id
