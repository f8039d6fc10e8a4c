"""
Tests for upload asset lifecycle and the upload service.
"""

import pytest

from salon.application.exceptions import StorageError
from salon.application.use_cases.upload_asset import UploadAssetUseCase
from salon.domain.entities.uploaded_asset import UploadedAsset, UploadStatus


def _asset(data: bytes = b"selfie") -> UploadedAsset:
    return UploadedAsset(data=data, content_type="image/jpeg", epoch=0)


def test_upload_stores_asset_and_returns_id(blob_store):
    asset = _asset()

    storage_id = UploadAssetUseCase(blob_store=blob_store).execute(asset)

    assert storage_id == "img_1"
    assert asset.status is UploadStatus.stored
    assert asset.storage_id == "img_1"
    assert blob_store.read("img_1").data == b"selfie"


def test_stored_asset_releases_its_bytes(blob_store):
    """Sessions live until discarded, so stored uploads must not keep the photo in memory."""
    asset = _asset(b"x" * 1024)

    UploadAssetUseCase(blob_store=blob_store).execute(asset)

    assert asset.data == b""
    assert len(blob_store.read(asset.storage_id).data) == 1024


def test_failed_asset_keeps_its_bytes(blob_store):
    blob_store.failing_payloads.add(b"broken")
    asset = _asset(b"broken")

    with pytest.raises(StorageError):
        UploadAssetUseCase(blob_store=blob_store).execute(asset)

    assert asset.data == b"broken"


def test_storage_error_marks_asset_failed(blob_store):
    blob_store.failing_payloads.add(b"broken")
    asset = _asset(b"broken")

    with pytest.raises(StorageError, match="quota exceeded"):
        UploadAssetUseCase(blob_store=blob_store).execute(asset)

    assert asset.status is UploadStatus.failed
    assert asset.storage_id is None


def test_asset_cannot_be_uploaded_twice(blob_store):
    asset = _asset()
    use_case = UploadAssetUseCase(blob_store=blob_store)
    use_case.execute(asset)

    with pytest.raises(ValueError):
        use_case.execute(asset)
    assert asset.storage_id == "img_1"


def test_stored_requires_uploading_first():
    asset = _asset()

    with pytest.raises(ValueError):
        asset.mark_stored("img_9")
    assert asset.status is UploadStatus.pending


def test_stored_asset_cannot_fail():
    asset = _asset()
    asset.mark_uploading()
    asset.mark_stored("img_9")

    with pytest.raises(ValueError):
        asset.mark_failed()
    assert asset.is_stored
