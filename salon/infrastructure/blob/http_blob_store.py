from __future__ import annotations

import logging

import httpx

from salon.application.exceptions import StorageError
from salon.application.ports.blob_store import BlobStorePort, UploadSlot


class HttpBlobStore(BlobStorePort):
    """
    Client for a remote storage service.

    Endpoints:
    - POST /upload-urls            -> {"uploadUrl": "...", "token": "..."}
    - POST <uploadUrl> (raw bytes) -> {"storageId": "..."}
    - GET  /files/{id}/url         -> {"url": "..."} or 404

    Upload URLs are pre-authorized and may live on another host, so the raw
    bytes go out without the service credentials.
    """

    def __init__(self, base_url: str, api_key: str | None = None, timeout: float = 30.0) -> None:
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._client = httpx.Client(base_url=base_url.rstrip("/"), headers=headers, timeout=timeout)
        self._upload_client = httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def create_upload_slot(self) -> UploadSlot:
        data = self._request_json(self._client, "POST", "/upload-urls")
        upload_url = data.get("uploadUrl")
        if not upload_url:
            raise StorageError("Storage service did not return an upload URL.")
        return UploadSlot(url=str(upload_url), token=str(data.get("token") or upload_url))

    def upload(self, slot: UploadSlot, data: bytes, content_type: str) -> str:
        if not data:
            raise StorageError("Refusing to upload an empty payload.")
        result = self._request_json(
            self._upload_client,
            "POST",
            str(self._client.base_url.join(slot.url)),
            content=data,
            headers={"Content-Type": content_type or "application/octet-stream"},
        )
        storage_id = result.get("storageId")
        if not storage_id:
            raise StorageError("Storage service did not return a storage id.")
        return str(storage_id)

    def resolve(self, storage_id: str) -> str | None:
        try:
            resp = self._client.get(f"/files/{storage_id}/url")
        except httpx.HTTPError as e:
            raise StorageError(f"Storage lookup failed: {e}") from e
        if resp.status_code == 404:
            return None
        if resp.status_code >= 400:
            raise StorageError(f"Storage lookup returned HTTP {resp.status_code}")
        url = self._parse_json(resp).get("url")
        return str(url) if url else None

    def store(self, data: bytes, content_type: str) -> str:
        return self.upload(self.create_upload_slot(), data, content_type)

    def close(self) -> None:
        self._client.close()
        self._upload_client.close()

    def _request_json(self, client: httpx.Client, method: str, url: str, **kwargs) -> dict:
        try:
            resp = client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise StorageError(f"Storage request failed: {e}") from e

        if resp.status_code >= 400:
            self._logger.error(
                "Storage request failed",
                extra={"reason": f"{method} {url} status={resp.status_code}"},
            )
            raise StorageError(f"Storage request returned HTTP {resp.status_code}")
        return self._parse_json(resp)

    @staticmethod
    def _parse_json(resp: httpx.Response) -> dict:
        try:
            data = resp.json()
        except ValueError as e:
            raise StorageError("Storage service returned invalid JSON.") from e
        if not isinstance(data, dict):
            raise StorageError("Storage service returned an unexpected payload.")
        return data
