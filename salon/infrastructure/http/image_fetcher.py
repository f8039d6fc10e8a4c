from __future__ import annotations

import logging

import httpx

from salon.application.exceptions import ResultFetchError
from salon.application.ports.image_fetcher import FetchedImage, ImageFetcherPort


class HttpImageFetcher(ImageFetcherPort):
    def __init__(self, timeout: float = 60.0) -> None:
        self._client = httpx.Client(timeout=timeout, follow_redirects=True)
        self._logger = logging.getLogger(__name__)

    def fetch(self, url: str) -> FetchedImage:
        try:
            resp = self._client.get(url)
        except httpx.HTTPError as e:
            raise ResultFetchError(f"Could not fetch result image: {e}") from e

        if resp.status_code >= 400:
            self._logger.error(
                "Result fetch failed",
                extra={"reason": f"status={resp.status_code}"},
            )
            raise ResultFetchError(f"Result image fetch returned HTTP {resp.status_code}")

        if not resp.content:
            raise ResultFetchError("Result image response was empty")

        content_type = resp.headers.get("content-type", "image/png").split(";", 1)[0].strip()
        return FetchedImage(data=resp.content, content_type=content_type or "image/png")

    def close(self) -> None:
        self._client.close()
