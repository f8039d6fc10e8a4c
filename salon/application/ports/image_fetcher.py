from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class FetchedImage:
    data: bytes
    content_type: str


class ImageFetcherPort(ABC):
    @abstractmethod
    def fetch(self, url: str) -> FetchedImage:
        """Download the bytes behind a URL. Raises ResultFetchError on any failure."""
        raise NotImplementedError
