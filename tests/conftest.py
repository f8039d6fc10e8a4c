"""
Shared fakes and fixtures for the salon pipeline tests.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence

import pytest

from salon.application.exceptions import ResultFetchError, StorageError
from salon.application.ports.blob_store import UploadSlot
from salon.application.ports.image_fetcher import FetchedImage, ImageFetcherPort
from salon.application.ports.image_generator import ImageGeneratorPort, ProviderResult
from salon.application.use_cases.session_pipeline import SessionPipeline
from salon.application.use_cases.transform_image import TransformImageUseCase
from salon.application.use_cases.upload_asset import UploadAssetUseCase
from salon.infrastructure.blob.memory_blob_store import MemoryBlobStore


class RecordingBlobStore(MemoryBlobStore):
    def __init__(self, failing_payloads: Sequence[bytes] = ()) -> None:
        super().__init__(base_url="https://store")
        self.failing_payloads = set(failing_payloads)
        self.resolve_calls: list[str] = []
        self.store_calls: list[bytes] = []

    def upload(self, slot: UploadSlot, data: bytes, content_type: str) -> str:
        if data in self.failing_payloads:
            raise StorageError("quota exceeded")
        return super().upload(slot, data, content_type)

    def resolve(self, storage_id: str) -> str | None:
        self.resolve_calls.append(storage_id)
        return super().resolve(storage_id)

    def store(self, data: bytes, content_type: str) -> str:
        self.store_calls.append(data)
        return super().store(data, content_type)


class FakeGenerator(ImageGeneratorPort):
    """Returns queued URLs (or raises queued exceptions) and records every call."""

    def __init__(self, outputs: Sequence[Any] = ()) -> None:
        self.outputs = list(outputs)
        self.calls: list[tuple[str, list[str]]] = []
        self.on_invoke: Callable[[], None] | None = None

    def invoke(self, instruction: str, source_image_urls: Sequence[str]) -> ProviderResult:
        self.calls.append((instruction, list(source_image_urls)))
        if self.on_invoke is not None:
            self.on_invoke()
        out = self.outputs.pop(0) if self.outputs else f"https://provider/out{len(self.calls)}"
        if isinstance(out, Exception):
            raise out
        return ProviderResult(url=out, model="fake")


class FakeFetcher(ImageFetcherPort):
    def __init__(self, failing_urls: Sequence[str] = ()) -> None:
        self.failing_urls = set(failing_urls)
        self.calls: list[str] = []

    def fetch(self, url: str) -> FetchedImage:
        self.calls.append(url)
        if url in self.failing_urls:
            raise ResultFetchError(f"HTTP 404 for {url}")
        return FetchedImage(data=f"bytes-of:{url}".encode(), content_type="image/png")


class DeferredDispatcher:
    """Collects dispatched jobs so a test decides when in-flight calls finish."""

    def __init__(self) -> None:
        self.jobs: list[Callable[[], Any]] = []

    def __call__(self, job: Callable[[], Any]) -> None:
        self.jobs.append(job)

    def run_next(self) -> Any:
        return self.jobs.pop(0)()


@pytest.fixture
def blob_store() -> RecordingBlobStore:
    return RecordingBlobStore()


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def transform(blob_store, generator, fetcher) -> TransformImageUseCase:
    return TransformImageUseCase(blob_store=blob_store, generator=generator, fetcher=fetcher)


@pytest.fixture
def make_pipeline(blob_store, transform):
    def _make(dispatch=None, session_id: str = "session_1") -> SessionPipeline:
        return SessionPipeline(
            session_id=session_id,
            upload_asset=UploadAssetUseCase(blob_store=blob_store),
            transform_image=transform,
            dispatch=dispatch,
        )

    return _make
