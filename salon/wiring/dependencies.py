from concurrent.futures import Executor, Future, ThreadPoolExecutor
from functools import lru_cache
import logging
from typing import Any, Callable

from salon.application.ports.blob_store import BlobStorePort
from salon.application.ports.image_generator import ImageGeneratorPort
from salon.application.ports.session_store import SessionStorePort
from salon.application.use_cases.session_pipeline import Dispatcher, SessionPipeline
from salon.application.use_cases.transform_image import TransformImageUseCase
from salon.application.use_cases.upload_asset import UploadAssetUseCase
from salon.core.config import settings
from salon.infrastructure.blob.http_blob_store import HttpBlobStore
from salon.infrastructure.blob.memory_blob_store import MemoryBlobStore
from salon.infrastructure.generation.mock_generator import MockImageGenerator
from salon.infrastructure.generation.replicate_generator import ReplicateImageGenerator
from salon.infrastructure.http.image_fetcher import HttpImageFetcher
from salon.infrastructure.store.memory_sessions import MemorySessionStore


logger = logging.getLogger(__name__)


@lru_cache
def get_blob_store() -> BlobStorePort:
    if settings.BLOB_STORE_URL and settings.BLOB_STORE_URL.strip():
        logger.info("Using HttpBlobStore")
        return HttpBlobStore(base_url=settings.BLOB_STORE_URL, api_key=settings.BLOB_STORE_API_KEY)
    logger.info("Using MemoryBlobStore (BLOB_STORE_URL missing)")
    return MemoryBlobStore(base_url=f"{settings.PUBLIC_BASE_URL.rstrip('/')}/blobs")


@lru_cache
def get_generator() -> ImageGeneratorPort:
    if settings.REPLICATE_API_TOKEN and settings.REPLICATE_API_TOKEN.strip():
        return ReplicateImageGenerator()
    if settings.ENV.lower() in {"dev", "local"}:
        logger.info("Using MockImageGenerator (token missing, ENV=dev/local)")
        return MockImageGenerator(result_url=settings.MOCK_RESULT_URL)
    raise ValueError("REPLICATE_API_TOKEN is required outside dev/local.")


@lru_cache
def get_fetcher() -> HttpImageFetcher:
    return HttpImageFetcher(timeout=settings.RESULT_FETCH_TIMEOUT_SECONDS)


@lru_cache
def get_transform_image() -> TransformImageUseCase:
    return TransformImageUseCase(
        blob_store=get_blob_store(),
        generator=get_generator(),
        fetcher=get_fetcher(),
    )


@lru_cache
def get_executor() -> ThreadPoolExecutor:
    return ThreadPoolExecutor(max_workers=settings.TRANSFORM_WORKERS, thread_name_prefix="transform")


def _log_job_failure(future: Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error(
            "Background transformation failed",
            exc_info=exc,
            extra={"reason": f"{type(exc).__name__}: {exc}"},
        )


def pool_dispatcher(executor: Executor) -> Dispatcher:
    """Dispatch jobs to a pool. Nobody waits on the futures, so failures are logged here."""

    def dispatch(job: Callable[[], Any]) -> Future:
        future = executor.submit(job)
        future.add_done_callback(_log_job_failure)
        return future

    return dispatch


def build_pipeline(session_id: str) -> SessionPipeline:
    return SessionPipeline(
        session_id=session_id,
        upload_asset=UploadAssetUseCase(blob_store=get_blob_store()),
        transform_image=get_transform_image(),
        dispatch=pool_dispatcher(get_executor()),
    )


@lru_cache
def get_session_store() -> SessionStorePort:
    return MemorySessionStore(pipeline_factory=build_pipeline)
