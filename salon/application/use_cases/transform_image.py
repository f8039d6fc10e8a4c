from __future__ import annotations

import logging
from typing import Sequence

from salon.application.ports.blob_store import BlobStorePort
from salon.application.ports.image_fetcher import ImageFetcherPort
from salon.application.ports.image_generator import ImageGeneratorPort
from salon.domain.entities.generated_image import GeneratedImage


class TransformImageUseCase:
    """
    One request/response cycle against the generation provider.

    Resolves the inputs, invokes the model, copies the short-lived result into
    the blob store and returns a GeneratedImage. Any failure propagates as a
    single error and nothing is stored unless every earlier step succeeded.
    """

    def __init__(
        self,
        blob_store: BlobStorePort,
        generator: ImageGeneratorPort,
        fetcher: ImageFetcherPort,
    ) -> None:
        self._blob_store = blob_store
        self._generator = generator
        self._fetcher = fetcher
        self._logger = logging.getLogger(__name__)

    def execute(
        self,
        instruction: str,
        urls: Sequence[str] = (),
        storage_ids: Sequence[str] = (),
    ) -> GeneratedImage:
        instruction = (instruction or "").strip()
        if not instruction:
            raise ValueError("Instruction must not be empty.")

        source_urls = list(urls) + self._resolve_storage_ids(storage_ids)

        result = self._generator.invoke(instruction, source_urls)
        self._logger.info(
            "Generation completed",
            extra={"reason": f"model={result.model} inputs={len(source_urls)}"},
        )

        fetched = self._fetcher.fetch(result.url)
        storage_id = self._blob_store.store(fetched.data, fetched.content_type)
        self._logger.info("Generated image persisted", extra={"storage_id": storage_id})

        return GeneratedImage(url=result.url, storage_id=storage_id)

    def _resolve_storage_ids(self, storage_ids: Sequence[str]) -> list[str]:
        resolved: list[str] = []
        for storage_id in storage_ids:
            url = self._blob_store.resolve(storage_id)
            if url is None:
                self._logger.warning(
                    "Skipping unresolvable input image",
                    extra={"storage_id": storage_id, "reason": "degraded_input"},
                )
                continue
            resolved.append(url)
        return resolved
