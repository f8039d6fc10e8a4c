from __future__ import annotations

import logging
from typing import Sequence

import replicate

from salon.application.exceptions import GenerationError
from salon.application.ports.image_generator import ImageGeneratorPort, ProviderResult
from salon.core.config import settings
from salon.infrastructure.generation.output import normalize_provider_output


class ReplicateImageGenerator(ImageGeneratorPort):
    """
    Replicate-backed adapter implementing ImageGeneratorPort.

    Contract guarantees:
    - invoke returns a ProviderResult with exactly one output URL
    - Raises:
        GenerationError: networking/provider failures (not retried)
        UnrecognizedProviderOutput: output shape could not be normalized
    """

    def __init__(self, api_token: str | None = None, model: str | None = None) -> None:
        self._model = model or settings.GENERATION_MODEL
        token = api_token or settings.REPLICATE_API_TOKEN
        if not token:
            raise ValueError("REPLICATE_API_TOKEN is required for the Replicate generator")
        self._client = replicate.Client(api_token=token)
        self._logger = logging.getLogger(__name__)

    def invoke(self, instruction: str, source_image_urls: Sequence[str]) -> ProviderResult:
        payload = {
            "prompt": instruction,
            "image_input": list(source_image_urls),
        }
        self._logger.info(
            "Starting generation",
            extra={"reason": f"model={self._model} images={len(payload['image_input'])}"},
        )

        try:
            output = self._client.run(self._model, input=payload)
        except Exception as e:
            raise GenerationError(f"Replicate API error: {e}") from e

        return ProviderResult(url=normalize_provider_output(output), model=self._model)
