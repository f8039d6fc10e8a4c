from __future__ import annotations

import logging
from typing import Sequence

from salon.application.exceptions import GenerationError
from salon.application.ports.image_generator import ImageGeneratorPort, ProviderResult


class MockImageGenerator(ImageGeneratorPort):
    """Local stand-in for the provider: echoes the first source image back as the result."""

    def __init__(self, result_url: str | None = None) -> None:
        self._result_url = result_url
        self._logger = logging.getLogger(__name__)

    def invoke(self, instruction: str, source_image_urls: Sequence[str]) -> ProviderResult:
        url = self._result_url or (source_image_urls[0] if source_image_urls else None)
        if not url:
            raise GenerationError("Mock generator needs a source image or MOCK_RESULT_URL.")
        self._logger.info(
            "Mock generation", extra={"reason": f"images={len(source_image_urls)} chars={len(instruction)}"}
        )
        return ProviderResult(url=url, model="mock")
