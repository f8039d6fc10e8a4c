from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class ProviderResult:
    url: str
    model: str


class ImageGeneratorPort(ABC):
    @abstractmethod
    def invoke(self, instruction: str, source_image_urls: Sequence[str]) -> ProviderResult:
        """
        Run one generation against the external model.

        Requirements:
        - source_image_urls may be empty, or hold one or many URLs, passed in order
        - Return a ProviderResult holding a single resolvable output URL
        - Raise GenerationError on provider failures (never retried here)
        - Raise UnrecognizedProviderOutput when the output shape is unknown
        """
        raise NotImplementedError
