from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from salon.application.use_cases.session_pipeline import SessionPipeline


class SessionStorePort(ABC):
    @abstractmethod
    def create(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def get(self, session_id: str) -> "SessionPipeline":
        """Return the pipeline for a session. Raises SessionNotFound for unknown ids."""
        raise NotImplementedError

    @abstractmethod
    def discard(self, session_id: str) -> None:
        raise NotImplementedError
