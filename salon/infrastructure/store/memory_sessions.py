from __future__ import annotations

import threading
from typing import Callable
from uuid import uuid4

from salon.application.exceptions import SessionNotFound
from salon.application.ports.session_store import SessionStorePort
from salon.application.use_cases.session_pipeline import SessionPipeline


class MemorySessionStore(SessionStorePort):
    def __init__(self, pipeline_factory: Callable[[str], SessionPipeline]) -> None:
        self._pipeline_factory = pipeline_factory
        self._sessions: dict[str, SessionPipeline] = {}
        self._lock = threading.Lock()

    def create(self) -> str:
        session_id = uuid4().hex
        pipeline = self._pipeline_factory(session_id)
        with self._lock:
            self._sessions[session_id] = pipeline
        return session_id

    def get(self, session_id: str) -> SessionPipeline:
        with self._lock:
            pipeline = self._sessions.get(session_id)
        if pipeline is None:
            raise SessionNotFound(session_id)
        return pipeline

    def discard(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)
