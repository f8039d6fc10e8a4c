from __future__ import annotations

import logging
import threading
from dataclasses import replace
from functools import partial
from typing import Any, Callable

from salon.application.exceptions import InvalidStageError, RestyleInProgress, StorageError
from salon.application.use_cases.prompt_composer import SALON_CHAIR_INSTRUCTION, compose_style_instruction
from salon.application.use_cases.transform_image import TransformImageUseCase
from salon.application.use_cases.upload_asset import UploadAssetUseCase
from salon.domain.entities.generated_image import GeneratedImage
from salon.domain.entities.pipeline_stage import PipelineStage
from salon.domain.entities.session_state import AssetView, PendingTransform, SessionSnapshot, SessionState
from salon.domain.entities.style_selection import StyleSelection
from salon.domain.entities.uploaded_asset import UploadedAsset


Dispatcher = Callable[[Callable[[], Any]], Any]


def run_inline(job: Callable[[], Any]) -> Any:
    return job()


class SessionPipeline:
    """
    State machine for one user session.

    awaiting-upload -> transforming-base -> styling <-> restyling, plus reset
    from anywhere. At most one transformation is in flight; each one carries
    the epoch it was started in and its result is dropped if the session has
    been reset since. State changes happen under the lock, remote calls
    outside it.
    """

    def __init__(
        self,
        session_id: str,
        upload_asset: UploadAssetUseCase,
        transform_image: TransformImageUseCase,
        dispatch: Dispatcher | None = None,
    ) -> None:
        self._session_id = session_id
        self._upload_asset = upload_asset
        self._transform_image = transform_image
        self._dispatch = dispatch or run_inline
        self._lock = threading.Lock()
        self._state = SessionState()
        self._assets: list[UploadedAsset] = []
        self._logger = logging.getLogger(__name__)

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def state(self) -> SessionState:
        return self._state

    def submit_file(self, data: bytes, content_type: str, filename: str | None = None) -> UploadedAsset:
        with self._lock:
            asset = UploadedAsset(
                data=data,
                content_type=content_type or "application/octet-stream",
                epoch=self._state.epoch,
                filename=filename,
            )
            self._assets.append(asset)

        try:
            self._upload_asset.execute(asset)
        except StorageError:
            with self._lock:
                self._assets = [a for a in self._assets if a is not asset]
            raise

        with self._lock:
            pending = self._begin_base_transform(asset)
        if pending is not None:
            self._dispatch(partial(self.complete, pending))
        return asset

    def retry_base_transform(self) -> PendingTransform:
        with self._lock:
            if self._state.stage is not PipelineStage.awaiting_upload:
                raise InvalidStageError(f"Cannot retry the base transform while {self._state.stage.value}.")
            stored = [a for a in self._assets if a.is_stored]
            if not stored:
                raise InvalidStageError("No stored upload to transform.")
            pending = self._begin_base_transform(stored[-1])
        if pending is None:
            raise InvalidStageError("Base transform could not be started.")
        self._dispatch(partial(self.complete, pending))
        return pending

    def set_style_selection(self, **partial_selection: Any) -> StyleSelection:
        with self._lock:
            selection = self._state.selection.with_changes(**partial_selection)
            self._state = replace(self._state, selection=selection)
        return selection

    def trigger_restyle(self) -> PendingTransform:
        with self._lock:
            state = self._state
            if state.stage is PipelineStage.restyling:
                raise RestyleInProgress("A restyle is already in progress for this session.")
            if state.stage is not PipelineStage.styling or state.base_image is None:
                raise InvalidStageError(f"Cannot restyle while {state.stage.value}.")

            # Restyles always start from the salon-seated base image.
            pending = PendingTransform(
                epoch=state.epoch,
                kind="restyle",
                instruction=compose_style_instruction(state.selection),
                storage_ids=(state.base_image.storage_id,),
            )
            self._state = replace(state, stage=PipelineStage.restyling, last_error=None)
            self._log_transition("Restyle started")

        self._dispatch(partial(self.complete, pending))
        return pending

    def reset(self) -> None:
        with self._lock:
            epoch = self._state.epoch + 1
            self._state = SessionState(epoch=epoch)
            self._assets = []
            self._log_transition("Session reset")

    def complete(self, pending: PendingTransform) -> GeneratedImage | None:
        """
        Run the transformation for a ticket and apply its outcome.

        Returns the new image, or None when the ticket went stale. Errors are
        recorded on the session and re-raised.
        """
        try:
            image = self._transform_image.execute(pending.instruction, storage_ids=pending.storage_ids)
        except Exception as e:
            with self._lock:
                if self._is_stale(pending):
                    self._log_stale(pending, "failure")
                else:
                    fallback = (
                        PipelineStage.awaiting_upload if pending.kind == "base" else PipelineStage.styling
                    )
                    self._state = replace(self._state, stage=fallback, last_error=str(e))
                    self._logger.error(
                        "Transformation failed",
                        extra={
                            "session_id": self._session_id,
                            "epoch": pending.epoch,
                            "stage": fallback.value,
                            "reason": str(e),
                        },
                    )
            raise

        with self._lock:
            if self._is_stale(pending):
                self._log_stale(pending, "result")
                return None
            if pending.kind == "base":
                self._state = replace(
                    self._state,
                    stage=PipelineStage.styling,
                    base_image=image,
                    styled_image=None,
                    last_error=None,
                )
            else:
                self._state = replace(
                    self._state,
                    stage=PipelineStage.styling,
                    styled_image=image,
                    last_error=None,
                )
            self._log_transition(f"{pending.kind.capitalize()} transform applied")
        return image

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            state = self._state
            assets = tuple(
                AssetView(
                    asset_id=a.asset_id,
                    filename=a.filename,
                    content_type=a.content_type,
                    status=a.status,
                    storage_id=a.storage_id,
                )
                for a in self._assets
            )
        return SessionSnapshot(
            session_id=self._session_id,
            stage=state.stage,
            epoch=state.epoch,
            assets=assets,
            base_image=state.base_image,
            styled_image=state.styled_image,
            selection=state.selection,
            last_error=state.last_error,
        )

    def _begin_base_transform(self, asset: UploadedAsset) -> PendingTransform | None:
        # caller holds the lock
        state = self._state
        if asset.epoch != state.epoch:
            self._logger.warning(
                "Ignoring upload from a previous epoch",
                extra={"session_id": self._session_id, "epoch": asset.epoch, "asset_id": asset.asset_id},
            )
            return None
        if state.stage is not PipelineStage.awaiting_upload or asset.storage_id is None:
            return None

        pending = PendingTransform(
            epoch=state.epoch,
            kind="base",
            instruction=SALON_CHAIR_INSTRUCTION,
            storage_ids=(asset.storage_id,),
        )
        self._state = replace(state, stage=PipelineStage.transforming_base, last_error=None)
        self._log_transition("Base transform started")
        return pending

    def _is_stale(self, pending: PendingTransform) -> bool:
        return pending.epoch != self._state.epoch

    def _log_stale(self, pending: PendingTransform, what: str) -> None:
        self._logger.warning(
            "Discarding stale transformation %s",
            what,
            extra={"session_id": self._session_id, "epoch": pending.epoch, "reason": "stale_epoch"},
        )

    def _log_transition(self, message: str) -> None:
        self._logger.info(
            message,
            extra={
                "session_id": self._session_id,
                "epoch": self._state.epoch,
                "stage": self._state.stage.value,
            },
        )
