from __future__ import annotations

from dataclasses import dataclass

from salon.domain.entities.generated_image import GeneratedImage
from salon.domain.entities.pipeline_stage import PipelineStage
from salon.domain.entities.style_selection import StyleSelection
from salon.domain.entities.uploaded_asset import UploadStatus


@dataclass(frozen=True)
class SessionState:
    stage: PipelineStage = PipelineStage.awaiting_upload
    epoch: int = 0
    base_image: GeneratedImage | None = None
    styled_image: GeneratedImage | None = None
    selection: StyleSelection = StyleSelection()
    last_error: str | None = None


@dataclass(frozen=True)
class PendingTransform:
    """Ticket for one outstanding transformation, stamped with the session epoch."""

    epoch: int
    kind: str  # "base" | "restyle"
    instruction: str
    storage_ids: tuple[str, ...]


@dataclass(frozen=True)
class AssetView:
    asset_id: str
    filename: str | None
    content_type: str
    status: UploadStatus
    storage_id: str | None


@dataclass(frozen=True)
class SessionSnapshot:
    session_id: str
    stage: PipelineStage
    epoch: int
    assets: tuple[AssetView, ...]
    base_image: GeneratedImage | None
    styled_image: GeneratedImage | None
    selection: StyleSelection
    last_error: str | None

    @property
    def displayed_image(self) -> GeneratedImage | None:
        return self.styled_image or self.base_image
