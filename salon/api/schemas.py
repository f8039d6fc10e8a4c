from __future__ import annotations

from pydantic import BaseModel, Field

from salon.domain.entities.generated_image import GeneratedImage
from salon.domain.entities.pipeline_stage import PipelineStage
from salon.domain.entities.session_state import AssetView, PendingTransform, SessionSnapshot
from salon.domain.entities.style_selection import HairColor, HaircutStyle, LookStyle, StyleSelection
from salon.domain.entities.uploaded_asset import UploadStatus


class StyleOptionSchema(BaseModel):
    value: str
    label: str
    description: str
    tag: str | None = None


class StyleCatalogSchema(BaseModel):
    haircuts: list[StyleOptionSchema]
    colors: list[StyleOptionSchema]
    looks: list[StyleOptionSchema]


class StyleSelectionSchema(BaseModel):
    haircut: HaircutStyle
    color: HairColor
    look: LookStyle | None = None

    @staticmethod
    def from_entity(selection: StyleSelection) -> "StyleSelectionSchema":
        return StyleSelectionSchema(haircut=selection.haircut, color=selection.color, look=selection.look)


class StyleUpdateSchema(BaseModel):
    haircut: HaircutStyle | None = None
    color: HairColor | None = None
    look: LookStyle | None = None


class GeneratedImageSchema(BaseModel):
    url: str
    storage_id: str

    @staticmethod
    def from_entity(image: GeneratedImage | None) -> "GeneratedImageSchema | None":
        if image is None:
            return None
        return GeneratedImageSchema(url=image.url, storage_id=image.storage_id)


class AssetSchema(BaseModel):
    asset_id: str
    filename: str | None = None
    content_type: str
    status: UploadStatus
    storage_id: str | None = None

    @staticmethod
    def from_view(view: AssetView) -> "AssetSchema":
        return AssetSchema(
            asset_id=view.asset_id,
            filename=view.filename,
            content_type=view.content_type,
            status=view.status,
            storage_id=view.storage_id,
        )


class SessionSchema(BaseModel):
    session_id: str
    stage: PipelineStage
    epoch: int
    assets: list[AssetSchema] = Field(default_factory=list)
    base_image: GeneratedImageSchema | None = None
    styled_image: GeneratedImageSchema | None = None
    displayed_image: GeneratedImageSchema | None = None
    selection: StyleSelectionSchema
    last_error: str | None = None

    @staticmethod
    def from_snapshot(snapshot: SessionSnapshot) -> "SessionSchema":
        return SessionSchema(
            session_id=snapshot.session_id,
            stage=snapshot.stage,
            epoch=snapshot.epoch,
            assets=[AssetSchema.from_view(a) for a in snapshot.assets],
            base_image=GeneratedImageSchema.from_entity(snapshot.base_image),
            styled_image=GeneratedImageSchema.from_entity(snapshot.styled_image),
            displayed_image=GeneratedImageSchema.from_entity(snapshot.displayed_image),
            selection=StyleSelectionSchema.from_entity(snapshot.selection),
            last_error=snapshot.last_error,
        )


class CreateSessionResponseSchema(BaseModel):
    session_id: str


class PendingTransformSchema(BaseModel):
    epoch: int
    kind: str
    instruction: str
    storage_ids: list[str]

    @staticmethod
    def from_entity(pending: PendingTransform) -> "PendingTransformSchema":
        return PendingTransformSchema(
            epoch=pending.epoch,
            kind=pending.kind,
            instruction=pending.instruction,
            storage_ids=list(pending.storage_ids),
        )


class GenerateRequestSchema(BaseModel):
    instruction: str
    image_urls: list[str] = Field(default_factory=list)
    storage_ids: list[str] = Field(default_factory=list)
