from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import RedirectResponse

from salon.api.schemas import (
    AssetSchema,
    CreateSessionResponseSchema,
    GenerateRequestSchema,
    GeneratedImageSchema,
    PendingTransformSchema,
    SessionSchema,
    StyleCatalogSchema,
    StyleOptionSchema,
    StyleSelectionSchema,
    StyleUpdateSchema,
)
from salon.application.exceptions import (
    GenerationError,
    InvalidStageError,
    ResultFetchError,
    SessionNotFound,
    StorageError,
)
from salon.application.ports.blob_store import BlobStorePort
from salon.application.ports.session_store import SessionStorePort
from salon.application.use_cases.session_pipeline import SessionPipeline
from salon.application.use_cases.transform_image import TransformImageUseCase
from salon.domain.entities.session_state import AssetView
from salon.domain.entities.style_selection import COLOR_OPTIONS, HAIRCUT_OPTIONS, LOOK_OPTIONS
from salon.infrastructure.blob.memory_blob_store import MemoryBlobStore
from salon.wiring.dependencies import get_blob_store, get_session_store, get_transform_image


router = APIRouter()
logger = logging.getLogger(__name__)


def _pipeline(session_id: str, store: SessionStorePort) -> SessionPipeline:
    try:
        return store.get(session_id)
    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")


@router.get("/styles", response_model=StyleCatalogSchema)
def list_styles() -> StyleCatalogSchema:
    def options(table) -> list[StyleOptionSchema]:
        return [
            StyleOptionSchema(value=key.value, label=opt.label, description=opt.description, tag=opt.tag)
            for key, opt in table.items()
        ]

    return StyleCatalogSchema(
        haircuts=options(HAIRCUT_OPTIONS),
        colors=options(COLOR_OPTIONS),
        looks=options(LOOK_OPTIONS),
    )


@router.post("/generate", response_model=GeneratedImageSchema)
def generate(
    req: GenerateRequestSchema,
    transform: TransformImageUseCase = Depends(get_transform_image),
):
    """Free-form transformation outside any session: instruction plus optional input images."""
    try:
        image = transform.execute(req.instruction, urls=req.image_urls, storage_ids=req.storage_ids)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (GenerationError, ResultFetchError, StorageError) as e:
        raise HTTPException(status_code=502, detail=str(e))
    return GeneratedImageSchema.from_entity(image)


@router.post("/sessions", response_model=CreateSessionResponseSchema, status_code=201)
def create_session(store: SessionStorePort = Depends(get_session_store)):
    return CreateSessionResponseSchema(session_id=store.create())


@router.get("/sessions/{session_id}", response_model=SessionSchema)
def get_session(session_id: str, store: SessionStorePort = Depends(get_session_store)):
    return SessionSchema.from_snapshot(_pipeline(session_id, store).snapshot())


@router.delete("/sessions/{session_id}", status_code=204)
def delete_session(session_id: str, store: SessionStorePort = Depends(get_session_store)) -> Response:
    pipeline = _pipeline(session_id, store)
    pipeline.reset()
    store.discard(session_id)
    return Response(status_code=204)


@router.post("/sessions/{session_id}/files", response_model=AssetSchema, status_code=201)
async def submit_file(
    session_id: str,
    request: Request,
    store: SessionStorePort = Depends(get_session_store),
):
    pipeline = _pipeline(session_id, store)
    body = await request.body()
    if not body:
        raise HTTPException(status_code=400, detail="Request body must contain the image bytes")

    content_type = request.headers.get("Content-Type", "application/octet-stream")
    filename = request.headers.get("X-Filename")
    try:
        asset = await run_in_threadpool(pipeline.submit_file, body, content_type, filename=filename)
    except (GenerationError, ResultFetchError, StorageError) as e:
        raise HTTPException(status_code=502, detail=str(e))

    return AssetSchema.from_view(
        AssetView(
            asset_id=asset.asset_id,
            filename=asset.filename,
            content_type=asset.content_type,
            status=asset.status,
            storage_id=asset.storage_id,
        )
    )


@router.put("/sessions/{session_id}/style", response_model=StyleSelectionSchema)
def set_style(
    session_id: str,
    req: StyleUpdateSchema,
    store: SessionStorePort = Depends(get_session_store),
):
    pipeline = _pipeline(session_id, store)
    try:
        selection = pipeline.set_style_selection(**req.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return StyleSelectionSchema.from_entity(selection)


@router.post("/sessions/{session_id}/restyle", response_model=PendingTransformSchema, status_code=202)
def trigger_restyle(session_id: str, store: SessionStorePort = Depends(get_session_store)):
    pipeline = _pipeline(session_id, store)
    try:
        pending = pipeline.trigger_restyle()
    except InvalidStageError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (GenerationError, ResultFetchError, StorageError) as e:
        raise HTTPException(status_code=502, detail=str(e))
    return PendingTransformSchema.from_entity(pending)


@router.post("/sessions/{session_id}/base/retry", response_model=PendingTransformSchema, status_code=202)
def retry_base(session_id: str, store: SessionStorePort = Depends(get_session_store)):
    pipeline = _pipeline(session_id, store)
    try:
        pending = pipeline.retry_base_transform()
    except InvalidStageError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (GenerationError, ResultFetchError, StorageError) as e:
        raise HTTPException(status_code=502, detail=str(e))
    return PendingTransformSchema.from_entity(pending)


@router.post("/sessions/{session_id}/reset", response_model=SessionSchema)
def reset_session(session_id: str, store: SessionStorePort = Depends(get_session_store)):
    pipeline = _pipeline(session_id, store)
    pipeline.reset()
    return SessionSchema.from_snapshot(pipeline.snapshot())


@router.get("/sessions/{session_id}/download")
def download(
    session_id: str,
    store: SessionStorePort = Depends(get_session_store),
    blob_store: BlobStorePort = Depends(get_blob_store),
):
    image = _pipeline(session_id, store).snapshot().displayed_image
    if image is None:
        raise HTTPException(status_code=404, detail="No image to download yet")

    try:
        url = blob_store.resolve(image.storage_id)
    except StorageError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if url is None:
        logger.warning("Displayed image missing from store", extra={"storage_id": image.storage_id})
        raise HTTPException(status_code=404, detail="Stored image not found")
    return RedirectResponse(url, status_code=307)


@router.get("/blobs/{storage_id}")
def read_blob(storage_id: str, blob_store: BlobStorePort = Depends(get_blob_store)) -> Response:
    if not isinstance(blob_store, MemoryBlobStore):
        raise HTTPException(status_code=404, detail="Blobs are served by the storage service")
    blob = blob_store.read(storage_id)
    if blob is None:
        raise HTTPException(status_code=404, detail="Blob not found")
    return Response(content=blob.data, media_type=blob.content_type)
