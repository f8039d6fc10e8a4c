#!/usr/bin/env python3
"""
Interactive local salon harness (no HTTP, no storage service).

Usage:
  python3 scripts/salon_local.py

What it does:
- Keeps one session pipeline in memory, stored in a MemoryBlobStore
- Uses the Replicate generator when REPLICATE_API_TOKEN is set, otherwise the mock
- Runs every transformation inline and prints the resulting session state
"""

from __future__ import annotations

import mimetypes
import shlex
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from salon.application.exceptions import GenerationError, InvalidStageError, ResultFetchError, StorageError
from salon.application.ports.image_fetcher import FetchedImage, ImageFetcherPort
from salon.application.use_cases.session_pipeline import SessionPipeline
from salon.application.use_cases.transform_image import TransformImageUseCase
from salon.application.use_cases.upload_asset import UploadAssetUseCase
from salon.core.config import settings
from salon.infrastructure.blob.memory_blob_store import MemoryBlobStore
from salon.infrastructure.generation.mock_generator import MockImageGenerator
from salon.infrastructure.generation.replicate_generator import ReplicateImageGenerator
from salon.infrastructure.http.image_fetcher import HttpImageFetcher

LOCAL_BASE = "local://blobs"


class LocalFirstFetcher(ImageFetcherPort):
    """Reads local:// URLs back from the memory store and fetches everything else over HTTP."""

    def __init__(self, store: MemoryBlobStore) -> None:
        self._store = store
        self._http = HttpImageFetcher(timeout=settings.RESULT_FETCH_TIMEOUT_SECONDS)

    def fetch(self, url: str) -> FetchedImage:
        if url.startswith(LOCAL_BASE + "/"):
            blob = self._store.read(url.rsplit("/", 1)[-1])
            if blob is None:
                raise ResultFetchError(f"No local blob behind {url}")
            return FetchedImage(data=blob.data, content_type=blob.content_type)
        return self._http.fetch(url)


def _build_pipeline() -> tuple[SessionPipeline, MemoryBlobStore]:
    store = MemoryBlobStore(base_url=LOCAL_BASE)
    if settings.REPLICATE_API_TOKEN:
        generator = ReplicateImageGenerator()
    else:
        generator = MockImageGenerator(result_url=settings.MOCK_RESULT_URL)
    pipeline = SessionPipeline(
        session_id="local_session",
        upload_asset=UploadAssetUseCase(blob_store=store),
        transform_image=TransformImageUseCase(
            blob_store=store,
            generator=generator,
            fetcher=LocalFirstFetcher(store),
        ),
    )
    return pipeline, store


def _print_help() -> None:
    print("Commands:")
    print("  /upload <path>                 -> upload a photo (first one starts the salon transform)")
    print("  /style haircut=.. color=.. look=..  -> change the selection (look=none clears it)")
    print("  /restyle                       -> restyle from the salon image")
    print("  /retry                         -> retry a failed salon transform")
    print("  /save <path>                   -> write the displayed image to disk")
    print("  /show, /reset, /quit")


def _print_state(pipeline: SessionPipeline) -> None:
    snap = pipeline.snapshot()
    print("\n--- Session ---")
    print(f"stage: {snap.stage.value}  epoch: {snap.epoch}")
    print(f"uploads: {[(a.filename, a.status.value, a.storage_id) for a in snap.assets]}")
    sel = snap.selection
    print(f"selection: haircut={sel.haircut.value} color={sel.color.value} look={sel.look.value if sel.look else '-'}")
    if snap.base_image:
        print(f"base: {snap.base_image.storage_id} {snap.base_image.url}")
    if snap.styled_image:
        print(f"styled: {snap.styled_image.storage_id} {snap.styled_image.url}")
    if snap.last_error:
        print(f"last_error: {snap.last_error}")
    print("-" * 60)


def main() -> None:
    pipeline, store = _build_pipeline()
    print("\nLocal Salon Harness")
    print("-" * 60)
    _print_help()
    print("-" * 60)

    while True:
        try:
            line = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return
        if not line:
            continue

        cmd, *args = shlex.split(line)
        cmd = cmd.lower()
        try:
            if cmd in ("/quit", "/exit"):
                print("Bye!")
                return
            elif cmd == "/help":
                _print_help()
                continue
            elif cmd == "/upload" and args:
                path = Path(args[0]).expanduser()
                content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
                asset = pipeline.submit_file(path.read_bytes(), content_type, filename=path.name)
                print(f"stored {asset.filename} as {asset.storage_id}")
            elif cmd == "/style":
                changes = dict(arg.split("=", 1) for arg in args if "=" in arg)
                if changes.get("look", "").lower() == "none":
                    changes["look"] = None
                pipeline.set_style_selection(**changes)
            elif cmd == "/restyle":
                pipeline.trigger_restyle()
            elif cmd == "/retry":
                pipeline.retry_base_transform()
            elif cmd == "/reset":
                pipeline.reset()
            elif cmd == "/save" and args:
                image = pipeline.snapshot().displayed_image
                blob = store.read(image.storage_id) if image else None
                if blob is None:
                    print("Nothing to save yet.")
                    continue
                Path(args[0]).expanduser().write_bytes(blob.data)
                print(f"saved {image.storage_id} to {args[0]}")
                continue
            elif cmd != "/show":
                print("Unknown command. Type /help.")
                continue
        except (InvalidStageError, ValueError, OSError) as e:
            print(f"ERROR: {e}")
            continue
        except (GenerationError, ResultFetchError, StorageError) as e:
            print(f"FAILED: {e}")

        _print_state(pipeline)


if __name__ == "__main__":
    main()
