"""
Tests for the transformation service: input resolution, atomicity and persisting.
"""

from __future__ import annotations

import pytest

from salon.application.exceptions import GenerationError, ResultFetchError
from salon.application.use_cases.transform_image import TransformImageUseCase


def test_direct_urls_skip_resolution_and_keep_order(blob_store, generator, transform):
    """With no storage ids, resolve is never called and URLs reach the model in order."""
    urls = ["https://a/1.png", "https://b/2.png", "https://c/3.png"]

    transform.execute("make it blue", urls=urls)

    assert blob_store.resolve_calls == []
    assert generator.calls == [("make it blue", urls)]


def test_urls_come_before_resolved_storage_ids(blob_store, generator, transform):
    first = blob_store.store(b"one", "image/png")
    second = blob_store.store(b"two", "image/png")

    transform.execute("restyle", urls=["https://direct/x.png"], storage_ids=[second, first])

    assert generator.calls[0][1] == [
        "https://direct/x.png",
        f"https://store/{second}",
        f"https://store/{first}",
    ]


def test_unknown_storage_id_is_skipped(blob_store, generator, transform):
    """One missing reference image does not abort the transformation."""
    known = [blob_store.store(b"a", "image/png"), blob_store.store(b"b", "image/png")]

    image = transform.execute("restyle", storage_ids=[known[0], "img_missing", known[1]])

    assert generator.calls[0][1] == [f"https://store/{known[0]}", f"https://store/{known[1]}"]
    assert image.url == "https://provider/out1"


def test_success_persists_fetched_result(blob_store, fetcher, transform):
    image = transform.execute("seat them", urls=["https://in/1.png"])

    assert fetcher.calls == ["https://provider/out1"]
    assert image.url == "https://provider/out1"
    assert image.storage_id == "img_1"
    assert blob_store.read("img_1").data == b"bytes-of:https://provider/out1"


def test_generation_error_stores_nothing(blob_store, generator, fetcher, transform):
    """A provider failure leaves no blob behind and returns no image."""
    source = blob_store.store(b"selfie", "image/jpeg")
    blob_store.store_calls.clear()
    generator.outputs = [GenerationError("model overloaded")]

    with pytest.raises(GenerationError, match="model overloaded"):
        transform.execute("seat them", storage_ids=[source])

    assert blob_store.store_calls == []
    assert fetcher.calls == []


def test_fetch_error_fails_whole_operation(blob_store, generator, fetcher):
    fetcher.failing_urls.add("https://provider/expired")
    generator.outputs = ["https://provider/expired"]
    transform = TransformImageUseCase(blob_store=blob_store, generator=generator, fetcher=fetcher)

    with pytest.raises(ResultFetchError):
        transform.execute("seat them", urls=["https://in/1.png"])

    assert blob_store.store_calls == []


def test_no_inputs_runs_unconditioned(generator, transform):
    transform.execute("a salon interior")

    assert generator.calls == [("a salon interior", [])]


def test_empty_instruction_rejected(generator, transform):
    with pytest.raises(ValueError):
        transform.execute("   ", urls=["https://in/1.png"])
    assert generator.calls == []
