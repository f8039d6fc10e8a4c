"""
Tests for provider output normalization and the Replicate adapter.
"""

import pytest

from salon.application.exceptions import GenerationError, UnrecognizedProviderOutput
from salon.infrastructure.generation.mock_generator import MockImageGenerator
from salon.infrastructure.generation.output import normalize_provider_output
from salon.infrastructure.generation.replicate_generator import ReplicateImageGenerator


class _FileOutput:
    def __init__(self, url):
        self.url = url


class _LazyOutput:
    def __init__(self, url):
        self._url = url

    def url(self):
        return self._url


class _FakeReplicateClient:
    def __init__(self, output=None, error=None):
        self.output = output
        self.error = error
        self.calls = []

    def run(self, model, input):
        self.calls.append((model, input))
        if self.error is not None:
            raise self.error
        return self.output


@pytest.mark.parametrize(
    "raw",
    [
        "https://replicate.delivery/out.png",
        {"url": "https://replicate.delivery/out.png"},
        _FileOutput("https://replicate.delivery/out.png"),
        _LazyOutput("https://replicate.delivery/out.png"),
    ],
)
def test_known_output_shapes_normalize_to_url(raw):
    assert normalize_provider_output(raw) == "https://replicate.delivery/out.png"


@pytest.mark.parametrize(
    "raw",
    [None, "", "   ", 42, ["https://a/1.png", "https://a/2.png"], {"image": "https://a/1.png"}, _FileOutput(None)],
)
def test_unknown_output_shapes_fail_loudly(raw):
    """Nothing is guessed: an unexpected shape never turns into a bogus URL."""
    with pytest.raises(UnrecognizedProviderOutput):
        normalize_provider_output(raw)


def test_unrecognized_output_is_a_generation_error():
    assert issubclass(UnrecognizedProviderOutput, GenerationError)


def _generator(client):
    generator = ReplicateImageGenerator(api_token="r8_test", model="google/nano-banana")
    generator._client = client
    return generator


def test_replicate_payload_shape():
    client = _FakeReplicateClient(output=_FileOutput("https://replicate.delivery/x.png"))
    generator = _generator(client)

    result = generator.invoke("make it blue", ["https://store/img_1", "https://store/img_2"])

    assert client.calls == [
        (
            "google/nano-banana",
            {"prompt": "make it blue", "image_input": ["https://store/img_1", "https://store/img_2"]},
        )
    ]
    assert result.url == "https://replicate.delivery/x.png"
    assert result.model == "google/nano-banana"


def test_replicate_errors_are_wrapped():
    generator = _generator(_FakeReplicateClient(error=RuntimeError("rate limited")))

    with pytest.raises(GenerationError, match="Replicate API error: rate limited"):
        generator.invoke("make it blue", [])


def test_replicate_unrecognized_output():
    generator = _generator(_FakeReplicateClient(output=[1, 2, 3]))

    with pytest.raises(UnrecognizedProviderOutput):
        generator.invoke("make it blue", ["https://store/img_1"])


def test_replicate_requires_token(monkeypatch):
    from salon.core.config import settings

    monkeypatch.setattr(settings, "REPLICATE_API_TOKEN", None)

    with pytest.raises(ValueError):
        ReplicateImageGenerator()


def test_mock_generator_echoes_first_source():
    result = MockImageGenerator().invoke("anything", ["https://store/img_1", "https://store/img_2"])

    assert result.url == "https://store/img_1"
    assert result.model == "mock"


def test_mock_generator_needs_something_to_return():
    with pytest.raises(GenerationError):
        MockImageGenerator().invoke("anything", [])
