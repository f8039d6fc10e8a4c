from __future__ import annotations

from typing import Any

from salon.application.exceptions import UnrecognizedProviderOutput


def normalize_provider_output(raw: Any) -> str:
    """
    Reduce a provider result to one URL string.

    Recognized shapes: a plain URL string, a mapping with a string "url",
    an object with a string `url` attribute, or an object whose `url` is an
    accessor returning the URL. Anything else raises UnrecognizedProviderOutput.
    """
    match raw:
        case str() as url if url.strip():
            return url.strip()
        case {"url": str() as url} if url.strip():
            return url.strip()
        case object(url=str() as url) if url.strip():
            return url.strip()
        case object(url=accessor) if callable(accessor):
            url = str(accessor() or "").strip()
            if url:
                return url

    raise UnrecognizedProviderOutput(
        f"Unrecognized provider output of type {type(raw).__name__}."
    )
