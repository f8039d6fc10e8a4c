from dataclasses import dataclass


@dataclass(frozen=True)
class GeneratedImage:
    url: str
    storage_id: str
