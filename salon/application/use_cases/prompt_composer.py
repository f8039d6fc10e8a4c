from __future__ import annotations

from salon.domain.entities.style_selection import (
    COLOR_OPTIONS,
    HAIRCUT_OPTIONS,
    LOOK_OPTIONS,
    StyleSelection,
)


SALON_CHAIR_INSTRUCTION = (
    "Seat this person in a professional salon chair in a bright, modern hair salon, "
    "draped in a black salon cape and facing the camera. "
    "Keep their face, hair and identity exactly as they are. "
    "Make it photorealistic and naturally integrated."
)


def compose_style_instruction(selection: StyleSelection) -> str:
    """Build the restyle instruction for a selection. Same selection, same text."""
    parts = [
        f"Transform this person's hair with: {_sentence(HAIRCUT_OPTIONS[selection.haircut].description)}",
        _sentence(COLOR_OPTIONS[selection.color].description),
    ]
    if selection.look is not None:
        parts.append(_sentence(LOOK_OPTIONS[selection.look].description))
    parts.append("Make it photorealistic and naturally integrated.")
    return " ".join(parts)


def _sentence(description: str) -> str:
    return description.strip().rstrip(".") + "."
