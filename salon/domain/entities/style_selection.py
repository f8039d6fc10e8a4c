from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


class HaircutStyle(str, Enum):
    buzzcut = "buzzcut"
    dreadlocks = "dreadlocks"
    military = "military"
    mullet = "mullet"


class HairColor(str, Enum):
    natural = "natural"
    blonde = "blonde"
    ginger = "ginger"


class LookStyle(str, Enum):
    forbes = "forbes"
    catwalk = "catwalk"
    redcarpet = "redcarpet"
    hbo = "hbo"


@dataclass(frozen=True)
class StyleOption:
    label: str
    description: str
    tag: str | None = None


HAIRCUT_OPTIONS: dict[HaircutStyle, StyleOption] = {
    HaircutStyle.buzzcut: StyleOption(
        label="Buzz Cut",
        description="Clean, sharp #1-3 guard all over. Ultra-professional military precision cut.",
    ),
    HaircutStyle.dreadlocks: StyleOption(
        label="Dreadlocks",
        description="Thick, textured rope-like locks. Natural, free-flowing bohemian style.",
    ),
    HaircutStyle.military: StyleOption(
        label="Military Fade",
        description="High and tight fade with longer top. Disciplined, commanding presence.",
    ),
    HaircutStyle.mullet: StyleOption(
        label="Farmers Mullet",
        description="Business front, party back. Classic working-class rebellion style.",
    ),
}

COLOR_OPTIONS: dict[HairColor, StyleOption] = {
    HairColor.natural: StyleOption(
        label="Natural",
        description="Keep original hair color - authentic and realistic",
    ),
    HairColor.blonde: StyleOption(
        label="Blonde",
        description="Golden blonde highlights - bright, attention-grabbing",
    ),
    HairColor.ginger: StyleOption(
        label="Ginger",
        description="Rich copper-red tones - bold and distinctive",
    ),
}

LOOK_OPTIONS: dict[LookStyle, StyleOption] = {
    LookStyle.forbes: StyleOption(
        label="Forbes 30 Under 30",
        description="Magazine cover CEO look - sharp suit, confident pose, executive lighting",
        tag="new",
    ),
    LookStyle.catwalk: StyleOption(
        label="Catwalk Model",
        description="High fashion runway ready - editorial makeup, dramatic lighting, avant-garde",
        tag="new",
    ),
    LookStyle.redcarpet: StyleOption(
        label="Red Carpet",
        description="Hollywood premiere glamour - perfect styling, paparazzi-ready sophistication",
        tag="new",
    ),
    LookStyle.hbo: StyleOption(
        label="HBO Character",
        description="Prestige drama lead - intense, cinematic character with depth and gravitas",
        tag="new",
    ),
}


@dataclass(frozen=True)
class StyleSelection:
    haircut: HaircutStyle = HaircutStyle.buzzcut
    color: HairColor = HairColor.natural
    look: LookStyle | None = None

    def with_changes(self, **partial: Any) -> "StyleSelection":
        """
        Return a copy with the given categories replaced.

        Accepts enum members or their string values; `look=None` clears the look.
        Unknown categories or values raise ValueError.
        """
        changes: dict[str, Any] = {}
        for key, value in partial.items():
            if key == "haircut":
                changes[key] = HaircutStyle(value)
            elif key == "color":
                changes[key] = HairColor(value)
            elif key == "look":
                changes[key] = LookStyle(value) if value is not None else None
            else:
                raise ValueError(f"Unknown style category: {key}")
        return replace(self, **changes)
