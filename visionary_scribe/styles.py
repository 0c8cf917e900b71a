from __future__ import annotations

from enum import Enum
from typing import Union

VARIATION_COUNTS: tuple[int, ...] = (3, 5, 10)
DEFAULT_VARIATION_COUNT = 3

SAMPLE_IMAGES: tuple[str, ...] = (
    "https://images.unsplash.com/photo-1506744038136-46273834b3fb?w=800&q=80",
    "https://images.unsplash.com/photo-1472214103451-9374bd1c798e?w=800&q=80",
    "https://images.unsplash.com/photo-1579783902614-a3fb3927b6a5?w=800&q=80",
)
SAMPLE_SOURCE_LABEL = "Sample Gallery"
DIRECT_SOURCE_LABEL = "Direct Link"


class CreativeStyle(str, Enum):
    SIMPLE = "Simple & Descriptive"
    COMPLEX = "Complex & Analytical"
    POETIC = "Poetic & Abstract"
    CAPTION = "Social Media Caption"

    @property
    def guidance(self) -> str:
        return _GUIDANCE[self]

    @classmethod
    def coerce(cls, value: Union["CreativeStyle", str]) -> "CreativeStyle":
        """Accept an enum member, its label or its member name (case-insensitive)."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            cleaned = value.strip()
            for style in cls:
                if cleaned == style.value or cleaned.upper() == style.name:
                    return style
        raise ValueError(f"unknown creative style {value!r}")


_GUIDANCE = {
    CreativeStyle.SIMPLE: "focus on clarity and accessibility",
    CreativeStyle.COMPLEX: "use sophisticated vocabulary and focus on atmosphere and hidden meanings",
    CreativeStyle.POETIC: "create evocative verses",
    CreativeStyle.CAPTION: "make them engaging for social media with emojis",
}


def coerce_variation_count(value: object) -> int:
    try:
        count = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"variation count must be one of {VARIATION_COUNTS}") from exc
    if count not in VARIATION_COUNTS:
        raise ValueError(f"variation count must be one of {VARIATION_COUNTS}")
    return count


__all__ = [
    "CreativeStyle",
    "DIRECT_SOURCE_LABEL",
    "DEFAULT_VARIATION_COUNT",
    "SAMPLE_IMAGES",
    "SAMPLE_SOURCE_LABEL",
    "VARIATION_COUNTS",
    "coerce_variation_count",
]
