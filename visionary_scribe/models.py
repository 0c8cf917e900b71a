from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .styles import CreativeStyle, DEFAULT_VARIATION_COUNT

HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


class Phase(str, Enum):
    INPUT = "input"
    PROCESSING = "processing"
    RESULTS = "results"


@dataclass(frozen=True)
class EncodedImage:
    """Base64 text of a fetched image, without any data-URL prefix."""

    data: str
    mime_type: str = "image/jpeg"


@dataclass(frozen=True)
class CreativeOutput:
    title: str
    content: str


@dataclass(frozen=True)
class AnalysisResult:
    tags: tuple[str, ...]
    colors: tuple[str, ...]
    visual_details: str
    creative_outputs: tuple[CreativeOutput, ...]
    format_warnings: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for color in self.colors:
            if not HEX_COLOR_RE.match(color):
                raise ValueError(f"color {color!r} is not a #RRGGBB hex code")


@dataclass(frozen=True)
class SearchResult:
    url: str
    title: str
    source: str


@dataclass
class Session:
    phase: Phase = Phase.INPUT
    image_url: str = ""
    image_source: Optional[str] = None
    encoded_image: Optional[EncodedImage] = None
    style: CreativeStyle = CreativeStyle.SIMPLE
    variation_count: int = DEFAULT_VARIATION_COUNT
    custom_instruction: str = ""
    result: Optional[AnalysisResult] = None
    last_error: Optional[str] = None

    def clear_image(self) -> None:
        self.image_url = ""
        self.image_source = None
        self.encoded_image = None
        self.result = None
        self.last_error = None


__all__ = [
    "AnalysisResult",
    "CreativeOutput",
    "EncodedImage",
    "HEX_COLOR_RE",
    "Phase",
    "SearchResult",
    "Session",
]
