from __future__ import annotations

from typing import Protocol, Sequence

from .models import AnalysisResult, EncodedImage, SearchResult
from .styles import CreativeStyle


class ImageFetcherProtocol(Protocol):
    def fetch(self, url: str) -> EncodedImage:
        """Retrieve ``url`` and return its base64 payload."""


class AnalysisEngineProtocol(Protocol):
    def analyze(
        self,
        encoded_image: EncodedImage,
        style: CreativeStyle,
        count: int,
        custom_instruction: str = "",
    ) -> AnalysisResult:
        """Describe the image and write ``count`` creative outputs."""


class SearchEngineProtocol(Protocol):
    def search(self, query: str) -> Sequence[SearchResult]:
        """Return filtered candidate images for ``query``."""
