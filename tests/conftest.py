from __future__ import annotations

import json
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from visionary_scribe.models import AnalysisResult, CreativeOutput, EncodedImage


def make_result(count: int = 3) -> AnalysisResult:
    return AnalysisResult(
        tags=("landscape", "mountains", "dawn", "mist", "serene"),
        colors=("#1E3A5F", "#F4A261", "#2A9D8F", "#E9C46A", "#264653"),
        visual_details="A misty valley (#A3B1C2) under a pale dawn sky.",
        creative_outputs=tuple(
            CreativeOutput(title=f"Variation {idx}", content=f"Line one of {idx}.\nLine two of {idx}.")
            for idx in range(1, count + 1)
        ),
    )


def analysis_payload(count: int = 3, **overrides: Any) -> str:
    payload = {
        "tags": ["landscape", "mountains", "dawn", "mist", "serene"],
        "colors": ["#1E3A5F", "F4A261", "#2a9d8f", "#E9C46A", "#264653"],
        "visualDetails": "A misty valley (#A3B1C2) under a pale dawn sky (#F4E1C1).",
        "creativeOutputs": [
            {"title": f"Title {idx}", "content": f"Golden (#FFD700) light number {idx}."}
            for idx in range(1, count + 1)
        ],
    }
    payload.update(overrides)
    return json.dumps(payload)


class FakeModels:
    def __init__(self, text: Optional[str] = None, error: Optional[BaseException] = None) -> None:
        self.text = text
        self.error = error
        self.calls: List[dict[str, Any]] = []

    def generate_content(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


class FakeSdkClient:
    def __init__(self, text: Optional[str] = None, error: Optional[BaseException] = None) -> None:
        self.models = FakeModels(text=text, error=error)


class FakeFetcher:
    def __init__(self, error: Optional[BaseException] = None) -> None:
        self.error = error
        self.calls: List[str] = []

    def fetch(self, url: str) -> EncodedImage:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return EncodedImage(data="aGVsbG8=", mime_type="image/jpeg")


class FakeAnalyzer:
    def __init__(self, error: Optional[BaseException] = None, hook=None) -> None:
        self.error = error
        self.hook = hook
        self.calls: List[tuple] = []

    def analyze(self, encoded_image, style, count, custom_instruction=""):
        self.calls.append((encoded_image, style, count, custom_instruction))
        if self.hook is not None:
            self.hook()
        if self.error is not None:
            raise self.error
        return make_result(count)


class FakeSearcher:
    def __init__(self, results=None, error: Optional[BaseException] = None) -> None:
        self.results = list(results or [])
        self.error = error
        self.calls: List[str] = []

    def search(self, query: str):
        self.calls.append(query)
        if self.error is not None:
            raise self.error
        return list(self.results)


@pytest.fixture()
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture()
def analyzer() -> FakeAnalyzer:
    return FakeAnalyzer()
