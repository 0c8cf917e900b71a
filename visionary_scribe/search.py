"""AI-assisted image search with an authoritative blocklist filter."""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from google.genai import types

from .errors import SearchFailedError
from .gemini.adapter import GeminiClient, GeminiResponseError
from .models import SearchResult
from .prompting import build_search_prompt
from .urls import hostname_of, is_blocked_domain

LOGGER = logging.getLogger("scribe.search")

MAX_RESULTS = 8
FAILED_MESSAGE = "Failed to search for images."

_JSON_FENCE_RE = re.compile(r"```json\s*([\s\S]*?)\s*```", re.IGNORECASE)
_ANY_FENCE_RE = re.compile(r"```[a-zA-Z]*\s*([\s\S]*?)\s*```")


def extract_json_object(text: str) -> Optional[dict[str, Any]]:
    """Return the first JSON object in ``text``.

    A fenced ```json block wins, then any other fenced block, then the first
    ``{`` in the raw text that decodes to an object.
    """

    candidates: List[str] = []
    for pattern in (_JSON_FENCE_RE, _ANY_FENCE_RE):
        match = pattern.search(text)
        if match:
            candidates.append(match.group(1))
    candidates.append(text)

    decoder = json.JSONDecoder()
    for candidate in candidates:
        start = candidate.find("{")
        while start != -1:
            try:
                value, _ = decoder.raw_decode(candidate, start)
            except json.JSONDecodeError:
                start = candidate.find("{", start + 1)
                continue
            if isinstance(value, dict):
                return value
            start = candidate.find("{", start + 1)
    return None


def _root_domain(host: str) -> str:
    return host[4:] if host.startswith("www.") else host


def filter_results(entries: Any, *, limit: int = MAX_RESULTS) -> List[SearchResult]:
    """Drop malformed and blocked entries; never trust the model's own filtering."""

    if not isinstance(entries, list):
        return []
    results: List[SearchResult] = []
    for entry in entries:
        if len(results) >= limit:
            break
        if not isinstance(entry, Mapping):
            continue
        url = entry.get("url")
        if not isinstance(url, str):
            continue
        url = url.strip()
        host = hostname_of(url)
        if host is None:
            LOGGER.debug("dropping malformed search result %r", url)
            continue
        if is_blocked_domain(url):
            LOGGER.warning("dropping blocked search result %s", url)
            continue
        title = entry.get("title")
        source = entry.get("source")
        results.append(
            SearchResult(
                url=url,
                title=title.strip() if isinstance(title, str) else "",
                source=source.strip() if isinstance(source, str) and source.strip() else _root_domain(host),
            )
        )
    return results


@dataclass
class SearchClient:
    gemini: GeminiClient
    model: str = "gemini-2.5-flash"
    max_results: int = MAX_RESULTS

    def build_config(self) -> types.GenerateContentConfig:
        # JSON mime type is not accepted together with the search tool.
        return types.GenerateContentConfig(tools=[types.Tool(google_search=types.GoogleSearch())])

    def search(self, query: str) -> List[SearchResult]:
        prompt = build_search_prompt(query)
        LOGGER.info("searching images for %r", query)
        try:
            text = self.gemini.generate(self.model, prompt, self.build_config())
        except GeminiResponseError as exc:
            raise SearchFailedError(FAILED_MESSAGE) from exc

        if not text or not text.strip():
            return []

        payload = extract_json_object(text)
        if payload is None:
            LOGGER.error("search reply contained no JSON object")
            raise SearchFailedError(FAILED_MESSAGE)

        results = filter_results(payload.get("images"), limit=min(self.max_results, MAX_RESULTS))
        LOGGER.info("search for %r returned %d usable images", query, len(results))
        return results


__all__ = ["SearchClient", "extract_json_object", "filter_results"]
