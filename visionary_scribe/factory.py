from __future__ import annotations

from typing import Mapping, Optional

from .analysis import GenerationClient
from .config import ScribeConfig
from .gemini.adapter import GeminiClient
from .image.fetcher import ImageFetcher
from .models import Session
from .search import SearchClient
from .session import SessionMachine


def create_session_machine(
    config: ScribeConfig,
    *,
    api_key: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> SessionMachine:
    """Wire the fetcher and Gemini clients into a fresh :class:`SessionMachine`.

    ``api_key`` wins over the environment. A missing key is not an error here; it
    surfaces as ``ConfigError`` on the first generation or search.
    """

    key = api_key or config.resolve_api_key(environ)
    gemini = GeminiClient(api_key=key, timeout_s=config.gemini.timeout_s)

    fetcher = ImageFetcher(
        timeout=config.fetch.timeout_s,
        max_bytes=config.fetch.max_bytes,
        user_agent=config.fetch.user_agent,
    )
    analyzer = GenerationClient(
        gemini=gemini,
        model=config.gemini.model,
        temperature=config.gemini.temperature,
        count_policy=config.analysis.count_policy,
        check_hex_mentions=config.analysis.check_hex_mentions,
    )
    searcher = SearchClient(
        gemini=gemini,
        model=config.gemini.search_model,
        max_results=config.search.max_results,
    )

    session = Session(
        style=config.defaults.style,
        variation_count=config.defaults.variation_count,
        custom_instruction=config.defaults.custom_instruction,
    )
    return SessionMachine(fetcher, analyzer, searcher, session=session)


__all__ = ["create_session_machine"]
