"""Three-phase session flow: input, processing (configure), results."""
from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, List, Optional, TypeVar, Union

from .errors import BusyError, CancelledError, ScribeError
from .export import EXPORT_FILENAME, render_export, write_export
from .interfaces import AnalysisEngineProtocol, ImageFetcherProtocol, SearchEngineProtocol
from .models import AnalysisResult, Phase, SearchResult, Session
from .styles import (
    DIRECT_SOURCE_LABEL,
    SAMPLE_IMAGES,
    SAMPLE_SOURCE_LABEL,
    CreativeStyle,
    coerce_variation_count,
)
from . import urls

LOGGER = logging.getLogger("scribe.session")

T = TypeVar("T")

BUSY_MESSAGE = "Another request is still in progress. Please wait for it to finish."
CANCELLED_MESSAGE = "The request was cancelled."
SEARCH_FAILED_MESSAGE = "Failed to perform search. Please try again."
NO_RESULTS_MESSAGE = "No suitable images found. Try a different query or specific terms like 'public domain'."


class SessionMachine:
    """Owns the single :class:`Session` and applies one user intent at a time.

    Every failure from the URL, fetch, analysis or search layers is recorded in
    ``session.last_error`` and leaves the session in its last good state.
    """

    def __init__(
        self,
        fetcher: ImageFetcherProtocol,
        analyzer: AnalysisEngineProtocol,
        searcher: Optional[SearchEngineProtocol] = None,
        *,
        session: Optional[Session] = None,
    ) -> None:
        self.fetcher = fetcher
        self.analyzer = analyzer
        self.searcher = searcher
        self.session = session or Session()
        self._busy = False
        self._cancel = threading.Event()

    @property
    def phase(self) -> Phase:
        return self.session.phase

    @property
    def is_busy(self) -> bool:
        return self._busy

    def cancel(self) -> None:
        """Discard the outcome of the operation currently in flight."""

        if self._busy:
            LOGGER.info("cancel requested")
            self._cancel.set()

    def _run(self, step: str, func: Callable[[], T]) -> T:
        if self._busy:
            raise BusyError(BUSY_MESSAGE)
        self._busy = True
        self._cancel.clear()
        try:
            outcome = func()
        finally:
            self._busy = False
        if self._cancel.is_set():
            self._cancel.clear()
            LOGGER.info("%s cancelled, outcome discarded", step)
            raise CancelledError(CANCELLED_MESSAGE)
        return outcome

    def _fail(self, step: str, exc: ScribeError) -> None:
        LOGGER.error("%s failed in phase %s: %s", step, self.session.phase.value, exc)
        self.session.last_error = str(exc)

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------
    def submit_image(self, url: str, source_label: str = DIRECT_SOURCE_LABEL) -> bool:
        session = self.session
        if session.phase is not Phase.INPUT:
            LOGGER.debug("submit_image ignored in phase %s", session.phase.value)
            return False
        try:
            cleaned = urls.check(url)
            encoded = self._run("fetch", lambda: self.fetcher.fetch(cleaned))
        except ScribeError as exc:
            self._fail("fetch", exc)
            return False

        session.image_url = cleaned
        session.image_source = source_label
        session.encoded_image = encoded
        session.last_error = None
        session.phase = Phase.PROCESSING
        LOGGER.info("image accepted from %s (%s)", cleaned, source_label)
        return True

    def submit_sample(self, index: int) -> bool:
        if not 0 <= index < len(SAMPLE_IMAGES):
            self.session.last_error = f"Sample index must be between 0 and {len(SAMPLE_IMAGES) - 1}."
            return False
        return self.submit_image(SAMPLE_IMAGES[index], SAMPLE_SOURCE_LABEL)

    def update_config(
        self,
        *,
        style: Union[CreativeStyle, str, None] = None,
        count: Optional[int] = None,
        instruction: Optional[str] = None,
    ) -> bool:
        session = self.session
        if session.phase is not Phase.PROCESSING:
            LOGGER.debug("update_config ignored in phase %s", session.phase.value)
            return False
        try:
            new_style = CreativeStyle.coerce(style) if style is not None else session.style
            new_count = coerce_variation_count(count) if count is not None else session.variation_count
        except ValueError as exc:
            session.last_error = str(exc)
            return False
        session.style = new_style
        session.variation_count = new_count
        if instruction is not None:
            session.custom_instruction = instruction
        return True

    def generate(self) -> bool:
        session = self.session
        encoded = session.encoded_image
        if encoded is None:
            return False
        style = session.style
        count = session.variation_count
        instruction = session.custom_instruction
        try:
            result = self._run(
                "generate",
                lambda: self.analyzer.analyze(encoded, style, count, instruction),
            )
        except ScribeError as exc:
            self._fail("generate", exc)
            return False

        session.result = result
        session.last_error = None
        session.phase = Phase.RESULTS
        LOGGER.info(
            "analysis attached: %d tags, %d colors, %d outputs",
            len(result.tags),
            len(result.colors),
            len(result.creative_outputs),
        )
        return True

    def search_images(self, query: str) -> List[SearchResult]:
        session = self.session
        if self.searcher is None or not (query or "").strip():
            return []
        searcher = self.searcher
        session.last_error = None
        try:
            results = list(self._run("search", lambda: searcher.search(query)))
        except (BusyError, CancelledError) as exc:
            self._fail("search", exc)
            return []
        except ScribeError as exc:
            LOGGER.error("search failed: %s", exc)
            session.last_error = SEARCH_FAILED_MESSAGE
            return []
        if not results:
            session.last_error = NO_RESULTS_MESSAGE
        return results

    def reset(self) -> None:
        self.session.clear_image()
        self.session.phase = Phase.INPUT

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    @property
    def result(self) -> Optional[AnalysisResult]:
        return self.session.result

    def export_text(self) -> Optional[str]:
        session = self.session
        if session.phase is not Phase.RESULTS or session.result is None:
            return None
        return render_export(session.result, image_url=session.image_url, image_source=session.image_source)

    def export_to(self, path: Path = Path(EXPORT_FILENAME)) -> Optional[Path]:
        session = self.session
        if session.phase is not Phase.RESULTS or session.result is None:
            return None
        return write_export(path, session.result, image_url=session.image_url, image_source=session.image_source)


__all__ = ["SessionMachine"]
