from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..errors import ConfigError, RequestTimeoutError

LOGGER = logging.getLogger("scribe.gemini")

MISSING_KEY_MESSAGE = "API Key is missing."


class GeminiResponseError(RuntimeError):
    """Raised when the Gemini API call fails or returns an unusable response."""


@dataclass
class GeminiClient:
    """Thin wrapper around ``google.genai.Client.models.generate_content``.

    The credential is passed in explicitly. The SDK client is created lazily so a
    missing key surfaces as :class:`ConfigError` before any network call, and a
    prepared ``client`` can be injected for tests.
    """

    api_key: Optional[str]
    timeout_s: float = 60.0
    client: Any = field(default=None, repr=False)

    def _ensure_client(self) -> Any:
        if self.client is not None:
            return self.client
        if not self.api_key:
            raise ConfigError(MISSING_KEY_MESSAGE)
        self.client = genai.Client(
            api_key=self.api_key,
            http_options=types.HttpOptions(timeout=int(self.timeout_s * 1000)),
        )
        return self.client

    def generate(
        self,
        model: str,
        contents: Any,
        config: types.GenerateContentConfig,
    ) -> Optional[str]:
        """Run one ``generate_content`` call and return the response text."""

        client = self._ensure_client()
        try:
            response = client.models.generate_content(model=model, contents=contents, config=config)
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(
                f"Timed out after {self.timeout_s:g}s waiting for the Gemini API."
            ) from exc
        except genai_errors.APIError as exc:
            LOGGER.error("Gemini API error (%s): %s", getattr(exc, "code", "?"), exc)
            raise GeminiResponseError(f"Gemini API error: {exc}") from exc
        except httpx.HTTPError as exc:
            LOGGER.error("Gemini transport error: %s", exc)
            raise GeminiResponseError("Failed to reach the Gemini API") from exc

        text = getattr(response, "text", None)
        if text is not None and not isinstance(text, str):
            raise GeminiResponseError("Unexpected response format from Gemini")
        return text


__all__ = ["GeminiClient", "GeminiResponseError", "MISSING_KEY_MESSAGE"]
