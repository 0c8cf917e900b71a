"""Gemini API integration."""

from .adapter import GeminiClient, GeminiResponseError

__all__ = ["GeminiClient", "GeminiResponseError"]
