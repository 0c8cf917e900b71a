"""Image retrieval helpers."""

from .fetcher import ImageFetcher

__all__ = ["ImageFetcher"]
