from __future__ import annotations

import base64
import logging
from dataclasses import dataclass

import requests

from ..errors import (
    HttpStatusError,
    ImageTooLargeError,
    NetworkError,
    NotAnImageError,
    RequestTimeoutError,
)
from ..models import EncodedImage

LOGGER = logging.getLogger("scribe.fetch")

_CHUNK_SIZE = 64 * 1024

CROSS_ORIGIN_MESSAGE = (
    "Unable to access this image directly. The server hosting the image may not allow "
    "external access. Please try an image from a more open source like Wikimedia Commons "
    "or Unsplash, or a direct file link."
)


def _mime_type(response: requests.Response) -> str:
    raw = response.headers.get("Content-Type", "") or ""
    return raw.split(";", 1)[0].strip().lower()


@dataclass
class ImageFetcher:
    """Download an image over HTTP and encode it for the model."""

    timeout: float = 20.0
    max_bytes: int = 10 * 1024 * 1024
    user_agent: str = "visionary-scribe/0.1"

    def _request(self, url: str) -> requests.Response:
        try:
            return requests.get(
                url,
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent, "Accept": "image/*"},
                stream=True,
            )
        except requests.Timeout as exc:
            raise RequestTimeoutError(
                f"Timed out after {self.timeout:g}s waiting for the image host."
            ) from exc
        except requests.RequestException as exc:
            raise NetworkError(CROSS_ORIGIN_MESSAGE) from exc

    def _too_large(self, size: int) -> ImageTooLargeError:
        return ImageTooLargeError(f"Image is larger than the {self.max_bytes} byte limit ({size}+ bytes).")

    def _read_body(self, response: requests.Response) -> bytes:
        declared = response.headers.get("Content-Length")
        if declared and declared.isdigit() and int(declared) > self.max_bytes:
            raise self._too_large(int(declared))

        chunks: list[bytes] = []
        total = 0
        try:
            for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                if not chunk:
                    continue
                total += len(chunk)
                if total > self.max_bytes:
                    raise self._too_large(total)
                chunks.append(chunk)
        except requests.Timeout as exc:
            raise RequestTimeoutError(
                f"Timed out after {self.timeout:g}s reading the image body."
            ) from exc
        except requests.RequestException as exc:
            raise NetworkError(CROSS_ORIGIN_MESSAGE) from exc
        return b"".join(chunks)

    def fetch(self, url: str) -> EncodedImage:
        response = self._request(url)
        try:
            try:
                response.raise_for_status()
            except requests.HTTPError as exc:
                reason = (response.reason or "").strip()
                message = f"Failed to fetch image: {response.status_code} {reason}".rstrip()
                raise HttpStatusError(message, status_code=response.status_code) from exc

            mime_type = _mime_type(response)
            if not mime_type.startswith("image/"):
                raise NotAnImageError("URL does not point to a valid image.")

            body = self._read_body(response)
        finally:
            response.close()

        LOGGER.info("fetched %s (%s, %d bytes)", url, mime_type, len(body))
        return EncodedImage(data=base64.b64encode(body).decode("ascii"), mime_type=mime_type)


__all__ = ["CROSS_ORIGIN_MESSAGE", "ImageFetcher"]
