"""Validation and classification of candidate image URLs."""
from __future__ import annotations

from typing import Optional
from urllib.parse import urlparse

from .errors import BlockedDomainError, MalformedURLError

BLOCKED_DOMAINS: tuple[str, ...] = (
    "facebook.com",
    "fb.com",
    "instagram.com",
    "instagr.am",
    "twitter.com",
    "x.com",
    "t.co",
    "pinterest.com",
    "pin.it",
    "tiktok.com",
    "reddit.com",
    "redd.it",
    "linkedin.com",
    "shutterstock.com",
    "gettyimages.com",
    "istockphoto.com",
    "adobe.com/stock",
    "alamy.com",
    "stock.adobe.com",
    "123rf.com",
    "dreamstime.com",
)

EMPTY_URL_MESSAGE = "Please enter a URL."
MALFORMED_URL_MESSAGE = "Please enter a valid URL."
BLOCKED_DOMAIN_MESSAGE = (
    "Social media and stock photo sites are not supported due to access restrictions."
)


def hostname_of(url: str) -> Optional[str]:
    """Return the lower-cased hostname, or ``None`` when ``url`` has no scheme and host."""

    if not isinstance(url, str):
        return None
    try:
        parsed = urlparse(url.strip())
        host = parsed.hostname
    except ValueError:
        return None
    if not parsed.scheme or not host:
        return None
    return host.lower()


def is_valid_image_url(url: str) -> bool:
    return hostname_of(url) is not None


def is_blocked_domain(url: str) -> bool:
    host = hostname_of(url)
    if host is None:
        return False
    return any(domain in host for domain in BLOCKED_DOMAINS)


def validate(url: str) -> str:
    """Return the stripped URL or raise :class:`MalformedURLError`."""

    cleaned = url.strip() if isinstance(url, str) else ""
    if not cleaned:
        raise MalformedURLError(EMPTY_URL_MESSAGE)
    if not is_valid_image_url(cleaned):
        raise MalformedURLError(MALFORMED_URL_MESSAGE)
    return cleaned


def classify(url: str) -> bool:
    """Return ``True`` when the URL's host matches the denylist."""

    return is_blocked_domain(url)


def check(url: str) -> str:
    cleaned = validate(url)
    if classify(cleaned):
        raise BlockedDomainError(BLOCKED_DOMAIN_MESSAGE)
    return cleaned


__all__ = [
    "BLOCKED_DOMAINS",
    "check",
    "classify",
    "hostname_of",
    "is_blocked_domain",
    "is_valid_image_url",
    "validate",
]
