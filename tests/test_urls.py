from __future__ import annotations

import pytest

from visionary_scribe import urls
from visionary_scribe.errors import BlockedDomainError, MalformedURLError


@pytest.mark.parametrize(
    "url",
    [
        "https://upload.wikimedia.org/wikipedia/commons/a/a9/Example.jpg",
        "http://images.unsplash.com/photo-1?w=800",
        "  https://example.org/cat.png  ",
    ],
)
def test_well_formed_urls_validate(url: str) -> None:
    assert urls.validate(url) == url.strip()
    assert urls.is_valid_image_url(url)


@pytest.mark.parametrize("url", ["not a url", "example.com/image.jpg", "https://", "http:///path"])
def test_malformed_urls_are_rejected(url: str) -> None:
    with pytest.raises(MalformedURLError) as excinfo:
        urls.validate(url)
    assert str(excinfo.value) == urls.MALFORMED_URL_MESSAGE


def test_empty_url_has_dedicated_message() -> None:
    with pytest.raises(MalformedURLError) as excinfo:
        urls.validate("   ")
    assert str(excinfo.value) == urls.EMPTY_URL_MESSAGE


@pytest.mark.parametrize(
    "url",
    [
        "https://www.instagram.com/p/x",
        "https://PINTEREST.com/pin/1",
        "https://media.gettyimages.com/photos/a.jpg",
        "https://stock.adobe.com/images/1",
        "https://t.co/abc",
    ],
)
def test_blocklisted_hosts_are_classified(url: str) -> None:
    assert urls.classify(url) is True
    with pytest.raises(BlockedDomainError):
        urls.check(url)


def test_open_hosts_are_not_blocked() -> None:
    assert urls.classify("https://upload.wikimedia.org/b.jpg") is False
    assert urls.check("https://upload.wikimedia.org/b.jpg") == "https://upload.wikimedia.org/b.jpg"


def test_blocklist_matches_on_hostname_only() -> None:
    assert urls.classify("https://example.org/facebook.com/photo.jpg") is False


def test_malformed_url_is_not_blocked() -> None:
    assert urls.classify("instagram.com/p/x") is False


def test_blocklist_literal() -> None:
    assert len(urls.BLOCKED_DOMAINS) == 21
    assert "adobe.com/stock" in urls.BLOCKED_DOMAINS
    assert "dreamstime.com" in urls.BLOCKED_DOMAINS
