"""Fetch a web page and reduce it to a bounded plain-text excerpt."""

from __future__ import annotations

import logging
import re
from typing import Callable

import requests
from bs4 import BeautifulSoup

from contentextract.errors import FetchError
from contentextract.models import ExtractedPage

__all__ = ["TextExtractor", "DEFAULT_HEADERS", "html_to_text", "truncate_text"]

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/129.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

DEFAULT_TIMEOUT = 15.0
DEFAULT_EXCERPT_BUDGET = 3000
# Bodies are read up to this many bytes; the rest of the document is ignored.
MAX_DOCUMENT_BYTES = 2 * 1024 * 1024
_CHUNK_SIZE = 64 * 1024

# Elements whose content never contributes readable text.
_DROPPED_TAGS = ["script", "style", "noscript", "img", "svg", "template"]
_TEXTUAL_TYPES = ("text/", "application/xhtml+xml", "application/xml")
_WHITESPACE_RE = re.compile(r"\s+")
_CHARSET_RE = re.compile(r"charset=[\"']?([\w.:-]+)", re.IGNORECASE)


def html_to_text(html: str | bytes, encoding: str | None = None) -> tuple[str, str]:
    """Extract title and inline text content from HTML.

    Link text is kept in place and images are skipped. For ``bytes`` input
    without an ``encoding`` the parser detects the charset from the document.
    """

    if isinstance(html, bytes):
        soup = BeautifulSoup(html, "lxml", from_encoding=encoding)
    else:
        soup = BeautifulSoup(html, "lxml")
    title = soup.title.get_text(strip=True) if soup.title else ""
    for tag in soup(_DROPPED_TAGS):
        tag.decompose()
    if soup.title:
        soup.title.decompose()
    text = soup.get_text(" ", strip=True)
    return title, _WHITESPACE_RE.sub(" ", text).strip()


def truncate_text(text: str, budget: int) -> str:
    """Cut ``text`` to at most ``budget`` characters."""

    return text[:budget]


def _declared_charset(content_type: str) -> str | None:
    match = _CHARSET_RE.search(content_type)
    return match.group(1) if match else None


def _read_capped(response: requests.Response, limit: int) -> bytes:
    body = bytearray()
    for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
        body.extend(chunk)
        if len(body) >= limit:
            break
    return bytes(body[:limit])


class TextExtractor:
    """Retrieve documents over HTTP and convert them to plain text.

    Every fetch opens its own session so cookies and connections never carry
    over from one caller's request to another's.
    """

    def __init__(
        self,
        session_factory: Callable[[], requests.Session] = requests.Session,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        excerpt_budget: int = DEFAULT_EXCERPT_BUDGET,
        max_document_bytes: int = MAX_DOCUMENT_BYTES,
    ) -> None:
        self._session_factory = session_factory
        self.timeout = timeout
        self.excerpt_budget = excerpt_budget
        self.max_document_bytes = max_document_bytes

    def fetch(self, url: str) -> ExtractedPage:
        """Download ``url`` and return its title and truncated text."""

        logger.info("Fetching %s", url)
        with self._session_factory() as session:
            session.headers.update(DEFAULT_HEADERS)
            try:
                response = session.get(url, timeout=self.timeout, stream=True)
            except requests.RequestException as exc:
                raise FetchError(f"Request for {url} failed: {exc}") from exc

            try:
                response.raise_for_status()
                content_type = (response.headers.get("Content-Type") or "").lower()
                if content_type and not content_type.startswith(_TEXTUAL_TYPES):
                    raise FetchError(f"Unsupported content type {content_type!r} for {url}")
                body = _read_capped(response, self.max_document_bytes)
            except requests.RequestException as exc:
                raise FetchError(f"Request for {url} failed: {exc}") from exc
            finally:
                response.close()

        try:
            title, text = html_to_text(body, _declared_charset(content_type))
        except Exception as exc:  # noqa: BLE001 - parser failures surface as fetch errors
            raise FetchError(f"Could not parse document at {url}: {exc}") from exc

        excerpt = truncate_text(text, self.excerpt_budget)
        logger.info("Extracted %d characters (%d kept) from %s", len(text), len(excerpt), url)
        return ExtractedPage(url=url, title=title, text=excerpt)

    def extract_text(self, url: str) -> str:
        """Return the plain-text excerpt of ``url``."""

        return self.fetch(url).text
