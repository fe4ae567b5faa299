"""Fetch, summarise and condense a single URL."""

from __future__ import annotations

import ipaddress
import logging
from urllib.parse import urlparse

from contentextract.config import ServiceConfig
from contentextract.errors import InvalidInputError
from contentextract.models import ExtractionResponse
from contentextract.services.extractor import TextExtractor
from contentextract.services.keypoints import derive_key_points
from contentextract.services.summarizer import SummarizationClient

__all__ = ["ExtractionService", "title_from_url", "validate_url"]

logger = logging.getLogger(__name__)

_ALLOWED_PREFIXES = ("http://", "https://")


def validate_url(url: object) -> str:
    """Return ``url`` unchanged when it is an absolute ``http://``/``https://`` URL with a host.

    The scheme must be lowercase and the URL must not carry surrounding
    whitespace; no normalisation is applied.
    """

    if not isinstance(url, str) or not url:
        raise InvalidInputError("No URL supplied")
    if url != url.strip() or not url.startswith(_ALLOWED_PREFIXES):
        raise InvalidInputError(f"Not an absolute http(s) URL: {url!r}")

    try:
        hostname = urlparse(url).hostname
    except ValueError as exc:
        raise InvalidInputError(f"Unparsable URL: {url!r}") from exc

    if not hostname:
        raise InvalidInputError(f"URL has no host: {url!r}")
    return url


def title_from_url(url: str) -> str:
    """Derive a display title from the host of ``url``.

    ``www.example.com`` and ``example.com`` both give ``example``. IP addresses
    and single-label hosts are returned as they are.
    """

    hostname = urlparse(url).hostname or ""
    try:
        ipaddress.ip_address(hostname)
    except ValueError:
        pass
    else:
        return hostname

    labels = [label for label in hostname.split(".") if label]
    if labels and labels[0] == "www":
        labels = labels[1:]
    if len(labels) < 2:
        return ".".join(labels) or hostname
    return labels[0]


class ExtractionService:
    """Run extraction, summarisation and key-point selection in order."""

    def __init__(
        self,
        config: ServiceConfig,
        *,
        extractor: TextExtractor | None = None,
        summarizer: SummarizationClient | None = None,
    ) -> None:
        self.config = config
        self.extractor = extractor or TextExtractor(
            timeout=config.request_timeout,
            excerpt_budget=config.excerpt_budget,
        )
        self.summarizer = summarizer or SummarizationClient(config)

    def run(self, url: object) -> ExtractionResponse:
        target = validate_url(url)

        page = self.extractor.fetch(target)
        summary = self.summarizer.summarize(self.config.summary_model, page.text)
        key_points = derive_key_points(page.text)

        logger.info("Processed %s: %d key point(s)", target, len(key_points))
        return ExtractionResponse(
            title=page.title or title_from_url(target),
            url=target,
            summary=summary.text_or_placeholder(),
            key_points=key_points,
        )
