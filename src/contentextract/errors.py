"""Error taxonomy for the extraction pipeline.

Every error carries the HTTP status it maps to and a generic ``public_message``
that is safe to return to callers. The exception's own message holds the
internal detail and is only logged.
"""

from __future__ import annotations

__all__ = [
    "ContentExtractError",
    "FetchError",
    "InvalidInputError",
    "SummarizationError",
]


class ContentExtractError(Exception):
    """Base for all pipeline errors."""

    status_code = 500
    public_message = "Internal server error."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.public_message)


class InvalidInputError(ContentExtractError):
    """The submitted URL is missing or malformed."""

    status_code = 400
    public_message = "Invalid URL format."


class FetchError(ContentExtractError):
    """The target document could not be retrieved or reduced to text."""

    public_message = "Failed to extract content from the URL."


class SummarizationError(ContentExtractError):
    """The summarization provider failed or stayed unavailable after retries."""

    public_message = "Failed to generate summary."

    def __init__(self, message: str | None = None, *, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status
