"""Request and response models used across the application."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_LANGUAGE = "en"
DEFAULT_TAGS = ("ai-generated",)
SUMMARY_PLACEHOLDER = "Summary not available."


def _utc_timestamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


class ExtractionRequest(BaseModel):
    """Body accepted by ``POST /api/extract``."""

    url: Optional[Any] = None


class ExtractionResponse(BaseModel):
    """Payload returned for a processed URL."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    url: str
    summary: str
    key_points: List[str] = Field(default_factory=list, alias="keyPoints")
    language: str = DEFAULT_LANGUAGE
    tags: List[str] = Field(default_factory=lambda: list(DEFAULT_TAGS))
    extracted_at: str = Field(default_factory=_utc_timestamp, alias="extractedAt")


@dataclass(slots=True)
class ExtractedPage:
    """Plain-text excerpt of a fetched document."""

    url: str
    title: str
    text: str


@dataclass(slots=True)
class SummaryResult:
    """Outcome of a summarization call. ``summary_text`` is ``None`` when the provider gave none."""

    summary_text: str | None

    def text_or_placeholder(self) -> str:
        return self.summary_text or SUMMARY_PLACEHOLDER
