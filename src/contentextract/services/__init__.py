"""Service layer entry points for Content Extract."""

from __future__ import annotations

from .extractor import TextExtractor  # noqa: F401
from .keypoints import derive_key_points  # noqa: F401
from .pipeline import ExtractionService  # noqa: F401
from .summarizer import SummarizationClient  # noqa: F401

__all__ = ["ExtractionService", "SummarizationClient", "TextExtractor", "derive_key_points"]
