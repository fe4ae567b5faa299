"""Heuristic key-point selection from plain text."""

from __future__ import annotations

from typing import Iterable, List

__all__ = [
    "derive_key_points",
    "split_sentences",
    "FALLBACK_KEY_POINT",
    "EXCLUDED_SUBSTRINGS",
    "MIN_SENTENCE_LENGTH",
    "MIN_KEY_POINTS",
    "MAX_KEY_POINTS",
]

FALLBACK_KEY_POINT = "For more details, visit the original article."
# Matched case-insensitively.
EXCLUDED_SUBSTRINGS = ("advertisement", "summary")
MIN_SENTENCE_LENGTH = 50
MIN_KEY_POINTS = 3
MAX_KEY_POINTS = 5


def split_sentences(text: str) -> List[str]:
    """Split on every period and return the stripped, non-empty segments."""

    return [segment.strip() for segment in text.split(".") if segment.strip()]


def _is_candidate(sentence: str, excluded: Iterable[str], min_length: int) -> bool:
    if len(sentence) <= min_length:
        return False
    lowered = sentence.lower()
    return not any(marker.lower() in lowered for marker in excluded)


def _overlaps(candidate: str, accepted: Iterable[str]) -> bool:
    lowered = candidate.lower()
    for point in accepted:
        other = point.lower()
        if lowered in other or other in lowered:
            return True
    return False


def derive_key_points(
    text: str,
    *,
    excluded: Iterable[str] = EXCLUDED_SUBSTRINGS,
    min_length: int = MIN_SENTENCE_LENGTH,
    fallback: str = FALLBACK_KEY_POINT,
) -> List[str]:
    """Return between one and five distinct sentences from ``text``.

    Sentences of ``min_length`` characters or fewer, and sentences containing
    one of the ``excluded`` markers, are dropped. A sentence is also dropped
    when it and an earlier key point contain one another (ignoring case).
    ``fallback`` is appended when fewer than three sentences survive.
    """

    excluded = tuple(excluded)
    key_points: List[str] = []
    for sentence in split_sentences(text or ""):
        if not _is_candidate(sentence, excluded, min_length):
            continue
        if _overlaps(sentence, key_points):
            continue
        key_points.append(sentence)

    if len(key_points) < MIN_KEY_POINTS:
        key_points.append(fallback)

    return key_points[:MAX_KEY_POINTS]
