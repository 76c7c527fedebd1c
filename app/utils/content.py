"""Helpers for deriving post fields from post content."""

from typing import Iterable, List, Optional

PREVIEW_SUFFIX = "..."


def truncate_content(text: Optional[str], max_length: int = 500) -> str:
    """
    Build a post preview from its content.

    Text of at most `max_length` characters is returned unchanged. Longer
    text is cut at the last space inside the first `max_length` characters
    (or hard-cut when there is none) and suffixed with "...".
    """
    if not text or not isinstance(text, str):
        return ""

    if len(text) <= max_length:
        return text

    truncated = text[:max_length]
    last_space = truncated.rfind(" ")
    if last_space == -1:
        return truncated + PREVIEW_SUFFIX

    return truncated[:last_space] + PREVIEW_SUFFIX


def normalize_labels(labels: Optional[Iterable[str]]) -> List[str]:
    """Trim captions, drop empty ones and de-duplicate keeping first-seen order."""
    if not labels:
        return []
    seen = []
    for label in labels:
        caption = (label or "").strip()
        if caption and caption not in seen:
            seen.append(caption)
    return seen


def parse_label_query(raw: Optional[str]) -> List[str]:
    """Parse a comma-separated `labels` query parameter."""
    if not raw:
        return []
    return normalize_labels(raw.split(","))
