"""Utility functions: tag normalization, edit distance, near-duplicate filtering."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from .constants import DEFAULT_TAG_MAX_DISTANCE

_log = logging.getLogger("autotagger")


# ---------------------------------------------------------------------------
# Text normalization
# ---------------------------------------------------------------------------

def _normalize_tag_name(value: str) -> str:
    return (value or "").lower()


def _format_tags(tags: Sequence[str]) -> str:
    return ", ".join(tags) if tags else "-"


# ---------------------------------------------------------------------------
# String similarity
# ---------------------------------------------------------------------------

def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance: minimum single-character insertions, deletions and
    substitutions turning ``a`` into ``b``. Case-sensitive."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    # Two-row dynamic programming over the shorter string
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ch_a in enumerate(a, start=1):
        current = [i]
        for j, ch_b in enumerate(b, start=1):
            if ch_a == ch_b:
                current.append(previous[j - 1])
            else:
                current.append(min(
                    previous[j - 1] + 1,  # substitution
                    current[j - 1] + 1,   # insertion
                    previous[j] + 1,      # deletion
                ))
        previous = current
    return previous[-1]


# ---------------------------------------------------------------------------
# Tag deduplication
# ---------------------------------------------------------------------------

def deduplicate_tags(tags: Iterable[str], max_distance: int = DEFAULT_TAG_MAX_DISTANCE) -> list[str]:
    """Drop near-duplicate tags, keeping the first occurrence.

    A tag is discarded when its lowercase form is within ``max_distance`` edits
    of any already accepted tag. The threshold is absolute, not scaled by tag
    length, and acceptance order decides which spelling survives.
    """
    accepted: list[str] = []
    for tag in tags:
        key = _normalize_tag_name(tag)
        near = next(
            (a for a in accepted if edit_distance(key, _normalize_tag_name(a)) <= max_distance),
            None,
        )
        if near is not None:
            _log.debug("Tag dropped as near-duplicate: %r ~ %r", tag, near)
            continue
        accepted.append(tag)
    return accepted


def filter_ignored_tags(tags: Iterable[str], ignored_tags: Iterable[str]) -> list[str]:
    """Remove tags that never count as real tags (e.g. import markers)."""
    ignored = {_normalize_tag_name(t) for t in ignored_tags}
    return [t for t in tags if _normalize_tag_name(t) not in ignored]
