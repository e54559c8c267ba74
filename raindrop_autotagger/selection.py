"""Untagged raindrop selection across overlapping candidate queries."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .models import Raindrop
from .utils import _normalize_tag_name


def needs_tagging(raindrop: Raindrop, ignored_tags: Iterable[str]) -> bool:
    """True when the raindrop has no tags or only ignored (automation) tags."""
    tags = raindrop.tags or []
    if not tags:
        return True
    ignored = {_normalize_tag_name(t) for t in ignored_tags}
    return all(_normalize_tag_name(t) in ignored for t in tags)


def flatten_unique(batches: Iterable[Sequence[Raindrop]]) -> list[Raindrop]:
    """Flatten batches in source order, keeping the first raindrop per id."""
    seen: set = set()
    unique: list[Raindrop] = []
    for batch in batches:
        for raindrop in batch:
            if raindrop.id in seen:
                continue
            seen.add(raindrop.id)
            unique.append(raindrop)
    return unique


def select_target(batches: Iterable[Sequence[Raindrop]], ignored_tags: Iterable[str]) -> Raindrop | None:
    """Pick the most recently created raindrop that still needs tagging.

    Ties on ``created`` keep the raindrop seen first.
    """
    ignored = tuple(ignored_tags)
    candidates = [r for r in flatten_unique(batches) if needs_tagging(r, ignored)]
    if not candidates:
        return None
    # max() returns the first of equal maxima
    return max(candidates, key=lambda r: r.created)
