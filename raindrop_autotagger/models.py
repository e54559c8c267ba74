"""Data models and dataclasses."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone

# Sort key for raindrops whose creation time is missing or unparseable
OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _parse_created(value) -> datetime:
    """Parse the API's ISO-8601 timestamp ("2024-05-01T10:00:00.000Z") into an aware datetime."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    text = str(value or "").strip()
    if not text:
        return OLDEST
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return OLDEST
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


@dataclass
class Raindrop:
    """A bookmark as returned by the Raindrop.io API."""
    id: int
    title: str = ""
    link: str = ""
    created: datetime = OLDEST
    tags: list[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> Raindrop:
        tags = data.get("tags")
        return cls(
            id=data["_id"],
            title=str(data.get("title") or ""),
            link=str(data.get("link") or ""),
            created=_parse_created(data.get("created")),
            tags=[str(t) for t in tags] if isinstance(tags, list) else [],
        )


class CycleOutcome(str, enum.Enum):
    """Terminal state of one tagging cycle."""
    SUCCESS = "success"
    NO_CANDIDATES = "no_candidates"
    ERROR_MARKED = "error_marked"
    ERROR_MARK_FAILED = "error_mark_failed"


@dataclass
class CycleResult:
    """What a single cycle did, for logging and the run summary."""
    outcome: CycleOutcome
    raindrop: Raindrop | None = None
    suggestions: list[str] = field(default_factory=list)
    accepted_tags: list[str] = field(default_factory=list)
    reason: str = ""
