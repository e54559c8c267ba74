"""Global configuration, logging setup, and runtime settings."""

from __future__ import annotations

import json as _json
import os
import logging
import logging.handlers
import re
from dataclasses import dataclass
from datetime import datetime, timezone

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from .constants import (
    DEFAULT_API_URL,
    DEFAULT_CANDIDATE_PAGE_SIZE,
    DEFAULT_CYCLE_TIMEOUT_SECONDS,
    DEFAULT_ERROR_TAG,
    DEFAULT_IGNORED_TAGS,
    DEFAULT_TAG_MAX_DISTANCE,
)
from .exceptions import ConfigError

load_dotenv()
console = Console()


def _env_bool(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)).strip())
    except ValueError:
        return default


def _env_csv(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    return tuple(part.strip().lower() for part in raw.split(",") if part.strip())


# --- File Paths ---
LOG_DIR = os.getenv("LOG_DIR", "").strip() or os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
LOG_FILE = os.path.join(LOG_DIR, "autotagger.log")
LOG_FILE_JSON = os.path.join(LOG_DIR, "autotagger.jsonl")

# --- Structured JSON Logging ---
STRUCTURED_LOG_ENABLED = _env_bool("STRUCTURED_LOG", "1")

_RICH_MARKUP_RE = re.compile(r"\[/?[a-z_]+(?:\s[^\]]+)?\]")


class _JsonLineFormatter(logging.Formatter):
    """Formats log records as single-line JSON (JSONL) for monitoring tools."""

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()
        # Strip Rich markup tags like [bold], [cyan], [/cyan] etc.
        msg = _RICH_MARKUP_RE.sub("", msg)
        entry: dict = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": msg,
        }
        for key in ("raindrop_id", "outcome", "cycle", "duration_ms"):
            val = getattr(record, key, None)
            if val is not None:
                entry[key] = val
        return _json.dumps(entry, ensure_ascii=False, default=str)


# --- Logging ---
_LOG_LEVEL_MAP = {"DEBUG": logging.DEBUG, "INFO": logging.INFO, "WARNING": logging.WARNING, "ERROR": logging.ERROR}
_LOG_LEVEL = _LOG_LEVEL_MAP.get(os.getenv("LOG_LEVEL", "INFO").strip().upper(), logging.INFO)

_file_handler = logging.handlers.RotatingFileHandler(
    LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8",
)
_file_handler.setFormatter(logging.Formatter("%(asctime)s  %(message)s", datefmt="%Y-%m-%d %H:%M:%S"))

_handlers: list[logging.Handler] = [
    RichHandler(console=console, show_path=False, markup=True, rich_tracebacks=True),
    _file_handler,
]

if STRUCTURED_LOG_ENABLED:
    _json_handler = logging.handlers.RotatingFileHandler(
        LOG_FILE_JSON, maxBytes=10 * 1024 * 1024, backupCount=3, encoding="utf-8",
    )
    _json_handler.setFormatter(_JsonLineFormatter())
    _handlers.append(_json_handler)

logging.basicConfig(
    level=_LOG_LEVEL,
    format="%(asctime)s  %(message)s",
    datefmt="%H:%M:%S",
    handlers=_handlers,
)
log = logging.getLogger("autotagger")

# --- Version ---
__version__ = "1.0.0"

# --- Raindrop.io ---
RD_TOKEN = os.getenv("RD_TOKEN", "").strip()
RAINDROP_API_URL = os.getenv("RAINDROP_API_URL", DEFAULT_API_URL).strip().rstrip("/")
CANDIDATE_PAGE_SIZE = _env_int("CANDIDATE_PAGE_SIZE", DEFAULT_CANDIDATE_PAGE_SIZE)
REQUEST_TIMEOUT = _env_int("REQUEST_TIMEOUT", 30)

# --- Tagging policy ---
IGNORED_TAGS = _env_csv("IGNORED_TAGS", DEFAULT_IGNORED_TAGS)
ERROR_TAG = os.getenv("ERROR_TAG", DEFAULT_ERROR_TAG).strip() or DEFAULT_ERROR_TAG
TAG_MAX_DISTANCE = _env_int("TAG_MAX_DISTANCE", DEFAULT_TAG_MAX_DISTANCE)
DRY_RUN = _env_bool("DRY_RUN", "0")

# --- Loop ---
CYCLE_TIMEOUT_SECONDS = _env_int("CYCLE_TIMEOUT_SECONDS", DEFAULT_CYCLE_TIMEOUT_SECONDS)
if CYCLE_TIMEOUT_SECONDS <= 0:
    CYCLE_TIMEOUT_SECONDS = DEFAULT_CYCLE_TIMEOUT_SECONDS


@dataclass(frozen=True)
class Settings:
    """Explicit runtime configuration handed to the client and the workflow."""
    token: str = ""
    api_url: str = DEFAULT_API_URL
    page_size: int = DEFAULT_CANDIDATE_PAGE_SIZE
    request_timeout: int = 30
    ignored_tags: tuple[str, ...] = DEFAULT_IGNORED_TAGS
    error_tag: str = DEFAULT_ERROR_TAG
    tag_max_distance: int = DEFAULT_TAG_MAX_DISTANCE
    cycle_interval_sec: int = DEFAULT_CYCLE_TIMEOUT_SECONDS
    dry_run: bool = False

    def __post_init__(self):
        # Membership checks are case-insensitive; store the set lowercase.
        object.__setattr__(self, "ignored_tags", tuple(t.lower() for t in self.ignored_tags))

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            token=RD_TOKEN,
            api_url=RAINDROP_API_URL,
            page_size=CANDIDATE_PAGE_SIZE,
            request_timeout=REQUEST_TIMEOUT,
            ignored_tags=IGNORED_TAGS,
            error_tag=ERROR_TAG,
            tag_max_distance=TAG_MAX_DISTANCE,
            cycle_interval_sec=CYCLE_TIMEOUT_SECONDS,
            dry_run=DRY_RUN,
        )

    def require_token(self) -> str:
        if not self.token:
            raise ConfigError("RD_TOKEN not found in environment variables")
        return self.token


def validate_config(settings: Settings | None = None) -> bool:
    """Validate configuration at startup and warn about potential issues."""
    settings = settings or Settings.from_env()
    warnings = []
    if not settings.token:
        warnings.append("RD_TOKEN not set - every cycle will fail until it is configured")
    if not settings.api_url.startswith(("http://", "https://")):
        warnings.append(f"RAINDROP_API_URL='{settings.api_url}' has no http(s):// prefix")
    if settings.cycle_interval_sec < 5:
        warnings.append(f"CYCLE_TIMEOUT_SECONDS={settings.cycle_interval_sec}s is very short - API rate limits likely")
    if settings.tag_max_distance < 0:
        warnings.append(f"TAG_MAX_DISTANCE={settings.tag_max_distance} is negative - no suggestion will be dropped")
    if settings.page_size < 1 or settings.page_size > 50:
        warnings.append(f"CANDIDATE_PAGE_SIZE={settings.page_size} outside the range the API accepts (1-50)")
    for w in warnings:
        log.warning(f"[yellow]Config:[/yellow] {w}")
    return len(warnings) == 0
