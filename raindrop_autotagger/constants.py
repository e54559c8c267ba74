"""Static defaults for the Raindrop.io API and the tagging policy."""

from __future__ import annotations

# --- Raindrop.io REST API ---
DEFAULT_API_URL = "https://api.raindrop.io/rest/v1"
# Collection 0 is "all raindrops" (every collection except Trash)
ALL_COLLECTIONS_ID = 0
CANDIDATE_SORT = "-created"
DEFAULT_CANDIDATE_PAGE_SIZE = 50
UNTAGGED_SEARCH = "notag:true"

# --- Tagging policy ---
# Tags written by feed-import automations; an item carrying only these is still untagged
DEFAULT_IGNORED_TAGS = ("ifttt", "reddit")
DEFAULT_ERROR_TAG = "#error"
DEFAULT_TAG_MAX_DISTANCE = 2

# --- Loop ---
DEFAULT_CYCLE_TIMEOUT_SECONDS = 60
