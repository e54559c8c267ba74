"""Raindrop.io REST API client."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import requests

from .config import Settings, log
from .constants import ALL_COLLECTIONS_ID, CANDIDATE_SORT, UNTAGGED_SEARCH
from .exceptions import RaindropAPIError, SuggestionError
from .models import Raindrop


def _http_error_detail(exc: Exception) -> str:
    response = getattr(exc, "response", None)
    if response is None:
        return str(exc)
    status = getattr(response, "status_code", "?")
    reason = (getattr(response, "reason", "") or "").strip()
    return f"{status} {reason}".strip()


class RaindropClient:
    """Client for the parts of the Raindrop.io REST API the tagger needs."""

    def __init__(self, settings: Settings, session: requests.Session | None = None):
        self.url = settings.api_url.rstrip("/")
        self.page_size = settings.page_size
        self.timeout = settings.request_timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {settings.require_token()}",
            "Content-Type": "application/json",
        })

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.url}/{path.lstrip('/')}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
            resp.raise_for_status()
            data = resp.json()
        except requests.exceptions.RequestException as exc:
            status = getattr(getattr(exc, "response", None), "status_code", None)
            raise RaindropAPIError(
                f"{method} {path} failed: {_http_error_detail(exc)}",
                status_code=status,
                detail=str(exc),
            ) from exc
        except ValueError as exc:
            raise RaindropAPIError(f"{method} {path} returned invalid JSON", detail=str(exc)) from exc
        if not isinstance(data, dict):
            raise RaindropAPIError(f"{method} {path} returned unexpected payload: {type(data).__name__}")
        return data

    # --- Read ---
    def fetch_raindrops(self, search: str) -> list[Raindrop]:
        """Newest-first page of raindrops across all collections matching ``search``."""
        data = self._request(
            "GET",
            f"raindrops/{ALL_COLLECTIONS_ID}",
            params={"sort": CANDIDATE_SORT, "perpage": self.page_size, "search": search},
        )
        return [Raindrop.from_api(item) for item in data.get("items") or []]

    def fetch_candidate_batches(self, ignored_tags: tuple[str, ...]) -> list[list[Raindrop]]:
        """Run the untagged query and one query per ignored tag in parallel.

        Batches come back in query order once every request has finished;
        the first failure in that order is raised.
        """
        searches = [UNTAGGED_SEARCH] + [f"#{tag}" for tag in ignored_tags]
        with ThreadPoolExecutor(max_workers=len(searches)) as pool:
            futures = [pool.submit(self.fetch_raindrops, search) for search in searches]
        return [future.result() for future in futures]

    def get_tag_suggestions(self, raindrop_id: int) -> list[str]:
        """AI tag suggestions for a raindrop; empty on any failure."""
        try:
            data = self._request("GET", f"raindrop/{raindrop_id}/suggest")
            item = data.get("item")
            if item is not None and not isinstance(item, dict):
                raise SuggestionError(f"Unexpected suggestion payload for raindrop {raindrop_id}")
            tags = (item or {}).get("tags") or []
            if not isinstance(tags, list):
                raise SuggestionError(f"Unexpected suggestion tags for raindrop {raindrop_id}: {type(tags).__name__}")
            return [str(t) for t in tags]
        except RaindropAPIError as exc:
            log.error(f"Error getting tag suggestions: {exc}", extra={"raindrop_id": raindrop_id})
            return []

    # --- Write ---
    def update_tags(self, raindrop_id: int, tags: list[str]) -> dict:
        """Replace the full tag set of a raindrop."""
        data = self._request("PUT", f"raindrop/{raindrop_id}", json={"tags": list(tags)})
        if data.get("result") is False:
            raise RaindropAPIError(
                f"PUT raindrop/{raindrop_id} rejected: {data.get('errorMessage') or data.get('error') or 'result=false'}",
                detail=str(data),
            )
        return data
