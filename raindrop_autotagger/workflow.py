"""Tagging workflow: pick one untagged raindrop, tag it, or mark it as failed."""

from __future__ import annotations

from rich.markup import escape

from .client import RaindropClient
from .config import Settings, log
from .exceptions import RaindropAPIError
from .models import OLDEST, CycleOutcome, CycleResult, Raindrop
from .selection import select_target
from .utils import _format_tags, deduplicate_tags, filter_ignored_tags


def _format_created(raindrop: Raindrop) -> str:
    if raindrop.created == OLDEST:
        return "unknown"
    return raindrop.created.astimezone().strftime("%Y-%m-%d %H:%M:%S")


class TaggingWorkflow:
    """Runs one tagging cycle against the bookmark service.

    Only candidate-fetch and configuration failures leave ``run_cycle``;
    suggestion and update failures end in one of the error outcomes.
    """

    def __init__(self, settings: Settings, client: RaindropClient | None = None):
        self.settings = settings
        self.client = client

    def _get_client(self) -> RaindropClient:
        self.settings.require_token()
        if self.client is None:
            self.client = RaindropClient(self.settings)
        return self.client

    def find_target(self) -> Raindrop | None:
        client = self._get_client()
        batches = client.fetch_candidate_batches(self.settings.ignored_tags)
        return select_target(batches, self.settings.ignored_tags)

    def accepted_tags(self, suggestions: list[str]) -> list[str]:
        """Near-duplicates removed first, then ignored tags."""
        deduplicated = deduplicate_tags(suggestions, self.settings.tag_max_distance)
        return filter_ignored_tags(deduplicated, self.settings.ignored_tags)

    def run_cycle(self) -> CycleResult:
        target = self.find_target()
        if target is None:
            log.info("No untagged raindrops found")
            return CycleResult(CycleOutcome.NO_CANDIDATES)

        log.info(f"Found untagged raindrop: [bold]\"{escape(target.title)}\"[/bold]", extra={"raindrop_id": target.id})
        log.info(f"  URL: {escape(target.link)}")
        log.info(f"  Created: {_format_created(target)}")

        log.info("Getting AI tag suggestions...")
        suggestions = self.client.get_tag_suggestions(target.id)
        if not suggestions:
            log.warning("[red]No tag suggestions found[/red], marking with error tag to prevent retry...")
            return self._mark_error(target, suggestions, "no_suggestions")

        log.info(f"Original tags ({len(suggestions)}): {escape(_format_tags(suggestions))}")
        tags = self.accepted_tags(suggestions)
        log.info(f"Accepted tags ({len(tags)}): {escape(_format_tags(tags))}")

        log.info("Applying tags...")
        try:
            self._write_tags(target, tags)
        except RaindropAPIError as exc:
            log.error(f"[red]Failed to apply tags[/red]: {escape(str(exc))}", extra={"raindrop_id": target.id})
            log.warning("Marking with error tag to prevent retry...")
            return self._mark_error(target, suggestions, "update_failed", accepted=tags)

        log.info("[green]Raindrop successfully tagged![/green]",
                 extra={"raindrop_id": target.id, "outcome": CycleOutcome.SUCCESS.value})
        return CycleResult(CycleOutcome.SUCCESS, target, suggestions, tags)

    def _write_tags(self, target: Raindrop, tags: list[str]):
        if self.settings.dry_run:
            log.info(f"[yellow]DRY RUN[/yellow]: would set tags of #{target.id} to {escape(_format_tags(tags))}")
            return
        self.client.update_tags(target.id, tags)

    def _mark_error(self, target: Raindrop, suggestions: list[str], reason: str,
                    accepted: list[str] | None = None) -> CycleResult:
        """Tag the raindrop with the sentinel so it is not selected again."""
        error_tag = self.settings.error_tag
        try:
            self._write_tags(target, [error_tag])
        except RaindropAPIError as exc:
            log.error(
                f"[red]Could not even apply {error_tag} tag[/red] - this raindrop may be stuck: {escape(str(exc))}",
                extra={"raindrop_id": target.id, "outcome": CycleOutcome.ERROR_MARK_FAILED.value},
            )
            return CycleResult(CycleOutcome.ERROR_MARK_FAILED, target, suggestions, accepted or [], reason)
        log.info(f"Added {error_tag} tag to prevent future attempts",
                 extra={"raindrop_id": target.id, "outcome": CycleOutcome.ERROR_MARKED.value})
        return CycleResult(CycleOutcome.ERROR_MARKED, target, suggestions, accepted or [], reason)
