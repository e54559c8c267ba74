"""Main application: fixed-interval tagging loop and entry point."""

from __future__ import annotations

import signal
import sys
import time
from collections import Counter
from datetime import datetime

from rich.markup import escape

from .config import (
    CYCLE_TIMEOUT_SECONDS,
    LOG_FILE,
    Settings,
    __version__,
    console,
    log,
    validate_config,
)
from .models import CycleResult
from .workflow import TaggingWorkflow


class CycleRunner:
    """Runs the workflow one cycle at a time with a fixed pause in between.

    A failing cycle is logged and the loop goes on; only Ctrl+C / SIGTERM stop it.
    """

    def __init__(self, workflow: TaggingWorkflow, interval_sec: int = CYCLE_TIMEOUT_SECONDS):
        self.workflow = workflow
        self.interval_sec = interval_sec
        self.cycles = 0
        self.errors = 0
        self.outcomes: Counter = Counter()

    def run_once(self) -> CycleResult | None:
        """Run a single cycle; returns None when it failed."""
        self.cycles += 1
        started = time.monotonic()
        log.info(f"[cyan]--- Starting tag cycle at {datetime.now():%Y-%m-%d %H:%M:%S} ---[/cyan]",
                 extra={"cycle": self.cycles})
        try:
            result = self.workflow.run_cycle()
        except Exception as exc:
            self.errors += 1
            log.error(
                f"[red]Error during tag cycle[/red]: {escape(str(exc))}",
                extra={"cycle": self.cycles, "duration_ms": int((time.monotonic() - started) * 1000)},
            )
            return None
        self.outcomes[result.outcome.value] += 1
        log.info(
            f"--- Cycle completed at {datetime.now():%Y-%m-%d %H:%M:%S} ({result.outcome.value}) ---",
            extra={
                "cycle": self.cycles,
                "outcome": result.outcome.value,
                "duration_ms": int((time.monotonic() - started) * 1000),
            },
        )
        return result

    def run(self, max_cycles: int | None = None):
        """Loop until interrupted, or for ``max_cycles`` cycles."""
        log.info(f"Starting auto-tag loop with {self.interval_sec} second intervals...")
        try:
            while True:
                self.run_once()
                if max_cycles is not None and self.cycles >= max_cycles:
                    break
                log.info(f"Waiting {self.interval_sec} seconds before next cycle...")
                time.sleep(self.interval_sec)
        except KeyboardInterrupt:
            log.info("Auto-tag loop stopped by user")
            console.print("[yellow]Auto-tag loop stopped.[/yellow]")
        finally:
            log.info(f"Run summary: {self.summary()}")

    def summary(self) -> dict:
        return {
            "cycles": self.cycles,
            "errors": self.errors,
            **dict(self.outcomes),
        }


def _setup_signal_handlers():
    """Turn SIGTERM into KeyboardInterrupt so container stops end the loop cleanly."""
    def _handle_signal(signum, frame):
        log.warning(f"Signal received: {signal.Signals(signum).name} - shutting down...")
        raise KeyboardInterrupt
    try:
        signal.signal(signal.SIGTERM, _handle_signal)
    except (OSError, ValueError):
        pass


def main():
    """Start the loop, or run a single cycle with --once."""
    settings = Settings.from_env()
    log.info("=" * 40)
    log.info(f"[bold]Raindrop Auto-Tagger v{__version__}[/bold]")
    log.info(f"  Python: {sys.version.split()[0]}")
    log.info(f"  API: {settings.api_url}")
    log.info(f"  Interval: {settings.cycle_interval_sec}s")
    log.info(f"  Ignored tags: {', '.join(settings.ignored_tags) or '-'}")
    log.info(f"  Dry run: {'yes' if settings.dry_run else 'no'}")
    log.info(f"  Log file: {LOG_FILE}")
    log.info("=" * 40)
    validate_config(settings)
    _setup_signal_handlers()

    runner = CycleRunner(TaggingWorkflow(settings), settings.cycle_interval_sec)
    runner.run(max_cycles=1 if "--once" in sys.argv else None)
    log.info("Raindrop Auto-Tagger stopped")


if __name__ == "__main__":
    main()
