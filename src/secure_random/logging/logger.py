"""Lifecycle logger for per-thread entropy sources.

Uses the standard ``logging`` module with the ``"secure_random"`` logger.
No ``print()`` statements. Supports three verbosity levels and an
in-memory diagnostic mode for post-hoc analysis.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

from secure_random.config import check_log_level

if TYPE_CHECKING:
    from secure_random.config import SecureRandomConfig
    from secure_random.logging.types import SourceLifecycleEvent

logger = logging.getLogger("secure_random")


class LifecycleLogger:
    """Logs entropy source acquisition and release.

    Log levels:
        ``"none"``: No logging output. Events are still stored if
        ``diagnostic_mode=True``.

        ``"summary"``: One DEBUG line per event (event, source, thread).

        ``"full"``: DEBUG JSON dump of all event fields.

    Diagnostic mode stores all events in memory. Events arrive from many
    threads, so the store is guarded by a lock; sampling never touches it.
    """

    def __init__(self, config: SecureRandomConfig) -> None:
        """Initialize the logger from configuration.

        Args:
            config: Configuration providing ``log_level`` and ``diagnostic_mode``.

        Raises:
            ConfigValidationError: If ``log_level`` is not a known level.
        """
        check_log_level(config.log_level)
        self._log_level = config.log_level
        self._diagnostic_mode = config.diagnostic_mode
        self._events: list[SourceLifecycleEvent] = []
        self._lock = threading.Lock()

    def log_event(self, event: SourceLifecycleEvent) -> None:
        """Log a single lifecycle event.

        Args:
            event: Immutable record of the acquisition or release.
        """
        if self._diagnostic_mode:
            with self._lock:
                self._events.append(event)

        if self._log_level == "none":
            return

        if self._log_level == "summary":
            logger.debug(
                "entropy source %s: source=%s id=%#x thread=%s(%d) create=%.3fms",
                event.event,
                event.source_name,
                event.source_id,
                event.thread_name,
                event.thread_id,
                event.create_ms,
            )
        elif self._log_level == "full":
            logger.debug("lifecycle_event: %s", json.dumps(asdict(event)))

    def get_diagnostic_data(self) -> list[SourceLifecycleEvent]:
        """Return all stored events (requires ``diagnostic_mode=True``).

        Returns:
            List of all events logged so far. Empty if diagnostic_mode is False.
        """
        with self._lock:
            return list(self._events)

    def get_summary_stats(self) -> dict[str, Any]:
        """Compute summary statistics over all stored events.

        Returns:
            Dictionary with aggregate stats, or empty dict if no events.
        """
        events = self.get_diagnostic_data()
        if not events:
            return {}

        acquired = [e for e in events if e.event == "acquired"]
        released = [e for e in events if e.event == "released"]
        create_times = [e.create_ms for e in acquired]
        return {
            "total_events": len(events),
            "acquired": len(acquired),
            "released": len(released),
            "live": len(acquired) - len(released),
            "threads": len({e.thread_id for e in acquired}),
            "mean_create_ms": sum(create_times) / len(create_times) if create_times else 0.0,
            "max_create_ms": max(create_times, default=0.0),
        }
