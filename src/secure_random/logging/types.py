"""Data types for the lifecycle logging subsystem."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLifecycleEvent:
    """Immutable record of a per-thread entropy source being acquired or released.

    Attributes:
        timestamp_ns: Wall-clock time of the event (nanoseconds since epoch).
        event: ``'acquired'`` or ``'released'``.
        source_name: Name of the entropy source (e.g. ``'system'``).
        source_id: ``id()`` of the source instance, unique while it is alive.
        thread_id: ``threading.get_ident()`` of the owning thread.
        thread_name: Name of the owning thread.
        create_ms: Time spent constructing the source (0.0 for releases).
    """

    timestamp_ns: int
    event: str
    source_name: str
    source_id: int
    thread_id: int
    thread_name: str
    create_ms: float
