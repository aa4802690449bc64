"""Lifecycle logging subsystem for secure-random.

Provides immutable per-thread source lifecycle records and a configurable
logger that supports none/summary/full verbosity and in-memory diagnostic mode.
"""

from secure_random.logging.logger import LifecycleLogger
from secure_random.logging.types import SourceLifecycleEvent

__all__ = [
    "LifecycleLogger",
    "SourceLifecycleEvent",
]
