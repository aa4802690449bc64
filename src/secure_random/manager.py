"""Per-thread entropy source ownership.

Each :class:`EntropySourceManager` keeps one entropy source per thread in a
``threading.local`` cell. The source is built on the first
:meth:`~EntropySourceManager.acquire_for_current_thread` call on a thread and
reused for every later call on that thread. It is closed exactly once, by a
``weakref.finalize`` hook on its thread-local holder, when the owning thread
terminates (or, for threads still alive at that point, at interpreter exit).

No lock guards the sampling path: a thread only ever sees its own holder.
"""

from __future__ import annotations

import functools
import logging
import threading
import time
import weakref
from typing import TYPE_CHECKING

from secure_random.config import SecureRandomConfig
from secure_random.entropy.registry import EntropySourceRegistry
from secure_random.exceptions import ConfigValidationError, ResourceExhaustedError
from secure_random.logging.logger import LifecycleLogger
from secure_random.logging.types import SourceLifecycleEvent

if TYPE_CHECKING:
    from collections.abc import Callable

    from secure_random.entropy.base import EntropySource

logger = logging.getLogger("secure_random")


class _SourceHolder:
    """Thread-local slot owning one entropy source."""

    __slots__ = ("__weakref__", "source")

    def __init__(self, source: EntropySource) -> None:
        self.source = source


def _release(
    source: EntropySource,
    lifecycle: LifecycleLogger,
    thread_id: int,
    thread_name: str,
) -> None:
    """Close a thread's source once its holder is gone."""
    try:
        source.close()
    except Exception:  # Intentional: runs at thread exit, there is no caller to raise to
        logger.warning("Failed to close entropy source %r", source.name, exc_info=True)
    lifecycle.log_event(
        SourceLifecycleEvent(
            timestamp_ns=time.time_ns(),
            event="released",
            source_name=source.name,
            source_id=id(source),
            thread_id=thread_id,
            thread_name=thread_name,
            create_ms=0.0,
        )
    )


class EntropySourceManager:
    """Owns exactly one entropy source per thread.

    Args:
        config: Settings used to build each thread's source. ``None`` loads
            :class:`SecureRandomConfig` from the environment.
        source_factory: Zero-argument callable returning a fresh
            :class:`EntropySource`. Replaces the registry lookup; used to
            plug in alternative or scripted sources.

    Raises:
        ConfigValidationError: If ``entropy_source_type`` is not registered
            or ``log_level`` is invalid.
    """

    def __init__(
        self,
        config: SecureRandomConfig | None = None,
        source_factory: Callable[[], EntropySource] | None = None,
    ) -> None:
        self._config = config if config is not None else SecureRandomConfig()
        self._lifecycle = LifecycleLogger(self._config)

        if source_factory is None:
            # Resolve the source class now so a bad name fails here, not on a worker thread.
            try:
                EntropySourceRegistry.get(self._config.entropy_source_type)
            except KeyError as exc:
                raise ConfigValidationError(exc.args[0]) from exc
            source_factory = functools.partial(EntropySourceRegistry.build, self._config)

        self._factory = source_factory
        self._local = threading.local()

    @property
    def config(self) -> SecureRandomConfig:
        """The configuration every thread's source is built from."""
        return self._config

    @property
    def lifecycle(self) -> LifecycleLogger:
        """Logger receiving acquisition and release events."""
        return self._lifecycle

    def has_source(self) -> bool:
        """Whether the calling thread already owns a source. Never creates one."""
        return getattr(self._local, "holder", None) is not None

    def acquire_for_current_thread(self) -> EntropySource:
        """Return the calling thread's entropy source, creating it on first use.

        The returned source belongs to the calling thread. It must not be
        stored beyond the current call or handed to another thread.

        Returns:
            The thread's entropy source.

        Raises:
            ResourceExhaustedError: If the source cannot be constructed.
        """
        holder: _SourceHolder | None = getattr(self._local, "holder", None)
        if holder is not None:
            return holder.source
        return self._create_for_current_thread()

    def _create_for_current_thread(self) -> EntropySource:
        thread = threading.current_thread()
        thread_id = threading.get_ident()
        start = time.perf_counter()
        try:
            source = self._factory()
        except ResourceExhaustedError:
            raise
        except (OSError, MemoryError) as exc:
            raise ResourceExhaustedError(f"Cannot create entropy source: {exc}") from exc
        create_ms = (time.perf_counter() - start) * 1000.0

        holder = _SourceHolder(source)
        weakref.finalize(holder, _release, source, self._lifecycle, thread_id, thread.name)
        self._local.holder = holder

        self._lifecycle.log_event(
            SourceLifecycleEvent(
                timestamp_ns=time.time_ns(),
                event="acquired",
                source_name=source.name,
                source_id=id(source),
                thread_id=thread_id,
                thread_name=thread.name,
                create_ms=create_ms,
            )
        )
        return source


_default_manager: EntropySourceManager | None = None
_default_lock = threading.Lock()


def get_default_manager() -> EntropySourceManager:
    """Return the process-wide manager, creating it from the environment once."""
    global _default_manager
    if _default_manager is None:
        with _default_lock:
            if _default_manager is None:
                _default_manager = EntropySourceManager()
    return _default_manager


def acquire_for_current_thread() -> EntropySource:
    """Return the calling thread's source from the process-wide manager."""
    return get_default_manager().acquire_for_current_thread()
