"""Shared pytest fixtures for secure-random tests.

Provides quiet configurations, a fresh manager/sampler pair per test and a
factory for samplers backed by a scripted entropy source, so the
deterministic branches can be driven byte by byte.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from secure_random.config import SecureRandomConfig
from secure_random.entropy.base import EntropySource
from secure_random.exceptions import ResourceExhaustedError
from secure_random.manager import EntropySourceManager
from secure_random.sampler import Sampler


class ScriptedSource(EntropySource):
    """Test double: hands out a fixed byte script, then fails."""

    def __init__(self, script: bytes) -> None:
        self._script = bytearray(script)

    @property
    def name(self) -> str:
        return "scripted"

    @property
    def is_available(self) -> bool:
        return not self._closed

    @property
    def remaining(self) -> int:
        return len(self._script)

    def get_random_bytes(self, n: int) -> bytes:
        if n > len(self._script):
            raise ResourceExhaustedError("script exhausted")
        chunk = bytes(self._script[:n])
        del self._script[:n]
        return chunk

    def close(self) -> None:
        self._closed = True


@pytest.fixture
def silent_config() -> SecureRandomConfig:
    """Return a config with no lifecycle logging."""
    return SecureRandomConfig(log_level="none")


@pytest.fixture
def diagnostic_config() -> SecureRandomConfig:
    """Return a config with full logging and in-memory lifecycle events."""
    return SecureRandomConfig(log_level="full", diagnostic_mode=True)


@pytest.fixture
def manager(silent_config: SecureRandomConfig) -> EntropySourceManager:
    """Return a fresh manager using the default ``system`` source."""
    return EntropySourceManager(silent_config)


@pytest.fixture
def sampler(manager: EntropySourceManager) -> Sampler:
    """Return a sampler bound to the per-test manager."""
    return Sampler(manager)


@pytest.fixture
def scripted_sampler(silent_config: SecureRandomConfig) -> Callable[[bytes], Sampler]:
    """Return a factory building a sampler whose thread source replays *script*.

    Any draw beyond the end of the script raises ResourceExhaustedError,
    which also proves that branches expected to draw nothing do not.
    """

    def factory(script: bytes) -> Sampler:
        manager = EntropySourceManager(
            silent_config, source_factory=lambda: ScriptedSource(script)
        )
        return Sampler(manager)

    return factory
