"""System entropy source using ``os.urandom()``.

This is the default per-thread source. It is cryptographically secure and
holds no OS handle of its own; the kernel CSPRNG is read on every call.
"""

from __future__ import annotations

import os

from secure_random.entropy.base import EntropySource
from secure_random.entropy.registry import register_entropy_source
from secure_random.exceptions import ResourceExhaustedError


@register_entropy_source("system")
class SystemEntropySource(EntropySource):
    """``os.urandom()`` wrapper, the default source for every thread."""

    @property
    def name(self) -> str:
        """Return ``'system'``."""
        return "system"

    @property
    def is_available(self) -> bool:
        """``True`` until the source is closed."""
        return not self._closed

    def get_random_bytes(self, n: int) -> bytes:
        """Return *n* bytes from the OS CSPRNG.

        Args:
            n: Number of random bytes to generate.

        Returns:
            Exactly *n* bytes of entropy from ``os.urandom()``.

        Raises:
            ResourceExhaustedError: If the source is closed or the OS
                cannot supply randomness.
        """
        if self._closed:
            raise ResourceExhaustedError("System entropy source is closed")
        try:
            return os.urandom(n)
        except (OSError, NotImplementedError) as exc:
            raise ResourceExhaustedError(f"os.urandom() failed: {exc}") from exc

    def close(self) -> None:
        """Mark the source closed; there is no OS handle to release."""
        self._closed = True
