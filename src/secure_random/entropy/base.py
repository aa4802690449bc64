"""Abstract base class for all entropy sources.

Every entropy source (OS randomness, a character device, or a test double)
implements this interface. Subclasses must implement the four abstract
members: ``name``, ``is_available``, ``get_random_bytes()`` and ``close()``.
The ABC supplies ``closed`` bookkeeping, ``get_random_words()`` for
fixed-width unsigned draws and a concrete ``health_check()``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import numpy as np

# Unsigned dtypes for the fixed width classes, big-endian on the wire.
_WORD_DTYPES: dict[int, np.dtype] = {
    8: np.dtype(">u1"),
    16: np.dtype(">u2"),
    32: np.dtype(">u4"),
    64: np.dtype(">u8"),
}


class EntropySource(ABC):
    """Abstract base for all entropy sources.

    An instance is owned by exactly one thread. Implementations are not
    required to be thread-safe and must never be handed to another thread.
    """

    _closed: bool = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable source identifier (e.g., ``'system'``, ``'device'``)."""

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Whether the source can currently provide entropy."""

    @property
    def closed(self) -> bool:
        """Whether :meth:`close` has been called."""
        return self._closed

    @abstractmethod
    def get_random_bytes(self, n: int) -> bytes:
        """Return exactly *n* random bytes.

        Args:
            n: Number of random bytes to generate.

        Returns:
            Exactly *n* bytes of entropy.

        Raises:
            ResourceExhaustedError: If the source cannot provide bytes.
        """

    def get_random_words(self, count: int, bits: int) -> np.ndarray:
        """Return *count* unsigned integers of *bits* width.

        The default implementation reinterprets ``get_random_bytes()``
        output as big-endian unsigned words.

        Args:
            count: Number of words.
            bits: Word width; one of 8, 16, 32, 64.

        Returns:
            Array of native-endian unsigned integers of the requested width.
        """
        dtype = _WORD_DTYPES[bits]
        raw = self.get_random_bytes(count * dtype.itemsize)
        return np.frombuffer(raw, dtype=dtype).astype(dtype.newbyteorder("="))

    @abstractmethod
    def close(self) -> None:
        """Release resources (file handles, descriptors)."""

    def health_check(self) -> dict[str, Any]:
        """Return a status dictionary for this source.

        Returns:
            Dictionary with ``'source'``, ``'healthy'`` and ``'closed'`` keys.
        """
        return {"source": self.name, "healthy": self.is_available, "closed": self.closed}
