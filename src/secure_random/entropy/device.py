"""Character-device entropy source.

Holds an open, unbuffered handle on a randomness device (``/dev/urandom``
by default) for its whole lifetime. This is the closest analogue of a
per-thread OS random device: the handle is allocated when the thread's
source is created and released when the thread ends.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from secure_random.entropy.base import EntropySource
from secure_random.entropy.registry import register_entropy_source
from secure_random.exceptions import ResourceExhaustedError

if TYPE_CHECKING:
    from secure_random.config import SecureRandomConfig

logger = logging.getLogger("secure_random")

_DEFAULT_DEVICE_PATH = "/dev/urandom"


@register_entropy_source("device")
class DeviceEntropySource(EntropySource):
    """Reads entropy from an open character device.

    Args:
        config: Supplies ``device_path``. ``None`` uses ``/dev/urandom``.

    Raises:
        ResourceExhaustedError: If the device cannot be opened.
    """

    def __init__(self, config: SecureRandomConfig | None = None) -> None:
        self._path = config.device_path if config is not None else _DEFAULT_DEVICE_PATH
        try:
            self._handle = open(self._path, "rb", buffering=0)  # noqa: SIM115
        except OSError as exc:
            raise ResourceExhaustedError(
                f"Cannot open entropy device {self._path!r}: {exc}"
            ) from exc
        logger.debug("Opened entropy device %s (fd=%d)", self._path, self._handle.fileno())

    @property
    def name(self) -> str:
        """Return ``'device'``."""
        return "device"

    @property
    def path(self) -> str:
        """Filesystem path of the device."""
        return self._path

    @property
    def is_available(self) -> bool:
        """``True`` while the device handle is open."""
        return not self._closed

    def get_random_bytes(self, n: int) -> bytes:
        """Read exactly *n* bytes from the device.

        Short reads are retried until *n* bytes have been collected.

        Raises:
            ResourceExhaustedError: If the source is closed, the read fails
                or the device reports end-of-file.
        """
        if self._closed:
            raise ResourceExhaustedError(f"Entropy device {self._path!r} is closed")
        chunks: list[bytes] = []
        remaining = n
        while remaining > 0:
            try:
                chunk = self._handle.read(remaining)
            except OSError as exc:
                raise ResourceExhaustedError(
                    f"Read from entropy device {self._path!r} failed: {exc}"
                ) from exc
            if not chunk:
                raise ResourceExhaustedError(f"Entropy device {self._path!r} returned EOF")
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def close(self) -> None:
        """Close the device handle. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._handle.close()
