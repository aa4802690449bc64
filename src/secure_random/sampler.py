"""Unbiased byte and bounded-integer sampling.

Every draw goes to the calling thread's entropy source, obtained from an
:class:`~secure_random.manager.EntropySourceManager`.

Range sampling oversamples: the raw value is drawn at a width one class
wider than the span needs (8 -> 16, 16 -> 32, 32 -> 64, 64 -> 128 bits and
so on in steps of 64). Raw values at or above the largest multiple of the
span that fits in that width are rejected and redrawn, so reducing the
accepted value modulo the span leaves every outcome equally likely. With
the extra width class a redraw happens with probability below 2**-8.
"""

from __future__ import annotations

import threading
from collections.abc import MutableSequence
from typing import TYPE_CHECKING, Any

import numpy as np

from secure_random.exceptions import InvalidRangeError
from secure_random.manager import get_default_manager

if TYPE_CHECKING:
    from secure_random.entropy.base import EntropySource
    from secure_random.manager import EntropySourceManager

BYTE_MAX = 0xFF

_WIDTH_CLASSES: tuple[int, ...] = (8, 16, 32, 64)


def _width_class(bits: int) -> int:
    """Smallest width class holding *bits* bits."""
    for width in _WIDTH_CLASSES:
        if bits <= width:
            return width
    return -(-bits // 64) * 64


def oversampled_width(span: int) -> int:
    """Width in bits of the raw draw used for a span of *span* values.

    One width class above the class that can represent ``span - 1``.
    """
    needed = max((span - 1).bit_length(), 1)
    return _width_class(_width_class(needed) + 1)


def _draw_word(source: EntropySource, width: int) -> int:
    if width <= 64:
        return int(source.get_random_words(1, width)[0])
    return int.from_bytes(source.get_random_bytes(width // 8), "big")


def _check_range(low: int, high: int, bits: int | None) -> None:
    if bits is not None and bits <= 0:
        raise InvalidRangeError(f"bits must be positive, got {bits}")
    if low < 0 or high < 0:
        raise InvalidRangeError(f"Range bounds must be unsigned, got [{low}, {high}]")
    if low > high:
        raise InvalidRangeError(f"Empty range: low {low} > high {high}")
    if bits is not None and high >> bits:
        raise InvalidRangeError(f"high {high} does not fit in {bits} unsigned bits")


def _writable_view(buffer: Any) -> tuple[Any, int]:
    """Return the object to write into and the number of bytes it holds.

    Raises:
        TypeError: If *buffer* is not a mutable sequence of bytes.
    """
    if isinstance(buffer, np.ndarray):
        if buffer.dtype != np.uint8:
            raise TypeError(f"numpy buffer must have dtype uint8, got {buffer.dtype}")
        if not buffer.flags.writeable:
            raise TypeError("numpy buffer is read-only")
        return buffer, buffer.size
    if isinstance(buffer, memoryview):
        if buffer.readonly:
            raise TypeError("memoryview is read-only")
        view = buffer if buffer.ndim == 1 and buffer.format == "B" else buffer.cast("B")
        return view, view.nbytes
    if isinstance(buffer, MutableSequence):
        return buffer, len(buffer)
    raise TypeError(f"Cannot fill immutable or non-sequence buffer of type {type(buffer).__name__}")


class Sampler:
    """Draws uniform bytes and bounded integers from per-thread entropy.

    A single instance may be shared freely between threads: it holds no
    sampling state of its own, and each call uses the calling thread's source.

    Args:
        manager: Provides the per-thread entropy source. ``None`` uses the
            process-wide default manager.
    """

    def __init__(self, manager: EntropySourceManager | None = None) -> None:
        self._manager = manager if manager is not None else get_default_manager()

    @property
    def manager(self) -> EntropySourceManager:
        """The manager supplying this sampler's entropy sources."""
        return self._manager

    def next_byte(self) -> int:
        """Return a byte uniformly distributed over ``[0, 255]``."""
        return self.next_in_range(0, BYTE_MAX)

    def next_in_range(self, low: int, high: int, bits: int | None = None) -> int:
        """Return an integer uniformly distributed over ``[low, high]``.

        Args:
            low: Inclusive lower bound, non-negative.
            high: Inclusive upper bound, ``>= low``.
            bits: Optional unsigned width both bounds must fit in
                (e.g. 8 for a ``uint8`` range).

        Returns:
            The sample. ``low`` itself when ``low == high``; no entropy is
            consumed in that case.

        Raises:
            InvalidRangeError: If ``low > high``, a bound is negative or a
                bound does not fit in *bits*.
            ResourceExhaustedError: If the thread's source cannot be
                created or read.
        """
        _check_range(low, high, bits)
        if low == high:
            return low

        span = high - low + 1
        width = oversampled_width(span)
        accept_below = ((1 << width) // span) * span

        source = self._manager.acquire_for_current_thread()
        while True:
            raw = _draw_word(source, width)
            if raw < accept_below:
                return low + raw % span

    def fill_bytes(self, buffer: Any) -> None:
        """Overwrite every element of *buffer* with an independent uniform byte.

        Accepts ``bytearray``, writable ``memoryview``, ``list`` (or any
        other ``MutableSequence``) and ``numpy.ndarray`` of ``uint8``. All
        bytes are drawn before the first write, so on failure the buffer is
        left untouched.

        Each byte is the low byte of a 16-bit draw; 2**16 is a multiple of
        256, so no redraw is ever needed.

        Raises:
            TypeError: If *buffer* is immutable or not a byte sequence.
            ResourceExhaustedError: If the thread's source cannot be
                created or read.
        """
        target, count = _writable_view(buffer)
        source = self._manager.acquire_for_current_thread()
        words = source.get_random_words(count, oversampled_width(BYTE_MAX + 1))
        values = (words & BYTE_MAX).astype(np.uint8)

        if isinstance(target, np.ndarray):
            target[...] = values.reshape(target.shape)
        elif isinstance(target, (bytearray, memoryview)):
            target[:] = values.tobytes()
        else:
            for index, value in enumerate(values.tolist()):
                target[index] = value

    def random_bytes(self, n: int) -> bytes:
        """Return *n* fresh uniform bytes.

        Raises:
            InvalidRangeError: If *n* is negative.
        """
        if n < 0:
            raise InvalidRangeError(f"Byte count must be non-negative, got {n}")
        buffer = bytearray(n)
        self.fill_bytes(buffer)
        return bytes(buffer)


_default_sampler: Sampler | None = None
_default_lock = threading.Lock()


def get_default_sampler() -> Sampler:
    """Return the process-wide sampler bound to the default manager."""
    global _default_sampler
    if _default_sampler is None:
        with _default_lock:
            if _default_sampler is None:
                _default_sampler = Sampler()
    return _default_sampler


def fill_random_bytes(buffer: Any) -> None:
    """Fill *buffer* with uniform random bytes. See :meth:`Sampler.fill_bytes`."""
    get_default_sampler().fill_bytes(buffer)


def random_byte() -> int:
    """Return a uniform random byte in ``[0, 255]``."""
    return get_default_sampler().next_byte()


def random_in_range(low: int, high: int, bits: int | None = None) -> int:
    """Return a uniform random integer in ``[low, high]``. See :meth:`Sampler.next_in_range`."""
    return get_default_sampler().next_in_range(low, high, bits)


def random_bytes(n: int) -> bytes:
    """Return *n* uniform random bytes."""
    return get_default_sampler().random_bytes(n)
