"""Randomized timer durations.

Spreads expiration and retry timers across many independent callers so
they do not fire in lockstep. A duration is picked uniformly, at millisecond
resolution, from ``[expiration - expiration / ratio, expiration]``::

    randomized_duration(timedelta(seconds=10), 4)   # 7.5s .. 10s
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

from secure_random.exceptions import InvalidRangeError
from secure_random.sampler import BYTE_MAX, get_default_sampler

if TYPE_CHECKING:
    from secure_random.sampler import Sampler

_ONE_MS = timedelta(milliseconds=1)


def randomized_duration(
    expiration: timedelta,
    ratio: int,
    sampler: Sampler | None = None,
) -> timedelta:
    """Return a random duration in ``[expiration - expiration / ratio, expiration]``.

    ``expiration`` is truncated to whole milliseconds before the offset is
    subtracted. The input is returned unchanged, with no entropy drawn,
    when ``ratio`` is 0 or when ``expiration`` in milliseconds divided by
    ``ratio`` is 0.

    Args:
        expiration: Nominal (maximum) duration, non-negative.
        ratio: Unsigned byte; the jitter window is ``1 / ratio`` of the
            expiration. 0 disables jitter.
        sampler: Sampler to draw the offset from. ``None`` uses the
            process-wide default.

    Returns:
        The randomized duration, never negative and never above *expiration*.

    Raises:
        TypeError: If *expiration* is not a ``timedelta``.
        InvalidRangeError: If *expiration* is negative or *ratio* is outside
            ``0..255``.
        ResourceExhaustedError: If the thread's entropy source fails.
    """
    if not isinstance(expiration, timedelta):
        raise TypeError(f"expiration must be a timedelta, got {type(expiration).__name__}")
    if expiration < timedelta(0):
        raise InvalidRangeError(f"expiration must be non-negative, got {expiration}")
    if not 0 <= ratio <= BYTE_MAX:
        raise InvalidRangeError(f"ratio must be in 0..{BYTE_MAX}, got {ratio}")

    if ratio == 0:
        return expiration

    max_ms = expiration // _ONE_MS
    limit = max_ms // ratio
    if limit == 0:
        return expiration

    if sampler is None:
        sampler = get_default_sampler()
    offset = sampler.next_in_range(0, limit)
    return timedelta(milliseconds=max_ms - offset)
