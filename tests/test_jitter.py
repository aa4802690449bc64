"""Tests for randomized_duration."""

from __future__ import annotations

from datetime import timedelta

import pytest

from secure_random import randomized_duration
from secure_random.exceptions import InvalidRangeError
from secure_random.sampler import Sampler

_TRIALS = 500


def _ms(value: int) -> timedelta:
    return timedelta(milliseconds=value)


class TestNoJitter:
    """Deterministic branches: nothing is drawn."""

    @pytest.mark.parametrize(
        "expiration",
        [timedelta(0), _ms(1), _ms(10_000), timedelta(microseconds=1500), timedelta(hours=3)],
    )
    def test_zero_ratio_returns_expiration(self, scripted_sampler, expiration: timedelta) -> None:
        sampler = scripted_sampler(b"")
        assert randomized_duration(expiration, 0, sampler) == expiration

    def test_zero_limit_returns_expiration(self, scripted_sampler) -> None:
        # 5 ms / 10 == 0
        sampler = scripted_sampler(b"")
        assert randomized_duration(_ms(5), 10, sampler) == _ms(5)

    def test_zero_expiration(self, scripted_sampler) -> None:
        sampler = scripted_sampler(b"")
        assert randomized_duration(timedelta(0), 1, sampler) == timedelta(0)

    def test_sub_millisecond_expiration_unchanged(self, scripted_sampler) -> None:
        sampler = scripted_sampler(b"")
        expiration = timedelta(microseconds=900)
        assert randomized_duration(expiration, 1, sampler) == expiration

    def test_limit_zero_keeps_sub_millisecond_part(self, scripted_sampler) -> None:
        sampler = scripted_sampler(b"")
        expiration = timedelta(milliseconds=7, microseconds=250)
        assert randomized_duration(expiration, 8, sampler) == expiration

    def test_default_sampler_zero_ratio(self) -> None:
        assert randomized_duration(_ms(1234), 0) == _ms(1234)


class TestBounds:
    """The randomized branch stays within [expiration - limit, expiration]."""

    def test_ten_seconds_ratio_four(self, sampler: Sampler) -> None:
        for _ in range(_TRIALS):
            result = randomized_duration(_ms(10_000), 4, sampler)
            assert _ms(7_500) <= result <= _ms(10_000)

    def test_whole_millisecond_results(self, sampler: Sampler) -> None:
        for _ in range(100):
            result = randomized_duration(_ms(10_000), 4, sampler)
            assert result % _ms(1) == timedelta(0)

    def test_ratio_one_never_negative(self, sampler: Sampler) -> None:
        for _ in range(_TRIALS):
            result = randomized_duration(_ms(10), 1, sampler)
            assert timedelta(0) <= result <= _ms(10)

    def test_ratio_255(self, sampler: Sampler) -> None:
        # 10000 / 255 == 39
        for _ in range(_TRIALS):
            result = randomized_duration(_ms(10_000), 255, sampler)
            assert _ms(10_000 - 39) <= result <= _ms(10_000)

    def test_sub_millisecond_part_is_truncated(self, sampler: Sampler) -> None:
        expiration = timedelta(milliseconds=10, microseconds=500)
        for _ in range(100):
            result = randomized_duration(expiration, 2, sampler)
            assert _ms(5) <= result <= _ms(10)
            assert result <= expiration

    def test_default_sampler(self) -> None:
        for _ in range(100):
            assert _ms(7_500) <= randomized_duration(_ms(10_000), 4) <= _ms(10_000)


class TestScriptedOffsets:
    """Drive the offset draw directly through a scripted source."""

    def test_zero_offset_returns_full_expiration(self, scripted_sampler) -> None:
        # limit 2500 -> span 2501 -> 32-bit draw
        sampler = scripted_sampler(b"\x00\x00\x00\x00")
        assert randomized_duration(_ms(10_000), 4, sampler) == _ms(10_000)

    def test_max_offset_returns_lower_edge(self, scripted_sampler) -> None:
        sampler = scripted_sampler((2500).to_bytes(4, "big"))
        assert randomized_duration(_ms(10_000), 4, sampler) == _ms(7_500)

    def test_offset_reduced_modulo_span(self, scripted_sampler) -> None:
        sampler = scripted_sampler((2501 + 100).to_bytes(4, "big"))
        assert randomized_duration(_ms(10_000), 4, sampler) == _ms(9_900)


class TestValidation:
    """Inputs outside the accepted domain."""

    def test_negative_expiration(self, sampler: Sampler) -> None:
        with pytest.raises(InvalidRangeError, match="non-negative"):
            randomized_duration(_ms(-1), 4, sampler)

    @pytest.mark.parametrize("ratio", [-1, 256, 1000])
    def test_ratio_out_of_byte_range(self, sampler: Sampler, ratio: int) -> None:
        with pytest.raises(InvalidRangeError, match="ratio"):
            randomized_duration(_ms(1000), ratio, sampler)

    def test_non_timedelta_expiration(self, sampler: Sampler) -> None:
        with pytest.raises(TypeError, match="timedelta"):
            randomized_duration(10.0, 4, sampler)  # type: ignore[arg-type]
