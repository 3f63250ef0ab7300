"""Tests for backoff factories, modifiers and random sources."""

from __future__ import annotations

import random
from datetime import timedelta

import pytest

from aretry.clock import Duration
from aretry.retry import Backoff, RandomSource, Xoshiro256StarStar


def seconds(*values: float) -> list[Duration]:
    return [Duration.seconds(v) for v in values]


def durations(policy: Backoff, n: int = 4) -> list[Duration]:
    return [policy.duration(x) for x in range(n)]


class ExplodingRandom:
    """Random source that must never be consulted."""

    def randbelow(self, n: int) -> int:
        raise AssertionError("random source used")


# ═════════════════════════════════════════════════════════════════════════════
# Factories
# ═════════════════════════════════════════════════════════════════════════════


def test_none() -> None:
    assert durations(Backoff.none(), 10) == [Duration.zero()] * 10
    assert durations(Backoff(), 3) == [Duration.zero()] * 3


def test_constant() -> None:
    assert durations(Backoff.constant(Duration.seconds(1))) == seconds(1, 1, 1, 1)


def test_linear() -> None:
    assert durations(Backoff.linear(a=3, b=2)) == seconds(2, 5, 8, 11)


def test_exponential() -> None:
    assert durations(Backoff.exponential(a=3, b=2)) == seconds(3, 6, 12, 24)


def test_exponential_fractional_factor() -> None:
    assert durations(Backoff.exponential(1, 1.5)) == seconds(1, 1.5, 2.25, 3.375)


def test_exponential_large_attempt_stays_exact() -> None:
    d = Backoff.exponential(1, 2.0).duration(200)
    assert d.secs == 2**200
    assert d.attos == 0


def test_accepts_timedelta() -> None:
    assert Backoff.constant(timedelta(milliseconds=250)).duration(5) == Duration.milliseconds(250)


def test_custom() -> None:
    policy = Backoff.custom(lambda attempt: attempt * 0.5, label="half")
    assert durations(policy) == seconds(0, 0.5, 1, 1.5)
    assert repr(policy) == "Backoff(half)"


def test_delay_in_float_seconds() -> None:
    assert Backoff.constant(1.5).delay(0) == 1.5
    assert Backoff.exponential(0.5, 2).delay(3) == 4.0


# ═════════════════════════════════════════════════════════════════════════════
# Modifiers
# ═════════════════════════════════════════════════════════════════════════════


def test_max_caps() -> None:
    policy = Backoff.exponential(3, 2).max(Duration.seconds(10))
    assert durations(policy) == seconds(3, 6, 10, 10)
    assert all(policy.duration(x) <= Duration.seconds(10) for x in range(50))


def test_min_floors() -> None:
    policy = Backoff.exponential(3, 2).min(Duration.seconds(7))
    assert durations(policy) == seconds(7, 7, 12, 24)
    assert all(policy.duration(x) >= Duration.seconds(7) for x in range(50))


def test_modifiers_apply_in_call_order() -> None:
    base = Backoff.exponential(3, 2)
    assert durations(base.max(10).min(20)) == seconds(20, 20, 20, 20)
    assert durations(base.min(20).max(10)) == seconds(10, 10, 10, 10)


def test_modifiers_leave_original_untouched() -> None:
    base = Backoff.linear(1, 0)
    base.max(0.5)
    base.jitter(Xoshiro256StarStar(seed=3))
    assert durations(base) == seconds(0, 1, 2, 3)


def test_repr_shows_composition() -> None:
    assert repr(Backoff.exponential(3, 2).max(10)) == "Backoff(exponential(3s, 2).max(10s))"


# ═════════════════════════════════════════════════════════════════════════════
# Jitter
# ═════════════════════════════════════════════════════════════════════════════


def test_jitter_within_base_range() -> None:
    base = Backoff.exponential(3, 2)
    jittered = base.jitter(Xoshiro256StarStar(seed=1))
    for x in range(30):
        assert Duration.zero() <= jittered.duration(x) < base.duration(x)


def test_jitter_range_wider_than_64_bits() -> None:
    base = Backoff.exponential(Duration.seconds(60), 2)
    assert base.duration(10).attoseconds > 2**64
    jittered = base.jitter(Xoshiro256StarStar(seed=9))
    for x in range(10, 20):
        assert Duration.zero() <= jittered.duration(x) < base.duration(x)


def test_jitter_of_zero_is_zero_without_drawing() -> None:
    jittered = Backoff.none().jitter(ExplodingRandom())
    assert durations(jittered) == [Duration.zero()] * 4


def test_seeded_jitter_is_reproducible() -> None:
    a = Backoff.exponential(3, 2).jitter(Xoshiro256StarStar(seed=1))
    b = Backoff.exponential(3, 2).jitter(Xoshiro256StarStar(seed=1))
    assert durations(a, 8) == durations(b, 8)


def test_jitter_generator_state_lives_in_policy() -> None:
    policy = Backoff.constant(3600).jitter(Xoshiro256StarStar(seed=5))
    fresh = Backoff.constant(3600).jitter(Xoshiro256StarStar(seed=5))
    first = durations(policy, 3)
    second = durations(policy, 3)
    assert first == durations(fresh, 3)
    assert second != first  # Continues the sequence instead of restarting it


def test_jitter_accepts_stdlib_random() -> None:
    jittered = Backoff.constant(2).jitter(random.Random(42))
    assert all(Duration.zero() <= d < Duration.seconds(2) for d in durations(jittered, 20))


def test_jitter_default_generator() -> None:
    jittered = Backoff.constant(1).jitter()
    assert all(Duration.zero() <= d < Duration.seconds(1) for d in durations(jittered, 20))


def test_jitter_rejects_unknown_source() -> None:
    with pytest.raises(TypeError):
        Backoff.constant(1).jitter(object())  # type: ignore[arg-type]


# ═════════════════════════════════════════════════════════════════════════════
# Xoshiro256StarStar
# ═════════════════════════════════════════════════════════════════════════════


def test_xoshiro_same_seed_same_stream() -> None:
    a, b = Xoshiro256StarStar(seed=123), Xoshiro256StarStar(seed=123)
    assert [a.next() for _ in range(16)] == [b.next() for _ in range(16)]


def test_xoshiro_different_seeds_differ() -> None:
    a, b = Xoshiro256StarStar(seed=1), Xoshiro256StarStar(seed=2)
    assert [a.next() for _ in range(4)] != [b.next() for _ in range(4)]


def test_xoshiro_outputs_are_64_bit() -> None:
    rng = Xoshiro256StarStar(seed=0)
    assert all(0 <= rng.next() < 2**64 for _ in range(100))


def test_xoshiro_getrandbits_width() -> None:
    rng = Xoshiro256StarStar(seed=7)
    assert rng.getrandbits(0) == 0
    assert all(rng.getrandbits(130) < 2**130 for _ in range(50))
    assert all(rng.getrandbits(3) < 8 for _ in range(50))


def test_xoshiro_randbelow_bounds() -> None:
    rng = Xoshiro256StarStar(seed=11)
    assert rng.randbelow(1) == 0
    assert {rng.randbelow(3) for _ in range(200)} == {0, 1, 2}
    big = 3 * 2**100 + 17
    assert all(0 <= rng.randbelow(big) < big for _ in range(50))


@pytest.mark.parametrize("n", [0, -5])
def test_xoshiro_randbelow_rejects_empty_range(n: int) -> None:
    with pytest.raises(ValueError):
        Xoshiro256StarStar(seed=1).randbelow(n)


def test_xoshiro_is_random_source() -> None:
    assert isinstance(Xoshiro256StarStar(seed=1), RandomSource)
    assert not isinstance(random.Random(), RandomSource)


def reference_stream(seed: int, n: int) -> list[int]:
    """Straight transcription of the published xoshiro256** step, seeded the same way."""
    mask = 2**64 - 1

    def rotl(x: int, k: int) -> int:
        return ((x << k) | (x >> (64 - k))) & mask

    a, b, c, d = seed, 18_446_744, 73_709, 551_615
    out = []
    for i in range(10 + n):
        result = (rotl((b * 5) & mask, 7) * 9) & mask
        t = (b << 17) & mask
        c ^= a
        d ^= b
        b ^= c
        a ^= d
        c ^= t
        d = rotl(d, 45)
        if i >= 10:
            out.append(result)
    return out


@pytest.mark.parametrize("seed", [0, 1, 42, 2**64 - 1])
def test_xoshiro_seeding_matches_reference_stream(seed: int) -> None:
    rng = Xoshiro256StarStar(seed=seed)
    assert [rng.next() for _ in range(8)] == reference_stream(seed, 8)


def test_xoshiro_seed_is_truncated_to_64_bits() -> None:
    a, b = Xoshiro256StarStar(seed=5), Xoshiro256StarStar(seed=5 + 2**64)
    assert [a.next() for _ in range(4)] == [b.next() for _ in range(4)]
