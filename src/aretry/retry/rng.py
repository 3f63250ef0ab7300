"""Seedable random sources for jittered backoff.

Jitter draws integers over attosecond ranges, which exceed 64 bits for delays
longer than about 18 seconds. Sources therefore expose ``randbelow(n)`` for an
arbitrary-width ``n``.
"""

from __future__ import annotations

import os
import random
from typing import Callable, Protocol, runtime_checkable

_MASK64 = (1 << 64) - 1


@runtime_checkable
class RandomSource(Protocol):
    """Uniform integer source. ``randbelow(n)`` returns a value in ``[0, n)`` for ``n > 0``."""

    def randbelow(self, n: int) -> int: ...


def _rotl(x: int, k: int) -> int:
    return ((x << k) | (x >> (64 - k))) & _MASK64


_SEED_WORDS = (18_446_744, 73_709, 551_615)
_WARMUP = 10


class Xoshiro256StarStar:
    """xoshiro256** generator (https://prng.di.unimi.it).

    Fast and small, not cryptographic. The state starts as the 64-bit seed
    followed by three fixed words, and the first ten outputs are discarded.
    Equal seeds give equal sequences.

    Example:
        >>> rng = Xoshiro256StarStar(seed=1)
        >>> rng.randbelow(10) == Xoshiro256StarStar(seed=1).randbelow(10)
        True
    """

    __slots__ = ("_s",)

    def __init__(self, seed: int | None = None) -> None:
        if seed is None:
            seed = int.from_bytes(os.urandom(8), "little")
        self._s = [seed & _MASK64, *_SEED_WORDS]
        for _ in range(_WARMUP):
            self.next()

    def next(self) -> int:
        """Return the next 64-bit output and advance the state."""
        s = self._s
        result = (_rotl((s[1] * 5) & _MASK64, 7) * 9) & _MASK64
        t = (s[1] << 17) & _MASK64
        s[2] ^= s[0]
        s[3] ^= s[1]
        s[1] ^= s[2]
        s[0] ^= s[3]
        s[2] ^= t
        s[3] = _rotl(s[3], 45)
        return result

    def getrandbits(self, k: int) -> int:
        """Return an integer with ``k`` random bits, built from whole 64-bit words."""
        words, extra = divmod(k, 64)
        if extra:
            words += 1
        value = 0
        for _ in range(words):
            value = (value << 64) | self.next()
        return value >> (words * 64 - k)

    def randbelow(self, n: int) -> int:
        # Rejection sampling on the bit length keeps the draw unbiased for any width
        if n <= 0:
            raise ValueError(f"randbelow() requires n > 0, got {n}")
        bits = n.bit_length()
        r = self.getrandbits(bits)
        while r >= n:
            r = self.getrandbits(bits)
        return r

    def __repr__(self) -> str:
        return "Xoshiro256StarStar()"


def as_randbelow(source: RandomSource | random.Random) -> Callable[[int], int]:
    """Adapt a RandomSource or a ``random.Random`` (incl. SystemRandom) to ``randbelow``."""
    if isinstance(source, RandomSource):
        return source.randbelow
    if isinstance(source, random.Random):
        return source.randrange
    raise TypeError(f"{type(source).__name__} is not a random source")
