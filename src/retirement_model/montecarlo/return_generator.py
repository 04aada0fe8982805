# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Reproducible random annual returns.

This module provides a small seeded pseudorandom generator (Mulberry32) whose
output depends only on its 32-bit seed, so a seeded run produces the same
returns on every platform and Python version, plus a generator that turns its
uniform draws into normally distributed annual returns via Box-Muller.
"""

import math
import secrets
from typing import List, Optional

MASK_32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """32-bit wraparound multiply."""
    return (a * b) & MASK_32


class SeededRandomStream:
    """Mulberry32 uniform generator on [0, 1).

    Example:
        >>> stream = SeededRandomStream(42)
        >>> first = [stream.uniform() for _ in range(3)]
        >>> SeededRandomStream(42).uniform() == first[0]
        True
    """

    def __init__(self, seed: Optional[int] = None):
        """Initialize the stream.

        Args:
            seed: Any integer (reduced modulo 2**32). If None, the state is
                  drawn from the operating system's entropy source.
        """
        if seed is None:
            seed = secrets.randbits(32)
        self.seed = seed & MASK_32
        self._state = self.seed

    def next_uint32(self) -> int:
        """Advance the state and return the next 32-bit output."""
        self._state = (self._state + _INCREMENT) & MASK_32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & MASK_32
        return (t ^ (t >> 14)) & MASK_32

    def uniform(self) -> float:
        """Next draw in [0, 1)."""
        return self.next_uint32() / _TWO_POW_32

    def normal(self) -> float:
        """Standard-normal draw from two uniforms via Box-Muller."""
        u1 = self.uniform()
        u2 = self.uniform()
        if u1 == 0.0:
            # log(0) is undefined; use the smallest positive draw instead
            u1 = 1.0 / _TWO_POW_32
        return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


class AnnualReturnGenerator:
    """Draws one normally distributed annual return per simulated year.

    Example:
        >>> gen = AnnualReturnGenerator(0.07, 0.15, SeededRandomStream(7))
        >>> returns = gen.generate_multi_year_returns(30)
    """

    def __init__(self, mean: float, volatility: float, stream: SeededRandomStream):
        """Initialize the generator.

        Args:
            mean: Expected annual return as a fraction (0.07 for 7%)
            volatility: Standard deviation of annual returns as a fraction
            stream: Source of uniform draws

        Raises:
            ValueError: If volatility is negative
        """
        if volatility < 0:
            raise ValueError("volatility must be non-negative")
        self.mean = mean
        self.volatility = volatility
        self.stream = stream

    def generate_yearly_return(self) -> float:
        """Realized return for one year: mean + volatility * z."""
        return self.mean + self.volatility * self.stream.normal()

    def generate_multi_year_returns(self, num_years: int) -> List[float]:
        return [self.generate_yearly_return() for _ in range(num_years)]
