"""
Deterministic RNG for combat resolution.

Two sources share one contract, ``random() -> float in [0, 1)``:

- ``Random``: seeded 32-bit linear congruential generator. Output is a pure
  function of the seed and the number of draws made, so a replay with the
  same seed and call sequence reproduces every roll bit-for-bit.
- ``SystemRandom``: OS entropy, for live play where replays don't matter.

Seeded recurrence (fixed, do not change without bumping replay data):

    seeding:  s = 0; for ch in str(seed): s = (s * 31 + ord(ch)) mod 2**32
    step:     s = (1664525 * s + 1013904223) mod 2**32
    output:   (s & 0x0FFFFFFF) / 2**28

Draw order within the engine: speed rolls (participant order) before any
coin flips; within a clash, every attacker coin before any defender coin.
"""

from __future__ import annotations

import random as _py_random
from typing import Optional, Protocol, Union

__all__ = [
    "RNG",
    "Random",
    "SystemRandom",
    "make_rng",
    "seed_to_state",
    "LCG_MULTIPLIER",
    "LCG_INCREMENT",
]

Seed = Union[int, str]

MASK_32 = 0xFFFFFFFF
LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223
OUTPUT_BITS = 28
OUTPUT_MASK = (1 << OUTPUT_BITS) - 1


class RNG(Protocol):
    """Anything that yields uniform floats in [0, 1)."""

    def random(self) -> float:
        ...


def seed_to_state(seed: Seed) -> int:
    """Hash a seed into the initial 32-bit LCG state.

    Integer seeds go through their decimal string, so ``123`` and ``"123"``
    seed identically.
    """
    state = 0
    for ch in str(seed):
        state = (state * 31 + ord(ch)) & MASK_32
    return state


class Random:
    """
    Seeded LCG with a draw counter.

    Usage:
        rng = Random("ARENA")
        rng.random()         # float in [0, 1)
        rng.counter          # 1

        # Resume a replay at the same position
        resumed = Random("ARENA", counter=rng.counter)
    """

    def __init__(self, seed: Seed, counter: int = 0):
        """
        Args:
            seed: Integer or string seed
            counter: Number of draws to skip (replay restoration)
        """
        self.seed = seed
        self._state = seed_to_state(seed)
        self.counter = 0

        for _ in range(counter):
            self.random()

    def _step(self) -> int:
        self._state = (LCG_MULTIPLIER * self._state + LCG_INCREMENT) & MASK_32
        return self._state

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        self.counter += 1
        return (self._step() & OUTPUT_MASK) / (1 << OUTPUT_BITS)

    @property
    def state(self) -> int:
        return self._state

    def copy(self) -> Random:
        """Clone at the current position."""
        clone = Random.__new__(Random)
        clone.seed = self.seed
        clone._state = self._state
        clone.counter = self.counter
        return clone

    def __repr__(self) -> str:
        return f"Random(seed={self.seed!r}, counter={self.counter})"


class SystemRandom:
    """Non-reproducible source backed by OS entropy."""

    def __init__(self):
        self._rng = _py_random.SystemRandom()
        self.counter = 0

    def random(self) -> float:
        self.counter += 1
        return self._rng.random()

    def __repr__(self) -> str:
        return f"SystemRandom(counter={self.counter})"


def make_rng(seed: Optional[Seed] = None) -> Union[Random, SystemRandom]:
    """Seeded ``Random`` when a seed is given, otherwise ``SystemRandom``."""
    if seed is None or seed == "":
        return SystemRandom()
    return Random(seed)
