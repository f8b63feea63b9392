"""
Engine configuration.

Tunable constants for the resolver. Every pure function takes an optional
``config`` and falls back to ``DEFAULT_CONFIG``.

Environment overrides (read by ``ArenaConfig.from_env``; a ``.env`` file in
the working directory is honoured):

    ARENA_SANITY_MIN, ARENA_SANITY_MAX
    ARENA_BURN_MULTIPLIER
    ARENA_SANITY_ON_CLASH_WIN
    ARENA_MAX_COINS, ARENA_MAX_WEAKNESSES
    ARENA_STAGGER_FIRST, ARENA_STAGGER_SECOND, ARENA_STAGGER_THIRD
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, TypeVar

from dotenv import load_dotenv

from .errors import InvalidConfig

__all__ = [
    "ArenaConfig",
    "DEFAULT_CONFIG",
    "SANITY_MIN",
    "SANITY_MAX",
    "BURN_MULTIPLIER",
    "DEFAULT_STAGGER_THRESHOLDS",
]


# =============================================================================
# CONSTANTS
# =============================================================================

SANITY_MIN = -45
SANITY_MAX = 45

# Burn deals potency * 3 the moment it is inflicted
BURN_MULTIPLIER = 3

SANITY_ON_CLASH_WIN = 10

MAX_COINS = 5
MAX_WEAKNESSES = 5

# (first, second, third) HP fractions
DEFAULT_STAGGER_THRESHOLDS: Tuple[float, float, float] = (0.33, 0.66, 0.83)

_ENV_PREFIX = "ARENA_"

T = TypeVar("T")


def _env(name: str, cast: Callable[[str], T], default: T) -> T:
    raw = os.environ.get(_ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError as e:
        raise InvalidConfig(f"{_ENV_PREFIX}{name}={raw!r} is not a valid {cast.__name__}") from e


@dataclass(frozen=True)
class ArenaConfig:
    """Resolver tuning knobs."""

    sanity_min: int = SANITY_MIN
    sanity_max: int = SANITY_MAX
    burn_multiplier: int = BURN_MULTIPLIER
    sanity_on_clash_win: int = SANITY_ON_CLASH_WIN
    max_coins: int = MAX_COINS
    max_weaknesses: int = MAX_WEAKNESSES
    stagger_first: float = DEFAULT_STAGGER_THRESHOLDS[0]
    stagger_second: float = DEFAULT_STAGGER_THRESHOLDS[1]
    stagger_third: float = DEFAULT_STAGGER_THRESHOLDS[2]

    def __post_init__(self):
        if self.sanity_min > self.sanity_max:
            raise InvalidConfig(
                f"sanity_min ({self.sanity_min}) exceeds sanity_max ({self.sanity_max})"
            )
        if self.max_coins < 1:
            raise InvalidConfig("max_coins must be at least 1")

    @property
    def stagger_thresholds(self) -> Tuple[float, float, float]:
        return (self.stagger_first, self.stagger_second, self.stagger_third)

    def clamp_sanity(self, value: int) -> int:
        return max(self.sanity_min, min(self.sanity_max, value))

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> ArenaConfig:
        """Build a config from ``ARENA_*`` environment variables."""
        load_dotenv(dotenv_path)
        return cls(
            sanity_min=_env("SANITY_MIN", int, SANITY_MIN),
            sanity_max=_env("SANITY_MAX", int, SANITY_MAX),
            burn_multiplier=_env("BURN_MULTIPLIER", int, BURN_MULTIPLIER),
            sanity_on_clash_win=_env("SANITY_ON_CLASH_WIN", int, SANITY_ON_CLASH_WIN),
            max_coins=_env("MAX_COINS", int, MAX_COINS),
            max_weaknesses=_env("MAX_WEAKNESSES", int, MAX_WEAKNESSES),
            stagger_first=_env("STAGGER_FIRST", float, DEFAULT_STAGGER_THRESHOLDS[0]),
            stagger_second=_env("STAGGER_SECOND", float, DEFAULT_STAGGER_THRESHOLDS[1]),
            stagger_third=_env("STAGGER_THIRD", float, DEFAULT_STAGGER_THRESHOLDS[2]),
        )


DEFAULT_CONFIG = ArenaConfig()
