"""
Engine errors.

All failures are local validation errors raised before any RNG draw, so a
rejected call never advances a seeded sequence.
"""

__all__ = [
    "ArenaError",
    "InvalidRange",
    "EmptyParticipants",
    "InvalidSkill",
    "InvalidCharacter",
    "InvalidConfig",
]


class ArenaError(ValueError):
    """Base class for every error raised by the combat engine."""


class InvalidRange(ArenaError):
    """Speed bounds are malformed (min > max, or a bound below 1)."""


class EmptyParticipants(ArenaError):
    """Turn order requested with no combatants."""


class InvalidSkill(ArenaError):
    """Skill is missing required fields or violates its limits."""


class InvalidCharacter(ArenaError):
    """Character record does not match the strict input schema."""


class InvalidConfig(ArenaError):
    """An ARENA_* setting or ArenaConfig field is malformed."""
