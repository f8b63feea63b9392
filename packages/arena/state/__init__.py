"""
State module - RNG and character records.

Contains:
- RNG system (seeded LCG, OS-entropy source)
- Character, skill, coin and status-effect records with the strict host schema
- Turn-order records
"""

# RNG System
from .rng import RNG, Random, SystemRandom, make_rng, seed_to_state

# Character State
from .character import (
    StatusType,
    GuardType,
    StaggerTier,
    Coin,
    StatusEffect,
    Skill,
    SpeedRange,
    HitPoints,
    StaggerThresholds,
    StaggerState,
    ChargeState,
    Character,
    Participant,
    TurnOrderEntry,
    validate_speed_range,
    validate_skill,
    validate_character,
)

__all__ = [
    # RNG
    "RNG", "Random", "SystemRandom", "make_rng", "seed_to_state",
    # Character
    "StatusType",
    "GuardType",
    "StaggerTier",
    "Coin",
    "StatusEffect",
    "Skill",
    "SpeedRange",
    "HitPoints",
    "StaggerThresholds",
    "StaggerState",
    "ChargeState",
    "Character",
    "Participant",
    "TurnOrderEntry",
    "validate_speed_range",
    "validate_skill",
    "validate_character",
]
