"""
Arena Clash Engine

Turn-based combat resolver for stat-driven, coin-flip skill contests. The
engine consumes and produces plain records; transport, persistence and
rendering belong to the host.

Core subsystems:
- state: seeded RNG, character/skill/status records with the host schema
- calc: speed rolls, turn order, coin resolution, clash resolution
- effects: immediate/scheduled status effects, stagger, sanity
- log: append-only combat log
- session: caller-owned RNG + log bundle for one fight

Usage:
    from packages.arena import Character, CombatSession

    attacker = Character.from_dict(doc_a)
    defender = Character.from_dict(doc_b)

    session = CombatSession(seed="ARENA-1")
    order = session.roll_turn_order([attacker, defender])
    outcome = session.clash(attacker, attacker.skills[0], defender, defender.skills[0])
    attacker, defender = session.apply(outcome)
"""

__version__ = "0.1.0"

# Errors
from .errors import ArenaError, InvalidRange, EmptyParticipants, InvalidSkill, InvalidCharacter, InvalidConfig

# Configuration
from .config import ArenaConfig, DEFAULT_CONFIG

# RNG + State
from .state.rng import RNG, Random, SystemRandom, make_rng, seed_to_state
from .state.character import (
    StatusType, GuardType, StaggerTier,
    Coin, StatusEffect, Skill,
    SpeedRange, HitPoints, StaggerThresholds, StaggerState, ChargeState,
    Character, Participant, TurnOrderEntry,
    validate_speed_range, validate_skill, validate_character,
)

# Resolution
from .calc.turn_order import roll_speed, make_turn_order
from .calc.coins import CoinRecord, CoinTrace, coin_chance, resolve_coins
from .calc.clash import ClashMode, ClashPhase, ClashOutcome, resolve_clash, apply_outcome

# Status / Stagger / Sanity
from .effects.status import (
    EffectSplit, TickResult, StaggerTransition, SanityTransition,
    apply_immediate_effects, tick_scheduled_effects, update_stagger, update_sanity,
)

# Log + Session
from .log import CombatLog, CombatLogEntry
from .session import CombatSession

__all__ = [
    "__version__",
    # Errors
    "ArenaError", "InvalidRange", "EmptyParticipants", "InvalidSkill", "InvalidCharacter", "InvalidConfig",
    # Config
    "ArenaConfig", "DEFAULT_CONFIG",
    # RNG
    "RNG", "Random", "SystemRandom", "make_rng", "seed_to_state",
    # State
    "StatusType", "GuardType", "StaggerTier",
    "Coin", "StatusEffect", "Skill",
    "SpeedRange", "HitPoints", "StaggerThresholds", "StaggerState", "ChargeState",
    "Character", "Participant", "TurnOrderEntry",
    "validate_speed_range", "validate_skill", "validate_character",
    # Resolution
    "roll_speed", "make_turn_order",
    "CoinRecord", "CoinTrace", "coin_chance", "resolve_coins",
    "ClashMode", "ClashPhase", "ClashOutcome", "resolve_clash", "apply_outcome",
    # Effects
    "EffectSplit", "TickResult", "StaggerTransition", "SanityTransition",
    "apply_immediate_effects", "tick_scheduled_effects", "update_stagger", "update_sanity",
    # Log / Session
    "CombatLog", "CombatLogEntry", "CombatSession",
]
