"""
Status, stagger and sanity bookkeeping.

Every function here is a projection: it reads a character (or a list of
effects) and returns what should change. Applying the result back onto a
Character is the caller's job (see ``calc.clash.apply_outcome``).

Status timing:
- Burn hits the moment it is inflicted: potency * 3 HP.
- Everything else waits for the end-of-turn tick.
- Each tick: count -1 for every effect, Burn potency halves (floor),
  effects at count <= 0 are dropped.
- Bleed only counts down on tick; it deals no tick damage here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional

from ..config import DEFAULT_CONFIG, ArenaConfig
from ..state.character import Character, StaggerTier, StatusEffect, StatusType

__all__ = [
    "AppliedEffect",
    "EffectSplit",
    "TickResult",
    "StaggerTransition",
    "SanityTransition",
    "apply_immediate_effects",
    "tick_scheduled_effects",
    "stagger_tier_for",
    "update_stagger",
    "update_sanity",
    "stack_status_effects",
]

logger = logging.getLogger(__name__)


# =============================================================================
# Result records
# =============================================================================


@dataclass(frozen=True)
class AppliedEffect:
    """Damage dealt by an effect at the moment it was inflicted."""
    type: StatusType
    amount: int
    source: StatusEffect
    note: str = "immediate"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "amount": self.amount, "note": self.note}


@dataclass
class EffectSplit:
    applied: List[AppliedEffect] = field(default_factory=list)
    scheduled: List[StatusEffect] = field(default_factory=list)

    @property
    def hp_damage(self) -> int:
        return sum(a.amount for a in self.applied)

    @property
    def inflicted(self) -> List[StatusEffect]:
        """Effects that join the target's active set, in original order."""
        return [a.source for a in self.applied] + list(self.scheduled)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "immediate": [a.to_dict() for a in self.applied],
            "scheduled": [e.to_dict() for e in self.scheduled],
        }


@dataclass
class TickResult:
    hp_delta: int = 0
    removed: List[StatusType] = field(default_factory=list)
    remaining: List[StatusEffect] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hpDelta": self.hp_delta,
            "removed": [t.value for t in self.removed],
            "remaining": [e.to_dict() for e in self.remaining],
        }


@dataclass(frozen=True)
class StaggerTransition:
    from_tier: StaggerTier
    to_tier: StaggerTier

    @property
    def changed(self) -> bool:
        return self.from_tier is not self.to_tier

    def to_dict(self) -> Dict[str, Any]:
        return {"from": self.from_tier.to_wire(), "to": self.to_tier.to_wire()}


@dataclass(frozen=True)
class SanityTransition:
    from_value: int
    to_value: int
    delta: int

    def to_dict(self) -> Dict[str, Any]:
        return {"from": self.from_value, "to": self.to_value, "delta": self.delta}


# =============================================================================
# Effects
# =============================================================================


def apply_immediate_effects(
    effects: Iterable[StatusEffect],
    config: ArenaConfig = DEFAULT_CONFIG,
) -> EffectSplit:
    """
    Split inflicted effects into immediate damage and scheduled statuses.

    Burn becomes HP damage now (potency * burn_multiplier); a Burn that would
    deal nothing is dropped. Every other effect is scheduled unchanged, in
    input order.
    """
    split = EffectSplit()
    for effect in effects:
        if effect.type is StatusType.BURN:
            amount = config.burn_multiplier * effect.potency
            if amount > 0:
                split.applied.append(AppliedEffect(type=effect.type, amount=amount, source=effect))
        else:
            split.scheduled.append(effect)
    return split


def tick_scheduled_effects(character: Character) -> TickResult:
    """
    End-of-turn tick for one character's active statuses.

    Does not mutate the character; ``remaining`` is the new status list.
    """
    result = TickResult()
    for effect in character.status_effects:
        if effect.type is StatusType.BURN:
            ticked = replace(effect, potency=effect.potency // 2, count=effect.count - 1)
        else:
            # Bleed included: count only, no HP loss
            ticked = replace(effect, count=effect.count - 1)

        if ticked.count <= 0:
            result.removed.append(effect.type)
        else:
            result.remaining.append(ticked)

    # No built-in status deals damage on tick
    if result.removed:
        logger.debug("tick %s: expired %s", character.id, [t.value for t in result.removed])
    return result


def stack_status_effects(
    existing: Iterable[StatusEffect],
    incoming: Iterable[StatusEffect],
) -> List[StatusEffect]:
    """Merge new effects into an active set; same type adds potency and count."""
    merged = list(existing)
    for effect in incoming:
        for i, current in enumerate(merged):
            if current.type is effect.type:
                merged[i] = replace(
                    current,
                    potency=current.potency + effect.potency,
                    count=current.count + effect.count,
                )
                break
        else:
            merged.append(effect)
    return merged


# =============================================================================
# Stagger
# =============================================================================


def stagger_tier_for(hp_current: int, hp_max: int, thresholds) -> StaggerTier:
    """
    Tier for an HP fraction. Checked from ``third`` down:
    f <= third -> Stagger++, f <= second -> Stagger+, f <= first -> Stagger.
    """
    f = max(0.0, min(1.0, hp_current / hp_max)) if hp_max > 0 else 0.0
    if f <= thresholds.third:
        return StaggerTier.STAGGER_PLUS_PLUS
    if f <= thresholds.second:
        return StaggerTier.STAGGER_PLUS
    if f <= thresholds.first:
        return StaggerTier.STAGGER
    return StaggerTier.NONE


def update_stagger(character: Character, hp_current: Optional[int] = None) -> StaggerTransition:
    """
    Recompute the stagger tier from HP.

    Args:
        character: Character to evaluate (not mutated)
        hp_current: Evaluate at this HP instead of the character's own
            (used to project post-clash HP)
    """
    hp = character.hp.current if hp_current is None else hp_current
    to_tier = stagger_tier_for(hp, character.hp.max, character.stagger.thresholds)
    return StaggerTransition(from_tier=character.stagger.tier, to_tier=to_tier)


# =============================================================================
# Sanity
# =============================================================================


def update_sanity(
    character: Character,
    delta: int = 0,
    config: ArenaConfig = DEFAULT_CONFIG,
) -> SanityTransition:
    """
    Shift sanity by delta, clamped to [sanity_min, sanity_max].

    The returned delta is the clamped change, which can be smaller than the
    requested one.
    """
    from_value = character.sanity
    to_value = config.clamp_sanity(from_value + delta)
    return SanityTransition(from_value=from_value, to_value=to_value, delta=to_value - from_value)
