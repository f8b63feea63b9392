"""
Clash resolution - attacker skill vs defender skill.

Order of decision (from resolve_clash):
1. Roll attacker coins, then defender coins (fixed draw order)
2. Different totals: higher total wins (phase "total")
3. Equal totals: first coin index where exactly one side landed wins
   (phase "coin"); a coin past the end of the shorter skill is a miss
4. Otherwise a true tie (phase "tie"), no winner

Without a defender skill the attack is "direct": only the attacker rolls
and it always lands.

After a winner is known the outcome is completed with projected damage,
inflicted effects, the loser's stagger transition and the winner's sanity
gain. Nothing is mutated; apply_outcome builds the updated characters.

Guard skills (level 5, defender side only):
- Evade:   defender wins -> no damage, no effects
- Block:   defender wins -> no damage, no effects;
           defender loses -> damage is attacker total - defender total
- Counter: defender wins -> defender total is reflected onto the attacker
- ClashableCounter: clashes like an ordinary skill
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ..config import DEFAULT_CONFIG, ArenaConfig
from ..effects.status import (
    EffectSplit,
    SanityTransition,
    StaggerTransition,
    apply_immediate_effects,
    stack_status_effects,
    update_sanity,
    update_stagger,
)
from ..errors import InvalidCharacter
from ..state.character import Character, GuardType, Skill, validate_skill
from ..state.rng import RNG, make_rng
from .coins import CoinTrace, resolve_coins

__all__ = [
    "ClashMode",
    "ClashPhase",
    "ClashOutcome",
    "resolve_clash",
    "decide_clash",
    "apply_outcome",
]

logger = logging.getLogger(__name__)


class ClashMode(Enum):
    DIRECT = "direct"
    CLASH = "clash"
    CLASH_DAMAGE = "clash+damage"


class ClashPhase(Enum):
    TOTAL = "total"
    COIN = "coin"
    TIE = "tie"


def _ref(obj) -> Optional[Dict[str, Any]]:
    if obj is None:
        return None
    return {"id": obj.id, "name": obj.name}


@dataclass
class ClashOutcome:
    """
    Everything one clash (or direct attack) produced.

    ``winner``/``loser`` reference the input characters; damage, effects,
    stagger and sanity are projections for the caller to apply.
    """

    mode: ClashMode
    attacker: Character
    defender: Character
    attacker_skill: Skill
    defender_skill: Optional[Skill]
    attacker_trace: CoinTrace
    defender_trace: Optional[CoinTrace] = None
    phase: Optional[ClashPhase] = None  # None for direct attacks
    winner: Optional[Character] = None
    loser: Optional[Character] = None
    winner_skill: Optional[Skill] = None
    loser_skill: Optional[Skill] = None
    tiebreak_index: Optional[int] = None
    attacker_won: Optional[bool] = None  # None on a tie
    coins_broken: int = 0
    damage_dealt: int = 0
    reflected: int = 0
    effects: EffectSplit = field(default_factory=EffectSplit)
    stagger: Optional[StaggerTransition] = None
    sanity: Optional[SanityTransition] = None

    @property
    def is_tie(self) -> bool:
        return self.phase is ClashPhase.TIE

    @property
    def hp_loss(self) -> int:
        """Total HP the loser is projected to lose."""
        return self.damage_dealt + self.reflected + self.effects.hp_damage

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "phase": self.phase.value if self.phase else None,
            "winner": _ref(self.winner),
            "loser": _ref(self.loser),
            "winnerSkill": _ref(self.winner_skill),
            "loserSkill": _ref(self.loser_skill),
            "tiebreakIndex": self.tiebreak_index,
            "coinsBroken": self.coins_broken,
            "traces": {
                "attacker": self.attacker_trace.to_dict(),
                "defender": self.defender_trace.to_dict() if self.defender_trace else None,
            },
            "damageDealt": self.damage_dealt,
            "reflected": self.reflected,
            "effects": self.effects.to_dict(),
            "stagger": self.stagger.to_dict() if self.stagger else None,
            "sanity": self.sanity.to_dict() if self.sanity else None,
        }


def decide_clash(atk: CoinTrace, dfn: CoinTrace) -> Tuple[Optional[bool], ClashPhase, Optional[int]]:
    """
    Compare two traces.

    Returns:
        (attacker_wins, phase, tiebreak_index); attacker_wins is None on a tie
    """
    if atk.total != dfn.total:
        return atk.total > dfn.total, ClashPhase.TOTAL, None

    for i in range(max(len(atk.coins), len(dfn.coins))):
        a = atk.success_at(i)
        d = dfn.success_at(i)
        if a != d:
            return a, ClashPhase.COIN, i

    return None, ClashPhase.TIE, None


def _project_consequences(outcome: ClashOutcome, config: ArenaConfig) -> None:
    """Fill damage, effects, stagger and sanity for an outcome with a winner."""
    winner_trace = outcome.attacker_trace if outcome.attacker_won else outcome.defender_trace
    defender_won = outcome.attacker_won is False

    guard = None
    if outcome.defender_skill is not None and outcome.defender_skill.is_guard:
        guard = outcome.defender_skill.guard_type

    damage = winner_trace.total
    reflected = 0
    effects_land = True
    if guard in (GuardType.EVADE, GuardType.BLOCK) and defender_won:
        damage = 0
        effects_land = False
    elif guard is GuardType.BLOCK:
        damage = max(0, outcome.attacker_trace.total - outcome.defender_trace.total)
    elif guard is GuardType.COUNTER and defender_won:
        reflected = outcome.defender_trace.total
        damage = 0

    outcome.damage_dealt = damage
    outcome.reflected = reflected
    if effects_land:
        outcome.effects = apply_immediate_effects(outcome.winner_skill.effects, config)

    loser = outcome.loser
    projected_hp = max(0, loser.hp.current - outcome.hp_loss)
    outcome.stagger = update_stagger(loser, hp_current=projected_hp)

    if outcome.mode is not ClashMode.DIRECT:
        outcome.sanity = update_sanity(outcome.winner, config.sanity_on_clash_win, config)
        outcome.mode = ClashMode.CLASH_DAMAGE if outcome.hp_loss > 0 else ClashMode.CLASH


def resolve_clash(
    attacker: Character,
    attacker_skill: Skill,
    defender: Character,
    defender_skill: Optional[Skill] = None,
    rng: Optional[RNG] = None,
    config: ArenaConfig = DEFAULT_CONFIG,
) -> ClashOutcome:
    """
    Resolve one exchange between two characters.

    Args:
        attacker: Acting character
        attacker_skill: Skill the attacker uses
        defender: Target character
        defender_skill: Skill the defender clashes with; None for a direct attack
        rng: Draw source (attacker coins first, then defender coins)
        config: Tuning knobs

    Raises:
        InvalidCharacter: attacker and defender are the same character
        InvalidSkill: either skill is invalid (checked before any draw)
    """
    if attacker is defender or attacker.id == defender.id:
        raise InvalidCharacter(f"{attacker.id} cannot clash with itself")
    validate_skill(attacker_skill, config)
    if defender_skill is not None:
        validate_skill(defender_skill, config)
    if rng is None:
        rng = make_rng()

    atk = resolve_coins(attacker_skill, attacker.sanity, rng, config)

    if defender_skill is None:
        outcome = ClashOutcome(
            mode=ClashMode.DIRECT,
            attacker=attacker,
            defender=defender,
            attacker_skill=attacker_skill,
            defender_skill=None,
            attacker_trace=atk,
            winner=attacker,
            loser=defender,
            winner_skill=attacker_skill,
            attacker_won=True,
        )
        _project_consequences(outcome, config)
        logger.debug("direct %s -> %s: %d damage", attacker.id, defender.id, outcome.damage_dealt)
        return outcome

    dfn = resolve_coins(defender_skill, defender.sanity, rng, config)
    attacker_wins, phase, tiebreak_index = decide_clash(atk, dfn)

    outcome = ClashOutcome(
        mode=ClashMode.CLASH,
        attacker=attacker,
        defender=defender,
        attacker_skill=attacker_skill,
        defender_skill=defender_skill,
        attacker_trace=atk,
        defender_trace=dfn,
        phase=phase,
        tiebreak_index=tiebreak_index,
        attacker_won=attacker_wins,
    )

    if attacker_wins is None:
        logger.debug("clash %s vs %s: tie at %d", attacker.id, defender.id, atk.total)
        return outcome

    if attacker_wins:
        outcome.winner, outcome.loser = attacker, defender
        outcome.winner_skill, outcome.loser_skill = attacker_skill, defender_skill
    else:
        outcome.winner, outcome.loser = defender, attacker
        outcome.winner_skill, outcome.loser_skill = defender_skill, attacker_skill
    outcome.coins_broken = 1

    _project_consequences(outcome, config)
    logger.debug("clash %s vs %s: %d-%d, %s wins (%s)",
                 attacker.id, defender.id, atk.total, dfn.total, outcome.winner.id, phase.value)
    return outcome


def apply_outcome(outcome: ClashOutcome) -> Tuple[Character, Character]:
    """
    Apply an outcome's projections.

    Returns:
        New (attacker, defender) copies; the outcome's characters are untouched
    """
    attacker = outcome.attacker.copy()
    defender = outcome.defender.copy()
    if outcome.winner is None:
        return attacker, defender

    if outcome.attacker_won:
        winner, loser = attacker, defender
    else:
        winner, loser = defender, attacker

    loser.hp.current = max(0, loser.hp.current - outcome.hp_loss)
    loser.status_effects = stack_status_effects(loser.status_effects, outcome.effects.inflicted)
    if outcome.stagger is not None:
        loser.stagger.tier = outcome.stagger.to_tier
    if outcome.sanity is not None:
        winner.sanity = outcome.sanity.to_value

    return attacker, defender
