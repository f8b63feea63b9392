"""
Combat Session - caller-owned state for one fight.

The resolver functions are stateless; a fight still needs one RNG stream
(so seeded replays line up) and one log. CombatSession bundles the two and
records every transaction it runs.

Usage:
    from packages.arena import CombatSession, Character

    session = CombatSession(seed="ARENA-1")
    order = session.roll_turn_order(characters)

    outcome = session.clash(attacker, attacker.skills[0], defender, defender.skills[1])
    attacker, defender = session.apply(outcome)

    attacker, tick = session.end_of_turn(attacker)
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple, Union

from .calc.clash import ClashOutcome, apply_outcome, resolve_clash
from .calc.turn_order import make_turn_order
from .config import DEFAULT_CONFIG, ArenaConfig
from .effects.status import (
    SanityTransition,
    TickResult,
    tick_scheduled_effects,
    update_sanity,
    update_stagger,
)
from .log import CombatLog
from .state.character import Character, Participant, Skill, TurnOrderEntry
from .state.rng import make_rng

__all__ = ["CombatSession"]

logger = logging.getLogger(__name__)


class CombatSession:
    """One fight: an RNG stream, a config and an append-only log."""

    def __init__(
        self,
        seed: Optional[Union[int, str]] = None,
        config: Optional[ArenaConfig] = None,
        rng=None,
    ):
        """
        Args:
            seed: Seed for a reproducible fight; None uses OS entropy
            config: Tuning knobs (defaults to DEFAULT_CONFIG)
            rng: Explicit draw source, overrides seed
        """
        self.seed = seed
        self.config = config or DEFAULT_CONFIG
        self.rng = rng if rng is not None else make_rng(seed)
        self.log = CombatLog()
        self.round = 0

    # -------------------------------------------------------------------------
    # Turn order
    # -------------------------------------------------------------------------

    def roll_turn_order(
        self, combatants: Sequence[Union[Character, Participant]]
    ) -> List[TurnOrderEntry]:
        """Start a new round and roll its turn order."""
        participants = [
            c.to_participant() if isinstance(c, Character) else c for c in combatants
        ]
        order = make_turn_order(participants, self.rng)
        self.round += 1
        self.log.log("turn_order", round=self.round, order=[e.to_dict() for e in order])
        logger.info("round %d order: %s", self.round,
                    ", ".join(f"{e.id}@{e.rolled}{'*' if e.gets_extra_turn else ''}" for e in order))
        return order

    # -------------------------------------------------------------------------
    # Clash
    # -------------------------------------------------------------------------

    def clash(
        self,
        attacker: Character,
        attacker_skill: Skill,
        defender: Character,
        defender_skill: Optional[Skill] = None,
    ) -> ClashOutcome:
        outcome = resolve_clash(
            attacker, attacker_skill, defender, defender_skill, self.rng, self.config
        )
        self.log.log("clash", round=self.round, attacker=attacker.id, defender=defender.id,
                     result=outcome.to_dict())
        logger.info("%s %s vs %s: winner=%s damage=%d",
                    outcome.mode.value, attacker.id, defender.id,
                    outcome.winner.id if outcome.winner else None, outcome.hp_loss)
        return outcome

    def apply(self, outcome: ClashOutcome) -> Tuple[Character, Character]:
        """Apply an outcome; returns updated (attacker, defender)."""
        attacker, defender = apply_outcome(outcome)
        self.log.log("apply", round=self.round,
                     attacker=attacker.to_dict(), defender=defender.to_dict())
        return attacker, defender

    # -------------------------------------------------------------------------
    # Upkeep
    # -------------------------------------------------------------------------

    def end_of_turn(self, character: Character) -> Tuple[Character, TickResult]:
        """Tick statuses, then recompute stagger on the resulting HP."""
        tick = tick_scheduled_effects(character)
        updated = character.copy()
        updated.status_effects = list(tick.remaining)
        updated.hp.current = max(0, min(updated.hp.max, updated.hp.current + tick.hp_delta))
        stagger = update_stagger(updated)
        updated.stagger.tier = stagger.to_tier
        self.log.log("tick", round=self.round, character=character.id,
                     stagger=stagger.to_dict(), **tick.to_dict())
        return updated, tick

    def adjust_sanity(self, character: Character, delta: int) -> Tuple[Character, SanityTransition]:
        transition = update_sanity(character, delta, self.config)
        updated = character.copy()
        updated.sanity = transition.to_value
        self.log.log("sanity", round=self.round, character=character.id, **transition.to_dict())
        return updated, transition
