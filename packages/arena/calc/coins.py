"""
Coin resolution - turns a skill's coin sequence into a power total.

Per coin, in declared order:
1. chance = clamp(0.5 + sanity / 100, 0, 1), sanity term negated for
   negative coins
2. one RNG draw; the coin lands if draw <= chance
3. a landed coin adds its value to the running total
4. record (index, value, success, total_after)

The per-coin records are kept in evaluation order with the running total as
it stood right after each coin; display and logs replay them as-is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config import DEFAULT_CONFIG, ArenaConfig
from ..state.character import Skill, validate_skill
from ..state.rng import RNG, make_rng

__all__ = [
    "BASE_COIN_CHANCE",
    "CoinRecord",
    "CoinTrace",
    "coin_chance",
    "flip_coin",
    "resolve_coins",
]

logger = logging.getLogger(__name__)

BASE_COIN_CHANCE = 0.5


@dataclass(frozen=True)
class CoinRecord:
    """Outcome of one coin."""
    index: int
    value: int
    success: bool
    total_after: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "value": self.value,
            "success": self.success,
            "totalAfter": self.total_after,
        }


@dataclass
class CoinTrace:
    """Full coin-by-coin record of one skill use."""
    base: int
    coins: List[CoinRecord] = field(default_factory=list)
    total: int = 0

    @property
    def successes(self) -> List[bool]:
        return [c.success for c in self.coins]

    @property
    def heads(self) -> int:
        return sum(1 for c in self.coins if c.success)

    def success_at(self, index: int) -> bool:
        """Coin success at index; a coin past the end counts as a miss."""
        if index < len(self.coins):
            return self.coins[index].success
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base": self.base,
            "coins": [c.to_dict() for c in self.coins],
            "total": self.total,
        }


def coin_chance(sanity: int, is_negative: bool = False) -> float:
    """Landing probability for one coin at the given sanity."""
    mod = sanity / 100
    if is_negative:
        mod = -mod
    return max(0.0, min(1.0, BASE_COIN_CHANCE + mod))


def flip_coin(sanity: int, is_negative: bool, rng: RNG) -> bool:
    """Consume one draw; True if the coin lands."""
    return rng.random() <= coin_chance(sanity, is_negative)


def resolve_coins(
    skill: Skill,
    sanity: int = 0,
    rng: Optional[RNG] = None,
    config: ArenaConfig = DEFAULT_CONFIG,
) -> CoinTrace:
    """
    Resolve every coin of a skill for an actor at the given sanity.

    Args:
        skill: Skill to roll (validated before any draw)
        sanity: Actor's current sanity
        rng: Draw source; one draw per coin
        config: Limits used by skill validation

    Returns:
        CoinTrace with base, ordered coin records and final total

    Raises:
        InvalidSkill: skill cannot be resolved (e.g. no coin array)
    """
    validate_skill(skill, config)
    if rng is None:
        rng = make_rng()

    total = skill.base_power
    records = []
    for idx, coin in enumerate(skill.coins):
        success = flip_coin(sanity, coin.is_negative, rng)
        if success:
            total += coin.value
        records.append(CoinRecord(index=idx, value=coin.value, success=success, total_after=total))

    logger.debug("coins %s @ sanity %d: %s -> %d",
                 skill.name, sanity, "".join("H" if r.success else "T" for r in records), total)
    return CoinTrace(base=skill.base_power, coins=records, total=total)
