"""
Speed rolls and turn order.

roll_speed draws uniformly from a declared {min, max} range (inclusive).
make_turn_order rolls every participant, sorts by rolled speed descending
(stable, so ties keep input order) and flags the fastest participant of each
side with an extra turn.

RNG draws: exactly one per participant, in input order.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Sequence

from ..errors import EmptyParticipants
from ..state.character import Participant, SpeedRange, TurnOrderEntry, validate_speed_range
from ..state.rng import RNG, make_rng

__all__ = ["roll_speed", "make_turn_order"]

logger = logging.getLogger(__name__)


def roll_speed(speed: SpeedRange, rng: Optional[RNG] = None) -> int:
    """
    Roll an effective speed: floor(rng * (max - min + 1)) + min.

    Raises:
        InvalidRange: min > max, or either bound below 1 (before drawing)
    """
    validate_speed_range(speed)
    if rng is None:
        rng = make_rng()
    return math.floor(rng.random() * (speed.max - speed.min + 1)) + speed.min


def make_turn_order(
    participants: Sequence[Participant],
    rng: Optional[RNG] = None,
) -> List[TurnOrderEntry]:
    """
    Build the turn order for one round.

    Returns new entries; the input participants are left untouched.

    Raises:
        EmptyParticipants: no participants given
        InvalidRange: any participant has malformed speed bounds (checked for
            every participant before the first roll)
    """
    if not participants:
        raise EmptyParticipants("turn order requires at least one participant")
    for p in participants:
        validate_speed_range(p.speed)
    if rng is None:
        rng = make_rng()

    rolled = []
    for p in participants:
        current = roll_speed(p.speed, rng)
        logger.debug("speed roll %s (side %s): %d in [%d, %d]",
                     p.id, p.side, current, p.speed.min, p.speed.max)
        rolled.append(TurnOrderEntry(
            id=p.id,
            side=p.side,
            name=p.name,
            speed=SpeedRange(p.speed.min, p.speed.max, current),
        ))

    # sorted() is stable: equal speeds keep input order
    ordered = sorted(rolled, key=lambda e: e.speed.current, reverse=True)

    fastest_by_side: Dict[str, TurnOrderEntry] = {}
    for entry in ordered:
        if entry.side not in fastest_by_side:
            fastest_by_side[entry.side] = entry
    for entry in ordered:
        entry.gets_extra_turn = fastest_by_side[entry.side] is entry

    return ordered
