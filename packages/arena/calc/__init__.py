"""
Calculation utilities for combat resolution.

Contains:
- Speed rolls and turn order
- Coin resolution (per-coin success and running power total)
- Clash resolution (winner, tie-break, projected consequences)
"""

from .turn_order import roll_speed, make_turn_order

from .coins import (
    BASE_COIN_CHANCE,
    CoinRecord,
    CoinTrace,
    coin_chance,
    flip_coin,
    resolve_coins,
)

from .clash import (
    ClashMode,
    ClashPhase,
    ClashOutcome,
    resolve_clash,
    decide_clash,
    apply_outcome,
)
