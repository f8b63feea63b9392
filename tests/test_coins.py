"""
Coin Resolution Tests

Per-coin probability, running totals and skill validation.
"""

import pytest

from tests.conftest import FixedRandom, HIT, MISS, make_skill
from packages.arena.calc.coins import CoinRecord, CoinTrace, coin_chance, flip_coin, resolve_coins
from packages.arena.errors import InvalidSkill
from packages.arena.state.character import Coin, Skill
from packages.arena.state.rng import Random


class TestCoinChance:
    """chance = clamp(0.5 +/- sanity/100, 0, 1)."""

    def test_neutral(self):
        assert coin_chance(0) == 0.5
        assert coin_chance(0, is_negative=True) == 0.5

    def test_sanity_helps_normal_coins(self):
        assert coin_chance(45) == pytest.approx(0.95)
        assert coin_chance(-45) == pytest.approx(0.05)

    def test_sanity_flips_for_negative_coins(self):
        assert coin_chance(45, is_negative=True) == pytest.approx(0.05)
        assert coin_chance(-45, is_negative=True) == pytest.approx(0.95)

    def test_clamped(self):
        assert coin_chance(80) == 1.0
        assert coin_chance(-80) == 0.0
        assert coin_chance(-80, is_negative=True) == 1.0

    def test_draw_equal_to_chance_lands(self):
        assert flip_coin(0, False, FixedRandom(0.5)) is True
        assert flip_coin(0, False, FixedRandom(0.5000001)) is False


class TestResolveCoins:
    """Coin-by-coin trace."""

    def test_documented_example(self):
        """base 5, one 3-coin, sanity 0, draw 0.4 -> total 8."""
        trace = resolve_coins(make_skill(5, (3,)), sanity=0, rng=FixedRandom(0.4))
        assert trace.to_dict() == {
            "base": 5,
            "coins": [{"index": 0, "value": 3, "success": True, "totalAfter": 8}],
            "total": 8,
        }

    def test_running_total_per_coin(self, scripted):
        skill = make_skill(4, (2, 3, 4))
        trace = resolve_coins(skill, 0, scripted([HIT, MISS, HIT]))
        assert trace.coins == [
            CoinRecord(index=0, value=2, success=True, total_after=6),
            CoinRecord(index=1, value=3, success=False, total_after=6),
            CoinRecord(index=2, value=4, success=True, total_after=10),
        ]
        assert trace.total == 10
        assert trace.heads == 2
        assert trace.successes == [True, False, True]

    def test_all_miss_keeps_base(self, always_miss):
        trace = resolve_coins(make_skill(7, (5, 5)), 0, always_miss)
        assert trace.total == 7
        assert all(c.total_after == 7 for c in trace.coins)

    def test_one_draw_per_coin(self, scripted):
        rng = scripted([HIT] * 5)
        resolve_coins(make_skill(0, (1, 1, 1, 1, 1)), 0, rng)
        assert rng.counter == 5

    def test_negative_coin_at_high_sanity(self):
        """Draw 0.3: a plain coin lands at sanity 30 (0.8), a negative one doesn't (0.2)."""
        skill = make_skill(0, (5, 5), negative=(1,))
        trace = resolve_coins(skill, 30, FixedRandom(0.3))
        assert trace.successes == [True, False]
        assert trace.total == 5

    @pytest.mark.parametrize("seed", ["A", "B", "C", 42, 99])
    def test_total_is_base_plus_landed_coins(self, seed):
        skill = make_skill(3, (2, 4, 6, 1, 5))
        rng = Random(seed)
        for sanity in (-45, -10, 0, 20, 45):
            trace = resolve_coins(skill, sanity, rng)
            assert trace.total == skill.base_power + sum(c.value for c in trace.coins if c.success)
            assert [c.index for c in trace.coins] == [0, 1, 2, 3, 4]

    def test_success_past_end_is_miss(self, always_hit):
        trace = resolve_coins(make_skill(0, (1,)), 0, always_hit)
        assert trace.success_at(0) is True
        assert trace.success_at(3) is False

    def test_empty_trace(self):
        assert CoinTrace(base=2, total=2).heads == 0


class TestSkillValidation:
    """Invalid skills fail before any draw."""

    @pytest.mark.parametrize("skill", [
        Skill(name="NoCoins", base_power=3, coins=None),
        Skill(name="Empty", base_power=3, coins=[]),
        Skill(name="TooMany", base_power=3, coins=[Coin(1)] * 6),
        Skill(name="ZeroCoin", base_power=3, coins=[Coin(0)]),
        Skill(name="Negative", base_power=-1, coins=[Coin(1)]),
        Skill(name="Weightless", base_power=1, coins=[Coin(1)], attack_weight=0),
        Skill(name="Level6", base_power=1, coins=[Coin(1)], skill_level=6),
        Skill(name="", base_power=1, coins=[Coin(1)]),
    ], ids=lambda s: s.name or "unnamed")
    def test_rejected(self, skill, always_hit):
        with pytest.raises(InvalidSkill):
            resolve_coins(skill, 0, always_hit)
        assert always_hit.counter == 0

    def test_missing_skill(self, always_hit):
        with pytest.raises(InvalidSkill):
            resolve_coins(None, 0, always_hit)
