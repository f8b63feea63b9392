"""
Shared pytest fixtures for the Arena Clash test suite.

This module provides reusable fixtures for:
- Scripted RNGs (fixed or sequenced draws) and seeded RNGs
- Coins, skills and characters in known states
- Guard skills for each guard type
"""

import pytest
import sys

# Ensure project root is in path
import os
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _project_root)

from packages.arena.state.character import (
    Character, Coin, GuardType, HitPoints, Skill, SpeedRange,
    StaggerState, StatusEffect, StatusType,
)
from packages.arena.state.rng import Random


# =============================================================================
# Scripted RNGs
# =============================================================================


class FixedRandom:
    """Returns the same draw forever."""

    def __init__(self, value: float):
        self.value = value
        self.counter = 0

    def random(self) -> float:
        self.counter += 1
        return self.value


class ScriptedRandom:
    """Returns draws from a list, in order. Running out is a test bug."""

    def __init__(self, values):
        self.values = list(values)
        self.counter = 0

    def random(self) -> float:
        if self.counter >= len(self.values):
            raise AssertionError(f"ScriptedRandom exhausted after {self.counter} draws")
        value = self.values[self.counter]
        self.counter += 1
        return value


# Draw values that land / miss a plain coin at sanity 0 (chance 0.5)
HIT = 0.1
MISS = 0.9


# =============================================================================
# Builders
# =============================================================================


def make_skill(base_power=5, coin_values=(3,), name="Strike", negative=(), **kwargs) -> Skill:
    """Skill with plain coins; indices in ``negative`` become negative coins."""
    coins = [Coin(value=v, is_negative=i in negative) for i, v in enumerate(coin_values)]
    return Skill(name=name, base_power=base_power, coins=coins, **kwargs)


def make_character(
    char_id="c1",
    name=None,
    side="A",
    speed=(3, 7),
    hp=(100, 100),
    sanity=0,
    skills=None,
    status_effects=None,
    **kwargs,
) -> Character:
    return Character(
        id=char_id,
        name=name or char_id.upper(),
        side=side,
        speed=SpeedRange(*speed),
        hp=HitPoints(*hp),
        sanity=sanity,
        skills=skills if skills is not None else [make_skill()],
        status_effects=status_effects or [],
        **kwargs,
    )


def character_doc(**overrides) -> dict:
    """A valid character document in the host schema."""
    doc = {
        "id": "hero",
        "name": "Hero",
        "side": "A",
        "speed": {"min": 3, "max": 7},
        "hp": {"current": 100, "max": 100},
        "sanity": 0,
        "skills": [
            {
                "name": "Slash",
                "description": "A quick cut",
                "basePower": 4,
                "coins": [{"value": 3, "isNegative": False}, {"value": 2}],
                "attackWeight": 1,
                "skillLevel": 1,
                "guardType": None,
                "effects": [{"type": "Bleed", "potency": 2, "count": 3}],
            },
            {
                "name": "Sidestep",
                "basePower": 2,
                "coins": [{"value": 4}],
                "skillLevel": 5,
                "guardType": "Evade",
            },
        ],
        "statusEffects": [],
        "stagger": {"state": None, "thresholds": {"first": 0.33, "second": 0.66, "third": 0.83}},
        "weaknesses": ["Slash"],
        "isActive": True,
        "charge": {"potency": 0, "count": 0},
    }
    doc.update(overrides)
    return doc


# =============================================================================
# RNG Fixtures
# =============================================================================


@pytest.fixture
def rng_seed_42():
    """Seeded RNG for deterministic tests."""
    return Random(42)


@pytest.fixture
def always_hit():
    """Every draw is 0.0: any coin with chance > 0 lands."""
    return FixedRandom(0.0)


@pytest.fixture
def always_miss():
    """Every draw is just under 1.0: only a chance-1.0 coin lands."""
    return FixedRandom(0.999999)


@pytest.fixture
def scripted():
    """Factory for ScriptedRandom."""
    return ScriptedRandom


# =============================================================================
# Skill Fixtures
# =============================================================================


@pytest.fixture
def basic_skill():
    """Base 5, one coin worth 3."""
    return make_skill(base_power=5, coin_values=(3,))


@pytest.fixture
def three_coin_skill():
    """Base 4, coins 2/3/4."""
    return make_skill(base_power=4, coin_values=(2, 3, 4), name="Flurry")


@pytest.fixture
def burn_skill():
    """Wins inflict Burn 2 (6 immediate damage) and Bleed 1x2."""
    return make_skill(
        base_power=6, coin_values=(2,), name="Ember",
        effects=[
            StatusEffect(StatusType.BURN, potency=2, count=2),
            StatusEffect(StatusType.BLEED, potency=1, count=2),
        ],
    )


@pytest.fixture
def guard_skill():
    """Factory for level-5 guard skills."""
    def _make(guard_type: GuardType, base_power=5, coin_values=(3,)):
        return make_skill(
            base_power=base_power, coin_values=coin_values,
            name=guard_type.value, skill_level=5, guard_type=guard_type,
        )
    return _make


# =============================================================================
# Character Fixtures
# =============================================================================


@pytest.fixture
def attacker(basic_skill):
    return make_character("atk", name="Attacker", side="A", skills=[basic_skill])


@pytest.fixture
def defender(basic_skill):
    return make_character("def", name="Defender", side="B", skills=[basic_skill])


@pytest.fixture
def wounded():
    """50/100 HP, no stagger yet, Burn and Bleed active."""
    return make_character(
        "wounded", hp=(50, 100),
        status_effects=[
            StatusEffect(StatusType.BURN, potency=5, count=2),
            StatusEffect(StatusType.BLEED, potency=3, count=1),
        ],
        stagger=StaggerState(),
    )


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "rng: marks test as RNG-related")
    config.addinivalue_line("markers", "clash: marks test as clash-related")
    config.addinivalue_line("markers", "integration: marks test as integration test")
