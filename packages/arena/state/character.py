"""
Character state for the combat resolver.

Plain dataclasses with one strict wire schema (camelCase keys, as the host
persists them). ``from_dict`` rejects unknown keys and wrong types instead
of guessing; ``to_dict`` emits the same schema.

Characters are created by the host, read by the resolver, and only ever
replaced (never mutated) by ``apply_outcome`` / the session layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Type

from ..config import DEFAULT_CONFIG, DEFAULT_STAGGER_THRESHOLDS, ArenaConfig
from ..errors import ArenaError, InvalidCharacter, InvalidRange, InvalidSkill

__all__ = [
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


# =============================================================================
# Enums
# =============================================================================


class StatusType(Enum):
    """Status effect kinds."""
    BLEED = "Bleed"
    BURN = "Burn"
    RUPTURE = "Rupture"
    SINKING = "Sinking"
    CHARGE = "Charge"
    TREMOR = "Tremor"
    POISE = "Poise"


class GuardType(Enum):
    """Defensive modifier carried by a level-5 skill."""
    EVADE = "Evade"
    BLOCK = "Block"
    COUNTER = "Counter"
    CLASHABLE_COUNTER = "ClashableCounter"


class StaggerTier(Enum):
    """Condition tier derived from HP fraction. Serialized NONE is null."""
    NONE = "None"
    STAGGER = "Stagger"
    STAGGER_PLUS = "Stagger+"
    STAGGER_PLUS_PLUS = "Stagger++"

    def to_wire(self) -> Optional[str]:
        return None if self is StaggerTier.NONE else self.value


GUARD_SKILL_LEVEL = 5
SKILL_LEVELS = (1, 2, 3, 4, 5)


# =============================================================================
# Strict schema helpers
# =============================================================================


def _check_keys(
    data: Any,
    where: str,
    required: Iterable[str],
    optional: Iterable[str] = (),
    error: Type[ArenaError] = InvalidCharacter,
) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise error(f"{where}: expected an object, got {type(data).__name__}")
    required = set(required)
    allowed = required | set(optional)
    missing = required - data.keys()
    if missing:
        raise error(f"{where}: missing field(s) {sorted(missing)}")
    unknown = data.keys() - allowed
    if unknown:
        raise error(f"{where}: unknown field(s) {sorted(unknown)}")
    return data


def _int(value: Any, where: str, error: Type[ArenaError] = InvalidCharacter) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise error(f"{where}: expected an integer, got {value!r}")
    return value


def _number(value: Any, where: str, error: Type[ArenaError] = InvalidCharacter) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise error(f"{where}: expected a number, got {value!r}")
    return float(value)


def _str(value: Any, where: str, error: Type[ArenaError] = InvalidCharacter) -> str:
    if not isinstance(value, str):
        raise error(f"{where}: expected a string, got {value!r}")
    return value


def _bool(value: Any, where: str, error: Type[ArenaError] = InvalidCharacter) -> bool:
    if not isinstance(value, bool):
        raise error(f"{where}: expected a boolean, got {value!r}")
    return value


def _list(value: Any, where: str, error: Type[ArenaError] = InvalidCharacter) -> list:
    if not isinstance(value, list):
        raise error(f"{where}: expected a list, got {value!r}")
    return value


def _enum(enum_cls, value: Any, where: str, error: Type[ArenaError] = InvalidCharacter):
    try:
        return enum_cls(value)
    except ValueError:
        choices = [m.value for m in enum_cls]
        raise error(f"{where}: {value!r} is not one of {choices}") from None


# =============================================================================
# Skill components
# =============================================================================


@dataclass(frozen=True)
class Coin:
    """One probabilistic sub-roll of a skill."""

    value: int
    is_negative: bool = False  # sanity pushes this coin the other way

    @classmethod
    def from_dict(cls, data: Any, where: str = "coin") -> Coin:
        _check_keys(data, where, ["value"], ["isNegative"], error=InvalidSkill)
        return cls(
            value=_int(data["value"], f"{where}.value", InvalidSkill),
            is_negative=_bool(data.get("isNegative", False), f"{where}.isNegative", InvalidSkill),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "isNegative": self.is_negative}


@dataclass(frozen=True)
class StatusEffect:
    """A status effect: magnitude (potency) and remaining triggers (count)."""

    type: StatusType
    potency: int = 0
    count: int = 0

    @classmethod
    def from_dict(
        cls, data: Any, where: str = "effect", error: Type[ArenaError] = InvalidCharacter
    ) -> StatusEffect:
        _check_keys(data, where, ["type"], ["potency", "count"], error=error)
        return cls(
            type=_enum(StatusType, data["type"], f"{where}.type", error),
            potency=_int(data.get("potency", 0), f"{where}.potency", error),
            count=_int(data.get("count", 0), f"{where}.count", error),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "potency": self.potency, "count": self.count}


@dataclass
class Skill:
    """
    A skill: base power plus an ordered coin sequence.

    Level 5 marks a guard skill; ``guard_type`` is only meaningful there.
    ``effects`` are inflicted on the loser when this skill wins.
    """

    name: str
    base_power: int
    coins: List[Coin]
    description: str = ""
    attack_weight: int = 1
    skill_level: int = 1
    guard_type: Optional[GuardType] = None
    effects: List[StatusEffect] = field(default_factory=list)
    id: Optional[str] = None

    @property
    def is_guard(self) -> bool:
        return self.skill_level == GUARD_SKILL_LEVEL

    @property
    def max_power(self) -> int:
        """Total if every coin lands."""
        return self.base_power + sum(c.value for c in self.coins)

    @classmethod
    def from_dict(cls, data: Any, where: str = "skill") -> Skill:
        _check_keys(
            data, where,
            required=["name", "basePower", "coins"],
            optional=["id", "description", "attackWeight", "skillLevel", "guardType", "effects"],
            error=InvalidSkill,
        )
        coins = _list(data["coins"], f"{where}.coins", InvalidSkill)
        guard = data.get("guardType")
        skill_id = data.get("id")
        return cls(
            id=None if skill_id is None else _str(skill_id, f"{where}.id", InvalidSkill),
            name=_str(data["name"], f"{where}.name", InvalidSkill),
            description=_str(data.get("description", ""), f"{where}.description", InvalidSkill),
            base_power=_int(data["basePower"], f"{where}.basePower", InvalidSkill),
            coins=[Coin.from_dict(c, f"{where}.coins[{i}]") for i, c in enumerate(coins)],
            attack_weight=_int(data.get("attackWeight", 1), f"{where}.attackWeight", InvalidSkill),
            skill_level=_int(data.get("skillLevel", 1), f"{where}.skillLevel", InvalidSkill),
            guard_type=None if guard is None else _enum(GuardType, guard, f"{where}.guardType", InvalidSkill),
            effects=[
                StatusEffect.from_dict(e, f"{where}.effects[{i}]", InvalidSkill)
                for i, e in enumerate(_list(data.get("effects", []), f"{where}.effects", InvalidSkill))
            ],
        )

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "name": self.name,
            "description": self.description,
            "basePower": self.base_power,
            "coins": [c.to_dict() for c in self.coins],
            "attackWeight": self.attack_weight,
            "skillLevel": self.skill_level,
            "guardType": self.guard_type.value if self.guard_type else None,
            "effects": [e.to_dict() for e in self.effects],
        }
        if self.id is not None:
            d["id"] = self.id
        return d


# =============================================================================
# Character components
# =============================================================================


@dataclass
class SpeedRange:
    """Declared speed bounds plus the transient rolled value."""

    min: int
    max: int
    current: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Any, where: str = "speed") -> SpeedRange:
        _check_keys(data, where, ["min", "max"], ["current"])
        current = data.get("current")
        return cls(
            min=_int(data["min"], f"{where}.min"),
            max=_int(data["max"], f"{where}.max"),
            current=None if current is None else _int(current, f"{where}.current"),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = {"min": self.min, "max": self.max}
        if self.current is not None:
            d["current"] = self.current
        return d

    def copy(self) -> SpeedRange:
        return SpeedRange(self.min, self.max, self.current)


@dataclass
class HitPoints:
    current: int
    max: int

    @property
    def fraction(self) -> float:
        """current / max, clamped to [0, 1]."""
        if self.max <= 0:
            return 0.0
        return max(0.0, min(1.0, self.current / self.max))

    @classmethod
    def from_dict(cls, data: Any, where: str = "hp") -> HitPoints:
        _check_keys(data, where, ["current", "max"])
        return cls(
            current=_int(data["current"], f"{where}.current"),
            max=_int(data["max"], f"{where}.max"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"current": self.current, "max": self.max}


@dataclass(frozen=True)
class StaggerThresholds:
    """HP fractions at which each stagger tier begins."""

    first: float = DEFAULT_STAGGER_THRESHOLDS[0]
    second: float = DEFAULT_STAGGER_THRESHOLDS[1]
    third: float = DEFAULT_STAGGER_THRESHOLDS[2]

    @classmethod
    def from_config(cls, config: ArenaConfig = DEFAULT_CONFIG) -> StaggerThresholds:
        return cls(*config.stagger_thresholds)

    @classmethod
    def from_dict(cls, data: Any, where: str = "stagger.thresholds") -> StaggerThresholds:
        _check_keys(data, where, ["first", "second", "third"])
        return cls(
            first=_number(data["first"], f"{where}.first"),
            second=_number(data["second"], f"{where}.second"),
            third=_number(data["third"], f"{where}.third"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"first": self.first, "second": self.second, "third": self.third}


@dataclass
class StaggerState:
    tier: StaggerTier = StaggerTier.NONE
    thresholds: StaggerThresholds = field(default_factory=StaggerThresholds)

    @classmethod
    def from_dict(
        cls, data: Any, where: str = "stagger", config: ArenaConfig = DEFAULT_CONFIG
    ) -> StaggerState:
        """Missing thresholds fall back to the configured defaults."""
        _check_keys(data, where, [], ["state", "thresholds"])
        state = data.get("state")
        if state is not None:
            _str(state, f"{where}.state")
        thresholds = data.get("thresholds")
        return cls(
            tier=_enum(StaggerTier, state, f"{where}.state") if state is not None else StaggerTier.NONE,
            thresholds=(
                StaggerThresholds.from_dict(thresholds, f"{where}.thresholds")
                if thresholds is not None
                else StaggerThresholds.from_config(config)
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"state": self.tier.to_wire(), "thresholds": self.thresholds.to_dict()}

    def copy(self) -> StaggerState:
        return StaggerState(self.tier, self.thresholds)


@dataclass
class ChargeState:
    potency: int = 0
    count: int = 0

    @classmethod
    def from_dict(cls, data: Any, where: str = "charge") -> ChargeState:
        _check_keys(data, where, [], ["potency", "count"])
        return cls(
            potency=_int(data.get("potency", 0), f"{where}.potency"),
            count=_int(data.get("count", 0), f"{where}.count"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"potency": self.potency, "count": self.count}


# =============================================================================
# Character
# =============================================================================


@dataclass
class Character:
    """A combatant as the resolver sees it."""

    id: str
    name: str
    speed: SpeedRange
    hp: HitPoints
    skills: List[Skill]
    side: str = "A"
    sanity: int = 0
    status_effects: List[StatusEffect] = field(default_factory=list)
    stagger: StaggerState = field(default_factory=StaggerState)
    weaknesses: List[str] = field(default_factory=list)
    is_active: bool = True
    charge: ChargeState = field(default_factory=ChargeState)

    @property
    def guard_skills(self) -> List[Skill]:
        return [s for s in self.skills if s.is_guard]

    @property
    def is_dead(self) -> bool:
        return self.hp.current <= 0

    def get_status(self, status_type: StatusType) -> Optional[StatusEffect]:
        for effect in self.status_effects:
            if effect.type is status_type:
                return effect
        return None

    def to_participant(self) -> Participant:
        return Participant(id=self.id, side=self.side, speed=self.speed.copy(), name=self.name)

    def copy(self) -> Character:
        """Copy with fresh nested state. Skills are shared (read-only)."""
        return Character(
            id=self.id,
            name=self.name,
            speed=self.speed.copy(),
            hp=HitPoints(self.hp.current, self.hp.max),
            skills=list(self.skills),
            side=self.side,
            sanity=self.sanity,
            status_effects=list(self.status_effects),
            stagger=self.stagger.copy(),
            weaknesses=list(self.weaknesses),
            is_active=self.is_active,
            charge=ChargeState(self.charge.potency, self.charge.count),
        )

    @classmethod
    def from_dict(cls, data: Any, config: ArenaConfig = DEFAULT_CONFIG) -> Character:
        """Parse the host's character document."""
        _check_keys(
            data, "character",
            required=["id", "name", "speed", "hp", "skills"],
            optional=["side", "sanity", "statusEffects", "stagger", "weaknesses", "isActive", "charge"],
        )
        where = f"character[{data['id']!r}]"
        character = cls(
            id=_str(data["id"], f"{where}.id"),
            name=_str(data["name"], f"{where}.name"),
            side=_str(data.get("side", "A"), f"{where}.side"),
            speed=SpeedRange.from_dict(data["speed"], f"{where}.speed"),
            hp=HitPoints.from_dict(data["hp"], f"{where}.hp"),
            sanity=_int(data.get("sanity", 0), f"{where}.sanity"),
            skills=[
                Skill.from_dict(s, f"{where}.skills[{i}]")
                for i, s in enumerate(_list(data["skills"], f"{where}.skills"))
            ],
            status_effects=[
                StatusEffect.from_dict(e, f"{where}.statusEffects[{i}]")
                for i, e in enumerate(_list(data.get("statusEffects", []), f"{where}.statusEffects"))
            ],
            stagger=StaggerState.from_dict(data.get("stagger", {}), f"{where}.stagger", config),
            weaknesses=[
                _str(w, f"{where}.weaknesses[{i}]")
                for i, w in enumerate(_list(data.get("weaknesses", []), f"{where}.weaknesses"))
            ],
            is_active=_bool(data.get("isActive", True), f"{where}.isActive"),
            charge=ChargeState.from_dict(data.get("charge", {}), f"{where}.charge"),
        )

        hp = character.hp
        if hp.max < 1:
            raise InvalidCharacter(f"{where}.hp.max: must be at least 1, got {hp.max}")
        if not 0 <= hp.current <= hp.max:
            raise InvalidCharacter(f"{where}.hp.current: must be within 0..{hp.max}, got {hp.current}")
        if not config.sanity_min <= character.sanity <= config.sanity_max:
            raise InvalidCharacter(
                f"{where}.sanity: must be within {config.sanity_min}..{config.sanity_max}, "
                f"got {character.sanity}"
            )
        return character

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "side": self.side,
            "speed": self.speed.to_dict(),
            "hp": self.hp.to_dict(),
            "sanity": self.sanity,
            "skills": [s.to_dict() for s in self.skills],
            "statusEffects": [e.to_dict() for e in self.status_effects],
            "stagger": self.stagger.to_dict(),
            "weaknesses": list(self.weaknesses),
            "isActive": self.is_active,
            "charge": self.charge.to_dict(),
        }


# =============================================================================
# Turn order records
# =============================================================================


@dataclass
class Participant:
    """Turn-order input: identity, side tag and speed bounds."""

    id: str
    side: str
    speed: SpeedRange
    name: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> Participant:
        _check_keys(data, "participant", ["id", "side", "speed"], ["name"])
        return cls(
            id=_str(data["id"], "participant.id"),
            side=_str(data["side"], "participant.side"),
            speed=SpeedRange.from_dict(data["speed"], "participant.speed"),
            name=_str(data.get("name", ""), "participant.name"),
        )


@dataclass
class TurnOrderEntry:
    """A participant with its rolled speed and extra-turn flag."""

    id: str
    side: str
    speed: SpeedRange
    gets_extra_turn: bool = False
    name: str = ""

    @property
    def rolled(self) -> int:
        return self.speed.current

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "side": self.side,
            "speed": self.speed.to_dict(),
            "getsExtraTurn": self.gets_extra_turn,
        }


# =============================================================================
# Validation
# =============================================================================


def validate_speed_range(speed: SpeedRange) -> None:
    """Raise InvalidRange unless 1 <= min <= max."""
    if speed is None:
        raise InvalidRange("speed range is missing")
    if speed.min < 1 or speed.max < 1:
        raise InvalidRange(f"speed bounds must be >= 1, got min={speed.min} max={speed.max}")
    if speed.min > speed.max:
        raise InvalidRange(f"speed min ({speed.min}) exceeds max ({speed.max})")


def validate_skill(skill: Skill, config: ArenaConfig = DEFAULT_CONFIG) -> None:
    """Raise InvalidSkill if the skill cannot be resolved."""
    if skill is None:
        raise InvalidSkill("skill is missing")
    label = skill.name or "<unnamed>"
    if not isinstance(skill.name, str) or not skill.name.strip():
        raise InvalidSkill("skill name is required")
    if skill.coins is None:
        raise InvalidSkill(f"{label}: coin array is required")
    if not skill.coins:
        raise InvalidSkill(f"{label}: at least one coin is required")
    if len(skill.coins) > config.max_coins:
        raise InvalidSkill(f"{label}: at most {config.max_coins} coins, got {len(skill.coins)}")
    for i, coin in enumerate(skill.coins):
        if coin.value < 1:
            raise InvalidSkill(f"{label}: coin {i} value must be >= 1, got {coin.value}")
    if skill.base_power < 0:
        raise InvalidSkill(f"{label}: base power cannot be negative")
    if skill.attack_weight < 1:
        raise InvalidSkill(f"{label}: attack weight must be >= 1")
    if skill.skill_level not in SKILL_LEVELS:
        raise InvalidSkill(f"{label}: skill level must be 1..5, got {skill.skill_level}")
    if skill.guard_type is not None and not skill.is_guard:
        raise InvalidSkill(f"{label}: guard type requires a level-5 skill")


def validate_character(character: Character, config: ArenaConfig = DEFAULT_CONFIG) -> None:
    """
    Creation-workflow checks. The resolver itself does not call this;
    hosts run it before persisting a new or edited character.
    """
    label = character.name or character.id
    if not character.name.strip():
        raise InvalidCharacter(f"{character.id}: name is required")
    if character.hp.max < 1:
        raise InvalidCharacter(f"{label}: max HP must be at least 1")
    if not 0 <= character.hp.current <= character.hp.max:
        raise InvalidCharacter(
            f"{label}: current HP must be within 0..{character.hp.max}, got {character.hp.current}"
        )
    validate_speed_range(character.speed)
    if not config.sanity_min <= character.sanity <= config.sanity_max:
        raise InvalidCharacter(
            f"{label}: sanity must be within {config.sanity_min}..{config.sanity_max}"
        )
    if not character.skills:
        raise InvalidCharacter(f"{label}: at least one skill is required")
    if len(character.guard_skills) > 1:
        raise InvalidCharacter(f"{label}: only one level-5 (guard) skill allowed")
    for skill in character.skills:
        validate_skill(skill, config)
    if len([w for w in character.weaknesses if w.strip()]) > config.max_weaknesses:
        raise InvalidCharacter(f"{label}: at most {config.max_weaknesses} weaknesses")
