#!/usr/bin/env python3
"""
Arena Clash - Command Line Interface

Developer CLI for replaying seeded rolls, turn orders and clashes against a
JSON roster (a list of character documents in the host schema).

Usage:
    python cli.py rng --seed ARENA --count 20
    python cli.py turn-order --roster roster.json --seed ARENA
    python cli.py clash --roster roster.json --attacker a1 --skill 0 --defender b1 --defender-skill 1 --seed ARENA
    python cli.py clash --roster roster.json --attacker a1 --skill 0 --defender b1   # direct attack
    python cli.py validate --roster roster.json
"""

import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from packages.arena import (
    ArenaConfig,
    ArenaError,
    Character,
    CombatSession,
    InvalidCharacter,
    Random,
    make_turn_order,
    seed_to_state,
    validate_character,
)
from packages.arena.calc.clash import ClashOutcome
from packages.arena.calc.coins import CoinTrace

logger = logging.getLogger("arena.cli")


# =============================================================================
# INPUT
# =============================================================================

def load_roster(path: str, config: ArenaConfig) -> List[Character]:
    """Read a JSON list of character documents."""
    with open(path) as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise InvalidCharacter(f"{path}: roster must be a JSON list of characters")
    return [Character.from_dict(doc, config) for doc in data]


def find_character(roster: List[Character], char_id: str) -> Character:
    for c in roster:
        if c.id == char_id:
            return c
    raise InvalidCharacter(f"no character with id {char_id!r} in roster")


def pick_skill(character: Character, index: int):
    if not 0 <= index < len(character.skills):
        raise InvalidCharacter(
            f"{character.id} has {len(character.skills)} skill(s); index {index} is out of range"
        )
    return character.skills[index]


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def format_trace(title: str, trace: CoinTrace) -> List[str]:
    lines = [f"{title}: base {trace.base} -> total {trace.total}"]
    for c in trace.coins:
        mark = "HIT " if c.success else "MISS"
        lines.append(f"  coin {c.index + 1}: {mark} +{c.value:<3} total {c.total_after}")
    return lines


def format_outcome(outcome: ClashOutcome) -> str:
    lines = []
    header = outcome.mode.value.upper()
    if outcome.phase is not None:
        header += f" ({outcome.phase.value})"
    lines.append(header)

    lines.extend(format_trace(f"Attacker {outcome.attacker.name}", outcome.attacker_trace))
    if outcome.defender_trace is not None:
        lines.extend(format_trace(f"Defender {outcome.defender.name}", outcome.defender_trace))

    if outcome.winner is None:
        lines.append("STANDOFF - no damage dealt")
        return "\n".join(lines)

    lines.append(f"Victor: {outcome.winner.name} with {outcome.winner_skill.name}")
    if outcome.tiebreak_index is not None:
        lines.append(f"  decided on coin {outcome.tiebreak_index + 1}")
    lines.append(f"Damage: {outcome.damage_dealt}")
    if outcome.reflected:
        lines.append(f"Reflected: {outcome.reflected}")
    for applied in outcome.effects.applied:
        lines.append(f"{applied.type.value}: {applied.amount} ({applied.note})")
    for effect in outcome.effects.scheduled:
        lines.append(f"Scheduled {effect.type.value} potency {effect.potency} x{effect.count}")
    if outcome.stagger is not None and outcome.stagger.changed:
        lines.append(f"{outcome.loser.name} stagger: {outcome.stagger.from_tier.value} -> {outcome.stagger.to_tier.value}")
    if outcome.sanity is not None:
        s = outcome.sanity
        lines.append(f"{outcome.winner.name} sanity: {s.from_value} -> {s.to_value} ({s.delta:+d})")
    return "\n".join(lines)


def emit(payload: Any, as_json: bool, text: str) -> None:
    if as_json:
        print(json.dumps(payload, indent=2))
    else:
        print(text)


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_rng(args, config: ArenaConfig) -> int:
    """Display the seeded draw sequence."""
    rng = Random(args.seed)
    values = [rng.random() for _ in range(args.count)]
    payload: Dict[str, Any] = {
        "seed": args.seed,
        "state": seed_to_state(args.seed),
        "values": values,
        "counter": rng.counter,
    }
    text = [f"Seed: {args.seed} (state: {payload['state']})"]
    text.extend(f"  {i}: {v:.8f}" for i, v in enumerate(values))
    text.append(f"RNG counter after {args.count} calls: {rng.counter}")
    emit(payload, args.json, "\n".join(text))
    return 0


def cmd_turn_order(args, config: ArenaConfig) -> int:
    roster = load_roster(args.roster, config)
    rng = Random(args.seed) if args.seed else None
    order = make_turn_order([c.to_participant() for c in roster], rng)
    text = ["Turn order:"]
    for pos, e in enumerate(order, 1):
        extra = "  (extra turn)" if e.gets_extra_turn else ""
        text.append(f"  {pos}. {e.name or e.id} [{e.side}] speed {e.rolled}{extra}")
    emit([e.to_dict() for e in order], args.json, "\n".join(text))
    return 0


def cmd_clash(args, config: ArenaConfig) -> int:
    roster = load_roster(args.roster, config)
    attacker = find_character(roster, args.attacker)
    defender = find_character(roster, args.defender)
    attacker_skill = pick_skill(attacker, args.skill)
    defender_skill = None
    if args.defender_skill is not None:
        defender_skill = pick_skill(defender, args.defender_skill)

    session = CombatSession(seed=args.seed or None, config=config)
    outcome = session.clash(attacker, attacker_skill, defender, defender_skill)
    emit(outcome.to_dict(), args.json, format_outcome(outcome))
    return 0


def cmd_validate(args, config: ArenaConfig) -> int:
    with open(args.roster) as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise InvalidCharacter(f"{args.roster}: roster must be a JSON list of characters")

    failures = 0
    for i, doc in enumerate(data):
        try:
            character = Character.from_dict(doc, config)
            validate_character(character, config)
        except ArenaError as e:
            failures += 1
            print(f"[{i}] INVALID: {e}")
        else:
            print(f"[{i}] ok: {character.id} ({character.name})")
    print(f"{len(data) - failures}/{len(data)} valid")
    return 1 if failures else 0


# =============================================================================
# MAIN
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Arena Clash - seeded combat resolution from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s rng --seed ARENA --count 20
  %(prog)s turn-order --roster roster.json --seed ARENA
  %(prog)s clash --roster roster.json --attacker a1 --skill 0 --defender b1 --defender-skill 0
  %(prog)s validate --roster roster.json
        """
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--env-file", help="Read ARENA_* settings from this .env file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # RNG command
    rng_parser = subparsers.add_parser("rng", help="Show the seeded draw sequence")
    rng_parser.add_argument("--seed", "-s", required=True, help="Seed")
    rng_parser.add_argument("--count", "-n", type=int, default=20, help="Number of values to show")
    rng_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    # Turn order command
    order_parser = subparsers.add_parser("turn-order", help="Roll a turn order for a roster")
    order_parser.add_argument("--roster", "-r", required=True, help="Roster JSON file")
    order_parser.add_argument("--seed", "-s", help="Seed (omit for a live roll)")
    order_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    # Clash command
    clash_parser = subparsers.add_parser("clash", help="Resolve one clash or direct attack")
    clash_parser.add_argument("--roster", "-r", required=True, help="Roster JSON file")
    clash_parser.add_argument("--attacker", required=True, help="Attacker id")
    clash_parser.add_argument("--skill", type=int, required=True, help="Attacker skill index")
    clash_parser.add_argument("--defender", required=True, help="Defender id")
    clash_parser.add_argument("--defender-skill", type=int, help="Defender skill index (omit for a direct attack)")
    clash_parser.add_argument("--seed", "-s", help="Seed (omit for a live roll)")
    clash_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Check roster documents")
    validate_parser.add_argument("--roster", "-r", required=True, help="Roster JSON file")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "rng": cmd_rng,
        "turn-order": cmd_turn_order,
        "clash": cmd_clash,
        "validate": cmd_validate,
    }

    try:
        config = ArenaConfig.from_env(args.env_file)
        return commands[args.command](args, config)
    except ArenaError as e:
        logger.debug("command %s failed", args.command, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 2
    except (OSError, json.JSONDecodeError) as e:
        print(f"error: cannot read roster: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
