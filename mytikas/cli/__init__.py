"""Command line tool for the Mytikas engine.

Usage:
    mytikas initial
    mytikas turns <position>
    mytikas execute <position> <turn> [--no-validate]
    mytikas describe <position>
    mytikas selfplay [--games N] [--seed S] [--max-turns T] [--json]

Positions and turns use their text encodings. Exit status is 0 on success,
1 for a failed self-play soak and 2 for rejected input.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .. import api
from ..board import field_name
from ..errors import IllegalTurnError
from ..game_engine import GameEngine
from ..gods import God, PANTHEON, Player
from ..selfplay import DEFAULT_MAX_TURNS, run_self_play, summarise
from ..state import Position

__all__ = ["main"]

logger = logging.getLogger(__name__)


def _print_error(msg: str) -> None:
    print(f"error: {msg}", file=sys.stderr)


def _load_position(text: str) -> Position | None:
    position = api.decode_position(text)
    if position is None:
        _print_error(f"invalid position: {text!r}")
    return position


def _cmd_initial(args: argparse.Namespace) -> int:
    print(api.encode_position(Position.initial()))
    return 0


def _cmd_turns(args: argparse.Namespace) -> int:
    position = _load_position(args.position)
    if position is None:
        return 2
    for turn in api.enumerate_turns(position):
        print(api.encode_turn(turn))
    return 0


def _cmd_execute(args: argparse.Namespace) -> int:
    position = _load_position(args.position)
    if position is None:
        return 2
    turn = api.decode_turn(args.turn)
    if turn is None:
        _print_error(f"invalid turn: {args.turn!r}")
        return 2
    try:
        result = GameEngine.apply_turn(position, turn, validate=args.validate)
    except IllegalTurnError as e:
        _print_error(e.message)
        return 2
    print(api.encode_position(result))
    return 0


def _cmd_describe(args: argparse.Namespace) -> int:
    position = _load_position(args.position)
    if position is None:
        return 2
    print(f"to move: {position.player.name.lower()}")
    if position.winner is not None:
        print(f"winner: {position.winner.name.lower()}")
    for player in (Player.LIGHT, Player.DARK):
        for god in God:
            info = PANTHEON[god]
            field = position.cell(player, god)
            print(
                f"{player.name.lower():5} {info.name:10} "
                f"{position.lifecycle(player, god).value:10} "
                f"hp={position.hp(player, god):2}/{info.hit:<2} "
                f"cell={field_name(field)}"
            )
    return 0


def _cmd_selfplay(args: argparse.Namespace) -> int:
    records = run_self_play(args.games, args.seed, args.max_turns)
    summary = summarise(records)
    if args.json:
        print(json.dumps(summary, indent=2, sort_keys=True))
    else:
        for key, value in summary.items():
            print(f"{key}: {value}")
    return 1 if summary["invariant_violations_total"] else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mytikas",
        description="Mytikas rules engine: enumerate and execute turns.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("initial", help="Print the encoded start position.")
    p.set_defaults(func=_cmd_initial)

    p = sub.add_parser("turns", help="List the legal turns of a position.")
    p.add_argument("position")
    p.set_defaults(func=_cmd_turns)

    p = sub.add_parser("execute", help="Apply a turn and print the result.")
    p.add_argument("position")
    p.add_argument("turn")
    p.add_argument(
        "--no-validate",
        dest="validate",
        action="store_false",
        help="Skip the legality check (the turn must come from 'turns').",
    )
    p.set_defaults(func=_cmd_execute)

    p = sub.add_parser("describe", help="Show the gods of a position.")
    p.add_argument("position")
    p.set_defaults(func=_cmd_describe)

    p = sub.add_parser("selfplay", help="Run a random self-play soak.")
    p.add_argument("--games", type=int, default=10, help="Number of games (default: 10).")
    p.add_argument("--seed", type=int, default=0, help="Master seed (default: 0).")
    p.add_argument(
        "--max-turns",
        type=int,
        default=DEFAULT_MAX_TURNS,
        help=f"Turn limit per game (default: {DEFAULT_MAX_TURNS}).",
    )
    p.add_argument("--json", action="store_true", help="Print the summary as JSON.")
    p.set_defaults(func=_cmd_selfplay)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    raise SystemExit(main())
