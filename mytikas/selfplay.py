"""Random self-play soak with invariant checking.

Plays games between two seeded :class:`RandomAI` players and checks, after
every turn, the properties every reachable position must have:

- ``NO_TURNS``: a position that is not over offers at least one turn;
- ``POSITION_ROUND_TRIP``: decoding the encoding yields the same position;
- ``TURN_ROUND_TRIP``: every chosen turn survives encode/decode;
- ``INVALID_STATE``: :meth:`Position.check_invariants` passes;
- ``NONDETERMINISTIC``: executing the same turn twice gives equal results.

Violations are counted per game and exported through Prometheus.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .actions import Turn
from .ai.random_ai import RandomAI
from .errors import InvalidStateError
from .executor import execute_turn
from .game_engine import GameEngine
from .gods import Player
from .metrics import INVARIANT_VIOLATIONS, SELF_PLAY_GAMES
from .state import Position

__all__ = ["GameRecord", "play_game", "run_self_play", "summarise"]

logger = logging.getLogger(__name__)

DEFAULT_MAX_TURNS = 200


@dataclass
class GameRecord:
    index: int
    seed: int
    length: int
    winner: Optional[str]
    termination_reason: str
    final_position: str
    invariant_violations_by_type: Dict[str, int] = field(default_factory=dict)
    # First violation message per type, for debugging.
    violation_samples: Dict[str, str] = field(default_factory=dict)


def _record_violation(record: GameRecord, kind: str, detail: str) -> None:
    record.invariant_violations_by_type[kind] = (
        record.invariant_violations_by_type.get(kind, 0) + 1
    )
    record.violation_samples.setdefault(kind, detail)
    INVARIANT_VIOLATIONS.labels(kind).inc()
    logger.warning("game %d: %s: %s", record.index, kind, detail)


def _check_turn(record: GameRecord, position: Position, turn: Turn) -> Position:
    """Apply ``turn`` to a copy of ``position`` and check the result."""
    if Turn.decode(turn.encode()) != turn:
        _record_violation(record, "TURN_ROUND_TRIP", turn.encode())

    result = GameEngine.apply_turn(position, turn)
    replay = position.copy()
    execute_turn(replay, turn)
    if replay != result:
        _record_violation(record, "NONDETERMINISTIC", turn.encode())

    try:
        result.check_invariants()
    except InvalidStateError as e:
        _record_violation(record, "INVALID_STATE", str(e))

    if Position.decode(result.encode()) != result:
        _record_violation(record, "POSITION_ROUND_TRIP", result.encode())
    return result


def play_game(
    index: int,
    seed: int,
    max_turns: int = DEFAULT_MAX_TURNS,
    start: Position | None = None,
) -> GameRecord:
    """Play one random game from ``start`` (default: the initial position)."""
    rng = random.Random(seed)
    players = {
        Player.LIGHT: RandomAI(Player.LIGHT, rng=rng),
        Player.DARK: RandomAI(Player.DARK, rng=rng),
    }
    position = start.copy() if start is not None else Position.initial()
    record = GameRecord(
        index=index,
        seed=seed,
        length=0,
        winner=None,
        termination_reason="max_turns_reached",
        final_position=position.encode(),
    )

    while record.length < max_turns:
        if position.is_over:
            record.termination_reason = "gate_reached"
            break
        turn = players[position.player].select_turn(position)
        if turn is None:
            _record_violation(record, "NO_TURNS", position.encode())
            record.termination_reason = "no_turns"
            break
        position = _check_turn(record, position, turn)
        record.length += 1
        if record.invariant_violations_by_type.get("INVALID_STATE"):
            record.termination_reason = "invalid_state"
            break
    else:
        if position.is_over:
            record.termination_reason = "gate_reached"

    winner = position.winner
    record.winner = winner.name.lower() if winner is not None else None
    record.final_position = position.encode()
    SELF_PLAY_GAMES.labels(record.winner or "unfinished").inc()
    return record


def run_self_play(
    games: int,
    seed: int,
    max_turns: int = DEFAULT_MAX_TURNS,
) -> List[GameRecord]:
    """Play ``games`` games with per-game seeds derived from ``seed``."""
    seeds = random.Random(seed)
    records = []
    for index in range(games):
        game_seed = seeds.randrange(0x7FFFFFFF)
        record = play_game(index, game_seed, max_turns)
        logger.info(
            "game %d (seed %d): %d turns, winner=%s, reason=%s",
            index,
            game_seed,
            record.length,
            record.winner,
            record.termination_reason,
        )
        records.append(record)
    return records


def summarise(records: List[GameRecord]) -> Dict[str, Any]:
    by_type: Dict[str, int] = {}
    for record in records:
        for kind, count in record.invariant_violations_by_type.items():
            by_type[kind] = by_type.get(kind, 0) + count
    lengths = [r.length for r in records]
    return {
        "total_games": len(records),
        "light_wins": sum(1 for r in records if r.winner == "light"),
        "dark_wins": sum(1 for r in records if r.winner == "dark"),
        "unfinished_games": sum(1 for r in records if r.winner is None),
        "avg_length": (sum(lengths) / len(lengths)) if lengths else 0.0,
        "invariant_violations_by_type": by_type,
        "invariant_violations_total": sum(by_type.values()),
    }
