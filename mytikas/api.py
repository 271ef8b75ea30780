"""Consumer surface of the rules engine.

Front ends, players and embedding hosts use only these functions: they
enumerate turns, execute a turn, and convert positions and turns to and from
text. No game-rule reasoning happens outside the engine.

The decoders return ``None`` for malformed input instead of raising, so
interactive callers can tell a rejected string apart from a valid one
without handling exceptions. Use :meth:`Position.decode` and
:meth:`Turn.decode` directly for the error details.
"""

from __future__ import annotations

import logging

from .actions import Turn
from .errors import PositionDecodeError, TurnDecodeError
from .game_engine import GameEngine
from .state import Position

__all__ = [
    "decode_position",
    "decode_turn",
    "encode_position",
    "encode_turn",
    "enumerate_turns",
    "execute",
]

logger = logging.getLogger(__name__)


def enumerate_turns(position: Position) -> list[Turn]:
    """All legal turns for the side to move (empty once the game is over)."""
    return GameEngine.get_valid_turns(position)


def execute(position: Position, turn: Turn) -> Position:
    """Return the position after ``turn``; ``position`` is left unchanged.

    ``turn`` must be one of :func:`enumerate_turns` for ``position``.
    """
    return GameEngine.apply_turn(position, turn)


def encode_position(position: Position) -> str:
    return position.encode()


def decode_position(text: str) -> Position | None:
    try:
        return Position.decode(text)
    except PositionDecodeError as e:
        logger.debug("rejected position %r: %s", text, e)
        return None


def encode_turn(turn: Turn) -> str:
    return turn.encode()


def decode_turn(text: str) -> Turn | None:
    try:
        return Turn.decode(text)
    except TurnDecodeError as e:
        logger.debug("rejected turn %r: %s", text, e)
        return None
