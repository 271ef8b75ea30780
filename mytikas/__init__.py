"""Mytikas rules engine.

Board topology, character catalog, positions and their text encoding, turn
enumeration and turn execution for the two-player board game Mytikas.

    from mytikas import Position, enumerate_turns, execute

    position = Position.initial()
    turns = enumerate_turns(position)
    position = execute(position, turns[0])
"""

from .actions import MAX_ACTIONS, Action, ActionType, Turn
from .api import (
    decode_position,
    decode_turn,
    encode_position,
    encode_turn,
    enumerate_turns,
    execute,
)
from .errors import (
    ConfigurationError,
    DecodeError,
    IllegalTurnError,
    InvalidStateError,
    MytikasError,
    PositionDecodeError,
    TurnDecodeError,
)
from .game_engine import GameEngine
from .gods import God, Player, StatusFx
from .state import GodLifecycle, Position

__version__ = "1.0.0"

__all__ = [
    "MAX_ACTIONS",
    "Action",
    "ActionType",
    "ConfigurationError",
    "DecodeError",
    "GameEngine",
    "God",
    "GodLifecycle",
    "IllegalTurnError",
    "InvalidStateError",
    "MytikasError",
    "Player",
    "Position",
    "PositionDecodeError",
    "StatusFx",
    "Turn",
    "TurnDecodeError",
    "decode_position",
    "decode_turn",
    "encode_position",
    "encode_turn",
    "enumerate_turns",
    "execute",
]
