"""
Pydantic Models for the Mytikas HTTP surface
Requests and responses carry positions and turns in their text encodings.
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from enum import Enum

from .board import field_name
from .gods import God, PANTHEON, Player, StatusFx
from .state import GodLifecycle, Position


class PlayerName(str, Enum):
    """Side enumeration"""
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def of(cls, player: Player) -> "PlayerName":
        return cls.LIGHT if player == Player.LIGHT else cls.DARK


class GodSnapshot(BaseModel):
    """State of one god, with its status bits spelled out."""
    player: PlayerName
    god: str
    god_id: str = Field(alias="godId")
    hp: int
    max_hp: int = Field(alias="maxHp")
    cell: Optional[str] = None
    lifecycle: GodLifecycle
    chained: bool = False
    damage_boost: bool = Field(False, alias="damageBoost")
    speed_boost: bool = Field(False, alias="speedBoost")
    shielded: bool = False

    class Config:
        populate_by_name = True


class PositionView(BaseModel):
    """Read-only rendering of a position for display front ends."""
    position: str
    player_to_move: PlayerName = Field(alias="playerToMove")
    winner: Optional[PlayerName] = None
    is_over: bool = Field(alias="isOver")
    # Cell name -> god id, upper case for Light and lower case for Dark.
    cells: Dict[str, str]
    gods: List[GodSnapshot]

    class Config:
        populate_by_name = True

    @classmethod
    def from_position(cls, position: Position) -> "PositionView":
        gods: List[GodSnapshot] = []
        cells: Dict[str, str] = {}
        for player in (Player.LIGHT, Player.DARK):
            for god in God:
                info = PANTHEON[god]
                field = position.cell(player, god)
                fx = position.fx(player, god)
                gods.append(GodSnapshot(
                    player=PlayerName.of(player),
                    god=info.name,
                    god_id=info.ascii_id,
                    hp=position.hp(player, god),
                    max_hp=info.hit,
                    cell=field_name(field) if field is not None else None,
                    lifecycle=position.lifecycle(player, god),
                    chained=bool(fx & StatusFx.CHAINED),
                    damage_boost=bool(fx & StatusFx.DAMAGE_BOOST),
                    speed_boost=bool(fx & StatusFx.SPEED_BOOST),
                    shielded=bool(fx & StatusFx.SHIELDED),
                ))
                if field is not None:
                    ascii_id = info.ascii_id
                    cells[field_name(field)] = (
                        ascii_id if player == Player.LIGHT else ascii_id.lower()
                    )
        winner = position.winner
        return cls(
            position=position.encode(),
            player_to_move=PlayerName.of(position.player),
            winner=PlayerName.of(winner) if winner is not None else None,
            is_over=position.is_over,
            cells=cells,
            gods=gods,
        )


class PositionRequest(BaseModel):
    """Request carrying an encoded position (for /turns and /describe)."""
    position: str


class TurnsResponse(BaseModel):
    """Legal turns for the side to move, in turn notation."""
    position: str
    player_to_move: PlayerName = Field(alias="playerToMove")
    turns: List[str]
    count: int

    class Config:
        populate_by_name = True


class ExecuteRequest(BaseModel):
    """Request model for turn execution"""
    position: str
    turn: str


class ExecuteResponse(BaseModel):
    """Response model for turn execution"""
    position: str
    turn: str
    player_to_move: PlayerName = Field(alias="playerToMove")
    winner: Optional[PlayerName] = None
    is_over: bool = Field(alias="isOver")

    class Config:
        populate_by_name = True


class AITurnRequest(BaseModel):
    """Request model for random AI turn selection"""
    position: str
    seed: Optional[int] = Field(
        None,
        ge=0,
        le=0x7FFFFFFF,
        description="Optional RNG seed for deterministic AI behavior",
    )


class AITurnResponse(BaseModel):
    """Response model for random AI turn selection"""
    turn: str
    position: str
    ai_type: str = Field(alias="aiType")
    thinking_time_ms: int = Field(alias="thinkingTimeMs")

    class Config:
        populate_by_name = True
