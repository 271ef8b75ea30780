"""Game position for Mytikas.

A :class:`Position` owns the state of all 24 gods (12 per side), the
per-cell occupancy table, the summonable sets and the side to move. All
mutation goes through paired primitives that keep the character cells and
the occupancy table consistent and recompute adjacency-derived auras.

The primitives assume the caller has verified legality (the turn generator
does so); violating a precondition is a programming error and trips an
``assert``, it is never silently repaired.

Positions are plain slotted objects without external resources, so they are
cheap to :meth:`Position.copy` for speculative exploration.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from .board import FIELD_COUNT, GATES, neighbors, neighbors_diff
from .errors import InvalidStateError, PositionDecodeError
from .gods import AURA_MASK, GOD_COUNT, God, PANTHEON, Player, StatusFx

__all__ = ["GodLifecycle", "Occupant", "Position"]

BASE64_DIGITS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
_BASE64_VALUE = {ch: i for i, ch in enumerate(BASE64_DIGITS)}

# Position encoding: values of the per-god "field" character beyond the
# regular cell indices.
ENC_DEAD = FIELD_COUNT
ENC_SUMMONABLE = FIELD_COUNT + 1
ENC_RESERVED = FIELD_COUNT + 2

Occupant = tuple[Player, God]

_PLAYERS = (Player.LIGHT, Player.DARK)
_GODS = tuple(God)

_NOT_CHAINED = ~int(StatusFx.CHAINED)
_NOT_AURA = ~int(AURA_MASK)


class GodLifecycle(str, Enum):
    """Lifecycle classification of a god, derived from its state."""
    DEAD = "dead"
    IN_PLAY = "in_play"
    SUMMONABLE = "summonable"
    RESERVED = "reserved"


class Position:
    """Mutable game state.

    Attributes are private lists indexed by ``[player][god]``; use the query
    methods. Cells are ``None`` when a god is not on the board.
    """

    __slots__ = ("_hp", "_cell", "_fx", "_board", "_summonable", "_player")

    def __init__(self) -> None:
        self._hp: list[list[int]] = [[0] * GOD_COUNT for _ in _PLAYERS]
        self._cell: list[list[int | None]] = [[None] * GOD_COUNT for _ in _PLAYERS]
        self._fx: list[list[StatusFx]] = [[StatusFx.NONE] * GOD_COUNT for _ in _PLAYERS]
        self._board: list[Occupant | None] = [None] * FIELD_COUNT
        self._summonable: list[int] = [0, 0]  # bit set per player
        self._player: Player = Player.LIGHT

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def initial(cls) -> Position:
        """Return the start position: every god alive and summonable."""
        return cls.initial_with_gods(_GODS, _GODS)

    @classmethod
    def initial_with_gods(
        cls,
        light: Iterable[God],
        dark: Iterable[God],
        summonable: bool = True,
    ) -> Position:
        """Return a start position in which only the listed gods are alive.

        Gods not listed are dead. Listed gods are summonable when
        ``summonable`` is true, otherwise reserved. Mostly used by tests and
        tools that set up specific scenarios with :meth:`place`.
        """
        position = cls()
        for player, gods in zip(_PLAYERS, (light, dark)):
            for god in gods:
                position._hp[player][god] = PANTHEON[god].hit
                if summonable:
                    position._summonable[player] |= 1 << god
        return position

    def copy(self) -> Position:
        res = Position.__new__(Position)
        res._hp = [row[:] for row in self._hp]
        res._cell = [row[:] for row in self._cell]
        res._fx = [row[:] for row in self._fx]
        res._board = self._board[:]
        res._summonable = self._summonable[:]
        res._player = self._player
        return res

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def player(self) -> Player:
        """The side to move."""
        return self._player

    def hp(self, player: Player, god: God) -> int:
        return self._hp[player][god]

    def cell(self, player: Player, god: God) -> int | None:
        return self._cell[player][god]

    def fx(self, player: Player, god: God) -> StatusFx:
        return self._fx[player][god]

    def has_fx(self, player: Player, god: God, fx: StatusFx) -> bool:
        return (self._fx[player][god] & fx) == fx

    def occupant(self, field: int) -> Occupant | None:
        return self._board[field]

    def player_at(self, field: int) -> Player | None:
        occ = self._board[field]
        return occ[0] if occ is not None else None

    def god_at(self, field: int) -> God | None:
        occ = self._board[field]
        return occ[1] if occ is not None else None

    def is_empty(self, field: int) -> bool:
        return self._board[field] is None

    def is_occupied(self, field: int) -> bool:
        return self._board[field] is not None

    def is_dead(self, player: Player, god: God) -> bool:
        return self._hp[player][god] == 0

    def is_deployed(self, player: Player, god: God) -> bool:
        return self._cell[player][god] is not None

    def is_summonable(self, player: Player, god: God) -> bool:
        return (
            self._hp[player][god] > 0
            and self._cell[player][god] is None
            and bool(self._summonable[player] & (1 << god))
        )

    def lifecycle(self, player: Player, god: God) -> GodLifecycle:
        if self._hp[player][god] == 0:
            return GodLifecycle.DEAD
        if self._cell[player][god] is not None:
            return GodLifecycle.IN_PLAY
        if self._summonable[player] & (1 << god):
            return GodLifecycle.SUMMONABLE
        return GodLifecycle.RESERVED

    def summonable_gods(self, player: Player) -> list[God]:
        return [g for g in _GODS if self.is_summonable(player, g)]

    def deployed_gods(self, player: Player) -> list[God]:
        return [g for g in _GODS if self._cell[player][g] is not None]

    @property
    def winner(self) -> Player | None:
        """The side that reached the opponent's gate, if any.

        Light wins by occupying Dark's gate (e9) and vice versa; occupying
        your own gate wins nothing.
        """
        if self.player_at(GATES[Player.DARK]) == Player.LIGHT:
            return Player.LIGHT
        if self.player_at(GATES[Player.LIGHT]) == Player.DARK:
            return Player.DARK
        return None

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    def is_almost_over(self) -> bool:
        """True if one side has no living (deployed, summonable or reserved) gods."""
        return any(not any(hps) for hps in self._hp)

    # ------------------------------------------------------------------
    # Mutating primitives
    # ------------------------------------------------------------------

    def set_summonable(self, player: Player, god: God, value: bool = True) -> None:
        """Move a god between the reserved and summonable sets."""
        assert self._hp[player][god] > 0 and self._cell[player][god] is None
        if value:
            self._summonable[player] |= 1 << god
        else:
            self._summonable[player] &= ~(1 << god)

    def place(self, player: Player, god: God, field: int) -> None:
        """Put a living god that is not on the board onto an empty cell."""
        assert self._board[field] is None, f"cell {field} is occupied"
        assert self._cell[player][god] is None, f"{god.name} is already placed"
        assert self._hp[player][god] > 0, f"{god.name} is dead"
        self._board[field] = (player, god)
        self._cell[player][god] = field
        self._summonable[player] &= ~(1 << god)
        self._update_auras(player, god, None, field)

    def remove(self, player: Player, god: God) -> None:
        """Take a god off the board without killing it (e.g., for a swap)."""
        field = self._cell[player][god]
        assert field is not None, f"{god.name} is not on the board"
        self._board[field] = None
        self._cell[player][god] = None
        self._fx[player][god] = StatusFx.NONE
        self._update_auras(player, god, field, None)

    def move(self, player: Player, god: God, dst: int) -> None:
        """Relocate a god that is in play to an empty cell."""
        src = self._cell[player][god]
        assert src is not None, f"{god.name} is not on the board"
        assert self._board[dst] is None, f"cell {dst} is occupied"
        self._board[dst] = self._board[src]
        self._board[src] = None
        self._cell[player][god] = dst
        self._update_auras(player, god, src, dst)

    def deal_damage(self, player: Player, god: God, damage: int) -> int:
        """Reduce a god's hit points, killing it at zero. Returns hp left."""
        field = self._cell[player][god]
        assert field is not None, f"{god.name} is not on the board"
        assert damage >= 0
        hp = self._hp[player][god]
        if hp > damage:
            self._hp[player][god] = hp - damage
            return hp - damage
        self._hp[player][god] = 0
        self._board[field] = None
        self._cell[player][god] = None
        self._fx[player][god] = StatusFx.NONE
        self._summonable[player] &= ~(1 << god)
        self._update_auras(player, god, field, None)
        return 0

    def chain(self, player: Player, god: God) -> None:
        assert self._cell[player][god] is not None
        self._fx[player][god] |= StatusFx.CHAINED

    def unchain(self, player: Player, god: God) -> None:
        self._fx[player][god] &= _NOT_CHAINED

    def end_turn(self) -> None:
        self._player = self._player.other

    # ------------------------------------------------------------------
    # Auras
    # ------------------------------------------------------------------

    def _aura_at(self, field: int) -> StatusFx:
        """Union of the auras granted to the occupant of ``field``."""
        player = self._board[field][0]
        fx = StatusFx.NONE
        for nb in neighbors(field):
            occ = self._board[nb]
            if occ is not None and occ[0] == player:
                fx |= PANTHEON[occ[1]].aura
        return fx

    def _refresh_fx(self, field: int) -> None:
        occ = self._board[field]
        if occ is None:
            return
        player, god = occ
        fx = self._fx[player][god]
        self._fx[player][god] = (fx & _NOT_AURA) | self._aura_at(field)

    def _update_auras(
        self, player: Player, god: God, src: int | None, dst: int | None
    ) -> None:
        if dst is not None:
            self._refresh_fx(dst)
        if not PANTHEON[god].aura:
            return
        old, new = neighbors_diff(src, dst)
        for field in old:
            occ = self._board[field]
            if occ is not None and occ[0] == player:
                self._refresh_fx(field)
        for field in new:
            occ = self._board[field]
            if occ is not None and occ[0] == player:
                self._refresh_fx(field)

    # ------------------------------------------------------------------
    # Invariants
    # ------------------------------------------------------------------

    def check_invariants(self) -> None:
        """Raise :class:`InvalidStateError` if the position is inconsistent."""
        seen = 0
        for player in _PLAYERS:
            for god in _GODS:
                ctx = {"player": player.name, "god": god.name, "position": self.encode()}
                hp = self._hp[player][god]
                field = self._cell[player][god]
                fx = self._fx[player][god]
                if not 0 <= hp <= PANTHEON[god].hit:
                    raise InvalidStateError("hit points out of range", context=ctx)
                if field is None:
                    if fx:
                        raise InvalidStateError("absent god has status effects", context=ctx)
                    if hp == 0 and self._summonable[player] & (1 << god):
                        raise InvalidStateError("dead god is summonable", context=ctx)
                    continue
                seen += 1
                if hp == 0:
                    raise InvalidStateError("dead god on the board", context=ctx)
                if self._board[field] != (player, god):
                    raise InvalidStateError("occupancy table disagrees", context=ctx)
                if self._summonable[player] & (1 << god):
                    raise InvalidStateError("deployed god is summonable", context=ctx)
                if (fx & AURA_MASK) != self._aura_at(field):
                    raise InvalidStateError("aura out of date", context=ctx)
        occupied = sum(1 for occ in self._board if occ is not None)
        if occupied != seen:
            raise InvalidStateError(
                "occupancy table has stray entries",
                context={"occupied": occupied, "deployed": seen},
            )

    # ------------------------------------------------------------------
    # Text encoding
    # ------------------------------------------------------------------

    def encode(self) -> str:
        """Encode the position as a short base-64 string.

        Only the CHAINED status bit is stored; auras are re-derived from
        adjacency on decode.
        """
        parts = [BASE64_DIGITS[self._player]]
        for player in _PLAYERS:
            for god in _GODS:
                hp = self._hp[player][god]
                field = self._cell[player][god]
                if hp == 0:
                    parts.append(BASE64_DIGITS[ENC_DEAD])
                elif field is None:
                    if self._summonable[player] & (1 << god):
                        parts.append(BASE64_DIGITS[ENC_SUMMONABLE])
                    else:
                        parts.append(BASE64_DIGITS[ENC_RESERVED])
                else:
                    chained = 1 if self._fx[player][god] & StatusFx.CHAINED else 0
                    parts.append(BASE64_DIGITS[field])
                    parts.append(BASE64_DIGITS[(hp << 1) | chained])
        return "".join(parts)

    @classmethod
    def decode(cls, text: str) -> Position:
        """Decode a string produced by :meth:`encode`.

        Raises:
            PositionDecodeError: if ``text`` is not exactly a valid encoding.
        """
        pos = 0

        def read(limit: int) -> int:
            nonlocal pos
            if pos >= len(text):
                raise PositionDecodeError("unexpected end of string", text, pos)
            value = _BASE64_VALUE.get(text[pos])
            if value is None:
                raise PositionDecodeError(f"invalid character {text[pos]!r}", text, pos)
            if value >= limit:
                raise PositionDecodeError(
                    f"value {value} exceeds limit {limit}", text, pos
                )
            pos += 1
            return value

        position = cls()
        position._player = Player(read(2))
        chained: list[Occupant] = []
        for player in _PLAYERS:
            for god in _GODS:
                value = read(ENC_RESERVED + 1)
                if value == ENC_DEAD:
                    continue
                position._hp[player][god] = PANTHEON[god].hit
                if value == ENC_SUMMONABLE:
                    position._summonable[player] |= 1 << god
                elif value == ENC_RESERVED:
                    pass
                else:
                    offset = pos
                    hpfx = read((PANTHEON[god].hit + 1) * 2)
                    hp = hpfx >> 1
                    if hp == 0:
                        raise PositionDecodeError("placed god without hit points", text, offset)
                    if position._board[value] is not None:
                        raise PositionDecodeError(
                            f"cell {value} occupied twice", text, offset - 1
                        )
                    position._hp[player][god] = hp
                    position.place(player, god, value)
                    if hpfx & 1:
                        chained.append((player, god))
        if pos != len(text):
            raise PositionDecodeError("unexpected trailing data", text, pos)
        for player, god in chained:
            position.chain(player, god)
        return position

    # ------------------------------------------------------------------
    # Dunder methods
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return (
            self._player == other._player
            and self._hp == other._hp
            and self._cell == other._cell
            and self._fx == other._fx
            and self._board == other._board
            and self._summonable == other._summonable
        )

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"Position({self.encode()!r})"
