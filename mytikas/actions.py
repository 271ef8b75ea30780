"""Action and turn value types.

A turn is everything one side does before play passes to the other side.
It is a sequence of up to six actions; the following shapes occur:

  1. - (pass)
  2. Move
  3. Attack
  4. Summon
  5. Summon, Move                          (special rule 1)
  6. Summon, Attack                        (special rule 1)
  7. Move (from gate), Summon              (special rule 2)
  8. Move (from gate), Summon, Attack      (special rule 2)
  9. Attack (kill at gate), Move           (special rule 3)
 10. Move (kill at gate), Move             (special rule 3)

Each primary action may be followed by specials (Hades chaining an enemy,
Hermes' second target, Aphrodite's swap, Dionysus' second hop), which is
why a turn holds up to six actions rather than three.

Text notation: an action is the god's letter, a type symbol (``@`` summon,
``>`` move, ``!`` attack, ``+`` special) and a cell name, e.g. ``Z!e4``. A
turn joins its actions with commas; the pass turn is ``x``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator

from .board import field_name, parse_field
from .errors import TurnDecodeError
from .gods import God, PANTHEON, god_by_id

__all__ = ["MAX_ACTIONS", "PASS_NOTATION", "Action", "ActionType", "Turn"]

MAX_ACTIONS = 6

PASS_NOTATION = "x"

ACTION_TYPE_CHARS = "@>!+"


class ActionType(IntEnum):
    SUMMON = 0
    MOVE = 1
    ATTACK = 2
    SPECIAL = 3

    @property
    def symbol(self) -> str:
        return ACTION_TYPE_CHARS[self]


@dataclass(frozen=True, slots=True, order=True)
class Action:
    """One atomic effect.

    ``field`` is the gate for a summon, the destination for a move, the
    target for an attack (the attacker's own cell for area attacks) and
    ability specific for a special.
    """
    type: ActionType
    god: God
    field: int

    def encode(self) -> str:
        return f"{PANTHEON[self.god].ascii_id}{self.type.symbol}{field_name(self.field)}"

    @classmethod
    def decode(cls, text: str) -> Action:
        if len(text) != 4:
            raise TurnDecodeError(
                f"invalid action length {len(text)} (expected 4)", text
            )
        god = god_by_id(text[0])
        if god is None:
            raise TurnDecodeError(f"unknown god id {text[0]!r}", text, 0)
        type_index = ACTION_TYPE_CHARS.find(text[1])
        if type_index == -1:
            raise TurnDecodeError(f"unknown action symbol {text[1]!r}", text, 1)
        field = parse_field(text[2:])
        if field is None:
            raise TurnDecodeError(f"invalid cell {text[2:]!r}", text, 2)
        return cls(ActionType(type_index), god, field)

    def __str__(self) -> str:
        return self.encode()


@dataclass(frozen=True, slots=True, order=True)
class Turn:
    """Ordered sequence of actions; the empty turn is a pass."""
    actions: tuple[Action, ...] = ()

    def __post_init__(self) -> None:
        if len(self.actions) > MAX_ACTIONS:
            raise ValueError(f"a turn holds at most {MAX_ACTIONS} actions")

    @property
    def is_pass(self) -> bool:
        return not self.actions

    def __len__(self) -> int:
        return len(self.actions)

    def __iter__(self) -> Iterator[Action]:
        return iter(self.actions)

    def __getitem__(self, index: int) -> Action:
        return self.actions[index]

    def encode(self) -> str:
        if not self.actions:
            return PASS_NOTATION
        return ",".join(action.encode() for action in self.actions)

    @classmethod
    def decode(cls, text: str) -> Turn:
        """Parse turn notation.

        Raises:
            TurnDecodeError: on malformed input or more than six actions.
        """
        text = text.strip()
        if text == PASS_NOTATION:
            return cls()
        if not text:
            raise TurnDecodeError("empty turn", text)
        parts = text.split(",")
        if len(parts) > MAX_ACTIONS:
            raise TurnDecodeError(
                f"too many actions ({len(parts)} > {MAX_ACTIONS})", text
            )
        actions = []
        offset = 0
        for part in parts:
            try:
                actions.append(Action.decode(part))
            except TurnDecodeError as e:
                raise TurnDecodeError(
                    e.message, text, offset + (e.offset or 0)
                ) from e
            offset += len(part) + 1
        return cls(tuple(actions))

    def __str__(self) -> str:
        return self.encode()
