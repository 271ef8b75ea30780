"""
Shared pytest fixtures for the Mytikas engine tests.

Positions are set up from board diagrams drawn the way the board is shown
to players: row 9 (Dark's gate) on top, row 1 (Light's gate) at the bottom,
columns a..i left to right. Upper case letters are Light gods, lower case
letters Dark gods (by god id), ``.`` is an empty cell and ``+`` an empty
cell that a test expects to be reachable.
"""

from pathlib import Path
import sys
from typing import Iterable, List, Set

import pytest

# Ensure the repository root is on sys.path so `import mytikas` works when
# running pytest without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from mytikas.actions import ActionType, Turn  # noqa: E402
from mytikas.board import BOARD_SIZE, FIELD_COUNT  # noqa: E402
from mytikas.game_engine import GameEngine  # noqa: E402
from mytikas.gods import God, Player, god_by_id  # noqa: E402
from mytikas.state import Position  # noqa: E402
from mytikas.turn_generator import generate_turns  # noqa: E402


def template_cells(template: str) -> str:
    """Flatten a board diagram into 41 characters in cell index order."""
    rows = [line.replace(" ", "") for line in template.strip().splitlines()]
    rows = [row for row in rows if row]
    assert len(rows) == BOARD_SIZE, f"expected {BOARD_SIZE} rows, got {len(rows)}"
    cells = "".join(reversed(rows))
    assert len(cells) == FIELD_COUNT, f"expected {FIELD_COUNT} cells, got {len(cells)}"
    return cells


def position_from_template(player: Player, template: str) -> Position:
    """Build a position holding exactly the gods drawn in ``template``.

    Gods that are not drawn are dead. ``player`` is the side to move.
    """
    placements = []
    for field, ch in enumerate(template_cells(template)):
        if ch.isalpha():
            god = god_by_id(ch.upper())
            assert god is not None, f"unknown god id {ch!r}"
            side = Player.LIGHT if ch.isupper() else Player.DARK
            placements.append((side, god, field))

    light = [god for side, god, _ in placements if side == Player.LIGHT]
    dark = [god for side, god, _ in placements if side == Player.DARK]
    assert len(set(light)) == len(light) and len(set(dark)) == len(dark)

    position = Position.initial_with_gods(light, dark)
    for side, god, field in placements:
        position.place(side, god, field)
    if position.player != player:
        position.end_turn()
    return position


def expected_fields(template: str) -> List[int]:
    return [i for i, ch in enumerate(template_cells(template)) if ch == "+"]


def move_destinations_in_turns(position: Position, god: God) -> List[int]:
    """Sorted cells that ``god`` moves to in any generated turn."""
    fields: Set[int] = set()
    for turn in generate_turns(position):
        for action in turn:
            if action.type == ActionType.MOVE and action.god == god:
                fields.add(action.field)
    return sorted(fields)


def attack_victims_in_turns(position: Position, god: God) -> Set[God]:
    """Gods that ``god`` targets with a regular attack in any turn."""
    victims: Set[God] = set()
    for turn in generate_turns(position):
        for action in turn:
            if action.type == ActionType.ATTACK and action.god == god:
                target = position.god_at(action.field)
                assert target is not None
                victims.add(target)
    return victims


def turn_strings(turns: Iterable[Turn]) -> Set[str]:
    return {turn.encode() for turn in turns}


@pytest.fixture
def initial_position() -> Position:
    return Position.initial()


@pytest.fixture(autouse=True)
def _clear_turn_cache():
    """Each test starts with an empty engine turn cache."""
    GameEngine.clear_cache()
    yield
    GameEngine.clear_cache()
