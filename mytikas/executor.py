"""Turn executor: applies actions to a live :class:`Position`.

The executor trusts its input. Actions are expected to come from the turn
generator for the same position (or be equivalent to one of its outputs);
nothing is re-validated here, and an invalid action is undefined behaviour
that at most trips an ``assert`` inside the position primitives.
"""

from __future__ import annotations

from typing import Callable, Iterable

from .actions import Action, ActionType, Turn
from .board import are_adjacent, field_coords, field_index, neighbors
from .gods import (
    ARES_LANDING_DAMAGE,
    God,
    PANTHEON,
    Player,
    StatusFx,
    WITHERING_DAMAGE,
    attack_area,
    knockback_direction,
)
from .state import Position

__all__ = [
    "attack_damage",
    "execute_action",
    "execute_actions",
    "execute_turn",
]


def attack_damage(position: Position, player: Player, god: God, target: int) -> int:
    """Damage ``god`` deals to ``target`` with a regular attack."""
    damage = PANTHEON[god].dmg
    source = position.cell(player, god)
    assert source is not None

    if god == God.HERA:
        # Hera does double damage when attacking from the side or behind.
        # Doubling happens before the damage boost.
        delta = field_coords(target)[0] - field_coords(source)[0]
        if (delta <= 0) if player == Player.LIGHT else (delta >= 0):
            damage *= 2
    elif god == God.APOLLO:
        # Apollo deals +1 damage on attacks along a straight line.
        r1, c1 = field_coords(source)
        r2, c2 = field_coords(target)
        dr, dc = r2 - r1, c2 - c1
        if dr == 0 or dc == 0 or abs(dr) == abs(dc):
            damage += 1

    if position.has_fx(player, god, StatusFx.DAMAGE_BOOST):
        damage += 1
    return damage


def _damage_field(position: Position, opponent: Player, field: int, damage: int) -> None:
    occ = position.occupant(field)
    assert occ is not None and occ[0] == opponent
    god = occ[1]
    if not position.has_fx(opponent, god, StatusFx.SHIELDED):
        position.deal_damage(opponent, god, damage)


def _damage_area(
    position: Position, opponent: Player, cells: Iterable[int], damage: int
) -> None:
    cells = tuple(cells)
    # Enemy Athena first: once she is dead she cannot protect anyone else.
    athena = position.cell(opponent, God.ATHENA)
    if athena is not None and athena in cells:
        _damage_field(position, opponent, athena, damage)
    for field in cells:
        if field != athena and position.player_at(field) == opponent:
            _damage_field(position, opponent, field, damage)


def _knock_back(
    position: Position, opponent: Player, cells: Iterable[int], direction: int
) -> None:
    """Push every enemy in ``cells`` one row in ``direction``.

    Cells farther along ``direction`` are handled first so that enemies at
    the back make room for those in front. An enemy whose destination is
    off the board or occupied (by a friend, or a foe that was not pushed)
    stays put. Shielded enemies are pushed as well.
    """
    ordered = sorted(cells, key=lambda f: field_coords(f)[0] * -direction)
    for field in ordered:
        occ = position.occupant(field)
        if occ is None or occ[0] != opponent:
            continue
        r, c = field_coords(field)
        behind = field_index(r + direction, c)
        if behind is not None and position.is_empty(behind):
            position.move(opponent, occ[1], behind)


def _land(position: Position, player: Player, god: God) -> None:
    """Hook fired when a god arrives on a new cell of its own accord."""
    if god == God.ARES:
        field = position.cell(player, god)
        assert field is not None
        _damage_area(position, player.other, neighbors(field), ARES_LANDING_DAMAGE)


def _release_chains(position: Position) -> None:
    """Free chained gods that the opposing Hades no longer holds."""
    for player in (Player.LIGHT, Player.DARK):
        hades = position.cell(player.other, God.HADES)
        for god in God:
            if not position.has_fx(player, god, StatusFx.CHAINED):
                continue
            field = position.cell(player, god)
            if hades is None or field is None or not are_adjacent(field, hades):
                position.unchain(player, god)


# ---------------------------------------------------------------------------
# Specials, keyed by the acting god.
# ---------------------------------------------------------------------------


def _special_hermes(position: Position, player: Player, field: int) -> None:
    # Second target of a double attack.
    damage = attack_damage(position, player, God.HERMES, field)
    _damage_field(position, player.other, field, damage)


def _special_hades(position: Position, player: Player, field: int) -> None:
    occ = position.occupant(field)
    assert occ is not None and occ[0] == player.other
    position.chain(occ[0], occ[1])


def _special_dionysus(position: Position, player: Player, field: int) -> None:
    # One knight hop, killing the enemy on the destination first.
    occ = position.occupant(field)
    if occ is not None:
        assert occ[0] == player.other
        position.deal_damage(occ[0], occ[1], position.hp(occ[0], occ[1]))
    position.move(player, God.DIONYSUS, field)


def _special_artemis(position: Position, player: Player, field: int) -> None:
    # Withering moon: equal damage to the target and to Artemis herself.
    _damage_field(position, player.other, field, WITHERING_DAMAGE)
    position.deal_damage(player, God.ARTEMIS, WITHERING_DAMAGE)


def _special_aphrodite(position: Position, player: Player, field: int) -> None:
    occ = position.occupant(field)
    assert occ is not None and occ[0] == player
    ally = occ[1]
    source = position.cell(player, God.APHRODITE)
    assert source is not None
    position.remove(player, God.APHRODITE)
    position.remove(player, ally)
    position.place(player, God.APHRODITE, field)
    position.place(player, ally, source)
    _land(position, player, ally)


SPECIALS: dict[God, Callable[[Position, Player, int], None]] = {
    God.HERMES: _special_hermes,
    God.HADES: _special_hades,
    God.DIONYSUS: _special_dionysus,
    God.ARTEMIS: _special_artemis,
    God.APHRODITE: _special_aphrodite,
}


def execute_action(position: Position, action: Action) -> None:
    """Apply a single action for the side to move (without ending the turn)."""
    player = position.player
    opponent = player.other
    god = action.god

    if action.type == ActionType.SUMMON:
        position.place(player, god, action.field)
        _land(position, player, god)

    elif action.type == ActionType.MOVE:
        position.move(player, god, action.field)
        _land(position, player, god)

    elif action.type == ActionType.ATTACK:
        if PANTHEON[god].atk_pattern.is_area:
            assert action.field == position.cell(player, god)
            damage = attack_damage(position, player, god, action.field)
            cells = attack_area(player, god, action.field)
            _damage_area(position, opponent, cells, damage)
            direction = knockback_direction(player, god)
            if direction:
                _knock_back(position, opponent, cells, direction)
        else:
            damage = attack_damage(position, player, god, action.field)
            _damage_field(position, opponent, action.field, damage)

    elif action.type == ActionType.SPECIAL:
        SPECIALS[god](position, player, action.field)

    else:
        raise AssertionError(f"unknown action type {action.type!r}")

    _release_chains(position)


def execute_actions(position: Position, actions: Iterable[Action]) -> None:
    for action in actions:
        execute_action(position, action)


def execute_turn(position: Position, turn: Turn) -> None:
    """Apply all actions of ``turn`` and pass play to the other side."""
    assert not position.is_over, "game is already over"
    execute_actions(position, turn.actions)
    position.end_turn()
