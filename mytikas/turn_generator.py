"""Legal turn enumeration.

:func:`generate_turns` composes turns depth first. A shared builder holds
the action sequence under construction together with an arena of
intermediate positions, one per prefix length. Arena slots are filled only
when a continuation actually needs to look at the board, by copying the
previous slot and executing one action, so the position passed in is never
mutated.

Every prefix that is a legal turn on its own is emitted when it is reached,
so a one-action turn and its two-action extension are both produced. After
each step the builder offers, in this order:

* Hades' chain on an adjacent enemy, if Hades just acted and has not
  chained anyone this turn;
* the special rule 2 summon, if the step was a move off the own gate;
* the special rule 3 extra move, if a step killed the enemy defending its
  own gate;
* Aphrodite's swap, unless it was already used or an extra move was taken.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable

from .actions import MAX_ACTIONS, Action, ActionType, Turn
from .board import FIELD_COUNT, GATES, field_coords, field_index, neighbors
from .executor import execute_action
from .gods import KNIGHT_DIRS, God, PANTHEON, Player, StatusFx, attack_area
from .state import Position

__all__ = ["attack_targets", "generate_turns", "jump_paths", "move_destinations"]

logger = logging.getLogger(__name__)


def move_destinations(position: Position, player: Player, god: God) -> list[int]:
    """Return the cells ``god`` may move to, in discovery order.

    Direct patterns slide along each direction until blocked by the edge of
    the board or any piece. Indirect patterns flood-fill through empty cells,
    so pieces can be walked around but never over. Speed boost adds one to
    the distance.
    """
    field = position.cell(player, god)
    assert field is not None
    info = PANTHEON[god]
    max_dist = info.mov
    if position.has_fx(player, god, StatusFx.SPEED_BOOST):
        max_dist += 1

    res: list[int] = []
    r0, c0 = field_coords(field)
    if info.mov_pattern.direct:
        for dr, dc in info.mov_pattern.dirs:
            r, c = r0, c0
            for _ in range(max_dist):
                r += dr
                c += dc
                i = field_index(r, c)
                if i is None or position.is_occupied(i):
                    break
                res.append(i)
        return res

    # The start cell counts as seen: a god cannot "move" back onto itself.
    seen = {field}
    frontier = [(r0, c0)]
    for _ in range(max_dist):
        next_frontier = []
        for r, c in frontier:
            for dr, dc in info.mov_pattern.dirs:
                i = field_index(r + dr, c + dc)
                if i is None or i in seen or position.is_occupied(i):
                    continue
                seen.add(i)
                res.append(i)
                next_frontier.append((r + dr, c + dc))
        frontier = next_frontier
    return res


def attack_targets(position: Position, player: Player, god: God) -> list[int]:
    """Return the target cells of a regular attack by ``god``.

    For area attackers the result is the attacker's own cell, and only when
    at least one enemy stands in the area. Shielded enemies are valid
    targets; they simply take no damage.
    """
    field = position.cell(player, god)
    assert field is not None
    opponent = player.other
    info = PANTHEON[god]
    pattern = info.atk_pattern

    if pattern.is_area:
        if any(position.player_at(i) == opponent for i in attack_area(player, god, field)):
            return [field]
        return []

    res: list[int] = []
    r0, c0 = field_coords(field)
    if pattern.direct:
        for dr, dc in pattern.dirs:
            r, c = r0, c0
            for _ in range(info.rng):
                r += dr
                c += dc
                i = field_index(r, c)
                if i is None:
                    break
                occupant = position.player_at(i)
                if occupant == opponent:
                    res.append(i)
                # Zeus' lightning passes over friends and foes alike.
                if occupant is not None and god != God.ZEUS:
                    break
        return res

    seen = {field}
    frontier = [(r0, c0)]
    for _ in range(info.rng):
        next_frontier = []
        for r, c in frontier:
            for dr, dc in pattern.dirs:
                i = field_index(r + dr, c + dc)
                if i is None or i in seen:
                    continue
                seen.add(i)
                occupant = position.player_at(i)
                if occupant is None:
                    next_frontier.append((r + dr, c + dc))
                elif occupant == opponent:
                    res.append(i)
        frontier = next_frontier
    return res


def jump_paths(position: Position, player: Player, hops: int) -> list[tuple[int, ...]]:
    """Return Dionysus' jump sequences of at most ``hops`` knight hops.

    Each hop lands on an empty cell or an unshielded enemy, which is killed.
    Only sequences that kill at least one enemy are returned. Sequences with
    the same final cell and the same set of victims are equivalent; the
    shortest (then first found) one is kept.
    """
    opponent = player.other
    alive = [g for g in God if not position.is_dead(opponent, g)]
    found: set[tuple[int, frozenset[God]]] = set()
    res: list[tuple[int, ...]] = []
    layer: list[tuple[tuple[int, ...], Position]] = [((), position)]
    for _ in range(hops):
        next_layer = []
        for path, before in layer:
            src = before.cell(player, God.DIONYSUS)
            if src is None:
                continue
            r, c = field_coords(src)
            for dr, dc in KNIGHT_DIRS:
                dst = field_index(r + dr, c + dc)
                if dst is None:
                    continue
                occ = before.occupant(dst)
                if occ is not None and (
                    occ[0] != opponent or before.has_fx(occ[0], occ[1], StatusFx.SHIELDED)
                ):
                    continue
                after = before.copy()
                execute_action(after, Action(ActionType.SPECIAL, God.DIONYSUS, dst))
                victims = frozenset(g for g in alive if after.is_dead(opponent, g))
                extended = path + (dst,)
                if victims and (dst, victims) not in found:
                    found.add((dst, victims))
                    res.append(extended)
                # Landing on the enemy gate ends the game, and the jump.
                if not after.is_over:
                    next_layer.append((extended, after))
        layer = next_layer
    return res


def _target_order(position: Position, field: int) -> tuple[bool, God]:
    # Enemy Athena sorts first, then by god order.
    god = position.god_at(field)
    assert god is not None
    return (god != God.ATHENA, god)


@dataclass(frozen=True, slots=True)
class _TurnContext:
    """What happened earlier in the turn under construction."""
    step_start: int = 0  # prefix length before the current step
    actor: God | None = None  # god that acted in the current step
    may_summon: bool = False  # special rule 2 is available
    chained: bool = False  # Hades has chained someone
    swapped: bool = False  # Aphrodite has swapped
    extra_move: bool = False  # special rule 3 move taken
    gate_kill: bool = False  # special rule 3 move available


class _TurnBuilder:
    def __init__(self, position: Position, canonical_dual_attack: bool) -> None:
        self.player = position.player
        self.opponent = self.player.other
        self.canonical_dual_attack = canonical_dual_attack
        self.actions: list[Action] = []
        self.turns: list[Turn] = []
        self._states: list[Position | None] = [position] + [None] * MAX_ACTIONS
        self._emitted: set[tuple[Action, ...]] = set()

    # ------------------------------------------------------------------
    # Arena
    # ------------------------------------------------------------------

    @property
    def room(self) -> int:
        return MAX_ACTIONS - len(self.actions)

    def state(self, depth: int | None = None) -> Position:
        """Position after the first ``depth`` actions (default: all)."""
        if depth is None:
            depth = len(self.actions)
        position = self._states[depth]
        if position is None:
            position = self.state(depth - 1).copy()
            execute_action(position, self.actions[depth - 1])
            self._states[depth] = position
        return position

    def push(self, action: Action) -> None:
        assert self.room > 0
        self.actions.append(action)
        self._states[len(self.actions)] = None

    def pop(self) -> None:
        self.actions.pop()

    def emit(self) -> None:
        key = tuple(self.actions)
        if key not in self._emitted:
            self._emitted.add(key)
            self.turns.append(Turn(key))

    @staticmethod
    def _step(ctx: _TurnContext, start: int, actor: God, **changes) -> _TurnContext:
        fields = {"step_start": start, "actor": actor, "may_summon": False}
        fields.update(changes)
        return replace(ctx, **fields)

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def generate(self) -> list[Turn]:
        root = self.state(0)
        if root.is_over:
            return []
        ctx = _TurnContext()
        own_gate = GATES[self.player]

        self._summons(ctx, rule_one=True)
        for god in root.deployed_gods(self.player):
            self._moves(god, ctx, may_summon=root.cell(self.player, god) == own_gate)
        for god in root.deployed_gods(self.player):
            self._attacks(god, ctx)
        self._swaps(ctx)

        if not self.turns:
            self.turns.append(Turn())
        return self.turns

    def _after(self, ctx: _TurnContext) -> None:
        """Emit the current prefix and offer its continuations.

        Positions are only materialized when a continuation has to look at
        the board; a prefix with nothing to follow costs no copy.
        """
        self.emit()
        if not self.room:
            return
        if self._reached_enemy_gate() and self.state().is_over:
            return
        if (
            not ctx.gate_kill
            and self._may_hit_enemy_gate(ctx.step_start)
            and self._killed_gate_defender(ctx.step_start)
        ):
            ctx = replace(ctx, gate_kill=True)

        if ctx.actor == God.HADES and not ctx.chained:
            self._chains(ctx)
        if ctx.may_summon:
            self._summons(ctx, rule_one=False)
        if ctx.gate_kill:
            for god in self.state().deployed_gods(self.player):
                self._moves(god, ctx, extra=True)
        if not ctx.swapped and not ctx.extra_move and self._may_swap():
            self._swaps(ctx)

    def _reached_enemy_gate(self) -> bool:
        # A game is only decided by a piece arriving on the enemy gate.
        action = self.actions[-1]
        if action.field != GATES[self.opponent]:
            return False
        return action.type == ActionType.MOVE or (
            action.type == ActionType.SPECIAL and action.god == God.DIONYSUS
        )

    def _may_hit_enemy_gate(self, start: int) -> bool:
        """True if an action since ``start`` could damage the enemy gate."""
        gate = GATES[self.opponent]
        for action in self.actions[start:]:
            god = action.god
            if action.type == ActionType.ATTACK:
                if PANTHEON[god].atk_pattern.is_area:
                    if gate in attack_area(self.player, god, action.field):
                        return True
                elif action.field == gate:
                    return True
            elif action.type == ActionType.SPECIAL:
                if god == God.APHRODITE:
                    # The swapped ally may be Ares landing next to the gate.
                    return True
                if god in (God.HERMES, God.ARTEMIS, God.DIONYSUS) and action.field == gate:
                    return True
            elif god == God.ARES and (action.field == gate or gate in neighbors(action.field)):
                return True
        return False

    def _killed_gate_defender(self, start: int) -> bool:
        before = self.state(start)
        occ = before.occupant(GATES[self.opponent])
        if occ is None or occ[0] != self.opponent:
            return False
        return self.state().is_dead(occ[0], occ[1])

    def _may_swap(self) -> bool:
        """True if Aphrodite and at least one ally can be on the board.

        Own gods only join the board by being summoned and never leave it
        except by dying, so the root position plus this turn's summons is
        an upper bound that needs no copy.
        """
        on_board = set(self.state(0).deployed_gods(self.player))
        on_board.update(a.god for a in self.actions if a.type == ActionType.SUMMON)
        return God.APHRODITE in on_board and len(on_board) > 1

    def _summons(self, ctx: _TurnContext, *, rule_one: bool) -> None:
        """Summon any summonable god onto the empty own gate.

        Under special rule 1 (a turn that starts with the summon) the summoned
        god may then move or attack; under special rule 2 (a summon after
        moving off the gate) it may only attack.
        """
        if not self.room:
            return
        position = self.state()
        gate = GATES[self.player]
        if position.is_occupied(gate):
            return
        start = len(self.actions)
        for god in position.summonable_gods(self.player):
            self.push(Action(ActionType.SUMMON, god, gate))
            step = self._step(ctx, start, god)
            self._after(step)
            if rule_one:
                self._moves(god, step)
            self._attacks(god, step)
            self.pop()

    def _moves(
        self,
        god: God,
        ctx: _TurnContext,
        *,
        may_summon: bool = False,
        extra: bool = False,
    ) -> None:
        if not self.room:
            return
        position = self.state()
        if position.has_fx(self.player, god, StatusFx.CHAINED):
            return
        start = len(self.actions)
        for field in move_destinations(position, self.player, god):
            self.push(Action(ActionType.MOVE, god, field))
            if extra:
                step = self._step(ctx, start, god, extra_move=True, gate_kill=False)
            else:
                step = self._step(ctx, start, god, may_summon=may_summon)
            self._after(step)
            self.pop()

    def _attacks(self, god: God, ctx: _TurnContext) -> None:
        """Regular attacks of ``god`` plus the specials that replace them."""
        if not self.room:
            return
        position = self.state()
        if position.has_fx(self.player, god, StatusFx.CHAINED):
            return
        start = len(self.actions)
        targets = attack_targets(position, self.player, god)
        follow_up = _FOLLOW_UPS.get(god)
        for target in targets:
            self.push(Action(ActionType.ATTACK, god, target))
            step = self._step(ctx, start, god)
            self._after(step)
            if follow_up is not None and self.room:
                follow_up(self, position, target, targets, step)
            self.pop()

        alternative = _ALTERNATIVES.get(god)
        if alternative is not None:
            alternative(self, position, ctx, start)

    def _second_targets(
        self, before: Position, first: int, targets: list[int], step: _TurnContext
    ) -> None:
        # Targets are those reachable before the first attack.
        first_order = _target_order(before, first)
        for second in targets:
            if second == first:
                continue
            if self.canonical_dual_attack and _target_order(before, second) < first_order:
                continue
            self.push(Action(ActionType.SPECIAL, God.HERMES, second))
            self._after(step)
            self.pop()

    def _withering(self, before: Position, ctx: _TurnContext, start: int) -> None:
        for field in range(FIELD_COUNT):
            occ = before.occupant(field)
            if occ is None or occ[0] != self.opponent:
                continue
            if before.has_fx(occ[0], occ[1], StatusFx.SHIELDED):
                continue
            self.push(Action(ActionType.SPECIAL, God.ARTEMIS, field))
            self._after(self._step(ctx, start, God.ARTEMIS))
            self.pop()

    def _jumps(self, before: Position, ctx: _TurnContext, start: int) -> None:
        hops = 2 if before.has_fx(self.player, God.DIONYSUS, StatusFx.SPEED_BOOST) else 1
        for path in jump_paths(before, self.player, min(hops, self.room)):
            for field in path:
                self.push(Action(ActionType.SPECIAL, God.DIONYSUS, field))
            self._after(self._step(ctx, start, God.DIONYSUS))
            for _ in path:
                self.pop()

    def _chains(self, ctx: _TurnContext) -> None:
        position = self.state()
        hades = position.cell(self.player, God.HADES)
        if hades is None:
            return
        start = len(self.actions)
        for field in neighbors(hades):
            occ = position.occupant(field)
            if occ is None or occ[0] != self.opponent:
                continue
            if position.has_fx(occ[0], occ[1], StatusFx.CHAINED):
                continue
            self.push(Action(ActionType.SPECIAL, God.HADES, field))
            self._after(self._step(ctx, start, God.HADES, chained=True))
            self.pop()

    def _swaps(self, ctx: _TurnContext) -> None:
        """Aphrodite trades places with any unchained ally on the board."""
        if not self.room:
            return
        position = self.state()
        if position.cell(self.player, God.APHRODITE) is None:
            return
        if position.has_fx(self.player, God.APHRODITE, StatusFx.CHAINED):
            return
        start = len(self.actions)
        for god in position.deployed_gods(self.player):
            if god == God.APHRODITE or position.has_fx(self.player, god, StatusFx.CHAINED):
                continue
            field = position.cell(self.player, god)
            self.push(Action(ActionType.SPECIAL, God.APHRODITE, field))
            # The ally lands on Aphrodite's cell; it counts as the actor so
            # that a swapped Hades may chain.
            self._after(self._step(ctx, start, god, swapped=True))
            self.pop()


# Specials that may follow a regular attack by the same god, called with the
# position before the attack, the attacked cell, all targets and the step.
_FOLLOW_UPS: dict[God, Callable[..., None]] = {
    God.HERMES: _TurnBuilder._second_targets,
}

# Specials offered in place of a regular attack, called with the position
# before the step, the context and the step start.
_ALTERNATIVES: dict[God, Callable[..., None]] = {
    God.ARTEMIS: _TurnBuilder._withering,
    God.DIONYSUS: _TurnBuilder._jumps,
}


def generate_turns(position: Position, *, canonical_dual_attack: bool = True) -> list[Turn]:
    """Return every legal turn for the side to move.

    The result is duplicate free (by action sequence) and in generation
    order. When no action is possible the single pass turn is returned. A
    finished game yields an empty list.

    Args:
        position: Position to enumerate; it is not modified.
        canonical_dual_attack: Emit Hermes' double attacks only in canonical
            target order (enemy Athena first, then god order). When false,
            both orders of every pair are produced.
    """
    turns = _TurnBuilder(position, canonical_dual_attack).generate()
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("generated %d turns for %s", len(turns), position.encode())
    return turns
