"""RandomAI behaviour and seeding."""

import random

from mytikas.ai import BaseAI, RandomAI
from mytikas.ai.base import derive_default_seed
from mytikas.gods import God, Player
from mytikas.state import Position


def test_selects_a_legal_turn(initial_position):
    ai = RandomAI(Player.LIGHT, seed=42)
    turn = ai.select_turn(initial_position)
    assert turn in ai.get_valid_turns(initial_position)
    assert ai.turn_count == 1


def test_same_seed_same_choices(initial_position):
    first = RandomAI(Player.LIGHT, seed=5)
    second = RandomAI(Player.LIGHT, seed=5)
    for _ in range(5):
        assert first.select_turn(initial_position) == second.select_turn(initial_position)


def test_default_seed_is_deterministic():
    ai = RandomAI(Player.DARK)
    assert ai.rng_seed == derive_default_seed(Player.DARK)
    assert derive_default_seed(Player.LIGHT) != derive_default_seed(Player.DARK)


def test_shared_rng():
    rng = random.Random(3)
    ai = RandomAI(Player.LIGHT, seed=99, rng=rng)
    assert ai.rng is rng
    assert ai.rng_seed == 99


def test_no_turn_once_the_game_is_over(initial_position):
    initial_position.place(Player.DARK, God.ZEUS, 0)
    ai = RandomAI(Player.LIGHT, seed=1)
    assert ai.select_turn(initial_position) is None
    assert ai.turn_count == 0


def test_evaluation():
    position = Position.initial()
    ai = RandomAI(Player.LIGHT, seed=1)
    assert -0.1 <= ai.evaluate_position(position) <= 0.1
    position.place(Player.LIGHT, God.ZEUS, 40)
    assert ai.evaluate_position(position) == 1.0
    assert RandomAI(Player.DARK, seed=1).evaluate_position(position) == -1.0


def test_random_element_of_nothing():
    ai = RandomAI(Player.LIGHT, seed=1)
    assert ai.get_random_element([]) is None
    assert isinstance(ai, BaseAI)
    assert repr(ai) == "RandomAI(player=light)"
