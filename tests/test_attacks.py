"""Attack targeting and regular attack resolution."""

import pytest

from mytikas.actions import Action, ActionType
from mytikas.executor import attack_damage, execute_action
from mytikas.gods import God, Player, StatusFx
from mytikas.state import Position
from mytikas.turn_generator import attack_targets

from conftest import attack_victims_in_turns, position_from_template


class TestTargeting:
    def test_zeus_lightning_passes_over_pieces(self):
        position = position_from_template(Player.LIGHT, """
                .
               ...
              ...m.
             .......
            a...Z..p.
             ..do...
              .....
               ...
                .
        """)
        assert attack_victims_in_turns(position, God.ZEUS) == {God.APOLLO, God.POSEIDON}

    def test_zeus_hits_everything_in_range(self):
        position = position_from_template(Player.LIGHT, """
                .
               ...
              .....
             .......
            adopZAenm
             .......
              .....
               ...
                .
        """)
        assert attack_victims_in_turns(position, God.ZEUS) == {
            God.POSEIDON, God.APOLLO, God.DIONYSUS, God.HERA, God.ATHENA,
        }

    def test_hephaestus_is_blocked_by_the_first_piece(self):
        position = position_from_template(Player.LIGHT, """
                .
               ...
              ..e..
             ...A...
            .a..H.p..
             ..do...
              ..m..
               ...
                .
        """)
        assert attack_victims_in_turns(position, God.HEPHAESTUS) == {God.APOLLO, God.POSEIDON}

    def test_shielded_enemies_are_targets(self):
        position = position_from_template(Player.LIGHT, """
                .
               ...
              .....
             ...zn..
            ....Z....
             .......
              .....
               ...
                .
        """)
        assert position.has_fx(Player.DARK, God.ZEUS, StatusFx.SHIELDED)
        assert attack_targets(position, Player.LIGHT, God.ZEUS) == [28]

    def test_area_attack_needs_an_enemy_in_the_area(self):
        position = position_from_template(Player.LIGHT, """
                .
               ...
              .....
             .......
            .........
             ...o...
              ..P..
               ...
                .
        """)
        # Dark Apollo on e4 is inside Poseidon's block in front of e3.
        assert attack_targets(position, Player.LIGHT, God.POSEIDON) == [6]
        position.move(Player.DARK, God.APOLLO, 1)
        # Behind Poseidon now: out of the area.
        assert attack_targets(position, Player.LIGHT, God.POSEIDON) == []

    def test_indirect_attack_goes_around_pieces(self):
        position = position_from_template(Player.LIGHT, """
                .
               ...
              .....
             .......
            ....o....
             ...A...
              ..O..
               ...
                .
        """)
        # Apollo's range 3 reaches e5 by walking around Aphrodite on e4.
        assert attack_targets(position, Player.LIGHT, God.APOLLO) == [20]


class TestDamage:
    @pytest.mark.parametrize(
        "player, target, expected",
        [
            (Player.LIGHT, 27, 5),   # in front
            (Player.LIGHT, 11, 10),  # behind
            (Player.DARK, 11, 5),
            (Player.DARK, 27, 10),
        ],
    )
    def test_hera_doubles_from_behind(self, player, target, expected):
        position = Position.initial_with_gods([God.HERA], [God.HERA])
        position.place(player, God.HERA, 20)
        assert attack_damage(position, player, God.HERA, target) == expected

    @pytest.mark.parametrize("target, expected", [(34, 3), (35, 2), (36, 3), (22, 3)])
    def test_apollo_bonus_on_straight_lines(self, target, expected):
        position = position_from_template(Player.LIGHT, """
                .
               ...
              .....
             .......
            ....O....
             .......
              .....
               ...
                .
        """)
        assert attack_damage(position, Player.LIGHT, God.APOLLO, target) == expected

    def test_damage_boost_adds_one(self):
        position = position_from_template(Player.LIGHT, """
                .
               ...
              .....
             .......
            ...HZ....
             .......
              .....
               ...
                .
        """)
        assert attack_damage(position, Player.LIGHT, God.ZEUS, 28) == 11

    def test_regular_attack_deals_damage(self):
        position = position_from_template(Player.LIGHT, """
                .
               ...
              .....
             ...o...
            ....N....
             .......
              .....
               ...
                .
        """)
        execute_action(position, Action(ActionType.ATTACK, God.ATHENA, 28))
        assert position.hp(Player.DARK, God.APOLLO) == 3
        assert position.player == Player.LIGHT

    def test_shield_absorbs_attack(self):
        position = position_from_template(Player.LIGHT, """
                .
               ...
              .....
             ...on..
            ....N....
             .......
              .....
               ...
                .
        """)
        execute_action(position, Action(ActionType.ATTACK, God.ATHENA, 28))
        assert position.hp(Player.DARK, God.APOLLO) == 6


class TestAreaAttacks:
    def test_poseidon_knockback_and_shield(self):
        position = position_from_template(Player.LIGHT, """
                .
               ...
              .....
             .......
            ...O.o...
             .nez...
              ..P..
               ...
                .
        """)
        assert position.has_fx(Player.DARK, God.HERA, StatusFx.SHIELDED)
        execute_action(position, Action(ActionType.ATTACK, God.POSEIDON, 6))

        # Zeus took 4 and was pushed from e4 to e5.
        assert position.cell(Player.DARK, God.ZEUS) == 20
        assert position.hp(Player.DARK, God.ZEUS) == 6
        # Apollo took 4 and was pushed from f5 to f6.
        assert position.cell(Player.DARK, God.APOLLO) == 29
        assert position.hp(Player.DARK, God.APOLLO) == 2
        # Hera is shielded and the cell behind her holds a Light god.
        assert position.cell(Player.DARK, God.HERA) == 11
        assert position.hp(Player.DARK, God.HERA) == 8
        # Friendly gods in the area are untouched.
        assert position.cell(Player.LIGHT, God.APOLLO) == 19
        assert position.hp(Player.LIGHT, God.APOLLO) == 6
        position.check_invariants()

    def test_knocked_back_ares_does_not_land(self):
        position = position_from_template(Player.DARK, """
                .
               ...
              ..p..
             ...R...
            .........
             ...z...
              .....
               ...
                .
        """)
        execute_action(position, Action(ActionType.ATTACK, God.POSEIDON, 34))
        # Ares was pushed from e6 to e5, next to Zeus, without hurting him.
        assert position.cell(Player.LIGHT, God.ARES) == 20
        assert position.hp(Player.LIGHT, God.ARES) == 1
        assert position.hp(Player.DARK, God.ZEUS) == 10
        position.check_invariants()

    def test_knockback_clears_the_back_row_first(self):
        position = position_from_template(Player.LIGHT, """
                .
               ...
              .....
             .......
            ....o....
             ...z...
              ..P..
               ...
                .
        """)
        execute_action(position, Action(ActionType.ATTACK, God.POSEIDON, 6))
        # Apollo moves out of e5 first, making room for Zeus.
        assert position.cell(Player.DARK, God.APOLLO) == 28
        assert position.cell(Player.DARK, God.ZEUS) == 20
        assert position.hp(Player.DARK, God.APOLLO) == 2
        assert position.hp(Player.DARK, God.ZEUS) == 6
        position.check_invariants()

    def test_hades_hits_athena_first(self):
        position = position_from_template(Player.LIGHT, """
                .
               ...
              .....
             ...n...
            ...oS....
             .......
              .....
               ...
                .
        """)
        assert position.has_fx(Player.DARK, God.APOLLO, StatusFx.SHIELDED)
        execute_action(position, Action(ActionType.ATTACK, God.HADES, 20))
        assert position.is_dead(Player.DARK, God.ATHENA)
        assert position.hp(Player.DARK, God.APOLLO) == 3

    def test_dionysus_area_is_orthogonal(self):
        position = position_from_template(Player.LIGHT, """
                .
               ...
              .....
             ...oz..
            ....D....
             .......
              .....
               ...
                .
        """)
        execute_action(position, Action(ActionType.ATTACK, God.DIONYSUS, 20))
        assert position.hp(Player.DARK, God.APOLLO) == 2
        # f6 is diagonal to e5.
        assert position.hp(Player.DARK, God.ZEUS) == 10
