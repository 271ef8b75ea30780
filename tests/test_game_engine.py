"""GameEngine facade: caching, validation and invariant checking."""

import logging

import pytest

from mytikas.actions import Turn
from mytikas.config import EngineConfig
from mytikas.errors import IllegalTurnError, InvalidStateError
from mytikas.game_engine import GameEngine
from mytikas.gods import God, Player
from mytikas.state import Position


CACHED = EngineConfig(turn_cache=True, turn_cache_max=4)
UNCACHED = EngineConfig(turn_cache=False)


class TestTurnCache:
    def test_hit_after_miss(self, initial_position):
        first = GameEngine.get_valid_turns(initial_position, CACHED)
        second = GameEngine.get_valid_turns(initial_position, CACHED)
        assert first == second
        assert GameEngine.cache_stats() == {"size": 1, "hits": 1, "misses": 1}

    def test_returned_list_is_a_copy(self, initial_position):
        turns = GameEngine.get_valid_turns(initial_position, CACHED)
        turns.clear()
        assert len(GameEngine.get_valid_turns(initial_position, CACHED)) == 100

    def test_cache_is_bounded(self, initial_position):
        position = initial_position
        for god in list(God)[:6]:
            position = position.copy()
            position.place(Player.DARK, god, 40 - god)
            GameEngine.get_valid_turns(position, CACHED)
        assert GameEngine.cache_stats()["size"] == 4

    def test_disabled_cache(self, initial_position):
        GameEngine.get_valid_turns(initial_position, UNCACHED)
        assert GameEngine.cache_stats() == {"size": 0, "hits": 0, "misses": 0}

    def test_canonical_setting_is_part_of_the_key(self, initial_position):
        GameEngine.get_valid_turns(initial_position, CACHED)
        GameEngine.get_valid_turns(
            initial_position,
            EngineConfig(turn_cache=True, canonical_dual_attack=False),
        )
        assert GameEngine.cache_stats()["misses"] == 2


class TestApplyTurn:
    def test_copy_by_default(self, initial_position):
        result = GameEngine.apply_turn(initial_position, Turn.decode("Z@e1"), config=UNCACHED)
        assert result is not initial_position
        assert initial_position.is_empty(0)
        assert result.cell(Player.LIGHT, God.ZEUS) == 0
        assert result.player == Player.DARK

    def test_in_place(self, initial_position):
        result = GameEngine.apply_turn(
            initial_position, Turn.decode("Z@e1"), in_place=True, config=UNCACHED
        )
        assert result is initial_position
        assert initial_position.player == Player.DARK

    def test_validation_rejects_before_mutating(self, initial_position):
        with pytest.raises(IllegalTurnError) as excinfo:
            GameEngine.apply_turn(
                initial_position,
                Turn.decode("Z>e2"),
                in_place=True,
                validate=True,
                config=UNCACHED,
            )
        assert excinfo.value.context["turn"] == "Z>e2"
        assert initial_position == Position.initial()

    def test_validation_accepts_legal_turn(self, initial_position):
        result = GameEngine.apply_turn(
            initial_position, Turn.decode("N@e1,N>d2"), validate=True, config=CACHED
        )
        assert result.cell(Player.LIGHT, God.ATHENA) == 1

    def test_pass_is_legal_only_when_nothing_else_is(self, initial_position):
        assert not GameEngine.is_legal(initial_position, Turn(), UNCACHED)
        stuck = Position.initial_with_gods([God.ZEUS], [God.ZEUS], summonable=False)
        assert GameEngine.is_legal(stuck, Turn(), UNCACHED)

    def test_finished_game_rejects_turns(self, initial_position):
        initial_position.place(Player.DARK, God.ZEUS, 0)
        with pytest.raises(IllegalTurnError):
            GameEngine.apply_turn(initial_position, Turn(), config=UNCACHED)

    def test_strict_invariants(self, initial_position, monkeypatch):
        def corrupt(position, turn):
            position._board[20] = (Player.LIGHT, God.HADES)
            position.end_turn()

        monkeypatch.setattr("mytikas.game_engine.execute_turn", corrupt)
        strict = EngineConfig(turn_cache=False, strict_invariants=True)
        with pytest.raises(InvalidStateError):
            GameEngine.apply_turn(initial_position, Turn.decode("Z@e1"), config=strict)
        # Without strict checking the corruption goes unnoticed.
        GameEngine.apply_turn(initial_position, Turn.decode("Z@e1"), config=UNCACHED)

    def test_debug_logging(self, initial_position, caplog):
        debug = EngineConfig(turn_cache=False, debug_engine=True)
        with caplog.at_level(logging.DEBUG, logger="mytikas.game_engine"):
            GameEngine.apply_turn(initial_position, Turn.decode("Z@e1"), config=debug)
        assert any("applied Z@e1" in r.getMessage() for r in caplog.records)
