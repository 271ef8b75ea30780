"""Short random self-play soaks must not trip any position invariant."""

import pytest

from mytikas.gods import God, Player
from mytikas.selfplay import GameRecord, play_game, run_self_play, summarise
from mytikas.state import Position


@pytest.mark.timeout(120)
def test_short_soak_has_no_violations():
    records = run_self_play(games=2, seed=1234, max_turns=40)
    summary = summarise(records)
    assert summary["total_games"] == 2
    assert summary["invariant_violations_total"] == 0, summary
    for record in records:
        assert 0 < record.length <= 40
        assert record.termination_reason in {"gate_reached", "max_turns_reached"}


def test_games_are_reproducible():
    first = play_game(0, seed=77, max_turns=20)
    second = play_game(0, seed=77, max_turns=20)
    assert first.final_position == second.final_position
    assert first.length == second.length


def test_game_from_a_won_position_stops_immediately():
    start = Position.initial()
    start.place(Player.LIGHT, God.ZEUS, 40)
    record = play_game(0, seed=1, start=start)
    assert record.length == 0
    assert record.winner == "light"
    assert record.termination_reason == "gate_reached"


def test_near_win_is_taken_eventually():
    start = Position.initial_with_gods([God.ZEUS], [God.ZEUS], summonable=False)
    start.place(Player.LIGHT, God.ZEUS, 38)
    start.place(Player.DARK, God.ZEUS, 2)
    record = play_game(0, seed=3, max_turns=50, start=start)
    assert record.invariant_violations_by_type == {}
    assert record.length >= 1


def test_summarise():
    records = [
        GameRecord(0, 1, 10, "light", "gate_reached", "x"),
        GameRecord(1, 2, 20, None, "max_turns_reached", "x",
                   invariant_violations_by_type={"INVALID_STATE": 2}),
        GameRecord(2, 3, 30, "dark", "gate_reached", "x"),
    ]
    summary = summarise(records)
    assert summary == {
        "total_games": 3,
        "light_wins": 1,
        "dark_wins": 1,
        "unfinished_games": 1,
        "avg_length": 20.0,
        "invariant_violations_by_type": {"INVALID_STATE": 2},
        "invariant_violations_total": 2,
    }
    assert summarise([])["avg_length"] == 0.0
