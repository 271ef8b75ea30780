"""Character catalog: stats, ids and area shapes."""

import pytest

from mytikas.gods import (
    AURA_MASK,
    GOD_COUNT,
    PANTHEON,
    God,
    Player,
    StatusFx,
    attack_area,
    god_by_id,
    knockback_direction,
)


def test_god_order_matches_ids():
    assert GOD_COUNT == 12
    assert "".join(info.ascii_id for info in PANTHEON) == "ZHEPOARMDTSN"
    for god in God:
        assert god_by_id(PANTHEON[god].ascii_id) == god


def test_god_by_id_is_case_sensitive():
    assert god_by_id("z") is None
    assert god_by_id("X") is None
    assert god_by_id("") is None


@pytest.mark.parametrize(
    "god, hit, mov, dmg, rng",
    [
        (God.ZEUS, 10, 1, 10, 3),
        (God.HEPHAESTUS, 9, 2, 7, 2),
        (God.POSEIDON, 7, 3, 4, 0),
        (God.DIONYSUS, 4, 1, 4, 0),
        (God.ATHENA, 3, 1, 3, 3),
    ],
)
def test_stats(god, hit, mov, dmg, rng):
    info = PANTHEON[god]
    assert (info.hit, info.mov, info.dmg, info.rng) == (hit, mov, dmg, rng)


def test_auras():
    granting = {god for god in God if PANTHEON[god].aura}
    assert granting == {God.HEPHAESTUS, God.HERMES, God.ATHENA}
    assert PANTHEON[God.HEPHAESTUS].aura == StatusFx.DAMAGE_BOOST
    assert PANTHEON[God.HERMES].aura == StatusFx.SPEED_BOOST
    assert PANTHEON[God.ATHENA].aura == StatusFx.SHIELDED
    assert not AURA_MASK & StatusFx.CHAINED


def test_area_attackers():
    area = {god for god in God if PANTHEON[god].atk_pattern.is_area}
    assert area == {God.POSEIDON, God.DIONYSUS, God.HADES}


def test_poseidon_area_faces_the_enemy():
    # Light at e3: the 3x2 block on rows 4 and 5.
    assert attack_area(Player.LIGHT, God.POSEIDON, 6) == (11, 12, 13, 19, 20, 21)
    # Dark at e7: rows 5 and 6.
    assert attack_area(Player.DARK, God.POSEIDON, 34) == (19, 20, 21, 27, 28, 29)
    # Nothing in front of Light on Dark's gate.
    assert attack_area(Player.LIGHT, God.POSEIDON, 40) == ()


def test_hades_and_dionysus_areas():
    assert attack_area(Player.LIGHT, God.HADES, 20) == (11, 12, 13, 19, 21, 27, 28, 29)
    assert attack_area(Player.DARK, God.HADES, 0) == (1, 2, 3)
    assert attack_area(Player.LIGHT, God.DIONYSUS, 20) == (12, 19, 21, 28)
    assert attack_area(Player.LIGHT, God.DIONYSUS, 0) == (2,)


def test_attack_area_of_single_target_god():
    with pytest.raises(ValueError):
        attack_area(Player.LIGHT, God.ZEUS, 20)


def test_knockback_direction():
    assert knockback_direction(Player.LIGHT, God.POSEIDON) == 1
    assert knockback_direction(Player.DARK, God.POSEIDON) == -1
    assert knockback_direction(Player.LIGHT, God.HADES) == 0


def test_player_other():
    assert Player.LIGHT.other == Player.DARK
    assert Player.DARK.other == Player.LIGHT
