"""Players and the character catalog.

Each side commands the same twelve gods. The order of the :class:`God`
enumeration is significant: it fixes the layout of the position encoding and
the canonical ordering used to deduplicate Hermes' double attacks.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, IntFlag

from .board import field_coords, field_index

__all__ = [
    "ALL8_DIRS",
    "ARES_LANDING_DAMAGE",
    "DIAG_DIRS",
    "GOD_COUNT",
    "God",
    "GodInfo",
    "KNIGHT_DIRS",
    "ORTHO_DIRS",
    "PANTHEON",
    "Pattern",
    "Player",
    "StatusFx",
    "WITHERING_DAMAGE",
    "attack_area",
    "god_by_id",
    "knockback_direction",
]


class Player(IntEnum):
    """Side enumeration. Light moves first and defends cell ``e1``."""
    LIGHT = 0
    DARK = 1

    @property
    def other(self) -> "Player":
        return Player(1 - self)


class God(IntEnum):
    ZEUS = 0
    HEPHAESTUS = 1
    HERA = 2
    POSEIDON = 3
    APOLLO = 4
    APHRODITE = 5
    ARES = 6
    HERMES = 7
    DIONYSUS = 8
    ARTEMIS = 9
    HADES = 10
    ATHENA = 11


GOD_COUNT = len(God)


class StatusFx(IntFlag):
    """Bit set of status effects on a god.

    CHAINED is set by an enemy Hades and persists; the other bits are auras
    derived from same-side neighbors and are never stored independently.
    """
    NONE = 0
    CHAINED = 1
    DAMAGE_BOOST = 2
    SPEED_BOOST = 4
    SHIELDED = 8


AURA_MASK = StatusFx.DAMAGE_BOOST | StatusFx.SPEED_BOOST | StatusFx.SHIELDED

Dir = tuple[int, int]

ORTHO_DIRS: tuple[Dir, ...] = ((-1, 0), (0, 1), (0, -1), (1, 0))
DIAG_DIRS: tuple[Dir, ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ALL8_DIRS: tuple[Dir, ...] = ORTHO_DIRS + DIAG_DIRS
KNIGHT_DIRS: tuple[Dir, ...] = (
    (-2, -1), (-2, 1), (-1, -2), (-1, 2),
    (1, -2), (1, 2), (2, -1), (2, 1),
)
NO_DIRS: tuple[Dir, ...] = ()

# Ares deals this much damage to adjacent enemies whenever he lands.
ARES_LANDING_DAMAGE = 1

# Artemis' withering moon: damage dealt to the target and taken by herself.
WITHERING_DAMAGE = 1


@dataclass(frozen=True, slots=True)
class Pattern:
    """A movement or attack pattern.

    ``direct`` patterns slide along each direction until blocked; indirect
    patterns flood-fill through empty cells. An empty ``dirs`` tuple marks an
    area attack.
    """
    dirs: tuple[Dir, ...]
    direct: bool = False

    @property
    def is_area(self) -> bool:
        return not self.dirs


@dataclass(frozen=True, slots=True)
class GodInfo:
    name: str
    ascii_id: str
    hit: int  # hit points (base)
    mov: int  # movement distance
    dmg: int  # attack damage (base)
    rng: int  # attack range
    mov_pattern: Pattern
    atk_pattern: Pattern
    aura: StatusFx  # granted to same-side neighbors


def _god(name, ascii_id, hit, mov, dmg, rng, mov_pattern, atk_pattern, aura):
    return GodInfo(name, ascii_id, hit, mov, dmg, rng, mov_pattern, atk_pattern, aura)


def _direct(dirs: tuple[Dir, ...]) -> Pattern:
    return Pattern(dirs, direct=True)


def _indirect(dirs: tuple[Dir, ...]) -> Pattern:
    return Pattern(dirs, direct=False)


# Indexed by God.
PANTHEON: tuple[GodInfo, ...] = (
    # name         id   hit mov dmg rng  movement                 attack                   aura
    _god("Zeus",       "Z", 10, 1, 10, 3, _indirect(ALL8_DIRS),   _direct(ORTHO_DIRS),   StatusFx.NONE),
    _god("Hephaestus", "H",  9, 2,  7, 2, _indirect(ORTHO_DIRS),  _direct(ORTHO_DIRS),   StatusFx.DAMAGE_BOOST),
    _god("Hera",       "E",  8, 2,  5, 2, _indirect(DIAG_DIRS),   _indirect(DIAG_DIRS),  StatusFx.NONE),
    _god("Poseidon",   "P",  7, 3,  4, 0, _indirect(ORTHO_DIRS),  _indirect(NO_DIRS),    StatusFx.NONE),
    _god("Apollo",     "O",  6, 2,  2, 3, _indirect(ALL8_DIRS),   _indirect(ALL8_DIRS),  StatusFx.NONE),
    _god("Aphrodite",  "A",  6, 3,  6, 1, _indirect(ALL8_DIRS),   _indirect(ALL8_DIRS),  StatusFx.NONE),
    _god("Ares",       "R",  5, 3,  5, 3, _direct(ALL8_DIRS),     _direct(ALL8_DIRS),    StatusFx.NONE),
    _god("Hermes",     "M",  5, 3,  3, 2, _indirect(ALL8_DIRS),   _direct(ALL8_DIRS),    StatusFx.SPEED_BOOST),
    _god("Dionysus",   "D",  4, 1,  4, 0, _indirect(KNIGHT_DIRS), _indirect(NO_DIRS),    StatusFx.NONE),
    _god("Artemis",    "T",  4, 2,  4, 2, _indirect(ALL8_DIRS),   _direct(DIAG_DIRS),    StatusFx.NONE),
    _god("Hades",      "S",  3, 3,  3, 1, _direct(ALL8_DIRS),     _indirect(NO_DIRS),    StatusFx.NONE),
    _god("Athena",     "N",  3, 1,  3, 3, _indirect(ALL8_DIRS),   _direct(ALL8_DIRS),    StatusFx.SHIELDED),
)

assert len(PANTHEON) == GOD_COUNT

_GOD_BY_ID: dict[str, God] = {info.ascii_id: God(i) for i, info in enumerate(PANTHEON)}


def god_by_id(ch: str) -> God | None:
    """Return the god whose one-letter id is ``ch`` (case-sensitive)."""
    return _GOD_BY_ID.get(ch)


def _cells(coords) -> tuple[int, ...]:
    res = []
    for r, c in coords:
        i = field_index(r, c)
        if i is not None:
            res.append(i)
    return tuple(sorted(res))


def attack_area(player: Player, god: God, field: int) -> tuple[int, ...]:
    """Return the on-board cells hit by an area attack from ``field``.

    Only Poseidon, Dionysus and Hades attack areas. The attacker's own cell
    is never part of the area. Cells are returned in index order.
    """
    r, c = field_coords(field)
    if god == God.POSEIDON:
        rows = (r + 1, r + 2) if player == Player.LIGHT else (r - 2, r - 1)
        return _cells((rr, cc) for rr in rows for cc in (c - 1, c, c + 1))
    if god == God.HADES:
        return _cells((r + dr, c + dc) for dr, dc in ALL8_DIRS)
    if god == God.DIONYSUS:
        return _cells((r + dr, c + dc) for dr, dc in ORTHO_DIRS)
    raise ValueError(f"{PANTHEON[god].name} has no area attack")


def knockback_direction(player: Player, god: God) -> int:
    """Row offset of Poseidon's push (away from him), 0 for everyone else."""
    if god != God.POSEIDON:
        return 0
    return 1 if player == Player.LIGHT else -1
