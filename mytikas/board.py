"""Board topology for Mytikas.

The board is a diamond of 41 cells inside a 9x9 grid. Cells are indexed in
row-major order starting from Light's gate::

          a  b  c  d  e  f  g  h  i
      9              40               9
      8           37 38 39            8
      7        32 33 34 35 36         7
      6     25 26 27 28 29 30 31      6
      5  16 17 18 19 20 21 22 23 24   5
      4      9 10 11 12 13 14 15      4
      3         4  5  6  7  8         3
      2            1  2  3            2
      1               0               1
          a  b  c  d  e  f  g  h  i

Rows ``r`` and columns ``c`` are 0-based, so cell 0 (``e1``) is ``(0, 4)``.
All tables are pre-computed at import time; everything here is read-only.
"""

from __future__ import annotations

__all__ = [
    "BOARD_SIZE",
    "FIELD_COUNT",
    "FIELD_NAMES",
    "GATES",
    "are_adjacent",
    "field_coords",
    "field_index",
    "field_name",
    "is_on_board",
    "neighbors",
    "neighbors_diff",
    "parse_field",
]

BOARD_SIZE = 9
FIELD_COUNT = 41

COLUMN_LETTERS = "abcdefghi"

# Light's gate first, Dark's gate second (indexed by Player).
GATES: tuple[int, int] = (0, FIELD_COUNT - 1)

_ADJACENT_DIRS: tuple[tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
)


def is_on_board(r: int, c: int) -> bool:
    """Return True if ``(r, c)`` lies inside the diamond."""
    return abs(r - 4) + abs(c - 4) <= 4


def _build_tables() -> tuple[
    tuple[tuple[int, int], ...],
    dict[tuple[int, int], int],
]:
    coords: list[tuple[int, int]] = []
    index: dict[tuple[int, int], int] = {}
    for r in range(BOARD_SIZE):
        for c in range(BOARD_SIZE):
            if is_on_board(r, c):
                index[(r, c)] = len(coords)
                coords.append((r, c))
    assert len(coords) == FIELD_COUNT
    return tuple(coords), index


FIELD_COORDS, _FIELD_INDEX = _build_tables()

FIELD_NAMES: tuple[str, ...] = tuple(
    f"{COLUMN_LETTERS[c]}{r + 1}" for r, c in FIELD_COORDS
)

_NAME_INDEX: dict[str, int] = {name: i for i, name in enumerate(FIELD_NAMES)}

_NEIGHBORS: tuple[tuple[int, ...], ...] = tuple(
    tuple(sorted(
        _FIELD_INDEX[(r + dr, c + dc)]
        for dr, dc in _ADJACENT_DIRS
        if (r + dr, c + dc) in _FIELD_INDEX
    ))
    for r, c in FIELD_COORDS
)

_NEIGHBOR_SETS: tuple[frozenset[int], ...] = tuple(
    frozenset(nbs) for nbs in _NEIGHBORS
)


def field_index(r: int, c: int) -> int | None:
    """Return the cell index at ``(r, c)``, or ``None`` when off the board."""
    return _FIELD_INDEX.get((r, c))


def field_coords(field: int) -> tuple[int, int]:
    """Return ``(row, column)`` of a cell."""
    return FIELD_COORDS[field]


def field_name(field: int | None) -> str:
    """Return the two-character cell name, or ``"-"`` for no cell."""
    if field is None or not 0 <= field < FIELD_COUNT:
        return "-"
    return FIELD_NAMES[field]


def parse_field(name: str) -> int | None:
    """Parse a cell name such as ``"e5"``; ``None`` if it is not a cell."""
    return _NAME_INDEX.get(name)


def neighbors(field: int) -> tuple[int, ...]:
    """Return the (8-connected) neighbors of a cell, in sorted order."""
    return _NEIGHBORS[field]


def are_adjacent(a: int, b: int) -> bool:
    return b in _NEIGHBOR_SETS[a]


def neighbors_diff(
    src: int | None, dst: int | None
) -> tuple[list[int], list[int]]:
    """Compute the neighborhood change of a piece going from ``src`` to ``dst``.

    Returns ``(old, new)`` where ``old`` holds the neighbors of ``src`` that
    are not neighbors of ``dst`` (excluding ``dst`` itself) and ``new`` holds
    the neighbors of ``dst`` that are not neighbors of ``src`` (excluding
    ``src`` itself). Either endpoint may be ``None`` for a placement or a
    removal. Cells adjacent to both endpoints keep their relationship with
    the piece and are omitted.

    Both neighbor lists are sorted, so this is a single merge pass.
    """
    src_nbs = _NEIGHBORS[src] if src is not None else ()
    dst_nbs = _NEIGHBORS[dst] if dst is not None else ()
    old: list[int] = []
    new: list[int] = []
    i = j = 0
    while True:
        f = src_nbs[i] if i < len(src_nbs) else FIELD_COUNT
        g = dst_nbs[j] if j < len(dst_nbs) else FIELD_COUNT
        if f < g:
            if f != dst:
                old.append(f)
            i += 1
        elif f > g:
            if g != src:
                new.append(g)
            j += 1
        else:
            if f == FIELD_COUNT:
                break
            i += 1
            j += 1
    return old, new
