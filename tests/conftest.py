"""Shared fixtures: grids drawn as ASCII art.

Legend: ``.`` empty, ``P`` player, ``C`` coin, ``B`` banana, ``R`` red
gorilla, ``U`` blue gorilla, ``S`` satiated gorilla, ``G`` green block,
``X`` red block, ``^ > v <`` arrows.
"""

from __future__ import annotations

import pytest

from mordicus.grid import Grid
from mordicus.units import CellType

LEGEND = {
    ".": CellType.EMPTY,
    "P": CellType.PLAYER,
    "C": CellType.COIN,
    "B": CellType.BANANA,
    "R": CellType.RED_GORILLA,
    "U": CellType.BLUE_GORILLA,
    "S": CellType.SATIATED_GORILLA,
    "G": CellType.GREEN_BLOCK,
    "X": CellType.RED_BLOCK,
    "^": CellType.ARROW_UP,
    ">": CellType.ARROW_RIGHT,
    "v": CellType.ARROW_DOWN,
    "<": CellType.ARROW_LEFT,
}


def _rows(*rows: str) -> list[list[str]]:
    return [[LEGEND[c].symbol for c in row] for row in rows]


def _grid(*rows: str) -> Grid:
    return Grid([[LEGEND[c] for c in row] for row in rows])


@pytest.fixture()
def make_grid():
    """``make_grid("P.", "..")`` builds a :class:`Grid`."""
    return _grid


@pytest.fixture()
def make_rows():
    """``make_rows("P.", "..")`` builds rows of level-file symbols."""
    return _rows
