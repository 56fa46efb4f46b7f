"""Immutable grid representation for the puzzle engine."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

from mordicus.directions import Coordinates, Direction, Move, forward_position
from mordicus.units import CellType

# Size of the board used by the shipped levels.
DEFAULT_WIDTH = 12
DEFAULT_HEIGHT = 9


class Grid:
    """NumPy-backed, read-only grid of :class:`CellType` codes.

    Cells are indexed ``cells[y, x]``. Every mutation returns a new grid;
    the backing array is never written after construction.
    """

    __slots__ = ("cells",)

    def __init__(self, cells: Sequence[Sequence[int]] | np.ndarray) -> None:
        arr = np.array(cells, dtype=np.int8)
        if arr.size == 0:
            arr = arr.reshape(0, 0)
        if arr.ndim != 2:
            raise ValueError("Grid cells must form a rectangular 2D array.")
        arr.flags.writeable = False
        self.cells = arr

    # -- construction helpers -------------------------------------------------

    @classmethod
    def from_symbols(cls, rows: Iterable[Iterable[str]]) -> Grid:
        """Build a grid from rows of level-file symbols.

        Example::

            Grid.from_symbols([["😮", "⬛"], ["⬛", "🟡"]])
        """
        return cls([[CellType.from_symbol(s) for s in row] for row in rows])

    @classmethod
    def empty(cls, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT) -> Grid:
        return cls(np.full((height, width), CellType.EMPTY, dtype=np.int8))

    # -- queries --------------------------------------------------------------

    @property
    def width(self) -> int:
        return int(self.cells.shape[1])

    @property
    def height(self) -> int:
        return int(self.cells.shape[0])

    def in_bounds(self, pos: Coordinates) -> bool:
        """Check whether a coordinate lies within the grid."""
        return 0 <= pos.y < self.height and 0 <= pos.x < self.width

    def cell_at(self, pos: Coordinates) -> CellType | None:
        """Return the cell type at *pos*, or ``None`` outside the grid."""
        if not self.in_bounds(pos):
            return None
        return CellType(int(self.cells[pos.y, pos.x]))

    def cell_forward(
        self, pos: Coordinates, direction: Direction, n: int = 1,
    ) -> CellType | None:
        return self.cell_at(forward_position(pos, direction, n))

    def find_all(self, cell_types: CellType | Iterable[CellType]) -> list[Coordinates]:
        """Return every position holding one of *cell_types*.

        Positions come back in row-major order (top to bottom, left to
        right), which the passive rules rely on for deterministic output.
        """
        if isinstance(cell_types, CellType):
            codes = [int(cell_types)]
        else:
            codes = [int(t) for t in cell_types]
        ys, xs = np.nonzero(np.isin(self.cells, codes))
        return [Coordinates(x, y) for y, x in zip(ys.tolist(), xs.tolist(), strict=True)]

    def count(self, cell_types: CellType | Iterable[CellType]) -> int:
        return len(self.find_all(cell_types))

    def find_player(self) -> Coordinates | None:
        """Return the first player position in row-major order."""
        found = self.find_all(CellType.PLAYER)
        return found[0] if found else None

    def neighbor_positions(self, pos: Coordinates) -> list[Coordinates]:
        """Occupied in-bounds cells adjacent to *pos*, Up/Right/Down/Left."""
        neighbors: list[Coordinates] = []
        for direction in Direction:
            candidate = forward_position(pos, direction)
            cell = self.cell_at(candidate)
            if cell is not None and cell != CellType.EMPTY:
                neighbors.append(candidate)
        return neighbors

    def neighboring_cell_types(self, pos: Coordinates) -> frozenset[CellType]:
        return frozenset(self.cell_at(p) for p in self.neighbor_positions(pos))

    # -- copy-on-write mutation -----------------------------------------------

    def apply_move(self, move: Move) -> Grid:
        """Return a new grid with *move* executed.

        Each target receives ``move.replace_with`` or, failing that, the
        source's current type. The source is cleared last, even when it is
        also one of the targets.
        """
        copy = self.cells.copy()
        src = move.source
        for dest in move.targets:
            value = move.replace_with if move.replace_with is not None else copy[src.y, src.x]
            copy[dest.y, dest.x] = value
        copy[src.y, src.x] = CellType.EMPTY
        return Grid(copy)

    def apply_moves(self, moves: Iterable[Move]) -> Grid:
        """Apply *moves* one after another, in list order."""
        grid = self
        for move in moves:
            grid = grid.apply_move(move)
        return grid

    # -- serialization ----------------------------------------------------------

    def to_symbols(self) -> list[list[str]]:
        return [[CellType(int(c)).symbol for c in row] for row in self.cells]

    def to_dict(self) -> dict:
        """Serialize grid state to a dictionary."""
        return {
            "width": self.width,
            "height": self.height,
            "cells": self.to_symbols(),
        }

    # -- dunder ---------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return grids_equal(self, other)

    def __hash__(self) -> int:
        return hash((self.cells.shape, self.cells.tobytes()))

    def __str__(self) -> str:
        return "\n".join("".join(row) for row in self.to_symbols())

    def __repr__(self) -> str:
        return f"Grid(width={self.width}, height={self.height})"


def grids_equal(a: Grid, b: Grid) -> bool:
    """Deep structural equality; detects the passive-resolution fixed point."""
    return a.cells.shape == b.cells.shape and bool(np.array_equal(a.cells, b.cells))
