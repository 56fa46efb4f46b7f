"""Tests for the Grid module."""

import numpy as np
import pytest

from mordicus.directions import Coordinates, Direction, Move
from mordicus.grid import DEFAULT_HEIGHT, DEFAULT_WIDTH, Grid, grids_equal
from mordicus.units import PICKUPS, CellType


class TestGridInit:
    def test_dimensions(self, make_grid):
        grid = make_grid("P..", "...")
        assert grid.width == 3
        assert grid.height == 2
        assert grid.cells.shape == (2, 3)

    def test_empty_default_size(self):
        grid = Grid.empty()
        assert (grid.width, grid.height) == (DEFAULT_WIDTH, DEFAULT_HEIGHT)
        assert np.all(grid.cells == CellType.EMPTY)

    def test_ragged_rows_rejected(self):
        with pytest.raises(ValueError):
            Grid([[0, 0], [0]])

    def test_no_rows(self):
        grid = Grid([])
        assert (grid.width, grid.height) == (0, 0)
        assert grid.find_player() is None

    def test_from_symbols(self, make_rows):
        grid = Grid.from_symbols(make_rows("PC", "^X"))
        assert grid.cell_at(Coordinates(0, 0)) == CellType.PLAYER
        assert grid.cell_at(Coordinates(1, 0)) == CellType.COIN
        assert grid.cell_at(Coordinates(0, 1)) == CellType.ARROW_UP
        assert grid.cell_at(Coordinates(1, 1)) == CellType.RED_BLOCK

    def test_from_symbols_unknown(self):
        with pytest.raises(ValueError, match="Unknown cell symbol"):
            Grid.from_symbols([["x"]])

    def test_to_symbols_roundtrip(self, make_rows):
        rows = make_rows("PCB", "RUS", "GX.", "^>v")
        assert Grid.from_symbols(rows).to_symbols() == rows

    def test_cells_are_read_only(self, make_grid):
        grid = make_grid("P.")
        with pytest.raises(ValueError):
            grid.cells[0, 1] = CellType.COIN


class TestGridQueries:
    def test_cell_at_out_of_bounds(self, make_grid):
        grid = make_grid("P.", "..")
        assert grid.cell_at(Coordinates(-1, 0)) is None
        assert grid.cell_at(Coordinates(0, -1)) is None
        assert grid.cell_at(Coordinates(2, 0)) is None
        assert grid.cell_at(Coordinates(0, 2)) is None

    def test_cell_at_uses_column_then_row(self, make_grid):
        grid = make_grid("..C", "...")
        assert grid.cell_at(Coordinates(2, 0)) == CellType.COIN
        assert grid.cell_at(Coordinates(0, 2)) is None

    def test_cell_forward(self, make_grid):
        grid = make_grid("P.C")
        assert grid.cell_forward(Coordinates(0, 0), Direction.RIGHT, 2) == CellType.COIN
        assert grid.cell_forward(Coordinates(0, 0), Direction.UP) is None

    def test_find_all_row_major(self, make_grid):
        grid = make_grid("..C", "C.B", "B..")
        assert grid.find_all(PICKUPS) == [
            Coordinates(2, 0), Coordinates(0, 1), Coordinates(2, 1), Coordinates(0, 2),
        ]
        assert grid.find_all(CellType.BANANA) == [Coordinates(2, 1), Coordinates(0, 2)]

    def test_count(self, make_grid):
        grid = make_grid("CC.", "B..")
        assert grid.count(PICKUPS) == 3
        assert grid.count(CellType.PLAYER) == 0

    def test_find_player(self, make_grid):
        assert make_grid("..", ".P").find_player() == Coordinates(1, 1)
        assert make_grid("..", "..").find_player() is None

    def test_neighbor_positions_order(self, make_grid):
        grid = make_grid(".C.", "GPB", ".X.")
        assert grid.neighbor_positions(Coordinates(1, 1)) == [
            Coordinates(1, 0), Coordinates(2, 1), Coordinates(1, 2), Coordinates(0, 1),
        ]

    def test_neighbor_positions_skips_empty_and_outside(self, make_grid):
        grid = make_grid("PC", "..")
        assert grid.neighbor_positions(Coordinates(0, 0)) == [Coordinates(1, 0)]
        assert make_grid("P").neighbor_positions(Coordinates(0, 0)) == []

    def test_neighboring_cell_types(self, make_grid):
        grid = make_grid(".C.", "CPR", "...")
        assert grid.neighboring_cell_types(Coordinates(1, 1)) == {
            CellType.COIN, CellType.RED_GORILLA,
        }


class TestApplyMove:
    def test_moves_source_to_target(self, make_grid):
        grid = make_grid("P.")
        moved = grid.apply_move(Move.single(Coordinates(0, 0), Coordinates(1, 0)))
        assert moved == make_grid(".P")

    def test_original_untouched(self, make_grid):
        grid = make_grid("P.")
        grid.apply_move(Move.single(Coordinates(0, 0), Coordinates(1, 0)))
        assert grid == make_grid("P.")

    def test_multiple_targets_duplicate(self, make_grid):
        grid = make_grid("B.", "RB")
        moved = grid.apply_move(
            Move(Coordinates(0, 1), (Coordinates(0, 0), Coordinates(1, 1))),
        )
        assert moved == make_grid("R.", ".R")

    def test_replace_with(self, make_grid):
        grid = make_grid("UB")
        moved = grid.apply_move(
            Move.single(Coordinates(0, 0), Coordinates(1, 0), CellType.SATIATED_GORILLA),
        )
        assert moved == make_grid(".S")

    def test_source_cleared_last(self, make_grid):
        grid = make_grid("G.")
        moved = grid.apply_move(
            Move(Coordinates(0, 0), (Coordinates(0, 0), Coordinates(1, 0))),
        )
        assert moved == make_grid(".G")

    def test_apply_moves_in_order(self, make_grid):
        grid = make_grid("GB.")
        far_first = [
            Move.single(Coordinates(1, 0), Coordinates(2, 0)),
            Move.single(Coordinates(0, 0), Coordinates(1, 0)),
        ]
        assert grid.apply_moves(far_first) == make_grid(".GB")
        assert grid.apply_moves(list(reversed(far_first))) == make_grid("..G")

    def test_apply_no_moves(self, make_grid):
        grid = make_grid("P.")
        assert grid.apply_moves([]) == grid


class TestGridEquality:
    def test_equal_contents(self, make_grid):
        a = make_grid("PC", "..")
        b = make_grid("PC", "..")
        assert grids_equal(a, b)
        assert a == b
        assert hash(a) == hash(b)

    def test_different_contents(self, make_grid):
        assert not grids_equal(make_grid("PC"), make_grid("CP"))

    def test_different_shapes(self, make_grid):
        assert not grids_equal(make_grid("..", ".."), make_grid("...."))

    def test_not_equal_to_other_types(self, make_grid):
        assert make_grid("P") != [[1]]

    def test_str_renders_symbols(self, make_grid):
        text = str(make_grid("PC", ".."))
        lines = text.split("\n")
        assert lines[0] == CellType.PLAYER.symbol + CellType.COIN.symbol
        assert len(lines) == 2

    def test_to_dict(self, make_grid):
        data = make_grid("P.").to_dict()
        assert data["width"] == 2
        assert data["height"] == 1
        assert data["cells"] == [[CellType.PLAYER.symbol, CellType.EMPTY.symbol]]
