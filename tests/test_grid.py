from __future__ import annotations

import numpy as np
import pytest

from falling_blocks.game import CellState, GameGrid, Piece, TetrominoType


@pytest.fixture
def grid() -> GameGrid:
    return GameGrid(10, 20)


def test_rejects_empty_dimensions():
    with pytest.raises(ValueError):
        GameGrid(0, 20)


def test_spawned_piece_on_empty_grid_is_free(grid):
    for kind in TetrominoType:
        assert not grid.collides(Piece.spawn(kind, grid.width))


def test_collides_with_walls_and_floor(grid):
    piece = Piece.spawn(TetrominoType.O, grid.width)
    assert grid.collides(piece.moved(-5, 0))
    assert grid.collides(piece.moved(5, 0))
    assert not grid.collides(piece.moved(4, 0))
    assert not grid.collides(piece.moved(0, 18))
    assert grid.collides(piece.moved(0, 19))


def test_collides_with_locked_cells(grid):
    grid.grid[1, 5] = CellState.LOCKED
    assert grid.collides(Piece.spawn(TetrominoType.O, grid.width))


def test_cells_above_the_top_are_free(grid):
    grid.grid[19, :] = CellState.LOCKED
    piece = Piece.spawn(TetrominoType.O, grid.width).moved(0, -1)
    assert not grid.collides(piece)


def test_collides_is_pure(grid):
    grid.grid[2, 4] = CellState.LOCKED
    piece = Piece.spawn(TetrominoType.T, grid.width).moved(0, 1)
    before = grid.clone_state()
    first = grid.collides(piece)
    second = grid.collides(piece)
    assert first is second is True
    assert np.array_equal(grid.grid, before)
    assert (piece.x, piece.y) == (4, 1)


def test_merge_writes_only_piece_cells(grid):
    grid.grid[19, 0] = CellState.LOCKED
    before = grid.clone_state()
    piece = Piece.spawn(TetrominoType.S, grid.width).moved(0, 10)

    written = grid.merge(piece)

    assert written == 4
    for x, y in piece.cells():
        assert grid.grid[y, x] == CellState.LOCKED
    changed = np.argwhere(grid.grid != before)
    assert sorted((int(x), int(y)) for y, x in changed) == sorted(piece.cells())


def test_clear_lines_without_full_rows_is_a_no_op(grid):
    grid.grid[19, :9] = CellState.LOCKED
    before = grid.clone_state()
    assert grid.clear_lines() == 0
    assert np.array_equal(grid.grid, before)


def test_clear_adjacent_full_rows_in_one_pass(grid):
    grid.grid[17, 3] = CellState.LOCKED
    grid.grid[18, :] = CellState.LOCKED
    grid.grid[19, :] = CellState.LOCKED

    assert grid.clear_lines() == 2

    assert grid.grid.shape == (20, 10)
    assert not grid.grid[:2].any()
    assert grid.grid[19, 3] == CellState.LOCKED
    assert int(np.count_nonzero(grid.grid)) == 1


def test_clear_preserves_order_of_remaining_rows(grid):
    # Tag each partial row with a distinct column so order can be checked
    for y, col in [(14, 0), (16, 1), (18, 2)]:
        grid.grid[y, col] = CellState.LOCKED
    for y in (15, 17, 19):
        grid.grid[y, :] = CellState.LOCKED

    assert grid.clear_lines() == 3

    assert not grid.grid[:3].any()
    rows = [int(np.flatnonzero(grid.grid[y])[0]) for y in (17, 18, 19)]
    assert rows == [0, 1, 2]
    assert not grid.grid[3:17].any()


def test_max_height_and_holes(grid):
    assert grid.get_max_height() == 0
    grid.grid[16, 2] = CellState.LOCKED
    grid.grid[18, 2] = CellState.LOCKED
    assert grid.get_max_height() == 4
    assert grid.count_holes() == 2


def test_reset_empties_the_grid(grid):
    grid.grid[5:, :] = CellState.LOCKED
    grid.reset()
    assert not grid.grid.any()
