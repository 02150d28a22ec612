"""Tests for canonical forms and symmetric deduplication."""

from __future__ import annotations

import numpy as np
import pytest

from polytile.board import Board
from polytile.canonical import (
    Solution,
    SolutionSet,
    canonical_form,
    solution_for,
    transform_board,
)
from polytile.engine import Engine
from polytile.state import SearchConfig
from polytile.symmetry import ALL_SYMMETRIES, IDENTITY, Symmetry, board_symmetries


def _board(catalog, width, height, shapes):
    return Board.from_solution(width, height, [catalog.find(s) for s in shapes])


def _relabel(cells: np.ndarray) -> np.ndarray:
    """Renumber pieces by the row-major order of their first cell."""
    flat = cells.ravel()
    _, first_seen = np.unique(flat, return_index=True)
    order = flat[np.sort(first_seen)]
    lookup = np.empty(int(order.max()) + 1, dtype=np.int64)
    lookup[order] = np.arange(len(order))
    return lookup[cells]


def _tilings(catalog, width, height):
    config = SearchConfig(width=width, height=height).unrestricted()
    return list(Engine(config, catalog=catalog).iter_tilings())


@pytest.fixture(scope="module")
def scenario_boards(catalog):
    # 001 / 011 / 022
    first = _board(
        catalog, 3, 3, [[(0, 0), (0, 1), (0, 2), (1, 0)], [(-1, 1), (0, 0), (0, 1)], [(0, 0), (1, 0)]]
    )
    # 011 / 012 / 222
    second = _board(
        catalog,
        3,
        3,
        [[(0, 0), (0, 1)], [(0, 0), (0, 1), (1, 0)], [(-2, 1), (-1, 1), (0, 0), (0, 1)]],
    )
    return first, second


class TestTransformBoard:
    """Test the cell-level board transform."""

    def test_identity(self, scenario_boards):
        first, _ = scenario_boards
        np.testing.assert_array_equal(transform_board(first, IDENTITY), first.cells)

    def test_axis_flips(self, catalog):
        board = _board(catalog, 3, 2, [[(0, 0), (1, 0)], [(0, 0)], [(0, 0), (1, 0), (2, 0)]])
        assert board.to_string() == "001\n222"
        np.testing.assert_array_equal(
            transform_board(board, Symmetry(horizontal=True)), [[1, 0, 0], [2, 2, 2]]
        )
        np.testing.assert_array_equal(
            transform_board(board, Symmetry(vertical=True)), [[2, 2, 2], [0, 0, 1]]
        )

    def test_transpose(self, scenario_boards):
        first, _ = scenario_boards
        np.testing.assert_array_equal(
            transform_board(first, Symmetry(diagonal=True)), first.cells.T
        )

    def test_diagonal_needs_square_board(self, catalog):
        board = _board(catalog, 2, 1, [[(0, 0), (1, 0)]])
        with pytest.raises(ValueError, match="square board"):
            transform_board(board, Symmetry(diagonal=True))

    def test_returns_copy(self, scenario_boards):
        first, _ = scenario_boards
        cells = transform_board(first, IDENTITY)
        cells[0, 0] = 99
        assert first.get(0, 0) == 0


class TestCanonicalForm:
    """Test canonical form selection."""

    def test_three_by_three_scenario(self, catalog, scenario_boards):
        first, second = scenario_boards
        assert second.to_string() == "011\n012\n222"
        expected = Solution(tuple(second.pieces))
        assert canonical_form(first, catalog) == expected
        assert canonical_form(second, catalog) == expected
        assert expected < Solution(tuple(first.pieces))

    def test_one_by_one(self, catalog):
        board = _board(catalog, 1, 1, [[(0, 0)]])
        solution = canonical_form(board, catalog)
        assert solution == Solution((catalog[0],))
        for symmetry in board_symmetries(1, 1):
            assert solution_for(board, symmetry, catalog) == solution

    def test_requires_full_board(self, catalog):
        board = Board.new(2, 2)
        board.add(catalog[0])
        with pytest.raises(ValueError, match="full board"):
            canonical_form(board, catalog)

    def test_is_minimum_over_symmetries(self, catalog):
        for board in _tilings(catalog, 2, 2):
            canonical = canonical_form(board, catalog)
            for symmetry in ALL_SYMMETRIES:
                assert canonical <= solution_for(board, symmetry, catalog)

    @pytest.mark.parametrize("width, height", [(3, 3), (3, 2), (4, 1)])
    def test_images_rebuild_transformed_board(self, catalog, width, height):
        for board in _tilings(catalog, width, height):
            for symmetry in board_symmetries(width, height):
                image = solution_for(board, symmetry, catalog)
                rebuilt = Board.from_solution(width, height, image.shapes)
                np.testing.assert_array_equal(
                    rebuilt.cells, _relabel(transform_board(board, symmetry))
                )

    @pytest.mark.parametrize("width, height", [(3, 3), (2, 3)])
    def test_orbit_invariance(self, catalog, width, height):
        for board in _tilings(catalog, width, height):
            canonical = canonical_form(board, catalog)
            for symmetry in board_symmetries(width, height):
                image = solution_for(board, symmetry, catalog)
                rebuilt = Board.from_solution(width, height, image.shapes)
                assert canonical_form(rebuilt, catalog) == canonical

    def test_idempotent(self, catalog):
        for board in _tilings(catalog, 3, 3):
            canonical = canonical_form(board, catalog)
            rebuilt = Board.from_solution(3, 3, canonical.shapes)
            assert canonical_form(rebuilt, catalog) == canonical
            assert Solution(tuple(rebuilt.pieces)) == canonical


class TestSolutionOrder:
    """Test the total order over solutions."""

    def test_fewer_pieces_first(self, catalog):
        short = Solution((catalog[27],))
        long = Solution((catalog[0], catalog[0]))
        assert short < long

    def test_piecewise(self, catalog):
        a = Solution((catalog[0], catalog[2]))
        b = Solution((catalog[1], catalog[0]))
        c = Solution((catalog[0], catalog[1]))
        assert sorted([a, b, c]) == [c, a, b]
        assert min(a, b, c) == c

    def test_equality_and_hash(self, catalog):
        a = Solution((catalog[3], catalog[4]))
        b = Solution((catalog.find(catalog[3].coords), catalog.find(catalog[4].coords)))
        assert a == b
        assert hash(a) == hash(b)
        assert len(a) == 2


class TestSolutionSet:
    """Test the deduplicating collection."""

    def test_add_reports_new(self, catalog):
        solutions = SolutionSet()
        assert solutions.add(Solution((catalog[0],)))
        assert not solutions.add(Solution((catalog[0],)))
        assert len(solutions) == 1
        assert Solution((catalog[0],)) in solutions

    def test_iterates_in_order(self, catalog):
        solutions = SolutionSet()
        items = [
            Solution((catalog[1], catalog[0])),
            Solution((catalog[5],)),
            Solution((catalog[0], catalog[2])),
        ]
        for item in items:
            solutions.add(item)
        assert list(solutions) == sorted(items)


def _orbit_key(board: Board) -> bytes:
    """Deduplication key computed from cell layouts only."""
    return min(
        _relabel(transform_board(board, symmetry)).tobytes()
        for symmetry in board_symmetries(board.width, board.height)
    )


@pytest.mark.parametrize(
    "width, height, expected",
    [(1, 1, 1), (2, 1, 2), (3, 1, 3), (2, 2, 5)],
)
def test_distinct_counts_small_boards(catalog, width, height, expected):
    solutions = SolutionSet()
    for board in _tilings(catalog, width, height):
        solutions.add(canonical_form(board, catalog))
    assert len(solutions) == expected


@pytest.mark.parametrize("width, height", [(3, 3), (2, 3), (4, 2)])
def test_distinct_count_matches_layout_orbits(catalog, width, height):
    boards = _tilings(catalog, width, height)
    solutions = SolutionSet()
    for board in boards:
        solutions.add(canonical_form(board, catalog))
    orbits = {_orbit_key(board) for board in boards}
    assert len(solutions) == len(orbits)
    assert len(solutions) <= len(boards)


def test_budgeted_two_by_two_distinct(catalog):
    config = SearchConfig(width=2, height=2, max_tiny=1, max_triples=2)
    solutions = SolutionSet()
    for board in Engine(config, catalog=catalog).iter_tilings():
        solutions.add(canonical_form(board, catalog))
    assert len(solutions) == 2
