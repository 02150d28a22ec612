"""Canonical forms of tilings under the board's symmetry group.

Every symmetry of the rectangle maps a tiling to another tiling of the same
board. Reading each image back as a placement sequence and keeping the least
one gives all members of an orbit the same key, so symmetric duplicates
collapse to a single entry in a ``SolutionSet``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Set, Tuple

import numpy as np

from polytile.board import Board
from polytile.pieces import Shape, ShapeCatalog, shape_key
from polytile.symmetry import Symmetry, board_symmetries


@dataclass(frozen=True)
class Solution:
    """One tiling as its placement sequence.

    Attributes:
        shapes: Pieces in placement order (row-major order of first cells)
    """
    shapes: Tuple[Shape, ...]

    def __len__(self) -> int:
        return len(self.shapes)

    def __lt__(self, other: "Solution") -> bool:
        return solution_key(self) < solution_key(other)

    def __le__(self, other: "Solution") -> bool:
        return solution_key(self) <= solution_key(other)

    def __gt__(self, other: "Solution") -> bool:
        return solution_key(self) > solution_key(other)

    def __ge__(self, other: "Solution") -> bool:
        return solution_key(self) >= solution_key(other)


def solution_key(solution: Solution):
    """Total order over solutions: fewer pieces first, then piece by piece."""
    return (len(solution.shapes), tuple(shape_key(shape) for shape in solution.shapes))


def transform_board(board: Board, symmetry: Symmetry) -> np.ndarray:
    """Return the cell array of ``board`` seen through ``symmetry``.

    Output cell (x, y) holds the piece found at the source coordinate given by
    swapping x/y (diagonal), then reflecting x around the width (horizontal),
    then reflecting y around the height (vertical).

    Args:
        board: Board to transform
        symmetry: Symmetry to apply

    Returns:
        New (height, width) array of piece indices

    Raises:
        ValueError: If a diagonal symmetry is requested on a non-square board
    """
    if symmetry.diagonal and board.width != board.height:
        raise ValueError(
            f"Diagonal symmetry needs a square board, got {board.width}x{board.height}"
        )
    cells = board.cells
    if symmetry.vertical:
        cells = np.flip(cells, axis=0)
    if symmetry.horizontal:
        cells = np.flip(cells, axis=1)
    if symmetry.diagonal:
        cells = cells.T
    return cells.copy()


def solution_for(board: Board, symmetry: Symmetry, catalog: ShapeCatalog) -> Solution:
    """Placement sequence of the transformed tiling.

    Pieces are taken in the order their first cell appears in row-major
    order, each replaced by its image under ``symmetry``.
    """
    flat = transform_board(board, symmetry).ravel()
    _, first_seen = np.unique(flat, return_index=True)
    order = flat[np.sort(first_seen)]
    return Solution(
        tuple(catalog.transform(board.pieces[int(i)], symmetry) for i in order)
    )


def canonical_form(board: Board, catalog: ShapeCatalog) -> Solution:
    """Least placement sequence over the board's symmetry orbit.

    Args:
        board: Fully tiled board
        catalog: Catalog the board's pieces come from

    Returns:
        Canonical Solution shared by every symmetric image of the tiling

    Raises:
        ValueError: If the board still has open cells
    """
    if not board.is_full():
        raise ValueError(f"Canonical form needs a full board:\n{board.to_string()}")
    return min(
        solution_for(board, symmetry, catalog)
        for symmetry in board_symmetries(board.width, board.height)
    )


class SolutionSet:
    """Duplicate-free collection of canonical solutions.

    Iteration yields solutions in ascending ``solution_key`` order.

    Example:
        >>> solutions = SolutionSet()
        >>> if solutions.add(canonical_form(board, catalog)):
        ...     print(f"{len(solutions)} distinct tilings")
    """

    def __init__(self) -> None:
        self._solutions: Set[Solution] = set()

    def add(self, solution: Solution) -> bool:
        """Insert a solution.

        Returns:
            True if the solution was not already present
        """
        if solution in self._solutions:
            return False
        self._solutions.add(solution)
        return True

    def __contains__(self, solution: object) -> bool:
        return solution in self._solutions

    def __len__(self) -> int:
        return len(self._solutions)

    def __iter__(self) -> Iterator[Solution]:
        return iter(sorted(self._solutions, key=solution_key))
