from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

import numpy as np

from polytile.pieces import Shape
from polytile.symmetry import Cell

EMPTY = -1


class BoardInvariantError(RuntimeError):
    """盤面への不正な書き込み（探索ロジックのバグ）を表す例外。"""


@dataclass(eq=False)
class Board:
    """ピースを敷き詰める長方形の盤面。

    Attributes:
        cells: 盤面配列（height×width）。-1=空、0..N=配置したピースのインデックス
        pieces: 配置順のピース（cellsの値はこのリストのインデックス）
    """
    cells: np.ndarray
    pieces: List[Shape] = field(default_factory=list)

    @classmethod
    def new(cls, width: int, height: int) -> "Board":
        """空の盤面を作成する。

        Args:
            width: 盤面の幅
            height: 盤面の高さ

        Returns:
            全セルが空のBoard

        Raises:
            ValueError: width/heightが1未満の場合
        """
        if width < 1 or height < 1:
            raise ValueError(f"Board size must be positive, got {width}x{height}")
        return cls(cells=np.full((height, width), EMPTY, dtype=np.int16))

    @classmethod
    def from_solution(cls, width: int, height: int, shapes: Iterable[Shape]) -> "Board":
        """ピース列を先頭から順に配置して盤面を復元する。

        Args:
            width: 盤面の幅
            height: 盤面の高さ
            shapes: 配置順のピース列

        Returns:
            全セルが埋まったBoard

        Raises:
            BoardInvariantError: 配置に失敗した、または盤面が埋まらない場合
        """
        board = cls.new(width, height)
        for i, shape in enumerate(shapes):
            if not board.add(shape):
                raise BoardInvariantError(
                    f"Could not place piece {i} {shape.coords} on\n{board.to_string()}"
                )
        if not board.is_full():
            raise BoardInvariantError(f"Solution leaves open cells:\n{board.to_string()}")
        return board

    @property
    def width(self) -> int:
        return self.cells.shape[1]

    @property
    def height(self) -> int:
        return self.cells.shape[0]

    def clone(self) -> "Board":
        """この盤面のディープコピーを作成する。"""
        return Board(cells=self.cells.copy(), pieces=list(self.pieces))

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> Optional[int]:
        """セルを占有するピースのインデックスを返す（空ならNone）。

        Raises:
            IndexError: 盤面の範囲外の場合
        """
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) is outside the {self.width}x{self.height} board")
        value = int(self.cells[y, x])
        return None if value == EMPTY else value

    def set(self, x: int, y: int, value: int) -> None:
        """空きセルにピースのインデックスを書き込む。

        Raises:
            BoardInvariantError: 範囲外、または既に埋まっているセルの場合
        """
        if not self.in_bounds(x, y):
            raise BoardInvariantError(
                f"({x}, {y}) is outside the {self.width}x{self.height} board"
            )
        if self.cells[y, x] != EMPTY:
            raise BoardInvariantError(
                f"Cell ({x}, {y}) already holds piece {self.cells[y, x]}, "
                f"cannot write {value}"
            )
        self.cells[y, x] = value

    def find_first_open_cell(self) -> Optional[Cell]:
        """行優先（yが外側、xが内側）で最初の空きセルを返す。"""
        open_cells = np.flatnonzero(self.cells == EMPTY)
        if open_cells.size == 0:
            return None
        y, x = divmod(int(open_cells[0]), self.width)
        return (x, y)

    def is_full(self) -> bool:
        return self.find_first_open_cell() is None

    def _anchor_for(self, shape: Shape) -> Optional[Cell]:
        """最初の空きセルを原点としてピースが置けるならその座標を返す。

        盤面外・他ピースとの重なりは通常の不成立としてNoneを返す。
        """
        anchor = self.find_first_open_cell()
        if anchor is None:
            return None
        ax, ay = anchor
        for x, y in shape.coords:
            if not self.in_bounds(ax + x, ay + y):
                return None
            if self.cells[ay + y, ax + x] != EMPTY:
                return None
        return anchor

    def _place_at(self, shape: Shape, anchor: Cell) -> None:
        ax, ay = anchor
        index = len(self.pieces)
        for x, y in shape.coords:
            self.set(ax + x, ay + y, index)
        self.pieces.append(shape)

    def add(self, shape: Shape) -> bool:
        """最初の空きセルにピースを配置する。

        Args:
            shape: 配置するピース

        Returns:
            配置できた場合True（失敗時は盤面を変更しない）
        """
        anchor = self._anchor_for(shape)
        if anchor is None:
            return False
        self._place_at(shape, anchor)
        return True

    def add_clone(self, shape: Shape) -> Optional["Board"]:
        """ピースを配置した新しい盤面を返す（配置できる場合のみ複製する）。

        Args:
            shape: 配置するピース

        Returns:
            配置後のBoard。配置できない場合はNone
        """
        anchor = self._anchor_for(shape)
        if anchor is None:
            return None
        board = self.clone()
        board._place_at(shape, anchor)
        return board

    def rows(self) -> List[Tuple[Optional[int], ...]]:
        """各行のセル値（空はNone）を返す。"""
        return [
            tuple(None if v == EMPTY else int(v) for v in row) for row in self.cells
        ]

    def to_string(self) -> str:
        """盤面をテキスト表示する（空きセルは"?"）。"""
        return "\n".join(
            "".join("?" if v is None else str(v) for v in row) for row in self.rows()
        )
