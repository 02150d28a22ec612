from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from polytile.board import Board
from polytile.pieces import MAX_SHAPE_SIZE, Shape


@dataclass(frozen=True)
class SearchConfig:
    """敷き詰め探索の設定。

    Attributes:
        width: 盤面の幅。デフォルト6
        height: 盤面の高さ。デフォルト6
        max_piece_size: カタログに含めるピースの最大セル数
        max_tiny: サイズ1・2のピースの使用上限（Noneは無制限）
        max_triples: サイズ3のピースの使用上限（Noneは無制限）
    """
    width: int = 6
    height: int = 6
    max_piece_size: int = MAX_SHAPE_SIZE
    max_tiny: Optional[int] = 1
    max_triples: Optional[int] = 2

    def unrestricted(self) -> "SearchConfig":
        """使用上限を外した設定を返す。"""
        return replace(self, max_tiny=None, max_triples=None)

    def validate(self) -> None:
        """設定値を検証する。

        Raises:
            ValueError: 盤面サイズ・ピースサイズ・上限が不正な場合
        """
        if self.width < 1 or self.height < 1:
            raise ValueError(
                f"Board size must be positive, got {self.width}x{self.height}"
            )
        if not 1 <= self.max_piece_size <= MAX_SHAPE_SIZE:
            raise ValueError(
                f"max_piece_size must be in [1, {MAX_SHAPE_SIZE}], "
                f"got {self.max_piece_size}"
            )
        for name in ("max_tiny", "max_triples"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")


def _is_tiny(shape: Shape) -> bool:
    return shape.size in (1, 2)


def _is_triple(shape: Shape) -> bool:
    return shape.size == 3


@dataclass(frozen=True, eq=False)
class SearchState:
    """探索中の盤面と小さいピースの使用数。

    状態は分岐ごとに複製され、兄弟の分岐と盤面を共有しない。

    Attributes:
        board: 現在の盤面
        config: 使用上限を含む探索設定
        tiny_count: 配置済みのサイズ1・2のピース数
        triple_count: 配置済みのサイズ3のピース数
    """
    board: Board
    config: SearchConfig
    tiny_count: int = 0
    triple_count: int = 0

    @classmethod
    def new(cls, config: SearchConfig) -> "SearchState":
        """空の盤面から始まる探索状態を作成する。"""
        return cls(board=Board.new(config.width, config.height), config=config)

    def _budget_exhausted(self, shape: Shape) -> bool:
        if _is_tiny(shape):
            limit, used = self.config.max_tiny, self.tiny_count
        elif _is_triple(shape):
            limit, used = self.config.max_triples, self.triple_count
        else:
            return False
        return limit is not None and used >= limit

    def add_clone(self, shape: Shape) -> Optional["SearchState"]:
        """ピースを配置した新しい状態を返す。

        使用上限に達しているサイズのピースは盤面に触れずに却下する。

        Args:
            shape: 配置するピース

        Returns:
            配置後のSearchState。配置できない場合はNone
        """
        if self._budget_exhausted(shape):
            return None
        board = self.board.add_clone(shape)
        if board is None:
            return None
        return SearchState(
            board=board,
            config=self.config,
            tiny_count=self.tiny_count + int(_is_tiny(shape)),
            triple_count=self.triple_count + int(_is_triple(shape)),
        )
