from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple

Cell = Tuple[int, int]

HORIZONTAL_MASK = 0b001
VERTICAL_MASK = 0b010
DIAGONAL_MASK = 0b100


@dataclass(frozen=True)
class Symmetry:
    """盤面の8つの対称変換（左右反転・上下反転・対角転置の組み合わせ）。

    ピース座標への作用は「左右反転 → 上下反転 → 対角転置」の順で適用する。
    合成演算（mirror_horizontal / mirror_vertical / rotate）はこの順序を
    前提にしている。

    Attributes:
        horizontal: x座標を反転するか
        vertical: y座標を反転するか
        diagonal: x/yを入れ替えるか
    """
    horizontal: bool = False
    vertical: bool = False
    diagonal: bool = False

    @classmethod
    def from_index(cls, index: int) -> "Symmetry":
        """3ビットのインデックスから対称変換を復元する。

        Args:
            index: 0..7（bit0=左右, bit1=上下, bit2=対角）

        Returns:
            対応するSymmetry

        Raises:
            ValueError: indexが0..7の範囲外の場合
        """
        if not 0 <= index < 8:
            raise ValueError(f"Invalid symmetry index: {index}")
        return cls(
            horizontal=bool(index & HORIZONTAL_MASK),
            vertical=bool(index & VERTICAL_MASK),
            diagonal=bool(index & DIAGONAL_MASK),
        )

    @property
    def index(self) -> int:
        """3ビットのインデックスを返す。"""
        ret = 0
        if self.horizontal:
            ret |= HORIZONTAL_MASK
        if self.vertical:
            ret |= VERTICAL_MASK
        if self.diagonal:
            ret |= DIAGONAL_MASK
        return ret

    def mirror_horizontal(self) -> "Symmetry":
        """変換結果をさらに左右反転した対称変換を返す。"""
        if self.diagonal:
            # 転置は最後に作用するので、出力の左右反転は入力の上下反転になる
            return replace(self, vertical=not self.vertical)
        return replace(self, horizontal=not self.horizontal)

    def mirror_vertical(self) -> "Symmetry":
        """変換結果をさらに上下反転した対称変換を返す。"""
        if self.diagonal:
            return replace(self, horizontal=not self.horizontal)
        return replace(self, vertical=not self.vertical)

    def rotate(self, clockwise: int) -> "Symmetry":
        """変換結果をさらに時計回りに90度×clockwise回転した対称変換を返す。

        Args:
            clockwise: 回転回数（負の値は反時計回り、4を法とする）

        Returns:
            回転後のSymmetry
        """
        horizontal, vertical, diagonal = self.horizontal, self.vertical, self.diagonal
        for _ in range(clockwise % 4):
            if diagonal:
                horizontal = not horizontal
            else:
                vertical = not vertical
            diagonal = not diagonal
        return Symmetry(horizontal=horizontal, vertical=vertical, diagonal=diagonal)

    def apply(self, x: int, y: int) -> Cell:
        """ピース座標(x, y)に対称変換を作用させる（平行移動は含まない）。

        Args:
            x: x座標
            y: y座標

        Returns:
            変換後の(x, y)座標
        """
        if self.horizontal:
            x = -x
        if self.vertical:
            y = -y
        if self.diagonal:
            x, y = y, x
        return (x, y)

    def then(self, other: "Symmetry") -> "Symmetry":
        """selfを適用した後にotherを適用する合成変換を返す。

        Args:
            other: 後から適用する対称変換

        Returns:
            合成後のSymmetry
        """
        target = tuple(other.apply(*self.apply(x, y)) for x, y in ((1, 0), (0, 1)))
        for candidate in ALL_SYMMETRIES:
            if tuple(candidate.apply(x, y) for x, y in ((1, 0), (0, 1))) == target:
                return candidate
        raise AssertionError(f"Composition of {self} and {other} is not a symmetry")


ALL_SYMMETRIES: Tuple[Symmetry, ...] = tuple(Symmetry.from_index(i) for i in range(8))
IDENTITY = ALL_SYMMETRIES[0]


def board_symmetries(width: int, height: int) -> Tuple[Symmetry, ...]:
    """盤面の縦横比で適用可能な対称変換を返す。

    対角転置は正方形の盤面でのみ有効。

    Args:
        width: 盤面の幅
        height: 盤面の高さ

    Returns:
        適用可能なSymmetryのタプル（インデックス順）
    """
    if width == height:
        return ALL_SYMMETRIES
    return tuple(s for s in ALL_SYMMETRIES if not s.diagonal)
