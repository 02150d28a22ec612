from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Iterator, List, Sequence, Set, Tuple

from polytile.symmetry import ALL_SYMMETRIES, IDENTITY, Cell, Symmetry

MAX_SHAPE_SIZE = 4


class CatalogError(RuntimeError):
    """ピースカタログの生成・正規化の不整合（バグ）を表す例外。"""


@dataclass(frozen=True)
class Shape:
    """カタログに登録されたポリオミノ。

    Attributes:
        coords: (x, y)昇順にソートされたセル座標のタプル（必ず(0, 0)を含む）
        transforms: 対称変換インデックスごとの変換先カタログインデックス。
            キャッシュ扱いのため比較・ハッシュには含めない
    """
    coords: Tuple[Cell, ...]
    transforms: Tuple[int, ...] = field(default=(), compare=False, hash=False)

    @property
    def size(self) -> int:
        """ピースのサイズ（セル数）を返す。"""
        return len(self.coords)

    def __lt__(self, other: "Shape") -> bool:
        return shape_key(self) < shape_key(other)

    def __le__(self, other: "Shape") -> bool:
        return shape_key(self) <= shape_key(other)

    def __gt__(self, other: "Shape") -> bool:
        return shape_key(self) > shape_key(other)

    def __ge__(self, other: "Shape") -> bool:
        return shape_key(self) >= shape_key(other)

    def to_string(self) -> str:
        """ピースをASCII表示する（原点は"@"、その他のセルは"#"）。"""
        xs = [x for x, _ in self.coords]
        max_y = max(y for _, y in self.coords)
        cells = set(self.coords)
        lines = []
        for y in range(max_y + 1):
            row = ""
            for x in range(min(xs), max(xs) + 1):
                if (x, y) == (0, 0):
                    row += "@"
                elif (x, y) in cells:
                    row += "#"
                else:
                    row += " "
            lines.append(row + "\n")
        return "".join(lines)


def shape_key(shape: Shape) -> Tuple[int, Tuple[Cell, ...]]:
    """ピースの全順序キー（セル数が少ない順、次に座標の辞書順）。"""
    return (len(shape.coords), shape.coords)


def _sorted_coords(cells: Iterable[Cell]) -> Tuple[Cell, ...]:
    return tuple(sorted(cells))


def _normalize(cells: Iterable[Cell]) -> Tuple[Cell, ...]:
    """最も上の行の最も左のセルを(0, 0)に移動し、ソートする。

    Args:
        cells: セル座標のイテラブル

    Returns:
        正規化・ソート済みのセル座標タプル
    """
    cells = list(cells)
    origin_x, origin_y = min(cells, key=lambda c: (c[1], c[0]))
    return _sorted_coords((x - origin_x, y - origin_y) for x, y in cells)


def transformed_coords(coords: Iterable[Cell], symmetry: Symmetry) -> Tuple[Cell, ...]:
    """セル座標に対称変換を適用して正規化する。

    Args:
        coords: セル座標
        symmetry: 適用する対称変換

    Returns:
        変換・正規化済みのセル座標タプル
    """
    return _normalize(symmetry.apply(x, y) for x, y in coords)


def _adjacent_coords(cells: Sequence[Cell]) -> Set[Cell]:
    """生成中のピースに追加できる隣接セルを返す。

    原点より上の行、および原点の行で原点より左のセルは除外する。
    """
    adjacent = set()
    for x, y in cells:
        adjacent.update(((x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1)))
    return {
        (x, y)
        for x, y in adjacent
        if (x, y) not in cells and y >= 0 and not (y == 0 and x < 0)
    }


def _generate_coords(max_size: int) -> List[Tuple[Cell, ...]]:
    base = [(0, 0)]
    found = {_sorted_coords(base)}
    stack = [base] if max_size > 1 else []
    while stack:
        cells = stack.pop()
        for coord in _adjacent_coords(cells):
            grown = cells + [coord]
            found.add(_sorted_coords(grown))
            if len(grown) < max_size:
                stack.append(grown)
    return sorted(found, key=lambda coords: (len(coords), coords))


class ShapeCatalog:
    """サイズmax_size以下の全ポリオミノと対称変換テーブル。

    一度だけ構築し、以後は読み取り専用で共有する。

    Attributes:
        max_size: カタログに含まれる最大セル数
        shapes: 全順序でソートされたShapeのタプル
    """

    def __init__(self, shapes: Sequence[Tuple[Cell, ...]], max_size: int):
        """座標リストからカタログを構築し、対称変換テーブルを計算する。

        Args:
            shapes: 正規化済みでソート済みの座標タプルのリスト
            max_size: 最大セル数

        Raises:
            CatalogError: 変換結果がカタログに見つからない、または
                恒等変換が自分自身を指さない場合
        """
        self.max_size = max_size
        self._index: Dict[Tuple[Cell, ...], int] = {
            coords: i for i, coords in enumerate(shapes)
        }
        bare = [Shape(coords=coords) for coords in shapes]
        self.shapes: Tuple[Shape, ...] = tuple(
            replace(shape, transforms=self._compute_transforms(shape, bare))
            for shape in bare
        )
        for i, shape in enumerate(self.shapes):
            if shape.transforms[IDENTITY.index] != i:
                raise CatalogError(
                    f"Identity transform of shape {i} {shape.coords} maps to "
                    f"{shape.transforms[IDENTITY.index]}"
                )

    @classmethod
    def generate(cls, max_size: int = MAX_SHAPE_SIZE) -> "ShapeCatalog":
        """原点から隣接セルを追加していき、全ポリオミノを生成する。

        Args:
            max_size: 最大セル数（1..MAX_SHAPE_SIZE）

        Returns:
            構築済みのShapeCatalog
        """
        if not 1 <= max_size <= MAX_SHAPE_SIZE:
            raise ValueError(
                f"max_size must be in [1, {MAX_SHAPE_SIZE}], got {max_size}"
            )
        return cls(_generate_coords(max_size), max_size)

    def _compute_transforms(self, shape: Shape, bare: Sequence[Shape]) -> Tuple[int, ...]:
        indices = []
        for symmetry in ALL_SYMMETRIES:
            coords = transformed_coords(shape.coords, symmetry)
            index = self._index.get(coords)
            if index is None:
                similar = "\n".join(
                    other.to_string() for other in bare if other.size == len(coords)
                )
                raise CatalogError(
                    f"Could not find shape {coords} ({symmetry} of {shape.coords}):\n"
                    f"{Shape(coords=coords).to_string()}\n"
                    f"Similar shapes:\n{similar}"
                )
            indices.append(index)
        return tuple(indices)

    def transform(self, shape: Shape, symmetry: Symmetry) -> Shape:
        """対称変換後のピースをテーブルから引く。"""
        return self.shapes[shape.transforms[symmetry.index]]

    def index_of(self, shape: Shape) -> int:
        """ピースのカタログインデックスを返す。"""
        return self._index[shape.coords]

    def find(self, coords: Iterable[Cell]) -> Shape:
        """座標リストに一致するピースを返す。

        Args:
            coords: セル座標（順不同）

        Returns:
            一致するShape

        Raises:
            KeyError: カタログに存在しない場合
        """
        key = _sorted_coords(coords)
        if key not in self._index:
            raise KeyError(f"Shape not in catalog: {key}")
        return self.shapes[self._index[key]]

    def __len__(self) -> int:
        return len(self.shapes)

    def __iter__(self) -> Iterator[Shape]:
        return iter(self.shapes)

    def __getitem__(self, index: int) -> Shape:
        return self.shapes[index]
