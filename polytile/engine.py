from __future__ import annotations

from typing import Iterator, List, Optional

from polytile.board import Board
from polytile.canonical import Solution, canonical_form
from polytile.pieces import ShapeCatalog
from polytile.state import SearchConfig, SearchState


class Engine:
    """敷き詰めの全列挙エンジン（明示的スタックによる深さ優先探索）。

    状態は分岐ごとに複製されるため、枝を捨てる際の巻き戻し処理は不要。

    Attributes:
        config: 探索設定
        catalog: 共有される読み取り専用のピースカタログ
    """

    def __init__(self, config: SearchConfig, catalog: Optional[ShapeCatalog] = None):
        """エンジンを初期化する。

        Args:
            config: 探索設定
            catalog: ピースカタログ（Noneの場合はconfig.max_piece_sizeで生成）
        """
        config.validate()
        self.config = config
        if catalog is None:
            catalog = ShapeCatalog.generate(config.max_piece_size)
        self.catalog = catalog

    def initial_state(self) -> SearchState:
        """空の盤面の探索状態を生成する。"""
        return SearchState.new(self.config)

    def expand(self, state: SearchState) -> List[SearchState]:
        """カタログ順に全ピースを試し、配置できた後続状態を返す。

        Args:
            state: 展開する探索状態

        Returns:
            後続状態のリスト
        """
        children = []
        for shape in self.catalog:
            child = state.add_clone(shape)
            if child is not None:
                children.append(child)
        return children

    def iter_tilings(self) -> Iterator[Board]:
        """全ての敷き詰め（埋まった盤面）を列挙する。

        同じ配置列は一度だけ生成される。生成順は規定しない。

        Yields:
            全セルが埋まったBoard
        """
        stack = [self.initial_state()]
        while stack:
            state = stack.pop()
            for child in self.expand(state):
                if child.board.is_full():
                    yield child.board
                else:
                    stack.append(child)

    def iter_solutions(self) -> Iterator[Solution]:
        """各敷き詰めの正規形を列挙する（重複は除去しない）。"""
        for board in self.iter_tilings():
            yield canonical_form(board, self.catalog)

    def count_tilings(self) -> int:
        """対称性で同一視せずに敷き詰めの総数を数える。"""
        return sum(1 for _ in self.iter_tilings())
