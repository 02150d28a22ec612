#!/usr/bin/env python3
"""盤面を敷き詰める方法を列挙し、対称性で同一視した数を数える。

Usage:
    # 6×6盤面（サイズ1・2は1個まで、サイズ3は2個まで）
    uv run python -m polytile.solve

    # 3×3盤面、使用上限なし、最初の5件を表示
    uv run python -m polytile.solve --width 3 --height 3 --unrestricted --show 5

    # 対称性で同一視せずに総数だけ数える
    uv run python -m polytile.solve --width 4 --height 4 --no-dedup
"""

from __future__ import annotations

import argparse
from dataclasses import asdict, dataclass
from typing import List, Optional

from polytile.board import Board
from polytile.canonical import SolutionSet, canonical_form
from polytile.engine import Engine
from polytile.pieces import MAX_SHAPE_SIZE
from polytile.progress import ProgressReporter
from polytile.state import SearchConfig
from polytile.wandb_logger import WandBLogger


@dataclass
class SearchResult:
    """探索結果。

    Attributes:
        raw_count: 対称性で同一視しない敷き詰めの総数
        distinct: 重複を除いた正規形の集合（dedup=Falseの場合はNone）
        elapsed_sec: 探索時間（秒）
    """
    raw_count: int
    distinct: Optional[SolutionSet]
    elapsed_sec: float

    @property
    def count(self) -> int:
        """報告する数（重複除去ありなら正規形の数）を返す。"""
        if self.distinct is None:
            return self.raw_count
        return len(self.distinct)


def solve(
    config: SearchConfig,
    dedup: bool = True,
    reporter: Optional[ProgressReporter] = None,
    engine: Optional[Engine] = None,
) -> SearchResult:
    """全ての敷き詰めを列挙する。

    新しい正規形が見つかるたびにreporterへ通知する。

    Args:
        config: 探索設定
        dedup: 対称性で同一視した正規形を集めるか
        reporter: 進捗通知先（Noneの場合は表示しない）
        engine: 使用するエンジン（Noneの場合はconfigから生成）

    Returns:
        SearchResult
    """
    if engine is None:
        engine = Engine(config)
    if reporter is None:
        reporter = ProgressReporter(quiet=True)

    distinct = SolutionSet() if dedup else None
    raw_count = 0
    for board in engine.iter_tilings():
        raw_count += 1
        if distinct is not None and distinct.add(canonical_form(board, engine.catalog)):
            reporter.update(len(distinct))

    result = SearchResult(
        raw_count=raw_count, distinct=distinct, elapsed_sec=reporter.elapsed()
    )
    reporter.finish(result.count, raw_count)
    return result


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    defaults = SearchConfig()
    parser = argparse.ArgumentParser(
        description="長方形の盤面をポリオミノで敷き詰める方法を数える"
    )
    parser.add_argument("--width", type=int, default=defaults.width, help="盤面の幅")
    parser.add_argument("--height", type=int, default=defaults.height, help="盤面の高さ")
    parser.add_argument(
        "--max-piece-size",
        type=int,
        default=defaults.max_piece_size,
        help=f"ピースの最大セル数（1..{MAX_SHAPE_SIZE}）",
    )
    parser.add_argument(
        "--max-tiny",
        type=int,
        default=defaults.max_tiny,
        help="サイズ1・2のピースの使用上限",
    )
    parser.add_argument(
        "--max-triples",
        type=int,
        default=defaults.max_triples,
        help="サイズ3のピースの使用上限",
    )
    parser.add_argument(
        "--unrestricted", action="store_true", help="ピースの使用上限を外す"
    )
    parser.add_argument(
        "--no-dedup", action="store_true", help="対称性で同一視せずに総数を数える"
    )
    parser.add_argument(
        "--show", type=int, default=0, help="最初のN件の正規形を表示する"
    )
    parser.add_argument(
        "--render", type=str, default=None, help="最初の--show件を画像に保存するパス"
    )
    parser.add_argument("--no-wandb", action="store_true", help="WandBへの記録を無効化")
    parser.add_argument(
        "--wandb-project", type=str, default="polytile", help="WandBプロジェクト名"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    config = SearchConfig(
        width=args.width,
        height=args.height,
        max_piece_size=args.max_piece_size,
        max_tiny=args.max_tiny,
        max_triples=args.max_triples,
    )
    if args.unrestricted:
        config = config.unrestricted()
    config.validate()

    print(f"Searching {config.width}x{config.height} board...")
    logger = WandBLogger(
        project_name=args.wandb_project,
        config={**asdict(config), "dedup": not args.no_dedup},
        use_wandb=not args.no_wandb,
    )
    result = solve(
        config, dedup=not args.no_dedup, reporter=ProgressReporter(logger=logger)
    )

    if result.distinct is not None and args.show > 0:
        boards = []
        for i, solution in enumerate(result.distinct):
            if i >= args.show:
                break
            board = Board.from_solution(config.width, config.height, solution.shapes)
            boards.append(board)
            print(f"---- #{i + 1}\n{board.to_string()}")
        if args.render:
            from polytile.viz import render_solutions

            render_solutions(boards, save_path=args.render)

    print(result.count)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
