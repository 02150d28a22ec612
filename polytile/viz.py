from __future__ import annotations

from typing import Sequence

import matplotlib
import matplotlib.pyplot as plt

from polytile.board import EMPTY, Board

_EMPTY_COLOR = "#f0f0f0"


def _piece_color(index: int) -> tuple:
    return matplotlib.colormaps["tab20"](index % 20)


def render_tiling(board: Board, ax=None, title: str | None = None) -> None:
    """Draw one tiling, one colour per piece with thick borders between pieces."""
    if ax is None:
        _, ax = plt.subplots(figsize=(4, 4))
    cells = board.cells
    h, w = cells.shape
    for y in range(h):
        for x in range(w):
            value = int(cells[y, x])
            ax.add_patch(
                plt.Rectangle(
                    (x, h - 1 - y),
                    1,
                    1,
                    facecolor=_EMPTY_COLOR if value == EMPTY else _piece_color(value),
                    edgecolor="#cccccc",
                    linewidth=0.5,
                )
            )
    # Piece borders: draw an edge wherever neighbouring cells differ.
    for y in range(h):
        for x in range(w):
            value = cells[y, x]
            if x + 1 < w and cells[y, x + 1] != value:
                ax.plot([x + 1, x + 1], [h - 1 - y, h - y], color="black", linewidth=2)
            if y + 1 < h and cells[y + 1, x] != value:
                ax.plot([x, x + 1], [h - 1 - y, h - 1 - y], color="black", linewidth=2)
    ax.add_patch(plt.Rectangle((0, 0), w, h, fill=False, edgecolor="black", linewidth=2))
    ax.set_xlim(0, w)
    ax.set_ylim(0, h)
    ax.set_aspect("equal")
    ax.axis("off")
    if title:
        ax.set_title(title, fontsize=10, pad=8)


def render_solutions(
    boards: Sequence[Board],
    save_path: str | None = None,
    columns: int = 5,
) -> None:
    """
    Render several tilings side by side.

    Args:
        boards: Tilings to draw
        save_path: Path to save figure (optional)
        columns: Maximum number of boards per row
    """
    if not boards:
        return
    n_cols = min(columns, len(boards))
    n_rows = (len(boards) + n_cols - 1) // n_cols
    fig, axes = plt.subplots(
        n_rows, n_cols, figsize=(3 * n_cols, 3 * n_rows), squeeze=False
    )
    for idx, ax in enumerate(axes.flat):
        if idx < len(boards):
            render_tiling(boards[idx], ax=ax, title=f"#{idx + 1}")
        else:
            ax.axis("off")
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches="tight")
        print(f"Saved to {save_path}")
        plt.close(fig)
    else:
        plt.show()
