"""Progress reporting for the distinct-tiling search."""

from __future__ import annotations

import time
from typing import Optional

from polytile.wandb_logger import WandBLogger

MAX_REPORT_STEP = 100000


def should_report(count: int) -> bool:
    """Report every count below 10, then every 10 below 100, and so on.

    The step grows with the number of digits and stops at ``MAX_REPORT_STEP``.
    """
    if count <= 0:
        return False
    step = min(10 ** (len(str(count)) - 1), MAX_REPORT_STEP)
    return count % step == 0


class ProgressReporter:
    """Prints the distinct-solution count and forwards it to WandB.

    Attributes:
        logger: Optional metric sink; ``None`` prints only
        quiet: Suppress console output
    """

    def __init__(self, logger: Optional[WandBLogger] = None, quiet: bool = False):
        self.logger = logger
        self.quiet = quiet
        self.start = time.time()
        self.last_reported = 0

    def elapsed(self) -> float:
        return time.time() - self.start

    def update(self, count: int) -> bool:
        """Called once per newly found distinct tiling.

        Returns:
            True if this count was reported
        """
        if not should_report(count):
            return False
        self.last_reported = count
        if not self.quiet:
            print(f"[Search] {count} distinct tilings ({self.elapsed():.1f}s)")
        if self.logger is not None:
            self.logger.log(
                {"search/distinct_tilings": count, "search/elapsed_sec": self.elapsed()},
                step=count,
            )
        return True

    def finish(self, total: int, raw_count: int) -> None:
        """Report the final totals and close the metric sink."""
        elapsed = self.elapsed()
        if not self.quiet:
            print(
                f"[Search] Done: {total} distinct tilings out of {raw_count} "
                f"({elapsed:.1f}s)"
            )
        if self.logger is not None:
            self.logger.log(
                {
                    "search/total": total,
                    "search/raw_tilings": raw_count,
                    "search/elapsed_sec": elapsed,
                }
            )
            self.logger.finish()
