"""WandB integration for tiling search runs."""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

try:
    import wandb

    WANDB_AVAILABLE = True
except ImportError:
    WANDB_AVAILABLE = False

from dotenv import load_dotenv


class WandBLogger:
    """Handles WandB initialization and metric logging for a search run.

    Features:
    - Safe initialization with fallback
    - Automatic .env loading
    - Structured metric logging

    Example:
        >>> logger = WandBLogger(config={"width": 6, "height": 6})
        >>> logger.log({"search/distinct_tilings": 10}, step=10)
        >>> logger.finish()
    """

    def __init__(
        self,
        project_name: str = "polytile",
        config: Optional[Dict[str, Any]] = None,
        use_wandb: bool = True,
        name: Optional[str] = None,
    ):
        """Initialize WandB logger with error handling.

        Args:
            project_name: WandB project name
            config: Search configuration to attach to the run
            use_wandb: Enable/disable WandB (for testing)
            name: Optional run name
        """
        self.enabled = use_wandb
        self.run = None

        if not self.enabled:
            print("[WandB] Disabled by configuration")
            return

        if not WANDB_AVAILABLE:
            print("[WandB] WARNING: wandb package not installed")
            print("[WandB] Install with: pip install 'polytile[wandb]'")
            print("[WandB] Continuing without WandB logging")
            self.enabled = False
            return

        load_dotenv()

        api_key = os.getenv("WANDB_API_KEY")
        if not api_key:
            print("[WandB] WARNING: WANDB_API_KEY not found in environment")
            print("[WandB] Please set WANDB_API_KEY in .env file or environment")
            print("[WandB] Continuing without WandB logging")
            self.enabled = False
            return

        try:
            self.run = wandb.init(
                project=project_name,
                config=config or {},
                name=name,
                reinit=True,
            )
            print("[WandB] Initialized successfully")
            print(f"[WandB] Run URL: {self.run.url}")

        except Exception as e:
            print(f"[WandB] WARNING: Initialization failed: {e}")
            print("[WandB] Continuing without WandB logging")
            self.enabled = False

    def log(self, metrics: Dict[str, Any], step: Optional[int] = None) -> None:
        """Log metrics to WandB.

        Args:
            metrics: Dictionary of metric names and values
            step: Optional step number
        """
        if not self.enabled or self.run is None:
            return

        try:
            wandb.log(metrics, step=step)
        except Exception as e:
            print(f"[WandB] WARNING: Failed to log metrics: {e}")

    def finish(self) -> None:
        """Finish the WandB run."""
        if self.enabled and self.run is not None:
            try:
                wandb.finish()
                print("[WandB] Run finished successfully")
            except Exception as e:
                print(f"[WandB] WARNING: Error finishing run: {e}")
            self.run = None
