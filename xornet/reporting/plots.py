"""Headless-safe plotting adapters."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Tuple


class PlotAdapter:
    """Collect per-epoch losses and optionally emit a matplotlib figure.

    Each training attempt is drawn as its own curve.
    """

    def __init__(self, run_dir: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self._history: Dict[int, List[Tuple[int, float]]] = {}
        if self.enable_plots:
            self.run_dir.mkdir(parents=True, exist_ok=True)

    def on_epoch(self, epoch: int, metrics):
        if not self.enable_plots:
            return
        attempt = int(metrics.get("attempt", 0))
        loss = float(metrics.get("loss", 0.0))
        self._history.setdefault(attempt, []).append((epoch, loss))

    def close(self) -> Path | None:
        if not self.enable_plots or not self._history:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        fig, ax = plt.subplots()
        for attempt, points in sorted(self._history.items()):
            epochs, losses = zip(*points)
            ax.plot(epochs, losses, label=f"attempt {attempt}")
        ax.set_xlabel("Epoch")
        ax.set_ylabel("Mean squared error")
        ax.set_title("Training Curve")
        if len(self._history) <= 10:
            ax.legend()
        plot_path = self.run_dir / "loss.png"
        fig.savefig(plot_path)
        plt.close(fig)
        return plot_path
