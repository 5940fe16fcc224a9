"""Metrics sinks for training runs."""

from __future__ import annotations

import csv
import json
import subprocess
from pathlib import Path
from typing import Mapping


def _git_sha() -> str:
    try:
        out = subprocess.check_output(["git", "rev-parse", "HEAD"], stderr=subprocess.DEVNULL)
        return out.decode().strip()
    except (OSError, subprocess.CalledProcessError):  # git may be unavailable in tests
        return "unknown"


def _numeric(metrics: Mapping[str, object]) -> dict[str, float]:
    return {
        k: float(v)
        for k, v in metrics.items()
        if isinstance(v, (int, float)) and not isinstance(v, bool)
    }


class JsonlSink:
    """Append-only JSONL writer for metrics.

    Epoch records land in the ``train`` split and attempt records in the
    ``test`` split. Every record carries the run seed and the git sha.
    """

    def __init__(self, path: str | Path, *, seed: int | None = None) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.seed = seed
        self.sha = _git_sha()

    def _write(self, key: str, index: int, split: str, metrics: Mapping[str, object]) -> None:
        record = {key: int(index), "split": split, "seed": self.seed, "sha": self.sha}
        record.update(_numeric(metrics))
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")

    def on_epoch(self, epoch: int, metrics: Mapping[str, object]) -> None:
        self._write("epoch", epoch, "train", metrics)

    def on_attempt(self, attempt: int, metrics: Mapping[str, object]) -> None:
        self._write("attempt", attempt, "test", metrics)


class CsvSink:
    """Write attempt-level metrics to CSV with a stable schema."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")

    def on_attempt(self, attempt: int, metrics: Mapping[str, object]) -> None:
        row: dict[str, object] = {"attempt": int(attempt)}
        row.update(_numeric(metrics))
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            fieldnames = sorted(row.keys())
            writer = csv.DictWriter(handle, fieldnames=fieldnames)
            if handle.tell() == 0:
                writer.writeheader()
            writer.writerow(row)


__all__ = ["CsvSink", "JsonlSink"]
