"""Deterministic run summarisation helpers.

``metrics.jsonl`` holds two kinds of record: per-epoch ``train`` records and
per-attempt ``test`` records. Each split is summarised on its own so that
epoch losses and final attempt losses never share a series.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Mapping, Sequence

import numpy as np

_INDEX_KEYS = {"epoch", "attempt", "seed"}
_SPLITS = ("train", "test")


def _area(y: np.ndarray, x: np.ndarray) -> float:
    trapezoid = getattr(np, "trapezoid", None)
    if callable(trapezoid):
        return float(trapezoid(y, x))
    return float(np.trapz(y, x))


def compute_auc(points: Sequence[float]) -> float:
    """Return the area-under-curve of ``points`` along an implicit step axis."""

    if not points:
        return 0.0
    y = np.asarray(points, dtype=np.float64)
    x = np.arange(len(points), dtype=np.float64)
    return _area(y, x)


def _series_by_split(
    records: Iterable[Mapping[str, object]]
) -> dict[str, dict[str, list[float]]]:
    series: dict[str, dict[str, list[float]]] = {}
    for record in records:
        split = str(record.get("split") or "unknown")
        bucket = series.setdefault(split, {})
        for key, value in record.items():
            if key in _INDEX_KEYS:
                continue
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                bucket.setdefault(key, []).append(float(value))
    return series


def _describe(values: list[float], tail: int) -> Mapping[str, float]:
    arr = np.asarray(values, dtype=np.float64)
    window = min(tail, arr.size)
    return {
        "count": int(arr.size),
        "min": float(np.min(arr)),
        "max": float(np.max(arr)),
        "mean": float(np.mean(arr)),
        "last": float(arr[-1]),
        "tail_window": window,
        "tail_auc": compute_auc(arr[-window:].tolist()) if window else 0.0,
    }


def _build_summary(records: list[Mapping[str, object]], tail: int) -> Mapping[str, object]:
    series = _series_by_split(records)
    # Known splits first, anything else in name order.
    order = [s for s in _SPLITS if s in series] + sorted(set(series) - set(_SPLITS))
    metrics = {
        split: {name: _describe(values, tail) for name, values in series[split].items()}
        for split in order
    }
    attempts = {
        int(r["attempt"]) for r in records if isinstance(r.get("attempt"), (int, float))
    }
    return {
        "version": 2,
        "records": len(records),
        "attempts": len(attempts),
        "tail": tail,
        "metrics": metrics,
    }


def write_summary(
    metrics_jsonl: str | Path, out_summary_json: str | Path, *, tail: int = 32
) -> str:
    """Write a deterministic per-split summary for ``metrics_jsonl``.

    ``summary["metrics"][split][name]`` carries ``count``, ``min``, ``max``,
    ``mean``, ``last`` and the area under the last ``tail`` points of that
    series.
    """

    metrics_path = Path(metrics_jsonl)
    out_path = Path(out_summary_json)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    records: list[Mapping[str, object]] = []
    if metrics_path.exists():
        for line in metrics_path.read_text().splitlines():
            line = line.strip()
            if not line:
                continue
            records.append(json.loads(line))

    summary = _build_summary(records, tail)
    out_path.write_text(json.dumps(summary, sort_keys=True, indent=2))
    return str(out_path)


__all__ = ["compute_auc", "write_summary"]
