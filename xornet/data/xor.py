"""XOR truth table as a registered dataset."""

from __future__ import annotations

from .dataset import Dataset
from .registry import DatasetSpec, register_dataset


def _factory(low: float = -1.0, high: float = 1.0, **_: object) -> DatasetSpec:
    if low == high:
        raise ValueError("XOR inputs need distinct low and high values")
    dataset = Dataset.from_xor(low=float(low), high=float(high))
    provenance = {"type": "xor", "low": float(low), "high": float(high), "samples": 4}
    return DatasetSpec(name="xor", dataset=dataset, provenance=provenance)


register_dataset("xor", _factory)
