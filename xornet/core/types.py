"""Core typing contracts for XorNet."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import numpy as np

DTYPE = np.float32


@dataclass(frozen=True)
class ModelDescription:
    """Description of the dense network architecture."""

    layer_dims: List[int]
    activations: List[str]

    @property
    def parameter_count(self) -> int:
        dims = self.layer_dims
        return sum(dims[i + 1] * dims[i] + dims[i + 1] for i in range(len(dims) - 1))


@dataclass(frozen=True)
class GenerateResult:
    """Outcome of :meth:`xornet.training.network.Network.generate_model`."""

    attempts: int
    accuracy: float
    loss: float


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`xornet.training.pipelines.run_pipeline`."""

    attempts: int
    accuracy: float
    metrics_path: str
    manifest_path: str
    summary_path: str = ""
