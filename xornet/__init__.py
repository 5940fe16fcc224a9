"""XorNet public API."""

from .core import activations  # noqa: F401
from .core import matrix  # noqa: F401
from .core import types  # noqa: F401
from .core.matrix import Matrix, ShapeMismatchError
from .data import Dataset, get_dataset
from .training.layers import DenseLayer
from .training.network import ConvergenceError, Network
from .training.pipelines import load_preset, presets, run_pipeline

__all__ = [
    "ConvergenceError",
    "Dataset",
    "DenseLayer",
    "Matrix",
    "Network",
    "ShapeMismatchError",
    "activations",
    "get_dataset",
    "load_preset",
    "matrix",
    "presets",
    "run_pipeline",
    "types",
]
