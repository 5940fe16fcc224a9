"""Dataset sources for XorNet."""

from . import xor as _xor  # noqa: F401
from .dataset import Dataset, Sample
from .registry import DatasetSpec, available_datasets, get_dataset, register_dataset

__all__ = [
    "Dataset",
    "DatasetSpec",
    "Sample",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
