"""Dataset registry and metadata contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, MutableMapping

from .dataset import Dataset


@dataclass(frozen=True)
class DatasetSpec:
    """A constructed dataset together with the metadata needed to reproduce it.

    Attributes
    ----------
    name:
        Registry key the dataset was built from.
    dataset:
        The :class:`~xornet.data.dataset.Dataset` ready for training.
    provenance:
        Options used to build the dataset; written into run manifests.
    """

    name: str
    dataset: Dataset
    provenance: Dict[str, Any] = field(default_factory=dict)

    @property
    def d_in(self) -> int:
        return self.dataset.sample_shape[0]

    @property
    def d_out(self) -> int:
        return self.dataset.label_shape[0]


DatasetFactory = Callable[..., DatasetSpec]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory, either directly or as a decorator::

        @register_dataset("xor")
        def make_xor(**kwargs):
            ...
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    if name is None:
        raise TypeError("register_dataset requires a name when used without a decorator")
    return _decorator


def get_dataset(name: str, /, **options: Any) -> DatasetSpec:
    """Return the :class:`DatasetSpec` for ``name``."""

    if name not in _REGISTRY:
        available = ", ".join(sorted(_REGISTRY))
        raise KeyError(f"Unknown dataset: {name}. Available datasets: {available}")
    spec = _REGISTRY[name](**options)
    _validate_spec(spec)
    return spec


def available_datasets() -> Iterable[str]:
    """Return the sorted list of available dataset identifiers."""

    return sorted(_REGISTRY)


def _validate_spec(spec: DatasetSpec) -> None:
    if not isinstance(spec.dataset, Dataset):
        raise TypeError("DatasetSpec.dataset must be a Dataset")
    if spec.dataset.sample_shape[1] != 1 or spec.dataset.label_shape[1] != 1:
        raise ValueError(
            f"Dataset {spec.name!r} must provide column vectors, got samples "
            f"{spec.dataset.sample_shape} and labels {spec.dataset.label_shape}"
        )


__all__ = [
    "DatasetSpec",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
