"""In-memory sample/label store with wrap-around cursors."""

from __future__ import annotations

from typing import Sequence

from ..core.matrix import Matrix, stack_rows

Sample = tuple[Matrix, Matrix]


class Dataset:
    """Parallel training and testing lists, each read through its own cursor.

    The cursors increase monotonically and index modulo the set size, so
    reading past the end wraps around to the first pair.
    """

    def __init__(
        self,
        training_data: Sequence[Matrix],
        training_labels: Sequence[Matrix],
        testing_data: Sequence[Matrix] | None = None,
        testing_labels: Sequence[Matrix] | None = None,
    ) -> None:
        if testing_data is None and testing_labels is None:
            testing_data, testing_labels = training_data, training_labels
        if testing_data is None or testing_labels is None:
            raise ValueError("testing_data and testing_labels must be given together")
        _check_pairs("training", training_data, training_labels)
        _check_pairs("testing", testing_data, testing_labels)
        self._training_data = [m.copy() for m in training_data]
        self._training_labels = [m.copy() for m in training_labels]
        self._testing_data = [m.copy() for m in testing_data]
        self._testing_labels = [m.copy() for m in testing_labels]
        self._training_index = 0
        self._testing_index = 0

    @property
    def training_set_size(self) -> int:
        return len(self._training_data)

    @property
    def testing_set_size(self) -> int:
        return len(self._testing_data)

    @property
    def sample_shape(self) -> tuple[int, int]:
        return self._training_data[0].shape

    @property
    def label_shape(self) -> tuple[int, int]:
        return self._training_labels[0].shape

    def next_training(self) -> Sample:
        idx = self._training_index % self.training_set_size
        self._training_index += 1
        return self._training_data[idx].copy(), self._training_labels[idx].copy()

    def next_testing(self) -> Sample:
        idx = self._testing_index % self.testing_set_size
        self._testing_index += 1
        return self._testing_data[idx].copy(), self._testing_labels[idx].copy()

    @classmethod
    def from_xor(cls, low: float = -1.0, high: float = 1.0) -> "Dataset":
        """Build the four-sample XOR problem; testing mirrors training.

        Inputs default to -1/1 rather than 0/1, which keeps the decision
        surface symmetric around the origin.
        """

        same = stack_rows([1.0, 0.0])
        different = stack_rows([0.0, 1.0])
        data = [
            stack_rows([high, high]),
            stack_rows([low, low]),
            stack_rows([low, high]),
            stack_rows([high, low]),
        ]
        labels = [same, same, different, different]
        return cls(data, labels)


def _check_pairs(split: str, data: Sequence[Matrix], labels: Sequence[Matrix]) -> None:
    if len(data) != len(labels):
        raise ValueError(
            f"{split} split has {len(data)} samples but {len(labels)} labels"
        )
    if not data:
        raise ValueError(f"{split} split must not be empty")


__all__ = ["Dataset", "Sample"]
