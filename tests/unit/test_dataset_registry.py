import pytest

from xornet.core.matrix import Matrix
from xornet.data import Dataset, DatasetSpec, available_datasets, get_dataset, register_dataset


def _column(*values):
    return Matrix.from_rows(len(values), 1, [[v] for v in values])


def test_training_cursor_wraps_around():
    dataset = Dataset.from_xor()
    pulls = [dataset.next_training() for _ in range(5)]
    assert pulls[0][0] == pulls[4][0]
    assert pulls[0][1] == pulls[4][1]
    assert pulls[0][0] != pulls[1][0]


def test_cursors_are_independent():
    dataset = Dataset.from_xor()
    dataset.next_training()
    dataset.next_training()
    first_test, _ = dataset.next_testing()
    assert first_test == _column(1.0, 1.0)


def test_xor_truth_table():
    dataset = Dataset.from_xor()
    assert dataset.training_set_size == dataset.testing_set_size == 4
    same, different = _column(1.0, 0.0), _column(0.0, 1.0)
    expected = [
        (_column(1.0, 1.0), same),
        (_column(-1.0, -1.0), same),
        (_column(-1.0, 1.0), different),
        (_column(1.0, -1.0), different),
    ]
    for sample, label in expected:
        got_sample, got_label = dataset.next_testing()
        assert got_sample == sample
        assert got_label == label


def test_returned_pairs_are_copies():
    dataset = Dataset.from_xor()
    sample, _ = dataset.next_training()
    sample[0, 0] = 42.0
    for _ in range(3):
        dataset.next_training()
    again, _ = dataset.next_training()
    assert again[0, 0] == 1.0


def test_mismatched_split_lengths_rejected():
    with pytest.raises(ValueError, match="labels"):
        Dataset([_column(1.0)], [])
    with pytest.raises(ValueError, match="together"):
        Dataset([_column(1.0)], [_column(1.0)], testing_data=[_column(1.0)])


def test_registry_lookup_and_custom_dataset():
    assert "xor" in available_datasets()
    spec = get_dataset("xor", low=0.0, high=1.0)
    assert (spec.d_in, spec.d_out) == (2, 2)
    assert spec.provenance["low"] == 0.0
    assert spec.dataset.next_training()[0] == _column(1.0, 1.0)

    @register_dataset("identity-unit-test")
    def _identity(**_):
        data = [_column(1.0, 0.0), _column(0.0, 1.0)]
        return DatasetSpec(name="identity-unit-test", dataset=Dataset(data, data))

    assert get_dataset("identity-unit-test").dataset.training_set_size == 2

    with pytest.raises(KeyError, match="Unknown dataset"):
        get_dataset("mnist")
