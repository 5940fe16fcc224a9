import numpy as np
import pytest

from xornet.core import activations
from xornet.core.matrix import Matrix, ShapeMismatchError
from xornet.training.layers import DenseLayer


def _column(*values):
    return Matrix.from_rows(len(values), 1, [[v] for v in values])


def test_layer_shapes_and_init():
    layer = DenseLayer(3, 2, "relu", rng=np.random.default_rng(0))
    assert layer.weights.shape == (3, 2)
    assert layer.biases.shape == (3, 1)
    assert (layer.out_dim, layer.in_dim) == (3, 2)
    assert layer.parameter_count == 9
    assert layer.activation is activations.resolve("relu")
    assert layer.forward(_column(1.0, -1.0)).shape == (3, 1)


def test_forward_is_idempotent_with_fixed_parameters():
    layer = DenseLayer(2, 3, "sigmoid", rng=np.random.default_rng(1))
    x = _column(0.5, -1.0, 2.0)
    assert layer.forward(x) == layer.forward(x)


def test_backward_applies_exact_update_rule():
    layer = DenseLayer(1, 2, "relu", learning_rate=0.5, rng=np.random.default_rng(2))
    layer.weights = Matrix.from_rows(1, 2, [[0.5, -0.25]])
    layer.biases = _column(0.1)

    out = layer.forward(_column(1.0, 2.0))
    assert out[0, 0] == pytest.approx(0.1)

    next_grad = layer.backward(_column(1.0))
    # Gradient handed back uses the weights from before the update.
    assert next_grad == _column(0.5, -0.25)
    assert np.allclose(layer.weights.to_array(), [[0.0, -1.25]])
    assert np.allclose(layer.biases.to_array(), [[-0.4]])


def test_backward_through_inactive_relu_leaves_weights():
    layer = DenseLayer(1, 1, "relu", rng=np.random.default_rng(3))
    layer.weights = Matrix.from_rows(1, 1, [[-1.0]])
    layer.biases = _column(0.0)
    layer.forward(_column(2.0))
    grad = layer.backward(_column(5.0))
    assert grad == _column(0.0)
    assert layer.weights == Matrix.from_rows(1, 1, [[-1.0]])


def test_backward_before_forward_fails_fast():
    layer = DenseLayer(2, 2, "tanh")
    with pytest.raises(RuntimeError, match="before forward"):
        layer.backward(_column(1.0, 1.0))


def test_shape_mismatch_surfaces_from_forward():
    layer = DenseLayer(2, 3, "sigmoid")
    with pytest.raises(ShapeMismatchError):
        layer.forward(_column(1.0, 2.0))


def test_reset_redraws_parameters():
    layer = DenseLayer(3, 3, "relu", rng=np.random.default_rng(4))
    before_w, before_b = layer.weights.copy(), layer.biases.copy()
    layer.reset_weights_and_biases()
    assert layer.weights.shape == before_w.shape
    assert layer.weights != before_w
    assert layer.biases != before_b


def test_learning_rate_is_configurable():
    slow = DenseLayer(1, 1, "sigmoid", learning_rate=0.0, rng=np.random.default_rng(5))
    start = slow.weights.copy()
    slow.forward(_column(1.0))
    slow.backward(_column(1.0))
    assert slow.weights == start
