"""Fully-connected layer with cached forward state and in-place SGD updates."""

from __future__ import annotations

import numpy as np

from ..core import activations
from ..core import matrix as mx
from ..core.activations import ActivationPair
from ..core.matrix import GAUSSIAN_STD, Matrix

DEFAULT_LEARNING_RATE = 1.02


class DenseLayer:
    """One ``weights . x + biases`` transformation followed by an activation.

    ``forward`` caches its input and hypothesis; the next ``backward`` reads
    those caches, so calling ``backward`` twice without an intervening
    ``forward`` reuses stale values.
    """

    def __init__(
        self,
        out_dim: int,
        in_dim: int,
        activation: str | ActivationPair = "sigmoid",
        *,
        learning_rate: float = DEFAULT_LEARNING_RATE,
        rng: np.random.Generator | None = None,
        init_std: float = GAUSSIAN_STD,
    ) -> None:
        self.activation = activations.resolve(activation)
        self.learning_rate = float(learning_rate)
        self.init_std = float(init_std)
        self._rng = rng if rng is not None else np.random.default_rng()
        self.weights = Matrix.random_gaussian(out_dim, in_dim, self._rng, self.init_std)
        self.biases = Matrix.random_gaussian(out_dim, 1, self._rng, self.init_std)
        self._input_cache: Matrix | None = None
        self._hypothesis_cache: Matrix | None = None

    @property
    def out_dim(self) -> int:
        return self.weights.rows

    @property
    def in_dim(self) -> int:
        return self.weights.cols

    @property
    def parameter_count(self) -> int:
        return self.out_dim * self.in_dim + self.out_dim

    def reset_weights_and_biases(self) -> None:
        self.weights = Matrix.random_gaussian(self.out_dim, self.in_dim, self._rng, self.init_std)
        self.biases = Matrix.random_gaussian(self.out_dim, 1, self._rng, self.init_std)

    def forward(self, inputs: Matrix) -> Matrix:
        self._input_cache = inputs.copy()
        self._hypothesis_cache = mx.add(mx.dot_product(self.weights, inputs), self.biases)
        return self.activation.fn(self._hypothesis_cache)

    def backward(self, downstream_grad: Matrix) -> Matrix:
        if self._input_cache is None or self._hypothesis_cache is None:
            raise RuntimeError("DenseLayer.backward() called before forward()")

        grad_hypothesis = mx.mul(
            downstream_grad, self.activation.derivative(self._hypothesis_cache)
        )
        weight_delta = mx.dot_product(grad_hypothesis, mx.transpose(self._input_cache))
        # Row sums scaled by 1/rows: only meaningful for single-column gradients.
        bias_delta = mx.scalar_apply(
            mx.colwise_sum_broadcast(grad_hypothesis), 1.0 / grad_hypothesis.rows
        )
        next_downstream = mx.dot_product(mx.transpose(self.weights), grad_hypothesis)

        self.weights -= mx.scalar_apply(weight_delta, self.learning_rate)
        self.biases -= mx.scalar_apply(bias_delta, self.learning_rate)
        return next_downstream

    def __repr__(self) -> str:
        return (
            f"DenseLayer(out_dim={self.out_dim}, in_dim={self.in_dim}, "
            f"activation={self.activation.name!r}, learning_rate={self.learning_rate})"
        )


__all__ = ["DEFAULT_LEARNING_RATE", "DenseLayer"]
