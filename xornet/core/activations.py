"""Activation functions and their derivatives.

Derivatives receive the pre-activation hypothesis, not the activated output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable

from . import matrix as mx
from .matrix import Matrix

ActivationFn = Callable[[Matrix], Matrix]


def sigmoid(m: Matrix) -> Matrix:
    ones = Matrix.fill(1.0, m.rows, m.cols)
    denominator = mx.add(ones, mx.exp(mx.scalar_apply(m, -1.0)))
    return mx.div(ones, denominator)


def relu(m: Matrix) -> Matrix:
    """Return the ReLU activation."""

    return mx.max_of(0.0, m)


def tanh(m: Matrix) -> Matrix:
    return mx.tanh(m)


def d_sigmoid(m: Matrix) -> Matrix:
    ones = Matrix.fill(1.0, m.rows, m.cols)
    activated = sigmoid(m)
    return mx.mul(activated, mx.sub(ones, activated))


def d_relu(m: Matrix) -> Matrix:
    # Strict comparison: the derivative at exactly zero is 0.
    return mx.greater_than(m, 0.0)


def d_tanh(m: Matrix) -> Matrix:
    ones = Matrix.fill(1.0, m.rows, m.cols)
    activated = mx.tanh(m)
    return mx.sub(ones, mx.mul(activated, activated))


@dataclass(frozen=True)
class ActivationPair:
    """An activation function bundled with its derivative."""

    name: str
    fn: ActivationFn
    derivative: ActivationFn

    def __call__(self, m: Matrix) -> Matrix:
        return self.fn(m)


class ActivationRegistry:
    """Central registry for activation pairs."""

    def __init__(self) -> None:
        self._registry: Dict[str, ActivationPair] = {}

    def register(self, name: str, fn: ActivationFn, derivative: ActivationFn) -> None:
        self._registry[name] = ActivationPair(name, fn, derivative)

    def names(self) -> Iterable[str]:
        return sorted(self._registry)

    def resolve(self, activation: str | ActivationPair) -> ActivationPair:
        if isinstance(activation, ActivationPair):
            return activation
        if activation not in self._registry:
            available = ", ".join(sorted(self._registry))
            raise KeyError(
                f"Unknown activation {activation!r}. Available activations: {available}"
            )
        return self._registry[activation]


REGISTRY = ActivationRegistry()
REGISTRY.register("sigmoid", sigmoid, d_sigmoid)
REGISTRY.register("relu", relu, d_relu)
REGISTRY.register("tanh", tanh, d_tanh)


def resolve(activation: str | ActivationPair) -> ActivationPair:
    return REGISTRY.resolve(activation)


__all__ = [
    "ActivationPair",
    "ActivationRegistry",
    "REGISTRY",
    "d_relu",
    "d_sigmoid",
    "d_tanh",
    "relu",
    "resolve",
    "sigmoid",
    "tanh",
]
