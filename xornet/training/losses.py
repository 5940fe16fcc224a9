"""Squared-error loss used to seed backpropagation."""

from __future__ import annotations

from ..core import matrix as mx
from ..core.matrix import Matrix


def mse_loss_gradient(predicted: Matrix, target: Matrix) -> Matrix:
    """Return ``predicted - target``.

    This is the derivative of per-element squared error without the usual
    ``1/2`` or ``1/n`` factors; the learning rate absorbs the scale.
    """

    return mx.sub(predicted, target)


def mse(predicted: Matrix, target: Matrix) -> tuple[float, Matrix]:
    """Return the mean squared error together with its backprop seed."""

    diff = mse_loss_gradient(predicted, target)
    count = diff.rows * diff.cols
    loss = mx.sum_all(mx.mul(diff, diff)) / count
    return loss, diff


__all__ = ["mse", "mse_loss_gradient"]
