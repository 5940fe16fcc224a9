"""Layer, network and pipeline assembly for XorNet."""

from .layers import DenseLayer
from .network import ConvergenceError, Network

__all__ = ["ConvergenceError", "DenseLayer", "Network"]
