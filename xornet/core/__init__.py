"""Core numerical primitives for XorNet."""

from . import activations, matrix, types

__all__ = ["activations", "matrix", "types"]
