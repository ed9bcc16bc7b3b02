"""Strided numeric arrays, matrix comparisons and neural-network activations."""

__version__ = "0.1.0"
__all__ = ["vector", "matrix", "compare", "arbitrary", "activations"]