"""Activation functions selected by a kind tag on a plain layer record.

A single :class:`ActivationLayer` carries the parameters that every kind of
activation may need; :func:`activation_forward` and
:func:`activation_backward` dispatch on :attr:`ActivationLayer.kind`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from itertools import product
from typing import Callable, Iterator, Optional, Tuple

from .matrix import NDArray
from .vector import Number


class ActivationKind(IntEnum):
    """The activation functions a layer record can describe."""

    RELU_MIN = 0x0
    """ReLU with the arbitrary minimum ``relmin``."""
    RELU = 0x1
    """ReLU with zero as its minimum."""
    SOFTMAX = 0x2
    LEAKY_RELU = 0x3
    """Leaky ReLU around ``relmin`` with slope ``alpha`` below it."""
    COPIED_LINEAR = 0x4
    """Identity that keeps copies of its inputs and outputs."""
    FLOW_LINEAR = 0x5
    """Identity that passes its argument straight through."""
    SIGMOID = 0x6
    STEP = 0x7
    """``alpha`` below ``relmin``, ``beta`` from it upwards."""
    PRELU = 0x8
    """PReLU with one learnable slope ``alpha``; its gradient goes to ``beta``."""
    PRELU_ARRAY = 0x9
    """PReLU with one slope per column; carries no computation."""
    SLOPE_LINEAR = 0xA
    """``y = alpha * x``."""
    AFFINE_LINEAR = 0xB
    """``y = alpha * x + beta``."""
    REVERSE_RELU = 0xC
    """Clamps values above ``relmin`` down to ``relmin``."""


@dataclass
class ActivationLayer:
    """State and parameters of one activation.

    ``relmin`` is the cut-off for the ReLU family and the bar for step.
    ``alpha`` is the leak for leaky ReLU and PReLU, the low value for step
    and the slope for the linear kinds. ``beta`` is the high value for step,
    the offset for the affine kind and receives the slope gradient of PReLU.
    """

    kind: ActivationKind
    relmin: Number = 0.0
    alpha: Number = 0.0
    beta: Number = 0.0
    saved_inputs: Optional[NDArray] = None
    dinputs: Optional[NDArray] = None
    outputs: Optional[NDArray] = None
    output_ownership: bool = False

    def __post_init__(self) -> None:
        self.kind = ActivationKind(self.kind)

    def clear(self) -> None:
        """Drop everything saved by the last forward and backward passes."""
        self.outputs = None
        self.saved_inputs = None
        self.dinputs = None


def _require_2d(arr: NDArray) -> None:
    if not isinstance(arr, NDArray):
        raise TypeError("Activations work on 2D arrays.")
    if arr.ndim != 2:
        raise ValueError("Shape Error: Matrix must be 2D")


def _cells(shape: Tuple[int, ...]) -> Iterator[Tuple[int, int]]:
    rows, cols = shape
    return product(range(rows), range(cols))


def _map(arr: NDArray, fn: Callable[[Number], Number]) -> NDArray:
    out = NDArray(arr.shape)
    for i, j in _cells(arr.shape):
        out.set(i, j, fn(arr.get(i, j)))
    return out


def _zip_map(
    first: NDArray, second: NDArray, fn: Callable[[Number, Number], Number]
) -> NDArray:
    out = NDArray(first.shape)
    for i, j in _cells(first.shape):
        out.set(i, j, fn(first.get(i, j), second.get(i, j)))
    return out


def _sigmoid(x: Number) -> float:
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    e = math.exp(x)
    return e / (1.0 + e)


def _softmax(inputs: NDArray) -> NDArray:
    rows, cols = inputs.shape
    out = NDArray(inputs.shape)
    for i in range(rows):
        row = [inputs.get(i, j) for j in range(cols)]
        if not row:
            continue
        top = max(row)
        exps = [math.exp(x - top) for x in row]
        total = sum(exps)
        for j, e in enumerate(exps):
            out.set(i, j, e / total)
    return out


def activation_forward(inputs: NDArray, layer: ActivationLayer) -> Optional[NDArray]:
    """Run the forward pass of ``layer`` on a 2D array.

    The result is also stored as ``layer.outputs``, and what the backward
    pass needs is kept in ``layer.saved_inputs``. Returns ``None`` for a
    softmax or leaky ReLU given no rows, and for the per-column PReLU,
    which only allocates its buffers.
    """
    _require_2d(inputs)
    kind = layer.kind
    relmin, alpha, beta = layer.relmin, layer.alpha, layer.beta

    if kind is ActivationKind.FLOW_LINEAR:
        return inputs

    if kind in (ActivationKind.SOFTMAX, ActivationKind.LEAKY_RELU) and inputs.shape[0] <= 0:
        return None

    if kind is ActivationKind.RELU_MIN:
        outputs = _map(inputs, lambda x: relmin if x < relmin else x)
        saved = inputs.copy()
    elif kind is ActivationKind.RELU:
        outputs = _map(inputs, lambda x: 0 if x < 0 else x)
        saved = inputs.copy()
    elif kind is ActivationKind.SOFTMAX:
        outputs = _softmax(inputs)
        saved = outputs.copy()
    elif kind in (ActivationKind.LEAKY_RELU, ActivationKind.PRELU):
        outputs = _map(
            inputs, lambda x: (x - relmin) * alpha + relmin if x < relmin else x
        )
        saved = inputs.copy()
    elif kind is ActivationKind.COPIED_LINEAR:
        outputs = inputs.copy()
        saved = inputs.copy()
    elif kind is ActivationKind.SIGMOID:
        outputs = _map(inputs, _sigmoid)
        saved = outputs.copy()
    elif kind is ActivationKind.STEP:
        outputs = _map(inputs, lambda x: alpha if x < relmin else beta)
        saved = NDArray(inputs.shape)
    elif kind is ActivationKind.PRELU_ARRAY:
        layer.saved_inputs = NDArray(inputs.shape)
        layer.outputs = NDArray(inputs.shape)
        return None
    elif kind is ActivationKind.SLOPE_LINEAR:
        outputs = _map(inputs, lambda x: x * alpha)
        saved = inputs.copy()
    elif kind is ActivationKind.AFFINE_LINEAR:
        outputs = _map(inputs, lambda x: x * alpha + beta)
        saved = inputs.copy()
    else:  # ActivationKind.REVERSE_RELU
        outputs = _map(inputs, lambda x: relmin if x > relmin else x)
        saved = inputs.copy()

    layer.saved_inputs = saved
    layer.outputs = outputs
    return outputs


def _softmax_backward(saved: NDArray, dvalues: NDArray) -> NDArray:
    rows, cols = saved.shape
    out = NDArray(saved.shape)
    for i in range(rows):
        probs = [saved.get(i, k) for k in range(cols)]
        grads = [dvalues.get(i, k) for k in range(cols)]
        for j, s_j in enumerate(probs):
            total = 0.0
            for k, (s_k, d_k) in enumerate(zip(probs, grads)):
                if k == j:
                    total += s_j * (1 - s_j) * d_k
                else:
                    total += -s_j * s_k * d_k
            out.set(i, j, total)
    return out


def activation_backward(dvalues: NDArray, layer: ActivationLayer) -> Optional[NDArray]:
    """Run the backward pass of ``layer`` given the upstream gradients.

    The result is also stored as ``layer.dinputs``. For PReLU the gradient
    of its slope is written to ``layer.beta``. Returns ``None`` for the
    per-column PReLU, which only allocates its buffer.
    """
    _require_2d(dvalues)
    kind = layer.kind
    relmin, alpha = layer.relmin, layer.alpha

    if kind is ActivationKind.FLOW_LINEAR:
        return dvalues

    saved = layer.saved_inputs
    if saved is None:
        raise RuntimeError("The forward pass must run before the backward pass.")

    if kind is ActivationKind.RELU_MIN:
        dinputs = _zip_map(saved, dvalues, lambda x, d: 0 if x <= relmin else d)
    elif kind is ActivationKind.RELU:
        dinputs = _zip_map(saved, dvalues, lambda x, d: 0 if x <= 0 else d)
    elif kind is ActivationKind.SOFTMAX:
        dinputs = _softmax_backward(saved, dvalues)
    elif kind is ActivationKind.LEAKY_RELU:
        dinputs = _zip_map(saved, dvalues, lambda x, d: d * alpha if x <= relmin else d)
    elif kind is ActivationKind.COPIED_LINEAR:
        dinputs = _zip_map(saved, dvalues, lambda _x, d: d)
    elif kind is ActivationKind.SIGMOID:
        dinputs = _zip_map(saved, dvalues, lambda s, d: s * (1 - s) * d)
    elif kind is ActivationKind.STEP:
        dinputs = NDArray(saved.shape)
    elif kind is ActivationKind.PRELU:
        dinputs = _zip_map(saved, dvalues, lambda x, d: d * alpha if x < relmin else d)
        gradient = 0.0
        for i, j in _cells(saved.shape):
            x = saved.get(i, j)
            if x < relmin:
                gradient += dvalues.get(i, j) * (x - relmin)
        layer.beta = gradient
    elif kind is ActivationKind.PRELU_ARRAY:
        layer.dinputs = NDArray(saved.shape)
        return None
    elif kind in (ActivationKind.SLOPE_LINEAR, ActivationKind.AFFINE_LINEAR):
        dinputs = _zip_map(saved, dvalues, lambda _x, d: d * alpha)
    else:  # ActivationKind.REVERSE_RELU
        dinputs = _zip_map(saved, dvalues, lambda x, d: 0 if x >= relmin else d)

    layer.dinputs = dinputs
    return dinputs


__all__ = [
    "ActivationKind",
    "ActivationLayer",
    "activation_forward",
    "activation_backward",
]