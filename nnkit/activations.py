"""Activation layers that keep what their backward pass needs.

Each activation works on 2D arrays of shape (samples, neurons). ``forward``
stores its result in ``outputs`` and ``backward`` stores its result in
``dinputs``.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from itertools import product
from typing import Callable, Iterable, List, Optional

from .matrix import NDArray
from .vector import Number, Vector

_SOFTMAX_EPSILON = 1e-7


def _require_2d(arr: NDArray) -> None:
    if not isinstance(arr, NDArray):
        raise TypeError("Activations work on 2D arrays.")
    if arr.ndim != 2:
        raise ValueError("Shape Error: Matrix must be 2D")


def _map(arr: NDArray, fn: Callable[[int, int, Number], Number]) -> NDArray:
    rows, cols = arr.shape
    out = NDArray((rows, cols))
    for i, j in product(range(rows), range(cols)):
        out.set(i, j, fn(i, j, arr.get(i, j)))
    return out


def _empty(inputs: NDArray) -> NDArray:
    return NDArray((0, inputs.shape[1]))


def _check_gradients(saved: Optional[NDArray], dvalues: NDArray) -> NDArray:
    if saved is None:
        raise RuntimeError("The forward pass must run before the backward pass.")
    _require_2d(dvalues)
    rows, cols = saved.shape
    if dvalues.shape[0] < rows or dvalues.shape[1] < cols:
        raise IndexError("Index out of bounds.")
    return saved


def _sigmoid(x: Number) -> float:
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    e = math.exp(x)
    return e / (1.0 + e)


def _softmax_row(values: List[Number]) -> List[float]:
    if not values:
        return []
    top = max(values)
    exps = [math.exp(x - top) for x in values]
    total = sum(exps) + _SOFTMAX_EPSILON
    return [e / total for e in exps]


class BaseActivation(ABC):
    """Common state of every activation: its outputs and input gradients."""

    name = "Activation"
    kind: Optional[int] = None

    def __init__(self) -> None:
        self.outputs: Optional[NDArray] = None
        self.dinputs: Optional[NDArray] = None

    @abstractmethod
    def forward(self, inputs: NDArray) -> NDArray:
        """Apply the activation to a 2D array of inputs."""

    @abstractmethod
    def backward(self, dvalues: NDArray) -> NDArray:
        """Return the gradients with respect to the last forward inputs."""

    def __str__(self) -> str:
        return self.name


class ActivationReLU(BaseActivation):
    """``y = max(x, minimum)``, also usable one row at a time for episodes."""

    name = "ReLU"
    kind = 0x01

    def __init__(self, minimum: Number = 0.0):
        super().__init__()
        self.minimum = minimum
        self.saved_inputs: Optional[NDArray] = None
        self._width = 0
        self._episode_inputs: List[List[Number]] = []
        self._episode_outputs: List[List[Number]] = []

    def _apply(self, x: Number) -> Number:
        return self.minimum if x < self.minimum else x

    def forward(self, inputs: NDArray) -> NDArray:
        _require_2d(inputs)
        self._width = inputs.shape[1]
        self.saved_inputs = inputs.copy()
        self.outputs = _map(inputs, lambda _i, _j, x: self._apply(x))
        return self.outputs

    def backward(self, dvalues: NDArray) -> NDArray:
        saved = _check_gradients(self.saved_inputs, dvalues)
        self.dinputs = _map(
            saved, lambda i, j, x: 0 if x <= 0 else dvalues.get(i, j)
        )
        return self.dinputs.copy()

    def forward_rl(self, row: Iterable[Number]) -> Vector:
        """Activate one row and remember it for :meth:`end_episode_rl`."""
        values = list(row)
        self._width = len(values)
        activated = [self._apply(x) for x in values]
        self._episode_inputs.append(values)
        self._episode_outputs.append(activated)
        return Vector.from_values(activated)

    def end_episode_rl(self) -> None:
        """Stack the rows seen since the last episode into saved state."""
        count = len(self._episode_inputs)
        self.saved_inputs = NDArray((count, self._width))
        self.outputs = NDArray((count, self._width))
        for i, (ins, outs) in enumerate(zip(self._episode_inputs, self._episode_outputs)):
            for j in range(self._width):
                self.saved_inputs.set(i, j, ins[j])
                self.outputs.set(i, j, outs[j])
        self._episode_inputs.clear()
        self._episode_outputs.clear()


class ActivationLeakyReLU(BaseActivation):
    """Passes values from ``minimum`` up, scales those below by ``alpha``."""

    name = "Leaky ReLU"

    def __init__(self, alpha: Number, minimum: Number = 0.0):
        super().__init__()
        self.alpha = alpha
        self.minimum = minimum
        self.saved_inputs: Optional[NDArray] = None

    def forward(self, inputs: NDArray) -> NDArray:
        _require_2d(inputs)
        if inputs.shape[0] <= 0:
            return _empty(inputs)
        self.saved_inputs = inputs.copy()
        self.outputs = _map(
            inputs, lambda _i, _j, x: x * self.alpha if x < self.minimum else x
        )
        return self.outputs

    def backward(self, dvalues: NDArray) -> NDArray:
        saved = _check_gradients(self.saved_inputs, dvalues)
        self.dinputs = _map(
            saved,
            lambda i, j, x: dvalues.get(i, j) * self.alpha if x <= 0 else dvalues.get(i, j),
        )
        return self.dinputs


class ActivationLinear(BaseActivation):
    """``y = m * x + b``; gradients pass back unchanged."""

    name = "Linear"

    def __init__(self, m: Number = 1, b: Number = 0):
        super().__init__()
        self.m = m
        self.b = b
        self.saved_inputs: Optional[NDArray] = None

    def forward(self, inputs: NDArray) -> NDArray:
        _require_2d(inputs)
        if inputs.shape[0] <= 0:
            return _empty(inputs)
        self.saved_inputs = inputs.copy()
        self.outputs = _map(inputs, lambda _i, _j, x: self.m * x + self.b)
        return self.outputs

    def backward(self, dvalues: NDArray) -> NDArray:
        saved = _check_gradients(self.saved_inputs, dvalues)
        self.dinputs = _map(saved, lambda i, j, _x: dvalues.get(i, j))
        return self.dinputs


class ActivationPReLU(BaseActivation):
    """Leaky ReLU whose slope is learnable, shared or one per column.

    With ``alpha_array`` the slopes live in the vector ``alpha`` and their
    gradients in ``dalpha``; otherwise in ``alpha_single`` and
    ``dalpha_single``.
    """

    name = "PReLU"

    def __init__(
        self,
        alpha: Number,
        prev_layer: int,
        alpha_array: bool,
        minimum: Number = 0.0,
    ):
        super().__init__()
        self.minimum = minimum
        self.is_array = alpha_array
        self.prev_layer = prev_layer
        self.alpha: Optional[Vector] = None
        self.alpha_single: Number = alpha
        if alpha_array:
            self.alpha = Vector.from_values([alpha] * prev_layer)
        self.dalpha: Optional[Vector] = None
        self.dalpha_single: Number = 0.0
        self.saved_inputs: Optional[NDArray] = None

    def _slope(self, j: int) -> Number:
        return self.alpha[j] if self.is_array else self.alpha_single

    def forward(self, inputs: NDArray) -> NDArray:
        _require_2d(inputs)
        if inputs.shape[0] <= 0:
            return _empty(inputs)
        self.saved_inputs = inputs.copy()
        self.outputs = _map(
            inputs, lambda _i, j, x: x * self._slope(j) if x < self.minimum else x
        )
        return self.outputs

    def backward(self, dvalues: NDArray) -> NDArray:
        saved = _check_gradients(self.saved_inputs, dvalues)
        rows, cols = saved.shape
        self.dinputs = NDArray((rows, cols))
        if self.is_array:
            self.dalpha = Vector(cols)
            for i, j in product(range(rows), range(cols)):
                x, d = saved.get(i, j), dvalues.get(i, j)
                if x <= 0:
                    self.dinputs.set(i, j, d * self.alpha[j])
                    self.dalpha[j] += d * x
                else:
                    self.dinputs.set(i, j, d)
        else:
            gradient = 0.0
            for i, j in product(range(rows), range(cols)):
                x, d = saved.get(i, j), dvalues.get(i, j)
                if x < 0:
                    self.dinputs.set(i, j, d * self.alpha_single)
                    gradient += d * x
                else:
                    self.dinputs.set(i, j, d)
            self.dalpha_single = gradient
        return self.dinputs


class ActivationSigmoid(BaseActivation):
    """``y = 1 / (1 + exp(-x))``."""

    name = "Sigmoid"

    def forward(self, inputs: NDArray) -> NDArray:
        _require_2d(inputs)
        if inputs.shape[0] <= 0:
            return _empty(inputs)
        self.outputs = _map(inputs, lambda _i, _j, x: _sigmoid(x))
        return self.outputs

    def backward(self, dvalues: NDArray) -> NDArray:
        outputs = _check_gradients(self.outputs, dvalues)
        self.dinputs = _map(outputs, lambda i, j, s: s * (1 - s) * dvalues.get(i, j))
        return self.dinputs


class ActivationSoftmax(BaseActivation):
    """Row-wise softmax, shifted by the row maximum for stability."""

    name = "Softmax"
    kind = 0x02

    def forward(self, inputs: NDArray) -> NDArray:
        _require_2d(inputs)
        if inputs.shape[0] <= 0:
            return _empty(inputs)
        rows, cols = inputs.shape
        self.outputs = NDArray((rows, cols))
        for i in range(rows):
            probs = _softmax_row([inputs.get(i, j) for j in range(cols)])
            for j, p in enumerate(probs):
                self.outputs.set(i, j, p)
        return self.outputs

    def forward_rl(self, row: Iterable[Number]) -> Vector:
        """Return the softmax of a single row without storing anything."""
        values = list(row)
        if not values:
            raise IndexError("Index out of bounds.")
        return Vector.from_values(_softmax_row(values))

    def backward(self, dvalues: NDArray) -> NDArray:
        outputs = _check_gradients(self.outputs, dvalues)
        rows, cols = outputs.shape
        self.dinputs = NDArray((rows, cols))
        for i in range(rows):
            probs = [outputs.get(i, k) for k in range(cols)]
            grads = [dvalues.get(i, k) for k in range(cols)]
            for j, s_j in enumerate(probs):
                total = 0.0
                for k, (s_k, d_k) in enumerate(zip(probs, grads)):
                    jacobian = s_j * (1 - s_j) if k == j else -s_j * s_k
                    total += jacobian * d_k
                self.dinputs.set(i, j, total)
        return self.dinputs


class ActivationStep(BaseActivation):
    """``minimum`` up to and including ``bar``, ``maximum`` above it."""

    name = "Step"

    def __init__(self, bar: Number = 0.0, minimum: Number = 0.0, maximum: Number = 1.0):
        super().__init__()
        self.bar = bar
        self.minimum = minimum
        self.maximum = maximum

    def forward(self, inputs: NDArray) -> NDArray:
        _require_2d(inputs)
        if inputs.shape[0] <= 0:
            return _empty(inputs)
        self.outputs = _map(
            inputs, lambda _i, _j, x: self.minimum if x <= self.bar else self.maximum
        )
        return self.outputs

    def backward(self, dvalues: NDArray) -> NDArray:
        outputs = _check_gradients(self.outputs, dvalues)
        self.dinputs = NDArray(outputs.shape)
        return self.dinputs


__all__ = [
    "BaseActivation",
    "ActivationReLU",
    "ActivationLeakyReLU",
    "ActivationLinear",
    "ActivationPReLU",
    "ActivationSigmoid",
    "ActivationSoftmax",
    "ActivationStep",
]