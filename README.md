# nnkit

Small, dependency-free building blocks for neural networks, written in pure
Python.

## What is in the package

- `nnkit.vector.Vector` – a one-dimensional numeric array. It may be a strided
  view into a shared list buffer (`Vector.view`) or own its data
  (`Vector(length)`, `Vector.from_values`). It supports indexing with bounds
  checks, `copy`, `zeros`, `transpose` (a `length x 1` column view sharing the
  data), in-place `*=` and `+=` with a scalar, the dot product with `@`,
  `assign` (copy another vector's elements in place), `max`, `min` and
  `tolist`.
- `nnkit.matrix.NDArray` – an array of two or more dimensions. `arr[i]` returns
  a view: a `Vector` for a 2D array, an `NDArray` otherwise. It offers
  `shape`, `strides`, `ndim`, `size`, `is_contiguous`, an O(1) `transpose`
  view for 2D arrays, `copy`, `zeros`, in-place `*=` and `+=` with a scalar,
  matrix–matrix and matrix–vector products with `@` (the latter gives an
  `n x 1` column), `assign`, `max`, `min`, `tolist`, and unchecked 2D access
  through `get`, `set` and `increment`.
- `nnkit.compare` – `check_equality` and `check_equality_loose` for 2D arrays,
  and `copy_matrix` to build a 2D array from a sequence of equal-length rows.
- `nnkit.activations` – stateful activation layers working on 2D arrays of
  shape (samples, neurons): `ActivationReLU`, `ActivationLeakyReLU`,
  `ActivationLinear`, `ActivationPReLU`, `ActivationSigmoid`,
  `ActivationSoftmax` and `ActivationStep`, all derived from `BaseActivation`.
  `forward` stores its result in `outputs`, `backward` stores its result in
  `dinputs`. `ActivationReLU.forward_rl` and `end_episode_rl` activate one row
  at a time and stack the rows of an episode; `ActivationSoftmax.forward_rl`
  returns the softmax of a single row. `ActivationPReLU.backward` also fills
  `dalpha` (per-column slopes) or `dalpha_single` (a shared slope).
- `nnkit.arbitrary` – one `ActivationLayer` record whose `kind` is an
  `ActivationKind` (ReLU with or without a minimum, softmax, leaky ReLU, copied
  and flow linear, sigmoid, step, PReLU, slope and affine linear, reverse
  ReLU), driven by `activation_forward` and `activation_backward`.
  `ActivationLayer.clear` drops the saved state.

## Installation

```
pip install .
```

## Example

```python
from nnkit.matrix import NDArray
from nnkit.activations import ActivationReLU, ActivationSoftmax

inputs = NDArray.from_rows([[1.0, -2.0, 3.0], [-1.0, 0.5, 2.0]])

relu = ActivationReLU()
hidden = relu.forward(inputs)
print(hidden)

softmax = ActivationSoftmax()
probs = softmax.forward(hidden)
print(probs.tolist())

grad = relu.backward(NDArray.from_rows([[1.0, 1.0, 1.0], [1.0, 1.0, 1.0]]))
print(grad.tolist())
```

Matrix products use the `@` operator:

```python
from nnkit.matrix import NDArray

a = NDArray.from_rows([[1, 2], [3, 4]])
b = a.transpose()      # a view sharing a's data
print((a @ b).tolist())
```

The tagged activation record:

```python
from nnkit.arbitrary import ActivationKind, ActivationLayer, activation_forward
from nnkit.matrix import NDArray

layer = ActivationLayer(ActivationKind.LEAKY_RELU, relmin=0.0, alpha=0.1)
out = activation_forward(NDArray.from_rows([[-1.0, 2.0]]), layer)
print(out.tolist())
```

## What the package does not do

The package provides arrays and activation functions only. It has no dense
layers, loss functions, optimizers, network containers or training loops, no
command-line program, and it does not save or load models.

## Running the tests

```
pip install .[test]
pytest
```