from typing import Optional, Tuple, Union

import numpy as np

from fnmath.core import Function, Tensor, as_tensor

Axis = Optional[Union[int, Tuple[int, ...]]]


def keepdims_shape(shape: Tuple[int, ...], axis: Axis) -> Tuple[int, ...]:
    """Shape a reduction over `axis` would have with keepdims=True."""
    if axis is None:
        return (1,) * len(shape)
    axes = {ax % len(shape) for ax in np.atleast_1d(axis)}
    return tuple(1 if i in axes else n for i, n in enumerate(shape))


class _ToShape(Function):
    """Moves x to a target shape; backward moves the gradient back."""

    def __init__(self, shape: Tuple[int, ...]) -> None:
        self.shape = shape

    def forward(self, x):
        self.x_shape = x.shape
        return self.apply(x)

    def apply(self, x: np.ndarray) -> np.ndarray:
        raise NotImplementedError()


class Reshape(_ToShape):
    def apply(self, x):
        return x.reshape(self.shape)

    def backward(self, gy):
        return reshape(gy, self.x_shape)


class SumTo(_ToShape):
    """Undo broadcasting: drop leading axes, collapse stretched size-1 axes."""

    def apply(self, x):
        lead = x.ndim - len(self.shape)
        axes = tuple(range(lead)) + tuple(
            i + lead for i, n in enumerate(self.shape) if n == 1
        )
        return x.sum(axis=axes, keepdims=True).reshape(self.shape)

    def backward(self, gy):
        return broadcast_to(gy, self.x_shape)


class BroadcastTo(_ToShape):
    def apply(self, x):
        return np.broadcast_to(x, self.shape)

    def backward(self, gy):
        return sum_to(gy, self.x_shape)


def _to_shape(cls, x, shape) -> Tensor:
    x, shape = as_tensor(x), tuple(shape)
    if x.shape == shape:
        return x
    return cls(shape)(x)


def reshape(x, shape) -> Tensor:
    """Reshape x; a Tensor already of that shape is returned as is."""
    return _to_shape(Reshape, x, shape)


def sum_to(x, shape) -> Tensor:
    """Sum x down to `shape`, the inverse of broadcast_to."""
    return _to_shape(SumTo, x, shape)


def broadcast_to(x, shape) -> Tensor:
    return _to_shape(BroadcastTo, x, shape)


class Sum(Function):
    """Sum reduction with NumPy's axis/keepdims."""

    def __init__(self, axis: Axis, keepdims: bool) -> None:
        self.axis = axis
        self.keepdims = keepdims

    def forward(self, x):
        self.x_shape = x.shape
        return x.sum(axis=self.axis, keepdims=self.keepdims)

    def backward(self, gy):
        gy = reshape(gy, keepdims_shape(self.x_shape, self.axis))
        return broadcast_to(gy, self.x_shape)


def sum(x, axis: Axis = None, keepdims=False) -> Tensor:
    return Sum(axis, keepdims)(x)
