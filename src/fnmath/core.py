"""Core — Tensor and Function, the autograd side of fnmath.

An activation is a Function: ``forward`` maps NumPy arrays to an array and
``backward`` maps the output gradient to one gradient per input. Called with
plain numbers or arrays, an activation only runs ``forward``. Called with a
Tensor, it is recorded so ``Tensor.backward`` can differentiate it.
"""

from __future__ import annotations

import contextlib
import heapq
import itertools
import weakref
from typing import Optional

import numpy as np

import fnmath


class Config:
    """Global switch for graph recording on Tensor calls."""

    enable_backprop = True


@contextlib.contextmanager
def using_config(name: str, value: bool):
    """Temporarily set a Config attribute inside a context."""
    old_value = getattr(Config, name)
    setattr(Config, name, value)
    try:
        yield
    finally:
        setattr(Config, name, old_value)


def no_grad():
    """Evaluate Tensor calls without recording them."""
    return using_config("enable_backprop", False)


class Tensor:
    """An array that remembers which activation produced it."""

    __array_priority__ = 200

    def __init__(self, data, name: Optional[str] = None) -> None:
        self.data = np.asarray(data)
        self.name = name
        self.grad: Optional[Tensor] = None
        self.creator: Optional[Function] = None
        self.generation = 0

    @property
    def shape(self):
        return self.data.shape

    @property
    def dtype(self):
        return self.data.dtype

    def __add__(self, other):
        return fnmath.functions.add(self, other)

    __radd__ = __add__

    def __mul__(self, other):
        return fnmath.functions.mul(self, other)

    __rmul__ = __mul__

    def __neg__(self):
        return fnmath.functions.neg(self)

    def __sub__(self, other):
        return fnmath.functions.sub(self, other)

    def __rsub__(self, other):
        return fnmath.functions.sub(other, self)

    def __truediv__(self, other):
        return fnmath.functions.div(self, other)

    def __rtruediv__(self, other):
        return fnmath.functions.div(other, self)

    def __pow__(self, c):
        return fnmath.functions.pow(self, c)

    def sum(self, axis=None, keepdims=False):
        return fnmath.functions.sum(self, axis, keepdims)

    def max(self, axis=None, keepdims=False):
        return fnmath.functions.maxout(self, axis=axis, keepdims=keepdims)

    def cleargrad(self) -> None:
        self.grad = None

    def backward(self, retain_grad=False, create_graph=False) -> None:
        """Accumulate d(sum of self)/d(input) into every upstream Tensor.

        Functions are visited latest-generation first, so each one runs only
        after all of its output's consumers have contributed to the output grad.

        Args:
            retain_grad: keep gradients on intermediate tensors.
            create_graph: record the backward pass itself, so a gradient can
                be differentiated again.
        """
        if self.grad is None:
            self.grad = Tensor(np.ones_like(self.data))

        pending: list = []
        seen = set()
        order = itertools.count()

        def schedule(f):
            if f is not None and f not in seen:
                seen.add(f)
                heapq.heappush(pending, (-f.generation, next(order), f))

        schedule(self.creator)
        while pending:
            f = heapq.heappop(pending)[-1]
            y = f.output()
            with using_config("enable_backprop", create_graph):
                gxs = f.backward(y.grad)
                if not isinstance(gxs, tuple):
                    gxs = (gxs,)
                for x, gx in zip(f.inputs, gxs):
                    x.grad = gx if x.grad is None else x.grad + gx
                    schedule(x.creator)
            if not retain_grad:
                y.grad = None


def as_tensor(obj) -> Tensor:
    """Return obj unchanged if it is a Tensor, else wrap it."""
    if isinstance(obj, Tensor):
        return obj
    return Tensor(obj)


class Function:
    """One differentiable operation with a single output.

    Subclasses implement forward (ndarrays -> ndarray) and backward
    (output grad Tensor -> Tensor or tuple of Tensors, one per input).
    """

    def __call__(self, *inputs) -> Tensor:
        inputs = [as_tensor(x) for x in inputs]
        y = Tensor(self.forward(*(x.data for x in inputs)))

        if Config.enable_backprop:
            self.generation = max((x.generation for x in inputs), default=0)
            y.creator = self
            y.generation = self.generation + 1
            self.inputs = inputs
            self.output = weakref.ref(y)

        return y

    def forward(self, *xs: np.ndarray) -> np.ndarray:
        raise NotImplementedError()

    def backward(self, gy: Tensor):
        raise NotImplementedError()


def evaluate(func: Function, *inputs):
    """Apply func, keeping plain values plain.

    With a Tensor among the inputs the call is recorded and a Tensor comes
    back. Otherwise only ``forward`` runs and no shared state is touched; the
    result is a NumPy scalar for 0-d output, an ndarray otherwise.
    """
    if any(isinstance(x, Tensor) for x in inputs):
        return func(*inputs)
    return np.asarray(func.forward(*(np.asarray(x) for x in inputs)))[()]
