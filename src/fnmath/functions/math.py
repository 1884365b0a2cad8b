"""Elementwise arithmetic behind the Tensor operators.

Only add, mul, neg and pow are graph nodes; sub and div are built from them,
so their gradients (and gradients of gradients) come for free.
"""

import numpy as np

from fnmath.core import Function, Tensor
from fnmath.functions.function import sum_to


class Add(Function):
    def forward(self, x0, x1):
        return x0 + x1

    def backward(self, gy):
        x0, x1 = self.inputs
        return sum_to(gy, x0.shape), sum_to(gy, x1.shape)


class Mul(Function):
    def forward(self, x0, x1):
        return x0 * x1

    def backward(self, gy):
        x0, x1 = self.inputs
        return sum_to(gy * x1, x0.shape), sum_to(gy * x0, x1.shape)


class Neg(Function):
    def forward(self, x):
        return -x

    def backward(self, gy):
        return -gy


class Pow(Function):
    """x**c for a constant exponent c."""

    def __init__(self, c: float) -> None:
        self.c = c

    def forward(self, x):
        return x**self.c

    def backward(self, gy):
        (x,) = self.inputs
        return gy * self.c * x ** (self.c - 1)


def add(x0, x1) -> Tensor:
    return Add()(x0, x1)


def mul(x0, x1) -> Tensor:
    return Mul()(x0, x1)


def neg(x) -> Tensor:
    return Neg()(x)


def pow(x, c) -> Tensor:
    return Pow(c)(x)


def sub(x0, x1) -> Tensor:
    return add(x0, neg(x1))


def div(x0, x1) -> Tensor:
    # float exponent, so integer divisors still divide
    return mul(x0, pow(x1, -1.0))


class Tanh(Function):
    """Hyperbolic tangent; np.tanh saturates to +-1 instead of inf/inf."""

    def forward(self, x):
        return np.tanh(x)

    def backward(self, gy):
        y = self.output()
        return gy * (1 - y * y)
