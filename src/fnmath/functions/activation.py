"""Activation functions.

Every activation is a Function subclass with an analytic backward, plus a
lowercase wrapper. Wrappers go through ``evaluate``: plain numbers and arrays
give plain results, Tensors give Tensors on the autograd graph. Coefficient
arguments (``a``, ``b``, ``c``, ``sigma``) receive gradients too when they are
Tensors.

Backward passes are written with Tensor operations, so with
``backward(create_graph=True)`` a gradient can be differentiated again.
"""

import numpy as np
from scipy.special import erf

from fnmath.core import Function, as_tensor, evaluate
from fnmath.errors import InvalidArgumentError
from fnmath.functions.function import broadcast_to, keepdims_shape, reshape, sum_to
from fnmath.functions.math import Tanh

SELU_SCALE = 1.0507
SELU_ALPHA = 1.67326
LEAKY_RELU_SLOPE = 0.01

_INV_SQRT2 = 2**-0.5
_INV_SQRT_2PI = (2 * np.pi) ** -0.5


def _sigmoid(x):
    # tanh form never overflows, unlike 1 / (1 + exp(-x))
    return np.tanh(x * 0.5) * 0.5 + 0.5


def _mask(cond):
    return np.asarray(cond, dtype=np.float64)


def _zero_grad(x, gy):
    return as_tensor(np.zeros(x.shape, dtype=gy.dtype))


# ----------------------
# Step functions
# ----------------------
class BinaryStep(Function):
    """1 where x >= 0, else 0."""

    def forward(self, x):
        return np.where(x >= 0, 1, 0).astype(x.dtype)

    def backward(self, gy):
        return _zero_grad(self.inputs[0], gy)


def binary_step(x):
    """Binary step: 1 if x >= 0 else 0. Has zero gradient everywhere."""
    return evaluate(BinaryStep(), x)


class Heaviside(Function):
    """1 where the affine map a*x + b is strictly positive, else 0."""

    def forward(self, a, x, b):
        z = a * x + b
        return np.where(z > 0, 1, 0).astype(z.dtype)

    def backward(self, gy):
        return tuple(_zero_grad(v, gy) for v in self.inputs)


def heaviside(a, x, b):
    """Heaviside step of the affine function a*x + b."""
    return evaluate(Heaviside(), a, x, b)


# ----------------------
# Linear family
# ----------------------
class Identity(Function):
    """Passes x through unchanged; the result never aliases the input."""

    def forward(self, x):
        return x.copy()

    def backward(self, gy):
        return gy


def identity(x):
    """f(x) = x"""
    return evaluate(Identity(), x)


class Linear(Function):
    """Affine function a*x + b with broadcasting."""

    def forward(self, a, x, b):
        return a * x + b

    def backward(self, gy):
        a, x, b = self.inputs
        ga, gx = gy * x, gy * a
        return sum_to(ga, a.shape), sum_to(gx, x.shape), sum_to(gy, b.shape)


def linear(a, x, b):
    """f(x) = a*x + b

    Args:
        a: slope.
        x: input.
        b: intercept.
    """
    return evaluate(Linear(), a, x, b)


# ----------------------
# Rectifiers
# ----------------------
class ReLU(Function):
    """max(x, 0); NaN passes through."""

    def forward(self, x):
        return np.maximum(x, 0)

    def backward(self, gy):
        (x,) = self.inputs
        return gy * _mask(x.data > 0)


def relu(x):
    """ReLU activation: x if x > 0 else 0."""
    return evaluate(ReLU(), x)


class LeakyReLU(Function):
    def __init__(self, slope=LEAKY_RELU_SLOPE):
        self.slope = slope

    def forward(self, x):
        return np.where(x < 0, self.slope * x, x)

    def backward(self, gy):
        (x,) = self.inputs
        return gy * np.where(x.data < 0, self.slope, 1.0)


def leaky_relu(x, slope=LEAKY_RELU_SLOPE):
    """Leaky ReLU: slope*x if x < 0 else x (slope defaults to 0.01)."""
    return evaluate(LeakyReLU(slope), x)


class PReLU(Function):
    """Parametric ReLU: the negative slope is an input, so it is learnable."""

    def forward(self, a, x):
        return np.where(x < 0, a * x, x)

    def backward(self, gy):
        a, x = self.inputs
        neg = _mask(x.data < 0)
        # min(x, 0), kept finite for x = +inf
        ga = -(gy * ReLU()(-x))
        gx = gy * (a * neg + (1 - neg))
        return sum_to(ga, a.shape), sum_to(gx, x.shape)


def prelu(a, x):
    """Parametric ReLU: a*x if x < 0 else x."""
    return evaluate(PReLU(), a, x)


class _NegativeExpm1(Function):
    """e^min(x, 0) - 1, the negative branch shared by ELU and SELU."""

    def forward(self, x):
        return np.expm1(np.minimum(x, 0))

    def backward(self, gy):
        (x,) = self.inputs
        y = self.output()
        return gy * (y + 1) * _mask(x.data <= 0)


class ELU(Function):
    """Exponential Linear Unit.

    The negative branch is evaluated on min(x, 0) with expm1 so large positive
    inputs never overflow in the branch that is thrown away. At x = 0 the
    gradient takes the negative-branch slope a.
    """

    def forward(self, a, x):
        return np.where(x > 0, x, a * np.expm1(np.minimum(x, 0)))

    def backward(self, gy):
        a, x = self.inputs
        neg = _mask(x.data <= 0)
        e = _NegativeExpm1()(x)
        ga = gy * e * neg
        gx = gy * (a * (e + 1) * neg + (1 - neg))
        return sum_to(ga, a.shape), sum_to(gx, x.shape)


def elu(a, x):
    """ELU: x if x > 0 else a*(e^x - 1)."""
    return evaluate(ELU(), a, x)


class SELU(Function):
    """Scaled ELU with fixed lambda=1.0507 and alpha=1.67326."""

    def forward(self, x):
        neg = SELU_SCALE * SELU_ALPHA * np.expm1(np.minimum(x, 0))
        return np.where(x < 0, neg, SELU_SCALE * x)

    def backward(self, gy):
        (x,) = self.inputs
        neg = _mask(x.data < 0)
        e = _NegativeExpm1()(x)
        return gy * (SELU_SCALE * SELU_ALPHA * (e + 1) * neg + SELU_SCALE * (1 - neg))


def selu(x):
    """SELU: lambda*alpha*(e^x - 1) if x < 0 else lambda*x.

    lambda and alpha are fixed at SELU_SCALE and SELU_ALPHA.
    """
    return evaluate(SELU(), x)


# ----------------------
# Sigmoid family
# ----------------------
class Sigmoid(Function):
    """Logistic function in its overflow-free tanh form."""

    def forward(self, x):
        return _sigmoid(x)

    def backward(self, gy):
        y = self.output()
        return gy * y * (1 - y)


def sigmoid(x):
    """Logistic sigmoid 1 / (1 + e^-x)."""
    return evaluate(Sigmoid(), x)


def tanh(x):
    """Hyperbolic tangent (e^x - e^-x) / (e^x + e^-x)."""
    return evaluate(Tanh(), x)


class SiLU(Function):
    """Sigmoid Linear Unit (swish-1), x * sigmoid(x)."""

    def forward(self, x):
        return x * _sigmoid(x)

    def backward(self, gy):
        (x,) = self.inputs
        s = Sigmoid()(x)
        return gy * (s + x * s * (1 - s))


def silu(x):
    """SiLU: x / (1 + e^-x)."""
    return evaluate(SiLU(), x)


class Softplus(Function):
    """ln(1 + e^x), evaluated as logaddexp(0, x)."""

    def forward(self, x):
        return np.logaddexp(0, x)

    def backward(self, gy):
        (x,) = self.inputs
        return gy * Sigmoid()(x)


def softplus(x):
    """Softplus: smooth approximation of ReLU."""
    return evaluate(Softplus(), x)


class Mish(Function):
    def forward(self, x):
        return x * np.tanh(np.logaddexp(0, x))

    def backward(self, gy):
        (x,) = self.inputs
        t = Tanh()(Softplus()(x))
        return gy * (t + x * (1 - t * t) * Sigmoid()(x))


def mish(x):
    """Mish: x * tanh(ln(1 + e^x))."""
    return evaluate(Mish(), x)


# ----------------------
# Gaussian family & radial basis functions
# ----------------------
class Gaussian(Function):
    """Unnormalised bell curve e^(-x^2)."""

    def forward(self, x):
        return np.exp(-(x**2))

    def backward(self, gy):
        (x,) = self.inputs
        return gy * self.output() * (-2.0 * x)


def gaussian(x):
    """f(x) = e^(-x^2)"""
    return evaluate(Gaussian(), x)


class _NormalCDF(Function):
    def forward(self, x):
        return 0.5 * (1 + erf(x * _INV_SQRT2))

    def backward(self, gy):
        (x,) = self.inputs
        return gy * Gaussian()(x * _INV_SQRT2) * _INV_SQRT_2PI


class GELU(Function):
    """Gaussian Error Linear Unit, exact erf form."""

    def forward(self, x):
        return 0.5 * x * (1 + erf(x * _INV_SQRT2))

    def backward(self, gy):
        (x,) = self.inputs
        pdf = Gaussian()(x * _INV_SQRT2) * _INV_SQRT_2PI
        return gy * (_NormalCDF()(x) + x * pdf)


def gelu(x):
    """GELU: x * Phi(x) where Phi is the standard normal CDF."""
    return evaluate(GELU(), x)


class GaussianRBF(Function):
    """Gaussian radial basis function around center c with spread sigma."""

    def forward(self, x, c, sigma):
        return np.exp(-((x - c) ** 2) / (2 * sigma**2))

    def backward(self, gy):
        x, c, sigma = self.inputs
        gyy = gy * self.output()
        d = x - c
        gx = -(gyy * d / sigma**2)
        gs = gyy * d**2 / sigma**3
        return sum_to(gx, x.shape), sum_to(-gx, c.shape), sum_to(gs, sigma.shape)


def gaussian_rbf(x, c, sigma):
    """f(x) = exp(-(x - c)^2 / (2 * sigma^2))

    Args:
        x: input.
        c: center.
        sigma: spread; sigma == 0 gives IEEE results (nan at the center).
    """
    return evaluate(GaussianRBF(), x, c, sigma)


class Multiquadratic(Function):
    """Multiquadratic radial basis function sqrt((x - c)^2 + a^2)."""

    def forward(self, x, c, a):
        return np.sqrt((x - c) ** 2 + a**2)

    def backward(self, gy):
        x, c, a = self.inputs
        y = self.output()
        gx = gy * (x - c) / y
        ga = gy * a / y
        return sum_to(gx, x.shape), sum_to(-gx, c.shape), sum_to(ga, a.shape)


def multiquadratic(x, c, a):
    """f(x) = sqrt((x - c)^2 + a^2) with center c and shape parameter a."""
    return evaluate(Multiquadratic(), x, c, a)


# ----------------------
# Reductions
# ----------------------
class Maxout(Function):
    """Max reduction; rejects reducing over a zero-length axis."""

    def __init__(self, axis=None, keepdims=False):
        self.axis = axis
        self.keepdims = keepdims

    def forward(self, x):
        if x.size == 0:
            reduced = x.shape if self.axis is None else np.take(x.shape, self.axis)
            if 0 in np.atleast_1d(reduced):
                raise InvalidArgumentError("maxout() requires a non-empty sequence")
        return x.max(axis=self.axis, keepdims=self.keepdims)

    def backward(self, gy):
        (x,) = self.inputs
        shape = keepdims_shape(x.shape, self.axis)
        hit = _mask(x.data == self.output().data.reshape(shape))
        return broadcast_to(reshape(gy, shape), x.shape) * hit


def maxout(x, axis=None, keepdims=False):
    """Largest element of x (over all elements unless axis is given).

    Raises:
        InvalidArgumentError: if a reduced axis has length zero, e.g. x == [].
    """
    return evaluate(Maxout(axis, keepdims), x)
