"""Functions — differentiable operations for autograd.

NumPy-backed Function subclasses: the activation table, the elementwise
arithmetic behind Tensor operators, and the reshape/sum/broadcast plumbing
used to route gradients back to broadcast coefficients.
"""

from fnmath.functions.activation import (
    binary_step,
    elu,
    gaussian,
    gaussian_rbf,
    gelu,
    heaviside,
    identity,
    leaky_relu,
    linear,
    maxout,
    mish,
    multiquadratic,
    prelu,
    relu,
    selu,
    sigmoid,
    silu,
    softplus,
    tanh,
)
from fnmath.functions.function import (
    broadcast_to,
    reshape,
    sum,
    sum_to,
)
from fnmath.functions.math import (
    add,
    div,
    mul,
    neg,
    pow,
    sub,
)
