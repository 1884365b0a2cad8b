from fnmath.core import (
    Config,
    Function,
    Tensor,
    as_tensor,
    evaluate,
    no_grad,
    using_config,
)
from fnmath.errors import InvalidArgumentError
from fnmath.functions import (
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

# Explicit exports for `from fnmath import ...`
__all__ = [
    "Config",
    "Function",
    "Tensor",
    "as_tensor",
    "evaluate",
    "no_grad",
    "using_config",
    "InvalidArgumentError",
    "binary_step",
    "elu",
    "gaussian",
    "gaussian_rbf",
    "gelu",
    "heaviside",
    "identity",
    "leaky_relu",
    "linear",
    "maxout",
    "mish",
    "multiquadratic",
    "prelu",
    "relu",
    "selu",
    "sigmoid",
    "silu",
    "softplus",
    "tanh",
]
