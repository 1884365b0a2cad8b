import matplotlib.pyplot as plt
import numpy as np

import fnmath.functions as F
from fnmath import Tensor

x = np.linspace(-4, 4, 401)

curves = {
    "binary_step": F.binary_step,
    "relu": F.relu,
    "leaky_relu": lambda v: F.leaky_relu(v, slope=0.1),
    "elu": lambda v: F.elu(1.0, v),
    "selu": F.selu,
    "gelu": F.gelu,
    "silu": F.silu,
    "mish": F.mish,
    "softplus": F.softplus,
    "sigmoid": F.sigmoid,
    "tanh": F.tanh,
    "gaussian": F.gaussian,
}

fig, axes = plt.subplots(3, 4, figsize=(12, 8), sharex=True)
for ax, (name, f) in zip(axes.flat, curves.items()):
    t = Tensor(x.copy())
    y = f(t)
    y.sum().backward()
    ax.plot(x, y.data, label="f(x)")
    ax.plot(x, t.grad.data, linestyle="--", label="f'(x)")
    ax.set_title(name)
    ax.grid(True)
axes.flat[0].legend()
fig.tight_layout()
plt.show()
