"""Utilities — numerical gradient checks.

Used to validate the analytic backward of every activation against central
differences.
"""

import numpy as np

import fnmath


def numerical_grad(f, x, *args, eps: float = 1e-4, **kwargs) -> np.ndarray:
    """
    Central-difference gradient of sum(f(x)) at `x`.
    `f` may return a plain value or a fnmath.Tensor.
    """
    x = np.array(x, dtype=np.float64)
    grad = np.zeros_like(x)

    for idx in np.ndindex(*x.shape):
        tmp = x[idx]
        x[idx] = tmp + eps
        y1 = _value(f(x, *args, **kwargs)).sum()
        x[idx] = tmp - eps
        y2 = _value(f(x, *args, **kwargs)).sum()
        x[idx] = tmp
        grad[idx] = (y1 - y2) / (2 * eps)
    return grad


def gradient_check(
    f, x, *args, rtol: float = 1e-4, atol: float = 1e-5, **kwargs
) -> bool:
    """
    Compare the backprop gradient of `f` w.r.t. `x` with central differences.
    `f` takes `x` as its first positional argument. Returns True on a match.
    """
    num_grad = numerical_grad(f, x, *args, **kwargs)

    x = fnmath.Tensor(np.array(x, dtype=np.float64))
    f(x, *args, **kwargs).backward()
    bp_grad = x.grad.data

    ok = bp_grad.shape == num_grad.shape and np.allclose(
        num_grad, bp_grad, rtol=rtol, atol=atol
    )
    if not ok:
        print("\n========== FAILED (Gradient Check) ==========")
        print("Numerical Grad:", num_grad.shape, num_grad.flatten()[:10])
        print("Backprop Grad:", bp_grad.shape, bp_grad.flatten()[:10])
    return ok


def _value(y):
    return np.asarray(y.data if isinstance(y, fnmath.Tensor) else y)
