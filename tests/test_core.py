import sys
import threading
import unittest

import numpy as np

import fnmath
import fnmath.functions as F
from fnmath import Config, Tensor, no_grad, using_config


class TestConfig(unittest.TestCase):
    def test_no_grad_skips_graph(self):
        x = Tensor(np.array([1.0, -2.0]))
        with no_grad():
            y = F.relu(x)
        self.assertIsNone(y.creator)
        self.assertTrue(Config.enable_backprop)

    def test_using_config_restores_on_error(self):
        with self.assertRaises(RuntimeError):
            with using_config("enable_backprop", False):
                raise RuntimeError("boom")
        self.assertTrue(Config.enable_backprop)

    def test_plain_call_failure_leaves_config_alone(self):
        with self.assertRaises(fnmath.InvalidArgumentError):
            F.maxout([])
        self.assertTrue(Config.enable_backprop)


class TestTensor(unittest.TestCase):
    def test_operators_build_graph(self):
        x = Tensor(np.array(3.0))
        y = x * x + 2 * x - 1 / x
        y.backward()
        self.assertAlmostEqual(float(x.grad.data), 2 * 3.0 + 2 + 1 / 9.0)

    def test_composed_activations(self):
        x = Tensor(np.array([0.5, -1.5]))
        y = F.sigmoid(F.linear(2.0, x, 0.5))
        y.sum().backward()
        s = 1 / (1 + np.exp(-(2.0 * x.data + 0.5)))
        np.testing.assert_allclose(x.grad.data, 2.0 * s * (1 - s))

    def test_max_method(self):
        x = Tensor(np.array([[1.0, 4.0], [3.0, 2.0]]))
        y = x.max(axis=0)
        np.testing.assert_array_equal(y.data, [3.0, 4.0])
        y.sum().backward()
        np.testing.assert_array_equal(x.grad.data, [[0.0, 1.0], [1.0, 0.0]])

    def test_sum_backward_with_create_graph(self):
        x = Tensor(np.array([1.0, 2.0]))
        F.tanh(x).sum().backward(create_graph=True)
        gx = x.grad
        t = np.tanh(x.data)
        np.testing.assert_allclose(gx.data, 1 - t**2)

        x.cleargrad()
        gx.sum().backward()
        np.testing.assert_allclose(x.grad.data, -2 * t * (1 - t**2))

    def test_sum_axis_backward(self):
        x = Tensor(np.arange(6.0).reshape(2, 3))
        y = x.sum(axis=-1)
        self.assertEqual(y.shape, (2,))
        (y * Tensor(np.array([1.0, 2.0]))).sum().backward()
        np.testing.assert_array_equal(x.grad.data, [[1.0] * 3, [2.0] * 3])

    def test_shared_input_accumulates(self):
        x = Tensor(np.array(0.4))
        y = F.sigmoid(x) + F.tanh(x)
        y.backward()
        s, t = 1 / (1 + np.exp(-0.4)), np.tanh(0.4)
        self.assertAlmostEqual(float(x.grad.data), s * (1 - s) + 1 - t**2)

    def test_evaluate(self):
        self.assertIsInstance(fnmath.evaluate(F.activation.ReLU(), 2.0), float)
        self.assertIsInstance(fnmath.evaluate(F.activation.ReLU(), Tensor(2.0)), Tensor)

    def test_plain_result_does_not_alias_input(self):
        xs = np.array([1.0, -2.0])
        y = F.identity(xs)
        self.assertFalse(np.shares_memory(y, xs))


class TestConcurrency(unittest.TestCase):
    def setUp(self):
        self.interval = sys.getswitchinterval()
        sys.setswitchinterval(1e-6)

    def tearDown(self):
        sys.setswitchinterval(self.interval)

    def test_plain_and_tensor_calls_across_threads(self):
        xs = np.linspace(-3, 3, 7)
        expected = F.gelu(xs)
        failures = []

        def plain_calls():
            for _ in range(500):
                if F.relu(1.0) != 1.0:
                    failures.append("relu")
                if not np.array_equal(F.gelu(xs), expected):
                    failures.append("gelu")

        def tensor_calls():
            for _ in range(500):
                y = F.relu(Tensor(np.array(1.0)))
                if y.creator is None:
                    failures.append("graph")

        threads = [threading.Thread(target=plain_calls) for _ in range(4)]
        threads.append(threading.Thread(target=tensor_calls))
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(failures, [])
        self.assertTrue(Config.enable_backprop)

        x = Tensor(np.array(1.0))
        y = F.relu(x)
        self.assertIsNotNone(y.creator)
        y.backward()
        self.assertEqual(float(x.grad.data), 1.0)
