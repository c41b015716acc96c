import unittest

import numpy

from ffnn.activation import sigmoid, sigmoid_derivative


class TestSigmoid(unittest.TestCase):

    def test_values(self):
        self.assertEqual(sigmoid(0.0), 0.5)
        self.assertAlmostEqual(sigmoid(1.0), 1 / (1 + numpy.exp(-1.0)))
        self.assertAlmostEqual(sigmoid(-2.0), 1 - sigmoid(2.0))

    def test_saturation(self):
        self.assertEqual(sigmoid(-1000.0), 0.0)
        self.assertEqual(sigmoid(1000.0), 1.0)

    def test_derivative(self):
        x = numpy.linspace(-4, 4, 17)
        eps = 1e-6

        numerical = (sigmoid(x + eps) - sigmoid(x - eps)) / (2 * eps)
        numpy.testing.assert_allclose(
            sigmoid_derivative(sigmoid(x)), numerical, atol=1e-9)
