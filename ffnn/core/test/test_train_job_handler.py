import os
import tempfile
import unittest

import numpy

from ffnn.core.exception import NetworkStateError
from ffnn.core.network import NeuralNetwork
from ffnn.core.train_job_handler import TrainJobHandler
from ffnn.data.xor import make_dataset
from ffnn.pattern import Pattern
from ffnn.trace import read_error_history, TraceWriter
from ffnn.update import GradientDescentUpdate


def make_xor_network(seed):
    network = NeuralNetwork(n_inputs=2, n_hidden_layers=1, n_outputs=1)
    network.append_hidden_layer(2)
    network.finalize(random_state=numpy.random.RandomState(seed))
    return network


class TestTrainJobHandler(unittest.TestCase):

    def setUp(self):
        self.inputs, self.targets = make_dataset()
        self.network = make_xor_network(seed=1)
        self.update_rule = GradientDescentUpdate(learning_rate=0.5)

    def _make_job(self, **kwargs):
        kwargs.setdefault('random_state', numpy.random.RandomState(1))
        return TrainJobHandler(self.network, self.inputs, self.targets,
                               self.update_rule, **kwargs)

    def test_requires_finalized_network(self):
        network = NeuralNetwork(n_inputs=2, n_hidden_layers=1, n_outputs=1)

        with self.assertRaises(NetworkStateError):
            TrainJobHandler(network, self.inputs, self.targets,
                            self.update_rule)

    def test_pattern_validation(self):
        with self.assertRaises(ValueError):
            TrainJobHandler(self.network, self.inputs, self.targets[:3],
                            self.update_rule)

        with self.assertRaises(ValueError):
            TrainJobHandler(self.network, [], [], self.update_rule)

        with self.assertRaises(ValueError):
            TrainJobHandler(self.network, [Pattern(3)], [Pattern(1)],
                            self.update_rule)

        with self.assertRaises(ValueError):
            TrainJobHandler(self.network, [Pattern(2)], [Pattern(2)],
                            self.update_rule)

        with self.assertRaises(TypeError):
            TrainJobHandler(self.network, [[0.0, 1.0]], [Pattern(1)],
                            self.update_rule)

    def test_update_rule_validation(self):
        with self.assertRaises(TypeError):
            TrainJobHandler(self.network, self.inputs, self.targets,
                            update_rule=0.5)

    def test_shuffled_order_is_permutation(self):
        job = self._make_job()

        for _ in range(20):
            order = job.shuffled_order()
            self.assertEqual(sorted(order), [0, 1, 2, 3])

    def test_shuffled_order_is_reproducible(self):
        orders1 = [self._make_job().shuffled_order() for _ in range(5)]
        orders2 = [self._make_job().shuffled_order() for _ in range(5)]
        self.assertEqual(orders1, orders2)

    def test_early_stop(self):
        job = self._make_job(error_threshold=10.0)
        history = job.train(100)

        self.assertEqual(history.shape, (1,))
        self.assertEqual(job.epoch, 1)

    def test_zero_epochs(self):
        job = self._make_job()
        history = job.train(0)

        self.assertEqual(history.shape, (0,))
        self.assertEqual(job.epoch, 0)

    def test_outputs_filled(self):
        job = self._make_job()
        job.run_epoch()

        for output in job.outputs:
            self.assertEqual(output.count, 1)
            self.assertTrue(0 < output[0] < 1)

    def test_trace_written(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = os.path.join(tmp_dir, 'trace.h5')

            with TraceWriter(self.network, path) as writer:
                job = self._make_job(trace_writer=writer)
                job.train(3)

            steps, errors = read_error_history(path)

        numpy.testing.assert_array_equal(steps, numpy.arange(12))
        self.assertTrue((errors >= 0).all())


class TestXorEndToEnd(unittest.TestCase):

    def test_xor_converges(self):
        inputs, targets = make_dataset()
        n_epochs = 5000
        error_threshold = 0.01

        # Some initial weights land in a local minimum, so try a few seeds
        for seed in range(10):
            network = make_xor_network(seed)
            job = TrainJobHandler(
                network, inputs, targets,
                update_rule=GradientDescentUpdate(learning_rate=2.0),
                random_state=numpy.random.RandomState(seed),
                error_threshold=error_threshold)

            history = job.train(n_epochs)

            if history[-1] < error_threshold:
                break

        self.assertLess(history[-1], error_threshold)
        self.assertLess(history.shape[0], n_epochs)

        # The error trends downward
        first_half, second_half = numpy.array_split(history, 2)
        self.assertLess(second_half.mean(), first_half.mean())
        self.assertLess(history[-1], history[0])

        # And the trained network solves xor
        output = Pattern(1)
        for input_, target in zip(inputs, targets):
            network.set_inputs(input_)
            network.process()
            network.get_outputs(output)
            self.assertEqual(output[0] > 0.5, target[0] > 0.5)
