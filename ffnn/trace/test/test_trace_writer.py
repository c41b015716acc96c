import os
import tempfile
import unittest

import h5py
import numpy

from ffnn.core.exception import NetworkStateError
from ffnn.core.network import NeuralNetwork
from ffnn.pattern import Pattern
from ffnn.trace import read_error_history, read_layer_history, TraceWriter


class TestTraceWriter(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp_dir.name, 'trace.h5')

        self.network = NeuralNetwork(n_inputs=2, n_hidden_layers=2,
                                     n_outputs=1)
        self.network.append_hidden_layer(3)
        self.network.finalize(random_state=numpy.random.RandomState(1234))

    def tearDown(self):
        self.tmp_dir.cleanup()

    def _step(self, x, target):
        output = Pattern(1)
        self.network.set_inputs(Pattern(2, x))
        self.network.process()
        self.network.get_outputs(output)
        return self.network.adjust(output, Pattern(1, [target]))

    def test_requires_finalized_network(self):
        network = NeuralNetwork(n_inputs=2, n_hidden_layers=0, n_outputs=1)

        with self.assertRaises(NetworkStateError):
            TraceWriter(network, self.path)

    def test_write_and_read(self):
        errors = []

        with TraceWriter(self.network, self.path) as writer:
            for step, x in enumerate(([0.0, 1.0], [1.0, 1.0], [0.5, 0.0])):
                errors.append(self._step(x, target=1.0))
                writer.begin_epoch(step)
                writer.write_epoch()
                writer.end_epoch()

            self.assertEqual(writer.n_steps, 3)
            writer.close(n_epochs=3)

        steps, recorded = read_error_history(self.path)
        numpy.testing.assert_array_equal(steps, [0, 1, 2])
        numpy.testing.assert_array_equal(recorded, errors)

        with h5py.File(self.path, mode='r') as hf:
            # The unused reserved slot is not recorded
            numpy.testing.assert_array_equal(
                hf.attrs['layer-counts'], [2, 3, 1])
            self.assertEqual(hf.attrs['output-layer-index'], 2)
            self.assertEqual(hf.attrs['n-epochs'], 3)
            self.assertNotIn('weights', hf['step-00000000']['layer-0'])

        weights = read_layer_history(self.path, 1, key='weights')
        self.assertEqual(weights.shape, (3, 3, 3))
        numpy.testing.assert_array_equal(
            weights[-1], self.network.layers[1].weights)

        outputs = read_layer_history(self.path, 2)
        self.assertEqual(outputs.shape, (3, 1))

        signals = read_layer_history(self.path, 1, key='gradient-signal')
        numpy.testing.assert_array_equal(
            signals[-1], self.network.layers[1].gradient_signals)

    def test_unknown_key(self):
        with TraceWriter(self.network, self.path):
            pass

        with self.assertRaises(ValueError):
            read_layer_history(self.path, 0, key='bias')

    def test_protocol_errors(self):
        writer = TraceWriter(self.network, self.path)

        with self.assertRaises(RuntimeError):
            writer.write_epoch()

        with self.assertRaises(RuntimeError):
            writer.end_epoch()

        writer.begin_epoch(0)
        with self.assertRaises(RuntimeError):
            writer.begin_epoch(1)

        writer.close()
        writer.close()

        self.assertFalse(writer.is_open)
        with self.assertRaises(RuntimeError):
            writer.begin_epoch(2)

    def test_refuses_overwrite(self):
        with TraceWriter(self.network, self.path):
            pass

        with self.assertRaises(OSError):
            TraceWriter(self.network, self.path, mode='w-')
