import logging

import numpy

from ffnn.core.exception import OutOfMemory
from ffnn.core.neuron import Neuron


_logger_name = __name__.rsplit('.', 1)[-1]
logger = logging.getLogger(_logger_name)


class Layer:
    """ An ordered group of neurons of fixed size
    """
    def __init__(self, neurons=()):
        self._neurons = tuple(neurons)

    def __repr__(self):
        return "<Layer count={:d}>".format(self.count)

    def __len__(self):
        return self.count

    def __iter__(self):
        return iter(self._neurons)

    def __getitem__(self, index):
        return self._neurons[index]

    @property
    def neurons(self):
        return self._neurons

    @property
    def count(self):
        return len(self._neurons)

    @property
    def outputs(self):
        return numpy.array([neuron.output for neuron in self._neurons])

    @property
    def gradient_signals(self):
        return numpy.array(
            [neuron.gradient_signal for neuron in self._neurons])

    @property
    def weights(self):
        """ The weights of all neurons stacked as rows, shape
        (count, n_inputs+1). Rows are copies.
        """
        if self.count == 0:
            return numpy.zeros((0, 0))
        return numpy.vstack([neuron.weights for neuron in self._neurons])


def create_layer(capacity):
    """ Create a layer holding `capacity` uninitialized neurons

    Raises
    ------
    OutOfMemory
        If the neurons could not be allocated

    """
    if capacity < 0:
        msg = "Layer capacity must be non-negative, got {}"
        raise ValueError(msg.format(capacity))

    try:
        layer = Layer(Neuron() for _ in range(capacity))
    except MemoryError as e:
        msg = "Failed to allocate layer with {} neurons"
        raise OutOfMemory(msg.format(capacity)) from e

    logger.debug("Created layer with {} neurons".format(capacity))

    return layer
