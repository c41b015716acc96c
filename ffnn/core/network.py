import logging

import numpy

from ffnn.activation import sigmoid, sigmoid_derivative
from ffnn.core.exception import (
    NetworkStateError, OutOfMemory, PatternSizeMismatch, TooManyHiddenLayers)
from ffnn.core.layer import Layer, create_layer
from ffnn.update.update_base import UpdateBase


_logger_name = __name__.rsplit('.', 1)[-1]
logger = logging.getLogger(_logger_name)


# Lifecycle states of a network
STATE_UNINITIALIZED = 'uninitialized'
STATE_CONSTRUCTED = 'constructed'
STATE_LAYERS_APPENDED = 'layers-appended'
STATE_FINALIZED = 'finalized'
STATE_TORN_DOWN = 'torn-down'

# States in which the topology may still be changed
BUILDING_STATES = (STATE_CONSTRUCTED, STATE_LAYERS_APPENDED)


def _validate_count(name, value, minimum):
    if isinstance(value, bool) or not isinstance(value, (int, numpy.integer)):
        msg = "`{}` must be an int, got {}"
        raise TypeError(msg.format(name, type(value).__name__))

    if value < minimum:
        msg = "`{}` must be at least {}, got {}"
        raise ValueError(msg.format(name, minimum, value))


class NeuralNetwork:
    """ A fully connected feed-forward network of sigmoidal neurons.

    The network is built in stages: construction reserves room for the
    input layer, the output layer, and up to `n_hidden_layers` hidden
    layers; hidden layers are then appended one at a time; finally
    `finalize` fixes the topology and draws the initial weights. Only a
    finalized network can be run forward or backward.

    Layer 0 is the input layer and `output_layer_index` is the output
    layer. Layers in between are the hidden layers in the order they were
    appended.
    """
    def __init__(self, n_inputs, n_hidden_layers, n_outputs):
        """ Initialize a network

        Parameters
        ----------
        n_inputs: int
            Number of neurons in the input layer (positive).

        n_hidden_layers: int
            The maximum number of hidden layers that may be appended
            (non-negative).

        n_outputs: int
            Number of neurons in the output layer (positive).

        Raises
        ------
        OutOfMemory
            If the layers could not be allocated. All partially allocated
            storage is released first.

        """
        _validate_count('n_inputs', n_inputs, minimum=1)
        _validate_count('n_hidden_layers', n_hidden_layers, minimum=0)
        _validate_count('n_outputs', n_outputs, minimum=1)

        self.state = STATE_UNINITIALIZED
        self.layers = []
        self.max_layers = 0
        self.output_layer_index = 0
        self.last_added_hidden_index = 0
        self.total_error = 0.0

        msg = "Initializing network: inputs={} hidden={} outputs={}"
        logger.debug(msg.format(n_inputs, n_hidden_layers, n_outputs))

        try:
            self._allocate_layers(n_inputs, n_hidden_layers, n_outputs)
        except OutOfMemory:
            self.deinitialize()
            raise

        self.state = STATE_CONSTRUCTED

    def __repr__(self):
        return "<NeuralNetwork layers={} state={}>".format(
            self.layer_counts, self.state)

    def _allocate_layers(self, n_inputs, n_hidden_layers, n_outputs):

        # Always an input and output layer plus the reserved hidden layers
        self.max_layers = 2 + n_hidden_layers
        self.output_layer_index = self.max_layers - 1
        self.last_added_hidden_index = 0

        try:
            self.layers = [Layer() for _ in range(self.max_layers)]
        except MemoryError as e:
            msg = "Failed to allocate {} layer slots"
            raise OutOfMemory(msg.format(self.max_layers)) from e

        self.layers[0] = create_layer(n_inputs)
        self.layers[self.output_layer_index] = create_layer(n_outputs)

    ###########################################################
    # Topology properties

    @property
    def is_finalized(self):
        return self.state == STATE_FINALIZED

    @property
    def input_layer(self):
        return self.layers[0]

    @property
    def output_layer(self):
        return self.layers[self.output_layer_index]

    @property
    def hidden_layers(self):
        return self.layers[1:self.output_layer_index]

    @property
    def active_layers(self):
        """ The input, hidden, and output layers in order; excludes unused
        reserved slots once the network is finalized
        """
        return self.layers[:self.output_layer_index+1]

    @property
    def layer_counts(self):
        return [layer.count for layer in self.layers]

    def require_finalized(self, operation):
        """ Raise NetworkStateError unless the network is finalized
        """
        if not self.is_finalized:
            msg = "`{}` requires a finalized network (state is {})"
            raise NetworkStateError(msg.format(operation, self.state))

    ###########################################################
    # Lifecycle

    def append_hidden_layer(self, count):
        """ Create the next hidden layer with `count` neurons

        Raises
        ------
        TooManyHiddenLayers
            If all the reserved hidden layer slots are used. The hidden
            layer cursor is left unchanged.

        NetworkStateError
            If the network has already been finalized or torn down.

        OutOfMemory
            If the neurons could not be allocated.

        """
        if self.state not in BUILDING_STATES:
            msg = "Cannot append a hidden layer when the state is {}"
            raise NetworkStateError(msg.format(self.state))

        _validate_count('count', count, minimum=1)

        index = self.last_added_hidden_index + 1

        if index >= self.max_layers - 1:
            msg = "All {} reserved hidden layers are already in use"
            raise TooManyHiddenLayers(msg.format(self.max_layers - 2))

        self.layers[index] = create_layer(count)
        self.last_added_hidden_index = index
        self.state = STATE_LAYERS_APPENDED

        logger.debug("Appended hidden layer {} with {} neurons".format(
            index, count))

    def finalize(self, random_state=None):
        """ Fix the topology and initialize every neuron

        If fewer hidden layers were appended than reserved, the output
        layer is moved to the slot right after the last hidden layer and
        the slot it vacates is left empty. Then every non-input neuron is
        bound to its preceding layer and receives `preceding_count + 1`
        weights drawn uniformly from [-0.5, 0.5).

        Parameters
        ----------
        random_state: numpy.random.RandomState, default=None
            Supply for reproducible weights.

        """
        if self.state not in BUILDING_STATES:
            msg = "Cannot finalize a network when the state is {}"
            raise NetworkStateError(msg.format(self.state))

        if random_state is None:
            random_state = numpy.random.RandomState()

        last_slot = self.max_layers - 1
        output_layer_index = self.output_layer_index
        layers = list(self.layers)

        msg = "Finalizing network: max_layers={} last_hidden={}"
        logger.debug(msg.format(
            self.max_layers, self.last_added_hidden_index))

        # The new layout is built on a copy and only committed once every
        # neuron is initialized, so a failure leaves the network untouched
        try:
            if self.last_added_hidden_index + 1 < last_slot:
                # Fewer hidden layers than reserved, so move the output
                # layer to sit directly after the last hidden layer
                output_layer_index = self.last_added_hidden_index + 1
                layers[output_layer_index] = layers[last_slot]
                layers[last_slot] = Layer()

            for index, layer in enumerate(layers[:output_layer_index+1]):
                if index == 0:
                    input_layer_index, n_inputs = None, 0
                else:
                    input_layer_index = index - 1
                    n_inputs = layers[input_layer_index].count

                for neuron in layer:
                    neuron.initialize(
                        input_layer_index=input_layer_index,
                        n_inputs=n_inputs, random_state=random_state)
        except MemoryError as e:
            for layer in layers:
                for neuron in layer:
                    neuron.reset()
            raise OutOfMemory("Failed to allocate neuron weights") from e

        self.layers = layers
        self.output_layer_index = output_layer_index
        logger.debug("Output layer at index {}".format(output_layer_index))

        self.total_error = 0.0
        self.state = STATE_FINALIZED

    def deinitialize(self):
        """ Release all layers. Safe to call any number of times.
        """
        if self.state == STATE_TORN_DOWN:
            return

        logger.debug("Tearing down network {}".format(self.layer_counts))

        self.layers = []
        self.max_layers = 0
        self.output_layer_index = 0
        self.last_added_hidden_index = 0
        self.state = STATE_TORN_DOWN

    ###########################################################
    # Forward propagation

    def set_inputs(self, pattern):
        """ Copy the values of `pattern` into the input layer outputs
        """
        self.require_finalized('set_inputs')

        if pattern.count != self.input_layer.count:
            msg = "Input pattern count {} does not match input layer count {}"
            raise PatternSizeMismatch(
                msg.format(pattern.count, self.input_layer.count))

        for neuron, value in zip(self.input_layer, pattern.values):
            neuron.output = float(value)

    def process(self):
        """ Compute the outputs of every layer after the input layer, in
        layer order
        """
        self.require_finalized('process')

        for index in range(1, self.output_layer_index+1):
            inputs = self.layers[index-1].outputs

            for neuron in self.layers[index]:
                neuron.output = float(sigmoid(neuron.weighted_sum(inputs)))

    def get_outputs(self, pattern):
        """ Copy the output layer outputs into `pattern`

        If the pattern capacity is smaller than the output layer, only
        the leading outputs are copied. The pattern count is set to the
        number of values copied.

        Returns
        -------
        pattern: Pattern
            The same pattern instance that was passed in.

        """
        self.require_finalized('get_outputs')

        count = min(pattern.capacity, self.output_layer.count)
        pattern.data[:count] = self.output_layer.outputs[:count]
        pattern.count = count

        return pattern

    ###########################################################
    # Backward propagation

    def adjust(self, output_pattern, target_pattern):
        """ Compute the error and back propagate the gradient signals

        Parameters
        ----------
        output_pattern: Pattern
            The network outputs, as filled in by `get_outputs`.

        target_pattern: Pattern
            The desired outputs.

        Returns
        -------
        total_error: float
            Half the sum of the squared differences between the targets
            and the outputs.

        """
        self.require_finalized('adjust')

        if output_pattern.count != target_pattern.count:
            msg = "Output pattern count {} does not match target count {}"
            raise PatternSizeMismatch(
                msg.format(output_pattern.count, target_pattern.count))

        if output_pattern.count != self.output_layer.count:
            msg = "Pattern count {} does not match output layer count {}"
            raise PatternSizeMismatch(
                msg.format(output_pattern.count, self.output_layer.count))

        total_error = 0.0
        outputs = output_pattern.values
        targets = target_pattern.values

        for neuron, output, target in zip(
                self.output_layer, outputs, targets):
            err = target - output
            neuron.gradient_signal = float(err * sigmoid_derivative(output))
            total_error += 0.5 * err * err

        self.total_error = float(total_error)

        # Propagate back to, but not into, the input layer. The bias
        # weights (column 0) play no part in the recursion.
        for index in range(self.output_layer_index, 1, -1):
            current_layer = self.layers[index]
            previous_layer = self.layers[index-1]

            gradient_signals = current_layer.gradient_signals
            weights = current_layer.weights

            for j, neuron in enumerate(previous_layer):
                weighted = numpy.dot(gradient_signals, weights[:, j+1])
                neuron.gradient_signal = float(
                    weighted * sigmoid_derivative(neuron.output))

        return self.total_error

    ###########################################################
    # Weight update

    def apply_update(self, update_rule):
        """ Apply a weight update rule using the gradient signals from the
        most recent call to `adjust`
        """
        if not isinstance(update_rule, UpdateBase):
            msg = "`update_rule` should be an instance of {}, got {}"
            raise TypeError(msg.format(
                UpdateBase.__name__, type(update_rule).__name__))

        update_rule(self)
