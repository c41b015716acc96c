import numpy


# Initial weights are uniform on [-WEIGHT_INIT_OFFSET, WEIGHT_INIT_OFFSET)
WEIGHT_INIT_OFFSET = 0.5


class Neuron:
    """ A single sigmoidal unit

    Attributes
    ----------
    output: float
        The activation computed by the most recent forward pass (or the
        injected input value for input layer neurons).

    gradient_signal: float
        Partial derivative of the total error with respect to this
        neuron's weighted sum, as computed by the most recent backward pass.

    weights: ndarray, shape=(n_inputs+1,)
        `weights[0]` is the bias and `weights[i+1]` is the weight applied
        to the output of neuron `i` in the preceding layer. Empty for
        input layer neurons.

    input_layer_index: int or None
        Index of the preceding layer in the owning network's layer list.
        None for input layer neurons.
    """
    __slots__ = ('output', 'gradient_signal', 'weights', 'input_layer_index')

    def __init__(self):
        self.reset()

    def __repr__(self):
        return "<Neuron n_weights={:d} output={:.6f}>".format(
            self.weights.shape[0], self.output)

    def reset(self):
        """ Return the neuron to its unbound, weightless state
        """
        self.output = 0.0
        self.gradient_signal = 0.0
        self.weights = numpy.zeros(0, dtype=float)
        self.input_layer_index = None

    @property
    def n_inputs(self):
        return max(self.weights.shape[0] - 1, 0)

    def initialize(self, input_layer_index, n_inputs, random_state):
        """ Bind the neuron to its preceding layer and draw its weights

        Parameters
        ----------
        input_layer_index: int or None
            Index of the preceding layer. None marks an input neuron,
            which receives no weights.

        n_inputs: int
            Number of neurons in the preceding layer.

        random_state: numpy.random.RandomState
            Source of the uniform [0, 1) draws for the weights.

        """
        if input_layer_index is None:
            weights = numpy.zeros(0, dtype=float)
        else:
            # One extra weight for the bias at index 0
            weights = (random_state.random_sample(n_inputs + 1) -
                       WEIGHT_INIT_OFFSET)

        self.input_layer_index = input_layer_index
        self.weights = weights
        self.output = 0.0
        self.gradient_signal = 0.0

    def weighted_sum(self, inputs):
        """ Bias plus the dot product of the input weights with `inputs`
        """
        return self.weights[0] + numpy.dot(self.weights[1:], inputs)
