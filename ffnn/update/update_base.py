import abc


class UpdateBase(abc.ABC):
    """ The abstract base class for weight update rules.
    """

    def __init__(self):
        """ Supply the update instance with attributes that are necessary
        for re-use (e.g., a learning rate)
        """
        pass

    def __call__(self, network):
        """ The __call__ function handles validation and iterates over the
        network's neurons. This function is used internally and calls the
        user-implemented `update` member function once per neuron.
        """
        network.require_finalized('update')

        for index in range(1, network.output_layer_index+1):
            layer = network.layers[index]

            for neuron in layer:
                inputs = network.layers[neuron.input_layer_index].outputs

                if inputs.shape[0] != neuron.n_inputs:
                    msg = "Neuron has {} input weights but {} inputs"
                    raise ValueError(
                        msg.format(neuron.n_inputs, inputs.shape[0]))

                self.update(neuron=neuron, inputs=inputs)

    @abc.abstractmethod
    def update(self, neuron, inputs):
        """ Modify `neuron.weights` in place

        Parameters
        ----------
        neuron: Neuron
            A non-input neuron whose `gradient_signal` is current.

        inputs: ndarray, shape=(neuron.n_inputs,)
            The outputs of the preceding layer.

        """
        raise NotImplementedError
