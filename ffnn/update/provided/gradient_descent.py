from ffnn.update.update_base import UpdateBase


DEFAULT_LEARNING_RATE = 0.5


class GradientDescentUpdate(UpdateBase):
    """ Per-pattern gradient descent on the half squared error.

    Since `gradient_signal = (target - output) * output * (1 - output)`
    already carries the minus sign of the descent direction, each weight
    moves by `learning_rate * gradient_signal * input`. The bias weight
    sees a constant input of 1.
    """

    def __init__(self, learning_rate=DEFAULT_LEARNING_RATE, update_bias=True):
        """ Initialize a gradient descent update rule

        Parameters
        ----------
        learning_rate: float, default=0.5
            The step scale. Must be positive.

        update_bias: bool, default=True
            If False, the bias weights are left at their initial values.

        """
        try:
            learning_rate = float(learning_rate)
        except (ValueError, TypeError):
            msg = "`learning_rate` must be numeric, got {!r}"
            raise ValueError(msg.format(learning_rate))

        if not learning_rate > 0:
            msg = "`learning_rate` must be positive, got {}"
            raise ValueError(msg.format(learning_rate))

        self.learning_rate = learning_rate
        self.update_bias = bool(update_bias)

    def __repr__(self):
        return "<GradientDescentUpdate learning_rate={} update_bias={}>".format(
            self.learning_rate, self.update_bias)

    def update(self, neuron, inputs):
        step = self.learning_rate * neuron.gradient_signal

        neuron.weights[1:] += step * inputs

        if self.update_bias:
            neuron.weights[0] += step
