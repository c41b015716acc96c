from scipy.special import expit


def sigmoid(x):
    """ The logistic function, 1 / (1 + exp(-x)), which maps the reals
    into the open interval (0, 1)
    """
    return expit(x)


def sigmoid_derivative(output):
    """ Derivative of the sigmoid expressed in terms of its output value,
    i.e., if `output = sigmoid(x)`, then this returns `d sigmoid / dx`
    evaluated at `x`
    """
    return output * (1.0 - output)
