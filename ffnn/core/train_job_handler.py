import logging

import numpy

from ffnn.core.network import NeuralNetwork
from ffnn.pattern import Pattern
from ffnn.update.update_base import UpdateBase


_logger_name = __name__.rsplit('.', 1)[-1]
logger = logging.getLogger(_logger_name)

DEFAULT_ERROR_THRESHOLD = 0.0004
DEFAULT_LOG_INTERVAL = 100


def setup_logging(filename=None, level=logging.INFO):
    """ Sets up logging formatting, etc

    Parameters
    ----------
    filename: str, default=None
        If given, log records are written to this file (overwriting any
        existing file). The default of None logs to stderr.

    level: int, default=logging.INFO
        The root logger level.
    """
    line_fmt = ("[%(asctime)s] [%(name)s:%(lineno)d] "
                "%(levelname)-8s %(message)s")

    date_fmt = "%Y-%m-%d %H:%M:%S"

    if filename is None:
        logging.basicConfig(format=line_fmt, datefmt=date_fmt, level=level)
    else:
        logging.basicConfig(
            filename=filename, filemode='w', format=line_fmt,
            datefmt=date_fmt, level=level)


class TrainJobHandler:
    """ Manages the per-pattern training loop of a network over a fixed
    set of input and target patterns
    """
    def __init__(self,
                 network,
                 inputs,
                 targets,
                 update_rule,
                 random_state=None,
                 error_threshold=DEFAULT_ERROR_THRESHOLD,
                 log_interval=DEFAULT_LOG_INTERVAL,
                 trace_writer=None,
                 ):
        """
        Parameters
        ----------
        network: NeuralNetwork
            A finalized network.

        inputs: List(Pattern)
            The input patterns. Each must match the input layer count.

        targets: List(Pattern)
            The target pattern for each input. Each must match the output
            layer count.

        update_rule: UpdateBase
            Applied after each pattern's backward pass.

        random_state: numpy.random.RandomState, default=None
            Used to shuffle the presentation order every epoch. Supply for
            reproducible results.

        error_threshold: float, default=0.0004
            Training stops once an epoch's summed error falls below this.

        log_interval: int, default=100
            The epoch error is logged every `log_interval` epochs.

        trace_writer: TraceWriter, default=None
            If given, the network state is recorded after every pattern.
        """
        if not isinstance(network, NeuralNetwork):
            msg = "`network` should be a NeuralNetwork, got {}"
            raise TypeError(msg.format(type(network).__name__))

        network.require_finalized('TrainJobHandler')

        if not isinstance(update_rule, UpdateBase):
            msg = "`update_rule` should be an instance of {}, got {}"
            raise TypeError(msg.format(
                UpdateBase.__name__, type(update_rule).__name__))

        if len(inputs) != len(targets):
            msg = "Mismatch in number of patterns: inputs ({}), targets ({})"
            raise ValueError(msg.format(len(inputs), len(targets)))

        if len(inputs) == 0:
            raise ValueError("At least one training pattern is required")

        n_in = network.input_layer.count
        n_out = network.output_layer.count

        for i, (input_, target) in enumerate(zip(inputs, targets)):
            if not isinstance(input_, Pattern):
                msg = "inputs[{}] (type {}) was not a Pattern"
                raise TypeError(msg.format(i, type(input_).__name__))

            if not isinstance(target, Pattern):
                msg = "targets[{}] (type {}) was not a Pattern"
                raise TypeError(msg.format(i, type(target).__name__))

            if input_.count != n_in:
                msg = "inputs[{}] count ({}) does not match input layer ({})"
                raise ValueError(msg.format(i, input_.count, n_in))

            if target.count != n_out:
                msg = "targets[{}] count ({}) does not match output layer ({})"
                raise ValueError(msg.format(i, target.count, n_out))

        try:
            self.error_threshold = float(error_threshold)
        except (ValueError, TypeError):
            msg = "`error_threshold` must be numeric, got {!r}"
            raise ValueError(msg.format(error_threshold))

        if int(log_interval) < 1:
            msg = "`log_interval` must be a positive int, got {}"
            raise ValueError(msg.format(log_interval))

        self.network = network
        self.inputs = list(inputs)
        self.targets = list(targets)
        self.update_rule = update_rule
        self.log_interval = int(log_interval)
        self.trace_writer = trace_writer

        if random_state is None:
            random_state = numpy.random.RandomState()
        self.random_state = random_state

        # One output pattern per input so the last outputs can be reported
        self.outputs = [Pattern(n_out) for _ in self.inputs]

        self.epoch = 0
        self.error_history = []

    @property
    def n_patterns(self):
        return len(self.inputs)

    def _log_with_epoch(self, msg, level='info'):
        """ Write to the logger with the current epoch number prepended
        to the log message
        """
        full_message = "(Epoch = {:06d}) {:s}".format(self.epoch, msg)

        if level == 'info':
            logger.info(full_message)
        elif level == 'debug':
            logger.debug(full_message)
        elif level == 'warning':
            logger.warning(full_message)
        elif level == 'error':
            logger.error(full_message)
        else:
            raise ValueError("Unknown log level: {}".format(level))

    def shuffled_order(self):
        """ Returns a random permutation of the pattern indices

        Each position is swapped with a uniformly chosen position at or
        after it, so one uniform draw is consumed per pattern.
        """
        n = self.n_patterns
        order = list(range(n))

        for p in range(n):
            rp = p + int(self.random_state.random_sample() * (n - p))
            order[p], order[rp] = order[rp], order[p]

        return order

    def run_epoch(self):
        """ Present every pattern once in shuffled order, updating the
        weights after each one

        Returns
        -------
        error: float
            The summed error over all the patterns of the epoch.
        """
        error = 0.0
        network = self.network

        for position, p in enumerate(self.shuffled_order()):
            network.set_inputs(self.inputs[p])
            network.process()
            network.get_outputs(self.outputs[p])
            error += network.adjust(self.outputs[p], self.targets[p])
            network.apply_update(self.update_rule)

            if self.trace_writer is not None:
                self.trace_writer.begin_epoch(
                    self.epoch * self.n_patterns + position)
                self.trace_writer.write_epoch()
                self.trace_writer.end_epoch()

        return error

    def train(self, n_epochs):
        """ Run up to `n_epochs` epochs, stopping early once the epoch
        error falls below the error threshold

        Returns
        -------
        error_history: ndarray, shape=(n_epochs_run,)
            The summed error of each epoch that was run.
        """
        if int(n_epochs) < 0:
            msg = "`n_epochs` must be non-negative, got {}"
            raise ValueError(msg.format(n_epochs))

        for _ in range(int(n_epochs)):
            error = self.run_epoch()
            self.error_history.append(error)

            if self.epoch % self.log_interval == 0:
                self._log_with_epoch("error={:.6f}".format(error))

            if error < self.error_threshold:
                msg = "Error {:.6f} below threshold {:.6f}; stopping"
                self._log_with_epoch(msg.format(error, self.error_threshold))
                self.epoch += 1
                break

            self.epoch += 1

        return numpy.array(self.error_history)
