import logging
import os

import h5py
import numpy


_logger_name = __name__.rsplit('.', 1)[-1]
logger = logging.getLogger(_logger_name)


DEFAULT_TRACE_FILENAME = 'trace.h5'

# Keys into the trace file
STEP_KEY = 'step-{:08d}'
LAYER_KEY = 'layer-{:d}'
OUTPUT_KEY = 'output'
GRADIENT_SIGNAL_KEY = 'gradient-signal'
WEIGHTS_KEY = 'weights'
TOTAL_ERROR_ATTR = 'total-error'
STEP_ATTR = 'step'
LAYER_COUNTS_ATTR = 'layer-counts'
OUTPUT_LAYER_INDEX_ATTR = 'output-layer-index'
N_EPOCHS_ATTR = 'n-epochs'


class TraceWriter:
    """ Records the state of a network at each training step into an hdf5
    file for offline inspection and visualization.

    The format, assuming `hf` is an h5py `File`, is as follows::

        hf.attrs
        |_ layer-counts
        |_ output-layer-index
        |_ n-epochs (once closed)
        'step-00000000'
        |_ attrs
        |  |_ step
        |  |_ total-error
        |_ 'layer-0'
        |  |_ output
        |  |_ gradient-signal
        |_ 'layer-1'
           |_ output
           |_ gradient-signal
           |_ weights, shape=(count, n_inputs+1)

    Example
    -------
    with TraceWriter(network, 'trace.h5') as writer:
        writer.begin_epoch(0)
        writer.write_epoch()
        writer.end_epoch()

    """
    def __init__(self, network, path=DEFAULT_TRACE_FILENAME, mode='w'):
        """ Initialize a trace writer

        Parameters
        ----------
        network: NeuralNetwork
            A finalized network whose state is recorded.

        path: str, default='trace.h5'
            The hdf5 file to create.

        mode: str, default='w'
            Passed to `h5py.File`. Use 'w-' to refuse overwriting an
            existing file.

        """
        network.require_finalized('TraceWriter')

        self.network = network
        self.path = os.path.abspath(path)
        self._group = None
        self._n_steps = 0

        self._h5 = h5py.File(self.path, mode=mode)
        self._h5.attrs[LAYER_COUNTS_ATTR] = numpy.array(
            [layer.count for layer in network.active_layers])
        self._h5.attrs[OUTPUT_LAYER_INDEX_ATTR] = network.output_layer_index

        logger.debug("Opened trace file {}".format(self.path))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    @property
    def is_open(self):
        return self._h5 is not None

    @property
    def n_steps(self):
        return self._n_steps

    def _require_open(self):
        if not self.is_open:
            raise RuntimeError("Trace file {} is closed".format(self.path))

    def _require_group(self, operation):
        self._require_open()
        if self._group is None:
            msg = "`{}` called without a preceding `begin_epoch`"
            raise RuntimeError(msg.format(operation))

    def begin_epoch(self, step):
        """ Start a new trace entry for training step `step`
        """
        self._require_open()

        if self._group is not None:
            msg = "`begin_epoch({})` called before `end_epoch` of step {}"
            raise RuntimeError(msg.format(step, self._group.attrs[STEP_ATTR]))

        self._group = self._h5.create_group(STEP_KEY.format(step))
        self._group.attrs[STEP_ATTR] = step

    def write_epoch(self):
        """ Store the outputs, gradient signals, and weights of every layer
        """
        self._require_group('write_epoch')

        for index, layer in enumerate(self.network.active_layers):
            layer_group = self._group.create_group(LAYER_KEY.format(index))
            layer_group.create_dataset(OUTPUT_KEY, data=layer.outputs)
            layer_group.create_dataset(
                GRADIENT_SIGNAL_KEY, data=layer.gradient_signals)

            if index > 0:
                layer_group.create_dataset(WEIGHTS_KEY, data=layer.weights)

    def end_epoch(self):
        """ Close out the current entry, recording the network's error
        """
        self._require_group('end_epoch')

        self._group.attrs[TOTAL_ERROR_ATTR] = self.network.total_error
        self._group = None
        self._n_steps += 1

    def close(self, n_epochs=None):
        """ Record the number of epochs (if given) and close the file.
        Calling this more than once does nothing.
        """
        if not self.is_open:
            return

        if n_epochs is not None:
            self._h5.attrs[N_EPOCHS_ATTR] = n_epochs

        self._h5.close()
        self._h5 = None
        self._group = None

        logger.debug("Closed trace file {} after {} steps".format(
            self.path, self._n_steps))


def _iterate_step_groups(hf):
    step_keys = sorted(key for key in hf.keys() if key.startswith('step-'))
    for key in step_keys:
        yield hf[key]


def read_error_history(path):
    """ Read the total error recorded at each step of a trace file

    Returns
    -------
    steps, errors: ndarray (dtype=int), ndarray (dtype=float)

    """
    with h5py.File(path, mode='r') as hf:
        steps = []
        errors = []

        for group in _iterate_step_groups(hf):
            steps.append(group.attrs[STEP_ATTR])
            errors.append(group.attrs[TOTAL_ERROR_ATTR])

    return numpy.array(steps, dtype=int), numpy.array(errors, dtype=float)


def read_layer_history(path, layer_index, key=OUTPUT_KEY):
    """ Stack a per-layer dataset across every step of a trace file

    Parameters
    ----------
    path: str
        The trace file.

    layer_index: int
        Which layer to read.

    key: str, default='output'
        One of 'output', 'gradient-signal', or 'weights'.

    Returns
    -------
    history: ndarray, shape=(n_steps,) + dataset shape

    """
    if key not in (OUTPUT_KEY, GRADIENT_SIGNAL_KEY, WEIGHTS_KEY):
        raise ValueError("Unknown trace key: {}".format(key))

    with h5py.File(path, mode='r') as hf:
        layer_key = LAYER_KEY.format(layer_index)
        history = [
            group[layer_key][key][...]
            for group in _iterate_step_groups(hf)
        ]

    return numpy.array(history)
