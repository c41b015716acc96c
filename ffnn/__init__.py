# flake8: noqa

from ._version import version as __version__

from .core.exception import (
    ContractViolation,
    NetworkStateError,
    OutOfMemory,
    PatternSizeMismatch,
    TooManyHiddenLayers,
)
from .core.layer import create_layer, Layer
from .core.network import NeuralNetwork
from .core.neuron import Neuron
from .core.train_job_handler import setup_logging, TrainJobHandler
from .pattern import Pattern
from .update import GradientDescentUpdate, UpdateBase
