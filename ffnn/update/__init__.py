# flake8: noqa

from .update_base import UpdateBase

from .provided.gradient_descent import (
    DEFAULT_LEARNING_RATE,
    GradientDescentUpdate,
)
