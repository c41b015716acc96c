# flake8: noqa

from .trace_writer import (
    DEFAULT_TRACE_FILENAME,
    read_error_history,
    read_layer_history,
    TraceWriter,
)
