class OutOfMemory(MemoryError):
    """ Raised when allocating layer or weight storage fails. Any partially
    constructed network state is torn down before this is raised.
    """


class ContractViolation(Exception):
    """ Base class for errors that indicate misuse of the network by the
    caller rather than a transient condition
    """


class TooManyHiddenLayers(ContractViolation):
    """ Raised when appending more hidden layers than were reserved when
    the network was constructed
    """


class PatternSizeMismatch(ContractViolation, ValueError):
    """ Raised when a pattern's count does not agree with the layer it is
    copied to or the pattern it is compared against
    """


class NetworkStateError(ContractViolation, RuntimeError):
    """ Raised when an operation is called in the wrong lifecycle state,
    e.g., running `process` before `finalize`
    """
