import numpy


class Pattern:
    """ A fixed capacity vector of floats with an explicit count of valid
    entries. Patterns are used for network inputs, network outputs, and
    training targets. The capacity never changes after creation.
    """
    def __init__(self, capacity, values=None):
        """ Initialize a pattern

        Parameters
        ----------
        capacity: int
            The maximum number of values the pattern can hold

        values: iterable of float, default=None
            Initial values. The count is set to the number of values
            given. The default of None gives a zero-filled pattern
            whose count equals its capacity.

        """
        if (isinstance(capacity, bool) or
                not isinstance(capacity, (int, numpy.integer))):
            msg = "`capacity` must be an int, got {}"
            raise TypeError(msg.format(type(capacity).__name__))

        if capacity < 0:
            msg = "`capacity` must be non-negative, got {}"
            raise ValueError(msg.format(capacity))

        self.data = numpy.zeros(capacity, dtype=float)
        self.count = capacity

        if values is not None:
            self.set_values(values)

    def __repr__(self):
        return "<Pattern count={:d} capacity={:d}>".format(
            self.count, self.capacity)

    def __len__(self):
        return self.count

    def __getitem__(self, index):
        return self.values[index]

    @property
    def capacity(self):
        return self.data.shape[0]

    @property
    def values(self):
        """ A read-only view of the valid entries
        """
        view = self.data[:self.count]
        view.flags.writeable = False
        return view

    def set_values(self, values):
        """ Overwrite the leading entries with `values` and set the count
        to the number of values given
        """
        values = numpy.asarray(values, dtype=float).ravel()

        if values.shape[0] > self.capacity:
            msg = "Got {} values but pattern capacity is {}"
            raise ValueError(msg.format(values.shape[0], self.capacity))

        self.data[:values.shape[0]] = values
        self.count = values.shape[0]
