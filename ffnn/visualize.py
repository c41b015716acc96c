import matplotlib.pyplot as plt

from ffnn.trace.trace_writer import read_error_history


def plot_error_history(
        path, ax=None, plot_kwargs=dict(c='b', ls='-', lw=1)):
    """ Plot the total error at each step of a trace file

    Parameters
    ----------
    path: str
        A trace file written by :class:`ffnn.trace.TraceWriter`.

    ax: matplotlib.axes.Axes, default=None
        The axes to draw into. The default of None creates a new figure.

    plot_kwargs: args
        Any keyword arguments that can be passed to `matplotlib.pyplot.plot`.

    Returns
    -------
    ax: matplotlib.axes.Axes
    """
    steps, errors = read_error_history(path)

    if steps.shape[0] == 0:
        raise ValueError("Trace file {} has no recorded steps".format(path))

    if ax is None:
        fig = plt.figure(figsize=(6, 4))
        ax = fig.add_subplot(111)

    ax.plot(steps, errors, **plot_kwargs)
    ax.set_xlabel('Step')
    ax.set_ylabel('Total error')
    ax.set_yscale('log')

    return ax
