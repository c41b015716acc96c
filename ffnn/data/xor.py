from ffnn.pattern import Pattern


XOR_TABLE = (
    ((0.0, 0.0), (0.0,)),
    ((1.0, 0.0), (1.0,)),
    ((0.0, 1.0), (1.0,)),
    ((1.0, 1.0), (0.0,)),
)


def make_dataset():
    """ The four patterns of the exclusive-or truth table

    Returns
    -------
    inputs, targets: List(Pattern), List(Pattern)
        Inputs have count 2 and targets have count 1.
    """
    inputs = [Pattern(len(x), x) for x, _ in XOR_TABLE]
    targets = [Pattern(len(y), y) for _, y in XOR_TABLE]
    return inputs, targets
