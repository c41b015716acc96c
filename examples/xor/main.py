import argparse
import logging

import numpy as np

from ffnn import (
    GradientDescentUpdate, NeuralNetwork, setup_logging, TrainJobHandler)
from ffnn.data.xor import make_dataset
from ffnn.trace import TraceWriter


logger = logging.getLogger('xor')


def parse_args():
    parser = argparse.ArgumentParser(
        description="Train a 2-2-1 network on exclusive-or")
    parser.add_argument('n_epochs', type=int, help="number of epochs")
    parser.add_argument('output_path', help="hdf5 trace file to write")
    parser.add_argument('--seed', type=int, default=1)
    parser.add_argument('--learning-rate', type=float, default=0.5)
    parser.add_argument('--hidden', type=int, default=2,
                        help="neurons in the hidden layer")
    return parser.parse_args()


def print_results(inputs, targets, outputs):
    header = ["Pat"]
    header += ["Input{:<4d}".format(i) for i in range(inputs[0].count)]
    header += ["Target{:<4d}".format(t) for t in range(targets[0].count)]
    header += ["Output{:<4d}".format(o) for o in range(outputs[0].count)]
    print("\n" + "\t".join(header))

    for p, (x, t, o) in enumerate(zip(inputs, targets, outputs)):
        row = [str(p)]
        row += ["{:f}".format(v) for v in x.values]
        row += ["{:f}".format(v) for v in t.values]
        row += ["{:f}".format(v) for v in o.values]
        print("\t".join(row))


def main():
    args = parse_args()
    setup_logging()

    random_state = np.random.RandomState(args.seed)

    # Build the network ###########################################################

    network = NeuralNetwork(n_inputs=2, n_hidden_layers=1, n_outputs=1)
    network.append_hidden_layer(args.hidden)
    network.finalize(random_state=random_state)

    # Train it ####################################################################

    inputs, targets = make_dataset()

    with TraceWriter(network, args.output_path) as writer:
        job = TrainJobHandler(
            network, inputs, targets,
            update_rule=GradientDescentUpdate(
                learning_rate=args.learning_rate),
            random_state=random_state,
            trace_writer=writer)

        history = job.train(args.n_epochs)
        writer.close(n_epochs=job.epoch)

    if len(history) > 0:
        logger.info("Epoch={} Error={:f}".format(job.epoch, history[-1]))
    print_results(inputs, targets, job.outputs)

    network.deinitialize()


if __name__ == '__main__':
    main()
