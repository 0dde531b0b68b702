"""
Dynamite CLI

Trains the sequence classifier on a text format corpus, timing the
static and unrolled formulations against each other.

Usage:
    python -m dynamite Train.ctf
    python -m dynamite Train.ctf --device cuda:0 --max-minibatches 20
    python -m dynamite Train.ctf --seq2seq --log-level DEBUG --log-file run.log
"""
import argparse
import logging
import sys

from dynamite.Training import TrainingConfig, setup_logging, train_sequence_classifier


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dynamite",
                                     description="Train a sequence classifier, static and unrolled")
    parser.add_argument("training_path", help="CNTK text format training file")
    parser.add_argument("--device", default="cpu", help="Torch device, e.g. cpu or cuda:0")
    parser.add_argument("--minibatch-size", type=int, default=200, help="Samples per minibatch")
    parser.add_argument("--learning-rate", type=float, default=0.05, help="SGD learning rate per sample")
    parser.add_argument("--max-minibatches", type=int, default=None, help="Stop after this many minibatches")
    parser.add_argument("--compile", action="store_true", help="torch.compile the static criterion")
    parser.add_argument("--seq2seq", action="store_true", help="Also evaluate the seq2seq auto-encoder")
    parser.add_argument("--seed", type=int, default=None, help="Seed for torch's random generator")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        setup_logging(getattr(logging, args.log_level), args.log_file)
        config = TrainingConfig(training_path=args.training_path,
                                device=args.device,
                                minibatch_size=args.minibatch_size,
                                learning_rate=args.learning_rate,
                                max_minibatches=args.max_minibatches,
                                compile_static=args.compile,
                                run_seq2seq=args.seq2seq,
                                seed=args.seed)
        train_sequence_classifier(config)
    except Exception as err:
        print("EXCEPTION caught: %s" % err, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
