"""Uses the pure lambda calculus implementation to normalize a single-expression source file. Also uses the error
handling context manager. Called from the lcnorm console script.
"""

import argparse

from lcnorm.lang.error import ErrorHandler
from lcnorm.lang.session import Session


def positive_int(value):
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"'{value}' is not a positive integer")
    return number


def main(argv=None):
    """Runs the lcnorm interpreter. Called from the lcnorm console script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="lcnorm", description="Reduce a λ-term to normal form, step by step.")
        parser.add_argument("file", help="file containing the λ-term to reduce")
        parser.add_argument("--trace", action="store_true", help="report parsing and reduction details on stderr")
        parser.add_argument("--avoid-capture", action="store_true",
                            help="rename binders during substitution instead of capturing free variables")
        parser.add_argument("--recursion-limit", type=positive_int, default=Session.RECURSION_LIMIT,
                            help=f"python recursion limit for deep terms (default: {Session.RECURSION_LIMIT})")
        args = parser.parse_args(argv)

        error_handler.verbose = args.trace

        sess = Session(error_handler, args.file, args.avoid_capture, args.recursion_limit)
        sess.run()


if __name__ == "__main__":
    main()
