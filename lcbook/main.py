"""Runs a lcbook source file: reduces its 'main' definition, prints every step of that reduction, or loads the file into
an interactive shell. Also uses error handling context manager. Called from the lcbook console script.
"""

import argparse
import sys

from lcbook.lang.error import ErrorHandler
from lcbook.lang.session import Session
from lcbook.lang.shell import Shell
from lcbook.pure.reduce import REDUCTION_ORDERS, STOP_CONDITIONS


def build_parser():
    parser = argparse.ArgumentParser(prog="lcbook", description="Untyped lambda calculus with named definitions.")
    parser.add_argument("mode", choices=Session.MODES + ["interactive"],
                        help="reduce main once, print every reduction step, or start an interactive shell")
    parser.add_argument("path", help="path to the input file")
    parser.add_argument("-f", "--form", choices=list(STOP_CONDITIONS), default="nf",
                        help="form to reduce to (default: nf)")
    parser.add_argument("-o", "--order", choices=list(REDUCTION_ORDERS), default="normal",
                        help="reduction order (default: normal)")
    parser.add_argument("-l", "--limit", type=int, default=None,
                        help="give up after this many reduction steps (default: no limit)")
    return parser


def main(argv=None):
    """Runs lcbook interpreter. Returns the exit status."""
    args = build_parser().parse_args(argv)

    with ErrorHandler() as error_handler:
        sess = Session(error_handler, args.path, args.form, args.order, args.limit)

        if args.mode == "interactive":
            sess.load(require_main=False)
            error_handler.fatal = False  # errors in the shell are reported, but the session continues
            Shell(sess).cmdloop()
            return 0

        sess.load()
        for term in sess.run(args.mode):
            print(term)

    return 0


if __name__ == "__main__":
    sys.exit(main())
