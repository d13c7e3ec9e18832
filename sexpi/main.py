"""Runs sexpi source files or starts the interactive shell. Also uses error handling context manager. Called from the
sexpi console script.
"""

import argparse
import sys

from sexpi.lang.error import ErrorHandler
from sexpi.lang.session import Session
from sexpi.lang.shell import Shell


def main(argv=None):
    """Runs sexpi interpreter. Called from sexpi console script."""
    assert sys.version_info >= (3, 8), "sexpi cannot be run with python < 3.8"

    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="sexpi")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--tokens", help="print the tokens of each chunk before parsing", action="store_true")
        parser.add_argument("--tree", help="print each syntax tree before evaluating", action="store_true")
        parser.add_argument("--trace", help="print evaluation steps", action="store_true")
        parser.add_argument("--recursion-limit", help="maximum Python recursion depth", type=int, default=5000)
        args = parser.parse_args(argv)

        error_handler.trace = args.trace
        sys.setrecursionlimit(args.recursion_limit)

        options = {"show_tokens": args.tokens, "show_tree": args.tree}

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, echo=True, **options)
            sess.run()

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, **options)).cmdloop()
