"""Runs a lilt source file, or the interactive shell if no file is given. Also uses the error handling context manager.
Installed as the `lilt` script.
"""

import argparse
import logging
import sys

from lilt.lang.error import ErrorHandler
from lilt.lang.session import Session
from lilt.lang.shell import Shell
from lilt.tree.value import NO_VALUE


def main(argv=None):
    """Runs lilt interpreter. Called from lilt executable script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="lilt")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--entry", default=Session.ENTRY_POINT,
                            help=f"function to run in file mode (default: {Session.ENTRY_POINT})")
        parser.add_argument("--recursion-limit", type=int, default=None,
                            help="maximum depth of the Python stack, which bounds recursion of lilt functions")
        parser.add_argument("-v", "--verbose", action="store_true", help="log interpreter steps")
        args = parser.parse_args(argv)

        if args.verbose:
            logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

        if args.recursion_limit is not None:
            sys.setrecursionlimit(args.recursion_limit)

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, entry_point=args.entry)
            sess.run()

            for value in sess.results:
                if value is not NO_VALUE:
                    print(value)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()


if __name__ == "__main__":
    main()
