"""Runs the schemelin interpreter on a source file, or in command-line mode if no file is given. Also uses the error
handling context manager. Called from the schemelin console script.
"""

import argparse
import sys

from schemelin.lang.error import ErrorHandler
from schemelin.lang.session import Session
from schemelin.lang.shell import Shell


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="schemelin", description="Small Scheme dialect interpreter.")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--recursion-limit", type=int, default=None,
                        help="python recursion limit, bounds how deeply programs may nest")
    parser.add_argument("-q", "--quiet", action="store_true", help="do not print results in file mode")
    return parser.parse_args(argv)


def main(argv=None):
    """Runs schemelin interpreter."""
    args = parse_args(argv)

    if args.recursion_limit is not None:
        sys.setrecursionlimit(args.recursion_limit)

    with ErrorHandler() as error_handler:
        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False)
            sess.run()

            if not args.quiet:
                for rendered in sess.rendered():
                    print(rendered)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()


if __name__ == "__main__":
    main()
