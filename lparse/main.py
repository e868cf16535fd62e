"""Parses files of lambda calculus expressions, or runs in command-line mode. Also uses error handling context manager.

Python version must be >=3.6, because error handling requires that dicts are insertion-ordered.
"""

import argparse
import sys

from lparse.lang.error import ErrorHandler
from lparse.lang.session import Session
from lparse.lang.shell import Shell
from lparse.pure.executor import default_executor, TransitionExecutor
from lparse.pure.term import concatenate, Expression, Variable


def demo():
    """Prints a handful of terms built by hand, showing abstraction, concatenation and redundant nesting."""
    x = Variable("X1")
    print(x.print())

    byx = x.abstract(Variable("Y1"))
    print("Form of byx:", byx.print())
    print(byx.display())

    bzbyx = concatenate([byx, x])
    print("Print bzbyx:", bzbyx.print())

    nested_1 = Expression(None, [bzbyx], "(" + bzbyx.print() + ")")
    nested_2 = Expression(None, [nested_1], "(" + nested_1.print() + ")")
    nested_3 = concatenate([nested_2])
    print(nested_3.print())

    print("Testing nested equality:", nested_3.equals(bzbyx))


def main(argv=None):
    """Runs lparse."""
    assert sys.version_info >= (3, 6), "lparse cannot be run with python < 3.6"

    parser = argparse.ArgumentParser(prog="lparse", description="lambda calculus parser")
    parser.add_argument("file", help="file to parse (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--max-depth", type=int, default=TransitionExecutor.MAX_DEPTH,
                        help="maximum nesting depth of parenthesized/λ bodies")
    parser.add_argument("--trace", action="store_true", help="print every parser state transition")
    parser.add_argument("--tree", action="store_true", help="display term trees instead of printed terms")
    parser.add_argument("--demo", action="store_true", help="print demonstration terms and exit")
    args = parser.parse_args(argv)

    if args.demo:
        demo()
        return

    with ErrorHandler(trace=args.trace) as error_handler:
        executor = default_executor(args.max_depth)

        if args.file is not None:
            sess = Session(error_handler, args.file, executor, cmd_line=False, tree=args.tree)
            sess.run()

        else:
            sess = Session(error_handler, Session.SH_FILE, executor, cmd_line=True, tree=args.tree)
            Shell(sess).cmdloop()


if __name__ == "__main__":
    main()
