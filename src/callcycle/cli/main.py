"""Main CLI entry point for callcycle.

    callcycle <solutionPath> <namespaceFilter> [<ignoreList>]
"""

import argparse

from callcycle import __version__

from .cycles import add_cycles_arguments, run_cycles


def build_parser():
    parser = argparse.ArgumentParser(
        description="callcycle - detect cyclic call chains between methods",
        prog="callcycle",
    )
    parser.add_argument("--version", action="version", version=f"callcycle {__version__}")
    add_cycles_arguments(parser)
    return parser


def main(argv=None):
    """Main entry point for the callcycle CLI.

    Returns:
        int: Exit code (0 for success, non-zero for error).
    """
    args = build_parser().parse_args(argv)
    return run_cycles(args)


if __name__ == "__main__":
    raise SystemExit(main())
