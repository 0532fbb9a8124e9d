"""
CLI functionality for call-cycle detection.
"""

import argparse
import logging
import sys
from pathlib import Path

from callcycle.analysis.cycles.formats import FORMAT_GENERATORS
from callcycle.config import OUTPUT_FORMATS, AnalysisConfig
from callcycle.errors import CallCycleError
from callcycle.pipeline import analyze_solution

USAGE = "Usage: Program <slnPath> <namespaceFilter> [<ignoreList>]"


def configure_logging(args):
    level = logging.DEBUG if args.debug else logging.INFO if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)


def run_cycles(args):
    """Detect and print call cycles; return the process exit code."""
    if args.solution_path is None or args.namespace_filter is None:
        print(USAGE)
        return 0

    configure_logging(args)

    try:
        config = AnalysisConfig.from_args(args)
        cycles = analyze_solution(config)
        output = FORMAT_GENERATORS[config.output_format](cycles)

        if config.output:
            with open(config.output, "w") as f:
                f.write(output + "\n" if output else output)
            logging.getLogger(__name__).info("report written to %s", config.output)
        elif output:
            print(output)

        return 0

    except CallCycleError as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.debug:
            import traceback

            traceback.print_exc()
        return 1


def add_cycles_arguments(parser):
    """Add the call-cycle arguments to an argument parser."""
    parser.add_argument(
        "solution_path", nargs="?", help="Python file or directory to analyse"
    )

    parser.add_argument(
        "namespace_filter",
        nargs="?",
        help="Module prefix of the methods to analyse (plain string prefix)",
    )

    parser.add_argument(
        "ignore_list",
        nargs="?",
        help="Comma-separated 'ContainingType.MethodName' entries that may not close a cycle",
    )

    # trailing positionals are accepted and ignored
    parser.add_argument("extra", nargs="*", help=argparse.SUPPRESS)

    parser.add_argument(
        "--format",
        "-f",
        choices=list(OUTPUT_FORMATS),
        default="text",
        help="Output format (default: text)",
    )

    parser.add_argument(
        "--output", "-o", type=Path, help="Output file (default: stdout)"
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose output"
    )

    parser.add_argument(
        "--debug", "-d", action="store_true", help="Debug output"
    )

    parser.set_defaults(func=run_cycles)
