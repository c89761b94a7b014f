"""
GlassTrace CLI — trace one function evaluation from the command line.

Commands:
    glasstrace find PATTERN TEXT [--range START END]
    glasstrace quantify {forall,exists} VALUE...

Both accept --causality to ask "what would change this output" instead
of the default "what produced this output".

Each command evaluates the function, builds the explanation tree and
lists every terminal leaf with the quality of the path leading to it.
"""

from __future__ import annotations

import argparse
import logging
import re
import sys
from typing import Any, Optional

from ..circuit import Circuit, CircuitError
from ..designator import NthOutput, Part, Range, compose
from ..function import Function, FunctionError
from ..functions import Exists, ForAll, RegexFind
from ..tracing import TraceabilityQuery, Tracer, trace_paths

TRUE_VALUES = {"true", "t", "1", "yes"}
FALSE_VALUES = {"false", "f", "0", "no"}


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def format_explanation(function: Function, output: Any, query: TraceabilityQuery, root) -> str:
    """Format the result of an evaluation and the leaves explaining it."""
    lines = []
    lines.append(f"GlassTrace — {function}")
    lines.append("=" * 50)
    lines.append(f"Output: {output!r}")
    lines.append("")
    lines.append(f"EXPLANATION ({query.value}):")

    paths = trace_paths(root)
    if not paths:
        lines.append("  (no input involved)")
    for path in paths:
        lines.append(f"  • {path.leaf}  [{path.quality.value}]")

    return "\n".join(lines)


def trace_single(
    function: Function,
    value: Any,
    designator: Part,
    query: TraceabilityQuery,
) -> str:
    """Evaluate a function on one value and explain the designated output."""
    circuit = Circuit()
    outputs = circuit.evaluate(function, {(function, 0): value})
    root = Tracer(circuit).get_tree(query, designator, function)
    return format_explanation(function, outputs[0], query, root)


def parse_bool(text: str) -> bool:
    lowered = text.lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(f"not a boolean: {text!r}")


# =============================================================================
# CLI COMMANDS
# =============================================================================

def _query(args: argparse.Namespace) -> TraceabilityQuery:
    if args.causality:
        return TraceabilityQuery.CAUSALITY
    return TraceabilityQuery.PROVENANCE


def cmd_find(args: argparse.Namespace) -> int:
    """Trace a regex match."""
    try:
        function = RegexFind(args.pattern)
        designator: Part = NthOutput(0)
        if args.range is not None:
            designator = compose(NthOutput(0), Range(args.range[0], args.range[1]))
        print(trace_single(function, args.text, designator, _query(args)))
        return 0
    except (FunctionError, CircuitError, IndexError, re.error) as e:
        print("ERROR: Tracing failed")
        print(f"Reason: {e}")
        return 1


def cmd_quantify(args: argparse.Namespace) -> int:
    """Trace a quantifier result."""
    function = ForAll() if args.quantifier == "forall" else Exists()
    try:
        print(trace_single(function, list(args.values), NthOutput(0), _query(args)))
        return 0
    except (FunctionError, CircuitError) as e:
        print("ERROR: Tracing failed")
        print(f"Reason: {e}")
        return 1


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="glasstrace",
        description="GlassTrace — Explain where function outputs come from",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log tracing decisions",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    # Find command
    find_parser = subparsers.add_parser(
        "find",
        help="Trace the first regex match in a text",
    )
    find_parser.add_argument("pattern", help="Regular expression to find")
    find_parser.add_argument("text", help="Text to search")
    find_parser.add_argument(
        "--range",
        nargs=2,
        type=int,
        metavar=("START", "END"),
        help="Explain only this range of the match (inclusive)",
    )
    find_parser.add_argument(
        "--causality",
        action="store_true",
        help="Ask a causality query instead of provenance",
    )
    find_parser.set_defaults(func=cmd_find)

    # Quantify command
    quantify_parser = subparsers.add_parser(
        "quantify",
        help="Trace a forall/exists over booleans",
    )
    quantify_parser.add_argument("quantifier", choices=["forall", "exists"])
    quantify_parser.add_argument("values", nargs="*", type=parse_bool, help="Boolean values")
    quantify_parser.add_argument(
        "--causality",
        action="store_true",
        help="Ask a causality query instead of provenance",
    )
    quantify_parser.set_defaults(func=cmd_quantify)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
