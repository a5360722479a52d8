# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""CLI commands for checking reference files for cycles."""

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cyclewatch_common.graph import (
    InvalidReferenceError,
    Node,
    ReferencePair,
    build_graph,
    find_cycles,
)
from cyclewatch_core.cli.errors import show_error, show_success
from cyclewatch_core.cli.references import ReferenceFile, ReferenceFileError, load_references
from cyclewatch_core.config import CycleWatchConfig, get_config, load_and_validate_config
from cyclewatch_core.logconfig import ReferenceContext, configure_logging

LOGGER = logging.getLogger(__name__)

console = Console()

EXIT_OK = 0
EXIT_CYCLES = 1
EXIT_INVALID = 2

# Fixed sample: A -> B -> C -> A, plus D -> B feeding into the loop.
DEMO_REFERENCES: List[ReferencePair] = [
    ReferencePair("A", "B"),
    ReferencePair("B", "C"),
    ReferencePair("C", "A"),
    ReferencePair("D", "B"),
]


def build_parser(config: CycleWatchConfig) -> argparse.ArgumentParser:
    """Build the argument parser; *config* supplies the defaults."""
    parser = argparse.ArgumentParser(
        description="Detect cycles in node reference graphs",
        prog="cyclewatch",
    )

    subparsers = parser.add_subparsers(
        dest="action",
        help="Action to perform",
        required=True,
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Check a reference file for cycles",
        description=(
            "Load (source, target) references from a YAML file and report every "
            "cycle they form. Exits 1 when cycles exist, 2 when the file is invalid."
        ),
    )
    check_parser.add_argument("path", help="YAML file with a top-level 'references' list")
    check_parser.add_argument(
        "--format",
        choices=["text", "table"],
        default=config.output_format,
        help=f"Output format (default: {config.output_format})",
    )
    check_parser.add_argument(
        "--max-references",
        type=int,
        default=config.max_references,
        help=f"Refuse files with more references than this (default: {config.max_references})",
    )
    check_parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only output cycles and the summary",
    )

    subparsers.add_parser(
        "demo",
        help="Run the check against a built-in sample",
        description="Check the sample A→B, B→C, C→A, D→B and print the report.",
    )

    return parser


def format_cycle(cycle: Sequence[Node]) -> str:
    return " → ".join(str(n) for n in cycle)


def print_report_text(cycles: List[List[Node]], ref_file: Optional[ReferenceFile] = None):
    console.print(f"Has cycle: {bool(cycles)}")
    console.print(f"Number of cycles found: {len(cycles)}")
    for i, cycle in enumerate(cycles, start=1):
        line = ref_file.line_of_edge(cycle[-2], cycle[-1]) if ref_file else None
        loc = f" [dim](closed at line {line})[/dim]" if line is not None else ""
        console.print(f"[red]Cycle {i}: {escape(format_cycle(cycle))}[/red]{loc}")


def print_report_table(cycles: List[List[Node]], ref_file: Optional[ReferenceFile] = None):
    if not cycles:
        return

    table = Table(title="Cycles")
    table.add_column("#", style="magenta")
    table.add_column("Length", style="cyan")
    table.add_column("Path", style="bold red")
    table.add_column("Closed at line", style="green")

    for i, cycle in enumerate(cycles, start=1):
        line = ref_file.line_of_edge(cycle[-2], cycle[-1]) if ref_file else None
        table.add_row(
            str(i),
            str(len(cycle) - 1),
            escape(format_cycle(cycle)),
            str(line) if line is not None else "-",
        )

    console.print(table)


def report(
    pairs: Sequence[ReferencePair],
    fmt: Optional[str] = None,
    quiet: bool = False,
    ref_file: Optional[ReferenceFile] = None,
) -> int:
    """Build the graph, enumerate cycles, print them and return the exit code.

    *fmt* defaults to the configured ``output_format``.
    """
    fmt = fmt or get_config().output_format
    graph = build_graph(pairs)
    ReferenceContext.set_operation("find_cycles")
    try:
        cycles = find_cycles(graph)
        LOGGER.info("%d references, %d sources, %d cycle(s)", len(pairs), len(graph), len(cycles))
    finally:
        ReferenceContext.set_operation("")

    if fmt == "table":
        if not quiet:
            console.print(f"Has cycle: {bool(cycles)}")
        print_report_table(cycles, ref_file)
    elif quiet:
        for cycle in cycles:
            console.print(f"[red]{escape(format_cycle(cycle))}[/red]")
    else:
        print_report_text(cycles, ref_file)

    if not cycles:
        if not quiet:
            show_success(f"No cycles in {len(pairs)} references across {len(graph)} sources.")
        return EXIT_OK

    console.print(
        f"\nCheck complete: [red]{len(cycles)} cycle{'s' if len(cycles) != 1 else ''}[/red]"
    )
    return EXIT_CYCLES


def cmd_check(args: argparse.Namespace) -> int:
    """Execute the check command."""
    ReferenceContext.set(args.path)
    try:
        if not args.quiet:
            console.print(f"Checking: {escape(args.path)}")
        try:
            ref_file = load_references(args.path)
            if len(ref_file.pairs) > args.max_references:
                raise ReferenceFileError(
                    args.path,
                    f"{len(ref_file.pairs)} references exceeds the limit of "
                    f"{args.max_references} references",
                )
            return report(ref_file.pairs, args.format, args.quiet, ref_file)
        except ReferenceFileError as exc:
            show_error("Cannot load reference file", str(exc))
            return EXIT_INVALID
        except InvalidReferenceError as exc:
            line = ref_file.line_of(exc.index)
            loc = f"{args.path}:{line}" if line is not None else args.path
            show_error("Invalid reference", f"{loc}: {exc}")
            return EXIT_INVALID
    finally:
        ReferenceContext.clear()


def cmd_demo(args: argparse.Namespace) -> int:
    """Execute the demo command."""
    ReferenceContext.set("<demo>")
    try:
        for pair in DEMO_REFERENCES:
            console.print(f"[dim]{pair.source} → {pair.target}[/dim]")
        return report(DEMO_REFERENCES)
    finally:
        ReferenceContext.clear()


def dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate command handler."""
    if args.action == "check":
        return cmd_check(args)
    elif args.action == "demo":
        return cmd_demo(args)
    else:
        console.print(f"[red]Unknown action: {args.action}[/red]")
        return EXIT_INVALID


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the cyclewatch command."""
    try:
        config = load_and_validate_config()
    except ValidationError as exc:
        show_error("Invalid configuration", str(exc))
        return EXIT_INVALID

    configure_logging(config.log_level, config.log_format)
    parser = build_parser(config)
    args = parser.parse_args(argv)
    return dispatch(args)


if __name__ == "__main__":
    sys.exit(main())
