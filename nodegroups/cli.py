"""Command-line interface for nodegroups."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from time import perf_counter
from typing import List, Optional

from nodegroups.graph import to_networkx, write_graphml
from nodegroups.io import load_problem, save_result
from nodegroups.logging import get_logger, set_global_log_level
from nodegroups.model import Problem
from nodegroups.report import format_result
from nodegroups.solver import validate, validate_fixed_groups

logger = get_logger(__name__)


def _format_duration(seconds: float) -> str:
    """Return a concise duration string, e.g. ``"123.0 ms"`` or ``"1.23 s"``."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f} ms"
    return f"{seconds:.2f} s"


def _load_or_exit(path: Path) -> Problem:
    try:
        return load_problem(path)
    except FileNotFoundError:
        logger.error(f"Problem file not found: {path}")
        print(f"ERROR: Problem file not found: {path}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Failed to load problem: {type(e).__name__}: {e}")
        print(f"ERROR: Failed to load problem: {type(e).__name__}: {e}")
        sys.exit(1)


def _solve(
    path: Path,
    results: Optional[Path],
    stdout: bool,
    graph: Optional[Path],
    allow_free_nodes: bool,
    asymmetric: bool,
) -> None:
    """Solve a problem file and print or export the solutions."""
    problem = _load_or_exit(path)

    overrides = {}
    if allow_free_nodes:
        overrides["allow_free_nodes"] = True
    if asymmetric:
        overrides["symmetric_links"] = False
    if overrides:
        problem = replace(problem, options=replace(problem.options, **overrides))

    logger.info(f"Solving {path} ({len(problem.nodes)} nodes)")
    start = perf_counter()
    result = problem.solve()
    logger.info(f"Solve finished in {_format_duration(perf_counter() - start)}")

    if stdout:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(format_result(problem, result))

    if results is not None:
        save_result(result, results)
        logger.info(f"Results written to {results}")

    if graph is not None:
        write_graphml(to_networkx(problem, result.best), str(graph))
        logger.info(f"Graph written to {graph}")

    if result.errors:
        sys.exit(1)


def _validate(path: Path) -> None:
    """Run the input checks on a problem file."""
    problem = _load_or_exit(path)
    errors = validate(
        problem.nodes, problem.effective_links(), problem.min_weight, problem.max_weight
    )
    if not errors:
        _, errors = validate_fixed_groups(
            problem.options.fixed_groups, problem.nodes, problem.max_weight
        )
    if errors:
        for message in errors:
            print(f"ERROR: {message}")
        sys.exit(1)
    print(f"OK: {len(problem.nodes)} nodes, {len(problem.links)} links, {len(problem.tags)} tags")


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``nodegroups`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="nodegroups",
        description="Group weighted nodes to maximize retained link weight.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{solve,validate}",
        help="Available commands",
    )

    solve_parser = subparsers.add_parser("solve", help="Solve a problem file")
    solve_parser.add_argument("problem", type=Path, help="Path to problem YAML/JSON")
    solve_parser.add_argument(
        "--results",
        "-r",
        type=Path,
        default=None,
        help="Export results to this JSON file",
    )
    solve_parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print results as JSON instead of tables",
    )
    solve_parser.add_argument(
        "--graph",
        "-g",
        type=Path,
        default=None,
        help="Write the node graph annotated with the best solution as GraphML",
    )
    solve_parser.add_argument(
        "--allow-free-nodes",
        action="store_true",
        help="Allow nodes to stay outside every group (overrides the file)",
    )
    solve_parser.add_argument(
        "--asymmetric",
        action="store_true",
        help="Sum both link directions per pair (overrides the file)",
    )

    validate_parser = subparsers.add_parser("validate", help="Check a problem file")
    validate_parser.add_argument("problem", type=Path, help="Path to problem YAML/JSON")

    effective_args = sys.argv[1:] if argv is None else argv
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    if args.verbose:
        set_global_log_level(logging.DEBUG)
        logger.debug("Debug logging enabled")
    elif args.quiet:
        set_global_log_level(logging.WARNING)
    else:
        set_global_log_level(logging.INFO)

    if args.command == "solve":
        _solve(
            path=args.problem,
            results=args.results,
            stdout=args.stdout,
            graph=args.graph,
            allow_free_nodes=args.allow_free_nodes,
            asymmetric=args.asymmetric,
        )
    elif args.command == "validate":
        _validate(args.problem)


if __name__ == "__main__":
    main()
