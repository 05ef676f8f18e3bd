"""nodegroups: capacity-bounded grouping of weighted nodes.

Assigns nodes to groups whose node-weight sums stay within ``[min, max]``
while keeping as much pairwise link weight inside groups as possible.

Primary API:
    compute_groups() - solve and return up to ten ranked solutions
    validate() - structural input checks
    Node, Tag, SolveOptions, Problem - problem model
    build_link_table(), table_to_list() - sparse link list conversion
    load_problem(), save_problem() - problem files

Example:
    from nodegroups import Node, build_link_table, compute_groups

    nodes = [Node("A", 10), Node("B", 10), Node("C", 10), Node("D", 10)]
    links = build_link_table([
        {"from": "A", "to": "B", "weight": 5},
        {"from": "C", "to": "D", "weight": 8},
    ])
    result = compute_groups(nodes, links, 10, 25)
    result.best.groups  # [["A", "B"], ["C", "D"]] in some order
"""

from __future__ import annotations

from nodegroups import cli, logging
from nodegroups._version import __version__
from nodegroups.config import SOLVER_CONFIG, SolverConfig
from nodegroups.io import load_problem, parse_problem, save_problem, save_result
from nodegroups.links import (
    LinkTable,
    build_link_table,
    effective_link_table,
    symmetrize,
    table_to_list,
    tag_link_table,
)
from nodegroups.model import Node, Problem, SolveOptions, Tag
from nodegroups.solver import compute_groups, validate
from nodegroups.types import GroupDetail, Solution, SolveResult

__all__ = [
    # Version
    "__version__",
    # Model
    "Node",
    "Tag",
    "SolveOptions",
    "Problem",
    "LinkTable",
    # Solver
    "compute_groups",
    "validate",
    "SolverConfig",
    "SOLVER_CONFIG",
    # Results
    "GroupDetail",
    "Solution",
    "SolveResult",
    # Links
    "build_link_table",
    "table_to_list",
    "symmetrize",
    "tag_link_table",
    "effective_link_table",
    # Files
    "load_problem",
    "parse_problem",
    "save_problem",
    "save_result",
    # Utilities
    "cli",
    "logging",
]
