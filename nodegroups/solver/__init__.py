"""Grouping solver: validation, search strategies and the solution archive.

Public entry points:
    validate() - structural checks of a problem
    compute_groups() - run the full solve and return ranked solutions
"""

from __future__ import annotations

from nodegroups.solver.archive import SolutionArchive, solution_key
from nodegroups.solver.core import compute_groups
from nodegroups.solver.exhaustive import enumerate_partitions
from nodegroups.solver.greedy import greedy_build, greedy_build_with_fixed
from nodegroups.solver.local_search import LocalSearch, local_search
from nodegroups.solver.repair import merge_small_groups
from nodegroups.solver.validation import validate, validate_fixed_groups
from nodegroups.solver.weights import WeightResolver

__all__ = [
    "compute_groups",
    "validate",
    "validate_fixed_groups",
    "WeightResolver",
    "SolutionArchive",
    "solution_key",
    "enumerate_partitions",
    "greedy_build",
    "greedy_build_with_fixed",
    "merge_small_groups",
    "LocalSearch",
    "local_search",
]
