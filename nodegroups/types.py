"""Result containers returned by the solver.

All containers are immutable and convert to JSON-friendly dicts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class GroupDetail:
    """Per-group figures of a solution.

    Attributes:
        node_ids: Member ids in group order.
        node_weight_sum: Sum of member node weights.
        combined_weight: Sum of resolved affinities over member pairs.
    """

    node_ids: List[str]
    node_weight_sum: float
    combined_weight: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "node_ids": list(self.node_ids),
            "node_weight_sum": self.node_weight_sum,
            "combined_weight": self.combined_weight,
        }


@dataclass(frozen=True)
class Solution:
    """One complete partition of the nodes into groups and free nodes.

    Attributes:
        groups: Groups as lists of node ids.
        free_nodes: Ids left outside every group.
        total_weight: Sum of ``combined_weight`` over all groups.
        group_details: One :class:`GroupDetail` per group, same order as ``groups``.
        score: Archive ranking score (total weight adjusted by the group bonus
            and balance penalty).
    """

    groups: List[List[str]]
    free_nodes: List[str]
    total_weight: float
    group_details: List[GroupDetail]
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "groups": [list(g) for g in self.groups],
            "free_nodes": list(self.free_nodes),
            "total_weight": self.total_weight,
            "score": self.score,
            "group_details": [d.to_dict() for d in self.group_details],
        }


@dataclass(frozen=True)
class SolveResult:
    """Outcome of ``compute_groups``.

    Attributes:
        solutions: Up to ten solutions, best score first.
        optimal: True when exhaustive search ran and found a solution, so the
            first solution is a certified optimum.
        errors: Validation messages; non-empty means no search was done.
    """

    solutions: List[Solution] = field(default_factory=list)
    optimal: bool = False
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def best(self) -> "Solution | None":
        return self.solutions[0] if self.solutions else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "optimal": self.optimal,
            "errors": list(self.errors),
            "solutions": [s.to_dict() for s in self.solutions],
        }
