"""Ranked, deduplicated top-K store of candidate solutions.

Every candidate produced by exhaustive search, greedy construction or an
accepted local-search move is offered to a :class:`SolutionArchive`. The
archive canonicalizes it, drops structural duplicates, scores it and keeps
only the best ``capacity`` entries.

Score::

    total_weight + bonus_per_group * len(groups)
                 - balance_factor * pvariance(group combined weights)
"""

from __future__ import annotations

from statistics import pvariance
from typing import List, Sequence, Set, Tuple

from nodegroups.logging import get_logger
from nodegroups.solver.weights import WeightResolver
from nodegroups.types import GroupDetail, Solution

logger = get_logger(__name__)

SolutionKey = Tuple[Tuple[Tuple[str, ...], ...], Tuple[str, ...]]


def solution_key(groups: Sequence[Sequence[str]], free_nodes: Sequence[str]) -> SolutionKey:
    """Return an order-insensitive key for a partition.

    Member ids are sorted inside each group, groups are sorted among
    themselves and the free ids are sorted separately.
    """
    group_part = tuple(sorted(tuple(sorted(g)) for g in groups))
    return group_part, tuple(sorted(free_nodes))


class SolutionArchive:
    """Keeps the best distinct solutions seen during one solve.

    A key that has been offered once is never admitted again, even if its
    entry was later pushed out of the top ``capacity``.

    Attributes:
        resolver (WeightResolver): Weight arithmetic for the current problem.
        node_ids (List[str]): All node ids; every candidate must cover them
            exactly once.
        capacity (int): Maximum number of retained solutions.
        bonus_per_group (float): Score bonus per group.
        balance_factor (float): Score penalty per unit of affinity variance.
    """

    def __init__(
        self,
        resolver: WeightResolver,
        node_ids: Sequence[str],
        capacity: int = 10,
        bonus_per_group: float = 0.0,
        balance_factor: float = 0.0,
    ) -> None:
        self.resolver = resolver
        self.node_ids = list(node_ids)
        self.capacity = capacity
        self.bonus_per_group = bonus_per_group
        self.balance_factor = balance_factor
        self._seen: Set[SolutionKey] = set()
        self._solutions: List[Solution] = []
        self._node_set = frozenset(self.node_ids)

    def __len__(self) -> int:
        return len(self._solutions)

    @property
    def solutions(self) -> List[Solution]:
        """Retained solutions, best score first."""
        return list(self._solutions)

    def score(self, total_weight: float, details: Sequence[GroupDetail]) -> float:
        """Return the ranking score for a solution."""
        score = total_weight + self.bonus_per_group * len(details)
        if self.balance_factor > 0 and details:
            score -= self.balance_factor * pvariance(
                [d.combined_weight for d in details]
            )
        return score

    def _covers_all_nodes(
        self, groups: Sequence[Sequence[str]], free_nodes: Sequence[str]
    ) -> bool:
        members = [node_id for g in groups for node_id in g]
        members.extend(free_nodes)
        return len(members) == len(self._node_set) and set(members) == self._node_set

    def add(self, groups: Sequence[Sequence[str]], free_nodes: Sequence[str] = ()) -> bool:
        """Offer a partition to the archive.

        Args:
            groups: Groups as sequences of node ids.
            free_nodes: Ids left outside every group.

        Returns:
            True if the partition is new and currently retained.
        """
        if not self._covers_all_nodes(groups, free_nodes):
            logger.debug("Rejecting candidate that does not cover every node once")
            return False
        key = solution_key(groups, free_nodes)
        if key in self._seen:
            return False
        self._seen.add(key)

        details = [
            GroupDetail(
                node_ids=list(g),
                node_weight_sum=self.resolver.group_weight_sum(g),
                combined_weight=self.resolver.group_affinity(g),
            )
            for g in groups
        ]
        total = sum(d.combined_weight for d in details)
        score = self.score(total, details)

        # A full archive only admits a strictly better score (ties rank after
        # existing entries and would be truncated immediately).
        if len(self._solutions) >= self.capacity and score <= self._solutions[-1].score:
            return False

        solution = Solution(
            groups=[list(g) for g in groups],
            free_nodes=list(free_nodes),
            total_weight=total,
            group_details=details,
            score=score,
        )
        self._solutions.append(solution)
        self._sort_and_truncate()
        return any(s is solution for s in self._solutions)

    def _sort_and_truncate(self) -> None:
        self._solutions.sort(key=lambda s: s.score, reverse=True)
        del self._solutions[self.capacity :]

    def is_wasteful(self, solution: Solution) -> bool:
        """Return True if some multi-node group has a member with no affinity
        to any groupmate."""
        return any(self.resolver.has_isolated_member(g) for g in solution.groups)

    def prune_wasteful(self) -> int:
        """Drop wasteful solutions when at least one non-wasteful one exists.

        Returns:
            Number of removed solutions.
        """
        flags = [self.is_wasteful(s) for s in self._solutions]
        if all(flags):
            return 0
        before = len(self._solutions)
        self._solutions = [s for s, wasteful in zip(self._solutions, flags) if not wasteful]
        self._sort_and_truncate()
        return before - len(self._solutions)
