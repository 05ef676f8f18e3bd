"""Hill climbing over relocate, free/unfree and swap moves.

Each pass scans the moves below in order and applies the first one that
strictly raises the total weight, then starts the next pass:

1. Relocate a node, or its whole fixed group, into another group. The
   source must stay at or above ``min_weight`` or become empty (it is then
   removed); the destination must stay at or below ``max_weight``. A fixed
   group never moves into a group holding another fixed group. Emptying
   moves are accepted when the total does not drop (``>=``), the one
   exception to strict improvement.
2. Move a node outside every fixed group to the free set (free nodes
   allowed), under the same source rule.
3. Move a free node into a group that stays at or below ``max_weight``.
4. Swap two nodes between two groups that hold no fixed members, keeping
   both within ``[min_weight, max_weight]``.

The search stops after ``max_passes`` passes or at the first pass without an
accepted move. Accepted states are yielded so that the caller can archive
every intermediate solution.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, NamedTuple, Optional, Sequence, Tuple

from nodegroups.logging import get_logger
from nodegroups.solver.weights import WeightResolver

logger = get_logger(__name__)

Partition = Tuple[List[List[str]], List[str]]


class SearchState(NamedTuple):
    """Accepted local-search state.

    Attributes:
        groups: Current groups.
        free: Current free nodes.
        affinities: Combined weight per group, aligned with ``groups``.
        total: Sum of ``affinities``.
    """

    groups: List[List[str]]
    free: List[str]
    affinities: List[float]
    total: float


class LocalSearch:
    """First-improvement hill climber for one problem.

    Attributes:
        resolver (WeightResolver): Weight arithmetic for the problem.
        min_weight (float): Minimum node-weight sum per group.
        max_weight (float): Maximum node-weight sum per group.
        allow_free_nodes (bool): Whether moves to and from the free set apply.
        max_passes (int): Upper bound on accepted moves.
    """

    def __init__(
        self,
        resolver: WeightResolver,
        min_weight: float,
        max_weight: float,
        allow_free_nodes: bool = False,
        fixed_groups: Sequence[Sequence[str]] = (),
        max_passes: int = 200,
    ) -> None:
        self.resolver = resolver
        self.min_weight = min_weight
        self.max_weight = max_weight
        self.allow_free_nodes = allow_free_nodes
        self.max_passes = max_passes
        self._unit_of: Dict[str, Tuple[str, ...]] = {
            node_id: tuple(g) for g in fixed_groups for node_id in g
        }

    def initial_state(
        self, groups: Sequence[Sequence[str]], free: Sequence[str]
    ) -> SearchState:
        group_list = [list(g) for g in groups]
        affinities = [self.resolver.group_affinity(g) for g in group_list]
        return SearchState(group_list, list(free), affinities, sum(affinities))

    def run(
        self, groups: Sequence[Sequence[str]], free: Sequence[str] = ()
    ) -> Iterator[Partition]:
        """Improve a feasible partition, yielding every accepted state.

        Args:
            groups: Feasible starting groups (not modified).
            free: Starting free nodes (not modified).

        Yields:
            ``(groups, free_nodes)`` copies after each accepted move.
        """
        state = self.initial_state(groups, free)
        for passes in range(self.max_passes):
            moved = self.find_move(state)
            if moved is None:
                logger.debug(
                    f"Local search converged after {passes} move(s) at total {state.total}"
                )
                return
            state = moved
            yield [list(g) for g in state.groups], list(state.free)

    def find_move(self, state: SearchState) -> Optional[SearchState]:
        """Return the state after the first acceptable move, or None."""
        for gi, group in enumerate(state.groups):
            for node_id in group:
                moved = self._relocate(state, gi, node_id)
                if moved is None and self.allow_free_nodes:
                    moved = self._relocate_to_free(state, gi, node_id)
                if moved is not None:
                    return moved
        if self.allow_free_nodes:
            moved = self._free_to_group(state)
            if moved is not None:
                return moved
        return self._swap(state)

    def _holds_fixed(self, group: Sequence[str]) -> bool:
        return any(node_id in self._unit_of for node_id in group)

    def _candidate(
        self,
        state: SearchState,
        changes: Dict[int, List[str]],
        removed: Optional[int] = None,
        free: Optional[List[str]] = None,
    ) -> SearchState:
        """Build a candidate state with replaced and/or removed groups."""
        groups: List[List[str]] = []
        affinities: List[float] = []
        for index, (group, affinity) in enumerate(zip(state.groups, state.affinities)):
            if index == removed:
                continue
            if index in changes:
                group = changes[index]
                affinity = self.resolver.group_affinity(group)
            groups.append(group)
            affinities.append(affinity)
        return SearchState(
            groups, state.free if free is None else free, affinities, sum(affinities)
        )

    def _relocate(
        self, state: SearchState, gi: int, node_id: str
    ) -> Optional[SearchState]:
        group = state.groups[gi]
        unit = self._unit_of.get(node_id, (node_id,))
        if any(member not in group for member in unit):
            return None
        moving_fixed = node_id in self._unit_of
        source_after = [m for m in group if m not in unit]
        unit_weight = self.resolver.group_weight_sum(unit)
        if source_after and self.resolver.group_weight_sum(source_after) < self.min_weight:
            return None

        for gj, target in enumerate(state.groups):
            if gj == gi:
                continue
            if moving_fixed and self._holds_fixed(target):
                continue
            if self.resolver.group_weight_sum(target) + unit_weight > self.max_weight:
                continue
            target_after = target + list(unit)
            if source_after:
                candidate = self._candidate(state, {gi: source_after, gj: target_after})
                if candidate.total > state.total:
                    return candidate
            else:
                candidate = self._candidate(state, {gj: target_after}, removed=gi)
                # Emptying the source may keep the total unchanged
                if candidate.total >= state.total:
                    return candidate
        return None

    def _relocate_to_free(
        self, state: SearchState, gi: int, node_id: str
    ) -> Optional[SearchState]:
        if node_id in self._unit_of:
            return None
        source_after = [m for m in state.groups[gi] if m != node_id]
        free = state.free + [node_id]
        if not source_after:
            candidate = self._candidate(state, {}, removed=gi, free=free)
        elif self.resolver.group_weight_sum(source_after) >= self.min_weight:
            candidate = self._candidate(state, {gi: source_after}, free=free)
        else:
            return None
        return candidate if candidate.total > state.total else None

    def _free_to_group(self, state: SearchState) -> Optional[SearchState]:
        for fi, node_id in enumerate(state.free):
            weight = self.resolver.weight(node_id)
            for gj, target in enumerate(state.groups):
                if self.resolver.group_weight_sum(target) + weight > self.max_weight:
                    continue
                free = state.free[:fi] + state.free[fi + 1 :]
                candidate = self._candidate(state, {gj: target + [node_id]}, free=free)
                if candidate.total > state.total:
                    return candidate
        return None

    def _swap(self, state: SearchState) -> Optional[SearchState]:
        eligible = [
            index
            for index, group in enumerate(state.groups)
            if not self._holds_fixed(group)
        ]
        for x, gi in enumerate(eligible):
            for gj in eligible[x + 1 :]:
                first, second = state.groups[gi], state.groups[gj]
                for ni in range(len(first)):
                    for nj in range(len(second)):
                        first_after = list(first)
                        second_after = list(second)
                        first_after[ni], second_after[nj] = second[nj], first[ni]
                        if not self._within_bounds(first_after):
                            continue
                        if not self._within_bounds(second_after):
                            continue
                        candidate = self._candidate(
                            state, {gi: first_after, gj: second_after}
                        )
                        if candidate.total > state.total:
                            return candidate
        return None

    def _within_bounds(self, group: Sequence[str]) -> bool:
        return self.min_weight <= self.resolver.group_weight_sum(group) <= self.max_weight


def local_search(
    groups: Sequence[Sequence[str]],
    free: Sequence[str],
    resolver: WeightResolver,
    min_weight: float,
    max_weight: float,
    allow_free_nodes: bool = False,
    fixed_groups: Sequence[Sequence[str]] = (),
    max_passes: int = 200,
) -> Iterator[Partition]:
    """Yield every state accepted while improving ``(groups, free)``.

    Convenience wrapper around :class:`LocalSearch`.
    """
    searcher = LocalSearch(
        resolver,
        min_weight,
        max_weight,
        allow_free_nodes=allow_free_nodes,
        fixed_groups=fixed_groups,
        max_passes=max_passes,
    )
    return searcher.run(groups, free)
