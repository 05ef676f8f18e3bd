"""Seeded greedy construction of a feasible partition.

Construction walks the node pairs with nonzero affinity, strongest first,
and grows groups along them while they fit ``max_weight``. Nodes left over
are placed first-fit in a seeded order. Under-filled groups are handed to
the repair pass; a construction that cannot be repaired yields ``None``.
"""

from __future__ import annotations

from typing import AbstractSet, Dict, List, Optional, Sequence, Tuple

from nodegroups.logging import get_logger
from nodegroups.seed_manager import Mulberry32, SeedManager
from nodegroups.solver.repair import merge_small_groups
from nodegroups.solver.weights import WeightResolver

logger = get_logger(__name__)

Edge = Tuple[str, str, float]
Partition = Tuple[List[List[str]], List[str]]


def sorted_edges(
    ids: Sequence[str], resolver: WeightResolver, rng: Mulberry32
) -> List[Edge]:
    """Return all linked pairs of ``ids``, strongest affinity first.

    Pairs are listed in input order (``i < j``) and each draws one tie-break
    value from ``rng`` in that order, so equal affinities are ordered
    reproducibly for a given seed.
    """
    keyed = []
    for i, a in enumerate(ids):
        for b in ids[i + 1 :]:
            w = resolver.pair_affinity(a, b)
            if w != 0:
                keyed.append((-w, rng.random(), (a, b, w)))
    keyed.sort(key=lambda item: (item[0], item[1]))
    return [edge for _, _, edge in keyed]


def _construct(
    edge_ids: Sequence[str],
    leftover_ids: Sequence[str],
    initial_groups: Sequence[Sequence[str]],
    resolver: WeightResolver,
    min_weight: float,
    max_weight: float,
    rng: Mulberry32,
    allow_free_nodes: bool,
    fixed_ids: AbstractSet[str],
) -> Optional[Partition]:
    groups: List[List[str]] = [list(g) for g in initial_groups]
    sums: List[float] = [resolver.group_weight_sum(g) for g in groups]
    group_of: Dict[str, int] = {
        node_id: index for index, g in enumerate(groups) for node_id in g
    }

    for a, b, _ in sorted_edges(edge_ids, resolver, rng):
        a_in = a in group_of
        b_in = b in group_of
        if a_in and b_in:
            continue
        if not a_in and not b_in:
            if resolver.weight(a) + resolver.weight(b) <= max_weight:
                group_of[a] = group_of[b] = len(groups)
                groups.append([a, b])
                sums.append(resolver.weight(a) + resolver.weight(b))
            continue
        inside, outside = (a, b) if a_in else (b, a)
        index = group_of[inside]
        if sums[index] + resolver.weight(outside) <= max_weight:
            groups[index].append(outside)
            sums[index] += resolver.weight(outside)
            group_of[outside] = index

    free: List[str] = []
    for node_id in leftover_ids:
        if node_id in group_of:
            continue
        weight = resolver.weight(node_id)
        if allow_free_nodes and not resolver.has_any_link(node_id, edge_ids):
            free.append(node_id)
            continue
        for index in range(len(groups)):
            if sums[index] + weight <= max_weight:
                groups[index].append(node_id)
                sums[index] += weight
                group_of[node_id] = index
                break
        else:
            if allow_free_nodes:
                free.append(node_id)
            else:
                group_of[node_id] = len(groups)
                groups.append([node_id])
                sums.append(weight)

    if any(s < min_weight for s in sums):
        return merge_small_groups(
            groups,
            free,
            resolver,
            min_weight,
            max_weight,
            allow_free_nodes=allow_free_nodes,
            fixed_ids=fixed_ids,
        )
    return groups, free


def greedy_build(
    ids: Sequence[str],
    resolver: WeightResolver,
    min_weight: float,
    max_weight: float,
    restart: int,
    allow_free_nodes: bool = False,
    seeds: Optional[SeedManager] = None,
) -> Optional[Partition]:
    """Construct a feasible partition of ``ids`` for one restart.

    Args:
        ids: All node ids in input order.
        resolver: Weight arithmetic for the problem.
        min_weight: Minimum node-weight sum per group.
        max_weight: Maximum node-weight sum per group.
        restart: Restart index; seeds both random streams.
        allow_free_nodes: Whether nodes may be left outside every group.
        seeds: Seed streams (defaults to a fresh :class:`SeedManager`).

    Returns:
        ``(groups, free_nodes)`` or None when the construction is infeasible.
    """
    seeds = seeds or SeedManager()
    result = _construct(
        edge_ids=ids,
        leftover_ids=seeds.leftover_order(list(ids), restart, with_fixed=False),
        initial_groups=(),
        resolver=resolver,
        min_weight=min_weight,
        max_weight=max_weight,
        rng=seeds.tiebreak_rng(restart),
        allow_free_nodes=allow_free_nodes,
        fixed_ids=frozenset(),
    )
    if result is None:
        logger.debug(f"Restart {restart}: construction could not be repaired")
    return result


def greedy_build_with_fixed(
    free_ids: Sequence[str],
    fixed_groups: Sequence[Sequence[str]],
    resolver: WeightResolver,
    min_weight: float,
    max_weight: float,
    restart: int,
    allow_free_nodes: bool = False,
    seeds: Optional[SeedManager] = None,
) -> Optional[Partition]:
    """Construct a feasible partition around caller-fixed groups.

    Fixed groups start out as groups of their own. Edges may grow them with
    unassigned nodes or open new groups between two unassigned nodes, but a
    fixed group is never split or merged with another one.

    Args:
        free_ids: Ids not in any fixed group, in input order.
        fixed_groups: Normalized, disjoint fixed groups.
        resolver: Weight arithmetic for the problem.
        min_weight: Minimum node-weight sum per group.
        max_weight: Maximum node-weight sum per group.
        restart: Restart index; seeds both random streams.
        allow_free_nodes: Whether nodes may be left outside every group.
        seeds: Seed streams (defaults to a fresh :class:`SeedManager`).

    Returns:
        ``(groups, free_nodes)`` or None when the construction is infeasible.
    """
    seeds = seeds or SeedManager()
    fixed_ids = frozenset(node_id for g in fixed_groups for node_id in g)
    all_ids = list(free_ids) + [node_id for g in fixed_groups for node_id in g]
    result = _construct(
        edge_ids=all_ids,
        leftover_ids=seeds.leftover_order(list(free_ids), restart, with_fixed=True),
        initial_groups=fixed_groups,
        resolver=resolver,
        min_weight=min_weight,
        max_weight=max_weight,
        rng=seeds.tiebreak_rng(restart),
        allow_free_nodes=allow_free_nodes,
        fixed_ids=fixed_ids,
    )
    if result is None:
        logger.debug(f"Restart {restart}: construction around fixed groups failed")
    return result
