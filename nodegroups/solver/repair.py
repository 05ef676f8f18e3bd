"""Repair pass for constructed partitions with under-filled groups."""

from __future__ import annotations

from typing import AbstractSet, List, Optional, Sequence, Tuple

from nodegroups.solver.weights import WeightResolver

Partition = Tuple[List[List[str]], List[str]]


def merge_small_groups(
    groups: Sequence[Sequence[str]],
    free_nodes: Sequence[str],
    resolver: WeightResolver,
    min_weight: float,
    max_weight: float,
    allow_free_nodes: bool = False,
    fixed_ids: AbstractSet[str] = frozenset(),
) -> Optional[Partition]:
    """Merge or dissolve groups below ``min_weight`` until none is left.

    Repeatedly takes the first under-filled group and merges the first other
    group into it whose combined weight fits ``max_weight``. If no merge fits
    and free nodes are allowed, the group is dissolved into the free set.

    Groups holding members of ``fixed_ids`` are never dissolved, and two such
    groups are never merged with each other.

    Args:
        groups: Constructed groups (not modified).
        free_nodes: Ids already left free (not modified).
        resolver: Weight arithmetic for the problem.
        min_weight: Minimum node-weight sum per group.
        max_weight: Maximum node-weight sum per group.
        allow_free_nodes: Whether dissolving into the free set is allowed.
        fixed_ids: Ids belonging to caller-fixed groups.

    Returns:
        Repaired ``(groups, free_nodes)``, or None if some group still violates
        the bounds.
    """
    merged = [list(g) for g in groups]
    free = list(free_nodes)
    sums = [resolver.group_weight_sum(g) for g in merged]

    def holds_fixed(index: int) -> bool:
        return any(node_id in fixed_ids for node_id in merged[index])

    changed = True
    while changed:
        changed = False
        for i in range(len(merged)):
            if sums[i] >= min_weight:
                continue
            i_fixed = holds_fixed(i)
            for j in range(len(merged)):
                if i == j or sums[i] + sums[j] > max_weight:
                    continue
                if i_fixed and holds_fixed(j):
                    continue
                merged[i] = merged[i] + merged[j]
                sums[i] += sums[j]
                del merged[j]
                del sums[j]
                changed = True
                break
            else:
                if allow_free_nodes and not i_fixed:
                    free.extend(merged[i])
                    del merged[i]
                    del sums[i]
                    changed = True
            if changed:
                break

    if any(s < min_weight or s > max_weight for s in sums):
        return None
    return merged, free
