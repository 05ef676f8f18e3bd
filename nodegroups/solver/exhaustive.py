"""Complete enumeration of capacity-feasible partitions for small instances.

Nodes are placed one at a time in input order. Each node may stay free (when
allowed), join any group opened by an earlier node if the group stays within
``max_weight``, or open the next group. Group indices are opened in order, so
every partition is produced exactly once regardless of group labelling.
Leaves whose groups all satisfy ``min_weight <= sum <= max_weight`` are
yielded; the best of them is a certified optimum.

Branch state is immutable: each branch receives its own tuples, nothing is
undone on return.
"""

from __future__ import annotations

from typing import Iterator, List, Sequence, Tuple

from nodegroups.solver.weights import WeightResolver

Groups = Tuple[Tuple[str, ...], ...]
Partition = Tuple[List[List[str]], List[str]]


def enumerate_partitions(
    ids: Sequence[str],
    resolver: WeightResolver,
    min_weight: float,
    max_weight: float,
    allow_free_nodes: bool = False,
) -> Iterator[Partition]:
    """Yield every feasible partition of ``ids``.

    Args:
        ids: Node ids in placement order.
        resolver: Weight arithmetic for the problem.
        min_weight: Minimum node-weight sum per group.
        max_weight: Maximum node-weight sum per group.
        allow_free_nodes: Whether nodes may be left outside every group.

    Yields:
        ``(groups, free_nodes)`` pairs; groups are listed in opening order.
    """
    n = len(ids)

    def extend(
        pos: int, groups: Groups, sums: Tuple[float, ...], free: Tuple[str, ...]
    ) -> Iterator[Partition]:
        if pos == n:
            if all(min_weight <= s <= max_weight for s in sums):
                yield [list(g) for g in groups], list(free)
            return

        node_id = ids[pos]
        weight = resolver.weight(node_id)

        if allow_free_nodes:
            yield from extend(pos + 1, groups, sums, free + (node_id,))

        for index, group in enumerate(groups):
            new_sum = sums[index] + weight
            if new_sum > max_weight:
                continue
            yield from extend(
                pos + 1,
                groups[:index] + (group + (node_id,),) + groups[index + 1 :],
                sums[:index] + (new_sum,) + sums[index + 1 :],
                free,
            )

        # Validated input guarantees weight <= max_weight
        yield from extend(pos + 1, groups + ((node_id,),), sums + (weight,), free)

    yield from extend(0, (), (), ())
