"""Affinity and weight arithmetic over nodes and a link table."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Sequence, Tuple

from nodegroups.links import LinkKey
from nodegroups.model import Node


class WeightResolver:
    """Resolves pair affinities, group sums and solution totals.

    Pairs are oriented by input node order: for a pair whose earlier node is
    ``a`` and later node is ``b``, the symmetric affinity is ``links[a, b]``
    when nonzero, else ``links[b, a]``; the two directions are never added.
    Without ``symmetric`` the affinity is ``links[a, b] + links[b, a]``. Either
    way the result does not depend on argument order. Ids unknown to the
    resolver are oriented lexically.

    Attributes:
        node_weights (Dict[str, float]): Node id -> node weight.
        symmetric (bool): Active pair resolution rule.
    """

    def __init__(
        self,
        nodes: Iterable[Node],
        links: Mapping[LinkKey, float],
        symmetric: bool = True,
    ) -> None:
        nodes = list(nodes)
        self.node_weights: Dict[str, float] = {n.id: n.weight for n in nodes}
        self._position: Dict[str, int] = {}
        for index, n in enumerate(nodes):
            self._position.setdefault(n.id, index)
        self.symmetric = symmetric
        self._links = links
        self._cache: Dict[Tuple[str, str], float] = {}

    def pair_affinity(self, a: str, b: str) -> float:
        """Return the resolved affinity between nodes ``a`` and ``b``."""
        key = (a, b) if self._precedes(a, b) else (b, a)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        first, second = key
        ab = self._links.get((first, second), 0) or 0
        ba = self._links.get((second, first), 0) or 0
        value = (ab or ba) if self.symmetric else ab + ba
        self._cache[key] = value
        return value

    def _precedes(self, a: str, b: str) -> bool:
        pa = self._position.get(a)
        pb = self._position.get(b)
        if pa is None or pb is None or pa == pb:
            return a <= b
        return pa < pb

    def weight(self, node_id: str) -> float:
        return self.node_weights[node_id]

    def group_weight_sum(self, group: Iterable[str]) -> float:
        """Return the sum of member node weights."""
        return sum(self.node_weights[node_id] for node_id in group)

    def group_affinity(self, group: Sequence[str]) -> float:
        """Return the sum of pair affinities over all unordered member pairs."""
        total = 0
        for i in range(len(group)):
            for j in range(i + 1, len(group)):
                total += self.pair_affinity(group[i], group[j])
        return total

    def total_weight(self, groups: Iterable[Sequence[str]]) -> float:
        """Return the summed group affinity of a solution (free nodes add 0)."""
        return sum(self.group_affinity(g) for g in groups)

    def has_any_link(self, node_id: str, others: Iterable[str]) -> bool:
        """Return True if ``node_id`` has nonzero affinity to any other node."""
        return any(
            other != node_id and self.pair_affinity(node_id, other) != 0
            for other in others
        )

    def has_isolated_member(self, group: Sequence[str]) -> bool:
        """Return True if some member of a multi-node group has no affinity
        to any of its groupmates."""
        if len(group) <= 1:
            return False
        return any(not self.has_any_link(node_id, group) for node_id in group)
