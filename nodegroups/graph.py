"""NetworkX view of a problem and, optionally, one of its solutions.

Example:
    >>> from nodegroups.graph import to_networkx
    >>> G = to_networkx(problem, result.best)
    >>> G.nodes["A"]["group"]
    0
    >>> G["A"]["B"]["weight"]
    5
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional

import networkx as nx

from nodegroups.solver.weights import WeightResolver

if TYPE_CHECKING:
    from nodegroups.model import Problem
    from nodegroups.types import Solution

UNASSIGNED = -1


def to_networkx(problem: "Problem", solution: Optional["Solution"] = None) -> nx.Graph:
    """Build an undirected graph of nodes and their resolved affinities.

    Edges use the effective links (custom links plus tag bonuses) resolved
    with the problem's symmetric/directed rule, so an edge weight is exactly
    what the solver counts for that pair. Pairs with zero affinity get no edge.

    Args:
        problem: Problem whose nodes and links are drawn.
        solution: Optional solution used to annotate group membership.

    Returns:
        Graph with node attributes ``weight``, ``label``, ``group`` (group
        index, ``-1`` when free or no solution is given) and ``free``, and
        edge attributes ``weight`` and ``internal`` (both ends in the same
        group). Graph attributes carry the bounds and,
        with a solution, its ``total_weight``.
    """
    resolver = WeightResolver(
        problem.nodes, problem.effective_links(), symmetric=problem.options.symmetric_links
    )

    group_of: Dict[str, int] = {}
    free = set()
    if solution is not None:
        for index, group in enumerate(solution.groups):
            for node_id in group:
                group_of[node_id] = index
        free = set(solution.free_nodes)

    G = nx.Graph(min_weight=problem.min_weight, max_weight=problem.max_weight)
    if solution is not None:
        G.graph["total_weight"] = solution.total_weight

    for node in problem.nodes:
        G.add_node(
            node.id,
            weight=node.weight,
            label=node.display_name,
            group=group_of.get(node.id, UNASSIGNED),
            free=node.id in free,
        )

    ids = problem.node_ids
    for i, a in enumerate(ids):
        for b in ids[i + 1 :]:
            weight = resolver.pair_affinity(a, b)
            if weight != 0:
                G.add_edge(
                    a,
                    b,
                    weight=weight,
                    internal=a in group_of and group_of.get(a) == group_of.get(b),
                )
    return G


def write_graphml(G: nx.Graph, path: str) -> None:
    """Write ``G`` as GraphML."""
    nx.write_graphml(G, path)
