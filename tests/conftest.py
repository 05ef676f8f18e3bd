"""Shared pytest fixtures: small grouping problems with known optima."""

from __future__ import annotations

import pytest

from nodegroups.links import build_link_table
from nodegroups.model import Problem, SolveOptions, Tag, make_nodes


def links_from(edges):
    """Build a link table from ``(from, to, weight)`` triples."""
    return build_link_table({"from": a, "to": b, "weight": w} for a, b, w in edges)


@pytest.fixture
def two_pairs() -> Problem:
    # A--5--B    C--8--D    (all weight 10, groups 10..25)
    return Problem(
        nodes=make_nodes([("A", 10), ("B", 10), ("C", 10), ("D", 10)]),
        links=links_from([("A", "B", 5), ("C", "D", 8)]),
        min_weight=10,
        max_weight=25,
    )


@pytest.fixture
def pair_with_isolated() -> Problem:
    # A--7--B, X isolated; free nodes allowed
    return Problem(
        nodes=make_nodes([("A", 10), ("B", 10), ("X", 5)]),
        links=links_from([("A", "B", 7)]),
        min_weight=10,
        max_weight=25,
        options=SolveOptions(allow_free_nodes=True),
    )


@pytest.fixture
def tagged_problem() -> Problem:
    return Problem(
        nodes=make_nodes([("A", 10, "Alice"), ("B", 10, "Bob"), ("C", 5), ("D", 5)]),
        links=links_from([("A", "B", 3), ("C", "D", 1)]),
        min_weight=5,
        max_weight=20,
        tags=[Tag(name="family", node_ids=["C", "D"], bonus=4, color="#059669")],
    )
