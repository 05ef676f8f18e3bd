import pytest

from nodegroups.links import (
    build_link_table,
    effective_link_table,
    symmetrize,
    table_to_list,
    tag_link_table,
)
from nodegroups.model import Tag, make_nodes
from nodegroups.solver.weights import WeightResolver


def test_build_link_table_coerces_ids_and_overwrites():
    table = build_link_table(
        [
            {"from": 1, "to": 2, "weight": 3},
            {"from": "1", "to": "2", "weight": 4},
            {"from": "2", "to": "1", "weight": 0},
        ]
    )
    assert table == {("1", "2"): 4, ("2", "1"): 0}


def test_build_link_table_missing_key():
    with pytest.raises(ValueError, match="weight"):
        build_link_table([{"from": "a", "to": "b"}])


def test_table_to_list_inverts_build():
    entries = [{"from": "a", "to": "b", "weight": 2}, {"from": "b", "to": "c", "weight": 0}]
    assert table_to_list(build_link_table(entries)) == entries


def test_symmetrize_first_direction_wins():
    table = {("a", "b"): 3, ("b", "a"): 5, ("c", "a"): 2, ("b", "c"): 0}
    result = symmetrize(table)
    assert result[("a", "b")] == result[("b", "a")] == 3
    assert result[("c", "a")] == result[("a", "c")] == 2
    assert result[("b", "c")] == 0
    assert ("c", "b") not in result
    # Input is left alone
    assert table[("b", "a")] == 5


def test_tag_bonuses_accumulate_per_shared_tag():
    tags = [
        Tag("family", ["a", "b", "c"], bonus=2),
        Tag("friends", ["a", "b"], bonus=1.5),
    ]
    table = tag_link_table(tags)
    assert table[("a", "b")] == table[("b", "a")] == 3.5
    assert table[("a", "c")] == table[("c", "b")] == 2
    assert len(table) == 6


def test_effective_link_table_adds_bonus_on_top_of_links():
    links = {("a", "b"): 1}
    table = effective_link_table(links, [Tag("t", ["a", "b"], bonus=4)])
    assert table == {("a", "b"): 5, ("b", "a"): 4}
    assert links == {("a", "b"): 1}
    assert effective_link_table(links) == links


def test_symmetrized_table_resolves_the_same_both_ways():
    table = symmetrize({("a", "b"): 3, ("b", "a"): 5})
    nodes = make_nodes([("a", 1), ("b", 1)])
    directed = WeightResolver(nodes, table, symmetric=False)
    assert directed.pair_affinity("a", "b") == directed.pair_affinity("b", "a") == 6
    assert WeightResolver(nodes, table).pair_affinity("b", "a") == 3
