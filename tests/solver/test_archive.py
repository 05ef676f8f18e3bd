import pytest

from nodegroups.links import build_link_table
from nodegroups.model import make_nodes
from nodegroups.solver.archive import SolutionArchive, solution_key
from nodegroups.solver.weights import WeightResolver


@pytest.fixture
def resolver():
    # a--3--b   c--1--d
    links = build_link_table(
        [
            {"from": "a", "to": "b", "weight": 3},
            {"from": "c", "to": "d", "weight": 1},
        ]
    )
    return WeightResolver(make_nodes([("a", 1), ("b", 1), ("c", 1), ("d", 1)]), links)


def _archive(resolver, **kwargs):
    return SolutionArchive(resolver, ["a", "b", "c", "d"], **kwargs)


def test_solution_key_ignores_order():
    assert solution_key([["b", "a"], ["d", "c"]], ["e"]) == solution_key(
        [["c", "d"], ["a", "b"]], ["e"]
    )
    assert solution_key([["a", "b"]], ["c"]) != solution_key([["a", "b", "c"]], [])


def test_add_records_details(resolver):
    archive = _archive(resolver)
    assert archive.add([["a", "b"], ["c", "d"]])
    (solution,) = archive.solutions
    assert solution.total_weight == 4
    assert solution.score == 4
    assert [d.combined_weight for d in solution.group_details] == [3, 1]
    assert [d.node_weight_sum for d in solution.group_details] == [2, 2]


def test_structural_duplicates_rejected(resolver):
    archive = _archive(resolver)
    assert archive.add([["a", "b"], ["c", "d"]])
    assert not archive.add([["d", "c"], ["b", "a"]])
    assert len(archive) == 1


def test_rejects_candidates_not_covering_every_node(resolver):
    archive = _archive(resolver)
    assert not archive.add([["a", "b"]])
    assert not archive.add([["a", "b"], ["b", "c", "d"]])
    assert not archive.add([["a", "b"], ["c"]], ["d", "d"])
    assert len(archive) == 0


def test_sorted_by_score_with_stable_ties(resolver):
    archive = _archive(resolver)
    archive.add([["a", "b"], ["c", "d"]])
    archive.add([["a", "c"], ["b", "d"]])
    archive.add([["a", "b", "c", "d"]])
    archive.add([["a", "b"], ["c"], ["d"]])
    assert [s.groups for s in archive.solutions] == [
        [["a", "b"], ["c", "d"]],
        [["a", "b", "c", "d"]],
        [["a", "b"], ["c"], ["d"]],
        [["a", "c"], ["b", "d"]],
    ]


def test_capacity_and_permanent_eviction(resolver):
    archive = _archive(resolver, capacity=2)
    assert archive.add([["a", "b"], ["c", "d"]])  # 4
    assert archive.add([["a", "c"], ["b", "d"]])  # 0
    assert archive.add([["a", "b"], ["c"], ["d"]])  # 3, evicts the 0
    assert [s.total_weight for s in archive.solutions] == [4, 3]
    # Ties with the worst retained entry do not get in
    assert not archive.add([["a", "b", "c"], ["d"]])
    # An evicted solution is not readmitted
    assert not archive.add([["b", "d"], ["c", "a"]])
    assert len(archive) == 2


def test_bonus_per_group(resolver):
    archive = _archive(resolver, bonus_per_group=2)
    archive.add([["a", "b", "c", "d"]])
    archive.add([["a", "b"], ["c", "d"]])
    assert [s.score for s in archive.solutions] == [8, 6]
    assert [s.total_weight for s in archive.solutions] == [4, 4]


def test_balance_factor_penalizes_uneven_groups(resolver):
    archive = _archive(resolver, balance_factor=1)
    archive.add([["a", "b"], ["c", "d"]])
    archive.add([["a", "b", "c", "d"]])
    # Affinities 3 and 1 have population variance 1
    assert [s.score for s in archive.solutions] == [4, 3]
    assert archive.solutions[0].groups == [["a", "b", "c", "d"]]


def test_prune_wasteful():
    links = build_link_table([{"from": "a", "to": "b", "weight": 7}])
    r = WeightResolver(make_nodes([("a", 1), ("b", 1), ("x", 1)]), links)
    archive = SolutionArchive(r, ["a", "b", "x"])
    archive.add([["a", "b", "x"]])
    archive.add([["a", "b"], ["x"]])
    assert archive.is_wasteful(archive.solutions[0])
    assert archive.prune_wasteful() == 1
    assert [s.groups for s in archive.solutions] == [[["a", "b"], ["x"]]]


def test_prune_keeps_everything_when_all_wasteful():
    r = WeightResolver(make_nodes([("a", 1), ("b", 1)]), {})
    archive = SolutionArchive(r, ["a", "b"])
    archive.add([["a", "b"]])
    assert archive.prune_wasteful() == 0
    assert len(archive) == 1
