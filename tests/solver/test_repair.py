from nodegroups.model import make_nodes
from nodegroups.solver.repair import merge_small_groups
from nodegroups.solver.weights import WeightResolver


def _resolver(**weights):
    return WeightResolver(make_nodes(list(weights.items())), {})


def test_merges_under_min_group_into_first_fitting_group():
    r = _resolver(a=3, b=3, c=5, d=5)
    groups = [["a"], ["b"], ["c", "d"]]
    assert merge_small_groups(groups, [], r, 6, 10) == ([["a", "b"], ["c", "d"]], [])
    # Inputs are left untouched
    assert groups == [["a"], ["b"], ["c", "d"]]


def test_dissolves_unmergeable_group_when_free_nodes_allowed():
    r = _resolver(a=3, b=5, c=5)
    repaired = merge_small_groups([["a"], ["b", "c"]], ["z"], r, 6, 10, allow_free_nodes=True)
    assert repaired == ([["b", "c"]], ["z", "a"])


def test_fails_when_group_cannot_be_fixed():
    r = _resolver(a=3, b=5, c=5)
    assert merge_small_groups([["a"], ["b", "c"]], [], r, 6, 10) is None


def test_fails_when_a_group_exceeds_max():
    r = _resolver(a=8, b=8)
    assert merge_small_groups([["a", "b"]], [], r, 0, 10) is None


def test_group_with_fixed_members_is_never_dissolved():
    r = _resolver(a=3, b=5, c=5)
    repaired = merge_small_groups(
        [["a"], ["b", "c"]], [], r, 6, 10, allow_free_nodes=True, fixed_ids={"a"}
    )
    assert repaired is None


def test_two_fixed_groups_are_never_merged():
    r = _resolver(a=3, b=3)
    assert merge_small_groups([["a"], ["b"]], [], r, 6, 10, fixed_ids={"a", "b"}) is None
    assert merge_small_groups([["a"], ["b"]], [], r, 6, 10, fixed_ids={"a"}) == (
        [["a", "b"]],
        [],
    )
