import pytest

from nodegroups.config import SolverConfig
from nodegroups.model import Node, Problem, SolveOptions, Tag, make_nodes


def test_make_nodes_with_labels():
    nodes = make_nodes([(1, 5), ("b", 2.5, "Bob")])
    assert nodes == [Node("1", 5), Node("b", 2.5, "Bob")]
    assert nodes[0].display_name == "1"
    assert nodes[1].display_name == "Bob"


def test_tag_defaults():
    tag = Tag("family")
    assert tag.node_ids == []
    assert tag.bonus == 2
    assert tag.color is None


class TestSolveOptions:
    def test_defaults(self):
        opts = SolveOptions()
        assert opts.allow_free_nodes is False
        assert opts.symmetric_links is True
        assert opts.balance_group_weights_factor == 0
        assert opts.bonus_per_group == 0
        assert opts.fixed_groups == []

    def test_from_dict_accepts_both_spellings(self):
        opts = SolveOptions.from_dict(
            {"allowFreeNodes": True, "bonus_per_group": 3, "fixedGroups": [[1, 2], ["x"]]}
        )
        assert opts.allow_free_nodes is True
        assert opts.bonus_per_group == 3
        assert opts.fixed_groups == [["1", "2"], ["x"]]

    def test_from_empty_dict(self):
        assert SolveOptions.from_dict(None) == SolveOptions()
        assert SolveOptions.from_dict({}) == SolveOptions()

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="Unknown solve option 'speed'"):
            SolveOptions.from_dict({"speed": 3})

    def test_negative_balance_factor(self):
        with pytest.raises(ValueError):
            SolveOptions(balance_group_weights_factor=-0.5)

    def test_to_dict_round_trip(self):
        opts = SolveOptions(allow_free_nodes=True, fixed_groups=[["a", "b"]])
        assert SolveOptions.from_dict(opts.to_dict()) == opts


class TestProblem:
    def test_node_lookup(self, tagged_problem):
        assert tagged_problem.node_ids == ["A", "B", "C", "D"]
        assert tagged_problem.node("A").label == "Alice"
        with pytest.raises(KeyError):
            tagged_problem.node("Z")

    def test_effective_links_include_tag_bonus(self, tagged_problem):
        links = tagged_problem.effective_links()
        assert links[("C", "D")] == 5
        assert links[("D", "C")] == 4
        assert links[("A", "B")] == 3
        assert ("D", "C") not in tagged_problem.links

    def test_solve_uses_tag_bonus(self, tagged_problem):
        result = tagged_problem.solve()
        assert result.optimal is True
        assert result.best.total_weight == 8
        assert sorted(sorted(g) for g in result.best.groups) == [["A", "B"], ["C", "D"]]

    def test_solve_honors_config(self, two_pairs):
        config = SolverConfig(exhaustive_node_limit=2, max_solutions=1)
        result = two_pairs.solve(config=config)
        assert result.optimal is False
        assert len(result.solutions) == 1
        assert result.best.total_weight == 13
