import json
import logging
from pathlib import Path

import networkx as nx
import pytest

from nodegroups import cli

TWO_PAIRS = """
min_weight: 10
max_weight: 25
nodes:
  - {id: A, weight: 10, label: Alice}
  - {id: B, weight: 10}
  - {id: C, weight: 10}
  - {id: D, weight: 10}
links:
  - {from: A, to: B, weight: 5}
  - {from: C, to: D, weight: 8}
"""

WITH_ISOLATED = """
min_weight: 10
max_weight: 25
nodes: [{id: A, weight: 10}, {id: B, weight: 10}, {id: X, weight: 5}]
links: [{from: A, to: B, weight: 7}]
"""


@pytest.fixture
def problem_file(tmp_path: Path) -> Path:
    path = tmp_path / "two_pairs.yaml"
    path.write_text(TWO_PAIRS)
    return path


def test_solve_prints_ranked_tables(problem_file: Path, capsys) -> None:
    cli.main(["solve", str(problem_file)])
    out = capsys.readouterr().out

    assert out.startswith("#1  total weight 13  [optimal]")
    assert "Alice, B" in out
    assert "C, D" in out


def test_solve_stdout_is_json(problem_file: Path, capsys) -> None:
    cli.main(["solve", str(problem_file), "--stdout"])
    payload = json.loads(capsys.readouterr().out)

    assert payload["optimal"] is True
    assert payload["errors"] == []
    assert payload["solutions"][0]["total_weight"] == 13


def test_solve_writes_results_and_graph(problem_file: Path, tmp_path: Path) -> None:
    results = tmp_path / "out" / "results.json"
    graph = tmp_path / "groups.graphml"

    cli.main(["solve", str(problem_file), "-r", str(results), "--graph", str(graph)])

    data = json.loads(results.read_text())
    assert len(data["solutions"]) >= 1
    G = nx.read_graphml(graph)
    assert G.nodes["A"]["group"] == G.nodes["B"]["group"]
    assert G.graph["total_weight"] == 13


def test_allow_free_nodes_flag(tmp_path: Path, capsys) -> None:
    path = tmp_path / "isolated.yaml"
    path.write_text(WITH_ISOLATED)

    cli.main(["solve", str(path), "--stdout"])
    grouped = json.loads(capsys.readouterr().out)
    assert grouped["solutions"][0]["free_nodes"] == []

    cli.main(["solve", str(path), "--stdout", "--allow-free-nodes"])
    freed = json.loads(capsys.readouterr().out)
    assert freed["solutions"][0]["free_nodes"] == ["X"]


def test_asymmetric_flag(tmp_path: Path, capsys) -> None:
    path = tmp_path / "directed.yaml"
    path.write_text(
        "nodes: [{id: a, weight: 1}, {id: b, weight: 1}]\n"
        "links: [{from: a, to: b, weight: 3}, {from: b, to: a, weight: 5}]\n"
    )
    cli.main(["solve", str(path), "--stdout", "--asymmetric"])
    payload = json.loads(capsys.readouterr().out)
    assert payload["solutions"][0]["total_weight"] == 8


def test_solve_infeasible_prints_hint(tmp_path: Path, capsys) -> None:
    path = tmp_path / "tight.yaml"
    path.write_text(
        "min_weight: 25\nmax_weight: 30\n"
        "nodes: [{id: a, weight: 10}, {id: b, weight: 10}]\n"
    )
    cli.main(["solve", str(path)])
    assert "No feasible solution found" in capsys.readouterr().out


def test_solve_invalid_problem_exits_1(tmp_path: Path, capsys) -> None:
    path = tmp_path / "heavy.yaml"
    path.write_text("max_weight: 10\nnodes: [{id: a, weight: 50}]\n")

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["solve", str(path)])

    assert exc_info.value.code == 1
    assert "ERROR: Node 'a' has weight 50" in capsys.readouterr().out


def test_validate_ok(problem_file: Path, capsys) -> None:
    cli.main(["validate", str(problem_file)])
    assert capsys.readouterr().out.strip() == "OK: 4 nodes, 2 links, 0 tags"


def test_validate_reports_fixed_group_errors(tmp_path: Path, capsys) -> None:
    path = tmp_path / "fixed.yaml"
    path.write_text(
        "max_weight: 10\n"
        "nodes: [{id: a, weight: 6}, {id: b, weight: 6}]\n"
        "options: {fixed_groups: [[a, b]]}\n"
    )
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["validate", str(path)])

    assert exc_info.value.code == 1
    assert "exceeds the maximum group weight" in capsys.readouterr().out


def test_missing_file_exits_1(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["validate", str(tmp_path / "missing.yaml")])

    assert exc_info.value.code == 1
    assert "ERROR: Problem file not found" in capsys.readouterr().out


def test_schema_error_exits_1(tmp_path: Path, capsys) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("nodes: [{id: a, size: 3}]\n")

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["solve", str(path)])

    assert exc_info.value.code == 1
    out = capsys.readouterr().out
    assert "ERROR: Failed to load problem: ValueError" in out
    assert "nodes/0" in out


def test_no_arguments_prints_help(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])

    assert exc_info.value.code == 0
    assert "usage: nodegroups" in capsys.readouterr().out


def test_verbose_and_quiet_set_log_level(problem_file: Path) -> None:
    root = logging.getLogger("nodegroups")

    cli.main(["--verbose", "validate", str(problem_file)])
    assert root.level == logging.DEBUG

    cli.main(["--quiet", "validate", str(problem_file)])
    assert root.level == logging.WARNING

    cli.main(["validate", str(problem_file)])
    assert root.level == logging.INFO
