"""Problem and result files.

Problem documents are YAML (JSON is accepted as a YAML subset) with this
layout::

    min_weight: 10
    max_weight: 25
    nodes:
      - {id: A, weight: 10, label: Alice}
      - {id: B, weight: 10}
    links:
      - {from: A, to: B, weight: 5}
    tags:
      - {name: family, nodes: [A, B], bonus: 2}
    options:
      allow_free_nodes: false
      fixed_groups: [[A, B]]

Documents saved by the browser edition (``nodeWeight``, ``linkWeights``,
``minimumCombinedWeight`` ...) are converted to this layout before schema
validation.
"""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Union

import jsonschema
import yaml

from nodegroups.links import build_link_table, table_to_list
from nodegroups.logging import get_logger
from nodegroups.model import DEFAULT_TAG_BONUS, Node, Problem, SolveOptions, Tag
from nodegroups.types import SolveResult

logger = get_logger(__name__)

DEFAULT_MIN_WEIGHT = 0.0
DEFAULT_MAX_WEIGHT = 100.0

_APP_MARKERS = (
    "linkWeights",
    "minimumCombinedWeight",
    "maximumCombinedWeight",
    "splittingPremiumPoints",
)


def _load_schema() -> Dict[str, Any]:
    with (
        resources.files("nodegroups.schemas")
        .joinpath("problem.json")
        .open("r", encoding="utf-8")
    ) as f:
        return json.load(f)


def is_app_document(data: Dict[str, Any]) -> bool:
    """Return True if ``data`` uses the browser edition's camelCase layout."""
    if any(marker in data for marker in _APP_MARKERS):
        return True
    nodes = data.get("nodes")
    return isinstance(nodes, list) and any(
        isinstance(n, dict) and "nodeWeight" in n for n in nodes
    )


def convert_app_document(data: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a browser-edition document to the native layout.

    Missing values take the browser defaults: node weight 0, bounds 0/100,
    symmetric links on, free nodes off, tag bonus 2. Seating plans carry
    ``splittingPremiumPoints``, which the wedding edition solves with as the
    per-group bonus together with a balance factor of 1.
    """
    options: Dict[str, Any] = {
        "allow_free_nodes": bool(data.get("allowFreeNodes", False)),
        "symmetric_links": data.get("symmetricLinks") is not False,
    }
    for app_key, key in (
        ("balanceGroupWeightsFactor", "balance_group_weights_factor"),
        ("bonusPerGroup", "bonus_per_group"),
        ("fixedGroups", "fixed_groups"),
    ):
        if app_key in data:
            options[key] = data[app_key]
    if data.get("splittingPremiumPoints") is not None:
        options["bonus_per_group"] = data["splittingPremiumPoints"]
        options["balance_group_weights_factor"] = 1

    return {
        "min_weight": data.get("minimumCombinedWeight") or DEFAULT_MIN_WEIGHT,
        "max_weight": data.get("maximumCombinedWeight") or DEFAULT_MAX_WEIGHT,
        "nodes": [
            {
                "id": n.get("id"),
                "weight": n.get("nodeWeight") or 0,
                "label": n.get("label"),
            }
            for n in data.get("nodes") or []
        ],
        "links": [
            {"from": e.get("from"), "to": e.get("to"), "weight": e.get("linkWeight", 0)}
            for e in data.get("linkWeights") or []
        ],
        "tags": [
            {
                "name": t.get("name") or "Tag",
                "nodes": list(t.get("nodeIds") or []),
                "bonus": DEFAULT_TAG_BONUS if t.get("bonus") is None else t["bonus"],
                "color": t.get("color"),
            }
            for t in data.get("tags") or []
        ],
        "options": options,
    }


def problem_from_dict(data: Dict[str, Any]) -> Problem:
    """Validate a problem document and build a :class:`Problem`.

    Args:
        data: Parsed document, native or browser-edition layout.

    Returns:
        Problem instance. Node ids are coerced to strings; tag members that
        are not nodes are dropped.

    Raises:
        ValueError: If the document does not match the problem schema.
    """
    if not isinstance(data, dict):
        raise ValueError("The problem document must map to a dictionary at top-level.")
    if is_app_document(data):
        logger.debug("Converting browser-edition problem document")
        data = convert_app_document(data)

    try:
        jsonschema.validate(data, _load_schema())
    except jsonschema.ValidationError as exc:
        location = "/".join(str(p) for p in exc.absolute_path) or "<root>"
        raise ValueError(f"Invalid problem document at '{location}': {exc.message}") from exc

    nodes = [
        Node(id=str(n["id"]), weight=n.get("weight", 0), label=n.get("label"))
        for n in data["nodes"]
    ]
    node_ids = {n.id for n in nodes}

    tags: List[Tag] = []
    for t in data.get("tags", []):
        members = [str(node_id) for node_id in t.get("nodes", [])]
        unknown = [m for m in members if m not in node_ids]
        if unknown:
            logger.warning(
                f"Tag '{t['name']}' references unknown node(s): {', '.join(unknown)}"
            )
        tags.append(
            Tag(
                name=t["name"],
                node_ids=[m for m in members if m in node_ids],
                bonus=t.get("bonus", DEFAULT_TAG_BONUS),
                color=t.get("color"),
            )
        )

    return Problem(
        nodes=nodes,
        links=build_link_table(data.get("links", [])),
        min_weight=data.get("min_weight", DEFAULT_MIN_WEIGHT),
        max_weight=data.get("max_weight", DEFAULT_MAX_WEIGHT),
        options=SolveOptions.from_dict(data.get("options")),
        tags=tags,
    )


def problem_to_dict(problem: Problem) -> Dict[str, Any]:
    """Return the native document for ``problem`` (inverse of problem_from_dict)."""
    nodes: List[Dict[str, Any]] = []
    for n in problem.nodes:
        entry: Dict[str, Any] = {"id": n.id, "weight": n.weight}
        if n.label is not None:
            entry["label"] = n.label
        nodes.append(entry)

    tags: List[Dict[str, Any]] = []
    for t in problem.tags:
        entry = {"name": t.name, "nodes": list(t.node_ids), "bonus": t.bonus}
        if t.color is not None:
            entry["color"] = t.color
        tags.append(entry)

    return {
        "min_weight": problem.min_weight,
        "max_weight": problem.max_weight,
        "nodes": nodes,
        "links": table_to_list(problem.links),
        "tags": tags,
        "options": problem.options.to_dict(),
    }


def parse_problem(text: str) -> Problem:
    """Parse a YAML or JSON problem document."""
    data = yaml.safe_load(text)
    if data is None:
        data = {}
    return problem_from_dict(data)


def load_problem(path: Union[str, Path]) -> Problem:
    """Load a problem file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the document is not a valid problem.
    """
    path = Path(path)
    problem = parse_problem(path.read_text(encoding="utf-8"))
    logger.debug(f"Loaded {len(problem.nodes)} node(s) from {path}")
    return problem


def save_problem(problem: Problem, path: Union[str, Path]) -> None:
    """Write ``problem`` as YAML (``.yaml``/``.yml``) or JSON (anything else)."""
    path = Path(path)
    data = problem_to_dict(problem)
    if path.suffix.lower() in (".yaml", ".yml"):
        text = yaml.safe_dump(data, sort_keys=False)
    else:
        text = json.dumps(data, indent=2)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def save_result(result: SolveResult, path: Union[str, Path]) -> None:
    """Write ``result`` as JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(result.to_dict(), indent=2), encoding="utf-8")
