"""Structural input checks run before any search.

Both checks return human-readable messages instead of raising: an invalid
problem is an expected outcome that the caller reports to the user.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Mapping, Sequence, Tuple

from nodegroups.links import LinkKey
from nodegroups.logging import get_logger
from nodegroups.model import Node

logger = get_logger(__name__)


def validate(
    nodes: Sequence[Node],
    links: Mapping[LinkKey, float],
    min_weight: float,
    max_weight: float,
) -> List[str]:
    """Check that a problem is structurally solvable.

    All applicable errors are collected; the checks do not short-circuit.

    Args:
        nodes: Problem nodes.
        links: Link table (accepted for interface symmetry; not inspected).
        min_weight: Minimum node-weight sum per group.
        max_weight: Maximum node-weight sum per group.

    Returns:
        Error messages; empty when the input is valid.
    """
    errors: List[str] = []

    if not nodes:
        errors.append("At least one node is required.")

    if min_weight > max_weight:
        errors.append(
            f"Minimum group weight ({min_weight}) must be <= maximum group weight ({max_weight})."
        )

    for node in nodes:
        if node.weight > max_weight:
            errors.append(
                f"Node '{node.id}' has weight {node.weight} which exceeds the maximum group weight {max_weight}."
            )

    counts = Counter(node.id for node in nodes)
    for node_id, count in counts.items():
        if count > 1:
            errors.append(f"Node id '{node_id}' is used by {count} nodes.")

    return errors


def normalize_fixed_groups(
    fixed_groups: Iterable[Sequence[str]], node_ids: Iterable[str]
) -> List[List[str]]:
    """Drop unknown ids and empty groups from caller-supplied fixed groups.

    Unknown ids are logged and ignored rather than reported as errors.
    """
    known = set(node_ids)
    result: List[List[str]] = []
    for group in fixed_groups:
        kept = [node_id for node_id in group if node_id in known]
        dropped = [node_id for node_id in group if node_id not in known]
        if dropped:
            logger.warning(
                f"Ignoring unknown node id(s) in fixed group: {', '.join(map(str, dropped))}"
            )
        if kept:
            result.append(kept)
    return result


def validate_fixed_groups(
    fixed_groups: Iterable[Sequence[str]],
    nodes: Sequence[Node],
    max_weight: float,
) -> Tuple[List[List[str]], List[str]]:
    """Normalize fixed groups and check them against the problem.

    Args:
        fixed_groups: Caller-supplied node-id lists.
        nodes: Problem nodes.
        max_weight: Maximum node-weight sum per group.

    Returns:
        Tuple ``(groups, errors)``: the normalized fixed groups and at most one
        error message naming the violated rule.
    """
    groups = normalize_fixed_groups(fixed_groups, (n.id for n in nodes))

    members = [node_id for group in groups for node_id in group]
    if len(set(members)) != len(members):
        return groups, ["Fixed groups must not contain duplicate nodes."]

    weights = {n.id: n.weight for n in nodes}
    for group in groups:
        if sum(weights[node_id] for node_id in group) > max_weight:
            return groups, [
                f"A fixed group exceeds the maximum group weight ({max_weight})."
            ]

    return groups, []
