"""Problem model: nodes, tags, solve options and the Problem container.

These classes are the plain inputs of a solve. The solver never mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence

from nodegroups.links import LinkTable, effective_link_table

if TYPE_CHECKING:
    from nodegroups.config import SolverConfig
    from nodegroups.types import SolveResult

DEFAULT_TAG_BONUS = 2.0


@dataclass(frozen=True)
class Node:
    """A weighted item to be grouped.

    Attributes:
        id (str): Unique identifier used as the key in link tables.
        weight (float): Node weight counted against group bounds (>= 0).
        label (Optional[str]): Display name; the id is used when missing.
    """

    id: str
    weight: float = 0.0
    label: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Return the label, falling back to the id."""
        return self.label or self.id


@dataclass
class Tag:
    """A named set of nodes that attract each other.

    Attributes:
        name (str): Tag name.
        node_ids (List[str]): Tagged node ids.
        bonus (float): Link weight added per co-tagged pair and direction.
        color (Optional[str]): Display color, e.g. ``"#4f46e5"``.
    """

    name: str
    node_ids: List[str] = field(default_factory=list)
    bonus: float = DEFAULT_TAG_BONUS
    color: Optional[str] = None


_OPTION_ALIASES = {
    "allowFreeNodes": "allow_free_nodes",
    "symmetricLinks": "symmetric_links",
    "balanceGroupWeightsFactor": "balance_group_weights_factor",
    "bonusPerGroup": "bonus_per_group",
    "fixedGroups": "fixed_groups",
}


@dataclass
class SolveOptions:
    """Per-solve behavior switches.

    Attributes:
        allow_free_nodes (bool): Nodes may be left outside every group.
        symmetric_links (bool): Pair affinity takes one direction (the first
            nonzero of ``a -> b``, ``b -> a``) instead of summing both.
        balance_group_weights_factor (float): Score penalty per unit of
            population variance of group affinities (>= 0).
        bonus_per_group (float): Score bonus per group in a solution.
        fixed_groups (List[List[str]]): Node-id lists that must stay together.
    """

    allow_free_nodes: bool = False
    symmetric_links: bool = True
    balance_group_weights_factor: float = 0.0
    bonus_per_group: float = 0.0
    fixed_groups: List[List[str]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.balance_group_weights_factor < 0:
            raise ValueError(
                "balance_group_weights_factor must be >= 0, "
                f"got {self.balance_group_weights_factor}"
            )

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "SolveOptions":
        """Build options from snake_case or camelCase keys.

        Raises:
            ValueError: If an unknown option name is given.
        """
        if not data:
            return cls()
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in cls.__dataclass_fields__:
                raise ValueError(f"Unknown solve option '{key}'")
            kwargs[name] = value
        if "fixed_groups" in kwargs:
            kwargs["fixed_groups"] = [
                [str(node_id) for node_id in group]
                for group in kwargs["fixed_groups"] or []
            ]
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable snake_case dict."""
        return {
            "allow_free_nodes": self.allow_free_nodes,
            "symmetric_links": self.symmetric_links,
            "balance_group_weights_factor": self.balance_group_weights_factor,
            "bonus_per_group": self.bonus_per_group,
            "fixed_groups": [list(g) for g in self.fixed_groups],
        }


@dataclass
class Problem:
    """Everything needed for one solve, as stored in problem files.

    Attributes:
        nodes (List[Node]): Nodes in input order.
        links (LinkTable): Custom link weights.
        min_weight (float): Minimum node-weight sum per group.
        max_weight (float): Maximum node-weight sum per group.
        options (SolveOptions): Solve options.
        tags (List[Tag]): Tags adding link bonuses between co-tagged nodes.
    """

    nodes: List[Node] = field(default_factory=list)
    links: LinkTable = field(default_factory=dict)
    min_weight: float = 0.0
    max_weight: float = 100.0
    options: SolveOptions = field(default_factory=SolveOptions)
    tags: List[Tag] = field(default_factory=list)

    @property
    def node_ids(self) -> List[str]:
        return [n.id for n in self.nodes]

    def node(self, node_id: str) -> Node:
        """Return the node with ``node_id``.

        Raises:
            KeyError: If no node has that id.
        """
        for n in self.nodes:
            if n.id == node_id:
                return n
        raise KeyError(node_id)

    def effective_links(self) -> LinkTable:
        """Return custom links plus tag bonuses."""
        return effective_link_table(self.links, self.tags)

    def solve(self, config: Optional["SolverConfig"] = None) -> "SolveResult":
        """Run :func:`nodegroups.solver.compute_groups` on this problem."""
        from nodegroups.solver import compute_groups

        return compute_groups(
            self.nodes,
            self.effective_links(),
            self.min_weight,
            self.max_weight,
            self.options,
            config=config,
        )


def make_nodes(defs: Sequence[Sequence[Any]]) -> List[Node]:
    """Build nodes from ``(id, weight)`` or ``(id, weight, label)`` tuples."""
    return [Node(str(d[0]), d[1], *d[2:]) for d in defs]
