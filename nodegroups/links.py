"""Link weight tables keyed by ordered node-id pairs.

A link table maps ``(from_id, to_id)`` to a number. Absent or zero entries
mean "no link"; the table may be asymmetric. Helpers here convert between the
table and the sparse list form used in problem files, derive link bonuses
from tags and fold both directions of a pair into one value.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Tuple

if TYPE_CHECKING:
    from nodegroups.model import Tag

LinkKey = Tuple[str, str]
LinkTable = Dict[LinkKey, float]


def build_link_table(entries: Iterable[Mapping[str, Any]]) -> LinkTable:
    """Build a link table from ``{"from", "to", "weight"}`` entries.

    Later entries for the same ordered pair overwrite earlier ones.

    Args:
        entries: Iterable of mappings with ``from``, ``to`` and ``weight`` keys.

    Returns:
        New link table.

    Raises:
        ValueError: If an entry lacks one of the required keys.
    """
    table: LinkTable = {}
    for entry in entries:
        missing = [k for k in ("from", "to", "weight") if k not in entry]
        if missing:
            raise ValueError(
                f"Link entry {dict(entry)!r} is missing key(s): {', '.join(missing)}"
            )
        table[(str(entry["from"]), str(entry["to"]))] = entry["weight"]
    return table


def table_to_list(table: Mapping[LinkKey, float]) -> List[Dict[str, Any]]:
    """Return the entries of ``table`` as ``{"from", "to", "weight"}`` dicts.

    Inverse of :func:`build_link_table`; zero entries are kept as they are.
    """
    return [
        {"from": src, "to": dst, "weight": weight}
        for (src, dst), weight in table.items()
    ]


def symmetrize(table: Mapping[LinkKey, float]) -> LinkTable:
    """Return a copy of ``table`` with both directions of every pair equal.

    For each pair the ``a -> b`` value wins when nonzero, otherwise ``b -> a``
    is used, where ``a -> b`` is the direction met first in the table. Pairs
    with no nonzero direction are left untouched.
    """
    result: LinkTable = dict(table)
    seen = set()
    for a, b in table:
        pair = frozenset((a, b))
        if pair in seen:
            continue
        seen.add(pair)
        value = table.get((a, b), 0) or table.get((b, a), 0)
        if value:
            result[(a, b)] = value
            result[(b, a)] = value
    return result


def tag_link_table(tags: Iterable["Tag"]) -> LinkTable:
    """Return link bonuses implied by tags.

    Every unordered pair of nodes sharing a tag receives ``tag.bonus`` in both
    directions; bonuses from several shared tags accumulate.
    """
    table: LinkTable = {}
    for tag in tags:
        ids = list(tag.node_ids)
        for i, a in enumerate(ids):
            for b in ids[i + 1 :]:
                table[(a, b)] = table.get((a, b), 0) + tag.bonus
                table[(b, a)] = table.get((b, a), 0) + tag.bonus
    return table


def effective_link_table(
    table: Mapping[LinkKey, float], tags: Iterable["Tag"] = ()
) -> LinkTable:
    """Return custom links plus tag bonuses, summed per ordered pair."""
    result: LinkTable = dict(table)
    for key, bonus in tag_link_table(tags).items():
        result[key] = result.get(key, 0) + bonus
    return result
