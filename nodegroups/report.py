"""Plain-text rendering of solve results."""

from __future__ import annotations

from typing import Any, List, Optional

from nodegroups.model import Problem
from nodegroups.types import Solution, SolveResult


def format_table(
    headers: List[str],
    rows: List[List[Any]],
    min_width: int = 6,
    max_col_width: Optional[int] = None,
) -> str:
    """Format rows as a simple ASCII table.

    Args:
        headers: Column headers.
        rows: Data rows.
        min_width: Minimum column width.
        max_col_width: Optional cap; longer cells are clipped with ``...``.

    Returns:
        Table text, or an empty string when there are no rows.
    """
    if not rows:
        return ""

    def clip(val: Any) -> str:
        s = str(val)
        if max_col_width is not None and len(s) > max_col_width:
            return s[: max_col_width - 3] + "..."
        return s

    cells = [[clip(h) for h in headers]] + [[clip(v) for v in row] for row in rows]
    widths = [
        max(min_width, max(len(row[col]) for row in cells))
        for col in range(len(headers))
    ]

    def line(row: List[str]) -> str:
        return "   " + " | ".join(f"{v:<{widths[i]}}" for i, v in enumerate(row))

    out = [line(cells[0]), "   " + "-+-".join("-" * w for w in widths)]
    out.extend(line(row) for row in cells[1:])
    return "\n".join(out)


def format_number(value: Any) -> str:
    """Return a number with up to three decimals and no trailing zeros.

    Examples:
        10.0 -> "10"; 2.5 -> "2.5"; 1234.5678 -> "1,234.568".
    """
    try:
        v = float(value)
    except (TypeError, ValueError):
        return str(value)
    s = f"{v:,.3f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return s


def format_solution(
    problem: Problem, solution: Solution, rank: int, optimal: bool = False
) -> str:
    """Render one solution as a header line plus a group table."""
    names = {n.id: n.display_name for n in problem.nodes}
    header = f"#{rank}  total weight {format_number(solution.total_weight)}"
    if solution.score != solution.total_weight:
        header += f"  score {format_number(solution.score)}"
    if solution.free_nodes:
        header += f" | {len(solution.free_nodes)} free"
    if optimal:
        header += "  [optimal]"

    rows = [
        [
            index + 1,
            ", ".join(names.get(node_id, node_id) for node_id in detail.node_ids),
            format_number(detail.node_weight_sum),
            format_number(detail.combined_weight),
        ]
        for index, detail in enumerate(solution.group_details)
    ]
    lines = [header]
    table = format_table(
        ["Group", "Nodes", "Node weight", "Combined weight"], rows, max_col_width=60
    )
    if table:
        lines.append(table)
    if solution.free_nodes:
        free = ", ".join(names.get(node_id, node_id) for node_id in solution.free_nodes)
        lines.append(f"   Free nodes: {free}")
    return "\n".join(lines)


def format_result(problem: Problem, result: SolveResult) -> str:
    """Render a whole solve result, best solution first."""
    if result.errors:
        return "\n".join(f"ERROR: {message}" for message in result.errors)
    if not result.solutions:
        return (
            "No feasible solution found. Try relaxing the group bounds "
            "or adjusting node weights."
        )
    return "\n\n".join(
        format_solution(problem, s, rank, optimal=result.optimal and rank == 1)
        for rank, s in enumerate(result.solutions, start=1)
    )
