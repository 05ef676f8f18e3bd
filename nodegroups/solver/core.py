"""Solver entry point combining exhaustive search and seeded restarts."""

from __future__ import annotations

from time import perf_counter
from typing import Any, Mapping, Optional, Sequence, Union

from nodegroups.config import SOLVER_CONFIG, SolverConfig
from nodegroups.links import LinkKey
from nodegroups.logging import get_logger
from nodegroups.model import Node, SolveOptions
from nodegroups.seed_manager import SeedManager
from nodegroups.solver.archive import SolutionArchive
from nodegroups.solver.exhaustive import enumerate_partitions
from nodegroups.solver.greedy import greedy_build, greedy_build_with_fixed
from nodegroups.solver.local_search import LocalSearch
from nodegroups.solver.validation import validate, validate_fixed_groups
from nodegroups.solver.weights import WeightResolver
from nodegroups.types import SolveResult

logger = get_logger(__name__)


def _coerce_options(
    options: Union[SolveOptions, Mapping[str, Any], None],
) -> SolveOptions:
    if isinstance(options, SolveOptions):
        return options
    return SolveOptions.from_dict(options)


def compute_groups(
    nodes: Sequence[Node],
    links: Mapping[LinkKey, float],
    min_weight: float,
    max_weight: float,
    options: Union[SolveOptions, Mapping[str, Any], None] = None,
    config: Optional[SolverConfig] = None,
) -> SolveResult:
    """Partition ``nodes`` into groups maximizing the retained link weight.

    Small instances without fixed groups are enumerated exhaustively, which
    certifies the best solution as optimal. In every case a number of seeded
    restarts then run greedy construction, repair and local search, feeding
    every candidate into a top-K archive. Finally solutions holding a
    member unrelated to all of its groupmates are pruned when a better
    structured alternative exists.

    Args:
        nodes: Nodes to group, in input order.
        links: Link table keyed by ordered ``(from_id, to_id)`` pairs.
        min_weight: Minimum node-weight sum per group.
        max_weight: Maximum node-weight sum per group.
        options: :class:`SolveOptions` or a mapping with snake_case or
            camelCase option names.
        config: Structural limits; defaults to ``SOLVER_CONFIG``.

    Returns:
        SolveResult with up to ``config.max_solutions`` solutions, best first.
        When ``errors`` is non-empty no search was done.
    """
    opts = _coerce_options(options)
    config = config or SOLVER_CONFIG

    errors = validate(nodes, links, min_weight, max_weight)
    if errors:
        logger.info(f"Input rejected with {len(errors)} error(s)")
        return SolveResult(errors=errors)

    fixed_groups, errors = validate_fixed_groups(opts.fixed_groups, nodes, max_weight)
    if errors:
        logger.info(f"Fixed groups rejected: {errors[0]}")
        return SolveResult(errors=errors)

    start = perf_counter()
    ids = [n.id for n in nodes]
    resolver = WeightResolver(nodes, links, symmetric=opts.symmetric_links)
    archive = SolutionArchive(
        resolver,
        ids,
        capacity=config.max_solutions,
        bonus_per_group=opts.bonus_per_group,
        balance_factor=opts.balance_group_weights_factor,
    )
    seeds = SeedManager(fixed_shuffle_offset=config.fixed_shuffle_seed_offset)
    searcher = LocalSearch(
        resolver,
        min_weight,
        max_weight,
        allow_free_nodes=opts.allow_free_nodes,
        fixed_groups=fixed_groups,
        max_passes=config.local_search_passes,
    )

    exhaustive = not fixed_groups and len(ids) <= config.exhaustive_limit(
        opts.allow_free_nodes
    )
    if exhaustive:
        count = 0
        for groups, free in enumerate_partitions(
            ids, resolver, min_weight, max_weight, opts.allow_free_nodes
        ):
            archive.add(groups, free)
            count += 1
        logger.debug(f"Exhaustive search visited {count} feasible partition(s)")

    fixed_ids = {node_id for g in fixed_groups for node_id in g}
    free_ids = [node_id for node_id in ids if node_id not in fixed_ids]
    failed = 0
    for restart in range(config.restarts):
        if fixed_groups:
            built = greedy_build_with_fixed(
                free_ids,
                fixed_groups,
                resolver,
                min_weight,
                max_weight,
                restart,
                allow_free_nodes=opts.allow_free_nodes,
                seeds=seeds,
            )
        else:
            built = greedy_build(
                ids,
                resolver,
                min_weight,
                max_weight,
                restart,
                allow_free_nodes=opts.allow_free_nodes,
                seeds=seeds,
            )
        if built is None:
            failed += 1
            continue
        groups, free = built
        archive.add(groups, free)
        for improved_groups, improved_free in searcher.run(groups, free):
            archive.add(improved_groups, improved_free)

    pruned = archive.prune_wasteful()
    solutions = archive.solutions
    optimal = exhaustive and bool(solutions)

    elapsed = perf_counter() - start
    if solutions:
        logger.info(
            f"Found {len(solutions)} solution(s) for {len(ids)} node(s) in {elapsed:.3f} s; "
            f"best total weight {solutions[0].total_weight}"
            + (" (optimal)" if optimal else "")
        )
    else:
        logger.info(f"No feasible solution for {len(ids)} node(s) in {elapsed:.3f} s")
    logger.debug(
        f"{failed}/{config.restarts} restart(s) infeasible, {pruned} wasteful solution(s) pruned"
    )

    return SolveResult(solutions=solutions, optimal=optimal, errors=[])
