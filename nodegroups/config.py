"""Configuration classes for the nodegroups solver."""

from dataclasses import dataclass


@dataclass
class SolverConfig:
    """Structural limits of one ``compute_groups`` run.

    These bound the total amount of work; per-solve behavior (free nodes,
    link symmetry, scoring, fixed groups) lives in ``SolveOptions``.
    """

    # Number of seeded greedy + local-search restarts
    restarts: int = 20

    # Size of the ranked solution archive
    max_solutions: int = 10

    # Local-search passes per restart
    local_search_passes: int = 200

    # Exhaustive enumeration is attempted at or below these node counts
    exhaustive_node_limit: int = 16
    exhaustive_node_limit_free: int = 12

    # Seed offset for shuffling leftover free nodes around fixed groups
    fixed_shuffle_seed_offset: int = 1000

    def __post_init__(self) -> None:
        if self.restarts < 0:
            raise ValueError(f"restarts must be >= 0, got {self.restarts}")
        if self.max_solutions < 1:
            raise ValueError(
                f"max_solutions must be >= 1, got {self.max_solutions}"
            )
        if self.local_search_passes < 0:
            raise ValueError(
                f"local_search_passes must be >= 0, got {self.local_search_passes}"
            )

    def exhaustive_limit(self, allow_free_nodes: bool) -> int:
        """Return the largest node count that is solved exhaustively."""
        if allow_free_nodes:
            return self.exhaustive_node_limit_free
        return self.exhaustive_node_limit


# Global configuration instance
SOLVER_CONFIG = SolverConfig()
