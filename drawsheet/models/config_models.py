from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the drawsheet ingestion tool.

These are the typed domain view of the configuration; drawsheet/config/loader.py is
responsible for reading and validating the YAML file that produces them.
"""

__all__ = [
    "HeuristicsConfig",
    "AppConfig",
]


@dataclass(frozen=True)
class HeuristicsConfig:
    """Tunable parameters of the detection heuristics.

    The scoring weights are fixed in the classifier; only the sampling size and
    the running-sum match parameters are exposed here.
    """
    sample_rows: int = 30  # Rows sampled per column for content analysis
    min_real_numbers: int = 10  # Non-zero numerics needed for "has real numbers"
    sum_tolerance: float = 0.10  # Relative tolerance for amount ~= running sum
    sum_floor: float = 1000.0  # Running sum must exceed this before matching

    def amount_matches_sum(self, amount: float, running_sum: float, *, relative_to_amount: bool = False) -> bool:
        """True when ``amount`` is within tolerance of a non-trivial running sum.

        The tolerance is a share of the running sum by default. The per-row
        subtotal signal passes ``relative_to_amount=True`` to measure it
        against the row's own amount instead.
        """
        if running_sum <= self.sum_floor:
            return False
        base = abs(amount) if relative_to_amount else running_sum
        return abs(abs(amount) - running_sum) <= self.sum_tolerance * base


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object."""
    heuristics: HeuristicsConfig = field(default_factory=HeuristicsConfig)
    import_type: str = "budget"  # Default import type for the CLI
    log_level: str = "INFO"
