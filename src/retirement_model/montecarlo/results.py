# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Monte Carlo simulation results aggregation and analysis.

This module provides the MonteCarloResults class for analyzing the terminal
outcomes of Monte Carlo trials, including success rate, percentiles and a
fixed-width histogram of terminal balances.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .config import DEFAULT_BIN_WIDTH

PERCENTILE_LEVELS: Tuple[float, ...] = (0.10, 0.25, 0.50, 0.75, 0.90)


@dataclass(frozen=True)
class TrialOutcome:
    """Terminal outcome of one Monte Carlo trial.

    Attributes:
        trial_index: Position of the trial in the run (selects its random stream)
        terminal_balance: Combined balance when the trial stopped
        survived: False if the money ran out at or after retirement age
        years_simulated: Number of years the trial ran
    """
    trial_index: int
    terminal_balance: float
    survived: bool
    years_simulated: int


@dataclass(frozen=True)
class Histogram:
    """Fixed-width bins of terminal balances.

    Attributes:
        bin_width: Width of each bin
        bin_starts: Lower edge of each bin, aligned to multiples of bin_width
        counts: Number of balances in each bin
    """
    bin_width: float
    bin_starts: Tuple[float, ...]
    counts: Tuple[int, ...]

    @property
    def bin_centers(self) -> Tuple[float, ...]:
        return tuple(start + self.bin_width / 2 for start in self.bin_starts)

    @property
    def total(self) -> int:
        return sum(self.counts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'bin_width': self.bin_width,
            'bin_starts': list(self.bin_starts),
            'counts': list(self.counts),
        }


def build_histogram(values: Sequence[float], bin_width: float = DEFAULT_BIN_WIDTH) -> Histogram:
    """Bin values into fixed-width bins spanning zero and every value.

    Bin edges are multiples of bin_width from floor(min(values, 0)) to
    ceil(max(values, 0)). A value on the top edge goes in the last bin so the
    counts always add up to len(values).

    Args:
        values: Balances to bin
        bin_width: Width of each bin, positive

    Returns:
        Histogram with at least one bin
    """
    if not math.isfinite(bin_width) or bin_width <= 0:
        raise ValueError("bin_width must be a positive finite number")
    data = np.asarray(values, dtype=float)
    low = min(float(data.min()), 0.0) if data.size else 0.0
    high = max(float(data.max()), 0.0) if data.size else 0.0

    start = math.floor(low / bin_width) * bin_width
    end = math.ceil(high / bin_width) * bin_width
    num_bins = max(1, math.ceil((end - start) / bin_width))

    indices = np.floor((data - start) / bin_width).astype(int)
    indices = np.clip(indices, 0, num_bins - 1)
    counts = np.bincount(indices, minlength=num_bins)

    return Histogram(
        bin_width=bin_width,
        bin_starts=tuple(start + i * bin_width for i in range(num_bins)),
        counts=tuple(int(c) for c in counts),
    )


def percentile_values(sorted_values: Sequence[float],
                      levels: Sequence[float] = PERCENTILE_LEVELS) -> Dict[float, float]:
    """Read percentiles from an ascending array at index floor(p * N).

    Indexes are clamped to the last element; an empty array yields 0.0.
    """
    n = len(sorted_values)
    result = {}
    for level in levels:
        if n == 0:
            result[level] = 0.0
            continue
        idx = min(int(math.floor(level * n)), n - 1)
        result[level] = float(sorted_values[idx])
    return result


@dataclass(frozen=True)
class SimulationSummary:
    """Immutable aggregate of a Monte Carlo run.

    Attributes:
        num_simulations: Number of trials
        success_rate: Fraction of trials that survived (0.0 to 1.0)
        terminal_balances: Terminal balances sorted ascending
        percentiles: Quantile level -> terminal balance
        histogram: Binned terminal balances
        seed: Base seed of the run (trial i used seed + i)
    """
    num_simulations: int
    success_rate: float
    terminal_balances: Tuple[float, ...]
    percentiles: Mapping[float, float]
    histogram: Histogram
    seed: Optional[int] = None

    @property
    def median(self) -> float:
        return self.percentiles.get(0.50, 0.0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'num_simulations': self.num_simulations,
            'success_rate': self.success_rate,
            'median_terminal_balance': self.median,
            'percentiles': {f"p{round(level * 100)}": value
                            for level, value in self.percentiles.items()},
            'histogram': self.histogram.to_dict(),
            'terminal_balances': list(self.terminal_balances),
            'seed': self.seed,
        }


class MonteCarloResults:
    """Aggregates and analyzes Monte Carlo trial outcomes.

    All aggregates are computed from the outcomes sorted by terminal balance,
    so they do not depend on the order in which trials finished.

    Example:
        >>> results = MonteCarloSimulator(inputs).run()
        >>> print(f"Success rate: {results.success_rate():.1%}")
        >>> print(results.percentiles()[0.5])
    """

    def __init__(self,
                 outcomes: List[TrialOutcome],
                 seed: Optional[int] = None,
                 bin_width: float = DEFAULT_BIN_WIDTH):
        """Initialize with trial outcomes.

        Args:
            outcomes: One TrialOutcome per trial, in any order
            seed: Base seed the run used, if any
            bin_width: Default histogram bin width
        """
        self.outcomes = sorted(outcomes, key=lambda o: o.trial_index)
        self.num_simulations = len(self.outcomes)
        self.seed = seed
        self.bin_width = bin_width

    def success_rate(self) -> float:
        """Fraction of trials that survived (0.0 to 1.0)."""
        if self.num_simulations == 0:
            return 0.0
        survived = sum(1 for outcome in self.outcomes if outcome.survived)
        return survived / self.num_simulations

    def sorted_terminal_balances(self) -> np.ndarray:
        return np.sort(np.array([o.terminal_balance for o in self.outcomes], dtype=float))

    def percentiles(self, levels: Sequence[float] = PERCENTILE_LEVELS) -> Dict[float, float]:
        """Terminal-balance percentiles at the given quantile levels."""
        return percentile_values(self.sorted_terminal_balances(), levels)

    def histogram(self, bin_width: Optional[float] = None) -> Histogram:
        return build_histogram(self.sorted_terminal_balances(), bin_width or self.bin_width)

    def get_statistics(self) -> Dict[str, float]:
        """Summary statistics of terminal balances.

        Returns:
            Dict with mean, std, min and max, or empty if there are no trials
        """
        if self.num_simulations == 0:
            return {}

        values = self.sorted_terminal_balances()
        return {
            'mean': float(np.mean(values)),
            'std': float(np.std(values)),
            'min': float(np.min(values)),
            'max': float(np.max(values)),
        }

    def to_dataframe(self) -> pd.DataFrame:
        """One row per trial, indexed by trial index."""
        df = pd.DataFrame(
            [(o.trial_index, o.terminal_balance, o.survived, o.years_simulated)
             for o in self.outcomes],
            columns=['trial_index', 'terminal_balance', 'survived', 'years_simulated'],
        )
        return df.set_index('trial_index')

    def summarize(self, bin_width: Optional[float] = None) -> SimulationSummary:
        """Freeze the aggregates into a SimulationSummary."""
        balances = self.sorted_terminal_balances()
        return SimulationSummary(
            num_simulations=self.num_simulations,
            success_rate=self.success_rate(),
            terminal_balances=tuple(float(b) for b in balances),
            percentiles=percentile_values(balances),
            histogram=build_histogram(balances, bin_width or self.bin_width),
            seed=self.seed,
        )

    def __repr__(self) -> str:
        return (f"MonteCarloResults(num_simulations={self.num_simulations}, "
                f"success_rate={self.success_rate():.4f})")
