# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Monte Carlo simulation module for probabilistic retirement projections.

This module runs many independent trajectories of the shared year transition
with reproducible, per-trial random annual returns and aggregates their
terminal balances into a success rate, percentiles and a histogram.
"""

from .config import MonteCarloConfig
from .return_generator import SeededRandomStream, AnnualReturnGenerator
from .results import (
    TrialOutcome,
    Histogram,
    SimulationSummary,
    MonteCarloResults,
    build_histogram,
    percentile_values,
)
from .simulator import MonteCarloSimulator

__all__ = [
    'MonteCarloConfig',
    'SeededRandomStream',
    'AnnualReturnGenerator',
    'TrialOutcome',
    'Histogram',
    'SimulationSummary',
    'MonteCarloResults',
    'build_histogram',
    'percentile_values',
    'MonteCarloSimulator',
]
