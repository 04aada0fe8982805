# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Monte Carlo simulation orchestrator.

This module provides the MonteCarloSimulator class which runs many independent
trajectories of the shared year transition, each with its own randomized
annual returns, and aggregates their terminal outcomes.
"""

import logging
import multiprocessing as mp
import secrets
from typing import Optional

from ..inputs import InputRecord
from ..transition import YearTransition, run_trajectory
from .config import MonteCarloConfig
from .results import MonteCarloResults, TrialOutcome
from .return_generator import MASK_32, AnnualReturnGenerator, SeededRandomStream

logger = logging.getLogger(__name__)


def trial_seed(base_seed: int, trial_index: int) -> int:
    """Seed of trial `trial_index`'s stream; depends only on the base seed and index."""
    return (base_seed + trial_index) & MASK_32


class MonteCarloSimulator:
    """Orchestrates Monte Carlo trials of the retirement projection.

    The workflow:
    1. Pick the base seed (the input seed, or fresh entropy)
    2. For each trial, seed its own stream with base seed + trial index
    3. Draw one return per simulated year and run the shared year transition
    4. Aggregate terminal outcomes into MonteCarloResults

    Because each trial owns its stream, a seeded run gives identical results
    whether trials run in sequence or across worker processes.

    Example:
        >>> simulator = MonteCarloSimulator(inputs, MonteCarloConfig(workers=4))
        >>> results = simulator.run()
        >>> print(f"Success rate: {results.success_rate():.1%}")
    """

    def __init__(self,
                 inputs: InputRecord,
                 config: Optional[MonteCarloConfig] = None):
        """Initialize the simulator.

        Args:
            inputs: Validated household inputs, including return volatility,
                    trial count and optional seed
            config: Engine configuration. If None, uses defaults.
        """
        self.inputs = inputs
        self.config = config or MonteCarloConfig()
        self.transition = YearTransition(inputs)
        self.mean_return = inputs.return_rate / 100
        self.volatility = inputs.return_std_dev / 100

    def run(self) -> MonteCarloResults:
        """Run all trials.

        Returns:
            MonteCarloResults holding every TrialOutcome
        """
        base_seed = self.inputs.seed
        if base_seed is None:
            base_seed = secrets.randbits(32)
        base_seed &= MASK_32

        num_simulations = self.inputs.simulations
        indices = range(num_simulations)
        if self.config.workers > 1 and num_simulations > 1:
            logger.debug("Running %d trials on %d workers", num_simulations, self.config.workers)
            chunksize = max(1, num_simulations // (self.config.workers * 4))
            with mp.Pool(self.config.workers, initializer=_init_worker,
                         initargs=(self.inputs,)) as pool:
                outcomes = pool.starmap(_run_trial_in_worker,
                                        [(i, base_seed) for i in indices],
                                        chunksize=chunksize)
        else:
            outcomes = [self.run_trial(i, base_seed) for i in indices]

        results = MonteCarloResults(outcomes, seed=base_seed, bin_width=self.config.bin_width)
        logger.info("Completed %d trials (seed=%d), success rate %.4f",
                    num_simulations, base_seed, results.success_rate())
        return results

    def run_trial(self, trial_index: int, base_seed: int) -> TrialOutcome:
        """Run one trial with its own random stream.

        Args:
            trial_index: Index of the trial within the run
            base_seed: Base seed of the run

        Returns:
            TrialOutcome for this trial
        """
        stream = SeededRandomStream(trial_seed(base_seed, trial_index))
        generator = AnnualReturnGenerator(self.mean_return, self.volatility, stream)
        trajectory = run_trajectory(self.transition,
                                    lambda year_index: generator.generate_yearly_return())
        return TrialOutcome(
            trial_index=trial_index,
            terminal_balance=trajectory.terminal_balance,
            survived=trajectory.survived,
            years_simulated=len(trajectory.snapshots),
        )


# Built once per worker process by the pool initializer
_worker_simulator: Optional[MonteCarloSimulator] = None


def _init_worker(inputs: InputRecord):
    global _worker_simulator
    _worker_simulator = MonteCarloSimulator(inputs)


def _run_trial_in_worker(trial_index: int, base_seed: int) -> TrialOutcome:
    return _worker_simulator.run_trial(trial_index, base_seed)
