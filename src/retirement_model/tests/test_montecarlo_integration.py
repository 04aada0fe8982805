# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Integration tests for Monte Carlo simulation with the year transition.
"""

import unittest

from ..montecarlo import MonteCarloConfig, MonteCarloSimulator
from ..montecarlo import simulator as simulator_module
from ..projector import DeterministicProjector
from .fixtures import DEPLETING_OVERRIDES, make_inputs


class TestMonteCarloIntegration(unittest.TestCase):
    """Integration tests for Monte Carlo simulation."""

    def test_same_seed_same_summary(self):
        """Test that a seeded run is fully reproducible."""
        inputs = make_inputs(simulations=50)
        first = MonteCarloSimulator(inputs).run().summarize()
        second = MonteCarloSimulator(inputs).run().summarize()
        self.assertEqual(first, second)
        self.assertEqual(first.seed, 42)

    def test_different_seeds_differ(self):
        first = MonteCarloSimulator(make_inputs(simulations=20, seed=1)).run()
        second = MonteCarloSimulator(make_inputs(simulations=20, seed=2)).run()
        self.assertNotEqual(list(first.sorted_terminal_balances()),
                            list(second.sorted_terminal_balances()))

    def test_seed_zero_is_a_seed(self):
        results = MonteCarloSimulator(make_inputs(simulations=5, seed=0)).run()
        self.assertEqual(results.seed, 0)

    def test_unseeded_run_records_seed(self):
        """Test that an unseeded run reports the base seed it drew."""
        results = MonteCarloSimulator(make_inputs(simulations=5, seed=None)).run()
        self.assertIsNotNone(results.seed)
        self.assertGreaterEqual(results.seed, 0)
        self.assertLess(results.seed, 2 ** 32)

        # Replaying the recorded seed reproduces the run
        replay = MonteCarloSimulator(make_inputs(simulations=5, seed=results.seed)).run()
        self.assertEqual(replay.summarize(), results.summarize())

    def test_zero_volatility_matches_projection(self):
        """Test that every trial matches the deterministic projection without volatility."""
        inputs = make_inputs(return_std_dev=0.0, simulations=10)
        projection = DeterministicProjector(inputs).project()
        results = MonteCarloSimulator(inputs).run()

        for outcome in results.outcomes:
            self.assertEqual(outcome.terminal_balance, projection.final_balance)
            self.assertEqual(outcome.survived, projection.survived)
            self.assertEqual(outcome.years_simulated, len(projection.snapshots))
        self.assertEqual(results.success_rate(), 1.0)

    def test_zero_volatility_depletion(self):
        inputs = make_inputs(return_std_dev=0.0, simulations=5, **DEPLETING_OVERRIDES)
        results = MonteCarloSimulator(inputs).run()
        self.assertEqual(results.success_rate(), 0.0)
        self.assertTrue(all(o.years_simulated == 4 for o in results.outcomes))

    def test_trials_are_independent_streams(self):
        """Test that trial i of seed s equals trial 0 of seed s + i."""
        simulator = MonteCarloSimulator(make_inputs())
        outcome = simulator.run_trial(5, base_seed=42)
        other = simulator.run_trial(0, base_seed=47)
        self.assertEqual(outcome.terminal_balance, other.terminal_balance)
        self.assertEqual(outcome.survived, other.survived)

    def test_parallel_matches_sequential(self):
        """Test that worker processes give identical results."""
        inputs = make_inputs(simulations=16)
        sequential = MonteCarloSimulator(inputs).run().summarize()
        parallel = MonteCarloSimulator(inputs, MonteCarloConfig(workers=2)).run().summarize()
        self.assertEqual(sequential, parallel)

    def test_worker_helpers_reuse_one_simulator(self):
        """Test that the pool initializer builds one simulator that serves every trial."""
        inputs = make_inputs()
        self.addCleanup(setattr, simulator_module, "_worker_simulator", None)

        simulator_module._init_worker(inputs)
        worker_simulator = simulator_module._worker_simulator
        outcomes = [simulator_module._run_trial_in_worker(i, 42) for i in range(3)]

        self.assertIs(simulator_module._worker_simulator, worker_simulator)
        expected = MonteCarloSimulator(inputs)
        self.assertEqual(outcomes, [expected.run_trial(i, 42) for i in range(3)])

    def test_results_are_sane(self):
        inputs = make_inputs(simulations=100)
        results = MonteCarloSimulator(inputs).run()
        summary = results.summarize()

        self.assertEqual(summary.num_simulations, 100)
        self.assertEqual(len(results.outcomes), 100)
        self.assertGreaterEqual(summary.success_rate, 0.0)
        self.assertLessEqual(summary.success_rate, 1.0)
        self.assertTrue(all(balance >= 0.0 for balance in summary.terminal_balances))
        self.assertEqual(summary.histogram.total, 100)

        levels = sorted(summary.percentiles)
        values = [summary.percentiles[level] for level in levels]
        self.assertEqual(values, sorted(values))

    def test_custom_bin_width(self):
        inputs = make_inputs(simulations=30)
        results = MonteCarloSimulator(inputs, MonteCarloConfig(bin_width=250000.0)).run()
        histogram = results.summarize().histogram
        self.assertEqual(histogram.bin_width, 250000.0)
        self.assertEqual(histogram.total, 30)


if __name__ == '__main__':
    unittest.main()
