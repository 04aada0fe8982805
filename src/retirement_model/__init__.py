# Copyright 2022 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Retirement Model

Projects a household's taxable and tax-deferred balances through retirement
under a tax-aware withdrawal policy, with Social Security, Required Minimum
Distributions and a seeded Monte Carlo engine for outcome uncertainty.

Example usage:
    from retirement_model import InputRecord, DeterministicProjector, MonteCarloSimulator

    inputs = InputRecord.from_mapping({
        'reference_date': '2025-01-15', 'primary_birthdate': '1960-06-01',
        'spouse_birthdate': '1962-03-10', 'retirement_age': 65, 'max_age': 95,
        'taxable_balance': 800000, 'tax_deferred_balance': 1200000,
        'annual_expenses': 90000, 'primary_ss_claim_age': 67,
        'primary_ss_benefit_at_fra': 36000, 'spouse_ss_claim_age': 67,
        'spouse_ss_benefit_at_fra': 12000, 'inflation_rate': 3,
        'return_rate': 6, 'tax_rate': 20, 'return_std_dev': 12,
        'simulations': 1000, 'seed': 42,
    })

    projection = DeterministicProjector(inputs).project()
    df = projection.to_dataframe()

    summary = MonteCarloSimulator(inputs).run().summarize()
"""

# Inputs
from .inputs import (
    InputRecord,
    InvalidInputError,
    FIELD_ALIASES,
    apply_defaults,
    load_defaults,
    normalize_keys,
)

# Model components
from .ages import age, first_year_fraction
from .social_security import SocialSecurityModel, SocialSecurityIncome, claiming_multiplier
from .withdrawal import WithdrawalEngine, WithdrawalResult
from .rmd import RMDModel, RMDResult, RMD_DIVISORS, rmd_divisor

# Year transition and drivers
from .transition import AccountState, YearSnapshot, YearTransition, Trajectory, run_trajectory
from .projector import DeterministicProjector, ProjectionResult

# Monte Carlo Simulation
from .montecarlo import (
    MonteCarloSimulator,
    MonteCarloConfig,
    MonteCarloResults,
    SimulationSummary,
    TrialOutcome,
    Histogram,
    SeededRandomStream,
    AnnualReturnGenerator,
)

# Version
from .__meta__ import __version__

__all__ = [
    # Inputs
    'InputRecord', 'InvalidInputError', 'FIELD_ALIASES',
    'apply_defaults', 'load_defaults', 'normalize_keys',
    # Components
    'age', 'first_year_fraction',
    'SocialSecurityModel', 'SocialSecurityIncome', 'claiming_multiplier',
    'WithdrawalEngine', 'WithdrawalResult',
    'RMDModel', 'RMDResult', 'RMD_DIVISORS', 'rmd_divisor',
    # Transition and drivers
    'AccountState', 'YearSnapshot', 'YearTransition', 'Trajectory', 'run_trajectory',
    'DeterministicProjector', 'ProjectionResult',
    # Monte Carlo
    'MonteCarloSimulator', 'MonteCarloConfig', 'MonteCarloResults',
    'SimulationSummary', 'TrialOutcome', 'Histogram',
    'SeededRandomStream', 'AnnualReturnGenerator',
    # Version
    '__version__',
]
