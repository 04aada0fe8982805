# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Shared household inputs for tests.
"""

from datetime import date

from ..inputs import InputRecord

# Primary is 64 on the reference date and turns 65 on 2025-06-01
BASE_VALUES = {
    'reference_date': date(2025, 1, 15),
    'primary_birthdate': date(1960, 6, 1),
    'spouse_birthdate': date(1962, 3, 10),
    'retirement_age': 65,
    'max_age': 95,
    'taxable_balance': 800000.0,
    'tax_deferred_balance': 1200000.0,
    'annual_expenses': 90000.0,
    'primary_ss_claim_age': 67,
    'primary_ss_benefit_at_fra': 36000.0,
    'spouse_ss_claim_age': 67,
    'spouse_ss_benefit_at_fra': 12000.0,
    'inflation_rate': 3.0,
    'return_rate': 6.0,
    'tax_rate': 20.0,
    'return_std_dev': 12.0,
    'simulations': 200,
    'seed': 42,
}

# Spends far more than it has; runs out at 67
DEPLETING_OVERRIDES = {
    'taxable_balance': 100000.0,
    'tax_deferred_balance': 200000.0,
    'annual_expenses': 120000.0,
    'return_rate': 4.0,
}


def make_inputs(**overrides) -> InputRecord:
    values = dict(BASE_VALUES)
    values.update(overrides)
    return InputRecord(**values)
