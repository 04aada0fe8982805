# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Required Minimum Distributions from the tax-deferred bucket.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

RMD_START_AGE = 73
RMD_DIVISOR_FLOOR = 9.5

# Uniform lifetime divisors by age; ages past the table use RMD_DIVISOR_FLOOR
RMD_DIVISORS: Mapping[int, float] = MappingProxyType({
    73: 27.4, 74: 26.5, 75: 25.5, 76: 24.6, 77: 23.7, 78: 22.9,
    79: 22.0, 80: 21.1, 81: 20.2, 82: 19.4, 83: 18.5, 84: 17.7,
    85: 16.8, 86: 16.0, 87: 15.2, 88: 14.4, 89: 13.7, 90: 12.9,
    91: 12.2, 92: 11.5, 93: 10.8, 94: 10.1, 95: 9.5,
})


def rmd_divisor(age: int) -> float:
    """Divisor for the given age, or 0.0 before RMDs start."""
    if age < RMD_START_AGE:
        return 0.0
    return RMD_DIVISORS.get(age, RMD_DIVISOR_FLOOR)


@dataclass(frozen=True)
class RMDResult:
    """Balances after any forced distribution.

    Attributes:
        taxable: Taxable balance, credited with the after-tax RMD
        tax_deferred: Tax-deferred balance after the RMD
        required: Total distribution required this year
        amount: Additional amount forced out beyond the policy withdrawal
        tax_paid: Tax on the forced amount
    """
    taxable: float
    tax_deferred: float
    required: float = 0.0
    amount: float = 0.0
    tax_paid: float = 0.0


class RMDModel:
    def __init__(self, tax_rate: float):
        """ Models Required Minimum Distributions

        Args:
            tax_rate: Flat tax rate as a fraction (0.2 for 20%)
        """
        self.tax_rate = tax_rate

    def required_amount(self, age: int, tax_deferred: float) -> float:
        """Minimum distribution required at this age for the given balance"""
        divisor = rmd_divisor(age)
        if divisor <= 0 or tax_deferred <= 0:
            return 0.0
        return tax_deferred / divisor

    def apply(self, age: int, taxable: float, tax_deferred: float,
              already_withdrawn: float = 0.0) -> RMDResult:
        """Force out any shortfall between the RMD and this year's withdrawal.

        The after-tax shortfall lands in the taxable bucket since it cannot be
        reinvested tax-deferred.

        Args:
            age: Account owner's age this year
            taxable: Current taxable balance
            tax_deferred: Current tax-deferred balance
            already_withdrawn: Tax-deferred amount the withdrawal policy already took

        Returns:
            RMDResult with updated balances
        """
        required = self.required_amount(age, tax_deferred)
        if required <= already_withdrawn:
            return RMDResult(taxable=taxable, tax_deferred=tax_deferred, required=required)

        shortfall = required - already_withdrawn
        tax = shortfall * self.tax_rate
        return RMDResult(
            taxable=taxable + shortfall - tax,
            tax_deferred=tax_deferred - shortfall,
            required=required,
            amount=shortfall,
            tax_paid=tax,
        )
