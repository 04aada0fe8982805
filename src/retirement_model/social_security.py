# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Social Security benefit model for a married couple.

Benefits are adjusted for claiming age around a fixed Full Retirement Age (FRA)
of 67. The spouse receives the greater of their own adjusted benefit or a
spousal benefit worth half of the primary's FRA amount, but only once the
primary has filed.
"""

from dataclasses import dataclass
from typing import Tuple

FULL_RETIREMENT_AGE = 67
DELAYED_CREDIT_PER_YEAR = 0.08
EARLY_REDUCTION_PER_YEAR = 0.067
SPOUSAL_BENEFIT_SHARE = 0.5
TAXABLE_SHARE = 0.85


def claiming_multiplier(claim_age: float) -> float:
    """Benefit multiplier for claiming at claim_age instead of at FRA."""
    if claim_age > FULL_RETIREMENT_AGE:
        return 1 + DELAYED_CREDIT_PER_YEAR * (claim_age - FULL_RETIREMENT_AGE)
    if claim_age < FULL_RETIREMENT_AGE:
        return 1 - EARLY_REDUCTION_PER_YEAR * (FULL_RETIREMENT_AGE - claim_age)
    return 1.0


@dataclass(frozen=True)
class SocialSecurityIncome:
    """Combined household Social Security income for one year.

    Attributes:
        primary: Primary spouse's gross benefit
        spouse: Secondary spouse's gross benefit
        total: Sum of both gross benefits
        tax: Tax on the taxable share of the total
        net: Total after tax
    """
    primary: float
    spouse: float
    total: float
    tax: float
    net: float


class SocialSecurityModel:
    def __init__(self,
                 primary_claim_age: float,
                 primary_benefit_at_fra: float,
                 spouse_claim_age: float,
                 spouse_benefit_at_fra: float,
                 tax_rate: float):
        """ Models household Social Security benefits

        Args:
            primary_claim_age: Age at which the primary spouse claims
            primary_benefit_at_fra: Primary's annual benefit at FRA
            spouse_claim_age: Age at which the secondary spouse claims
            spouse_benefit_at_fra: Secondary spouse's own annual benefit at FRA
            tax_rate: Flat tax rate as a fraction (0.2 for 20%)
        """
        self.primary_claim_age = primary_claim_age
        self.primary_benefit_at_fra = primary_benefit_at_fra
        self.spouse_claim_age = spouse_claim_age
        self.spouse_benefit_at_fra = spouse_benefit_at_fra
        self.tax_rate = tax_rate

    def primary_benefit(self) -> float:
        """Primary's annual benefit in today's dollars at the chosen claiming age."""
        return self.primary_benefit_at_fra * claiming_multiplier(self.primary_claim_age)

    def spousal_benefit(self) -> float:
        """Spousal benefit off the primary's record, reduced for early claiming only."""
        benefit = self.primary_benefit_at_fra * SPOUSAL_BENEFIT_SHARE
        if self.spouse_claim_age < FULL_RETIREMENT_AGE:
            benefit *= 1 - EARLY_REDUCTION_PER_YEAR * (FULL_RETIREMENT_AGE - self.spouse_claim_age)
        return benefit

    def spouse_benefit(self) -> float:
        """Greater of the spouse's own adjusted benefit and the spousal benefit."""
        own = self.spouse_benefit_at_fra * claiming_multiplier(self.spouse_claim_age)
        return max(own, self.spousal_benefit())

    def claimed_benefits(self) -> Tuple[float, float]:
        """(primary, spouse) annual benefits in today's dollars once both have claimed."""
        return self.primary_benefit(), self.spouse_benefit()

    def income_for_year(self,
                        primary_age: int,
                        spouse_age: int,
                        inflation_multiplier: float = 1.0,
                        proration: float = 1.0) -> SocialSecurityIncome:
        """Calculate household Social Security income for one year.

        Args:
            primary_age: Primary spouse's age this year
            spouse_age: Secondary spouse's age this year
            inflation_multiplier: Cumulative inflation since the reference date
            proration: Fraction of the year simulated (first year only)

        Returns:
            SocialSecurityIncome with gross, tax and net figures
        """
        primary_filed = primary_age >= self.primary_claim_age

        primary = self.primary_benefit() * inflation_multiplier * proration if primary_filed else 0.0

        spouse = 0.0
        if primary_filed and spouse_age >= self.spouse_claim_age:
            spouse = self.spouse_benefit() * inflation_multiplier * proration

        total = primary + spouse
        tax = total * TAXABLE_SHARE * self.tax_rate
        return SocialSecurityIncome(primary=primary, spouse=spouse, total=total,
                                    tax=tax, net=total - tax)
