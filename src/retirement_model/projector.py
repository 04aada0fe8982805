# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Deterministic single-path projection at the fixed mean return.
"""

from dataclasses import dataclass
from typing import Any, Dict, Sequence, Tuple

import pandas as pd

from .inputs import InputRecord
from .transition import YearSnapshot, YearTransition, run_trajectory


@dataclass(frozen=True)
class ProjectionResult:
    """Year-by-year projection plus summary figures.

    Attributes:
        snapshots: One YearSnapshot per simulated year
        survived: False if the money ran out at or after retirement age
        final_balance: Combined balance at the end of the projection
        average_withdrawal_rate: Mean withdrawal rate (percent) over retirement
                                 years that had a withdrawal
        primary_benefit: Primary's annual Social Security benefit at claiming,
                         today's dollars
        spouse_benefit: Spouse's annual Social Security benefit at claiming,
                        today's dollars
    """
    snapshots: Tuple[YearSnapshot, ...]
    survived: bool
    final_balance: float
    average_withdrawal_rate: float
    primary_benefit: float
    spouse_benefit: float

    @property
    def money_lasts_until_age(self) -> int:
        """Last primary age simulated (0 when nothing was simulated)."""
        if not self.snapshots:
            return 0
        return self.snapshots[-1].primary_age

    def to_dataframe(self) -> pd.DataFrame:
        """One row per simulated year, indexed by year number."""
        df = pd.DataFrame([snapshot.to_dict() for snapshot in self.snapshots],
                          columns=list(YearSnapshot.__dataclass_fields__))
        return df.set_index('year')

    def to_dict(self) -> Dict[str, Any]:
        return {
            'final_balance': self.final_balance,
            'average_withdrawal_rate': self.average_withdrawal_rate,
            'money_lasts_until_age': self.money_lasts_until_age,
            'survived': self.survived,
            'primary_benefit': self.primary_benefit,
            'spouse_benefit': self.spouse_benefit,
            'yearly_snapshots': [snapshot.to_dict() for snapshot in self.snapshots],
        }


def average_withdrawal_rate(snapshots: Sequence[YearSnapshot], retirement_age: float) -> float:
    """Mean withdrawal rate over retirement years with a positive withdrawal."""
    rates = [s.withdrawal_rate for s in snapshots
             if s.primary_age >= retirement_age and s.withdrawal > 0]
    if not rates:
        return 0.0
    return sum(rates) / len(rates)


class DeterministicProjector:
    """Projects balances year by year at the fixed mean return rate.

    Example:
        >>> result = DeterministicProjector(inputs).project()
        >>> print(f"Final balance: {result.final_balance:,.0f}")
        >>> df = result.to_dataframe()
    """

    def __init__(self, inputs: InputRecord):
        self.inputs = inputs
        self.transition = YearTransition(inputs)

    @property
    def annual_return(self) -> float:
        """Mean return as a fraction."""
        return self.inputs.return_rate / 100

    def project(self) -> ProjectionResult:
        """Run the projection.

        Returns:
            ProjectionResult with every yearly snapshot and the summary figures
        """
        rate = self.annual_return
        trajectory = run_trajectory(self.transition, lambda year_index: rate)
        primary_benefit, spouse_benefit = self.transition.social_security.claimed_benefits()

        return ProjectionResult(
            snapshots=tuple(trajectory.snapshots),
            survived=trajectory.survived,
            final_balance=trajectory.terminal_balance,
            average_withdrawal_rate=average_withdrawal_rate(trajectory.snapshots,
                                                            self.inputs.retirement_age),
            primary_benefit=primary_benefit,
            spouse_benefit=spouse_benefit,
        )
