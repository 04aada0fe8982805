# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
One-year state transition shared by the deterministic and Monte Carlo drivers.

Each simulated year runs in a fixed order:
1. Inflate expenses and Social Security (prorated in the first year)
2. Withdraw the net need, before any growth
3. Grow the post-withdrawal balance, split proportionally between buckets
4. Force out any Required Minimum Distribution shortfall
5. Clamp both buckets to be non-negative

The only input that differs between drivers is the realized annual return.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List

from .ages import age, first_year_fraction
from .inputs import InputRecord
from .rmd import RMDModel
from .social_security import SocialSecurityModel
from .withdrawal import WithdrawalEngine


@dataclass
class AccountState:
    """Balances carried from one year to the next within a trajectory."""
    taxable: float
    tax_deferred: float

    @property
    def total(self) -> float:
        return self.taxable + self.tax_deferred

    def clamp(self):
        """Floor both buckets at zero; depletion is reported, never a negative balance."""
        self.taxable = max(0.0, self.taxable)
        self.tax_deferred = max(0.0, self.tax_deferred)


@dataclass(frozen=True)
class YearSnapshot:
    """State and cash flows for one simulated year.

    Attributes:
        year: 1-based year number
        year_index: 0-based year index (0 is the partial first year)
        primary_age: Primary spouse's age during the year
        spouse_age: Secondary spouse's age during the year
        taxable: Taxable balance at year end
        tax_deferred: Tax-deferred balance at year end
        total: Combined balance at year end
        expenses: Inflation-adjusted expenses (0 before retirement)
        primary_ss_income: Primary's gross Social Security income
        spouse_ss_income: Spouse's gross Social Security income
        total_ss_income: Combined gross Social Security income
        net_ss_income: Combined Social Security income after tax
        annual_return: Realized return rate applied this year (fraction)
        withdrawal: Gross withdrawals including any RMD
        rmd: Forced RMD amount beyond the policy withdrawal
        taxes: Total tax on Social Security, withdrawals and RMD
        withdrawal_rate: Gross withdrawal as a percent of the pre-growth balance
        depleted: True if the money ran out at or after retirement age
    """
    year: int
    year_index: int
    primary_age: int
    spouse_age: int
    taxable: float
    tax_deferred: float
    total: float
    expenses: float
    primary_ss_income: float
    spouse_ss_income: float
    total_ss_income: float
    net_ss_income: float
    annual_return: float
    withdrawal: float
    rmd: float
    taxes: float
    withdrawal_rate: float
    depleted: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Trajectory:
    """Result of running YearTransition from the start date to the end.

    Attributes:
        snapshots: One YearSnapshot per simulated year, in order
        survived: False if the balance was exhausted at or after retirement
        terminal_balance: Combined balance when the trajectory stopped
    """
    snapshots: List[YearSnapshot] = field(default_factory=list)
    survived: bool = True
    terminal_balance: float = 0.0


class YearTransition:
    """Applies one year of income, withdrawals, growth and RMDs to an AccountState.

    Example:
        >>> transition = YearTransition(inputs)
        >>> state = transition.initial_state()
        >>> snapshot = transition.step(state, 65, 63, year_index=0, annual_return=0.07)
        >>> print(f"Ending balance: {snapshot.total:,.0f}")
    """

    def __init__(self, inputs: InputRecord):
        """Initialize from a validated input record.

        Args:
            inputs: Household inputs; percentages are converted to fractions here
        """
        self.inputs = inputs
        self.tax_rate = inputs.tax_rate / 100
        self.inflation_rate = inputs.inflation_rate / 100
        self.first_year_fraction = first_year_fraction(inputs.primary_birthdate,
                                                       inputs.reference_date)
        self.start_primary_age = age(inputs.primary_birthdate, inputs.reference_date)
        self.start_spouse_age = age(inputs.spouse_birthdate, inputs.reference_date)

        self.social_security = SocialSecurityModel(
            primary_claim_age=inputs.primary_ss_claim_age,
            primary_benefit_at_fra=inputs.primary_ss_benefit_at_fra,
            spouse_claim_age=inputs.spouse_ss_claim_age,
            spouse_benefit_at_fra=inputs.spouse_ss_benefit_at_fra,
            tax_rate=self.tax_rate,
        )
        self.withdrawal_engine = WithdrawalEngine(self.tax_rate)
        self.rmd_model = RMDModel(self.tax_rate)

    def initial_state(self) -> AccountState:
        return AccountState(taxable=self.inputs.taxable_balance,
                            tax_deferred=self.inputs.tax_deferred_balance)

    def step(self,
             state: AccountState,
             primary_age: int,
             spouse_age: int,
             year_index: int,
             annual_return: float) -> YearSnapshot:
        """Advance `state` by one year in place.

        Args:
            state: Balances at the start of the year; updated in place
            primary_age: Primary spouse's age this year
            spouse_age: Secondary spouse's age this year
            year_index: 0 for the partial first year, then 1, 2, ...
            annual_return: Realized return for the year as a fraction

        Returns:
            YearSnapshot describing the year
        """
        proration = self.first_year_fraction if year_index == 0 else 1.0
        inflation_multiplier = (1 + self.inflation_rate) ** year_index
        expenses = self.inputs.annual_expenses * inflation_multiplier * proration
        ss_income = self.social_security.income_for_year(primary_age, spouse_age,
                                                         inflation_multiplier, proration)

        retired = primary_age >= self.inputs.retirement_age
        net_needed = expenses - ss_income.net if retired else 0.0

        withdrawal = self.withdrawal_engine.withdraw(net_needed, state.taxable, state.tax_deferred)
        state.taxable = withdrawal.taxable
        state.tax_deferred = withdrawal.tax_deferred

        balance_before_growth = state.total
        self._apply_growth(state, annual_return, proration)

        rmd = self.rmd_model.apply(primary_age, state.taxable, state.tax_deferred,
                                   already_withdrawn=withdrawal.tax_deferred_withdrawal)
        state.taxable = rmd.taxable
        state.tax_deferred = rmd.tax_deferred

        state.clamp()

        gross_withdrawal = withdrawal.gross_withdrawal + rmd.amount
        if balance_before_growth > 0:
            withdrawal_rate = gross_withdrawal / balance_before_growth * 100
        else:
            withdrawal_rate = 0.0

        return YearSnapshot(
            year=year_index + 1,
            year_index=year_index,
            primary_age=primary_age,
            spouse_age=spouse_age,
            taxable=state.taxable,
            tax_deferred=state.tax_deferred,
            total=state.total,
            expenses=expenses if retired else 0.0,
            primary_ss_income=ss_income.primary,
            spouse_ss_income=ss_income.spouse,
            total_ss_income=ss_income.total,
            net_ss_income=ss_income.net,
            annual_return=annual_return,
            withdrawal=gross_withdrawal,
            rmd=rmd.amount,
            taxes=ss_income.tax + withdrawal.tax_paid + rmd.tax_paid,
            withdrawal_rate=withdrawal_rate,
            depleted=retired and state.total <= 0,
        )

    @staticmethod
    def _apply_growth(state: AccountState, annual_return: float, proration: float):
        total = state.total
        if total == 0:
            return
        growth = total * annual_return * proration
        taxable_share = state.taxable / total
        tax_deferred_share = state.tax_deferred / total
        state.taxable += growth * taxable_share
        state.tax_deferred += growth * tax_deferred_share


def run_trajectory(transition: YearTransition,
                   annual_return: Callable[[int], float]) -> Trajectory:
    """Run a full trajectory from the reference date to the maximum age.

    Both ages advance by one each year. The run stops early when the money
    runs out at or after retirement age.

    Args:
        transition: YearTransition built from the run's inputs
        annual_return: Callable mapping a year index to that year's realized
                       return (fraction)

    Returns:
        Trajectory with every YearSnapshot, the survival flag and the
        terminal combined balance
    """
    state = transition.initial_state()
    primary_age = transition.start_primary_age
    spouse_age = transition.start_spouse_age
    trajectory = Trajectory(terminal_balance=state.total)

    year_index = 0
    while primary_age <= transition.inputs.max_age:
        snapshot = transition.step(state, primary_age, spouse_age, year_index,
                                   annual_return(year_index))
        trajectory.snapshots.append(snapshot)
        trajectory.terminal_balance = snapshot.total
        if snapshot.depleted:
            trajectory.survived = False
            break
        primary_age += 1
        spouse_age += 1
        year_index += 1

    return trajectory
