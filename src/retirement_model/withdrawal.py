# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Tax-aware withdrawal sequencing across the taxable and tax-deferred buckets.

The engine grosses up a net cash need so that, after tax, the household
receives exactly what it needs. Taxable withdrawals are taxed at half the flat
rate (a blend of basis and capital gains); tax-deferred withdrawals are taxed
at the full rate. The taxable bucket is always drawn first.
"""

from dataclasses import dataclass

TAXABLE_RATE_FACTOR = 0.5


@dataclass(frozen=True)
class WithdrawalResult:
    """Outcome of one year's policy withdrawal.

    Attributes:
        taxable: Taxable balance after the withdrawal
        tax_deferred: Tax-deferred balance after the withdrawal (may be
                      negative when the need exceeds both buckets)
        taxable_withdrawal: Gross amount taken from the taxable bucket
        tax_deferred_withdrawal: Gross amount taken from the tax-deferred bucket
        tax_paid: Tax due on both withdrawals
    """
    taxable: float
    tax_deferred: float
    taxable_withdrawal: float = 0.0
    tax_deferred_withdrawal: float = 0.0
    tax_paid: float = 0.0

    @property
    def gross_withdrawal(self) -> float:
        return self.taxable_withdrawal + self.tax_deferred_withdrawal


class WithdrawalEngine:
    """Withdraws a net cash need from taxable first, then tax-deferred.

    Example:
        >>> engine = WithdrawalEngine(tax_rate=0.20)
        >>> result = engine.withdraw(900, taxable=500, tax_deferred=5000)
        >>> result.tax_deferred_withdrawal, result.tax_paid
        (562.5, 162.5)
    """

    def __init__(self, tax_rate: float):
        """Initialize the engine.

        Args:
            tax_rate: Flat tax rate as a fraction (0.2 for 20%), below 1
        """
        self.tax_rate = tax_rate
        self.taxable_rate = TAXABLE_RATE_FACTOR * tax_rate

    def withdraw(self, net_needed: float, taxable: float, tax_deferred: float) -> WithdrawalResult:
        """Withdraw enough to net `net_needed` after tax.

        Args:
            net_needed: After-tax cash required this year
            taxable: Current taxable balance
            tax_deferred: Current tax-deferred balance

        Returns:
            WithdrawalResult with updated balances, gross amounts and tax
        """
        if net_needed <= 0:
            return WithdrawalResult(taxable=taxable, tax_deferred=tax_deferred)

        gross_from_taxable = net_needed / (1 - self.taxable_rate)

        if taxable >= gross_from_taxable:
            return WithdrawalResult(
                taxable=taxable - gross_from_taxable,
                tax_deferred=tax_deferred,
                taxable_withdrawal=gross_from_taxable,
                tax_paid=gross_from_taxable * self.taxable_rate,
            )

        if taxable > 0:
            taxable_tax = taxable * self.taxable_rate
            still_needed = net_needed - (taxable - taxable_tax)
            deferred_gross = still_needed / (1 - self.tax_rate)
            return WithdrawalResult(
                taxable=0.0,
                tax_deferred=tax_deferred - deferred_gross,
                taxable_withdrawal=taxable,
                tax_deferred_withdrawal=deferred_gross,
                tax_paid=taxable_tax + deferred_gross * self.tax_rate,
            )

        deferred_gross = net_needed / (1 - self.tax_rate)
        return WithdrawalResult(
            taxable=taxable,
            tax_deferred=tax_deferred - deferred_gross,
            tax_deferred_withdrawal=deferred_gross,
            tax_paid=deferred_gross * self.tax_rate,
        )
