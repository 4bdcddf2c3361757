"""
Account balances for a single simulated path.
Tracks taxable, pre-tax and Roth balances and applies growth, contributions and
tax-aware withdrawals (taxable -> pre-tax -> Roth).
"""
from dataclasses import dataclass
from typing import Tuple

from tax import taxable_account_factor, pretax_account_factor, solve_gross_withdrawal, net_from_gross


@dataclass
class AccountLedger:
    """Balances of the three accounts for one path"""
    taxable: float = 0.0
    pretax: float = 0.0
    roth: float = 0.0

    @property
    def total(self) -> float:
        return self.taxable + self.pretax + self.roth

    def snapshot(self) -> Tuple[float, float, float, float]:
        """(taxable, pretax, roth, total) as recorded in a trajectory"""
        return self.taxable, self.pretax, self.roth, self.taxable + self.pretax + self.roth

    def apply_growth(self, rate: float) -> None:
        """Grow every account by the same real return"""
        self.taxable *= (1 + rate)
        self.pretax *= (1 + rate)
        self.roth *= (1 + rate)

    def apply_contributions(self, amounts: Tuple[float, float, float]) -> None:
        """Add (taxable, pretax, roth) contributions for an accumulation year"""
        taxable, pretax, roth = amounts
        self.taxable += taxable
        self.pretax += pretax
        self.roth += roth

    def deposit_surplus(self, amount: float) -> None:
        """Reinvest excess fixed income into the taxable account"""
        self.taxable += amount

    def floor_at_zero(self) -> None:
        if self.taxable < 0:
            self.taxable = 0.0
        if self.pretax < 0:
            self.pretax = 0.0
        if self.roth < 0:
            self.roth = 0.0

    @staticmethod
    def _draw_taxed(balance: float, net_needed: float, factor: float) -> Tuple[float, float]:
        """
        Draw from one taxed account.

        Returns:
            (new_balance, remaining_net_need)
        """
        gross_needed, _ = solve_gross_withdrawal(net_needed, factor)
        if balance >= gross_needed:
            return balance - gross_needed, 0.0
        return 0.0, net_needed - net_from_gross(balance, factor)

    def withdraw(self, net_needed: float, income_tax_rate: float,
                 capital_gains_inclusion: float) -> float:
        """
        Withdraw an after-tax amount in taxable -> pre-tax -> Roth order.

        Args:
            net_needed: After-tax amount the household needs this year
            income_tax_rate: Income tax rate in percent (0-100)
            capital_gains_inclusion: Taxable share of capital gains in percent (0-100)

        Returns:
            Net need left unmet after all three accounts are exhausted (0 if fully funded)
        """
        remaining = net_needed

        if remaining > 0 and self.taxable > 0:
            factor = taxable_account_factor(income_tax_rate, capital_gains_inclusion)
            self.taxable, remaining = self._draw_taxed(self.taxable, remaining, factor)

        if remaining > 0 and self.pretax > 0:
            factor = pretax_account_factor(income_tax_rate)
            self.pretax, remaining = self._draw_taxed(self.pretax, remaining, factor)

        # Roth withdrawals are tax-free
        if remaining > 0 and self.roth > 0:
            if self.roth >= remaining:
                self.roth -= remaining
                remaining = 0.0
            else:
                remaining -= self.roth
                self.roth = 0.0

        return max(0.0, remaining)
