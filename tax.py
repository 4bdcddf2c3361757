"""
Simplified flat-rate tax model for account withdrawals.
Includes gross-up helpers to determine how much must leave an account to net a spending need.
"""
from typing import Tuple


# Smallest divisor ever used when grossing up a withdrawal
TAX_FACTOR_FLOOR = 0.01


def safe_tax_factor(factor: float) -> float:
    """
    Clamp an after-tax factor so it can be used as a divisor.

    Args:
        factor: Fraction of a gross withdrawal that remains after tax

    Returns:
        The factor unchanged if positive, otherwise TAX_FACTOR_FLOOR
    """
    if factor <= 0:
        return TAX_FACTOR_FLOOR
    return factor


def taxable_account_factor(income_tax_rate: float, capital_gains_inclusion: float) -> float:
    """
    After-tax factor for the taxable (brokerage) account.

    Only the included portion of a withdrawal is taxed as ordinary income.

    Args:
        income_tax_rate: Income tax rate in percent (0-100)
        capital_gains_inclusion: Share of a gain counted as income, in percent (0-100)

    Returns:
        Clamped after-tax factor
    """
    inclusion = capital_gains_inclusion / 100
    tax_rate = income_tax_rate / 100
    return safe_tax_factor(1 - inclusion * tax_rate)


def pretax_account_factor(income_tax_rate: float) -> float:
    """After-tax factor for pre-tax (401k/RRSP) withdrawals, taxed fully as income."""
    return safe_tax_factor(1 - income_tax_rate / 100)


def is_factor_clamped(factor: float) -> bool:
    """True when the raw factor would be replaced by the floor"""
    return factor <= 0


def solve_gross_withdrawal(net_need: float, factor: float) -> Tuple[float, float]:
    """
    Solve for gross withdrawal W such that W * factor = net_need.

    Args:
        net_need: After-tax spending requirement
        factor: After-tax factor (clamped before use)

    Returns:
        (gross_withdrawal, taxes_paid)
    """
    if net_need <= 0:
        return 0.0, 0.0

    gross = net_need / safe_tax_factor(factor)
    return gross, gross - net_need


def net_from_gross(gross_amount: float, factor: float) -> float:
    """Net proceeds from liquidating gross_amount at the given factor"""
    if gross_amount <= 0:
        return 0.0
    return gross_amount * safe_tax_factor(factor)

