"""
Dynamic retirement spending policy.
Essential spending is always funded; discretionary spending can be trimmed in
years where the portfolio did not earn what it needs to pay out.
"""
from dataclasses import dataclass


@dataclass
class SpendingDecision:
    """Outcome of the spending policy for one retired year"""
    target_spending: float
    fixed_income: float
    portfolio_need: float
    spending_cut: float
    withdrawal: float

    @property
    def surplus(self) -> float:
        """Fixed income left over after spending (reinvested into taxable)"""
        return -self.withdrawal if self.withdrawal < 0 else 0.0


class SpendingPolicy:
    """Spending rule with a bounded discretionary cut in poor years"""

    def __init__(self, min_spending: float, discretionary_spending: float,
                 spending_cut_flexibility: float, fixed_income_annual: float,
                 fixed_income_start_age: int):
        self.min_spending = min_spending
        self.discretionary_spending = discretionary_spending
        self.spending_cut_flexibility = spending_cut_flexibility
        self.fixed_income_annual = fixed_income_annual
        self.fixed_income_start_age = fixed_income_start_age

    @classmethod
    def from_params(cls, params) -> 'SpendingPolicy':
        return cls(
            min_spending=params.min_spending,
            discretionary_spending=params.discretionary_spending,
            spending_cut_flexibility=params.spending_cut_flexibility,
            fixed_income_annual=params.fixed_income_annual,
            fixed_income_start_age=params.fixed_income_start_age,
        )

    @property
    def target_spending(self) -> float:
        return self.min_spending + self.discretionary_spending

    @property
    def max_cut(self) -> float:
        """Largest discretionary cut allowed in a single year"""
        return self.discretionary_spending * (self.spending_cut_flexibility / 100)

    def fixed_income(self, age: int) -> float:
        """Pension/annuity income for the given age (start age inclusive)"""
        if age >= self.fixed_income_start_age:
            return self.fixed_income_annual
        return 0.0

    def decide(self, age: int, gain: float) -> SpendingDecision:
        """
        Decide this year's net portfolio withdrawal.

        Args:
            age: Age during the year
            gain: Real dollar gain of the portfolio this year (after growth, before cashflow)

        Returns:
            SpendingDecision; a negative withdrawal means surplus income to reinvest
        """
        target = self.target_spending
        fixed_income = self.fixed_income(age)

        # Can be negative when fixed income exceeds spending
        portfolio_need = target - fixed_income

        spending_cut = 0.0
        if portfolio_need > 0 and gain < portfolio_need:
            shortfall = portfolio_need - gain
            spending_cut = min(shortfall, self.max_cut)

        return SpendingDecision(
            target_spending=target,
            fixed_income=fixed_income,
            portfolio_need=portfolio_need,
            spending_cut=spending_cut,
            withdrawal=portfolio_need - spending_cut,
        )
