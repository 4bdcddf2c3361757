"""
Unit tests for the dynamic spending policy.
"""
import pytest
from simulation import SimulationParams
from spending import SpendingPolicy


def make_policy(min_spending=40_000, discretionary=20_000, flexibility=50,
                fixed_income=0, fixed_start=65):
    return SpendingPolicy(
        min_spending=min_spending,
        discretionary_spending=discretionary,
        spending_cut_flexibility=flexibility,
        fixed_income_annual=fixed_income,
        fixed_income_start_age=fixed_start,
    )


class TestSpendingPolicy:
    """Test the shortfall cut and surplus rules"""

    def test_shortfall_cut(self):
        """Need 60k, gain 40k, 20k discretionary at 50% flexibility"""
        decision = make_policy().decide(age=70, gain=40_000)
        assert decision.portfolio_need == 60_000
        assert decision.spending_cut == 10_000
        assert decision.withdrawal == 50_000
        assert decision.surplus == 0

    def test_cut_limited_to_shortfall(self):
        """A shortfall smaller than the maximum cut is cut exactly"""
        decision = make_policy().decide(age=70, gain=55_000)
        assert decision.spending_cut == 5_000
        assert decision.withdrawal == 55_000

    def test_negative_gain(self):
        """Losing years still only cut discretionary spending up to the ceiling"""
        decision = make_policy().decide(age=70, gain=-30_000)
        assert decision.spending_cut == 10_000
        assert decision.withdrawal == 50_000

    def test_good_year_no_cut(self):
        decision = make_policy().decide(age=70, gain=100_000)
        assert decision.spending_cut == 0
        assert decision.withdrawal == 60_000

    def test_gain_equal_to_need_no_cut(self):
        decision = make_policy().decide(age=70, gain=60_000)
        assert decision.spending_cut == 0

    def test_zero_flexibility_never_cuts(self):
        decision = make_policy(flexibility=0).decide(age=70, gain=-100_000)
        assert decision.spending_cut == 0
        assert decision.withdrawal == 60_000

    def test_essentials_never_cut(self):
        """Even with full flexibility, only discretionary spending is reducible"""
        decision = make_policy(flexibility=100).decide(age=70, gain=-1_000_000)
        assert decision.spending_cut == 20_000
        assert decision.withdrawal == 40_000

    def test_surplus(self):
        """50k fixed income against 40k target leaves 10k to reinvest"""
        policy = make_policy(min_spending=30_000, discretionary=10_000, fixed_income=50_000)
        decision = policy.decide(age=70, gain=-50_000)
        assert decision.portfolio_need == -10_000
        assert decision.spending_cut == 0
        assert decision.withdrawal == -10_000
        assert decision.surplus == 10_000

    def test_fixed_income_start_age_inclusive(self):
        policy = make_policy(fixed_income=25_000, fixed_start=67)
        assert policy.fixed_income(66) == 0
        assert policy.fixed_income(67) == 25_000
        assert policy.decide(age=67, gain=1_000_000).withdrawal == 35_000

    def test_fixed_income_reduces_need_before_cut(self):
        policy = make_policy(fixed_income=30_000)
        decision = policy.decide(age=70, gain=0)
        assert decision.portfolio_need == 30_000
        assert decision.spending_cut == 10_000
        assert decision.withdrawal == 20_000

    def test_from_params(self):
        params = SimulationParams(min_spending=35_000, discretionary_spending=15_000,
                                  spending_cut_flexibility=40, fixed_income_annual=12_000,
                                  fixed_income_start_age=70)
        policy = SpendingPolicy.from_params(params)
        assert policy.target_spending == 50_000
        assert policy.max_cut == pytest.approx(6_000)
        assert policy.fixed_income(70) == 12_000
