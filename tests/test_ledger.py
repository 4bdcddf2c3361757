"""
Unit tests for account balances and the ordered withdrawal policy.
"""
import pytest
from ledger import AccountLedger


class TestLedgerArithmetic:
    """Test growth, contributions, deposits and flooring"""

    def test_growth_applies_same_rate_to_all_accounts(self):
        ledger = AccountLedger(taxable=100, pretax=200, roth=300)
        ledger.apply_growth(0.10)
        assert ledger.taxable == pytest.approx(110)
        assert ledger.pretax == pytest.approx(220)
        assert ledger.roth == pytest.approx(330)

    def test_contributions(self):
        ledger = AccountLedger(taxable=50_000, pretax=40_000, roth=10_000)
        ledger.apply_contributions((5_000, 10_000, 6_000))
        assert ledger.snapshot() == (55_000, 50_000, 16_000, 121_000)

    def test_deposit_surplus_goes_to_taxable_only(self):
        ledger = AccountLedger(taxable=1_000, pretax=2_000, roth=3_000)
        ledger.deposit_surplus(10_000)
        assert ledger.taxable == 11_000
        assert ledger.pretax == 2_000
        assert ledger.roth == 3_000

    def test_floor_at_zero(self):
        """A return below -100% drives balances negative; floor clamps them"""
        ledger = AccountLedger(taxable=100, pretax=200, roth=300)
        ledger.apply_growth(-1.5)
        assert ledger.total < 0
        ledger.floor_at_zero()
        assert ledger.snapshot() == (0.0, 0.0, 0.0, 0.0)

    def test_floor_leaves_positive_balances(self):
        ledger = AccountLedger(taxable=-5, pretax=200, roth=0)
        ledger.floor_at_zero()
        assert ledger.snapshot() == (0.0, 200, 0, 200)

    def test_snapshot_total_matches_sum(self):
        ledger = AccountLedger(taxable=0.1, pretax=0.2, roth=0.3)
        taxable, pretax, roth, total = ledger.snapshot()
        assert taxable + pretax + roth == total


class TestWithdrawalOrder:
    """Test taxable -> pre-tax -> Roth withdrawals with gross-up"""

    def test_taxable_liquidated_then_pretax(self):
        """Need 10,000 net with 5,000 taxable at an 85% factor"""
        ledger = AccountLedger(taxable=5_000, pretax=100_000, roth=0)
        unmet = ledger.withdraw(10_000, income_tax_rate=30, capital_gains_inclusion=50)

        # Taxable nets 5,000 * 0.85 = 4,250; remaining 5,750 grossed up at 70%
        assert ledger.taxable == 0
        assert ledger.pretax == pytest.approx(100_000 - 5_750 / 0.70)
        assert ledger.roth == 0
        assert unmet == 0

    def test_taxable_covers_need(self):
        ledger = AccountLedger(taxable=20_000, pretax=50_000, roth=10_000)
        unmet = ledger.withdraw(8_500, income_tax_rate=30, capital_gains_inclusion=50)
        assert ledger.taxable == pytest.approx(10_000)
        assert ledger.pretax == 50_000
        assert ledger.roth == 10_000
        assert unmet == 0

    def test_roth_is_tax_free(self):
        ledger = AccountLedger(taxable=0, pretax=0, roth=20_000)
        unmet = ledger.withdraw(5_000, income_tax_rate=30, capital_gains_inclusion=50)
        assert ledger.roth == 15_000
        assert unmet == 0

    def test_roth_used_last(self):
        ledger = AccountLedger(taxable=1_000, pretax=1_000, roth=50_000)
        ledger.withdraw(10_000, income_tax_rate=30, capital_gains_inclusion=50)
        assert ledger.taxable == 0
        assert ledger.pretax == 0
        # 10,000 - 850 - 700 drawn from Roth
        assert ledger.roth == pytest.approx(50_000 - 8_450)

    def test_all_accounts_exhausted_reports_unmet(self):
        ledger = AccountLedger(taxable=1_000, pretax=1_000, roth=1_000)
        unmet = ledger.withdraw(10_000, income_tax_rate=30, capital_gains_inclusion=50)
        assert ledger.snapshot() == (0, 0, 0, 0)
        assert unmet == pytest.approx(10_000 - 850 - 700 - 1_000)

    def test_clamped_factor_taxable(self):
        """At 100% tax and inclusion the floor factor applies"""
        ledger = AccountLedger(taxable=1_000, pretax=0, roth=0)
        unmet = ledger.withdraw(5, income_tax_rate=100, capital_gains_inclusion=100)
        assert ledger.taxable == pytest.approx(500)
        assert unmet == 0

    def test_zero_need_is_noop(self):
        ledger = AccountLedger(taxable=1_000, pretax=2_000, roth=3_000)
        assert ledger.withdraw(0, income_tax_rate=30, capital_gains_inclusion=50) == 0
        assert ledger.snapshot() == (1_000, 2_000, 3_000, 6_000)

    def test_empty_accounts_are_skipped(self):
        ledger = AccountLedger(taxable=0, pretax=0, roth=0)
        assert ledger.withdraw(1_000, income_tax_rate=30, capital_gains_inclusion=50) == 1_000
