"""
Monte Carlo wealth simulation engine with dynamic spending and tax-aware withdrawals.
Pure functions for simulation logic, decoupled from UI.
"""
import logging
import math
import numbers
import numpy as np
from typing import Dict, List, Optional
from dataclasses import dataclass, fields

from ledger import AccountLedger
from market import BoxMullerSource
from spending import SpendingPolicy
from tax import is_factor_clamped

logger = logging.getLogger(__name__)

# Used as range bounds, so floats are rejected rather than truncated
INTEGER_PARAMS = ('current_age', 'retirement_age', 'life_expectancy',
                  'fixed_income_start_age', 'num_sims')


def _is_integer(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


@dataclass
class SimulationParams:
    """Parameters for Monte Carlo simulation"""
    # Timeline
    current_age: int = 35
    retirement_age: int = 65
    life_expectancy: int = 90

    # Accounts (balance, annual contribution while working)
    taxable_balance: float = 50_000
    taxable_contribution: float = 5_000
    pretax_balance: float = 40_000  # 401k / RRSP
    pretax_contribution: float = 10_000
    roth_balance: float = 10_000  # Roth / TFSA
    roth_contribution: float = 6_000

    # Spending (real dollars)
    min_spending: float = 40_000  # Non-negotiable
    discretionary_spending: float = 20_000
    spending_cut_flexibility: float = 50  # % of discretionary that can be cut

    # Fixed income (pension, annuity, government benefits)
    fixed_income_annual: float = 0
    fixed_income_start_age: int = 65

    # Return model (annual, real)
    expected_return: float = 0.045
    volatility: float = 0.15

    # Taxes (percent)
    income_tax_rate: float = 30
    capital_gains_inclusion: float = 50

    # Engine
    num_sims: int = 1_000
    random_seed: Optional[int] = None

    @property
    def horizon_years(self) -> int:
        return self.life_expectancy - self.current_age

    @property
    def initial_net_worth(self) -> float:
        return self.taxable_balance + self.pretax_balance + self.roth_balance

    @property
    def contributions(self):
        return (self.taxable_contribution, self.pretax_contribution, self.roth_contribution)


@dataclass
class PathTrajectory:
    """Year-by-year balances for one simulated path (index 0 = current age)"""
    taxable: np.ndarray
    pretax: np.ndarray
    roth: np.ndarray
    total: np.ndarray
    details: Optional[Dict[str, List]] = None

    @property
    def final_total(self) -> float:
        return float(self.total[-1])

    def __len__(self) -> int:
        return len(self.total)


@dataclass
class SimulationResults:
    """
    Results from Monte Carlo simulation.

    success_rate is a fraction in [0, 1], not a percentage.
    """
    ages: np.ndarray
    p20: np.ndarray
    p50: np.ndarray
    p80: np.ndarray
    wealth_paths: np.ndarray
    terminal_wealth: np.ndarray
    representative_path: PathTrajectory
    representative_index: int
    success_rate: float
    median_end_wealth: float
    survival_age: Optional[int]
    life_expectancy: int
    initial_net_worth: float

    @property
    def survives_horizon(self) -> bool:
        """True when the p20 band never reaches zero"""
        return self.survival_age is None

    @property
    def survival_label(self) -> str:
        if self.survival_age is None:
            return f"{self.life_expectancy}+"
        return str(self.survival_age)

    def probability_data(self) -> List[Dict[str, float]]:
        """Percentile bands as rows of (age, p20, p50, p80)"""
        return [
            {'age': int(age), 'p20': float(p20), 'p50': float(p50), 'p80': float(p80)}
            for age, p20, p50, p80 in zip(self.ages, self.p20, self.p50, self.p80)
        ]

    def median_data(self) -> List[Dict[str, float]]:
        """
        Account breakdown of the representative path.

        The representative path is ranked by terminal wealth, so its yearly
        totals generally differ from the per-year p50 band.
        """
        path = self.representative_path
        return [
            {
                'age': int(age),
                'taxable': float(path.taxable[i]),
                'pretax': float(path.pretax[i]),
                'roth': float(path.roth[i]),
                'total': float(path.total[i]),
            }
            for i, age in enumerate(self.ages)
        ]


class RetirementSimulator:
    """Monte Carlo wealth simulation across taxable, pre-tax and Roth accounts"""

    def __init__(self, params: SimulationParams):
        self.params = params
        self._validate_params()
        self.spending_policy = SpendingPolicy.from_params(params)

    def _validate_params(self):
        """Validate simulation parameters"""
        p = self.params

        for name in INTEGER_PARAMS:
            value = getattr(p, name)
            if not _is_integer(value):
                raise ValueError(f"{name} must be an integer, got {value!r}")

        if p.random_seed is not None and not (_is_integer(p.random_seed) and p.random_seed >= 0):
            raise ValueError(f"random_seed must be None or a non-negative integer, got {p.random_seed!r}")

        for f in fields(p):
            if f.name == 'random_seed':
                continue
            value = getattr(p, f.name)
            if not isinstance(value, numbers.Real) or isinstance(value, bool):
                raise ValueError(f"{f.name} must be a finite number, got {value!r}")
            if not math.isfinite(value):
                raise ValueError(f"{f.name} must be a finite number, got {value}")

        if not (p.current_age < p.retirement_age < p.life_expectancy):
            raise ValueError(
                f"Ages must satisfy current_age < retirement_age < life_expectancy, "
                f"got {p.current_age}, {p.retirement_age}, {p.life_expectancy}")

        non_negative = [
            'taxable_balance', 'taxable_contribution', 'pretax_balance', 'pretax_contribution',
            'roth_balance', 'roth_contribution', 'min_spending', 'discretionary_spending',
            'fixed_income_annual', 'volatility',
        ]
        for name in non_negative:
            if getattr(p, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(p, name)}")

        for name in ['spending_cut_flexibility', 'income_tax_rate', 'capital_gains_inclusion']:
            value = getattr(p, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} must be between 0 and 100, got {value}")

        if p.num_sims < 1:
            raise ValueError(f"num_sims must be at least 1, got {p.num_sims}")

        taxable_factor = 1 - (p.capital_gains_inclusion / 100) * (p.income_tax_rate / 100)
        pretax_factor = 1 - p.income_tax_rate / 100
        if is_factor_clamped(taxable_factor) or is_factor_clamped(pretax_factor):
            logger.warning("After-tax factor is zero at income_tax_rate=%s; withdrawals use the floor factor",
                           p.income_tax_rate)

    def _initial_ledger(self) -> AccountLedger:
        return AccountLedger(
            taxable=float(self.params.taxable_balance),
            pretax=float(self.params.pretax_balance),
            roth=float(self.params.roth_balance),
        )

    def simulate_path(self, source, record_details: bool = False) -> PathTrajectory:
        """
        Simulate one trajectory from current age through life expectancy.

        Args:
            source: Return source providing sample(mean, std_dev)
            record_details: Also record per-year cashflow details

        Returns:
            PathTrajectory with horizon_years + 1 entries
        """
        p = self.params
        ledger = self._initial_ledger()

        taxable, pretax, roth, total = [], [], [], []
        details = {
            'ages': [], 'returns': [], 'growth': [], 'contributions': [],
            'fixed_income': [], 'spending_cut': [], 'withdrawal': [],
            'surplus': [], 'unmet_need': [], 'end_assets': [],
        } if record_details else None

        for step in range(p.horizon_years + 1):
            age = p.current_age + step
            realized_return = 0.0
            gain = 0.0
            contributed = 0.0
            decision = None
            unmet = 0.0

            if step > 0:
                start_total = ledger.total
                realized_return = source.sample(p.expected_return, p.volatility)
                ledger.apply_growth(realized_return)
                gain = ledger.total - start_total

                if age < p.retirement_age:
                    ledger.apply_contributions(p.contributions)
                    contributed = sum(p.contributions)
                else:
                    decision = self.spending_policy.decide(age, gain)
                    if decision.withdrawal < 0:
                        ledger.deposit_surplus(abs(decision.withdrawal))
                    else:
                        unmet = ledger.withdraw(decision.withdrawal, p.income_tax_rate,
                                                p.capital_gains_inclusion)

            ledger.floor_at_zero()
            t, pt, r, tot = ledger.snapshot()
            taxable.append(t)
            pretax.append(pt)
            roth.append(r)
            total.append(tot)

            if details is not None:
                details['ages'].append(age)
                details['returns'].append(realized_return)
                details['growth'].append(gain)
                details['contributions'].append(contributed)
                details['fixed_income'].append(decision.fixed_income if decision else 0.0)
                details['spending_cut'].append(decision.spending_cut if decision else 0.0)
                details['withdrawal'].append(max(0.0, decision.withdrawal) if decision else 0.0)
                details['surplus'].append(decision.surplus if decision else 0.0)
                details['unmet_need'].append(unmet)
                details['end_assets'].append(tot)

        return PathTrajectory(
            taxable=np.array(taxable),
            pretax=np.array(pretax),
            roth=np.array(roth),
            total=np.array(total),
            details=details,
        )

    def run_simulation(self, source=None) -> SimulationResults:
        """
        Run Monte Carlo simulation.

        Args:
            source: Optional return source; defaults to a Box-Muller source seeded
                with params.random_seed

        Returns:
            SimulationResults
        """
        p = self.params
        if source is None:
            source = BoxMullerSource(seed=p.random_seed)

        logger.debug("Running %d paths over %d years", p.num_sims, p.horizon_years)

        paths = [self.simulate_path(source) for _ in range(p.num_sims)]
        wealth_paths = np.vstack([path.total for path in paths])
        terminal_wealth = wealth_paths[:, -1].copy()

        bands = calculate_percentiles(wealth_paths)
        ages = np.arange(p.current_age, p.life_expectancy + 1)

        rep_idx = select_representative_index(terminal_wealth)
        logger.debug("Representative path %d ends at %.2f", rep_idx, terminal_wealth[rep_idx])

        success_rate = float(np.mean(terminal_wealth >= p.initial_net_worth))
        survival_age = find_survival_age(ages, bands['p20'])

        return SimulationResults(
            ages=ages,
            p20=bands['p20'],
            p50=bands['p50'],
            p80=bands['p80'],
            wealth_paths=wealth_paths,
            terminal_wealth=terminal_wealth,
            representative_path=paths[rep_idx],
            representative_index=rep_idx,
            success_rate=success_rate,
            median_end_wealth=float(bands['p50'][-1]),
            survival_age=survival_age,
            life_expectancy=p.life_expectancy,
            initial_net_worth=p.initial_net_worth,
        )


def nearest_rank(sorted_values: np.ndarray, quantile: float):
    """Entry at rank int(n * quantile) along the first axis of an ascending array (no interpolation)"""
    return sorted_values[int(len(sorted_values) * quantile)]


def calculate_percentiles(wealth_paths: np.ndarray) -> Dict[str, np.ndarray]:
    """Calculate nearest-rank wealth percentile bands for every year"""
    sorted_paths = np.sort(wealth_paths, axis=0)

    return {
        'p20': nearest_rank(sorted_paths, 0.2).copy(),
        'p50': nearest_rank(sorted_paths, 0.5).copy(),
        'p80': nearest_rank(sorted_paths, 0.8).copy()
    }


def select_representative_index(terminal_wealth: np.ndarray) -> int:
    """Index of the path at the median rank of terminal wealth (stable on ties)"""
    order = np.argsort(terminal_wealth, kind='stable')
    return int(nearest_rank(order, 0.5))


def find_survival_age(ages: np.ndarray, p20: np.ndarray) -> Optional[int]:
    """First age where the p20 band is depleted, None if it never is"""
    depleted = np.nonzero(p20 <= 0)[0]
    if len(depleted) == 0:
        return None
    return int(ages[depleted[0]])


def calculate_summary_stats(terminal_wealth: np.ndarray) -> Dict[str, float]:
    """Calculate summary statistics for terminal wealth"""
    sorted_wealth = np.sort(terminal_wealth)
    return {
        'mean': float(np.mean(terminal_wealth)),
        'p10': float(nearest_rank(sorted_wealth, 0.1)),
        'p50': float(nearest_rank(sorted_wealth, 0.5)),
        'p90': float(nearest_rank(sorted_wealth, 0.9)),
        'prob_depleted': float(np.mean(terminal_wealth <= 0)),
    }
