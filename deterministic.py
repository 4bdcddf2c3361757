"""
Deterministic wealth projection using the expected return every year (no randomness).
Provides baseline scenario for comparison with Monte Carlo results.
"""
import numpy as np
import pandas as pd
from typing import Dict
from dataclasses import dataclass
from simulation import SimulationParams, RetirementSimulator
from market import ExpectedReturnSource


@dataclass
class DeterministicResults:
    """Results from deterministic projection"""
    ages: np.ndarray
    wealth_path: np.ndarray
    taxable_path: np.ndarray
    pretax_path: np.ndarray
    roth_path: np.ndarray
    withdrawal_path: np.ndarray
    spending_cut_path: np.ndarray
    unmet_need_path: np.ndarray
    year_by_year_details: Dict

    @property
    def depletion_age(self):
        """First age at which total wealth hits zero, None if never"""
        depleted = np.nonzero(self.wealth_path <= 0)[0]
        if len(depleted) == 0:
            return None
        return int(self.ages[depleted[0]])


class DeterministicProjector:
    """Deterministic projection with expected returns"""

    def __init__(self, params: SimulationParams):
        self.params = params
        self.simulator = RetirementSimulator(params)

    def run_projection(self) -> DeterministicResults:
        """Run a single path where every year returns exactly expected_return"""
        path = self.simulator.simulate_path(ExpectedReturnSource(), record_details=True)
        details = path.details

        return DeterministicResults(
            ages=np.array(details['ages']),
            wealth_path=path.total,
            taxable_path=path.taxable,
            pretax_path=path.pretax,
            roth_path=path.roth,
            withdrawal_path=np.array(details['withdrawal']),
            spending_cut_path=np.array(details['spending_cut']),
            unmet_need_path=np.array(details['unmet_need']),
            year_by_year_details=details
        )


def create_projection_table(results: DeterministicResults) -> pd.DataFrame:
    """
    Build a year-by-year table of the deterministic projection.

    Args:
        results: Deterministic projection results

    Returns:
        DataFrame with one row per age
    """
    details = results.year_by_year_details
    return pd.DataFrame({
        'age': results.ages,
        'return': details['returns'],
        'growth': details['growth'],
        'contributions': details['contributions'],
        'fixed_income': details['fixed_income'],
        'spending_cut': results.spending_cut_path,
        'withdrawal': results.withdrawal_path,
        'surplus': details['surplus'],
        'unmet_need': results.unmet_need_path,
        'taxable': results.taxable_path,
        'pretax': results.pretax_path,
        'roth': results.roth_path,
        'total': results.wealth_path,
    })
