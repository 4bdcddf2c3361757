"""
Configuration utilities for the wealth simulator.
Default parameters, engine settings stored in a JSON file, and logging setup.
"""

import json
import logging
import os
from dataclasses import replace
from typing import Dict, Any

from simulation import SimulationParams

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = 'engine_config.json'

# Settings that may appear in the engine config file
ENGINE_CONFIG_KEYS = ('num_sims', 'random_seed', 'max_workers', 'log_level')


def get_default_params() -> Dict[str, Any]:
    """Get default simulation parameters as a plain dictionary"""
    return {
        # Timeline
        'current_age': 35,
        'retirement_age': 65,
        'life_expectancy': 90,

        # Accounts
        'taxable_balance': 50_000,
        'taxable_contribution': 5_000,
        'pretax_balance': 40_000,
        'pretax_contribution': 10_000,
        'roth_balance': 10_000,
        'roth_contribution': 6_000,

        # Spending
        'min_spending': 40_000,
        'discretionary_spending': 20_000,
        'spending_cut_flexibility': 50,

        # Fixed income
        'fixed_income_annual': 0,
        'fixed_income_start_age': 65,

        # Market (real)
        'expected_return': 0.045,
        'volatility': 0.15,

        # Taxes
        'income_tax_rate': 30,
        'capital_gains_inclusion': 50,

        # Engine
        'num_sims': 1_000,
        'random_seed': None,
    }


def load_engine_config(path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Load engine settings (simulation count, seed, workers, log level) from JSON"""
    if not os.path.exists(path):
        logger.debug("Engine config %s not found, using defaults", path)
        return {}
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Could not load engine config %s: %s", path, e)
        return {}

    if not isinstance(config, dict):
        logger.error("Engine config %s must be a JSON object", path)
        return {}

    unknown = set(config) - set(ENGINE_CONFIG_KEYS)
    if unknown:
        logger.warning("Ignoring unknown engine config keys: %s", sorted(unknown))
    return {k: v for k, v in config.items() if k in ENGINE_CONFIG_KEYS}


def save_engine_config(config: Dict[str, Any], path: str = DEFAULT_CONFIG_PATH) -> None:
    """Save engine settings to JSON"""
    with open(path, 'w') as f:
        json.dump({k: v for k, v in config.items() if k in ENGINE_CONFIG_KEYS}, f, indent=2)
    logger.debug("Saved engine config to %s", path)


def apply_engine_config(params: SimulationParams, config: Dict[str, Any]) -> SimulationParams:
    """Return a copy of params with num_sims / random_seed taken from config"""
    overrides = {k: config[k] for k in ('num_sims', 'random_seed') if k in config}
    return replace(params, **overrides)


def configure_logging(config: Dict[str, Any] = None) -> None:
    """Configure root logging from the engine config's log_level (default WARNING)"""
    level_name = str((config or {}).get('log_level', 'WARNING')).upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name}")
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )
