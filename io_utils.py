"""
IO utilities for saving/loading parameters and exporting simulation results.
Handles JSON serialization of parameters and CSV exports of results.
"""
import io
import json
import zipfile
import pandas as pd
import numpy as np
from typing import Dict, Any
from dataclasses import asdict, fields
from datetime import datetime

from simulation import SimulationParams, SimulationResults, RetirementSimulator, calculate_summary_stats


# Keys a presentation layer may store alongside parameters
UI_ONLY_PARAMS = {
    'currency_view',
    'active_tab',
    'show_timeline',
    'show_portfolio',
    'show_spending',
    'show_advanced',
}


def params_to_dict(params: SimulationParams) -> Dict[str, Any]:
    """
    Convert SimulationParams to dictionary for JSON serialization.

    Args:
        params: SimulationParams object

    Returns:
        Dictionary representation
    """
    return asdict(params)


def dict_to_params(param_dict: Dict[str, Any]) -> SimulationParams:
    """
    Convert dictionary to SimulationParams object.

    Args:
        param_dict: Dictionary with parameter values

    Returns:
        SimulationParams object
    """
    # Create a copy to avoid modifying the original
    filtered_dict = param_dict.copy()

    for param in UI_ONLY_PARAMS:
        filtered_dict.pop(param, None)

    return SimulationParams(**filtered_dict)


def save_parameters_json(params: SimulationParams, filepath: str) -> None:
    """
    Save simulation parameters to JSON file.

    Args:
        params: SimulationParams object to save
        filepath: Path to save JSON file
    """
    with open(filepath, 'w') as f:
        json.dump(params_to_dict(params), f, indent=2)


def load_parameters_json(filepath: str) -> SimulationParams:
    """
    Load simulation parameters from JSON file.

    Args:
        filepath: Path to JSON file

    Returns:
        SimulationParams object
    """
    with open(filepath, 'r') as f:
        param_dict = json.load(f)

    return dict_to_params(param_dict)


def create_parameters_download_json(params: SimulationParams) -> str:
    """Create JSON string for downloading parameters."""
    return json.dumps(params_to_dict(params), indent=2)


def parse_parameters_upload_json(json_string: str) -> SimulationParams:
    """Parse uploaded JSON string to SimulationParams."""
    return dict_to_params(json.loads(json_string))


def validate_parameters_json(json_string: str) -> tuple[bool, str]:
    """
    Validate uploaded parameters JSON.

    Args:
        json_string: JSON string to validate

    Returns:
        (is_valid, error_message)
    """
    try:
        param_dict = json.loads(json_string)

        if not isinstance(param_dict, dict):
            return False, "Parameters must be a JSON object"

        known = {f.name for f in fields(SimulationParams)} | UI_ONLY_PARAMS
        unknown = sorted(set(param_dict) - known)
        if unknown:
            return False, f"Unknown parameter: {unknown[0]}"

        # Engine validation covers ages, ranges and non-finite values
        RetirementSimulator(dict_to_params(param_dict))

        return True, ""

    except json.JSONDecodeError as e:
        return False, f"Invalid JSON: {str(e)}"
    except (TypeError, ValueError) as e:
        return False, f"Parameter validation error: {str(e)}"


def export_percentile_bands_csv(results: SimulationResults) -> str:
    """
    Export wealth percentile bands to CSV string.

    Args:
        results: Simulation results

    Returns:
        CSV string with age, p20, p50 and p80 columns
    """
    df = pd.DataFrame({
        'age': results.ages,
        'p20_wealth': results.p20,
        'p50_wealth': results.p50,
        'p80_wealth': results.p80
    })

    return df.to_csv(index=False)


def export_median_path_csv(results: SimulationResults) -> str:
    """Export the representative path's account breakdown to CSV string."""
    df = pd.DataFrame(results.median_data())
    return df.to_csv(index=False)


def export_terminal_wealth_csv(terminal_wealth: np.ndarray) -> str:
    """
    Export terminal wealth results to CSV string.

    Args:
        terminal_wealth: Array of terminal wealth values

    Returns:
        CSV string
    """
    df = pd.DataFrame({
        'simulation': range(1, len(terminal_wealth) + 1),
        'terminal_wealth': terminal_wealth
    })

    return df.to_csv(index=False)


def create_summary_report(params: SimulationParams,
                         results: SimulationResults) -> Dict[str, Any]:
    """
    Create comprehensive summary report of simulation.

    Args:
        params: Simulation parameters
        results: Simulation results

    Returns:
        Dictionary with summary information
    """
    return {
        'generated_at': datetime.now().isoformat(timespec='seconds'),
        'simulation_info': {
            'num_simulations': params.num_sims,
            'current_age': params.current_age,
            'retirement_age': params.retirement_age,
            'life_expectancy': params.life_expectancy,
            'initial_net_worth': params.initial_net_worth,
            'random_seed': params.random_seed
        },
        'outcomes': {
            'success_rate': results.success_rate,
            'median_end_wealth': results.median_end_wealth,
            'survival_age': results.survival_label,
            'representative_end_wealth': results.representative_path.final_total
        },
        'terminal_wealth_stats': calculate_summary_stats(results.terminal_wealth),
        'market': {
            'expected_return': params.expected_return,
            'volatility': params.volatility
        },
        'taxes': {
            'income_tax_rate': params.income_tax_rate,
            'capital_gains_inclusion': params.capital_gains_inclusion
        }
    }


def export_summary_report_json(report: Dict[str, Any]) -> str:
    """Export summary report as JSON string."""
    return json.dumps(report, indent=2, default=str)


def create_batch_export_zip(params: SimulationParams,
                           results: SimulationResults) -> io.BytesIO:
    """
    Create ZIP file containing all export files.

    Args:
        params: Simulation parameters
        results: Simulation results

    Returns:
        BytesIO object containing ZIP file
    """
    zip_buffer = io.BytesIO()

    with zipfile.ZipFile(zip_buffer, 'w', zipfile.ZIP_DEFLATED) as zip_file:
        zip_file.writestr('parameters.json', create_parameters_download_json(params))
        zip_file.writestr('terminal_wealth.csv', export_terminal_wealth_csv(results.terminal_wealth))
        zip_file.writestr('percentile_bands.csv', export_percentile_bands_csv(results))
        zip_file.writestr('median_path.csv', export_median_path_csv(results))

        report = create_summary_report(params, results)
        zip_file.writestr('summary_report.json', export_summary_report_json(report))

    zip_buffer.seek(0)
    return zip_buffer
