#!/usr/bin/env python3
"""
Demo script showing how to use the wealth simulation modules programmatically.
This demonstrates the core functionality without any UI.
"""

from simulation import SimulationParams, RetirementSimulator, calculate_summary_stats
from deterministic import DeterministicProjector, create_projection_table
from config_utils import load_engine_config, apply_engine_config, configure_logging
from io_utils import create_parameters_download_json
from runner import SimulationRunner


def main(num_sims: int = 1_000, random_seed: int = 42):
    config = load_engine_config()
    configure_logging(config)

    print("Wealth Simulation Demo")
    print("=" * 50)

    # 1. Create simulation parameters
    print("\nSetting up simulation parameters...")
    params = SimulationParams(
        current_age=40,
        retirement_age=65,
        life_expectancy=95,
        taxable_balance=150_000,
        pretax_balance=300_000,
        roth_balance=80_000,
        fixed_income_annual=18_000,
        fixed_income_start_age=67,
        num_sims=num_sims,
        random_seed=random_seed  # For reproducible results
    )
    params = apply_engine_config(params, config)

    print(f"   Starting net worth: ${params.initial_net_worth:,.0f}")
    print(f"   Ages: {params.current_age} -> retire {params.retirement_age} -> {params.life_expectancy}")
    print(f"   Return: {params.expected_return:.1%} real, volatility {params.volatility:.1%}")
    print(f"   Simulations: {params.num_sims:,}")

    # 2. Run Monte Carlo simulation
    print("\nRunning Monte Carlo simulation...")
    simulator = RetirementSimulator(params)
    results = simulator.run_simulation()

    # 3. Summary statistics
    print("\nResults Summary:")
    terminal_stats = calculate_summary_stats(results.terminal_wealth)
    print(f"   Capital preserved: {results.success_rate:.1%} of paths")
    print(f"   Median end wealth (P50): ${results.median_end_wealth:,.0f}")
    print(f"   Safe until age (P20): {results.survival_label}")
    print(f"   Terminal wealth (P10/P50/P90): ${terminal_stats['p10']:,.0f} / "
          f"${terminal_stats['p50']:,.0f} / ${terminal_stats['p90']:,.0f}")

    # 4. Deterministic baseline
    print("\nDeterministic Projection:")
    projection = DeterministicProjector(params).run_projection()
    print(f"   Final wealth at expected return: ${projection.wealth_path[-1]:,.0f}")

    table = create_projection_table(projection)
    retired = table[table['age'] >= params.retirement_age].head(5)
    print(f"   {'Age':<5} {'Withdrawal':>12} {'Cut':>8} {'Total':>14}")
    for _, row in retired.iterrows():
        print(f"   {int(row['age']):<5} ${row['withdrawal']:>11,.0f} ${row['spending_cut']:>7,.0f} ${row['total']:>13,.0f}")

    # 5. Representative path breakdown
    print("\nRepresentative Path (ranked by terminal wealth):")
    for row in results.median_data()[::10]:
        print(f"   Age {row['age']}: taxable ${row['taxable']:,.0f}, pre-tax ${row['pretax']:,.0f}, "
              f"Roth ${row['roth']:,.0f}")

    # 6. Background run
    print("\nBackground run on a worker thread...")
    with SimulationRunner(max_workers=config.get('max_workers', 2)) as sim_runner:
        future = sim_runner.submit(params)
        future.result()
    print(f"   Latest published result: P50 end wealth ${sim_runner.latest_result.median_end_wealth:,.0f}")

    # 7. Parameter export
    json_params = create_parameters_download_json(params)
    print(f"\nParameters exported to JSON ({len(json_params)} characters)")

    print("\nDemo completed successfully!")
    return results


if __name__ == "__main__":
    main()
