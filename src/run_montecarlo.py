"""Command line interface for the Monte Carlo variate generator."""

from __future__ import annotations

import argparse
from pathlib import Path

import pandas as pd

from queuelab import Distribution, MonteCarloParams, MonteCarloResults, run_monte_carlo


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate Poisson or exponential variates by Monte Carlo."
    )
    parser.add_argument(
        "--distribution",
        type=str,
        choices=[d.value for d in Distribution],
        default=Distribution.EXPONENTIAL.value,
        help="Distribution to sample from.",
    )
    parser.add_argument("--lam", type=float, required=True, help="Rate lambda of the distribution.")
    parser.add_argument("--variables", type=int, default=1, help="Number of variables (columns).")
    parser.add_argument("--observations", type=int, default=100, help="Number of observations (rows).")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (unseeded if omitted).")
    parser.add_argument(
        "--outputs",
        type=Path,
        default=Path("outputs/montecarlo.csv"),
        help="Path where the observation table will be written.",
    )
    return parser.parse_args()


def observations_frame(results: MonteCarloResults) -> pd.DataFrame:
    records = []
    for row in results.rows:
        record = {"observation": row.observation_index}
        for j, (u, x) in enumerate(zip(row.random_values, row.simulated_values), start=1):
            record[f"u_{j}"] = u
            record[f"x_{j}"] = x
        records.append(record)
    return pd.DataFrame(records)


def statistics_frame(results: MonteCarloResults) -> pd.DataFrame:
    stats = results.statistics
    expected_mean = (
        1.0 / results.params.lam
        if results.params.distribution is Distribution.EXPONENTIAL
        else results.params.lam
    )
    return pd.DataFrame(
        {
            "variable": [f"x_{j}" for j in range(1, len(stats.mean) + 1)],
            "mean": stats.mean,
            "std_dev": stats.std_dev,
            "min": stats.min,
            "max": stats.max,
            "expected_mean": expected_mean,
            "distribution": results.params.distribution.value,
            "lam": results.params.lam,
            "observations": results.params.n_observations,
        }
    )


def main() -> None:
    args = parse_args()
    try:
        params = MonteCarloParams(
            distribution=Distribution(args.distribution),
            lam=args.lam,
            n_variables=args.variables,
            n_observations=args.observations,
            seed=args.seed,
        )
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    results = run_monte_carlo(params)
    data = observations_frame(results)
    stats = statistics_frame(results)

    args.outputs.parent.mkdir(parents=True, exist_ok=True)
    data.to_csv(args.outputs, index=False)
    stats_path = args.outputs.parent / "montecarlo_summary.csv"
    stats.to_csv(stats_path, index=False)

    print(f"\nMonte Carlo {params.distribution.value} (lambda={params.lam}):")
    print(data.head(10).to_string(index=False, float_format=lambda x: f"{x:.4f}"))
    if len(data) > 10:
        print(f"  ... {len(data) - 10} observaciones mas")

    print("\nEstadisticas por variable:")
    print(
        stats[["variable", "mean", "std_dev", "min", "max", "expected_mean"]].to_string(
            index=False, float_format=lambda x: f"{x:.4f}"
        )
    )

    print(f"\nObservaciones guardadas en {args.outputs.resolve()}")
    print(f"Resumen guardado en {stats_path.resolve()}")


if __name__ == "__main__":
    main()
