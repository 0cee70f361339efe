"""Command line interface to run the restaurant simulation."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Dict, List

import pandas as pd
from tqdm import tqdm

from queuelab import (
    RestaurantConfig,
    RestaurantSimulator,
    RestaurantState,
    TickDriver,
    get_restaurant_config,
    is_error,
    list_restaurants,
    relative_error,
)
from queuelab.restaurant import MAX_TABLES, MIN_TABLES

COMPARISON_COLUMNS = ["metric", "simulation", "theory", "relative_error_pct", "model"]


def table_count(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid table count '{raw}'.") from exc
    if not MIN_TABLES <= value <= MAX_TABLES:
        raise argparse.ArgumentTypeError(f"Table count must be between {MIN_TABLES} and {MAX_TABLES}.")
    return value


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the restaurant discrete-event simulation.")
    parser.add_argument(
        "--scenario",
        type=str,
        choices=list(list_restaurants()),
        help="Named restaurant preset.",
    )
    parser.add_argument("--tables", type=table_count, default=8, help="Number of tables.")
    parser.add_argument(
        "--queue-limit",
        type=int,
        default=None,
        dest="queue_limit",
        help="Waiting places; unbounded if omitted.",
    )
    parser.add_argument("--lam", type=float, default=15.0, help="Arrivals per hour.")
    parser.add_argument("--mu", type=float, default=2.0, help="Services per hour and table.")
    parser.add_argument("--speed", type=float, default=10.0, help="Simulation speed multiplier.")
    parser.add_argument("--tick", type=float, default=0.1, help="Tick period in real seconds.")
    parser.add_argument("--seed", type=int, default=123, help="Random seed.")
    parser.add_argument(
        "--minutes",
        type=float,
        default=480.0,
        help="Simulated minutes to run (a service day by default).",
    )
    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Pace ticks against the wall clock instead of running as fast as possible.",
    )
    parser.add_argument(
        "--outputs",
        type=Path,
        default=Path("outputs/restaurant_timeline.csv"),
        help="Path where the per-tick statistics will be written.",
    )
    return parser.parse_args()


def resolve_config(args: argparse.Namespace) -> RestaurantConfig:
    if args.scenario:
        return get_restaurant_config(args.scenario, seed=args.seed)
    try:
        return RestaurantConfig(
            table_count=args.tables,
            queue_limit=args.queue_limit,
            arrival_lambda=args.lam,
            service_mu=args.mu,
            simulation_speed=args.speed,
            tick_seconds=args.tick,
            seed=args.seed,
        )
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc


def timeline_record(state: RestaurantState) -> Dict[str, float]:
    stats = state.stats
    return {
        "time": state.current_time,
        "queue": len(state.queue),
        "seated": len(state.active_customers),
        "total_customers": stats.total_customers,
        "customers_served": stats.customers_served,
        "customers_lost": stats.customers_lost,
        "avg_wait_time": stats.avg_wait_time,
        "avg_system_time": stats.avg_system_time,
        "utilization": stats.utilization,
        "active_tables_avg": stats.active_tables_avg,
    }


def theory_comparison(simulator: RestaurantSimulator, state: RestaurantState) -> pd.DataFrame:
    """Simulated figures next to the closed-form model (times in minutes)."""
    outcome = simulator.theory()
    if is_error(outcome):
        return pd.DataFrame(columns=COMPARISON_COLUMNS)
    cfg = simulator.config
    stats = state.stats
    busy = cfg.table_count - outcome.c_barra
    lost_share = stats.customers_lost / stats.total_customers if stats.total_customers else 0.0
    theory_lost = (outcome.lambda_perdida or 0.0) / cfg.arrival_lambda
    rows = [
        ("avg_system_time", stats.avg_system_time, outcome.ws * 60.0),
        ("avg_wait_time", stats.avg_wait_time, outcome.wq * 60.0),
        ("active_tables_avg", stats.active_tables_avg, busy),
        ("utilization", stats.utilization, busy / cfg.table_count),
        ("lost_share", lost_share, theory_lost),
    ]
    return pd.DataFrame(
        [
            {
                "metric": name,
                "simulation": sim,
                "theory": ref,
                "relative_error_pct": relative_error(sim, ref) * 100,
                "model": outcome.model_type.value,
            }
            for name, sim, ref in rows
        ]
    )


def main() -> None:
    args = parse_args()
    config = resolve_config(args)
    simulator = RestaurantSimulator(config)
    driver = TickDriver(simulator, realtime=args.realtime)

    duration = args.minutes * 60.0 / config.simulation_speed
    n_ticks = int(round(duration / config.tick_seconds))
    timeline: List[Dict[str, float]] = []

    with tqdm(total=n_ticks, desc="Simulating", unit="tick") as bar:

        def on_tick(state: RestaurantState) -> None:
            timeline.append(timeline_record(state))
            bar.update(1)

        driver.add_listener(on_tick)
        final = driver.run(duration)
        driver.stop()

    df = pd.DataFrame(timeline)
    args.outputs.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(args.outputs, index=False)

    comparison = theory_comparison(simulator, final)
    summary_path = args.outputs.parent / "restaurant_summary.csv"
    comparison.to_csv(summary_path, index=False)

    stats = final.stats
    print("\nConfiguracion:")
    print(f"  mesas      : {config.table_count:>10d}")
    limit = "sin limite" if config.queue_limit is None else str(config.queue_limit)
    print(f"  cola max   : {limit:>10}")
    print(f"  lambda/h   : {config.arrival_lambda:>10.3f}")
    print(f"  mu/h       : {config.service_mu:>10.3f}")

    print(f"\nSimulacion ({final.current_time:.1f} minutos simulados):")
    print(f"  llegadas   : {stats.total_customers:>10d}")
    print(f"  atendidos  : {stats.customers_served:>10d}")
    print(f"  perdidos   : {stats.customers_lost:>10d}")
    print(f"  en cola    : {len(final.queue):>10d}")
    print(f"  en mesa    : {len(final.active_customers):>10d}")
    print(f"  Wq (min)   : {stats.avg_wait_time:>10.3f}")
    print(f"  Ws (min)   : {stats.avg_system_time:>10.3f}")
    print(f"  mesas prom.: {stats.active_tables_avg:>10.3f}")
    print(f"  utilizacion: {stats.utilization:>10.3f}")

    if comparison.empty:
        print("\nTeoria: el modelo analitico es inestable para esta configuracion.")
    else:
        print(f"\nTeoria {comparison['model'].iloc[0]} (sin limpieza):")
        for _, row in comparison.iterrows():
            print(
                f"  {row['metric']:<18}: sim {row['simulation']:>9.3f}  "
                f"teo {row['theory']:>9.3f}  err {row['relative_error_pct']:>8.2f}%"
            )

    print(f"\nLinea de tiempo guardada en {args.outputs.resolve()}")
    print(f"Resumen guardado en {summary_path.resolve()}")


if __name__ == "__main__":
    main()
