"""Command line interface to solve the closed-form queueing models."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Tuple

import pandas as pd

from queuelab import (
    ModelType,
    QueueModelParams,
    QueueModelResults,
    get_params,
    is_error,
    list_scenarios,
    probability_query,
    solve,
)
from queuelab.distribution import OPERATORS

MODEL_CHOICES = {
    "mm1": ModelType.MM1,
    "mm1n": ModelType.MM1N,
    "mmc": ModelType.MMC,
    "mmcn": ModelType.MMCN,
}
SYMBOLS = {"eq": "=", "lte": "<=", "lt": "<", "gte": ">=", "gt": ">"}


def parse_query(text: str) -> Tuple[str, int]:
    """Parse ``op:k`` (e.g. ``lte:3``) into an operator and k."""
    op, _, raw_k = text.partition(":")
    op = op.strip().lower()
    if op not in OPERATORS:
        raise argparse.ArgumentTypeError(f"Invalid operator '{op}'. Use one of {OPERATORS}.")
    try:
        k = int(raw_k)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid k value '{raw_k}'.") from exc
    if k < 0:
        raise argparse.ArgumentTypeError("k must be >= 0.")
    return op, k


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Solve M/M/1, M/M/1/N, M/M/c and M/M/c/N queues in closed form."
    )
    parser.add_argument(
        "--model",
        type=str,
        choices=sorted(MODEL_CHOICES),
        help="Queue variant. Inferred from --c/--n when omitted.",
    )
    parser.add_argument("--lam", type=float, help="Arrival rate lambda (required unless --scenario).")
    parser.add_argument("--mu", type=float, help="Service rate mu (required unless --scenario).")
    parser.add_argument("--c", type=int, help="Number of parallel servers.")
    parser.add_argument("--n", type=int, help="System capacity N (finite models).")
    parser.add_argument(
        "--scenario",
        type=str,
        choices=list(list_scenarios()),
        help="Named scenario shortcut (A, B, C, D).",
    )
    parser.add_argument(
        "--query",
        type=parse_query,
        action="append",
        default=[],
        help='Probability query "op:k" with op in eq, lte, lt, gte, gt. Repeatable.',
    )
    parser.add_argument(
        "--outputs",
        type=Path,
        default=Path("outputs/probabilities.csv"),
        help="Path where the probability table will be written.",
    )
    return parser.parse_args()


def resolve_params(args: argparse.Namespace) -> Tuple[QueueModelParams, ModelType | None]:
    """Return the parameters and (optional) explicit model to solve."""
    if args.scenario:
        scenario = get_params(args.scenario)
        return scenario.params, scenario.model
    if args.lam is None or args.mu is None:
        raise SystemExit("Either --scenario or both --lam and --mu must be provided.")
    model = MODEL_CHOICES[args.model] if args.model else None
    return QueueModelParams(lam=args.lam, mu=args.mu, c=args.c, n=args.n), model


def probability_frame(results: QueueModelResults) -> pd.DataFrame:
    return pd.DataFrame(
        [{"n": row.n, "pn": row.pn, "cumulative_pn": row.cumulative_pn} for row in results.probabilities]
    )


def summary_frame(results: QueueModelResults) -> pd.DataFrame:
    row = {"model": results.model_type.value, "lam": results.params.lam, "mu": results.params.mu}
    row["c"] = results.params.c
    row["n"] = results.params.n
    row.update(results.metrics())
    return pd.DataFrame([row])


def format_queries(results: QueueModelResults, queries: List[Tuple[str, int]]) -> List[str]:
    lines = []
    for op, k in queries:
        value = probability_query(results, op, k)
        lines.append(f"  P(n {SYMBOLS[op]} {k}) = {value * 100:.4f}%")
    return lines


def main() -> None:
    args = parse_args()
    params, model = resolve_params(args)

    outcome = solve(params, model)
    if is_error(outcome):
        raise SystemExit(f"Error ({outcome.kind.value}): {outcome.message}")

    table = probability_frame(outcome)
    args.outputs.parent.mkdir(parents=True, exist_ok=True)
    table.to_csv(args.outputs, index=False)
    summary_path = args.outputs.parent / "queue_summary.csv"
    summary_frame(outcome).to_csv(summary_path, index=False)

    print(f"\nModelo {outcome.model_type.value}:")
    for key, value in outcome.metrics().items():
        if value is None:
            continue
        print(f"  {key:<14}: {value:>12.6f}")

    print("\nDistribucion de probabilidad:")
    print(table.head(15).to_string(index=False, float_format=lambda x: f"{x:.6f}"))
    if len(table) > 15:
        print(f"  ... {len(table) - 15} filas mas")

    if args.query:
        print("\nConsultas:")
        for line in format_queries(outcome, args.query):
            print(line)

    print(f"\nTabla guardada en {args.outputs.resolve()}")
    print(f"Resumen guardado en {summary_path.resolve()}")


if __name__ == "__main__":
    main()
