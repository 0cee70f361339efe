"""Utility to generate figures from the solver, Monte Carlo and restaurant outputs."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List

import matplotlib.pyplot as plt
import pandas as pd


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate plots from the CSV outputs.")
    parser.add_argument(
        "--probabilities",
        type=Path,
        default=Path("outputs/probabilities.csv"),
        help="CSV produced by src.run_sim.",
    )
    parser.add_argument(
        "--montecarlo",
        type=Path,
        default=Path("outputs/montecarlo.csv"),
        help="CSV produced by src.run_montecarlo.",
    )
    parser.add_argument(
        "--timeline",
        type=Path,
        default=Path("outputs/restaurant_timeline.csv"),
        help="CSV produced by src.run_restaurant.",
    )
    parser.add_argument(
        "--reports-dir",
        type=Path,
        default=Path("reports"),
        help="Directory where PNG files will be saved.",
    )
    return parser.parse_args()


def load_csv(path: Path) -> pd.DataFrame:
    if not path.exists():
        raise FileNotFoundError(f"Results file not found: {path}")
    df = pd.read_csv(path)
    if df.empty:
        raise ValueError(f"Results file {path} is empty.")
    return df


def plot_probabilities(df: pd.DataFrame, out: Path) -> None:
    fig, ax = plt.subplots(figsize=(8, 4))
    ax.bar(df["n"], df["pn"], color="#4c72b0", label="P(n)")
    ax.set_xlabel("n")
    ax.set_ylabel("P(n)")
    ax2 = ax.twinx()
    ax2.plot(df["n"], df["cumulative_pn"], color="black", marker=".", label="P(<= n)")
    ax2.set_ylim(0, 1.05)
    ax2.set_ylabel("Acumulada")
    lines, labels = ax.get_legend_handles_labels()
    lines2, labels2 = ax2.get_legend_handles_labels()
    ax.legend(lines + lines2, labels + labels2, loc="center right")
    ax.set_title("Distribucion de probabilidad Pn")
    fig.tight_layout()
    fig.savefig(out, dpi=150)
    plt.close(fig)


def plot_montecarlo(df: pd.DataFrame, reports_dir: Path) -> List[Path]:
    paths = []
    for column in [c for c in df.columns if c.startswith("x_")]:
        series = df[column]
        fig, ax = plt.subplots(figsize=(6, 4))
        bins = min(30, max(5, series.nunique()))
        ax.hist(series, bins=bins, color="#4c72b0", alpha=0.85, edgecolor="white")
        ax.axvline(series.mean(), color="black", linestyle="--", label=f"media {series.mean():.3f}")
        ax.set_title(f"Histograma {column}")
        ax.set_xlabel(column)
        ax.set_ylabel("Frecuencia")
        ax.legend()
        fig.tight_layout()
        out = reports_dir / f"hist_{column}.png"
        fig.savefig(out, dpi=150)
        plt.close(fig)
        paths.append(out)
    return paths


def plot_timeline(df: pd.DataFrame, out: Path) -> None:
    fig, axes = plt.subplots(2, 1, figsize=(9, 6), sharex=True)
    axes[0].plot(df["time"], df["queue"], label="En cola")
    axes[0].plot(df["time"], df["seated"], label="En mesa")
    axes[0].set_ylabel("Clientes")
    axes[0].legend()
    axes[1].plot(df["time"], df["utilization"], color="black", label="Utilizacion")
    axes[1].set_ylim(0, 1.05)
    axes[1].set_xlabel("Tiempo simulado (min)")
    axes[1].set_ylabel("Utilizacion")
    fig.suptitle("Evolucion del restaurante")
    fig.tight_layout()
    fig.savefig(out, dpi=150)
    plt.close(fig)


def main() -> None:
    args = parse_args()
    args.reports_dir.mkdir(parents=True, exist_ok=True)

    produced = []
    if args.probabilities.exists():
        out = args.reports_dir / "probabilidades.png"
        plot_probabilities(load_csv(args.probabilities), out)
        produced.append(out)
    if args.montecarlo.exists():
        produced.extend(plot_montecarlo(load_csv(args.montecarlo), args.reports_dir))
    if args.timeline.exists():
        out = args.reports_dir / "restaurante.png"
        plot_timeline(load_csv(args.timeline), out)
        produced.append(out)

    if not produced:
        raise SystemExit("No se encontraron resultados; ejecute primero las simulaciones.")
    print(f"Figuras guardadas en {args.reports_dir.resolve()}")


if __name__ == "__main__":
    main()
