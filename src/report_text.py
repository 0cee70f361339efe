"""Generate a Markdown report from the CSV summaries."""

from __future__ import annotations

from pathlib import Path
from typing import List

import pandas as pd

OUTPUTS = Path("outputs")


def format_value(value: float) -> str:
    if pd.isna(value):
        return "-"
    return f"{value:.4f}"


def queue_section(path: Path) -> List[str]:
    df = pd.read_csv(path)
    row = df.iloc[0]
    lines = [f"## Modelo {row['model']}", ""]
    lines.append(f"Parametros: lambda={format_value(row['lam'])}, mu={format_value(row['mu'])}")
    if pd.notna(row.get("c")):
        lines[-1] += f", c={int(row['c'])}"
    if pd.notna(row.get("n")):
        lines[-1] += f", N={int(row['n'])}"
    lines += ["", "| Metrica | Valor |", "|---|---|"]
    for key in ["rho", "p0", "ls", "lq", "ws", "wq", "c_barra", "lambda_eff", "lambda_perdida"]:
        if key in df.columns and pd.notna(row[key]):
            lines.append(f"| {key} | {format_value(row[key])} |")
    lines.append("")
    lines.append(
        f"Con una utilizacion de {format_value(row['rho'])}, un cliente pasa en promedio "
        f"{format_value(row['ws'])} unidades de tiempo en el sistema, de las cuales "
        f"{format_value(row['wq'])} esperando en cola."
    )
    return lines


def montecarlo_section(path: Path) -> List[str]:
    df = pd.read_csv(path)
    first = df.iloc[0]
    lines = [
        f"## Monte Carlo ({first['distribution']}, lambda={format_value(first['lam'])})",
        "",
        "| Variable | Media | Desv. | Min | Max | Media teorica |",
        "|---|---|---|---|---|---|",
    ]
    for _, row in df.iterrows():
        lines.append(
            f"| {row['variable']} | {format_value(row['mean'])} | {format_value(row['std_dev'])} | "
            f"{format_value(row['min'])} | {format_value(row['max'])} | "
            f"{format_value(row['expected_mean'])} |"
        )
    worst = ((df["mean"] - df["expected_mean"]).abs() / df["expected_mean"]).max()
    lines += [
        "",
        f"Con {int(first['observations'])} observaciones el error relativo maximo de la media "
        f"es {format_value(worst * 100)}%.",
    ]
    return lines


def restaurant_section(path: Path) -> List[str]:
    df = pd.read_csv(path)
    if df.empty:
        return ["## Restaurante", "", "El modelo analitico es inestable para esta configuracion."]
    lines = [
        f"## Restaurante (referencia {df['model'].iloc[0]})",
        "",
        "| Metrica | Simulacion | Teoria | Error % |",
        "|---|---|---|---|",
    ]
    for _, row in df.iterrows():
        lines.append(
            f"| {row['metric']} | {format_value(row['simulation'])} | "
            f"{format_value(row['theory'])} | {format_value(row['relative_error_pct'])} |"
        )
    lines += [
        "",
        "La teoria no incluye el tiempo de limpieza de las mesas, por lo que la simulacion "
        "tiende a mostrar mas ocupacion y esperas mas largas.",
    ]
    return lines


def main() -> None:
    sections = []
    for name, builder in [
        ("queue_summary.csv", queue_section),
        ("montecarlo_summary.csv", montecarlo_section),
        ("restaurant_summary.csv", restaurant_section),
    ]:
        path = OUTPUTS / name
        if path.exists():
            sections.append("\n".join(builder(path)))

    if not sections:
        raise SystemExit(f"No se encontraron resumenes en {OUTPUTS}")

    analysis_dir = Path("reports/analysis")
    analysis_dir.mkdir(parents=True, exist_ok=True)
    report_path = analysis_dir / "report.md"
    report_path.write_text("# Reporte\n\n" + "\n\n".join(sections) + "\n", encoding="utf-8")
    print(f"Reporte guardado en {report_path.resolve()}")


if __name__ == "__main__":
    main()
