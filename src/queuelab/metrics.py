"""Closed-form performance metrics for single-server Markovian queues."""

from __future__ import annotations

import math
import numbers
from typing import Optional, Tuple

from .distribution import build_table, non_negative, saturating_pow, truncated_terms
from .results import (
    ModelType,
    ProbabilityRow,
    QueueModelParams,
    QueueModelResults,
    SolveOutcome,
    invalid,
    unstable,
)

RATES_MESSAGE = "Arrival (lambda) and service (mu) rates must be strictly positive."
RHO_TOLERANCE = 1e-12


def is_positive(value: object) -> bool:
    """True for a finite real number strictly greater than zero."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value) and value > 0


def as_count(value: object) -> Optional[int]:
    """Return ``value`` as an int when it is integral, otherwise None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real) and math.isfinite(value) and float(value).is_integer():
        return int(value)
    return None


def is_count(value: object, minimum: int = 0) -> bool:
    """True for a genuine integer (not a bool) of at least ``minimum``."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        return False
    return value >= minimum


def is_unit(r: float) -> bool:
    """Whether a traffic intensity is exactly 1 up to rounding."""
    return math.isclose(r, 1.0, rel_tol=RHO_TOLERANCE)


def finite_capacity_metrics(
    lam: float, mu: float, table: Tuple[ProbabilityRow, ...], ls: float
) -> Tuple[float, float, float, float, float]:
    """
    Blocking-aware metrics shared by M/M/1/N and M/M/c/N.

    Returns ``(lambda_eff, lambda_perdida, lq, ws, wq)``; times are 0 when no
    arrival is ever admitted.
    """
    p_full = table[-1].pn
    lambda_eff = lam * (1.0 - p_full)
    lambda_perdida = lam - lambda_eff
    lq = non_negative(ls - lambda_eff / mu)
    if lambda_eff == 0:
        return lambda_eff, lambda_perdida, lq, 0.0, 0.0
    return lambda_eff, lambda_perdida, lq, ls / lambda_eff, lq / lambda_eff


def solve_mm1(lam: float, mu: float) -> SolveOutcome:
    """
    Steady-state M/M/1 metrics.

    Returns a ``CalculationError`` for non-positive rates or when λ ≥ μ.
    """
    if not (is_positive(lam) and is_positive(mu)):
        return invalid(RATES_MESSAGE)
    if lam >= mu:
        return unstable(
            "Unstable system (lambda >= mu): the arrival rate must be lower than "
            "the service rate for an infinite queue."
        )

    r = lam / mu
    p0 = 1.0 - r
    ls = r / (1.0 - r)
    lq = (r * r) / (1.0 - r)
    table = build_table(truncated_terms(lambda n: p0 * saturating_pow(r, n), min_n=ls + 5))

    return QueueModelResults(
        rho=r,
        p0=p0,
        ls=ls,
        lq=lq,
        ws=ls / lam,
        wq=lq / lam,
        c_barra=1.0 - r,
        probabilities=table,
        model_type=ModelType.MM1,
        params=QueueModelParams(lam=lam, mu=mu),
    )


def solve_mm1n(lam: float, mu: float, n: int) -> SolveOutcome:
    """
    Steady-state M/M/1/N metrics (capacity ``n`` counting the one in service).

    Always stable; ρ = 1 yields the uniform distribution 1/(N+1).
    """
    if not (is_positive(lam) and is_positive(mu)):
        return invalid(RATES_MESSAGE)
    capacity = as_count(n)
    if capacity is None or capacity < 1:
        return invalid("System capacity N must be an integer >= 1.")

    r = lam / mu
    if is_unit(r):
        p0 = 1.0 / (capacity + 1)
        table = build_table((k, p0) for k in range(capacity + 1))
        ls = capacity / 2.0
    elif r > 1.0:
        # Anchored on P(N): s**(N-k) only ever underflows, never overflows.
        s = 1.0 / r
        p_full = (1.0 - s) / (1.0 - s ** (capacity + 1))
        table = build_table((k, p_full * s ** (capacity - k)) for k in range(capacity + 1))
        p0 = table[0].pn
        ls = math.fsum(row.n * row.pn for row in table)
    else:
        p0 = (1.0 - r) / (1.0 - r ** (capacity + 1))
        table = build_table((k, p0 * r**k) for k in range(capacity + 1))
        ls = math.fsum(row.n * row.pn for row in table)

    lambda_eff, lambda_perdida, lq, ws, wq = finite_capacity_metrics(lam, mu, table, ls)

    return QueueModelResults(
        rho=r,
        p0=p0,
        ls=ls,
        lq=lq,
        ws=ws,
        wq=wq,
        c_barra=p0,
        lambda_eff=lambda_eff,
        lambda_perdida=lambda_perdida,
        probabilities=table,
        model_type=ModelType.MM1N,
        params=QueueModelParams(lam=lam, mu=mu, n=capacity),
    )


def relative_error(sim_value: float, reference_value: float) -> float:
    """Return |sim-ref| / ref guarding division by zero."""
    if reference_value == 0:
        return 0.0 if sim_value == 0 else float("inf")
    return abs(sim_value - reference_value) / abs(reference_value)
