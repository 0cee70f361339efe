"""Closed-form metrics for multi-server queues (Erlang C and M/M/c/N)."""

from __future__ import annotations

import math
from typing import Callable, List

from .distribution import build_table, saturating_pow, truncated_terms
from .metrics import (
    RATES_MESSAGE,
    as_count,
    finite_capacity_metrics,
    is_positive,
)
from .results import ModelType, QueueModelParams, QueueModelResults, SolveOutcome, invalid, unstable


def factorial(n: float) -> float:
    """n! as a float; nan for negative or fractional n, inf once it overflows."""
    count = as_count(n)
    if count is None or count < 0:
        return math.nan
    try:
        return float(math.factorial(count))
    except OverflowError:
        return math.inf


def erlang_terms(a: float, c: int) -> List[float]:
    """
    ``[a**k / k! for k in 0..c]`` built as a running product.

    Saturates to inf for absurd loads instead of raising ``OverflowError``.
    """
    terms = [1.0]
    for k in range(1, c + 1):
        terms.append(terms[-1] * a / k)
    return terms


def _pn_function(p0: float, terms: List[float], c: int, r: float) -> Callable[[int], float]:
    def pn_at(k: int) -> float:
        if k < c:
            return p0 * terms[k]
        return p0 * terms[c] * saturating_pow(r, k - c)

    return pn_at


def solve_mmc(lam: float, mu: float, c: int) -> SolveOutcome:
    """
    Steady-state M/M/c metrics via the Erlang C formulas.

    ``c`` must be an integer >= 2 (single servers go through ``solve_mm1``)
    and λ < cμ.
    """
    if not (is_positive(lam) and is_positive(mu)):
        return invalid(RATES_MESSAGE)
    servers = as_count(c)
    if servers is None or servers < 2:
        return invalid(
            "M/M/c needs an integer number of servers c >= 2; use the M/M/1 model "
            "for a single server."
        )
    if lam >= servers * mu:
        return unstable("Unstable system (lambda >= c*mu): total service capacity is exceeded.")

    a = lam / mu
    r = a / servers
    terms = erlang_terms(a, servers)
    p0 = 1.0 / (math.fsum(terms[:servers]) + terms[servers] / (1.0 - r))
    lq = p0 * terms[servers] * r / ((1.0 - r) ** 2)
    ls = lq + a
    wq = lq / lam
    pn_at = _pn_function(p0, terms, servers, r)
    c_barra = math.fsum((servers - k) * pn_at(k) for k in range(servers))

    return QueueModelResults(
        rho=r,
        p0=p0,
        ls=ls,
        lq=lq,
        ws=wq + 1.0 / mu,
        wq=wq,
        c_barra=c_barra,
        probabilities=build_table(truncated_terms(pn_at, min_n=ls + 5)),
        model_type=ModelType.MMC,
        params=QueueModelParams(lam=lam, mu=mu, c=servers),
    )


def _log_weights(a: float, servers: int, capacity: int) -> List[float]:
    """log of the unnormalised M/M/c/N weights for n = 0..N."""
    log_a = math.log(a)
    log_r = log_a - math.log(servers)
    head = [k * log_a - math.lgamma(k + 1) for k in range(servers + 1)]
    tail = [head[servers] + (k - servers) * log_r for k in range(servers + 1, capacity + 1)]
    return head + tail


def solve_mmcn(lam: float, mu: float, c: int, n: int) -> SolveOutcome:
    """
    Steady-state M/M/c/N metrics over the exact range n = 0..N.

    Requires integers c >= 1 and N >= c; no stability condition applies.
    Weights are normalised against the largest one, so heavy loads and large
    capacities stay finite.
    """
    if not (is_positive(lam) and is_positive(mu)):
        return invalid(RATES_MESSAGE)
    servers = as_count(c)
    if servers is None or servers < 1:
        return invalid("The number of servers c must be an integer >= 1.")
    capacity = as_count(n)
    if capacity is None or capacity < servers:
        return invalid("System capacity N must be an integer >= c.")

    a = lam / mu
    r = a / servers
    logs = _log_weights(a, servers, capacity)
    peak = max(logs)
    weights = [math.exp(w - peak) for w in logs]
    total = math.fsum(weights)
    table = build_table((k, w / total) for k, w in enumerate(weights))
    p0 = table[0].pn

    ls = math.fsum(row.n * row.pn for row in table)
    c_barra = math.fsum((servers - row.n) * row.pn for row in table[:servers])
    lambda_eff, lambda_perdida, lq, ws, wq = finite_capacity_metrics(lam, mu, table, ls)

    return QueueModelResults(
        rho=r,
        p0=p0,
        ls=ls,
        lq=lq,
        ws=ws,
        wq=wq,
        c_barra=c_barra,
        lambda_eff=lambda_eff,
        lambda_perdida=lambda_perdida,
        probabilities=table,
        model_type=ModelType.MMCN,
        params=QueueModelParams(lam=lam, mu=mu, c=servers, n=capacity),
    )
