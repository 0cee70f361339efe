"""Probability-table helpers shared by every queue variant."""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Callable, Iterable, Iterator, Tuple

from .results import ProbabilityRow, QueueModelResults

PN_THRESHOLD = 1e-6
MAX_TERMS = 100
OPERATORS = ("eq", "lte", "lt", "gte", "gt")


def clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    """Pin ``value`` inside ``[lower, upper]`` to absorb rounding drift."""
    return min(max(value, lower), upper)


def non_negative(value: float) -> float:
    return value if value > 0.0 else 0.0


def saturating_pow(base: float, exponent: float) -> float:
    """``base ** exponent`` that returns inf instead of raising on overflow."""
    try:
        return base**exponent
    except OverflowError:
        return math.inf


def truncated_terms(
    pn_at: Callable[[int], float],
    min_n: float = 0.0,
    threshold: float = PN_THRESHOLD,
    max_terms: int = MAX_TERMS,
) -> Iterator[Tuple[int, float]]:
    """
    Lazily yield ``(n, P(n))`` for an infinite-capacity model.

    Stops at the first term that is both past ``min_n`` and below
    ``threshold``; never yields more than ``max_terms`` rows.
    """
    for n in range(max_terms):
        pn = pn_at(n)
        if n > min_n and pn < threshold:
            return
        yield n, pn


def build_table(terms: Iterable[Tuple[int, float]]) -> Tuple[ProbabilityRow, ...]:
    """Accumulate P(<= n) and close the table at exactly 1.0."""
    rows = []
    running = 0.0
    for n, pn in terms:
        running += pn
        rows.append(ProbabilityRow(n=n, pn=pn, cumulative_pn=clamp(running)))
    if rows:
        rows[-1] = replace(rows[-1], cumulative_pn=1.0)
    return tuple(rows)


def probability_query(results: QueueModelResults, operator: str, k: int) -> float:
    """
    Evaluate P(n <op> k) against a solved probability table.

    ``operator`` is one of ``eq``, ``lte``, ``lt``, ``gte``, ``gt``.
    Finite models treat every ``k`` at or past N as fully cumulative;
    infinite models reuse the last cumulative value past the truncated table.
    """
    if operator not in OPERATORS:
        raise ValueError(f"Unknown operator '{operator}'. Use one of {OPERATORS}.")
    if k < 0:
        raise ValueError("k must be a non-negative integer.")

    rows = results.probabilities
    if not rows:
        return 0.0
    by_n = {row.n: row for row in rows}
    last = rows[-1]

    def pn(m: int) -> float:
        row = by_n.get(m)
        return row.pn if row is not None else 0.0

    def cumulative(m: int) -> float:
        if m < 0:
            return 0.0
        if results.model_type.is_finite and m >= last.n:
            return 1.0
        row = by_n.get(m)
        return row.cumulative_pn if row is not None else last.cumulative_pn

    if operator == "eq":
        value = pn(k)
    elif operator == "lte":
        value = cumulative(k)
    elif operator == "lt":
        value = cumulative(k - 1)
    elif operator == "gte":
        value = 1.0 - cumulative(k - 1)
    else:
        value = 1.0 - cumulative(k)
    return non_negative(value)
