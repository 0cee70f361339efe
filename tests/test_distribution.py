"""Unit tests for the probability-table helpers and queries."""

import math

import pytest

from queuelab.distribution import (
    build_table,
    clamp,
    non_negative,
    probability_query,
    saturating_pow,
    truncated_terms,
)
from queuelab.metrics import solve_mm1, solve_mm1n


def test_truncated_terms_stops_below_threshold_after_min_n():
    terms = list(truncated_terms(lambda n: 0.5**n, min_n=3, threshold=0.1))
    # 0.5**4 = 0.0625 is the first term past n=3 under the threshold.
    assert [n for n, _ in terms] == [0, 1, 2, 3]


def test_truncated_terms_keeps_small_terms_until_min_n():
    terms = list(truncated_terms(lambda n: 1e-9, min_n=5.5))
    assert [n for n, _ in terms] == [0, 1, 2, 3, 4, 5]


def test_truncated_terms_respects_max_terms():
    terms = list(truncated_terms(lambda n: 1.0, max_terms=7))
    assert len(terms) == 7


def test_build_table_accumulates_and_closes_at_one():
    table = build_table([(0, 0.5), (1, 0.25), (2, 0.2)])
    assert [row.cumulative_pn for row in table[:-1]] == [0.5, 0.75]
    assert table[-1].cumulative_pn == 1.0
    assert table[-1].pn == 0.2
    assert build_table([]) == ()


def test_build_table_clamps_drift_above_one():
    table = build_table([(0, 0.7), (1, 0.4), (2, 0.0)])
    assert table[1].cumulative_pn == 1.0


def test_numeric_clamps():
    assert clamp(1.0000001) == 1.0
    assert clamp(-1e-12) == 0.0
    assert clamp(0.3) == 0.3
    assert non_negative(-1e-15) == 0.0
    assert non_negative(2.0) == 2.0
    assert math.isinf(saturating_pow(10.0, 400))
    assert saturating_pow(0.5, 2000) == 0.0


def test_query_finite_model():
    res = solve_mm1n(4.0, 6.0, 5)
    assert probability_query(res, "eq", 0) == res.p0
    assert probability_query(res, "lte", 5) == 1.0
    assert probability_query(res, "lte", 9) == 1.0
    assert probability_query(res, "gt", 5) == 0.0
    assert probability_query(res, "gte", 0) == 1.0
    assert probability_query(res, "lt", 0) == 0.0
    assert probability_query(res, "eq", 7) == 0.0
    lte2 = probability_query(res, "lte", 2)
    assert math.isclose(lte2, sum(row.pn for row in res.probabilities[:3]))
    assert math.isclose(probability_query(res, "gt", 2), 1.0 - lte2)
    assert math.isclose(probability_query(res, "gte", 3), 1.0 - lte2)
    assert math.isclose(probability_query(res, "lt", 3), lte2)


def test_query_infinite_model_past_table():
    res = solve_mm1(4.0, 6.0)
    assert probability_query(res, "lte", 1000) == 1.0
    assert probability_query(res, "gt", 1000) == 0.0
    assert math.isclose(probability_query(res, "eq", 1), res.p0 * res.rho)


def test_query_rejects_bad_input():
    res = solve_mm1(1.0, 2.0)
    with pytest.raises(ValueError):
        probability_query(res, "ne", 1)
    with pytest.raises(ValueError):
        probability_query(res, "eq", -1)
