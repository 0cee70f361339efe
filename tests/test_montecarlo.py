"""Tests for the Monte Carlo variate generator."""

import math

import numpy as np
import pytest

from queuelab.montecarlo import (
    U_CEILING,
    Distribution,
    MonteCarloParams,
    exponential_variate,
    poisson_variate,
    run_monte_carlo,
)


class SequenceRng:
    """Feeds a fixed list of uniforms in place of a numpy generator."""

    def __init__(self, values):
        self._values = iter(values)

    def random(self):
        return next(self._values)


def test_exponential_mean_converges_with_fixed_seed():
    params = MonteCarloParams(Distribution.EXPONENTIAL, lam=5.0, n_variables=1, n_observations=100_000, seed=42)
    res = run_monte_carlo(params)
    assert abs(res.statistics.mean[0] - 0.2) < 0.01
    assert abs(res.statistics.std_dev[0] - 0.2) < 0.01
    assert res.statistics.min[0] >= 0.0


def test_poisson_mean_converges_with_fixed_seed():
    params = MonteCarloParams("poisson", lam=3.0, n_variables=2, n_observations=20_000, seed=7)
    res = run_monte_carlo(params)
    assert params.distribution is Distribution.POISSON
    for j in range(2):
        assert abs(res.statistics.mean[j] - 3.0) < 0.1
        assert abs(res.statistics.std_dev[j] - math.sqrt(3.0)) < 0.1
        assert float(res.statistics.min[j]).is_integer()


def test_rows_shape_and_indexing():
    params = MonteCarloParams(Distribution.EXPONENTIAL, lam=1.5, n_variables=3, n_observations=25, seed=1)
    res = run_monte_carlo(params)
    assert len(res.rows) == 25
    assert [row.observation_index for row in res.rows] == list(range(1, 26))
    for row in res.rows:
        assert len(row.random_values) == 3
        assert len(row.simulated_values) == 3
        assert all(0.0 <= u < 1.0 for u in row.random_values)
        for u, x in zip(row.random_values, row.simulated_values):
            assert math.isclose(x, -math.log(1.0 - u) / 1.5)


def test_statistics_match_columns():
    params = MonteCarloParams(Distribution.POISSON, lam=2.0, n_variables=2, n_observations=500, seed=3)
    res = run_monte_carlo(params)
    for j in range(2):
        column = np.array([row.simulated_values[j] for row in res.rows], dtype=float)
        assert math.isclose(res.statistics.mean[j], column.mean(), rel_tol=1e-9)
        assert math.isclose(res.statistics.std_dev[j], column.std(), rel_tol=1e-6)
        assert res.statistics.min[j] == column.min()
        assert res.statistics.max[j] == column.max()


def test_same_seed_reproduces_rows():
    params = MonteCarloParams(Distribution.EXPONENTIAL, lam=2.0, n_variables=2, n_observations=50, seed=99)
    assert run_monte_carlo(params).rows == run_monte_carlo(params).rows


def test_injected_generator_takes_precedence():
    params = MonteCarloParams(Distribution.EXPONENTIAL, lam=2.0, n_variables=1, n_observations=10, seed=1)
    a = run_monte_carlo(params, rng=np.random.default_rng(5))
    b = run_monte_carlo(params, rng=np.random.default_rng(5))
    assert a.rows == b.rows
    assert a.rows != run_monte_carlo(params).rows


def test_exponential_guards_unit_draw():
    value, u = exponential_variate(2.0, SequenceRng([1.0]))
    assert u == U_CEILING
    assert math.isfinite(value)
    assert math.isclose(value, -math.log(1.0 - U_CEILING) / 2.0)


def test_poisson_reports_first_uniform():
    # e^-1 ~ 0.368: 0.5 keeps going, 0.5 * 0.5 = 0.25 stops after two draws.
    value, u = poisson_variate(1.0, SequenceRng([0.5, 0.5, 0.9]))
    assert value == 1
    assert u == 0.5

    value, u = poisson_variate(1.0, SequenceRng([0.2]))
    assert value == 0
    assert u == 0.2


@pytest.mark.parametrize(
    "kwargs",
    [
        {"lam": 0.0, "n_variables": 1, "n_observations": 1},
        {"lam": -1.0, "n_variables": 1, "n_observations": 1},
        {"lam": 1.0, "n_variables": 0, "n_observations": 1},
        {"lam": 1.0, "n_variables": 1, "n_observations": 0},
        {"lam": 1.0, "n_variables": 2.5, "n_observations": 1},
        {"lam": 1.0, "n_variables": 1, "n_observations": 10.0},
        {"lam": 1.0, "n_variables": True, "n_observations": 1},
    ],
)
def test_params_validation(kwargs):
    with pytest.raises(ValueError):
        MonteCarloParams(Distribution.EXPONENTIAL, **kwargs)


def test_as_dict_serializes_distribution():
    params = MonteCarloParams(Distribution.POISSON, lam=1.0, n_variables=1, n_observations=3, seed=0)
    payload = run_monte_carlo(params).as_dict()
    assert payload["params"]["distribution"] == "poisson"
    assert len(payload["rows"]) == 3
