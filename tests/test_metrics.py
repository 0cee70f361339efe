"""Unit tests for the single-server closed-form models."""

import math

from queuelab.metrics import is_count, relative_error, solve_mm1, solve_mm1n
from queuelab.metrics_mmc import solve_mmc, solve_mmcn
from queuelab.results import ErrorKind, ModelType, QueueModelResults, is_error


def test_mm1_matches_known_case():
    res = solve_mm1(4.0, 6.0)
    assert isinstance(res, QueueModelResults)
    assert res.model_type is ModelType.MM1
    assert math.isclose(res.rho, 0.6667, abs_tol=1e-3)
    assert math.isclose(res.p0, 0.3333, abs_tol=1e-3)
    assert math.isclose(res.ls, 2.0, abs_tol=1e-3)
    assert math.isclose(res.lq, 1.3333, abs_tol=1e-3)
    assert math.isclose(res.ws, 0.5, abs_tol=1e-3)
    assert math.isclose(res.wq, 0.3333, abs_tol=1e-3)
    assert math.isclose(res.c_barra, 1.0 - res.rho)
    assert res.lambda_eff is None


def test_mm1_little_law_identities():
    for lam, mu in [(1.0, 2.0), (0.5, 3.0), (7.0, 9.5)]:
        res = solve_mm1(lam, mu)
        assert math.isclose(res.ls, res.lq + res.rho, rel_tol=1e-9)
        assert math.isclose(res.ws, res.ls / lam, rel_tol=1e-9)
        assert math.isclose(res.wq, res.lq / lam, rel_tol=1e-9)


def test_mm1_table_sums_to_one_and_closes_at_one():
    res = solve_mm1(4.0, 6.0)
    total = sum(row.pn for row in res.probabilities)
    assert abs(total - 1.0) < 1e-4
    assert res.probabilities[0].pn == res.p0
    assert res.probabilities[-1].cumulative_pn == 1.0
    assert res.probabilities[-1].n > res.ls + 5
    assert all(0.0 <= row.cumulative_pn <= 1.0 for row in res.probabilities)


def test_mm1_table_is_capped_for_heavy_load():
    res = solve_mm1(0.99, 1.0)
    assert len(res.probabilities) == 100
    assert res.probabilities[-1].cumulative_pn == 1.0


def test_mm1_rejects_unstable_and_invalid_rates():
    unstable = solve_mm1(6.0, 6.0)
    assert is_error(unstable)
    assert unstable.kind is ErrorKind.UNSTABLE

    for lam, mu in [(0.0, 1.0), (1.0, 0.0), (-2.0, 3.0)]:
        err = solve_mm1(lam, mu)
        assert is_error(err)
        assert err.kind is ErrorKind.INVALID_INPUT


def test_solvers_are_idempotent():
    assert solve_mm1(4.0, 6.0) == solve_mm1(4.0, 6.0)
    assert solve_mm1n(4.0, 6.0, 5) == solve_mm1n(4.0, 6.0, 5)
    assert solve_mmc(3.0, 2.0, 2) == solve_mmc(3.0, 2.0, 2)
    assert solve_mmcn(4.0, 2.0, 2, 4) == solve_mmcn(4.0, 2.0, 2, 4)


def test_mm1n_known_case_sums_exactly_to_one():
    res = solve_mm1n(4.0, 6.0, 5)
    assert res.model_type is ModelType.MM1N
    assert math.isclose(res.rho, 0.6667, abs_tol=1e-3)
    assert len(res.probabilities) == 6
    assert abs(sum(row.pn for row in res.probabilities) - 1.0) < 1e-9

    r = 4.0 / 6.0
    assert math.isclose(res.p0, (1 - r) / (1 - r**6), rel_tol=1e-12)
    closed_ls = r * (1 - 6 * r**5 + 5 * r**6) / ((1 - r) * (1 - r**6))
    assert math.isclose(res.ls, closed_ls, rel_tol=1e-9)
    assert res.lambda_eff <= 4.0
    assert math.isclose(res.lambda_eff + res.lambda_perdida, 4.0)
    assert math.isclose(res.lambda_perdida, 4.0 * res.probabilities[-1].pn)
    assert math.isclose(res.ws, res.ls / res.lambda_eff)
    assert math.isclose(res.wq, res.lq / res.lambda_eff)
    assert res.c_barra == res.p0


def test_mm1n_unit_rho_is_uniform():
    res = solve_mm1n(3.0, 3.0, 4)
    assert all(math.isclose(row.pn, 0.2) for row in res.probabilities)
    assert math.isclose(res.p0, 0.2)
    assert math.isclose(res.ls, 2.0)
    assert math.isclose(res.lambda_eff, 2.4)
    assert math.isclose(res.lq, 1.2)


def test_mm1n_handles_overloaded_system():
    res = solve_mm1n(10.0, 2.0, 3)
    assert not is_error(res)
    assert abs(sum(row.pn for row in res.probabilities) - 1.0) < 1e-9
    assert res.lq >= 0.0
    assert res.lambda_eff < 10.0


def test_mm1n_heavy_load_with_large_capacity_stays_normalised():
    res = solve_mm1n(10.0, 1.0, 400)
    assert not is_error(res)
    pns = [row.pn for row in res.probabilities]
    assert all(math.isfinite(pn) and pn >= 0.0 for pn in pns)
    assert abs(math.fsum(pns) - 1.0) < 1e-9
    # Nearly always full: P(N) = 1 - 1/rho once r**-N underflows.
    assert math.isclose(res.probabilities[-1].pn, 0.9, rel_tol=1e-12)
    assert math.isclose(res.lambda_eff, 1.0, rel_tol=1e-9)
    assert math.isfinite(res.ls) and math.isfinite(res.ws) and math.isfinite(res.lq)


def test_mm1n_overloaded_matches_direct_formula():
    res = solve_mm1n(3.0, 2.0, 6)
    r = 1.5
    p0 = (1 - r) / (1 - r**7)
    for row in res.probabilities:
        assert math.isclose(row.pn, p0 * r**row.n, rel_tol=1e-12)
    assert math.isclose(res.p0, p0, rel_tol=1e-12)


def test_mm1n_capacity_validation():
    for bad in [0, -3, 2.5, None]:
        err = solve_mm1n(1.0, 2.0, bad)
        assert is_error(err)
        assert err.kind is ErrorKind.INVALID_INPUT
    assert not is_error(solve_mm1n(1.0, 2.0, 5.0))


def test_relative_error_guard_zero_reference():
    assert relative_error(0.0, 0.0) == 0.0
    assert math.isinf(relative_error(1.0, 0.0))
    assert math.isclose(relative_error(1.1, 1.0), 0.1)


def test_results_as_dict_uses_plain_values():
    payload = solve_mm1n(4.0, 6.0, 5).as_dict()
    assert payload["model_type"] == "M/M/1/N"
    assert payload["params"]["n"] == 5
    assert len(payload["probabilities"]) == 6



def test_is_count_rejects_fractional_and_bool():
    assert is_count(3)
    assert is_count(0)
    assert not is_count(0, 1)
    for bad in [2.5, 3.0, True, None, "4"]:
        assert not is_count(bad)
