"""Monte Carlo generation of Poisson and exponential random variates."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import numpy as np

from .metrics import is_count

# Stand-in for u == 1, which would make ln(1 - u) undefined.
U_CEILING = 0.99999999


class Distribution(str, Enum):
    POISSON = "poisson"
    EXPONENTIAL = "exponential"


@dataclass(frozen=True)
class MonteCarloParams:
    """Generation request: ``n_observations`` rows of ``n_variables`` draws."""

    distribution: Distribution
    lam: float
    n_variables: int
    n_observations: int
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "distribution", Distribution(self.distribution))
        if not self.lam > 0 or not math.isfinite(self.lam):
            raise ValueError("Rate lam must be a finite, strictly positive number.")
        if not is_count(self.n_variables, 1):
            raise ValueError("n_variables must be an integer >= 1.")
        if not is_count(self.n_observations, 1):
            raise ValueError("n_observations must be an integer >= 1.")


@dataclass(frozen=True)
class ObservationRow:
    """One table row: the uniform draw shown for each variable and its value."""

    observation_index: int
    random_values: Tuple[float, ...]
    simulated_values: Tuple[float, ...]


@dataclass(frozen=True)
class MonteCarloStats:
    """Per-variable aggregates, indexed like the row tuples."""

    mean: Tuple[float, ...]
    std_dev: Tuple[float, ...]
    min: Tuple[float, ...]
    max: Tuple[float, ...]


@dataclass(frozen=True)
class MonteCarloResults:
    params: MonteCarloParams
    rows: Tuple[ObservationRow, ...]
    statistics: MonteCarloStats

    def as_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["params"]["distribution"] = self.params.distribution.value
        return payload


def exponential_variate(lam: float, rng: np.random.Generator) -> Tuple[float, float]:
    """Inverse transform X = -ln(1 - U) / λ; returns ``(x, u)``."""
    u = float(rng.random())
    if u >= 1.0:
        u = U_CEILING
    return -math.log(1.0 - u) / lam, u


def poisson_variate(lam: float, rng: np.random.Generator) -> Tuple[int, float]:
    """
    Knuth's product method.

    Several uniforms may be consumed; only the first one is reported, which
    is what the observation table displays.
    """
    limit = math.exp(-lam)
    k = 0
    p = 1.0
    first_u = None
    while True:
        k += 1
        u = float(rng.random())
        if first_u is None:
            first_u = u
        p *= u
        if p <= limit:
            break
    return k - 1, first_u


def run_monte_carlo(
    params: MonteCarloParams, rng: Optional[np.random.Generator] = None
) -> MonteCarloResults:
    """Generate every observation row, then the per-variable statistics."""
    if rng is None:
        rng = np.random.default_rng(seed=params.seed)
    draw = (
        exponential_variate
        if params.distribution is Distribution.EXPONENTIAL
        else poisson_variate
    )

    values = np.empty((params.n_observations, params.n_variables), dtype=float)
    rows = []
    for i in range(params.n_observations):
        randoms = []
        simulated = []
        for j in range(params.n_variables):
            value, u = draw(params.lam, rng)
            randoms.append(u)
            simulated.append(value)
            values[i, j] = value
        rows.append(
            ObservationRow(
                observation_index=i + 1,
                random_values=tuple(randoms),
                simulated_values=tuple(simulated),
            )
        )

    means = values.mean(axis=0)
    variances = np.maximum((values * values).mean(axis=0) - means * means, 0.0)
    statistics = MonteCarloStats(
        mean=tuple(float(x) for x in means),
        std_dev=tuple(float(x) for x in np.sqrt(variances)),
        min=tuple(float(x) for x in values.min(axis=0)),
        max=tuple(float(x) for x in values.max(axis=0)),
    )
    return MonteCarloResults(params=params, rows=tuple(rows), statistics=statistics)
