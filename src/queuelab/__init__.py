"""Queueing-theory solvers, Monte Carlo variates and a restaurant simulation."""

from .distribution import build_table, clamp, probability_query, truncated_terms
from .driver import TickDriver
from .metrics import relative_error, solve_mm1, solve_mm1n
from .metrics_mmc import factorial, solve_mmc, solve_mmcn
from .montecarlo import (
    Distribution,
    MonteCarloParams,
    MonteCarloResults,
    run_monte_carlo,
)
from .restaurant import (
    CustomerStatus,
    RestaurantConfig,
    RestaurantSimulator,
    RestaurantState,
    TableStatus,
)
from .results import (
    CalculationError,
    ErrorKind,
    ModelType,
    ProbabilityRow,
    QueueModelParams,
    QueueModelResults,
    is_error,
)
from .scenarios import (
    Scenario,
    get_params,
    get_restaurant_config,
    list_restaurants,
    list_scenarios,
)
from .solver import solve

__all__ = [
    "CalculationError",
    "CustomerStatus",
    "Distribution",
    "ErrorKind",
    "ModelType",
    "MonteCarloParams",
    "MonteCarloResults",
    "ProbabilityRow",
    "QueueModelParams",
    "QueueModelResults",
    "RestaurantConfig",
    "RestaurantSimulator",
    "RestaurantState",
    "Scenario",
    "TableStatus",
    "TickDriver",
    "build_table",
    "clamp",
    "factorial",
    "get_params",
    "get_restaurant_config",
    "is_error",
    "list_restaurants",
    "list_scenarios",
    "probability_query",
    "relative_error",
    "run_monte_carlo",
    "solve",
    "solve_mm1",
    "solve_mm1n",
    "solve_mmc",
    "solve_mmcn",
    "truncated_terms",
]
