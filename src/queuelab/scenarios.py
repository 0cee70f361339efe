"""Pre-defined queue models and restaurant layouts."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Optional

from .restaurant import RestaurantConfig
from .results import ModelType, QueueModelParams


@dataclass(frozen=True)
class Scenario:
    name: str
    model: ModelType
    params: QueueModelParams


SCENARIOS: Dict[str, Scenario] = {
    "A": Scenario("A", ModelType.MM1, QueueModelParams(lam=4.0, mu=6.0)),  # ρ ≈ 0.67
    "B": Scenario("B", ModelType.MM1N, QueueModelParams(lam=4.0, mu=6.0, n=5)),
    "C": Scenario("C", ModelType.MMC, QueueModelParams(lam=3.0, mu=2.0, c=2)),  # ρ = 0.75
    "D": Scenario("D", ModelType.MMCN, QueueModelParams(lam=4.0, mu=2.0, c=2, n=4)),  # ρ = 1
}

RESTAURANTS: Dict[str, RestaurantConfig] = {
    "default": RestaurantConfig(
        table_count=8, queue_limit=10, arrival_lambda=15.0, service_mu=2.0, simulation_speed=10.0
    ),
    "rush": RestaurantConfig(
        table_count=12, queue_limit=4, arrival_lambda=40.0, service_mu=2.5, simulation_speed=30.0
    ),
    "tiny": RestaurantConfig(
        table_count=4, queue_limit=0, arrival_lambda=6.0, service_mu=1.5, simulation_speed=60.0
    ),
}


def list_scenarios() -> Iterable[str]:
    """Return available scenario identifiers."""
    return sorted(SCENARIOS.keys())


def get_params(name: str) -> Scenario:
    """Return the queue scenario registered under ``name``."""
    key = name.upper()
    if key not in SCENARIOS:
        raise KeyError(f"Scenario '{name}' is not defined. Available: {list_scenarios()}")
    return SCENARIOS[key]


def list_restaurants() -> Iterable[str]:
    return sorted(RESTAURANTS.keys())


def get_restaurant_config(name: str, seed: Optional[int] = None) -> RestaurantConfig:
    """Return the restaurant preset ``name`` carrying ``seed``."""
    key = name.lower()
    if key not in RESTAURANTS:
        raise KeyError(f"Restaurant '{name}' is not defined. Available: {list_restaurants()}")
    return replace(RESTAURANTS[key], seed=seed)
