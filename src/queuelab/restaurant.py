"""Stepped discrete-event simulation of a restaurant with table cleaning."""

from __future__ import annotations

import copy
import math
from collections import deque
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Deque, Dict, List, Optional

import numpy as np

from .metrics import is_count, solve_mm1, solve_mm1n
from .metrics_mmc import solve_mmc, solve_mmcn
from .results import SolveOutcome

MIN_TABLES = 4
MAX_TABLES = 20
CLEANING_TIME = 2.0  # simulated minutes
TICK_SECONDS = 0.1


class TableStatus(str, Enum):
    FREE = "FREE"
    OCCUPIED = "OCCUPIED"
    DIRTY = "DIRTY"


class CustomerStatus(str, Enum):
    WAITING = "WAITING"
    EATING = "EATING"
    LEAVING = "LEAVING"
    LOST = "LOST"


@dataclass(frozen=True)
class RestaurantConfig:
    """
    Restaurant layout and rates.

    Rates are per hour (``service_mu`` per table); ``queue_limit`` of None
    means the waiting line is unbounded. ``simulation_speed`` scales each
    real tick: at 60, one real second is one simulated minute.
    """

    table_count: int
    arrival_lambda: float
    service_mu: float
    queue_limit: Optional[int] = None
    simulation_speed: float = 1.0
    tick_seconds: float = TICK_SECONDS
    cleaning_time: float = CLEANING_TIME
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if not is_count(self.table_count, 1):
            raise ValueError("table_count must be an integer >= 1.")
        if self.arrival_lambda < 0 or self.service_mu < 0:
            raise ValueError("Arrival and service rates must be non-negative.")
        if self.queue_limit is not None and not is_count(self.queue_limit):
            raise ValueError("Queue limit must be an integer >= 0 (or None for unbounded).")
        if self.simulation_speed <= 0:
            raise ValueError("Simulation speed must be strictly positive.")
        if self.tick_seconds <= 0:
            raise ValueError("Tick period must be strictly positive.")
        if self.cleaning_time < 0:
            raise ValueError("Cleaning time must be non-negative.")

    @property
    def capacity(self) -> float:
        """Tables plus waiting places; inf when the queue is unbounded."""
        if self.queue_limit is None:
            return math.inf
        return self.table_count + self.queue_limit


@dataclass
class TableEntity:
    id: int
    status: TableStatus = TableStatus.FREE
    current_customer_id: Optional[int] = None
    remaining_time: float = 0.0


@dataclass
class CustomerEntity:
    id: int
    arrival_time: float
    status: CustomerStatus = CustomerStatus.WAITING
    seat_time: Optional[float] = None
    leave_time: Optional[float] = None


@dataclass
class SimulationStats:
    total_customers: int = 0
    customers_served: int = 0
    customers_lost: int = 0
    avg_wait_time: float = 0.0
    avg_system_time: float = 0.0
    utilization: float = 0.0
    active_tables_avg: float = 0.0


@dataclass
class RestaurantState:
    """Everything the simulator owns, accumulators included."""

    tables: List[TableEntity]
    queue: Deque[CustomerEntity] = field(default_factory=deque)
    active_customers: List[CustomerEntity] = field(default_factory=list)
    stats: SimulationStats = field(default_factory=SimulationStats)
    current_time: float = 0.0
    is_running: bool = False
    is_paused: bool = False
    next_arrival_time: float = math.inf
    total_wait_time: float = 0.0
    total_system_time: float = 0.0
    occupied_area: float = 0.0

    @property
    def occupancy(self) -> int:
        return len(self.queue) + len(self.active_customers)

    def as_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["queue"] = list(payload["queue"])
        return payload


class RestaurantSimulator:
    """Owns a ``RestaurantState`` and advances it one tick at a time."""

    def __init__(self, config: RestaurantConfig, rng: Optional[np.random.Generator] = None):
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(seed=config.seed)
        self.state = self._initial_state()

    def _exp(self, rate_per_hour: float) -> float:
        """Exponential duration in minutes; inf when the rate is zero."""
        rate = rate_per_hour / 60.0
        if rate <= 0:
            return math.inf
        return -math.log(1.0 - float(self.rng.random())) / rate

    def _initial_state(self) -> RestaurantState:
        tables = [TableEntity(id=i + 1) for i in range(self.config.table_count)]
        return RestaurantState(tables=tables, next_arrival_time=self._exp(self.config.arrival_lambda))

    def snapshot(self) -> RestaurantState:
        """Independent copy of the committed state."""
        return copy.deepcopy(self.state)

    @property
    def is_running(self) -> bool:
        return self.state.is_running

    @property
    def is_paused(self) -> bool:
        return self.state.is_paused

    def reset(self) -> RestaurantState:
        self.state = self._initial_state()
        return self.snapshot()

    def start(self) -> None:
        """Begin, or resume after a pause; a fresh start from t=0 resets first."""
        if not self.state.is_running:
            if self.state.current_time == 0:
                self.reset()
            self.state.is_running = True
            self.state.is_paused = False
        elif self.state.is_paused:
            self.state.is_paused = False

    def pause(self) -> None:
        self.state.is_paused = True

    def stop(self) -> None:
        self.state.is_running = False
        self.state.is_paused = False

    def tick(self, dt_real: Optional[float] = None) -> RestaurantState:
        """
        Advance the simulation by one real-time tick and return a snapshot.

        ``dt_real`` defaults to the configured tick period (seconds). A
        paused simulator returns its state unchanged.
        """
        state = self.state
        if state.is_paused:
            return self.snapshot()

        cfg = self.config
        if dt_real is None:
            dt_real = cfg.tick_seconds
        dt_sim = (dt_real * cfg.simulation_speed) / 60.0

        state.current_time += dt_sim
        occupied = sum(1 for t in state.tables if t.status is TableStatus.OCCUPIED)
        state.occupied_area += occupied * dt_sim

        if state.current_time >= state.next_arrival_time:
            self._admit(state)
            state.next_arrival_time = state.current_time + self._exp(cfg.arrival_lambda)

        self._advance_tables(state, dt_sim)
        state.active_customers = [
            c for c in state.active_customers if c.status is not CustomerStatus.LEAVING
        ]
        self._seat_waiting(state)
        self._refresh_stats(state)
        return self.snapshot()

    def _admit(self, state: RestaurantState) -> None:
        stats = state.stats
        customer = CustomerEntity(id=stats.total_customers + 1, arrival_time=state.current_time)
        stats.total_customers += 1
        if state.occupancy >= self.config.capacity:
            customer.status = CustomerStatus.LOST
            stats.customers_lost += 1
        else:
            state.queue.append(customer)

    def _advance_tables(self, state: RestaurantState, dt_sim: float) -> None:
        for table in state.tables:
            if table.status is TableStatus.FREE:
                continue
            table.remaining_time -= dt_sim
            if table.remaining_time > 0:
                continue
            if table.status is TableStatus.OCCUPIED:
                table.status = TableStatus.DIRTY
                table.remaining_time = self.config.cleaning_time
                customer = next(
                    (c for c in state.active_customers if c.id == table.current_customer_id),
                    None,
                )
                if customer is not None:
                    customer.status = CustomerStatus.LEAVING
                    customer.leave_time = state.current_time
                    state.total_system_time += customer.leave_time - customer.arrival_time
                    state.stats.customers_served += 1
                table.current_customer_id = None
            else:
                table.status = TableStatus.FREE
                table.remaining_time = 0.0

    def _seat_waiting(self, state: RestaurantState) -> None:
        free_tables = deque(t for t in state.tables if t.status is TableStatus.FREE)
        while state.queue and free_tables:
            table = free_tables.popleft()
            customer = state.queue.popleft()
            customer.status = CustomerStatus.EATING
            customer.seat_time = state.current_time
            state.total_wait_time += customer.seat_time - customer.arrival_time

            table.status = TableStatus.OCCUPIED
            table.current_customer_id = customer.id
            table.remaining_time = self._exp(self.config.service_mu)
            state.active_customers.append(customer)

    def _refresh_stats(self, state: RestaurantState) -> None:
        stats = state.stats
        if stats.customers_served > 0:
            stats.avg_system_time = state.total_system_time / stats.customers_served
            stats.avg_wait_time = state.total_wait_time / stats.customers_served
        if state.current_time > 0:
            stats.active_tables_avg = state.occupied_area / state.current_time
            stats.utilization = stats.active_tables_avg / self.config.table_count

    def theory(self) -> SolveOutcome:
        """
        Closed-form reference for this layout, rates per hour.

        Tables are servers and ``tables + queue_limit`` the capacity; the
        cleaning phase is not part of the analytical model.
        """
        cfg = self.config
        lam, mu, c = cfg.arrival_lambda, cfg.service_mu, cfg.table_count
        if cfg.queue_limit is None:
            return solve_mm1(lam, mu) if c == 1 else solve_mmc(lam, mu, c)
        n = c + cfg.queue_limit
        return solve_mm1n(lam, mu, n) if c == 1 else solve_mmcn(lam, mu, c, n)
