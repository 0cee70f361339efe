"""SimPy-driven tick loop for the restaurant simulator."""

from __future__ import annotations

from typing import Callable, List, Optional

import simpy

from .restaurant import RestaurantSimulator, RestaurantState

Listener = Callable[[RestaurantState], None]


class TickDriver:
    """
    Fire ``simulator.tick()`` on a fixed period.

    The period is ``config.tick_seconds``. With ``realtime=True`` ticks are
    paced against the wall clock (scaled by ``factor``); otherwise the SimPy
    clock jumps straight from tick to tick. Each tick runs to completion
    before the next timeout is scheduled, and listeners only ever see the
    committed snapshot it returned.
    """

    def __init__(
        self,
        simulator: RestaurantSimulator,
        realtime: bool = False,
        factor: float = 1.0,
    ):
        self.simulator = simulator
        self.realtime = realtime
        self.factor = factor
        self.ticks = 0
        self._listeners: List[Listener] = []
        self._stopped = False
        self._env: Optional[simpy.Environment] = None

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _make_env(self) -> simpy.Environment:
        if self.realtime:
            return simpy.RealtimeEnvironment(factor=self.factor, strict=False)
        return simpy.Environment()

    def _ticker(self, env: simpy.Environment):
        period = self.simulator.config.tick_seconds
        while not self._stopped and self.simulator.is_running:
            yield env.timeout(period)
            if self._stopped or not self.simulator.is_running:
                break
            snapshot = self.simulator.tick()
            self.ticks += 1
            for listener in self._listeners:
                listener(snapshot)

    def run(self, duration: float) -> RestaurantState:
        """Tick for ``duration`` seconds of driver time or until ``stop()``."""
        if duration <= 0:
            raise ValueError("Run duration must be positive.")
        self._stopped = False
        self.simulator.start()
        env = self._make_env()
        self._env = env
        ticker = env.process(self._ticker(env))
        try:
            env.run(until=env.any_of([ticker, env.timeout(duration)]))
        finally:
            self._env = None
        return self.simulator.snapshot()

    def pause(self) -> None:
        self.simulator.pause()

    def resume(self) -> None:
        self.simulator.start()

    def stop(self) -> None:
        """Cooperative cancellation; the current tick, if any, still completes."""
        self._stopped = True
        self.simulator.stop()

    @property
    def active(self) -> bool:
        return self._env is not None
