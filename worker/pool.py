"""
Simulation pool — runs independent policy simulations concurrently.

Architecture:
    ┌─────────────────────────────────────────────────────────┐
    │                   SimulationPool                         │
    │                                                         │
    │   frozen task snapshot (shared, read-only)              │
    │             │ submit() once per policy                   │
    │             ▼                                            │
    │  ┌──────────────────────────────────────────┐           │
    │  │ ThreadPoolExecutor (4 threads)            │           │
    │  │  ┌────────┐ ┌────────┐ ┌────────┐ ┌────────┐       │
    │  │  │  RMS   │ │  EDF   │ │  DMS   │ │  LST   │       │
    │  │  └────────┘ └────────┘ └────────┘ └────────┘       │
    │  └──────────────────────────────────────────┘           │
    └─────────────────────────────────────────────────────────┘

Thread safety:
- Each run builds its OWN policy, ready queue, counters and schedule log
- The task snapshot is a tuple of frozen dataclasses, so sharing it is safe
So runs never alias mutable state, and no locks are needed.

Only whole runs are parallel. Inside a run, ticks are strictly sequential:
release → preempt → dispatch → execute → complete → miss sweep.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, Future
from typing import Iterable, Optional

from config.settings import settings
from models.enums import SchedulingPolicy
from models.task import Task
from scheduler.simulation import SimulationResult, run_simulation

logger = logging.getLogger(__name__)


class SimulationPool:

    def __init__(self, max_workers: Optional[int] = None):
        self._max_workers = max_workers or settings.SIMULATION_POOL_SIZE
        self._executor = ThreadPoolExecutor(
            max_workers=self._max_workers,
            thread_name_prefix="sim-worker",
        )

    def run_all(
        self,
        tasks: Iterable[Task],
        policies: Iterable[SchedulingPolicy | str],
        end_time: int,
    ) -> list[SimulationResult]:
        """
        Run every policy over the same task snapshot.

        Results come back in the order the policies were given, regardless
        of which thread finished first. If a run raises, the exception
        propagates to the caller from Future.result().
        """
        snapshot = tuple(tasks)
        futures: list[Future] = []
        for policy in policies:
            future = self._executor.submit(run_simulation, policy, snapshot, end_time)
            future.add_done_callback(self._on_run_done)
            futures.append(future)

        logger.debug(f"Submitted {len(futures)} simulations to {self._max_workers} threads")
        return [future.result() for future in futures]

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "SimulationPool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def _on_run_done(self, future: Future) -> None:
        """Log failed runs; the exception itself still reaches run_all()'s caller."""
        if future.cancelled():
            return
        exc = future.exception()
        if exc:
            logger.error(f"Simulation worker failed: {exc}")
