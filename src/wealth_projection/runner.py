"""
Last-write-wins orchestration for repeated simulation requests.

Callers re-run the engine on every input change. A newer request for the
same key supersedes any in-flight one; the older result is discarded and
never returned. Nothing is retained per key once its last request settles.
"""

import asyncio
import logging
from functools import partial
from typing import Dict, Optional, Sequence

from .config import DEFAULT_ITERATIONS
from .models import AssetClass, SimulationConfig, SimulationResult, StressScenario
from .monte_carlo import run_simulation

logger = logging.getLogger(__name__)


class SimulationSuperseded(Exception):
    """Raised to the caller of a request that a newer request replaced."""

    def __init__(self, key: str, generation: int):
        super().__init__(f"simulation {generation} for '{key}' was superseded")
        self.key = key
        self.generation = generation


class LatestSimulationRunner:
    """Runs the engine off the event loop; only the newest request per key gets a result."""

    def __init__(self):
        self._generations: Dict[str, int] = {}
        self._tasks: Dict[str, asyncio.Future] = {}

    def generation(self, key: str) -> int:
        """Generation of the in-flight request for key, or 0 when idle."""
        return self._generations.get(key, 0)

    def in_flight(self) -> int:
        """Number of keys with a running request."""
        return len(self._tasks)

    async def submit(
        self,
        key: str,
        assets: Sequence[AssetClass],
        config: SimulationConfig,
        scenario: StressScenario = StressScenario.NONE,
        iterations: int = DEFAULT_ITERATIONS,
        seed: Optional[int] = None,
    ) -> SimulationResult:
        """
        Run a simulation, superseding any in-flight run for the same key.

        Raises:
            SimulationSuperseded: If a newer submit for key arrived first
            ValueError: On malformed engine input
        """
        generation = self.generation(key) + 1
        self._generations[key] = generation

        previous = self._tasks.get(key)
        if previous is not None and not previous.done():
            logger.info("Superseding in-flight simulation for '%s'", key)
            previous.cancel()

        loop = asyncio.get_running_loop()
        task = loop.run_in_executor(
            None, partial(run_simulation, assets, config, scenario, iterations, seed)
        )
        self._tasks[key] = task

        try:
            result = await task
        except asyncio.CancelledError:
            if self._tasks.get(key) is not task:
                raise SimulationSuperseded(key, generation) from None
            raise
        finally:
            latest = self._tasks.get(key) is task
            if latest:
                del self._tasks[key]
                self._generations.pop(key, None)

        if not latest:
            raise SimulationSuperseded(key, generation)
        return result
