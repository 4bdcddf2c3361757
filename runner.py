"""
Background execution of simulation batches.
Batches run on a thread pool; when parameters change mid-run, the older batch's
result is dropped instead of being published.
"""
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from simulation import SimulationParams, SimulationResults, RetirementSimulator

logger = logging.getLogger(__name__)


class SimulationRunner:
    """Runs simulations off the caller's thread and keeps only the newest result"""

    def __init__(self, max_workers: int = 2):
        self._executor = ThreadPoolExecutor(max_workers=max_workers,
                                            thread_name_prefix='simulation')
        self._lock = threading.Lock()
        self._generation = 0
        self._latest: Optional[SimulationResults] = None

    @property
    def generation(self) -> int:
        """Generation number of the most recently submitted batch"""
        with self._lock:
            return self._generation

    @property
    def latest_result(self) -> Optional[SimulationResults]:
        """Result of the newest batch that has finished, if any"""
        with self._lock:
            return self._latest

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def submit(self, params: SimulationParams,
               on_result: Optional[Callable[[SimulationResults], None]] = None) -> Future:
        """
        Start a batch for params, superseding any batch still in flight.

        Parameters are validated before the batch is queued, so invalid input
        raises ValueError here rather than inside the worker.

        Args:
            params: Simulation parameters
            on_result: Called with the results if this batch is still the newest when it finishes

        Returns:
            Future resolving to the batch's SimulationResults (superseded or not)
        """
        simulator = RetirementSimulator(params)

        with self._lock:
            self._generation += 1
            generation = self._generation

        logger.debug("Submitting simulation batch %d", generation)
        future = self._executor.submit(simulator.run_simulation)
        future.add_done_callback(lambda f: self._publish(generation, f, on_result))
        return future

    def _publish(self, generation: int, future: Future,
                 on_result: Optional[Callable[[SimulationResults], None]]) -> None:
        if future.cancelled():
            return

        error = future.exception()
        if error is not None:
            if self.is_current(generation):
                logger.error("Simulation batch %d failed: %s", generation, error)
            else:
                logger.warning("Superseded simulation batch %d failed: %s", generation, error)
            return

        with self._lock:
            if generation != self._generation:
                logger.debug("Discarding superseded simulation batch %d", generation)
                return
            self._latest = future.result()
            result = self._latest

        if on_result is not None:
            on_result(result)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
        return False
