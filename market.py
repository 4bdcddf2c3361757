"""
Annual real-return sources for the simulation engine.
A source only has to provide sample(mean, std_dev); the simulator never looks inside it.
"""
import math
from typing import Iterable, Optional

import numpy as np


class BoxMullerSource:
    """Normal variates from two uniform draws via the Box-Muller transform"""

    def __init__(self, seed: Optional[int] = None, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def _uniform(self) -> float:
        # log(0) is undefined, so redraw exact zeros
        u = 0.0
        while u == 0.0:
            u = float(self.rng.random())
        return u

    def sample(self, mean: float, std_dev: float) -> float:
        u = self._uniform()
        v = self._uniform()
        z = math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
        return mean + z * std_dev


class ExpectedReturnSource:
    """Always returns the mean. Used for deterministic projections."""

    def sample(self, mean: float, std_dev: float) -> float:
        return mean


class SequenceSource:
    """
    Replays a fixed list of returns, ignoring mean and std_dev.

    Useful for scripted market paths (e.g. a crash in the first retirement year).
    Once the sequence is exhausted the last value repeats.
    """

    def __init__(self, returns: Iterable[float]):
        self.returns = [float(r) for r in returns]
        if not self.returns:
            raise ValueError("SequenceSource needs at least one return")
        self._index = 0

    def sample(self, mean: float, std_dev: float) -> float:
        value = self.returns[min(self._index, len(self.returns) - 1)]
        self._index += 1
        return value
