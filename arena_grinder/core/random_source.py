"""
Random sources for the simulator.

All randomness in the simulation flows through an object with a single
``uniform()`` method returning a float in [0, 1). Nothing reads a global
random state, so a run is reproducible from its seed or from a scripted
sequence of draws.
"""
from collections import deque
from typing import Iterable, Optional, Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class RandomSource(Protocol):
    """Anything that can draw a uniform float in [0, 1)."""

    def uniform(self) -> float:
        ...


class NumpyRandomSource:
    """Production random source backed by a numpy ``Generator``."""

    def __init__(self, seed: Optional[int] = None, generator: Optional[np.random.Generator] = None):
        """Initialize the source.

        Args:
            seed: Seed for a fresh PCG64 generator (ignored if generator given)
            generator: Existing generator to draw from
        """
        self.seed = seed
        self.generator = generator if generator is not None else np.random.default_rng(seed)

    def uniform(self) -> float:
        return float(self.generator.random())


class ScriptedRandomSource:
    """Replays a fixed sequence of draws, for tests and replays.

    Raises:
        IndexError: When more draws are requested than were scripted
    """

    def __init__(self, values: Iterable[float]):
        self._values: deque[float] = deque()
        for value in values:
            if not 0.0 <= value < 1.0:
                raise ValueError(f"Scripted draw out of range [0, 1): {value}")
            self._values.append(float(value))
        self.draws_made = 0

    def uniform(self) -> float:
        if not self._values:
            raise IndexError(f"Scripted random source exhausted after {self.draws_made} draws")
        self.draws_made += 1
        return self._values.popleft()

    @property
    def remaining(self) -> int:
        return len(self._values)
