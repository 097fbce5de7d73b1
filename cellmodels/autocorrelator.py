"""Multiple-tau on-the-fly autocorrelation.

A generalisation of the Frenkel–Smit block scheme with independently
controllable lag spacing (Ramirez, Sukumaran, Vorselaars and Likhtman,
J. Chem. Phys. 133, 154103, 2010). Correlator levels are added as needed,
so there is no fixed maximum lag.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class _Level:
    p: int
    shift: list = field(init=False)
    correlation: list = field(init=False)
    n_correlation: list = field(init=False)
    accumulator: float = 0.0
    n_accumulator: int = 0
    insert_index: int = 0

    def __post_init__(self) -> None:
        self.shift = [None] * self.p
        self.correlation = [0.0] * self.p
        self.n_correlation = [0] * self.p


class Autocorrelator:
    """Accumulates values and evaluates their autocorrelation over many time scales.

    ``p`` is the number of points per correlator level, ``m`` the number of
    points averaged when passing values to the next level, and ``delta_t``
    the time between added values.
    """

    def __init__(self, p: int = 16, m: int = 2, delta_t: float = 1.0) -> None:
        if p < 1:
            raise ValueError("p must be at least 1")
        if m < 2:
            raise ValueError("m must be at least 2")
        self.p = p
        self.m = m
        self.minimum_distance = p // m
        self.delta_t = delta_t
        self.correlator: list[tuple[float, float]] = []
        self.initialize()

    def initialize(self) -> None:
        """Reset all accumulated data."""
        self._levels: list[_Level] = []
        self.accumulated_value = 0.0
        self.correlator = []
        self._grow_correlation_level()

    def _grow_correlation_level(self) -> None:
        self._levels.append(_Level(self.p))

    @property
    def n_correlators(self) -> int:
        """The current number of correlator levels."""
        return len(self._levels)

    def add(self, value: float) -> None:
        """Add a new data point to the correlator."""
        self._add(float(value), 0)

    def _add(self, value: float, k: int) -> None:
        if k == len(self._levels):
            self._grow_correlation_level()
        level = self._levels[k]
        index = level.insert_index
        level.shift[index] = value

        if k == 0:
            self.accumulated_value += value

        level.accumulator += value
        level.n_accumulator += 1
        if level.n_accumulator == self.m:
            self._add(level.accumulator / self.m, k + 1)
            level.accumulator = 0.0
            level.n_accumulator = 0

        start = 0 if k == 0 else self.minimum_distance
        for lag in range(start, self.p):
            other = level.shift[(index - lag) % self.p]
            if other is not None:
                level.correlation[lag] += value * other
                level.n_correlation[lag] += 1

        level.insert_index = (index + 1) % self.p

    def evaluate(self, normalize: bool = False) -> list[tuple[float, float]]:
        """Return the current autocorrelation as a list of (time, value) pairs.

        With ``normalize`` the squared mean of the added values is subtracted,
        as needed when correcting for a non-zero bias.
        """
        auxiliary = 0.0
        first = self._levels[0]
        if normalize and first.n_correlation[0] > 0:
            mean = self.accumulated_value / first.n_correlation[0]
            auxiliary = mean * mean

        result: list[tuple[float, float]] = []
        for lag, (corr, count) in enumerate(zip(first.correlation, first.n_correlation)):
            if count > 0:
                result.append((lag * self.delta_t, corr / count - auxiliary))

        for k, level in enumerate(self._levels[1:], start=1):
            scale = self.delta_t * float(self.m) ** k
            for lag in range(self.minimum_distance, self.p):
                count = level.n_correlation[lag]
                if count > 0:
                    result.append((scale * lag, level.correlation[lag] / count - auxiliary))

        self.correlator = result
        return result