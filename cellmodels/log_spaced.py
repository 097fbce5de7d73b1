"""Generation of logarithmically spaced integers, e.g. for choosing save frames."""

from __future__ import annotations

import math


def _round_half_away(value: float) -> int:
    """Round a non-negative float to the nearest integer, halves away from zero."""
    return math.floor(value + 0.5)


class LogSpacedIntegers:
    """Tracks the next integer in a sequence spaced evenly on a log scale.

    The sequence is ``round(10 ** (exponent * i))`` for increasing ``i``,
    with repeated values skipped so that ``next_save`` strictly increases.
    """

    def __init__(self, first_save: int = 0, exponent: float = 0.05) -> None:
        if exponent <= 0:
            raise ValueError("exponent must be positive")
        self.next_save = first_save
        self.exponent = exponent
        self.base = 10.0 ** exponent
        self.log_save_idx = 0
        if first_save != 0:
            current = 0
            while current < first_save:
                self.log_save_idx += 1
                current = self._value_at(self.log_save_idx)

    def _value_at(self, index: int) -> int:
        return _round_half_away(self.base ** index)

    def update(self) -> int:
        """Advance to the next distinct log-spaced integer and return it."""
        self.log_save_idx += 1
        current = self._value_at(self.log_save_idx)
        while current == self.next_save:
            self.log_save_idx += 1
            current = self._value_at(self.log_save_idx)
        self.next_save = current
        return current