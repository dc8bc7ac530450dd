"""
Closed real intervals.

Used to restrict the valid range of ray parameters during intersection
and to clamp color channels before quantization.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class Interval:
    """A closed interval [min, max] on the real line.

    An interval with min > max is empty.
    """
    min: float = float('inf')
    max: float = float('-inf')

    def size(self) -> float:
        return self.max - self.min

    def contains(self, x: float) -> bool:
        """True if min <= x <= max."""
        return self.min <= x <= self.max

    def surrounds(self, x: float) -> bool:
        """True if min < x < max (strict on both ends)."""
        return self.min < x < self.max

    def clamp(self, x: float) -> float:
        """Clamp x into [min, max]."""
        if x < self.min:
            return self.min
        if x > self.max:
            return self.max
        return x

    def with_max(self, new_max: float) -> Interval:
        """Return a copy of this interval with a different upper bound."""
        return Interval(self.min, new_max)


EMPTY = Interval(float('inf'), float('-inf'))
UNIVERSE = Interval(float('-inf'), float('inf'))
