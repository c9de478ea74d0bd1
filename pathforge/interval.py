"""
Scalar intervals used for hit distances and clamping.
"""

from __future__ import annotations
import math
from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Interval:
    """A closed range [min, max] on the real line.

    ``contains`` is inclusive at both ends while ``surrounds`` excludes them;
    intersection code uses ``surrounds`` so grazing hits at the bounds are
    rejected.
    """
    min: float = math.inf
    max: float = -math.inf

    @classmethod
    def empty(cls) -> Interval:
        """The interval that contains nothing."""
        return cls(math.inf, -math.inf)

    @classmethod
    def universe(cls) -> Interval:
        """The interval that contains every finite value."""
        return cls(-math.inf, math.inf)

    def size(self) -> float:
        return self.max - self.min

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    def surrounds(self, value: float) -> bool:
        return self.min < value < self.max

    def clamp(self, value: float) -> float:
        """Saturate value into [min, max]."""
        if value < self.min:
            return self.min
        if value > self.max:
            return self.max
        return value

    def with_max(self, value: float) -> Interval:
        """Return a copy with a new upper bound."""
        return replace(self, max=value)
