from __future__ import annotations

import math
from typing import Callable


class CostScaling:
    """Determines the next cost of an upgrade from the cost just paid."""

    def __init__(self, fn: Callable[[float], float]) -> None:
        self._fn = fn

    def next_cost(self, cost: float) -> float:
        return self._fn(cost)

    @classmethod
    def fixed(cls) -> CostScaling:
        """Cost never changes."""
        return cls(lambda cost: cost)

    @classmethod
    def exponential(cls, growth_rate: float = 1.15) -> CostScaling:
        """Next cost = ceil(cost * growth_rate).

        Ceiling keeps costs whole and strictly increasing for any
        growth_rate > 1, even at small costs where the raw step is below 1.
        """
        gr = growth_rate  # capture

        def _compute(cost: float) -> float:
            return math.ceil(cost * gr)

        return cls(_compute)

    @classmethod
    def custom(cls, fn: Callable[[float], float]) -> CostScaling:
        """Arbitrary cost function."""
        return cls(fn)
