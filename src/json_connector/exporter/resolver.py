"""Resolve a dimension's exported value from its stored history."""

from __future__ import annotations

import math
from typing import NamedTuple, Protocol

from ..model import DimensionSample


class ResolvedValue(NamedTuple):
    """A resolved value and the timestamp it stands for.

    ``value`` is NaN when there is nothing to report for this point.
    """

    value: float
    timestamp: int


class ValueResolver(Protocol):
    def __call__(self, dimension: DimensionSample, now: int) -> ResolvedValue: ...


class StoredValueResolver:
    """Average or sum the stored points of the last ``update_every`` seconds.

    The window is ``(now - update_every, now]``. NaN points are gaps and are
    ignored; a window without any point resolves to NaN. The reported
    timestamp is the end of the window.
    """

    METHODS = ("average", "sum")

    def __init__(self, method: str = "average", update_every: int = 10) -> None:
        if method not in self.METHODS:
            raise ValueError(f"unknown resolution method: {method!r}")
        if update_every <= 0:
            raise ValueError("update_every must be positive")
        self.method = method
        self.update_every = update_every

    def __call__(self, dimension: DimensionSample, now: int) -> ResolvedValue:
        after = now - self.update_every
        values = [
            value for timestamp, value in dimension.points
            if after < timestamp <= now and not math.isnan(value)
        ]
        if not values:
            return ResolvedValue(math.nan, now)

        total = math.fsum(values)
        if self.method == "average":
            total /= len(values)
        return ResolvedValue(total, now)
