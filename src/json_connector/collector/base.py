"""Base interface for local chart collectors."""

from __future__ import annotations

import abc

from ..model import ChartContext, DimensionSample


def make_dimension(dim_id: str, value: float, now: int, *, multiplier: int = 1, name: str = "") -> DimensionSample:
    """Build a sample whose collected value is ``value * multiplier`` as an integer.

    The stored history gets one point holding the unscaled *value*.
    """
    return DimensionSample(
        id=dim_id,
        name=name or dim_id,
        last_collected_value=int(round(value * multiplier)),
        last_collected_time=now,
        points=[(now, float(value))],
    )


class BaseCollector(abc.ABC):
    """Abstract base class for local chart collectors."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Collector name used in configuration and output."""

    @abc.abstractmethod
    def collect(self, now: int) -> list[ChartContext]:
        """Collect current values. Returns the charts with their dimensions."""
