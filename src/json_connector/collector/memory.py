"""Memory resource collector."""

from __future__ import annotations

import psutil

from ..model import ChartContext
from .base import BaseCollector, make_dimension

_MIB = 1024 * 1024


class MemoryCollector(BaseCollector):
    """Collects the ``system.ram`` chart in MiB."""

    @property
    def name(self) -> str:
        return "memory"

    def collect(self, now: int) -> list[ChartContext]:
        mem = psutil.virtual_memory()
        chart = ChartContext(
            id="system.ram",
            name="system.ram",
            family="ram",
            context="system.ram",
            type="stacked",
            units="MiB",
        )
        chart.dimensions = [
            make_dimension("free", mem.free / _MIB, now),
            make_dimension("used", mem.used / _MIB, now),
            make_dimension("cached", getattr(mem, "cached", 0) / _MIB, now),
            make_dimension("buffers", getattr(mem, "buffers", 0) / _MIB, now),
        ]
        return [chart]
