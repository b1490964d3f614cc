"""CPU and load average collectors."""

from __future__ import annotations

import psutil

from ..model import ChartContext
from .base import BaseCollector, make_dimension


class CpuCollector(BaseCollector):
    """Collects the ``system.cpu`` chart (utilization per CPU state)."""

    @property
    def name(self) -> str:
        return "cpu"

    def collect(self, now: int) -> list[ChartContext]:
        times = psutil.cpu_times_percent(interval=0)
        chart = ChartContext(
            id="system.cpu",
            name="system.cpu",
            family="cpu",
            context="system.cpu",
            type="stacked",
            units="percentage",
        )
        for state in ("user", "system", "nice", "iowait", "idle"):
            if hasattr(times, state):
                chart.dimensions.append(make_dimension(state, getattr(times, state), now))
        return [chart]


class LoadCollector(BaseCollector):
    """Collects the ``system.load`` chart.

    Load averages are collected multiplied by 1000, the stored history keeps
    the real value.
    """

    @property
    def name(self) -> str:
        return "load"

    def collect(self, now: int) -> list[ChartContext]:
        load1, load5, load15 = psutil.getloadavg()
        chart = ChartContext(
            id="system.load",
            name="system.load",
            family="load",
            context="system.load",
            type="line",
            units="load",
        )
        chart.dimensions = [
            make_dimension("load1", load1, now, multiplier=1000),
            make_dimension("load5", load5, now, multiplier=1000),
            make_dimension("load15", load15, now, multiplier=1000),
        ]
        return [chart]
