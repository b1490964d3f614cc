"""Build a :class:`HostContext` snapshot of the local machine."""

from __future__ import annotations

import logging
import platform
import time

from ..config import CollectorConfig
from ..model import HostContext, HostLabels, LabelSource
from .base import BaseCollector
from .cpu import CpuCollector, LoadCollector
from .memory import MemoryCollector

logger = logging.getLogger(__name__)


def build_collectors(config: CollectorConfig) -> list[BaseCollector]:
    collectors: list[BaseCollector] = []
    if config.cpu:
        collectors.append(CpuCollector())
    if config.memory:
        collectors.append(MemoryCollector())
    if config.load:
        collectors.append(LoadCollector())
    return collectors


def automatic_labels() -> dict[str, str]:
    """Labels discovered from the running system."""
    return {
        "_os_name": platform.system(),
        "_kernel_version": platform.release(),
        "_architecture": platform.machine(),
    }


def collect_local_host(config: CollectorConfig, hostname: str = "localhost", now: int | None = None) -> HostContext:
    """Run every enabled collector once and return the local host view.

    The returned host is flagged ``is_localhost`` so exported records carry
    the engine's hostname.
    """
    if now is None:
        now = int(time.time())

    labels = HostLabels()
    for key, value in automatic_labels().items():
        labels.add(key, value, LabelSource.AUTO)
    for key, value in config.labels.items():
        labels.add(key, str(value), LabelSource.CONFIGURED)

    host = HostContext(hostname=hostname, tags=config.tags, labels=labels, is_localhost=True)
    for collector in build_collectors(config):
        try:
            host.charts.extend(collector.collect(now))
        except Exception:
            logger.exception("Collector %s failed", collector.name)
    return host
