"""Format a single dimension sample as one JSON record."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from ..model import ChartContext, DimensionSample, HostContext
from .buffer import json_escape
from .tags import format_host_tags

if TYPE_CHECKING:
    from .connector import Instance


def _render_record(
    instance: Instance,
    host: HostContext,
    chart: ChartContext,
    dimension: DimensionSample,
    value: str,
    timestamp: int,
) -> str:
    hostname = instance.engine.hostname if host.is_localhost else host.hostname
    labels = instance.labels.tostring() if instance.labels is not None else ""
    e = json_escape
    return (
        "{"
        f'"prefix":"{e(instance.config.prefix)}",'
        f'"hostname":"{e(hostname)}",'
        f"{format_host_tags(host.tags)}"
        f"{labels}"
        f'"chart_id":"{e(chart.id)}",'
        f'"chart_name":"{e(chart.name)}",'
        f'"chart_family":"{e(chart.family)}",'
        f'"chart_context":"{e(chart.context)}",'
        f'"chart_type":"{e(chart.type)}",'
        f'"units":"{e(chart.units)}",'
        f'"id":"{e(dimension.id)}",'
        f'"name":"{e(dimension.name)}",'
        f'"value":{value},'
        f'"timestamp":{timestamp}'
        "}"
    )


def format_dimension_collected(
    instance: Instance,
    host: HostContext,
    chart: ChartContext,
    dimension: DimensionSample,
) -> bool:
    """Append the last collected value of *dimension*. Never skips."""
    record = _render_record(
        instance,
        host,
        chart,
        dimension,
        str(int(dimension.last_collected_value)),
        int(dimension.last_collected_time),
    )
    instance.assembler.write_record(record)
    return True


def format_dimension_stored(
    instance: Instance,
    host: HostContext,
    chart: ChartContext,
    dimension: DimensionSample,
) -> bool:
    """Append the value resolved from stored data.

    Nothing at all is written when the resolver has no value (NaN).
    """
    resolved = instance.resolver(dimension, instance.now)
    if math.isnan(resolved.value):
        return True

    record = _render_record(
        instance,
        host,
        chart,
        dimension,
        f"{resolved.value:0.7f}",
        int(resolved.timestamp),
    )
    instance.assembler.write_record(record)
    return True
