"""JSON connector instances and the per-cycle formatting driver.

An :class:`Instance` is one configured export target. Its connector type
picks one :class:`ConnectorStrategy` at construction time:

* ``json`` - one record per line, the body is handed over as is.
* ``json:http`` - records form a JSON array and every finished body gets an
  HTTP POST header with its exact Content-Length.

Typical use::

    instance = init_instance(InstanceConfig(type="json:http"), EngineConfig())
    completed = format_batch(instance, hosts)
    send(completed.header + completed.body)
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable

from ..config import EngineConfig, InstanceConfig
from ..errors import ConnectorInitError
from ..model import ChartContext, DimensionSample, HostContext, LabelsReadGuard
from .batch import BatchAssembler, FinalizedBatch, build_header
from .buffer import Buffer
from .dimension import format_dimension_collected, format_dimension_stored
from .labels import flush_host_labels, format_host_labels
from .resolver import StoredValueResolver, ValueResolver

logger = logging.getLogger(__name__)


class ConnectorType(str, enum.Enum):
    JSON = "json"
    JSON_HTTP = "json:http"


class DataSource(str, enum.Enum):
    AS_COLLECTED = "as collected"
    AVERAGE = "average"
    SUM = "sum"


@dataclass(frozen=True)
class CompletedBatch:
    """What the connector layer receives at the end of a cycle."""

    body: bytes
    header: bytes | None
    records: int


@dataclass
class InstanceStats:
    batches: int = 0
    buffered_metrics: int = 0
    buffered_bytes: int = 0


MetricFormatter = Callable[["Instance", HostContext, ChartContext, DimensionSample], bool]


@dataclass(frozen=True)
class ConnectorStrategy:
    """Formatting and framing hooks of one connector type."""

    type: ConnectorType
    array_framed: bool
    start_batch: Callable[[Instance], None] | None
    start_host: Callable[[Instance, LabelsReadGuard], None]
    end_host: Callable[[Instance], None]
    end_batch: Callable[[Instance], FinalizedBatch]
    prepare_header: Callable[[Instance, FinalizedBatch], bytes] | None


def open_batch_json_http(instance: Instance) -> None:
    instance.assembler.open_batch()


def close_batch_json_http(instance: Instance) -> FinalizedBatch:
    return instance.assembler.close_batch()


def end_batch_json_plaintext(instance: Instance) -> FinalizedBatch:
    return instance.assembler.close_batch()


def json_http_prepare_header(instance: Instance, batch: FinalizedBatch) -> bytes:
    return build_header(instance.config.destination, batch)


STRATEGIES: dict[ConnectorType, ConnectorStrategy] = {
    ConnectorType.JSON: ConnectorStrategy(
        type=ConnectorType.JSON,
        array_framed=False,
        start_batch=None,
        start_host=format_host_labels,
        end_host=flush_host_labels,
        end_batch=end_batch_json_plaintext,
        prepare_header=None,
    ),
    ConnectorType.JSON_HTTP: ConnectorStrategy(
        type=ConnectorType.JSON_HTTP,
        array_framed=True,
        start_batch=open_batch_json_http,
        start_host=format_host_labels,
        end_host=flush_host_labels,
        end_batch=close_batch_json_http,
        prepare_header=json_http_prepare_header,
    ),
}


class Instance:
    """One export target with its own buffers.

    Formatting into an instance is single-threaded: the driver must not
    call into the same instance from two threads at once. Separate
    instances share nothing.
    """

    def __init__(
        self,
        config: InstanceConfig,
        engine: EngineConfig,
        strategy: ConnectorStrategy,
        metric_formatting: MetricFormatter,
        resolver: ValueResolver | None = None,
        on_batch_complete: Callable[[CompletedBatch], None] | None = None,
    ) -> None:
        if metric_formatting is format_dimension_stored and resolver is None:
            raise ConnectorInitError(f"instance {config.name}: stored data source needs a value resolver")
        self.config = config
        self.engine = engine
        self.strategy = strategy
        self.metric_formatting = metric_formatting
        self.resolver = resolver
        self.on_batch_complete = on_batch_complete
        self.labels: Buffer | None = None
        self.buffer = Buffer()
        self.assembler = BatchAssembler(self.buffer, array_framed=strategy.array_framed)
        self.stats = InstanceStats()
        self.now = 0

    def begin_cycle(self, now: int | None = None) -> None:
        """Reset the output buffer and fix the cycle's reference time."""
        self.now = int(time.time()) if now is None else int(now)
        self.assembler.reset()
        if self.strategy.start_batch is not None:
            self.strategy.start_batch(self)

    def format_host(self, host: HostContext) -> None:
        """Format every dimension of *host* into the output buffer."""
        with host.labels.read_locked() as guard:
            self.strategy.start_host(self, guard)
        try:
            for chart in host.charts:
                for dimension in chart.dimensions:
                    self.metric_formatting(self, host, chart, dimension)
        finally:
            self.strategy.end_host(self)

    def end_cycle(self) -> CompletedBatch:
        """Finish the body, build the header if any and signal completion."""
        batch = self.strategy.end_batch(self)
        header = None
        if self.strategy.prepare_header is not None:
            header = self.strategy.prepare_header(self, batch)

        self.stats.batches += 1
        self.stats.buffered_metrics += batch.records
        self.stats.buffered_bytes += len(batch.body)
        logger.debug(
            "Instance %s: batch ready (%d metrics, %d bytes)",
            self.config.name,
            batch.records,
            len(batch.body),
        )

        completed = CompletedBatch(body=batch.body, header=header, records=batch.records)
        if self.on_batch_complete is not None:
            self.on_batch_complete(completed)
        return completed

    def discard_batch(self) -> None:
        """Abandon the current cycle without delivering anything."""
        self.assembler.reset()
        if self.labels is not None:
            self.labels.flush()

    def shutdown(self) -> None:
        """Release the buffers; the instance starts from ``Empty`` if reused."""
        self.assembler.reset()
        self.labels = None
        logger.info("Instance %s shut down", self.config.name)


def init_instance(
    config: InstanceConfig,
    engine: EngineConfig,
    *,
    resolver: ValueResolver | None = None,
    on_batch_complete: Callable[[CompletedBatch], None] | None = None,
) -> Instance:
    """Validate *config* and build a ready-to-use instance.

    Raises :class:`ConnectorInitError` if the instance cannot be set up.
    When the data source is not ``as collected`` and no *resolver* is given,
    a :class:`StoredValueResolver` is created for it.
    """
    try:
        connector_type = ConnectorType(config.type)
    except ValueError:
        raise ConnectorInitError(
            f"instance {config.name}: unknown connector type {config.type!r}"
        ) from None
    try:
        data_source = DataSource(config.data_source)
    except ValueError:
        raise ConnectorInitError(
            f"instance {config.name}: unknown data source {config.data_source!r}"
        ) from None
    if not config.destination:
        raise ConnectorInitError(f"instance {config.name}: destination is not set")

    update_every = config.update_every or engine.update_every
    if data_source is DataSource.AS_COLLECTED:
        metric_formatting: MetricFormatter = format_dimension_collected
    else:
        metric_formatting = format_dimension_stored
        if resolver is None:
            try:
                resolver = StoredValueResolver(data_source.value, update_every)
            except ValueError as exc:
                raise ConnectorInitError(f"instance {config.name}: {exc}") from exc

    instance = Instance(
        config,
        engine,
        STRATEGIES[connector_type],
        metric_formatting,
        resolver=resolver,
        on_batch_complete=on_batch_complete,
    )
    logger.info(
        "Instance %s initialized (type=%s, data source=%s, destination=%s)",
        config.name,
        connector_type.value,
        data_source.value,
        config.destination,
    )
    return instance


def format_batch(instance: Instance, hosts: Iterable[HostContext], now: int | None = None) -> CompletedBatch:
    """Run one delivery cycle over *hosts* and return the finished batch."""
    instance.begin_cycle(now)
    for host in hosts:
        instance.format_host(host)
    return instance.end_cycle()
