"""JSON formatting, batch framing and delivery hand-off."""

from .batch import BatchAssembler, FinalizedBatch, build_header
from .connector import (
    CompletedBatch,
    ConnectorType,
    DataSource,
    Instance,
    format_batch,
    init_instance,
)

__all__ = [
    "BatchAssembler",
    "CompletedBatch",
    "ConnectorType",
    "DataSource",
    "FinalizedBatch",
    "Instance",
    "build_header",
    "format_batch",
    "init_instance",
]
