"""Exceptions raised by json_connector."""

from __future__ import annotations


class ExportingError(Exception):
    """Base class for all json_connector errors."""


class ConnectorInitError(ExportingError):
    """An exporting instance could not be set up and must not be used."""


class BatchStateError(ExportingError):
    """A batch operation was called in the wrong state (open twice, write after close)."""
