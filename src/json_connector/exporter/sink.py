"""Local batch sink - writes completed batches to files on disk."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from ..config import SinkConfig
from .connector import CompletedBatch

logger = logging.getLogger(__name__)


class LocalBatchSink:
    """Receives completed batches in place of a network connector.

    Line-delimited bodies are appended to one ``json-YYYY-MM-DD.jsonl``
    file per day inside the configured *output_dir*. Bodies that come with
    an HTTP header are written as complete requests, one
    ``batch-<timestamp>-<n>.http`` file each; existing files are never
    overwritten.
    """

    def __init__(self, config: SinkConfig) -> None:
        self._config = config
        self._output_dir = Path(config.output_dir)
        self._output_dir.mkdir(parents=True, exist_ok=True)
        self._fh = None
        self._current_date: str | None = None
        self._requests = 0
        logger.info("LocalBatchSink initialized → %s", self._output_dir)

    def _ensure_file(self) -> None:
        today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        if self._current_date != today or self._fh is None:
            if self._fh is not None:
                self._fh.close()
            filepath = self._output_dir / f"json-{today}.jsonl"
            self._fh = open(filepath, "ab")  # noqa: SIM115
            self._current_date = today

    def __call__(self, batch: CompletedBatch) -> None:
        if batch.header is None:
            self._ensure_file()
            assert self._fh is not None
            self._fh.write(batch.body)
            self._fh.flush()
            return

        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
        while True:
            self._requests += 1
            filepath = self._output_dir / f"batch-{stamp}-{self._requests}.http"
            try:
                with open(filepath, "xb") as fh:
                    fh.write(batch.header + batch.body)
            except FileExistsError:
                # another sink already wrote this name within the same second
                continue
            break
        logger.debug("Request with %d metrics written to %s", batch.records, filepath)

    def shutdown(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None
        logger.info("LocalBatchSink shut down")
