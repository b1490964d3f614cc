"""Host, chart and dimension views handed to the formatters."""

from __future__ import annotations

import enum
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator


class LabelSource(enum.Enum):
    """Where a host label came from."""

    AUTO = "auto"
    CONFIGURED = "configured"
    DOCKER = "docker"
    ENVIRONMENT = "environment"
    KUBERNETES = "kubernetes"


@dataclass(frozen=True)
class Label:
    """A host-level key/value metadata pair."""

    key: str
    value: str
    source: LabelSource = LabelSource.CONFIGURED


class _ReadWriteLock:
    """Many readers or one writer."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._readers = 0
        self._writer = False

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if not self._readers:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            while self._writer or self._readers:
                self._cond.wait()
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()


class LabelsReadGuard:
    """Read access to a :class:`HostLabels` list while its read lock is held.

    Only :meth:`HostLabels.read_locked` creates guards. A guard stops
    working as soon as the ``with`` block that produced it exits.
    """

    def __init__(self, labels: list[Label]) -> None:
        self._labels: list[Label] | None = labels

    def __iter__(self) -> Iterator[Label]:
        if self._labels is None:
            raise RuntimeError("label read guard used after the read lock was released")
        return iter(self._labels)

    def __len__(self) -> int:
        if self._labels is None:
            raise RuntimeError("label read guard used after the read lock was released")
        return len(self._labels)

    def _release(self) -> None:
        self._labels = None


class HostLabels:
    """Ordered label list shared between the collection side and exporters.

    Writers go through :meth:`add` / :meth:`remove`; readers take
    :meth:`read_locked` and pass the resulting guard to the formatter.
    """

    def __init__(self, labels: list[Label] | None = None) -> None:
        self._labels: list[Label] = list(labels or [])
        self._lock = _ReadWriteLock()

    @contextmanager
    def read_locked(self) -> Iterator[LabelsReadGuard]:
        self._lock.acquire_read()
        guard = LabelsReadGuard(self._labels)
        try:
            yield guard
        finally:
            guard._release()
            self._lock.release_read()

    def add(self, key: str, value: str, source: LabelSource = LabelSource.CONFIGURED) -> None:
        """Add a label, replacing an existing one with the same key in place."""
        self._lock.acquire_write()
        try:
            label = Label(key, value, source)
            for idx, existing in enumerate(self._labels):
                if existing.key == key:
                    self._labels[idx] = label
                    break
            else:
                self._labels.append(label)
        finally:
            self._lock.release_write()

    def remove(self, key: str) -> None:
        self._lock.acquire_write()
        try:
            self._labels = [lbl for lbl in self._labels if lbl.key != key]
        finally:
            self._lock.release_write()


@dataclass
class DimensionSample:
    """One time series inside a chart.

    ``points`` holds stored history as ``(timestamp, value)`` pairs in
    ascending time order; a NaN value marks a gap.
    """

    id: str
    name: str
    last_collected_value: int = 0
    last_collected_time: int = 0
    points: list[tuple[int, float]] = field(default_factory=list)


@dataclass
class ChartContext:
    """A named group of related dimensions."""

    id: str
    name: str
    family: str
    context: str
    type: str
    units: str
    dimensions: list[DimensionSample] = field(default_factory=list)


@dataclass
class HostContext:
    """A monitored system.

    ``is_localhost`` is decided by the driver; when set the formatters
    report the engine's configured hostname instead of ``hostname``.
    """

    hostname: str
    tags: str | None = None
    labels: HostLabels = field(default_factory=HostLabels)
    is_localhost: bool = False
    charts: list[ChartContext] = field(default_factory=list)
