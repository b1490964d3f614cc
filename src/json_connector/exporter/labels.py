"""Render host labels into the ``"labels":{...},`` record fragment."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..model import Label, LabelSource, LabelsReadGuard
from .buffer import MAX_LABEL_VALUE, Buffer, json_escape

if TYPE_CHECKING:
    from .connector import Instance

logger = logging.getLogger(__name__)


def sending_labels_configured(instance: Instance) -> bool:
    """True if the instance sends any kind of host label."""
    cfg = instance.config
    return cfg.send_configured_labels or cfg.send_automatic_labels


def should_send_label(instance: Instance, label: Label) -> bool:
    cfg = instance.config
    if label.source is LabelSource.CONFIGURED:
        return cfg.send_configured_labels
    return cfg.send_automatic_labels


def format_host_labels(instance: Instance, labels: LabelsReadGuard) -> None:
    """Write the labels fragment for one host into ``instance.labels``.

    The caller holds the host's label read lock for the duration of the
    call and passes the guard it got from
    :meth:`~json_connector.model.HostLabels.read_locked`.
    """
    if instance.labels is None:
        instance.labels = Buffer()

    if not sending_labels_configured(instance):
        return

    parts = [
        f'"{label.key}":"{json_escape(label.value, MAX_LABEL_VALUE)}"'
        for label in labels
        if should_send_label(instance, label)
    ]
    instance.labels.strcat('"labels":{' + ",".join(parts) + "},")
    logger.debug("Instance %s: %d of %d labels selected", instance.config.name, len(parts), len(labels))


def flush_host_labels(instance: Instance) -> None:
    """Forget the current host's labels fragment."""
    if instance.labels is not None:
        instance.labels.flush()
