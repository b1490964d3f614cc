"""Configuration loading and validation for json_connector."""

from __future__ import annotations

import os
import socket
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

CONNECTOR_TYPES = ("json", "json:http")
DATA_SOURCES = ("as collected", "average", "sum")


@dataclass
class EngineConfig:
    """Settings shared by every exporting instance."""

    hostname: str = field(default_factory=socket.gethostname)
    update_every: int = 10


@dataclass
class InstanceConfig:
    """One export target."""

    name: str = "json"
    type: str = "json"
    destination: str = "localhost:5448"
    prefix: str = "netdata"
    data_source: str = "average"
    send_configured_labels: bool = True
    send_automatic_labels: bool = False
    update_every: int = 0


@dataclass
class CollectorConfig:
    """Local host snapshot settings used by the CLI."""

    cpu: bool = True
    memory: bool = True
    load: bool = True
    tags: str = ""
    labels: dict[str, str] = field(default_factory=dict)


@dataclass
class SinkConfig:
    """Local batch sink settings."""

    enabled: bool = False
    output_dir: str = "./export_data"


@dataclass
class JsonConnectorConfig:
    """Top-level json_connector configuration."""

    engine: EngineConfig = field(default_factory=EngineConfig)
    instance: InstanceConfig = field(default_factory=InstanceConfig)
    collector: CollectorConfig = field(default_factory=CollectorConfig)
    sink: SinkConfig = field(default_factory=SinkConfig)


def _merge_dict(target: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *source* into *target*."""
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _merge_dict(target[key], value)
        else:
            target[key] = value
    return target


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides using JSON_CONNECTOR_ prefix."""
    env_map = {
        "JSON_CONNECTOR_HOSTNAME": ("engine", "hostname"),
        "JSON_CONNECTOR_UPDATE_EVERY": ("engine", "update_every"),
        "JSON_CONNECTOR_TYPE": ("instance", "type"),
        "JSON_CONNECTOR_DESTINATION": ("instance", "destination"),
        "JSON_CONNECTOR_PREFIX": ("instance", "prefix"),
        "JSON_CONNECTOR_DATA_SOURCE": ("instance", "data_source"),
        "JSON_CONNECTOR_OUTPUT_DIR": ("sink", "output_dir"),
    }
    for env_key, path in env_map.items():
        value = os.environ.get(env_key)
        if value is not None:
            obj = data
            for part in path[:-1]:
                obj = obj.setdefault(part, {})
            final_key = path[-1]
            # coerce numeric values
            if final_key == "update_every":
                obj[final_key] = int(value)
            else:
                obj[final_key] = value
    return data


def _section(cls: type, data: dict[str, Any]) -> Any:
    return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


def _dict_to_config(data: dict[str, Any]) -> JsonConnectorConfig:
    """Convert a raw dictionary to a JsonConnectorConfig dataclass."""
    return JsonConnectorConfig(
        engine=_section(EngineConfig, data.get("engine", {})),
        instance=_section(InstanceConfig, data.get("instance", {})),
        collector=_section(CollectorConfig, data.get("collector", {})),
        sink=_section(SinkConfig, data.get("sink", {})),
    )


def load_config(path: str | Path | None = None, overrides: dict[str, Any] | None = None) -> JsonConnectorConfig:
    """Load configuration from a YAML file with environment overrides.

    Looks for ``json_connector.yaml`` in the current directory if *path* is None.
    *overrides* (same nesting as the YAML file) is merged last.
    """
    data: dict[str, Any] = {}
    if path is None:
        path = Path("json_connector.yaml")
    else:
        path = Path(path)

    if path.exists():
        with open(path, encoding="utf-8") as fh:
            loaded = yaml.safe_load(fh)
            if isinstance(loaded, dict):
                data = loaded

    data = _apply_env_overrides(data)
    if overrides:
        _merge_dict(data, overrides)
    return _dict_to_config(data)
