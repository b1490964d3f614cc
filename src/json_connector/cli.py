"""CLI interface for json_connector."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any

from . import __version__
from .config import JsonConnectorConfig, load_config
from .errors import ConnectorInitError


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    instance: dict[str, Any] = {}
    if getattr(args, "type", None):
        instance["type"] = args.type
    if getattr(args, "data_source", None):
        instance["data_source"] = args.data_source
    if getattr(args, "destination", None):
        instance["destination"] = args.destination
    return {"instance": instance} if instance else {}


def _snapshot(cfg: JsonConnectorConfig):
    from .collector.local import collect_local_host

    return collect_local_host(cfg.collector, hostname=cfg.engine.hostname)


def _cmd_export(args: argparse.Namespace) -> None:
    """Format one cycle for the local host."""
    cfg = load_config(args.config, _overrides(args))

    from .exporter.connector import format_batch, init_instance

    sink = None
    if args.output_dir or cfg.sink.enabled:
        from .exporter.sink import LocalBatchSink

        if args.output_dir:
            cfg.sink.output_dir = args.output_dir
        sink = LocalBatchSink(cfg.sink)

    try:
        instance = init_instance(cfg.instance, cfg.engine, on_batch_complete=sink)
    except ConnectorInitError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)

    try:
        completed = format_batch(instance, [_snapshot(cfg)])
    finally:
        instance.shutdown()
        if sink is not None:
            sink.shutdown()

    if sink is not None:
        print(f"Exported {completed.records} metrics ({len(completed.body)} bytes) → {cfg.sink.output_dir}")
        return

    out = sys.stdout.buffer
    if args.header and completed.header is not None:
        out.write(completed.header)
    out.write(completed.body)
    out.flush()


def _cmd_inspect(args: argparse.Namespace) -> None:
    """Show the charts and dimensions the local host would export."""
    from rich.console import Console
    from rich.table import Table

    cfg = load_config(args.config)
    host = _snapshot(cfg)

    table = Table(title=f"Local host: {cfg.engine.hostname}", show_lines=False)
    table.add_column("Chart", style="cyan")
    table.add_column("Family", style="magenta")
    table.add_column("Units")
    table.add_column("Dimension", style="green")
    table.add_column("Collected", justify="right")
    table.add_column("Stored", justify="right")

    for chart in host.charts:
        for dim in chart.dimensions:
            stored = f"{dim.points[-1][1]:.3f}" if dim.points else "-"
            table.add_row(chart.id, chart.family, chart.units, dim.name, str(dim.last_collected_value), stored)

    console = Console()
    console.print(table)
    with host.labels.read_locked() as labels:
        for label in labels:
            console.print(f"  label {label.key}={label.value} [dim]({label.source.value})[/dim]")
    if host.tags:
        console.print(f"  tags {host.tags}")


def _cmd_version(_args: argparse.Namespace) -> None:
    print(f"json_connector {__version__}")


def main(argv: list[str] | None = None) -> None:
    """Entry point for the json-connector CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    parser = argparse.ArgumentParser(
        prog="json-connector",
        description="Format host metrics as JSON lines or JSON HTTP batches",
    )
    parser.add_argument("--config", "-c", default=None, help="Path to json_connector.yaml")
    sub = parser.add_subparsers(dest="command")

    # export
    export_p = sub.add_parser("export", help="Format one export cycle for the local host")
    export_p.add_argument("--type", choices=["json", "json:http"], default=None, help="Connector type")
    export_p.add_argument(
        "--data-source",
        choices=["as collected", "average", "sum"],
        default=None,
        help="Export raw collected values or values calculated from stored data",
    )
    export_p.add_argument("--destination", default=None, help="Host header value for json:http")
    export_p.add_argument("--header", action="store_true", help="Print the HTTP header before the body")
    export_p.add_argument("--output-dir", default=None, help="Write batches to this directory instead of stdout")
    export_p.set_defaults(func=_cmd_export)

    # inspect
    inspect_p = sub.add_parser("inspect", help="Show the local charts that would be exported")
    inspect_p.set_defaults(func=_cmd_inspect)

    # version
    ver_p = sub.add_parser("version", help="Print version")
    ver_p.set_defaults(func=_cmd_version)

    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
