"""Tests for the local batch sink and the CLI."""

import json
import tempfile
from pathlib import Path

from json_connector.cli import main
from json_connector.config import SinkConfig
from json_connector.exporter.connector import CompletedBatch
from json_connector.exporter.sink import LocalBatchSink


class TestLocalBatchSink:
    def test_line_batches_appended(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            sink = LocalBatchSink(SinkConfig(enabled=True, output_dir=tmpdir))
            sink(CompletedBatch(body=b'{"a":1}\n', header=None, records=1))
            sink(CompletedBatch(body=b'{"a":2}\n', header=None, records=1))
            sink.shutdown()

            files = list(Path(tmpdir).glob("json-*.jsonl"))
            assert len(files) == 1
            lines = files[0].read_text().splitlines()
            assert [json.loads(line)["a"] for line in lines] == [1, 2]

    def test_http_batches_written_as_requests(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            sink = LocalBatchSink(SinkConfig(enabled=True, output_dir=tmpdir))
            sink(CompletedBatch(body=b"[\n\n]\n", header=b"HEADER\r\n\r\n", records=0))
            sink(CompletedBatch(body=b"[\n\n]\n", header=b"HEADER\r\n\r\n", records=0))
            sink.shutdown()

            files = sorted(Path(tmpdir).glob("batch-*.http"))
            assert len(files) == 2
            assert files[0].read_bytes() == b"HEADER\r\n\r\n[\n\n]\n"

    def test_two_sinks_same_directory_keep_every_request(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            first = LocalBatchSink(SinkConfig(enabled=True, output_dir=tmpdir))
            second = LocalBatchSink(SinkConfig(enabled=True, output_dir=tmpdir))
            first(CompletedBatch(body=b"[\n1\n]\n", header=b"H\r\n\r\n", records=1))
            second(CompletedBatch(body=b"[\n2\n]\n", header=b"H\r\n\r\n", records=1))
            first.shutdown()
            second.shutdown()

            bodies = sorted(f.read_bytes() for f in Path(tmpdir).glob("batch-*.http"))
            assert bodies == [b"H\r\n\r\n[\n1\n]\n", b"H\r\n\r\n[\n2\n]\n"]


class TestCli:
    def test_version(self, capsys):
        main(["version"])
        assert "json_connector" in capsys.readouterr().out

    def test_export_to_directory(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            main([
                "--config", str(Path(tmpdir) / "missing.yaml"),
                "export", "--type", "json", "--data-source", "as collected",
                "--output-dir", tmpdir,
            ])
            files = list(Path(tmpdir).glob("json-*.jsonl"))
            assert len(files) == 1
            records = [json.loads(line) for line in files[0].read_text().splitlines()]
            assert records
            assert {r["chart_context"] for r in records} >= {"system.cpu"}

    def test_export_http_to_directory(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            main([
                "--config", str(Path(tmpdir) / "missing.yaml"),
                "export", "--type", "json:http", "--data-source", "as collected",
                "--destination", "collector:5448", "--output-dir", tmpdir,
            ])
            files = list(Path(tmpdir).glob("batch-*.http"))
            assert len(files) == 1
            header, body = files[0].read_bytes().split(b"\r\n\r\n", 1)
            assert b"Host: collector:5448" in header
            assert f"Content-Length: {len(body)}".encode() in header
            assert isinstance(json.loads(body), list)
