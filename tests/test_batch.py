"""Tests for batch framing and the HTTP header."""

import json

import pytest

from json_connector.errors import BatchStateError
from json_connector.exporter.batch import BatchAssembler, BatchState, FinalizedBatch, build_header
from json_connector.exporter.buffer import Buffer


def _records(n):
    return [json.dumps({"id": i, "name": f"dim{i}"}, separators=(",", ":")) for i in range(n)]


class TestArrayFraming:
    def test_open_write_close(self):
        buf = Buffer()
        assembler = BatchAssembler(buf, array_framed=True)
        assembler.open_batch()
        for record in _records(3):
            assembler.write_record(record)
        batch = assembler.close_batch()

        expected = "[\n" + ",\n".join(_records(3)) + "\n]\n"
        assert batch.body == expected.encode()
        assert batch.records == 3
        assert assembler.state is BatchState.CLOSED

    @pytest.mark.parametrize("count", [1, 2, 7])
    def test_body_is_json_array(self, count):
        assembler = BatchAssembler(Buffer(), array_framed=True)
        assembler.open_batch()
        for record in _records(count):
            assembler.write_record(record)
        parsed = json.loads(assembler.close_batch().body)
        assert isinstance(parsed, list)
        assert len(parsed) == count

    def test_empty_batch(self):
        assembler = BatchAssembler(Buffer(), array_framed=True)
        assembler.open_batch()
        batch = assembler.close_batch()
        assert batch.body == b"[\n\n]\n"
        assert json.loads(batch.body) == []

    def test_open_must_be_first_write(self):
        buf = Buffer()
        buf.strcat("junk")
        with pytest.raises(BatchStateError):
            BatchAssembler(buf, array_framed=True).open_batch()

    def test_open_twice(self):
        assembler = BatchAssembler(Buffer(), array_framed=True)
        assembler.open_batch()
        with pytest.raises(BatchStateError):
            assembler.open_batch()

    def test_write_before_open(self):
        with pytest.raises(BatchStateError):
            BatchAssembler(Buffer(), array_framed=True).write_record("{}")

    def test_write_after_close(self):
        assembler = BatchAssembler(Buffer(), array_framed=True)
        assembler.open_batch()
        assembler.close_batch()
        with pytest.raises(BatchStateError):
            assembler.write_record("{}")
        with pytest.raises(BatchStateError):
            assembler.close_batch()

    def test_reset_starts_new_cycle(self):
        buf = Buffer()
        assembler = BatchAssembler(buf, array_framed=True)
        assembler.open_batch()
        assembler.write_record("{}")
        assembler.close_batch()
        assembler.reset()
        assert len(buf) == 0
        assert assembler.records_written == 0
        assembler.open_batch()
        assembler.write_record('{"a":1}')
        assert assembler.close_batch().body == b'[\n{"a":1}\n]\n'


class TestLineFraming:
    def test_one_record_per_line(self):
        assembler = BatchAssembler(Buffer(), array_framed=False)
        for record in _records(2):
            assembler.write_record(record)
        batch = assembler.close_batch()
        assert batch.body == ("\n".join(_records(2)) + "\n").encode()
        assert b"," + b"\n" not in batch.body

    def test_cannot_open(self):
        with pytest.raises(BatchStateError):
            BatchAssembler(Buffer(), array_framed=False).open_batch()


class TestHeader:
    def test_literal_template(self):
        assembler = BatchAssembler(Buffer(), array_framed=True)
        assembler.open_batch()
        batch = assembler.close_batch()
        assert build_header("collector:5448", batch) == (
            b"POST /api/put HTTP/1.1\r\n"
            b"Host: collector:5448\r\n"
            b"Content-Type: application/json\r\n"
            b"Content-Length: 5\r\n"
            b"\r\n"
        )

    def test_content_length_counts_bytes(self):
        assembler = BatchAssembler(Buffer(), array_framed=True)
        assembler.open_batch()
        assembler.write_record('{"name":"températures ✓"}')
        batch = assembler.close_batch()
        header = build_header("localhost", batch).decode()
        length = int(header.split("Content-Length: ")[1].split("\r\n")[0])
        assert length == len(batch.body)
        assert length > len(batch.body.decode("utf-8"))

    def test_finalized_batch_only_from_close(self):
        with pytest.raises(TypeError):
            FinalizedBatch(body=b"[\n{}", records=1)
