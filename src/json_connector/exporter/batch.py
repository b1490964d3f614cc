"""Batch framing and the HTTP request header for a finished batch."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from ..errors import BatchStateError
from .buffer import Buffer

logger = logging.getLogger(__name__)

BATCH_OPEN = "[\n"
BATCH_SEPARATOR = ",\n"
BATCH_CLOSE = "\n]\n"
LINE_END = "\n"


class BatchState(enum.Enum):
    EMPTY = "empty"
    OPENED = "opened"
    CLOSED = "closed"


# Passed by close_batch only; any other construction of FinalizedBatch fails.
_CLOSE_TOKEN = object()


@dataclass(frozen=True)
class FinalizedBatch:
    """A body that will not change any more.

    Only :meth:`BatchAssembler.close_batch` can create one; building it
    directly raises :class:`TypeError`. This is the only thing
    :func:`build_header` accepts.
    """

    body: bytes
    records: int
    _token: object = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self._token is not _CLOSE_TOKEN:
            raise TypeError("FinalizedBatch is created by BatchAssembler.close_batch()")

    def __len__(self) -> int:
        return len(self.body)


class BatchAssembler:
    """Frames formatted records into an instance's output buffer.

    With ``array_framed`` the body is a JSON array: ``[\\n``, records
    joined by ``,\\n``, then ``\\n]\\n``. Otherwise every record is a line
    of its own terminated by ``\\n``.
    """

    def __init__(self, buffer: Buffer, *, array_framed: bool) -> None:
        self._buffer = buffer
        self.array_framed = array_framed
        self.state = BatchState.EMPTY
        self.records_written = 0

    def reset(self) -> None:
        """Start a new cycle with an empty buffer."""
        self._buffer.flush()
        self.state = BatchState.EMPTY
        self.records_written = 0

    def open_batch(self) -> None:
        if not self.array_framed:
            raise BatchStateError("line-delimited batches are not opened")
        if self.state is not BatchState.EMPTY or len(self._buffer):
            raise BatchStateError("the batch must be opened first, on an empty buffer")
        self._buffer.strcat(BATCH_OPEN)
        self.state = BatchState.OPENED

    def write_record(self, record: str) -> None:
        """Append one JSON object with the separator the framing needs."""
        if self.state is BatchState.CLOSED:
            raise BatchStateError("cannot write to a closed batch")
        if self.array_framed:
            if self.state is not BatchState.OPENED:
                raise BatchStateError("open the batch before writing records")
            if self.records_written > 0:
                self._buffer.strcat(BATCH_SEPARATOR)
            self._buffer.strcat(record)
        else:
            self._buffer.strcat(record)
            self._buffer.strcat(LINE_END)
        self.records_written += 1

    def close_batch(self) -> FinalizedBatch:
        """Finish the body and hand out its final bytes.

        Array-framed batches get their closing bracket here.
        """
        if self.state is BatchState.CLOSED:
            raise BatchStateError("batch already closed")
        if self.array_framed:
            if self.state is not BatchState.OPENED:
                raise BatchStateError("cannot close a batch that was never opened")
            self._buffer.strcat(BATCH_CLOSE)
        self.state = BatchState.CLOSED
        batch = FinalizedBatch(
            body=self._buffer.getvalue(),
            records=self.records_written,
            _token=_CLOSE_TOKEN,
        )
        logger.debug("Batch closed: %d records, %d bytes", batch.records, len(batch))
        return batch


def build_header(destination: str, batch: FinalizedBatch) -> bytes:
    """Build the POST request header for *batch*.

    Content-Length is the byte length of the finalized body.
    """
    return (
        "POST /api/put HTTP/1.1\r\n"
        f"Host: {destination}\r\n"
        "Content-Type: application/json\r\n"
        f"Content-Length: {len(batch.body)}\r\n"
        "\r\n"
    ).encode("utf-8")
