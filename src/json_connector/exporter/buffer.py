"""Growable byte buffer owned by an exporting instance."""

from __future__ import annotations

import json

# Longest label value copied into a record, in characters, before escaping.
MAX_LABEL_VALUE = 2048


def json_escape(value: str, max_length: int | None = None) -> str:
    """Return *value* escaped for embedding between double quotes in JSON.

    Quotes, backslashes and control characters are escaped; non-ASCII text
    is kept as UTF-8. When *max_length* is given the value is truncated
    first.
    """
    if max_length is not None:
        value = value[:max_length]
    return json.dumps(value, ensure_ascii=False)[1:-1]


class Buffer:
    """UTF-8 text accumulated as bytes, so ``len()`` is the wire length.

    Lone surrogates (undecodable OS bytes decoded with ``surrogateescape``)
    are written back as the original bytes. Any other lone surrogate is
    written as a ``\\uXXXX`` escape.
    """

    def __init__(self) -> None:
        self._data = bytearray()

    def strcat(self, text: str) -> None:
        try:
            self._data += text.encode("utf-8", "surrogateescape")
        except UnicodeEncodeError:
            self._data += text.encode("utf-8", "backslashreplace")

    def flush(self) -> None:
        """Drop the contents, keeping the buffer for reuse."""
        self._data.clear()

    def getvalue(self) -> bytes:
        return bytes(self._data)

    def tostring(self) -> str:
        return self._data.decode("utf-8", "surrogateescape")

    def __len__(self) -> int:
        return len(self._data)
