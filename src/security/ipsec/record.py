# -*- coding: utf-8 -*-
"""
RU: Двоичный формат записи для передачи дескрипторов алгоритмов.
EN: Binary record codec used to transport algorithm descriptors.

Wire layout (all integers little-endian signed int32):
    string:      [length:4][utf-8 bytes:length]     length == -1 -> None
    byte array:  [length:4][bytes:length]           length == -1 -> None
    int:         [value:4]

The codec knows nothing about algorithms; it only guarantees that every value
written is read back exactly.
"""

from __future__ import annotations

import struct
from typing import Final, List, Optional, Union

from src import get_logger
from src.security.ipsec.exceptions import (
    InvalidArgumentError,
    RecordFormatError,
    TruncatedRecordError,
)

_LOGGER: Final = get_logger(__name__)

_INT32: Final = struct.Struct("<i")
_NULL_LENGTH: Final[int] = -1
INT32_MIN: Final[int] = -(2**31)
INT32_MAX: Final[int] = 2**31 - 1

__all__ = [
    "RecordWriter",
    "RecordReader",
    "INT32_MIN",
    "INT32_MAX",
]


class RecordWriter:
    """
    Последовательная запись значений в буфер.

    Example:
        >>> w = RecordWriter()
        >>> w.write_string("cbc(aes)")
        >>> w.write_byte_array(b"\\x00" * 16)
        >>> w.write_int(128)
        >>> len(w.to_bytes())
        36
    """

    __slots__ = ("_chunks",)

    def __init__(self) -> None:
        self._chunks: List[bytes] = []

    def write_int(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"int expected, got {type(value).__name__}")
        if not INT32_MIN <= value <= INT32_MAX:
            raise InvalidArgumentError(
                "Value does not fit into int32", context={"value": value}
            )
        self._chunks.append(_INT32.pack(value))

    def write_byte_array(self, data: Optional[Union[bytes, bytearray, memoryview]]) -> None:
        if data is None:
            self._chunks.append(_INT32.pack(_NULL_LENGTH))
            return
        payload = bytes(data)
        self._chunks.append(_INT32.pack(len(payload)))
        self._chunks.append(payload)

    def write_string(self, value: Optional[str]) -> None:
        if value is None:
            self.write_byte_array(None)
            return
        if not isinstance(value, str):
            raise TypeError(f"str expected, got {type(value).__name__}")
        self.write_byte_array(value.encode("utf-8"))

    def to_bytes(self) -> bytes:
        return b"".join(self._chunks)

    def __len__(self) -> int:
        return sum(len(chunk) for chunk in self._chunks)


class RecordReader:
    """
    Последовательное чтение значений, записанных RecordWriter.

    Raises:
        TruncatedRecordError: Данных меньше, чем требует заголовок
        RecordFormatError: Некорректная длина, UTF-8 или лишние байты
    """

    __slots__ = ("_data", "_offset")

    def __init__(self, data: Union[bytes, bytearray, memoryview]) -> None:
        self._data = bytes(data)
        self._offset = 0

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def _take(self, size: int) -> bytes:
        if size > self.remaining:
            raise TruncatedRecordError(size, self.remaining, self._offset)
        chunk = self._data[self._offset : self._offset + size]
        self._offset += size
        return chunk

    def read_int(self) -> int:
        (value,) = _INT32.unpack(self._take(_INT32.size))
        return int(value)

    def read_byte_array(self) -> Optional[bytes]:
        start = self._offset
        length = self.read_int()
        if length == _NULL_LENGTH:
            return None
        if length < 0:
            raise RecordFormatError(
                "Negative length prefix", context={"length": length, "offset": start}
            )
        return self._take(length)

    def read_string(self) -> Optional[str]:
        start = self._offset
        raw = self.read_byte_array()
        if raw is None:
            return None
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            raise RecordFormatError(
                "String is not valid UTF-8", context={"offset": start}
            ) from None

    def finish(self) -> None:
        """Убедиться, что запись прочитана полностью."""
        if self.remaining:
            _LOGGER.debug("Record has %d trailing bytes", self.remaining)
            raise RecordFormatError(
                "Trailing bytes after record",
                context={"trailing": self.remaining, "offset": self._offset},
            )
