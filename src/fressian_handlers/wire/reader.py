#
# Licensed to the Apache Software Foundation (ASF) under one or more
# contributor license agreements.  See the NOTICE file distributed with
# this work for additional information regarding copyright ownership.
# The ASF licenses this file to You under the Apache License, Version 2.0
# (the "License"); you may not use this file except in compliance with
# the License.  You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import struct
from typing import Any, BinaryIO, Iterator

from fressian_handlers.exceptions import CacheConsistencyError, DeserializationException
from fressian_handlers.lookup import as_read_lookup

from . import codes
from .core_handlers import CORE_READ_HANDLERS, TaggedObject

__all__ = ["TaggedReader"]


class TaggedReader:
    """
    Reads values written by :class:`TaggedWriter`.

    Tagged records are dispatched to the read handler registered for their
    exact tag; records with an unknown tag are returned as ``TaggedObject``.
    """

    def __init__(self, stream: BinaryIO, handlers: Any = None):
        """
        :param stream: The binary input stream.
        :type stream: BinaryIO
        :param handlers: A ReadHandlerLookup or a ``{tag: handler}`` table.
            Defaults to the core handlers only.
        """
        self.stream = stream
        self._lookup = as_read_lookup(handlers if handlers is not None else CORE_READ_HANDLERS)
        self._struct_cache: list[str] = []
        self._priority_cache: list[Any] = []
        self._code_readers = {
            codes.NULL: lambda: None,
            codes.TRUE: lambda: True,
            codes.FALSE: lambda: False,
            codes.INT: lambda: struct.unpack(">q", self._read(8))[0],
            codes.BIGINT: self._read_bigint,
            codes.DOUBLE: lambda: struct.unpack(">d", self._read(8))[0],
            codes.STRING: lambda: self._read(self._read_u32()).decode("utf-8"),
            codes.BYTES: lambda: self._read(self._read_u32()),
            codes.LIST: self._read_list,
            codes.STRUCT: self._read_struct_type,
            codes.STRUCT_CACHED: self._read_cached_struct,
            codes.PUT_PRIORITY_CACHE: self._read_put_priority,
            codes.GET_PRIORITY_CACHE: self._read_get_priority,
        }

    def read_object(self) -> Any:
        """Read the next value from the stream."""
        return self._read_value(self._read_byte())

    def read_int(self) -> int:
        """Read the next value, which must be an integer."""
        value = self.read_object()
        if type(value) is not int:
            raise DeserializationException(f"Expected an int, got {type(value).__name__}")
        return value

    def read_objects(self) -> Iterator[Any]:
        """Read top-level values until the stream is exhausted."""
        while True:
            data = self.stream.read(1)
            if not data:
                return
            yield self._read_value(data[0])

    def _read(self, n: int) -> bytes:
        data = self.stream.read(n)
        if len(data) != n:
            raise DeserializationException(f"Expected {n} bytes, got {len(data)}")
        return data

    def _read_byte(self) -> int:
        data = self.stream.read(1)
        if not data:
            raise DeserializationException("Unexpected end of stream")
        return data[0]

    def _read_u16(self) -> int:
        return struct.unpack(">H", self._read(2))[0]

    def _read_u32(self) -> int:
        return struct.unpack(">I", self._read(4))[0]

    def _read_value(self, code: int) -> Any:
        if code <= codes.SHORT_STRING_MAX:
            return self._read(code).decode("utf-8")
        if codes.SMALL_INT_BASE + codes.SMALL_INT_MIN <= code <= codes.SMALL_INT_BASE + codes.SMALL_INT_MAX:
            return code - codes.SMALL_INT_BASE

        code_reader = self._code_readers.get(code)
        if code_reader is None:
            if code == codes.END:
                raise DeserializationException("List end outside of a list")
            raise DeserializationException(f"Unknown code: {hex(code)}")
        return code_reader()

    def _read_bigint(self) -> int:
        return int.from_bytes(self._read(self._read_u32()), "big", signed=True)

    def _read_list(self) -> list:
        items = []
        while True:
            code = self._read_byte()
            if code == codes.END:
                return items
            items.append(self._read_value(code))

    def read_fields(self, tag: str) -> tuple:
        """
        Read the next value, which must be a record tagged ``tag``, as its raw
        field values without running the record's handler.

        :param tag: The expected tag.
        :type tag: str
        :return: The field values, in order.
        :rtype: tuple
        :raises DeserializationException: If the next value is not such a record.
        """
        code = self._read_byte()
        if code == codes.STRUCT:
            actual, field_count = self._read_struct_header()
        elif code == codes.STRUCT_CACHED:
            actual, field_count = self._read_cached_struct_header()
        else:
            raise DeserializationException(f"Expected a {tag!r} record, got code {hex(code)}")
        if actual != tag:
            raise DeserializationException(f"Expected a {tag!r} record, got {actual!r}")
        return tuple(self.read_object() for _ in range(field_count))

    def _read_struct_header(self) -> tuple[str, int]:
        tag = self._read(self._read_u16()).decode("utf-8")
        field_count = self._read_u16()
        self._struct_cache.append(tag)
        return tag, field_count

    def _read_cached_struct_header(self) -> tuple[str, int]:
        index = self._read_u16()
        field_count = self._read_u16()
        if index >= len(self._struct_cache):
            raise CacheConsistencyError("struct", index, len(self._struct_cache))
        return self._struct_cache[index], field_count

    def _read_struct_type(self) -> Any:
        return self._read_struct(*self._read_struct_header())

    def _read_cached_struct(self) -> Any:
        return self._read_struct(*self._read_cached_struct_header())

    def _read_struct(self, tag: str, field_count: int) -> Any:
        handler = self._lookup.get_handler(tag)
        if handler is not None:
            return handler.read(self, tag, field_count)
        return TaggedObject(tag, tuple(self.read_object() for _ in range(field_count)))

    def _read_put_priority(self) -> Any:
        value = self.read_object()
        self._priority_cache.append(value)
        return value

    def _read_get_priority(self) -> Any:
        index = self._read_u32()
        if index >= len(self._priority_cache):
            raise CacheConsistencyError("priority", index, len(self._priority_cache))
        return self._priority_cache[index]
