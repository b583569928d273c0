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
from typing import Any, BinaryIO, Iterable, Optional
from uuid import UUID

from fressian_handlers.exceptions import SerializationException
from fressian_handlers.lookup import as_write_lookup
from fressian_handlers.values import Symbol

from . import codes
from .core_handlers import CORE_WRITE_HANDLERS

__all__ = ["TaggedWriter"]

# Values eligible for the priority cache. Equality on these types implies an
# identical wire representation.
_CACHEABLE_TYPES = (str, bytes, int, Symbol, UUID)


def _priority_key(obj: Any) -> Optional[tuple]:
    obj_type = type(obj)
    if obj_type not in _CACHEABLE_TYPES:
        return None
    if obj_type is Symbol and obj.meta:
        return None
    return obj_type, obj


class TaggedWriter:
    """
    Writes values to a binary stream as primitives, lists and tagged records.

    Non-primitive values are dispatched to the write handler that the handler
    lookup resolves for their runtime type.
    """

    def __init__(self, stream: BinaryIO, handlers: Any = None):
        """
        :param stream: The binary output stream.
        :type stream: BinaryIO
        :param handlers: A WriteHandlerLookup or a ``{type: {tag: handler}}``
            table. Defaults to the core handlers only.
        """
        self.stream = stream
        self._lookup = as_write_lookup(handlers if handlers is not None else CORE_WRITE_HANDLERS)
        self._struct_cache: dict[str, int] = {}
        self._priority_cache: dict[tuple, int] = {}
        self._primitive_writers = {
            type(None): lambda _: self.write_null(),
            bool: self.write_bool,
            int: self.write_int,
            float: self.write_float,
            str: self.write_string,
            bytes: self.write_bytes,
            bytearray: self.write_bytes,
            list: self.write_list,
        }

    def write_object(self, obj: Any, cache: bool = False) -> None:
        """
        Write any value.

        :param obj: The value to write.
        :type obj: Any
        :param cache: Write the value once and refer back to it by index on
            later occurrences of an equal value.
        :type cache: bool
        """
        if cache:
            key = _priority_key(obj)
            if key is not None:
                index = self._priority_cache.get(key)
                if index is not None:
                    self._write_code(codes.GET_PRIORITY_CACHE)
                    self.stream.write(struct.pack(">I", index))
                    return
                self._write_code(codes.PUT_PRIORITY_CACHE)
                self._write_value(obj)
                self._priority_cache[key] = len(self._priority_cache)
                return
        self._write_value(obj)

    def _write_value(self, obj: Any) -> None:
        obj_type = type(obj)
        primitive_writer = self._primitive_writers.get(obj_type)
        if primitive_writer is not None:
            primitive_writer(obj)
            return

        handler = self._lookup.get_handler(obj_type)
        if handler is None:
            raise SerializationException(f"No write handler for type {obj_type.__module__}.{obj_type.__qualname__}")
        handler.write(self, obj)

    def write_tag(self, tag: str, field_count: int) -> None:
        """
        Start a tagged record. Exactly ``field_count`` values must follow.
        """
        index = self._struct_cache.get(tag)
        if index is None:
            self._struct_cache[tag] = len(self._struct_cache)
            self._write_code(codes.STRUCT)
            self._write_raw_string(tag)
            self.stream.write(struct.pack(">H", field_count))
        else:
            self._write_code(codes.STRUCT_CACHED)
            self.stream.write(struct.pack(">HH", index, field_count))

    def write_null(self) -> None:
        self._write_code(codes.NULL)

    def write_bool(self, value: bool) -> None:
        self._write_code(codes.TRUE if value else codes.FALSE)

    def write_int(self, value: int) -> None:
        if codes.SMALL_INT_MIN <= value <= codes.SMALL_INT_MAX:
            self._write_code(codes.SMALL_INT_BASE + value)
        elif codes.INT64_MIN <= value <= codes.INT64_MAX:
            self._write_code(codes.INT)
            self.stream.write(struct.pack(">q", value))
        else:
            length = (value.bit_length() + 8) // 8
            self._write_code(codes.BIGINT)
            self.stream.write(struct.pack(">I", length))
            self.stream.write(value.to_bytes(length, "big", signed=True))

    def write_float(self, value: float) -> None:
        self._write_code(codes.DOUBLE)
        self.stream.write(struct.pack(">d", value))

    def write_string(self, value: str) -> None:
        encoded = value.encode("utf-8")
        if len(encoded) <= codes.SHORT_STRING_MAX:
            self._write_code(len(encoded))
        else:
            self._write_code(codes.STRING)
            self.stream.write(struct.pack(">I", len(encoded)))
        self.stream.write(encoded)

    def write_bytes(self, value: bytes) -> None:
        self._write_code(codes.BYTES)
        self.stream.write(struct.pack(">I", len(value)))
        self.stream.write(bytes(value))

    def write_list(self, items: Iterable[Any]) -> None:
        self.begin_closed_list()
        for item in items:
            self.write_object(item)
        self.end_list()

    def begin_closed_list(self) -> None:
        self._write_code(codes.LIST)

    def end_list(self) -> None:
        self._write_code(codes.END)

    def _write_raw_string(self, value: str) -> None:
        encoded = value.encode("utf-8")
        self.stream.write(struct.pack(">H", len(encoded)))
        self.stream.write(encoded)

    def _write_code(self, code: int) -> None:
        self.stream.write(bytes([code]))
