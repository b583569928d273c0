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

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from fressian_handlers._interface import ReadHandler, WriteHandler

__all__ = [
    "TaggedObject",
    "MapHandler",
    "SetHandler",
    "InstHandler",
    "UUIDHandler",
    "DecimalHandler",
    "TaggedObjectHandler",
    "CORE_WRITE_HANDLERS",
    "CORE_READ_HANDLERS",
]


@dataclass(frozen=True)
class TaggedObject:
    """A tagged record for which the reader had no handler."""

    tag: str
    values: tuple


class MapHandler(WriteHandler, ReadHandler):
    """
    Generic ``map`` record: one field holding a list of alternating keys and
    values. Reads back as a ``dict``.
    """

    def write(self, writer, obj: Any) -> None:
        writer.write_tag("map", 1)
        writer.begin_closed_list()
        for key, value in obj.items():
            writer.write_object(key)
            writer.write_object(value)
        writer.end_list()

    def read(self, reader, tag: str, field_count: int) -> dict:
        items = reader.read_object()
        return dict(zip(items[0::2], items[1::2]))


class SetHandler(WriteHandler, ReadHandler):
    """Generic ``set`` record for mutable sets."""

    def write(self, writer, obj: Any) -> None:
        writer.write_tag("set", 1)
        writer.write_list(obj)

    def read(self, reader, tag: str, field_count: int) -> set:
        return set(reader.read_object())


class InstHandler(WriteHandler, ReadHandler):
    """
    ``inst`` record for datetime values, stored in ISO-8601 form so that the
    timezone (or its absence) survives the round trip.
    """

    def write(self, writer, obj: datetime) -> None:
        writer.write_tag("inst", 1)
        writer.write_string(obj.isoformat())

    def read(self, reader, tag: str, field_count: int) -> datetime:
        return datetime.fromisoformat(reader.read_object())


class UUIDHandler(WriteHandler, ReadHandler):
    def write(self, writer, obj: UUID) -> None:
        writer.write_tag("uuid", 1)
        writer.write_bytes(obj.bytes)

    def read(self, reader, tag: str, field_count: int) -> UUID:
        return UUID(bytes=reader.read_object())


class DecimalHandler(WriteHandler, ReadHandler):
    """``bigdec`` record; the string form preserves precision."""

    def write(self, writer, obj: Decimal) -> None:
        writer.write_tag("bigdec", 1)
        writer.write_string(str(obj))

    def read(self, reader, tag: str, field_count: int) -> Decimal:
        return Decimal(reader.read_object())


class TaggedObjectHandler(WriteHandler):
    """Writes an unknown record back out exactly as it was read."""

    def write(self, writer, obj: TaggedObject) -> None:
        writer.write_tag(obj.tag, len(obj.values))
        for value in obj.values:
            writer.write_object(value)


_map_handler = MapHandler()
_set_handler = SetHandler()
_inst_handler = InstHandler()
_uuid_handler = UUIDHandler()
_decimal_handler = DecimalHandler()

CORE_WRITE_HANDLERS: dict[type, dict[str, WriteHandler]] = {
    dict: {"map": _map_handler},
    set: {"set": _set_handler},
    datetime: {"inst": _inst_handler},
    UUID: {"uuid": _uuid_handler},
    Decimal: {"bigdec": _decimal_handler},
    TaggedObject: {"tagged-object": TaggedObjectHandler()},
}

CORE_READ_HANDLERS: dict[str, ReadHandler] = {
    "map": _map_handler,
    "set": _set_handler,
    "inst": _inst_handler,
    "uuid": _uuid_handler,
    "bigdec": _decimal_handler,
}
