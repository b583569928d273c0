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

from collections.abc import Mapping
from typing import Any, Callable, Optional

from fressian_handlers._interface import WriteHandler
from fressian_handlers.values import PersistentMap, meta, with_meta

__all__ = [
    "write_map",
    "read_map_pairs",
    "write_list",
    "write_meta",
    "write_with_meta",
    "read_meta",
    "read_with_meta",
    "MapWriteHandler",
]


def write_map(writer, mapping: Mapping) -> None:
    """
    Write a mapping under the generic ``map`` tag.

    The single field is a closed list of alternating keys and values. Keys go
    through the writer's priority cache since the same keys tend to repeat
    across many maps.

    :param writer: The tagged writer.
    :param mapping: The mapping to write.
    :type mapping: Mapping
    """
    writer.write_tag("map", 1)
    writer.begin_closed_list()
    for key, value in mapping.items():
        writer.write_object(key, cache=True)
        writer.write_object(value)
    writer.end_list()


def read_map_pairs(reader) -> list[tuple[Any, Any]]:
    """Read a ``map`` record as its key/value pairs, keeping keys that are not hashable."""
    (items,) = reader.read_fields("map")
    return list(zip(items[0::2], items[1::2]))


def write_list(writer, obj: Any) -> None:
    writer.write_list(obj)


def write_meta(writer, m: Optional[Mapping]) -> None:
    """Write metadata, or an explicit null when there is none."""
    if m:
        writer.write_object(m)
    else:
        writer.write_null()


def write_with_meta(writer, tag: str, obj: Any, write_fn: Callable[[Any, Any], None] = write_list) -> None:
    """
    Write ``obj`` as a two-field record: its representation, then its
    metadata or null.

    :param writer: The tagged writer.
    :param tag: The record tag.
    :type tag: str
    :param obj: The value.
    :type obj: Any
    :param write_fn: ``write_fn(writer, obj)`` writing the first field;
        defaults to writing the elements as a list.
    """
    writer.write_tag(tag, 2)
    write_fn(writer, obj)
    write_meta(writer, meta(obj))


def read_meta(reader) -> Optional[Mapping]:
    """
    Read a metadata field.

    :return: The metadata, or None when the field was null or empty.
    :rtype: Optional[Mapping]
    """
    m = reader.read_object()
    if not m:
        return None
    if not isinstance(m, Mapping):
        m = dict(m)
    # Plain maps come back mutable from the core handler.
    if isinstance(m, dict):
        m = PersistentMap(m)
    return m


def read_with_meta(reader, build_fn: Callable[[Any], Any]) -> Any:
    """
    Read a record written by :func:`write_with_meta`.

    :param reader: The tagged reader.
    :param build_fn: Builds the bare value from the first field.
    :return: The value, carrying its metadata when any was written.
    """
    obj = build_fn(reader.read_object())
    m = read_meta(reader)
    if m is not None:
        obj = with_meta(obj, m)
    return obj


class MapWriteHandler(WriteHandler):
    """Writes plain mappings through :func:`write_map`."""

    def write(self, writer, obj: Any) -> None:
        write_map(writer, obj)
