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

from typing import Any

from fressian_handlers.values import (
    EMPTY_LIST,
    LazySeq,
    MapEntry,
    PersistentList,
    PersistentMap,
    PersistentSet,
    Seq,
    Vector,
    meta,
)

from .envelope import read_meta, read_with_meta, write_map, write_meta, write_with_meta

__all__ = [
    "read_set",
    "read_vector",
    "read_list",
    "write_empty_list",
    "read_empty_list",
    "read_seq",
    "read_lazy_seq",
    "write_persistent_map",
    "read_persistent_map",
    "write_map_entry",
    "read_map_entry",
]


def read_set(reader) -> PersistentSet:
    return read_with_meta(reader, PersistentSet)


def read_vector(reader) -> Vector:
    return read_with_meta(reader, Vector)


def read_list(reader) -> PersistentList:
    return read_with_meta(reader, PersistentList)


def write_empty_list(writer, tag: str, obj: Any) -> None:
    """
    The empty list carries no elements, only its metadata (or null).
    """
    writer.write_tag(tag, 1)
    write_meta(writer, meta(obj))


def read_empty_list(reader) -> PersistentList:
    # Without metadata this is the canonical instance itself.
    return EMPTY_LIST.with_meta(read_meta(reader))


def read_seq(reader) -> Seq:
    return read_with_meta(reader, Seq)


def read_lazy_seq(reader) -> LazySeq:
    return read_with_meta(reader, LazySeq.of)


def write_persistent_map(writer, tag: str, obj: Any) -> None:
    write_with_meta(writer, tag, obj, write_map)


def read_persistent_map(reader) -> PersistentMap:
    return read_with_meta(reader, PersistentMap)


def write_map_entry(writer, tag: str, obj: MapEntry) -> None:
    writer.write_tag(tag, 2)
    writer.write_object(obj[0], cache=True)
    writer.write_object(obj[1])


def read_map_entry(reader) -> MapEntry:
    key = reader.read_object()
    return MapEntry(key, reader.read_object())
