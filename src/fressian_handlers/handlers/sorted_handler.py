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

"""
Handlers for sorted sets and maps.

Comparator functions have no portable serialized form. A sorted collection
using anything but the natural ordering must name its comparator in its
metadata under ``COMPARATOR_NAME``; the reading side resolves that name back
to a live comparator.
"""

from typing import Any, Callable, Optional, Union

from fressian_handlers.exceptions import UnserializableComparatorError
from fressian_handlers.resolver import SymbolResolver
from fressian_handlers.values import COMPARATOR_NAME, DEFAULT_COMPARATOR, SortedMap, SortedSet, Symbol, meta, with_meta

from .envelope import read_map_pairs, read_meta, write_map, write_meta

__all__ = [
    "sorted_comparator_name",
    "write_sorted_set",
    "write_sorted_map",
    "sorted_set_reader",
    "sorted_map_reader",
]


def sorted_comparator_name(coll: Union[SortedSet, SortedMap]) -> Optional[Union[Symbol, str]]:
    """
    Get the symbolic name of a sorted collection's comparator.

    :param coll: The sorted collection.
    :type coll: Union[SortedSet, SortedMap]
    :return: The name from the collection's metadata, or None when the
        collection uses the natural ordering.
    :rtype: Optional[Union[Symbol, str]]
    :raises UnserializableComparatorError: If the comparator is custom and
        has no name.
    """
    m = meta(coll)
    name = m.get(COMPARATOR_NAME) if m else None
    if name is None and coll.comparator is not DEFAULT_COMPARATOR:
        raise UnserializableComparatorError(coll, coll.comparator)
    return name


def _write_sorted(writer, tag: str, coll: Any, write_payload: Callable[[Any, Any], None]) -> None:
    # Raises before the tag is written.
    name = sorted_comparator_name(coll)
    writer.write_tag(tag, 3)
    if name is not None:
        writer.write_object(name, cache=True)
    else:
        writer.write_null()
    write_meta(writer, meta(coll))
    write_payload(writer, coll)


def write_sorted_set(writer, tag: str, coll: SortedSet) -> None:
    _write_sorted(writer, tag, coll, lambda w, s: w.write_list(s))


def write_sorted_map(writer, tag: str, coll: SortedMap) -> None:
    _write_sorted(writer, tag, coll, write_map)


def _read_sorted(
    reader,
    resolver: SymbolResolver,
    build: Callable[[Any, Any], Any],
    read_payload: Callable[[Any], Any],
) -> Any:
    name = reader.read_object()
    comparator = resolver.resolve(name) if name is not None else None
    m = read_meta(reader)
    coll = build(read_payload(reader), comparator)
    if m is not None:
        coll = with_meta(coll, m)
    return coll


def sorted_set_reader(resolver: SymbolResolver) -> Callable[[Any], SortedSet]:
    """
    Create the sorted set read function.

    :param resolver: Resolves comparator names.
    :type resolver: SymbolResolver
    """

    def read_sorted_set(reader) -> SortedSet:
        return _read_sorted(reader, resolver, SortedSet, lambda r: r.read_object())

    return read_sorted_set


def sorted_map_reader(resolver: SymbolResolver) -> Callable[[Any], SortedMap]:
    """
    Create the sorted map read function.

    :param resolver: Resolves comparator names.
    :type resolver: SymbolResolver
    """

    def read_sorted_map(reader) -> SortedMap:
        return _read_sorted(reader, resolver, SortedMap, read_map_pairs)

    return read_sorted_map
