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

import abc
from typing import Any, Mapping, Optional

from ._interface import ReadHandler, ReadHandlerLookup, WriteHandler, WriteHandlerLookup

__all__ = ["AssociativeLookup", "TagLookup", "InheritanceLookup", "as_write_lookup", "as_read_lookup"]


class AssociativeLookup(WriteHandlerLookup):
    """
    Exact-type lookup over a write handler table of the form
    ``{type: {tag: WriteHandler}}``.
    """

    def __init__(self, table: Mapping[type, Mapping[str, WriteHandler]]):
        self._table = dict(table)

    def keys(self) -> list[type]:
        return list(self._table)

    def get_handler(self, obj_type: type) -> Optional[WriteHandler]:
        by_tag = self._table.get(obj_type)
        if not by_tag:
            return None
        # Each registered type writes under exactly one tag.
        return next(iter(by_tag.values()))


class TagLookup(ReadHandlerLookup):
    """
    Exact-match lookup over a read handler table ``{tag: ReadHandler}``.
    """

    def __init__(self, table: Mapping[str, ReadHandler]):
        self._table = dict(table)

    def tags(self) -> list[str]:
        return list(self._table)

    def get_handler(self, tag: str) -> Optional[ReadHandler]:
        return self._table.get(tag)


class InheritanceLookup(WriteHandlerLookup):
    """
    Inheritance-aware write lookup.

    Resolution order for a runtime type:

    1. the exact type;
    2. each class of the type's MRO, nearest first;
    3. each registered abstract base class the type is a virtual subclass of,
       in registration order.

    The result, including a miss, is cached per type.
    """

    def __init__(self, lookup: AssociativeLookup):
        self._lookup = lookup
        self._capabilities = [key for key in lookup.keys() if isinstance(key, abc.ABCMeta)]
        self._type_cache: dict[type, Optional[WriteHandler]] = {}

    def get_handler(self, obj_type: type) -> Optional[WriteHandler]:
        if obj_type in self._type_cache:
            return self._type_cache[obj_type]
        handler = self._resolve(obj_type)
        self._type_cache[obj_type] = handler
        return handler

    def _resolve(self, obj_type: type) -> Optional[WriteHandler]:
        for klass in obj_type.__mro__:
            handler = self._lookup.get_handler(klass)
            if handler is not None:
                return handler

        for capability in self._capabilities:
            if issubclass(obj_type, capability):
                return self._lookup.get_handler(capability)
        return None


def as_write_lookup(handlers: Any) -> WriteHandlerLookup:
    """Accept a lookup or a raw ``{type: {tag: handler}}`` table."""
    if isinstance(handlers, WriteHandlerLookup):
        return handlers
    return InheritanceLookup(AssociativeLookup(handlers))


def as_read_lookup(handlers: Any) -> ReadHandlerLookup:
    """Accept a lookup or a raw ``{tag: handler}`` table."""
    if isinstance(handlers, ReadHandlerLookup):
        return handlers
    return TagLookup(handlers)
