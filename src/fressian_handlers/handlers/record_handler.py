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

import dataclasses
import threading
import weakref
from typing import Any, Callable

from pydantic import BaseModel

from fressian_handlers.resolver import SymbolResolver
from fressian_handlers.values import Symbol, builder_symbol, meta, with_meta

from .envelope import read_meta, write_map, write_meta

__all__ = ["BuilderNameCache", "record_fields", "record_writer", "record_reader"]


class BuilderNameCache:
    """
    Memoizes the builder symbol of each record type.

    Types are held weakly so the cache never keeps a type alive. Sharing one
    instance between codecs and threads is safe.
    """

    def __init__(self):
        self._names: "weakref.WeakKeyDictionary[type, Symbol]" = weakref.WeakKeyDictionary()
        self._lock = threading.Lock()

    def get(self, cls: type) -> Symbol:
        """
        Get the builder symbol for a record type.

        :param cls: The record type.
        :type cls: type
        :return: The builder symbol; the same instance on every call for a type.
        :rtype: Symbol
        """
        with self._lock:
            name = self._names.get(cls)
            if name is None:
                name = builder_symbol(cls)
                self._names[cls] = name
            return name

    def __len__(self) -> int:
        with self._lock:
            return len(self._names)


def record_fields(record: Any) -> dict[str, Any]:
    """
    Get the constructor fields of a record, in declaration order.

    :param record: A dataclass instance or pydantic model.
    :type record: Any
    :return: Field names mapped to their current values.
    :rtype: dict[str, Any]
    """
    if isinstance(record, BaseModel):
        return {name: getattr(record, name) for name in type(record).model_fields}
    return {field.name: getattr(record, field.name) for field in dataclasses.fields(record) if field.init}


def record_writer(builder_names: BuilderNameCache) -> Callable[[Any, str, Any], None]:
    def write_record(writer, tag: str, record: Any) -> None:
        writer.write_tag(tag, 3)
        writer.write_object(builder_names.get(type(record)), cache=True)
        write_map(writer, record_fields(record))
        write_meta(writer, meta(record))

    return write_record


def record_reader(resolver: SymbolResolver) -> Callable[[Any], Any]:
    def read_record(reader) -> Any:
        builder = resolver.resolve(reader.read_object())
        fields = reader.read_object()
        m = read_meta(reader)
        record = builder(fields)
        if m is not None:
            record = with_meta(record, m)
        return record

    return read_record
