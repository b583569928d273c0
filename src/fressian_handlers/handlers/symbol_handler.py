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

from typing import Any, Callable

from fressian_handlers.resolver import SymbolResolver
from fressian_handlers.values import Symbol, class_symbol

from .envelope import read_meta, write_meta

__all__ = ["write_symbol", "read_symbol", "write_class", "class_reader"]


def write_symbol(writer, tag: str, sym: Symbol) -> None:
    writer.write_tag(tag, 3)
    writer.write_object(sym.namespace, cache=True)
    writer.write_object(sym.name, cache=True)
    write_meta(writer, sym.meta)


def read_symbol(reader) -> Symbol:
    namespace = reader.read_object()
    name = reader.read_object()
    return Symbol(namespace, name, read_meta(reader))


def write_class(writer, tag: str, cls: type) -> None:
    """A class is written as its fully-qualified name."""
    writer.write_tag(tag, 1)
    writer.write_object(class_symbol(cls), cache=True)


def class_reader(resolver: SymbolResolver) -> Callable[[Any], type]:
    def read_class(reader) -> type:
        return resolver.resolve(reader.read_object())

    return read_class
