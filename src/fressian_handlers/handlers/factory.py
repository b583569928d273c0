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
from typing import Any, Callable

from fressian_handlers._interface import ReadHandler, WriteHandler

from .cache import ReadIdentityCache, WriteIdentityCache

__all__ = [
    "HandlerPair",
    "WriteFunction",
    "ReadFunction",
    "create_handler",
    "create_identity_based_handler",
]

# write_fn(writer, tag, obj) and read_fn(reader) -> obj
WriteFunction = Callable[[Any, str, Any], None]
ReadFunction = Callable[[Any], Any]


@dataclass
class HandlerPair:
    """
    The handlers for one source type.

    :param cls: The type (or capability ABC) the write handler is registered for.
    :type cls: type
    :param tag: The wire tag of the full representation.
    :type tag: str
    :param writer: The write handler.
    :type writer: WriteHandler
    :param readers: Read handlers by exact tag.
    :type readers: dict[str, ReadHandler]
    """

    cls: type
    tag: str
    writer: WriteHandler
    readers: dict[str, ReadHandler]


class FunctionWriteHandler(WriteHandler):
    __slots__ = ["_tag", "_write_fn"]

    def __init__(self, tag: str, write_fn: WriteFunction):
        self._tag = tag
        self._write_fn = write_fn

    def write(self, writer, obj: Any) -> None:
        self._write_fn(writer, self._tag, obj)


class FunctionReadHandler(ReadHandler):
    __slots__ = ["_read_fn"]

    def __init__(self, read_fn: ReadFunction):
        self._read_fn = read_fn

    def read(self, reader, tag: str, field_count: int) -> Any:
        return self._read_fn(reader)


class IdentityWriteHandler(WriteHandler):
    """
    Writes an instance in full the first time it is seen and as an index
    record under ``<tag>-idx`` on every later occurrence.
    """

    __slots__ = ["_tag", "_indexed_tag", "_write_fn", "_cache"]

    def __init__(self, tag: str, write_fn: WriteFunction, cache: WriteIdentityCache):
        self._tag = tag
        self._indexed_tag = f"{tag}-idx"
        self._write_fn = write_fn
        self._cache = cache

    def write(self, writer, obj: Any) -> None:
        index = self._cache.lookup(obj)
        if index is not None:
            writer.write_tag(self._indexed_tag, 1)
            writer.write_int(index)
            return

        # Nested objects are written, and so registered, before this one. The
        # reader builds them in the same bottom-up order.
        self._write_fn(writer, self._tag, obj)
        self._cache.register(obj)


class IdentityReadHandler(ReadHandler):
    """Builds the full representation and records it in the read cache."""

    __slots__ = ["_read_fn", "_cache"]

    def __init__(self, read_fn: ReadFunction, cache: ReadIdentityCache):
        self._read_fn = read_fn
        self._cache = cache

    def read(self, reader, tag: str, field_count: int) -> Any:
        return self._cache.append(self._read_fn(reader))


class IndexReadHandler(ReadHandler):
    """Resolves an index record against the read cache."""

    __slots__ = ["_cache"]

    def __init__(self, cache: ReadIdentityCache):
        self._cache = cache

    def read(self, reader, tag: str, field_count: int) -> Any:
        return self._cache.get(reader.read_int())


def create_handler(cls: type, tag: str, write_fn: WriteFunction, read_fn: ReadFunction) -> HandlerPair:
    """
    Create a handler pair without identity caching.

    :param cls: The source type.
    :type cls: type
    :param tag: The wire tag.
    :type tag: str
    :param write_fn: ``write_fn(writer, tag, obj)``.
    :param read_fn: ``read_fn(reader) -> obj``.
    :return: The handler pair.
    :rtype: HandlerPair
    """
    return HandlerPair(
        cls=cls,
        tag=tag,
        writer=FunctionWriteHandler(tag, write_fn),
        readers={tag: FunctionReadHandler(read_fn)},
    )


def create_identity_based_handler(
    cls: type,
    tag: str,
    write_fn: WriteFunction,
    read_fn: ReadFunction,
    cache: Any,
) -> HandlerPair:
    """
    Create a handler pair that writes each instance once per stream.

    Later references to an instance already written are emitted as a
    one-field ``<tag>-idx`` record holding the instance's cache index. The
    cache is a :class:`WriteIdentityCache` when the pair is used for writing
    and a :class:`ReadIdentityCache` when it is used for reading; the handlers
    of the other direction are never invoked.

    :param cls: The source type.
    :type cls: type
    :param tag: The wire tag of the full representation.
    :type tag: str
    :param write_fn: ``write_fn(writer, tag, obj)``.
    :param read_fn: ``read_fn(reader) -> obj``.
    :param cache: The identity cache shared by every handler of one operation.
    :return: The handler pair.
    :rtype: HandlerPair
    """
    return HandlerPair(
        cls=cls,
        tag=tag,
        writer=IdentityWriteHandler(tag, write_fn, cache),
        readers={
            f"{tag}-idx": IndexReadHandler(cache),
            tag: IdentityReadHandler(read_fn, cache),
        },
    )
