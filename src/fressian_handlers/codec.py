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

import io
import logging
from typing import Any, Iterable, Optional

from ._interface import Codec
from .exceptions import DeserializationException, SerializationException
from .handlers import BuilderNameCache, get_read_handler_lookup, get_write_handler_lookup
from .resolver import SymbolResolver
from .wire import TaggedReader, TaggedWriter

__all__ = ["FressianCodec"]

logger = logging.getLogger(__name__)


class FressianCodec(Codec):
    """
    Encodes values with the full handler set.

    Every call runs with fresh identity caches, so a codec instance can be
    shared between threads. The resolver and builder-name cache are shared by
    all calls.
    """

    def __init__(
        self,
        resolver: Optional[SymbolResolver] = None,
        builder_names: Optional[BuilderNameCache] = None,
        allow_import: bool = False,
    ):
        """
        Initialize the codec.

        :param resolver: Resolves comparator, builder and class names when
            decoding. Defaults to an empty resolver.
        :type resolver: Optional[SymbolResolver]
        :param builder_names: Memo of record builder names.
        :type builder_names: Optional[BuilderNameCache]
        :param allow_import: Let the default resolver import modules to
            resolve names that were not registered. Ignored when a resolver
            is given.
        :type allow_import: bool
        """
        self.resolver = resolver if resolver is not None else SymbolResolver(allow_import=allow_import)
        self.builder_names = builder_names if builder_names is not None else BuilderNameCache()

    def _writer(self, stream) -> TaggedWriter:
        return TaggedWriter(stream, get_write_handler_lookup(None, self.resolver, self.builder_names))

    def _reader(self, stream) -> TaggedReader:
        return TaggedReader(stream, get_read_handler_lookup(None, self.resolver, self.builder_names))

    def encode(self, obj: Any) -> bytes:
        return self.encode_all([obj])

    def decode(self, data: bytes) -> Any:
        values = self.decode_all(data)
        if len(values) != 1:
            raise DeserializationException(f"Expected exactly one value, found {len(values)}")
        return values[0]

    def encode_all(self, values: Iterable[Any]) -> bytes:
        """
        Encode several values into one stream. Instances shared between the
        values are written once.

        :param values: The values to encode, in order.
        :type values: Iterable[Any]
        :return: The encoded stream.
        :rtype: bytes
        :raises SerializationException: If any value cannot be encoded.
        """
        stream = io.BytesIO()
        writer = self._writer(stream)
        try:
            for value in values:
                writer.write_object(value)
        except SerializationException as e:
            logger.error("Failed to encode value: %s", e)
            raise
        except Exception as e:
            logger.error("Failed to encode value: %s", e)
            raise SerializationException(f"Encoding failed: {e}", cause=e) from e
        return stream.getvalue()

    def decode_all(self, data: bytes) -> list[Any]:
        """
        Decode every value in a stream.

        :param data: The encoded stream.
        :type data: bytes
        :return: The decoded values, in order.
        :rtype: list[Any]
        :raises DeserializationException: If the stream cannot be decoded.
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"Expected bytes, got {type(data)}")
        reader = self._reader(io.BytesIO(data))
        try:
            return list(reader.read_objects())
        except DeserializationException as e:
            logger.error("Failed to decode stream: %s", e)
            raise
        except Exception as e:
            logger.error("Failed to decode stream: %s", e)
            raise DeserializationException(f"Decoding failed: {e}", cause=e) from e
