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
from typing import Any, Iterable, Optional

__all__ = [
    "WriteHandler",
    "ReadHandler",
    "WriteHandlerLookup",
    "ReadHandlerLookup",
    "Codec",
]


class WriteHandler(abc.ABC):
    """
    The write handler interface.
    """

    @abc.abstractmethod
    def write(self, writer: Any, obj: Any) -> None:
        """
        Write the object using the primitive writer.
        :param writer: The tagged writer.
        :type writer: TaggedWriter
        :param obj: The object to write.
        :type obj: Any
        """
        raise NotImplementedError()


class ReadHandler(abc.ABC):
    """
    The read handler interface.
    """

    @abc.abstractmethod
    def read(self, reader: Any, tag: str, field_count: int) -> Any:
        """
        Read the fields of a tagged record and rebuild the value.
        :param reader: The tagged reader, positioned at the first field.
        :type reader: TaggedReader
        :param tag: The tag that selected this handler.
        :type tag: str
        :param field_count: The number of fields that follow.
        :type field_count: int
        :return: The reconstructed value.
        :rtype: Any
        """
        raise NotImplementedError()


class WriteHandlerLookup(abc.ABC):
    """
    Resolves the write handler for a runtime type.
    """

    @abc.abstractmethod
    def get_handler(self, obj_type: type) -> Optional[WriteHandler]:
        """
        Get the write handler for the given type.
        :param obj_type: The runtime type of the value being written.
        :type obj_type: type
        :return: The handler, or None if nothing handles the type.
        :rtype: Optional[WriteHandler]
        """
        raise NotImplementedError()


class ReadHandlerLookup(abc.ABC):
    """
    Resolves the read handler for a wire tag.
    """

    @abc.abstractmethod
    def get_handler(self, tag: str) -> Optional[ReadHandler]:
        """
        Get the read handler for the given tag.
        :param tag: The exact wire tag.
        :type tag: str
        :return: The handler, or None if the tag is unknown.
        :rtype: Optional[ReadHandler]
        """
        raise NotImplementedError()


class Codec(abc.ABC):
    """
    Base codec interface for encoding and decoding data.
    """

    @abc.abstractmethod
    def encode(self, obj: Any) -> bytes:
        """
        Encode a value into bytes
        :param obj: The value to encode.
        :type obj: Any
        :return: Encoded byte representation
        :rtype: bytes
        """
        raise NotImplementedError()

    @abc.abstractmethod
    def decode(self, data: bytes) -> Any:
        """
        Decode bytes into a value
        :param data: The bytes to decode.
        :type data: bytes
        :return: Decoded value
        :rtype: Any
        """
        raise NotImplementedError()

    @abc.abstractmethod
    def encode_all(self, values: Iterable[Any]) -> bytes:
        """
        Encode several values into a single stream.
        :param values: The values to encode, in order.
        :type values: Iterable[Any]
        :return: Encoded byte representation
        :rtype: bytes
        """
        raise NotImplementedError()

    @abc.abstractmethod
    def decode_all(self, data: bytes) -> list[Any]:
        """
        Decode every value in a stream.
        :param data: The bytes to decode.
        :type data: bytes
        :return: Decoded values, in order
        :rtype: list[Any]
        """
        raise NotImplementedError()
