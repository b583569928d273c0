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

import logging
from typing import Any, Callable, Tuple

from .codec import FressianCodec

__all__ = ["FressianSerializationService"]

logger = logging.getLogger(__name__)


class FressianSerializationService:
    """Factories for codecs and serialization function pairs"""

    @staticmethod
    def create_codec(**codec_options) -> FressianCodec:
        """
        Create a codec

        :param codec_options: Keyword options passed to FressianCodec
            (resolver, builder_names, allow_import)
        :return: Codec instance
        :raises Exception: If codec creation fails
        """
        try:
            return FressianCodec(**codec_options)
        except Exception as e:
            logger.error("Failed to create codec: %s", e)
            raise

    @staticmethod
    def create_serialization_functions(
        **codec_options,
    ) -> Tuple[Callable[..., bytes], Callable[[bytes], Any]]:
        """
        Create serializer and deserializer functions

        The serializer writes its arguments as one stream; the deserializer
        returns a single value as is and several values as a tuple.

        :param codec_options: Keyword options passed to FressianCodec
        :return: Tuple of (serializer_function, deserializer_function)
        :raises Exception: If creation fails
        """
        codec = FressianSerializationService.create_codec(**codec_options)

        def serialize(*args) -> bytes:
            """Serialize values to bytes"""
            try:
                return codec.encode_all(args)
            except Exception as e:
                logger.error("Failed to serialize values: %s", e)
                raise

        def deserialize(data: bytes) -> Any:
            """Deserialize bytes to values"""
            if not isinstance(data, bytes):
                raise TypeError(f"Expected bytes, got {type(data)}")
            try:
                values = codec.decode_all(data)
            except Exception as e:
                logger.error("Failed to deserialize values: %s", e)
                raise
            if len(values) == 1:
                return values[0]
            return tuple(values)

        return serialize, deserialize
