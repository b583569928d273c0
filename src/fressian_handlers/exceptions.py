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

from typing import Any, Optional

__all__ = [
    "SerializationException",
    "DeserializationException",
    "UnserializableComparatorError",
    "UnresolvableReferenceError",
    "CacheConsistencyError",
]


class SerializationException(Exception):
    """Exception raised when encoding or serialization fails."""

    def __init__(self, message: str, *, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class DeserializationException(Exception):
    """Exception raised when decoding or deserialization fails."""

    def __init__(self, message: str, *, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class UnserializableComparatorError(SerializationException):
    """
    Raised when a sorted collection uses a custom comparator but carries no
    comparator name in its metadata.
    """

    def __init__(self, collection: Any, comparator: Any):
        super().__init__(
            "Cannot serialize sorted collection with non-default comparator "
            f"{comparator!r} because no comparator name is provided in metadata: {collection!r}"
        )
        self.collection = collection
        self.comparator = comparator


class UnresolvableReferenceError(DeserializationException):
    """Raised when a symbolic name cannot be resolved in the reading environment."""

    def __init__(self, name: Any, *, cause: Optional[Exception] = None):
        super().__init__(f"Unable to resolve reference {name!s}", cause=cause)
        self.name = name


class CacheConsistencyError(DeserializationException):
    """Raised when the stream references a cache index that was never populated."""

    def __init__(self, cache_name: str, index: int, size: int):
        super().__init__(f"No {cache_name} cache entry for index {index} (cache holds {size} entries)")
        self.index = index
        self.size = size
