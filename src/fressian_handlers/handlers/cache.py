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
Identity caches for repeated references to the same instance.

At write time an identity map tracks each instance the first time it is
written. At read time a plain list collects objects as they are first built,
so repeated references can be resolved by index.
"""

from typing import Any, Optional

from fressian_handlers.exceptions import CacheConsistencyError

__all__ = ["WriteIdentityCache", "ReadIdentityCache"]


class WriteIdentityCache:
    """Maps object identity to the index of its first occurrence."""

    def __init__(self):
        self._indices: dict[int, int] = {}
        # Holding the objects keeps their ids from being reused mid-stream.
        self._objects: list[Any] = []

    def lookup(self, obj: Any) -> Optional[int]:
        """
        Get the index of a previously registered instance.

        :param obj: The object.
        :type obj: Any
        :return: Its index, or None if this instance was never registered.
        :rtype: Optional[int]
        """
        return self._indices.get(id(obj))

    def register(self, obj: Any) -> int:
        """
        Register an instance at the next index.

        :param obj: The object.
        :type obj: Any
        :return: The assigned index.
        :rtype: int
        """
        index = len(self._objects)
        self._indices[id(obj)] = index
        self._objects.append(obj)
        return index

    def size(self) -> int:
        return len(self._objects)

    __len__ = size


class ReadIdentityCache:
    """Objects in the order they were first built during a read."""

    def __init__(self):
        self._objects: list[Any] = []

    def get(self, index: int) -> Any:
        """
        Get the object built at ``index``.

        :raises CacheConsistencyError: If nothing was built at that index.
        """
        if not 0 <= index < len(self._objects):
            raise CacheConsistencyError("identity", index, len(self._objects))
        return self._objects[index]

    def append(self, obj: Any) -> Any:
        """Add the object at the next index and return it unchanged."""
        self._objects.append(obj)
        return obj

    def size(self) -> int:
        return len(self._objects)

    __len__ = size
