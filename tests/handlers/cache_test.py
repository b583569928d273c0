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

import pytest

from fressian_handlers.exceptions import CacheConsistencyError
from fressian_handlers.handlers import ReadIdentityCache, WriteIdentityCache


def test_write_cache_indexes_in_first_seen_order():
    cache = WriteIdentityCache()
    first, second = (1, 2), (3, 4)

    assert cache.lookup(first) is None
    assert cache.register(first) == 0
    assert cache.register(second) == 1
    assert cache.lookup(first) == 0
    assert cache.lookup(second) == 1
    assert len(cache) == 2


def test_write_cache_uses_identity_not_equality():
    cache = WriteIdentityCache()
    first = [1, 2]
    equal = [1, 2]
    cache.register(first)

    assert cache.lookup(equal) is None
    assert cache.register(equal) == 1


def test_read_cache_append_returns_object():
    cache = ReadIdentityCache()
    obj = object()

    assert cache.append(obj) is obj
    assert cache.get(0) is obj
    assert cache.size() == 1


@pytest.mark.parametrize("size,index", [(0, 0), (1, 1), (1, -1)])
def test_read_cache_unknown_index(size, index):
    cache = ReadIdentityCache()
    for i in range(size):
        cache.append(i)
    with pytest.raises(CacheConsistencyError):
        cache.get(index)
