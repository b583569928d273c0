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

import pytest

from fressian_handlers import (
    COMPARATOR_NAME,
    FressianCodec,
    SortedMap,
    SortedSet,
    Symbol,
    SymbolResolver,
    UnresolvableReferenceError,
    UnserializableComparatorError,
    meta,
)
from fressian_handlers.handlers import get_write_handler_lookup
from fressian_handlers.handlers.sorted_handler import sorted_comparator_name
from fressian_handlers.values import DEFAULT_COMPARATOR, compare
from fressian_handlers.wire import TaggedReader, TaggedWriter

REVERSE = Symbol("sorting", "reverse")


def reverse(a, b):
    return compare(b, a)


def by_length(a, b):
    return compare(len(a), len(b))


@pytest.fixture
def resolver():
    resolver = SymbolResolver()
    resolver.register_comparator(REVERSE, reverse)
    return resolver


def read_raw(data: bytes):
    return TaggedReader(io.BytesIO(data)).read_object()


def test_natural_order_set_has_no_comparator_name():
    value = SortedSet([3, 1, 2])
    data = FressianCodec().encode(value)

    raw = read_raw(data)
    assert raw.tag == "clj/treeset"
    assert raw.values == (None, None, [1, 2, 3])

    decoded = FressianCodec().decode(data)
    assert list(decoded) == [1, 2, 3]
    assert decoded.comparator is DEFAULT_COMPARATOR


def test_named_comparator_is_resolved_on_read(resolver):
    value = SortedSet([1, 3, 2], reverse, meta={COMPARATOR_NAME: REVERSE})
    decoded = FressianCodec(resolver=resolver).decode(FressianCodec().encode(value))

    assert list(decoded) == [3, 2, 1]
    assert decoded.comparator is reverse
    assert meta(decoded) == {COMPARATOR_NAME: REVERSE}


def test_named_comparator_sorted_map(resolver):
    value = SortedMap({"a": 1, "c": 3, "b": 2}, reverse, meta={COMPARATOR_NAME: REVERSE, "extra": True})
    decoded = FressianCodec(resolver=resolver).decode(FressianCodec().encode(value))

    assert list(decoded) == ["c", "b", "a"]
    assert decoded == value
    assert decoded.comparator is reverse
    assert meta(decoded)["extra"] is True


def test_natural_order_map_roundtrip():
    value = SortedMap({2: "two", 1: "one"}, meta={"doc": "numbers"})
    data = FressianCodec().encode(value)

    raw = read_raw(data)
    assert raw.tag == "clj/treemap"
    assert raw.values[0] is None

    decoded = FressianCodec().decode(data)
    assert list(decoded.items()) == [(1, "one"), (2, "two")]
    assert meta(decoded) == {"doc": "numbers"}


def test_map_with_unhashable_keys_roundtrip():
    value = SortedMap([([2], "b"), ([1], "a")])

    decoded = FressianCodec().decode(FressianCodec().encode(value))
    assert type(decoded) is SortedMap
    assert list(decoded.items()) == [([1], "a"), ([2], "b")]
    assert decoded[[2]] == "b"


@pytest.mark.parametrize("value", [SortedSet(["aa", "b"], by_length), SortedMap({"aa": 1, "b": 2}, by_length)])
def test_unnamed_custom_comparator_fails_before_writing(value):
    stream = io.BytesIO()
    writer = TaggedWriter(stream, get_write_handler_lookup())

    with pytest.raises(UnserializableComparatorError) as excinfo:
        writer.write_object(value)

    assert excinfo.value.collection is value
    assert excinfo.value.comparator is by_length
    assert stream.getvalue() == b""


def test_unnamed_custom_comparator_through_codec():
    with pytest.raises(UnserializableComparatorError):
        FressianCodec().encode(SortedSet([1], reverse))


def test_comparator_name_lookup_order():
    named = SortedSet([1], by_length, meta={COMPARATOR_NAME: "sorting/by-length"})
    assert sorted_comparator_name(named) == "sorting/by-length"
    assert sorted_comparator_name(SortedSet([1])) is None


def test_unknown_comparator_name():
    value = SortedSet([1, 2], reverse, meta={COMPARATOR_NAME: REVERSE})
    with pytest.raises(UnresolvableReferenceError, match="sorting/reverse"):
        FressianCodec().decode(FressianCodec().encode(value))
