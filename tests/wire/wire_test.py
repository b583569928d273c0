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
import struct
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

import pytest

from fressian_handlers.exceptions import CacheConsistencyError, DeserializationException, SerializationException
from fressian_handlers.wire import TaggedObject, TaggedReader, TaggedWriter, codes


def encode(*values, cache=False) -> bytes:
    stream = io.BytesIO()
    writer = TaggedWriter(stream)
    for value in values:
        writer.write_object(value, cache=cache)
    return stream.getvalue()


def decode(data: bytes) -> list:
    return list(TaggedReader(io.BytesIO(data)).read_objects())


# Values the core writer and reader handle on their own
primitive_cases = [
    None,
    True,
    False,
    0,
    -16,
    47,
    -17,
    48,
    2**63 - 1,
    -(2**63),
    2**100,
    -(2**100),
    1.5,
    -0.25,
    "",
    "short",
    "x" * 40,
    "ünïcödé",
    b"\x00\x01\xff",
    [1, "a", [2, None]],
    {"a": 1, "b": [1, 2]},
    {1, 2, 3},
    datetime(2025, 8, 27, 13, 0, tzinfo=timezone.utc),
    datetime(2025, 8, 27, 13, 0),
    UUID("12345678-1234-5678-1234-567812345678"),
    Decimal("123.4500"),
]


@pytest.mark.parametrize("value", primitive_cases)
def test_core_roundtrip(value):
    assert decode(encode(value)) == [value]


def test_compact_int_is_one_byte():
    assert encode(47) == bytes([codes.SMALL_INT_BASE + 47])
    assert encode(-16) == bytes([codes.SMALL_INT_BASE - 16])
    assert len(encode(48)) == 9


def test_bool_is_not_read_back_as_int():
    [value] = decode(encode(True))
    assert value is True


def test_struct_tag_written_once():
    data = encode({"a": 1}, {"b": 2})
    # The second record refers to the first tag by index.
    assert data.count(b"map") == 1
    assert data.count(bytes([codes.STRUCT_CACHED])) == 1
    assert decode(data) == [{"a": 1}, {"b": 2}]


def test_read_fields_skips_the_handler():
    reader = TaggedReader(io.BytesIO(encode({"a": 1}, {"b": 2})))
    assert reader.read_fields("map") == (["a", 1],)
    # The second record uses the cached tag.
    assert reader.read_fields("map") == (["b", 2],)


@pytest.mark.parametrize("data", [encode({"a": 1}), encode("map")])
def test_read_fields_rejects_other_values(data):
    with pytest.raises(DeserializationException):
        TaggedReader(io.BytesIO(data)).read_fields("set")


def test_priority_cache_writes_value_once():
    key = "a-rather-long-repeated-key"
    data = encode(key, key, key, cache=True)
    assert data.count(key.encode("utf-8")) == 1
    assert decode(data) == [key, key, key]


def test_priority_cache_keeps_equal_values_of_different_types_apart():
    values = decode(encode(1, True, 1.0, cache=True))
    assert [type(value) for value in values] == [int, bool, float]


def test_unknown_tag_is_read_as_tagged_object():
    stream = io.BytesIO()
    writer = TaggedWriter(stream)
    writer.write_tag("custom/point", 2)
    writer.write_int(3)
    writer.write_int(4)

    [value] = decode(stream.getvalue())
    assert value == TaggedObject("custom/point", (3, 4))


def test_tagged_object_is_written_back_verbatim():
    original = TaggedObject("custom/point", (3, [4, "z"]))
    data = encode(original)
    assert decode(data) == [TaggedObject("custom/point", (3, [4, "z"]))]
    assert encode(*decode(data)) == data


def test_missing_write_handler():
    with pytest.raises(SerializationException, match="No write handler"):
        encode(object())


def test_unknown_priority_cache_index():
    data = bytes([codes.GET_PRIORITY_CACHE]) + struct.pack(">I", 3)
    with pytest.raises(CacheConsistencyError):
        decode(data)


def test_unknown_struct_cache_index():
    data = bytes([codes.STRUCT_CACHED]) + struct.pack(">HH", 0, 1)
    with pytest.raises(CacheConsistencyError):
        decode(data)


def test_read_int_rejects_other_values():
    reader = TaggedReader(io.BytesIO(encode("seven")))
    with pytest.raises(DeserializationException, match="Expected an int"):
        reader.read_int()


def test_truncated_stream():
    data = encode("x" * 40)
    with pytest.raises(DeserializationException):
        decode(data[:-5])


def test_unknown_code():
    with pytest.raises(DeserializationException, match="Unknown code"):
        decode(bytes([0xFF]))


def test_list_end_outside_list():
    with pytest.raises(DeserializationException, match="List end"):
        decode(bytes([codes.END]))
