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

from fressian_handlers import PersistentMap, Vector, meta
from fressian_handlers.handlers import get_read_handler_lookup, get_write_handler_lookup
from fressian_handlers.handlers.envelope import read_meta, read_with_meta, write_map, write_with_meta
from fressian_handlers.wire import TaggedObject, TaggedReader, TaggedWriter


def new_writer():
    stream = io.BytesIO()
    return stream, TaggedWriter(stream, get_write_handler_lookup())


def new_reader(data: bytes) -> TaggedReader:
    return TaggedReader(io.BytesIO(data), get_read_handler_lookup())


def test_missing_metadata_is_an_explicit_null():
    stream, writer = new_writer()
    write_with_meta(writer, "test/items", [1, 2])

    raw = TaggedReader(io.BytesIO(stream.getvalue())).read_object()
    assert raw == TaggedObject("test/items", ([1, 2], None))


def test_metadata_is_second_field():
    stream, writer = new_writer()
    write_with_meta(writer, "test/items", Vector([1], meta={"k": "v"}))

    raw = TaggedReader(io.BytesIO(stream.getvalue())).read_object()
    assert raw.values == ([1], {"k": "v"})


def test_custom_inner_writer():
    stream, writer = new_writer()
    write_with_meta(writer, "test/map", PersistentMap({"a": 1}), write_map)

    raw = TaggedReader(io.BytesIO(stream.getvalue())).read_object()
    assert raw.values == ({"a": 1}, None)


def test_read_with_meta_reattaches_metadata():
    stream, writer = new_writer()
    writer.write_list([1, 2])
    writer.write_object({"k": "v"})

    value = read_with_meta(new_reader(stream.getvalue()), Vector)
    assert value == Vector([1, 2])
    assert meta(value) == {"k": "v"}
    assert isinstance(meta(value), PersistentMap)


@pytest.mark.parametrize("written", [None, {}])
def test_empty_metadata_reads_as_none(written):
    stream, writer = new_writer()
    writer.write_object(written)

    assert read_meta(new_reader(stream.getvalue())) is None


def test_read_with_meta_without_metadata_returns_bare_value():
    stream, writer = new_writer()
    writer.write_list([1])
    writer.write_null()

    value = read_with_meta(new_reader(stream.getvalue()), Vector)
    assert meta(value) is None


def test_map_keys_are_cached():
    stream, writer = new_writer()
    for i in range(3):
        write_map(writer, {"repeated-key": i})

    data = stream.getvalue()
    assert data.count(b"repeated-key") == 1

    reader = new_reader(data)
    assert [reader.read_object() for _ in range(3)] == [{"repeated-key": i} for i in range(3)]
