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
from collections import OrderedDict
from dataclasses import dataclass, field
from decimal import Decimal

import pytest
from pydantic import BaseModel, Field

from fressian_handlers import (
    BuilderNameCache,
    FressianCodec,
    Symbol,
    SymbolResolver,
    UnresolvableReferenceError,
    Vector,
    meta,
    with_meta,
)
from fressian_handlers.handlers.record_handler import record_fields
from fressian_handlers.wire import TaggedReader


@dataclass(frozen=True)
class Point:
    x: int
    y: int
    label: str


@dataclass
class Node:
    name: str
    children: list = field(default_factory=list)
    visits: int = field(default=0, init=False)


class Account(BaseModel):
    id: int
    owner: str
    balance: Decimal


class Reading(BaseModel):
    sensor: str = Field(alias="Sensor")
    value: int = Field(alias="Value")


@pytest.fixture
def resolver():
    resolver = SymbolResolver()
    resolver.register_record(Point)
    resolver.register_record(Node)
    resolver.register_record(Account)
    resolver.register_record(Reading)
    return resolver


def test_record_roundtrip_with_metadata(resolver):
    value = with_meta(Point(1, 2, "origin"), {"source": "test"})
    codec = FressianCodec(resolver=resolver)

    decoded = codec.decode(codec.encode(value))
    assert type(decoded) is Point
    assert decoded == value
    assert meta(decoded) == {"source": "test"}


def test_pydantic_record_roundtrip(resolver):
    value = Account(id=7, owner="ann", balance=Decimal("10.50"))
    codec = FressianCodec(resolver=resolver)

    decoded = codec.decode(codec.encode(value))
    assert type(decoded) is Account
    assert decoded == value
    assert meta(decoded) is None


def test_aliased_pydantic_record_roundtrip(resolver):
    value = Reading(Sensor="t1", Value=3)
    codec = FressianCodec(resolver=resolver)

    decoded = codec.decode(codec.encode(value))
    assert type(decoded) is Reading
    assert decoded == value
    assert decoded.value == 3


def test_pydantic_record_cannot_carry_metadata():
    with pytest.raises(TypeError):
        with_meta(Account(id=1, owner="x", balance=Decimal(0)), {"a": 1})


def test_record_wire_layout():
    data = FressianCodec().encode(Point(1, 2, "p"))
    raw = TaggedReader(io.BytesIO(data)).read_object()

    assert raw.tag == "clj/record"
    builder, fields, record_meta = raw.values
    assert builder.tag == "clj/sym"
    assert builder.values == (Point.__module__, "map->Point", None)
    assert fields == {"x": 1, "y": 2, "label": "p"}
    assert record_meta is None


def test_only_init_fields_are_written():
    node = Node("root")
    node.visits = 3
    assert record_fields(node) == {"name": "root", "children": []}


def test_shared_record_instance(resolver):
    leaf = Node("leaf")
    value = Vector([Node("a", [leaf]), Node("b", [leaf])])
    codec = FressianCodec(resolver=resolver)

    decoded = codec.decode(codec.encode(value))
    assert decoded[0].children[0] is decoded[1].children[0]


def test_builder_name_is_memoized():
    names = BuilderNameCache()

    first = names.get(Point)
    assert first == Symbol(Point.__module__, "map->Point")
    assert names.get(Point) is first
    assert len(names) == 1


def test_builder_name_cache_is_shared_by_codec():
    names = BuilderNameCache()
    FressianCodec(builder_names=names).encode(Vector([Point(0, 0, "a"), Point(1, 1, "b")]))
    assert len(names) == 1


def test_unresolvable_builder():
    data = FressianCodec().encode(Point(1, 2, "p"))
    with pytest.raises(UnresolvableReferenceError, match="map->Point"):
        FressianCodec().decode(data)


def test_builder_resolved_by_import():
    value = Point(3, 4, "imported")
    codec = FressianCodec(allow_import=True)
    assert codec.decode(codec.encode(value)) == value


def test_class_reference(resolver):
    codec = FressianCodec(resolver=resolver)
    assert codec.decode(codec.encode(Point)) is Point


def test_class_reference_by_import():
    codec = FressianCodec(allow_import=True)
    assert codec.decode(codec.encode(OrderedDict)) is OrderedDict
    assert codec.decode(codec.encode(int)) is int


def test_unresolvable_class_reference():
    data = FressianCodec().encode(Point)
    with pytest.raises(UnresolvableReferenceError, match="Point"):
        FressianCodec().decode(data)
