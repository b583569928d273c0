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

from .codec import FressianCodec
from .exceptions import (
    CacheConsistencyError,
    DeserializationException,
    SerializationException,
    UnresolvableReferenceError,
    UnserializableComparatorError,
)
from .handlers import (
    BuilderNameCache,
    ReadIdentityCache,
    WriteIdentityCache,
    get_handlers,
    get_read_handler_lookup,
    get_read_handlers,
    get_write_handler_lookup,
    get_write_handlers,
)
from .resolver import SymbolResolver
from .service import FressianSerializationService
from .values import (
    COMPARATOR_NAME,
    DEFAULT_COMPARATOR,
    EMPTY_LIST,
    EmptyList,
    LazySeq,
    MapEntry,
    PersistentList,
    PersistentMap,
    PersistentSet,
    Seq,
    SortedMap,
    SortedSet,
    Symbol,
    Vector,
    meta,
    with_meta,
)

__all__ = [
    "FressianCodec",
    "FressianSerializationService",
    "SymbolResolver",
    "BuilderNameCache",
    "WriteIdentityCache",
    "ReadIdentityCache",
    "get_handlers",
    "get_write_handlers",
    "get_read_handlers",
    "get_write_handler_lookup",
    "get_read_handler_lookup",
    "SerializationException",
    "DeserializationException",
    "UnserializableComparatorError",
    "UnresolvableReferenceError",
    "CacheConsistencyError",
    "Symbol",
    "Vector",
    "PersistentSet",
    "PersistentList",
    "EmptyList",
    "EMPTY_LIST",
    "Seq",
    "LazySeq",
    "PersistentMap",
    "MapEntry",
    "SortedSet",
    "SortedMap",
    "DEFAULT_COMPARATOR",
    "COMPARATOR_NAME",
    "meta",
    "with_meta",
]
