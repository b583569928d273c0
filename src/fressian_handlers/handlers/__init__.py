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

from fressian_handlers._interface import ReadHandler, WriteHandler
from fressian_handlers.lookup import AssociativeLookup, InheritanceLookup, TagLookup
from fressian_handlers.resolver import SymbolResolver
from fressian_handlers.values import (
    APersistentMap,
    APersistentSet,
    APersistentVector,
    EmptyList,
    LazySeq,
    MapEntry,
    PersistentList,
    Record,
    Seq,
    SortedMap,
    SortedSet,
    Symbol,
)
from fressian_handlers.wire import CORE_READ_HANDLERS, CORE_WRITE_HANDLERS

from . import collections_handler as colls
from .cache import ReadIdentityCache, WriteIdentityCache
from .envelope import MapWriteHandler, write_with_meta
from .factory import HandlerPair, create_handler, create_identity_based_handler
from .record_handler import BuilderNameCache, record_reader, record_writer
from .sorted_handler import sorted_map_reader, sorted_set_reader, write_sorted_map, write_sorted_set
from .symbol_handler import class_reader, read_symbol, write_class, write_symbol

__all__ = [
    "ReadIdentityCache",
    "WriteIdentityCache",
    "BuilderNameCache",
    "HandlerPair",
    "create_handler",
    "create_identity_based_handler",
    "get_handlers",
    "get_write_handlers",
    "get_read_handlers",
    "get_write_handler_lookup",
    "get_read_handler_lookup",
]


def get_handlers(
    cache: Any,
    resolver: Optional[SymbolResolver] = None,
    builder_names: Optional[BuilderNameCache] = None,
) -> dict[str, HandlerPair]:
    """
    Assemble the handler pairs, keyed by their full tag.

    Write handlers are registered against abstract capabilities where
    possible (any persistent set, any record) so that the inheritance-aware
    lookup can serve concrete subtypes.

    :param cache: The identity cache shared by all identity-based handlers:
        a WriteIdentityCache for writing, a ReadIdentityCache for reading.
    :param resolver: Resolves comparator, builder and class names at read time.
    :type resolver: Optional[SymbolResolver]
    :param builder_names: Memo of record builder names.
    :type builder_names: Optional[BuilderNameCache]
    :return: Tag to handler pair.
    :rtype: dict[str, HandlerPair]
    """
    if resolver is None:
        resolver = SymbolResolver()
    if builder_names is None:
        builder_names = BuilderNameCache()

    pairs = [
        create_handler(type, "java/class", write_class, class_reader(resolver)),
        create_identity_based_handler(APersistentSet, "clj/set", write_with_meta, colls.read_set, cache),
        create_identity_based_handler(APersistentVector, "clj/vector", write_with_meta, colls.read_vector, cache),
        create_identity_based_handler(PersistentList, "clj/list", write_with_meta, colls.read_list, cache),
        # Every empty list is equal, so it is never identity-cached.
        create_handler(EmptyList, "clj/emptylist", colls.write_empty_list, colls.read_empty_list),
        create_identity_based_handler(Seq, "clj/aseq", write_with_meta, colls.read_seq, cache),
        create_identity_based_handler(LazySeq, "clj/lazyseq", write_with_meta, colls.read_lazy_seq, cache),
        create_identity_based_handler(
            APersistentMap, "clj/map", colls.write_persistent_map, colls.read_persistent_map, cache
        ),
        create_identity_based_handler(
            SortedSet, "clj/treeset", write_sorted_set, sorted_set_reader(resolver), cache
        ),
        create_identity_based_handler(
            SortedMap, "clj/treemap", write_sorted_map, sorted_map_reader(resolver), cache
        ),
        create_identity_based_handler(MapEntry, "clj/mapentry", colls.write_map_entry, colls.read_map_entry, cache),
        create_identity_based_handler(Symbol, "clj/sym", write_symbol, read_symbol, cache),
        create_identity_based_handler(
            Record, "clj/record", record_writer(builder_names), record_reader(resolver), cache
        ),
    ]
    return {pair.tag: pair for pair in pairs}


def get_write_handlers(
    cache: Optional[WriteIdentityCache] = None,
    resolver: Optional[SymbolResolver] = None,
    builder_names: Optional[BuilderNameCache] = None,
) -> dict[type, dict[str, WriteHandler]]:
    """
    Get the complete write handler table, ``{type: {tag: WriteHandler}}``,
    merged over the core handlers.

    :param cache: The write identity cache. A fresh one is created if omitted.
    :type cache: Optional[WriteIdentityCache]
    :return: The write handler table.
    :rtype: dict[type, dict[str, WriteHandler]]
    """
    if cache is None:
        cache = WriteIdentityCache()
    elif not isinstance(cache, WriteIdentityCache):
        raise TypeError(f"Expected a WriteIdentityCache, got {type(cache).__name__}")

    handlers: dict[type, dict[str, WriteHandler]] = dict(CORE_WRITE_HANDLERS)
    # Plain dicts share the map encoding, keys included in the priority cache.
    handlers[dict] = {"map": MapWriteHandler()}
    for tag, pair in get_handlers(cache, resolver, builder_names).items():
        handlers[pair.cls] = {tag: pair.writer}
    return handlers


def get_read_handlers(
    cache: Optional[ReadIdentityCache] = None,
    resolver: Optional[SymbolResolver] = None,
    builder_names: Optional[BuilderNameCache] = None,
) -> dict[str, ReadHandler]:
    """
    Get the complete read handler table, ``{tag: ReadHandler}``, merged over
    the core handlers. Identity-based types contribute both their tag and its
    ``-idx`` sibling.

    :param cache: The read identity cache. A fresh one is created if omitted.
    :type cache: Optional[ReadIdentityCache]
    :return: The read handler table.
    :rtype: dict[str, ReadHandler]
    """
    if cache is None:
        cache = ReadIdentityCache()
    elif not isinstance(cache, ReadIdentityCache):
        raise TypeError(f"Expected a ReadIdentityCache, got {type(cache).__name__}")

    handlers: dict[str, ReadHandler] = dict(CORE_READ_HANDLERS)
    for pair in get_handlers(cache, resolver, builder_names).values():
        handlers.update(pair.readers)
    return handlers


def get_write_handler_lookup(
    cache: Optional[WriteIdentityCache] = None,
    resolver: Optional[SymbolResolver] = None,
    builder_names: Optional[BuilderNameCache] = None,
) -> InheritanceLookup:
    """Write handler table wrapped for inheritance-aware lookup."""
    return InheritanceLookup(AssociativeLookup(get_write_handlers(cache, resolver, builder_names)))


def get_read_handler_lookup(
    cache: Optional[ReadIdentityCache] = None,
    resolver: Optional[SymbolResolver] = None,
    builder_names: Optional[BuilderNameCache] = None,
) -> TagLookup:
    """Read handler table wrapped for exact-tag lookup."""
    return TagLookup(get_read_handlers(cache, resolver, builder_names))
