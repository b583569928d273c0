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
Persistent value model understood by the handlers.

Every value type here carries an optional metadata mapping that is excluded
from equality and hashing. Metadata is never mutated in place: ``with_meta``
returns a copy carrying the new mapping.
"""

import abc
import copy
from bisect import bisect_left
from collections.abc import Iterable, Mapping, Sequence, Set
from dataclasses import is_dataclass
from functools import cmp_to_key
from typing import Any, Callable, Optional

import immutables
from pydantic import BaseModel

__all__ = [
    "IMeta",
    "Symbol",
    "APersistentSet",
    "APersistentVector",
    "APersistentMap",
    "Record",
    "PersistentSet",
    "Vector",
    "PersistentList",
    "EmptyList",
    "EMPTY_LIST",
    "Seq",
    "LazySeq",
    "PersistentMap",
    "MapEntry",
    "SortedSet",
    "SortedMap",
    "compare",
    "DEFAULT_COMPARATOR",
    "COMPARATOR_NAME",
    "meta",
    "with_meta",
    "builder_symbol",
    "class_symbol",
]

# Metadata key holding the symbolic name of a sorted collection's comparator.
COMPARATOR_NAME = "fressian-handlers/comparator-name"

# Instance attribute used to hang metadata off dataclass records.
_RECORD_META_ATTR = "__meta__"

Comparator = Callable[[Any, Any], int]


def compare(a: Any, b: Any) -> int:
    """Natural ordering comparator."""
    if a < b:
        return -1
    if b < a:
        return 1
    return 0


DEFAULT_COMPARATOR: Comparator = compare


class IMeta:
    """Mixin for values with a metadata slot."""

    __slots__ = ()

    @property
    def meta(self) -> Optional[Mapping]:
        return self._meta

    def with_meta(self, meta: Optional[Mapping]):
        raise NotImplementedError()


class Symbol(IMeta):
    """
    A symbolic name with an optional namespace.

    Symbols compare and hash by namespace and name only.
    """

    __slots__ = ("namespace", "name", "_meta")

    def __init__(self, namespace: Optional[str], name: str, meta: Optional[Mapping] = None):
        self.namespace = namespace
        self.name = name
        self._meta = meta or None

    @classmethod
    def intern(cls, qualified: str) -> "Symbol":
        """
        Parse ``"ns/name"`` or ``"name"`` into a symbol.

        :param qualified: The textual symbol.
        :type qualified: str
        :return: The symbol.
        :rtype: Symbol
        """
        if qualified == "/" or "/" not in qualified:
            return cls(None, qualified)
        namespace, _, name = qualified.partition("/")
        return cls(namespace, name)

    def with_meta(self, meta: Optional[Mapping]) -> "Symbol":
        return Symbol(self.namespace, self.name, meta)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Symbol):
            return NotImplemented
        return self.namespace == other.namespace and self.name == other.name

    def __hash__(self) -> int:
        return hash((Symbol, self.namespace, self.name))

    def __lt__(self, other: "Symbol") -> bool:
        if not isinstance(other, Symbol):
            return NotImplemented
        return (self.namespace or "", self.name) < (other.namespace or "", other.name)

    def __str__(self) -> str:
        if self.namespace is None:
            return self.name
        return f"{self.namespace}/{self.name}"

    def __repr__(self) -> str:
        return f"Symbol({str(self)!r})"


# Capability ABCs. Handlers are registered against these, and builtin
# immutable types are registered into them below.


class APersistentSet(abc.ABC):
    __slots__ = ()


class APersistentVector(abc.ABC):
    __slots__ = ()


class APersistentMap(abc.ABC):
    __slots__ = ()


class Record(abc.ABC):
    """
    Capability ABC for fixed-schema records: dataclass instances and
    pydantic models.
    """

    __slots__ = ()

    @classmethod
    def __subclasshook__(cls, subclass):
        if cls is Record:
            if is_dataclass(subclass):
                return True
            if isinstance(subclass, type) and issubclass(subclass, BaseModel):
                return True
        return NotImplemented


class PersistentSet(APersistentSet, IMeta, frozenset):
    def __new__(cls, items: Iterable = (), meta: Optional[Mapping] = None):
        self = super().__new__(cls, items)
        self._meta = meta or None
        return self

    def with_meta(self, meta: Optional[Mapping]) -> "PersistentSet":
        return PersistentSet(self, meta)

    def __repr__(self) -> str:
        return f"PersistentSet({set(self)!r})"


class Vector(APersistentVector, IMeta, tuple):
    def __new__(cls, items: Iterable = (), meta: Optional[Mapping] = None):
        self = super().__new__(cls, items)
        self._meta = meta or None
        return self

    def with_meta(self, meta: Optional[Mapping]) -> "Vector":
        return type(self)(self, meta)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self)!r})"


class PersistentList(IMeta, tuple):
    def __new__(cls, items: Iterable = (), meta: Optional[Mapping] = None):
        self = super().__new__(cls, items)
        self._meta = meta or None
        return self

    def with_meta(self, meta: Optional[Mapping]) -> "PersistentList":
        return PersistentList(self, meta)

    def __repr__(self) -> str:
        return f"PersistentList({list(self)!r})"


class EmptyList(PersistentList):
    """The empty list. ``EMPTY_LIST`` is the canonical instance."""

    def __new__(cls, meta: Optional[Mapping] = None):
        return super().__new__(cls, (), meta)

    def __getnewargs__(self):
        return ()

    def with_meta(self, meta: Optional[Mapping]) -> "EmptyList":
        if not meta:
            return EMPTY_LIST
        return EmptyList(meta)

    def __repr__(self) -> str:
        return "EmptyList()"


EMPTY_LIST = EmptyList()


class Seq(IMeta, tuple):
    """An eagerly realized sequence."""

    def __new__(cls, items: Iterable = (), meta: Optional[Mapping] = None):
        self = super().__new__(cls, items)
        self._meta = meta or None
        return self

    def with_meta(self, meta: Optional[Mapping]) -> "Seq":
        return Seq(self, meta)

    def __repr__(self) -> str:
        return f"Seq({list(self)!r})"


class LazySeq(IMeta, Sequence):
    """
    A sequence realized on first access.

    :param source: A zero-argument callable producing an iterable, or an iterable.
    """

    def __init__(self, source: Any, meta: Optional[Mapping] = None):
        self._source = source
        self._items: Optional[tuple] = None
        self._meta = meta or None

    @classmethod
    def of(cls, items: Any, meta: Optional[Mapping] = None) -> "LazySeq":
        """Create an already realized sequence holding ``items``."""
        seq = cls((), meta)
        seq._items = tuple(items)
        seq._source = None
        return seq

    def _realize(self) -> tuple:
        if self._items is None:
            source = self._source
            self._items = tuple(source() if callable(source) else source)
            self._source = None
        return self._items

    @property
    def realized(self) -> bool:
        return self._items is not None

    def with_meta(self, meta: Optional[Mapping]) -> "LazySeq":
        return LazySeq.of(self._realize(), meta)

    def __getitem__(self, index):
        return self._realize()[index]

    def __len__(self) -> int:
        return len(self._realize())

    def __iter__(self):
        return iter(self._realize())

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, (tuple, list, LazySeq)):
            return self._realize() == tuple(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._realize())

    def __repr__(self) -> str:
        if self._items is None:
            return "LazySeq(<unrealized>)"
        return f"LazySeq({list(self._items)!r})"


class PersistentMap(APersistentMap, IMeta, Mapping):
    """Immutable mapping backed by ``immutables.Map``."""

    def __init__(self, source: Any = (), meta: Optional[Mapping] = None):
        if isinstance(source, immutables.Map):
            self._map = source
        elif isinstance(source, Mapping):
            self._map = immutables.Map(dict(source.items()))
        else:
            self._map = immutables.Map(source)
        self._meta = meta or None

    def assoc(self, key: Any, value: Any) -> "PersistentMap":
        return PersistentMap(self._map.set(key, value), self._meta)

    def dissoc(self, key: Any) -> "PersistentMap":
        if key not in self._map:
            return self
        return PersistentMap(self._map.delete(key), self._meta)

    def with_meta(self, meta: Optional[Mapping]) -> "PersistentMap":
        return PersistentMap(self._map, meta)

    def __getitem__(self, key: Any) -> Any:
        return self._map[key]

    def __iter__(self):
        return iter(self._map)

    def __len__(self) -> int:
        return len(self._map)

    def __hash__(self) -> int:
        return hash(self._map)

    def __repr__(self) -> str:
        return f"PersistentMap({dict(self._map.items())!r})"


class MapEntry(tuple):
    """A key/value pair."""

    def __new__(cls, key: Any, val: Any):
        return super().__new__(cls, (key, val))

    def __getnewargs__(self):
        return tuple(self)

    @property
    def key(self) -> Any:
        return self[0]

    @property
    def val(self) -> Any:
        return self[1]

    def __repr__(self) -> str:
        return f"MapEntry({self[0]!r}, {self[1]!r})"


class SortedSet(IMeta, Set):
    """
    A set ordered by a comparator function ``cmp(a, b) -> int``.
    """

    def __init__(
        self,
        items: Iterable = (),
        comparator: Optional[Comparator] = None,
        meta: Optional[Mapping] = None,
    ):
        self._comparator = comparator or DEFAULT_COMPARATOR
        self._key = cmp_to_key(self._comparator)
        unique = []
        for item in sorted(items, key=self._key):
            if not unique or self._comparator(unique[-1], item) != 0:
                unique.append(item)
        self._items = tuple(unique)
        self._keys = [self._key(item) for item in self._items]
        self._meta = meta or None

    @property
    def comparator(self) -> Comparator:
        return self._comparator

    def with_meta(self, meta: Optional[Mapping]) -> "SortedSet":
        return SortedSet(self._items, self._comparator, meta)

    def __contains__(self, item: Any) -> bool:
        try:
            index = bisect_left(self._keys, self._key(item))
            return index < len(self._items) and self._comparator(self._items[index], item) == 0
        except TypeError:
            return False

    def __iter__(self):
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __hash__(self) -> int:
        return self._hash()

    def __repr__(self) -> str:
        return f"SortedSet({list(self._items)!r})"


class SortedMap(IMeta, Mapping):
    """
    A mapping whose keys are ordered by a comparator function.
    """

    def __init__(
        self,
        items: Any = (),
        comparator: Optional[Comparator] = None,
        meta: Optional[Mapping] = None,
    ):
        self._comparator = comparator or DEFAULT_COMPARATOR
        self._key = cmp_to_key(self._comparator)
        pairs = items.items() if isinstance(items, Mapping) else items
        entries: list[tuple] = []
        for k, v in sorted(pairs, key=lambda pair: self._key(pair[0])):
            if entries and self._comparator(entries[-1][0], k) == 0:
                entries[-1] = (entries[-1][0], v)
            else:
                entries.append((k, v))
        self._entries = tuple(entries)
        self._keys = [self._key(k) for k, _ in self._entries]
        self._meta = meta or None

    @property
    def comparator(self) -> Comparator:
        return self._comparator

    def with_meta(self, meta: Optional[Mapping]) -> "SortedMap":
        return SortedMap(self._entries, self._comparator, meta)

    def _index_of(self, key: Any) -> int:
        try:
            index = bisect_left(self._keys, self._key(key))
        except TypeError:
            return -1
        if index < len(self._entries) and self._comparator(self._entries[index][0], key) == 0:
            return index
        return -1

    def __getitem__(self, key: Any) -> Any:
        index = self._index_of(key)
        if index < 0:
            raise KeyError(key)
        return self._entries[index][1]

    def __contains__(self, key: Any) -> bool:
        return self._index_of(key) >= 0

    def __iter__(self):
        return (k for k, _ in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __hash__(self) -> int:
        return hash(frozenset(self._entries))

    def __repr__(self) -> str:
        return f"SortedMap({dict(self._entries)!r})"


APersistentVector.register(tuple)
APersistentSet.register(frozenset)
APersistentMap.register(immutables.Map)


def meta(obj: Any) -> Optional[Mapping]:
    """
    Get the metadata attached to a value, or None.

    :param obj: Any value.
    :type obj: Any
    :return: The metadata mapping, or None when absent or unsupported.
    :rtype: Optional[Mapping]
    """
    if isinstance(obj, IMeta):
        return obj.meta
    if is_dataclass(obj) and not isinstance(obj, type):
        return getattr(obj, _RECORD_META_ATTR, None)
    return None


def with_meta(obj: Any, new_meta: Optional[Mapping]) -> Any:
    """
    Return a copy of ``obj`` carrying ``new_meta``.

    :param obj: A value that can carry metadata.
    :type obj: Any
    :param new_meta: The metadata to attach.
    :type new_meta: Optional[Mapping]
    :return: The value with metadata attached.
    :rtype: Any
    :raises TypeError: If the value has no metadata slot.
    """
    if isinstance(obj, IMeta):
        return obj.with_meta(new_meta)
    if is_dataclass(obj) and not isinstance(obj, type) and hasattr(obj, "__dict__"):
        result = copy.copy(obj)
        object.__setattr__(result, _RECORD_META_ATTR, new_meta or None)
        return result
    raise TypeError(f"{type(obj).__name__} cannot carry metadata")


def builder_symbol(cls: type) -> Symbol:
    """Symbolic name of the field-map builder for a record type."""
    return Symbol(cls.__module__, f"map->{cls.__qualname__}")


def class_symbol(cls: type) -> Symbol:
    """Fully-qualified name of a type, as a namespace-less symbol."""
    return Symbol(None, f"{cls.__module__}.{cls.__qualname__}")
