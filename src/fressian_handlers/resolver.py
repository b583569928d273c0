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

import importlib
import logging
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel

from .exceptions import UnresolvableReferenceError
from .values import Symbol, builder_symbol, class_symbol

__all__ = ["SymbolResolver", "record_builder"]

_BUILDER_PREFIX = "map->"


def record_builder(cls: type) -> Callable[[Any], Any]:
    """
    Create the builder for a record type: a function taking the decoded field
    mapping and returning a new instance.

    :param cls: The record type.
    :type cls: type
    :return: The builder.
    :rtype: Callable
    """

    if issubclass(cls, BaseModel):
        # Fields are written under their attribute names, not their aliases.
        def build(fields):
            return cls.model_validate(dict(fields), by_name=True)

    else:

        def build(fields):
            return cls(**dict(fields))

    build.__qualname__ = f"{_BUILDER_PREFIX}{cls.__qualname__}"
    return build


class SymbolResolver:
    """
    Resolves symbolic names written to the stream (comparators, record
    builders, classes) back to live objects in the reading environment.

    Names must be registered up front. With ``allow_import`` enabled, names
    that are not registered are looked up by importing their module.
    """

    def __init__(self, allow_import: bool = False):
        self.allow_import = allow_import
        self._registry: dict[str, Any] = {}
        self._logger = logging.getLogger(__name__)

    def register(self, name: Union[Symbol, str], value: Any) -> None:
        """
        Register an object under a symbolic name.

        :param name: The name, as a symbol or ``"ns/name"`` text.
        :type name: Union[Symbol, str]
        :param value: The object the name resolves to.
        :type value: Any
        """
        self._registry[str(name)] = value

    def register_comparator(self, name: Union[Symbol, str], comparator: Callable[[Any, Any], int]) -> None:
        """Register a comparator under the name sorted collections carry in their metadata."""
        self.register(name, comparator)

    def register_class(self, cls: type) -> None:
        """Register a type under its fully-qualified name."""
        self.register(class_symbol(cls), cls)

    def register_record(self, cls: type, builder: Optional[Callable[[Any], Any]] = None) -> None:
        """
        Register a record type: its builder under the builder name, and the
        type itself under its fully-qualified name.

        :param cls: The record type.
        :type cls: type
        :param builder: A custom builder; defaults to calling the type with the
            decoded fields as keyword arguments.
        :type builder: Optional[Callable]
        """
        self.register(builder_symbol(cls), builder or record_builder(cls))
        self.register_class(cls)

    def resolve(self, name: Union[Symbol, str]) -> Any:
        """
        Resolve a symbolic name.

        :param name: The name to resolve.
        :type name: Union[Symbol, str]
        :return: The registered object.
        :rtype: Any
        :raises UnresolvableReferenceError: If the name is unknown.
        """
        key = str(name)
        if key in self._registry:
            return self._registry[key]

        if not self.allow_import:
            self._logger.debug("No registration for %s", key)
            raise UnresolvableReferenceError(name)

        try:
            value = self._import_reference(name if isinstance(name, Symbol) else Symbol.intern(key))
        except (ImportError, AttributeError) as e:
            raise UnresolvableReferenceError(name, cause=e) from e
        self._logger.debug("Resolved %s by import", key)
        self._registry[key] = value
        return value

    def _import_reference(self, symbol: Symbol) -> Any:
        if symbol.namespace is None:
            return _import_qualified(symbol.name)

        module = importlib.import_module(symbol.namespace)
        if symbol.name.startswith(_BUILDER_PREFIX):
            cls = _get_qualified_attr(module, symbol.name[len(_BUILDER_PREFIX) :])
            return record_builder(cls)
        return _get_qualified_attr(module, symbol.name.replace("-", "_"))


def _get_qualified_attr(owner: Any, qualname: str) -> Any:
    value = owner
    for part in qualname.split("."):
        value = getattr(value, part)
    return value


def _import_qualified(path: str) -> Any:
    """Import ``pkg.module.Outer.Inner`` by trying the longest importable module prefix."""
    parts = path.split(".")
    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            module = importlib.import_module(module_name)
        except ImportError:
            continue
        return _get_qualified_attr(module, ".".join(parts[split:]))
    raise ImportError(f"No importable module in {path}")
