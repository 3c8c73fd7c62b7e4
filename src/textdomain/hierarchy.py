# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Class hierarchy — which bound types a lookup for a type consults, in order.

Types are identified by a normalized key: classes and modules stand for
themselves, any other object stands for its class. The search order for a
class is built from static reflection data only (the MRO and the dotted
module name) plus relationships declared explicitly on a :class:`TypeGraph`.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable
from types import ModuleType
from typing import Any


def normalize_class(obj: Any) -> type | ModuleType:
    """Return the canonical binding key for *obj*.

    A class (including a metaclass instance) or a module is its own key;
    an instance collapses onto its class.
    """
    if isinstance(obj, (type, ModuleType)):
        return obj
    return type(obj)


class TypeGraph:
    """Explicitly declared relationships between types.

    Use it for relations the class hierarchy does not express, e.g. a
    helper class that should see the translations of the component it
    serves::

        graph.declare(OrderFormatter, OrderService)
    """

    def __init__(self) -> None:
        self._edges: dict[Any, tuple[Any, ...]] = {}

    def declare(self, klass: Any, *related: Any) -> None:
        """Declare that lookups for *klass* also consult *related*, in order."""
        key = normalize_class(klass)
        current = list(self._edges.get(key, ()))
        for item in related:
            target = normalize_class(item)
            if target not in current and target is not key:
                current.append(target)
        self._edges = {**self._edges, key: tuple(current)}

    def related(self, klass: Any) -> tuple[Any, ...]:
        return self._edges.get(normalize_class(klass), ())

    def clear(self) -> None:
        self._edges = {}


def enclosing_modules(klass: Any) -> list[ModuleType]:
    """Modules enclosing *klass*, innermost first.

    ``app.shop.models.Order`` yields the ``app.shop.models``, ``app.shop``
    and ``app`` modules, as far as they are imported.
    """
    if isinstance(klass, ModuleType):
        name = klass.__name__.rpartition(".")[0]
    else:
        name = getattr(klass, "__module__", None) or ""

    modules: list[ModuleType] = []
    while name:
        module = sys.modules.get(name)
        if module is not None:
            modules.append(module)
        name = name.rpartition(".")[0]
    return modules


def related_types(klass: Any, bound_types: Iterable[Any], graph: TypeGraph | None = None) -> list[Any]:
    """Ordered list of types to search for *klass*, most specific first.

    Order: *klass* itself, its MRO ancestors, declared relations, the
    enclosing modules, and ``object`` last. Only types in *bound_types*
    are kept and each appears once.
    """
    klass = normalize_class(klass)
    bound = set(bound_types)
    if not bound:
        return []

    chain: list[Any] = [klass]
    if isinstance(klass, type):
        chain.extend(base for base in klass.__mro__[1:] if base is not object)
    if graph is not None:
        for item in list(chain):
            chain.extend(graph.related(item))
    chain.extend(enclosing_modules(klass))
    chain.append(object)

    ordered: list[Any] = []
    for item in chain:
        if item in bound and item not in ordered:
            ordered.append(item)
    return ordered
