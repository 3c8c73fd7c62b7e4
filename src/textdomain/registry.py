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
"""Translation registry — text domains and the types they are bound to.

The registry owns three pieces of shared state:

* the domain pool, mapping each domain name to its single :class:`Catalog`;
* the binding table, mapping each normalized type to its catalogs
  (most recently bound first) and its supported language tags;
* the bound-type set, every type that ever received a binding.

Writers are serialised by a lock and publish fresh immutable snapshots, so
resolvers read without locking. Binding and settings changes clear the
translation cache and bump a generation counter; a result computed before
such a change is not stored afterwards.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

import structlog

from textdomain.cache import TranslationCache
from textdomain.catalog.adapters.resource_bundle import ResourceBundleCatalogLoader
from textdomain.catalog.ports.outbound import Catalog, CatalogLoader
from textdomain.core.config import Config
from textdomain.core.properties import TextDomainProperties
from textdomain.hierarchy import TypeGraph, normalize_class, related_types

logger = structlog.get_logger("textdomain.registry")


@dataclass(frozen=True)
class TypeBinding:
    """Catalogs bound to one type, most recently bound first."""

    catalogs: tuple[Catalog, ...] = ()
    supported_language_tags: tuple[str, ...] | None = None

    def add(self, catalog: Catalog, supported_language_tags: Iterable[str] | None = None) -> TypeBinding:
        """Return a binding with *catalog* at the head.

        A catalog already present keeps its position. Tags are replaced
        only when given.
        """
        catalogs = self.catalogs if catalog in self.catalogs else (catalog, *self.catalogs)
        tags = self.supported_language_tags
        if supported_language_tags is not None:
            tags = tuple(supported_language_tags)
        return TypeBinding(catalogs=catalogs, supported_language_tags=tags)


class TranslationRegistry:
    """Domain pool, binding table and bound-type set for one application.

    Usage::

        registry = TranslationRegistry(ResourceBundleCatalogLoader("locale/"))
        registry.bind_to(OrderService, "shop", supported_language_tags=["en", "fr"])
        resolver = Resolver(registry)
    """

    def __init__(
        self,
        loader: CatalogLoader | None = None,
        *,
        output_charset: str | None = None,
        cached: bool = True,
        debug: bool = False,
        default_locale: str = "en",
        cache: TranslationCache | None = None,
        graph: TypeGraph | None = None,
    ) -> None:
        self._loader: CatalogLoader = loader if loader is not None else ResourceBundleCatalogLoader()
        self._output_charset = output_charset
        self._cached = cached
        self._debug = debug
        self._default_locale = default_locale
        self._cache = cache if cache is not None else TranslationCache()
        self._graph = graph if graph is not None else TypeGraph()
        self._lock = threading.RLock()
        self._domains: dict[str, Catalog] = {}
        self._bindings: dict[Any, TypeBinding] = {}
        self._bound_types: tuple[Any, ...] = ()
        self._generation = 0

    @classmethod
    def from_properties(
        cls,
        properties: TextDomainProperties,
        loader: CatalogLoader | None = None,
    ) -> TranslationRegistry:
        """Build a registry from bound :class:`TextDomainProperties`."""
        return cls(
            loader if loader is not None else ResourceBundleCatalogLoader(properties.base_path),
            output_charset=properties.output_charset,
            cached=properties.cached,
            debug=properties.debug,
            default_locale=properties.default_locale,
            cache=TranslationCache(max_size=properties.cache_max_size),
        )

    @classmethod
    def from_config(cls, config: Config, loader: CatalogLoader | None = None) -> TranslationRegistry:
        """Build a registry from the ``textdomain`` section of *config*."""
        return cls.from_properties(config.bind(TextDomainProperties), loader)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    @property
    def cache(self) -> TranslationCache:
        return self._cache

    @property
    def graph(self) -> TypeGraph:
        return self._graph

    @property
    def debug(self) -> bool:
        return self._debug

    @property
    def default_locale(self) -> str:
        """Language closing every candidate list of the default language provider."""
        return self._default_locale

    @property
    def output_charset(self) -> str | None:
        return self._output_charset

    def set_output_charset(self, charset: str | None) -> None:
        """Set the default charset and push it onto every existing catalog."""
        with self._lock:
            self._output_charset = charset
            for catalog in self._domains.values():
                catalog.charset = charset
            self._invalidate("output_charset_changed")

    @property
    def cached(self) -> bool:
        """Whether lookups are memoized: the caching flag, unless in debug mode."""
        return self._cached and not self._debug

    def set_cached(self, flag: bool) -> None:
        """Turn memoization on or off and push the flag onto every catalog."""
        with self._lock:
            self._cached = flag
            for catalog in self._domains.values():
                catalog.cached = flag
            self._invalidate("caching_changed")

    # ------------------------------------------------------------------
    # Domain pool
    # ------------------------------------------------------------------

    def textdomain(self, domain: str) -> Catalog | None:
        """Return the catalog registered for *domain*, if any."""
        return self._domains.get(domain)

    @property
    def domains(self) -> MappingProxyType[str, Catalog]:
        return MappingProxyType(self._domains)

    def bind(self, domain: str, path: str | None = None, charset: str | None = None) -> Catalog:
        """Return the catalog for *domain*, loading it on first use.

        An existing catalog is returned unchanged; *path* and *charset*
        only apply when the catalog is created. Loader errors propagate.
        """
        existing = self._domains.get(domain)
        if existing is not None:
            return existing

        with self._lock:
            existing = self._domains.get(domain)
            if existing is not None:
                return existing

            catalog = self._loader.load(domain, path, charset or self._output_charset)
            catalog.cached = self._cached
            self._domains = {**self._domains, domain: catalog}
            logger.debug("textdomain_created", domain=domain, path=path, charset=catalog.charset)
            return catalog

    # ------------------------------------------------------------------
    # Binding table
    # ------------------------------------------------------------------

    def bind_type(
        self,
        klass: Any,
        catalog: Catalog,
        supported_language_tags: Iterable[str] | None = None,
    ) -> None:
        """Put *catalog* at the head of the catalogs bound to *klass*."""
        key = normalize_class(klass)
        with self._lock:
            binding = self._bindings.get(key, TypeBinding()).add(catalog, supported_language_tags)
            self._bindings = {**self._bindings, key: binding}
            if key not in self._bound_types:
                self._bound_types = (*self._bound_types, key)
            self._invalidate("binding_changed")

    def bind_to(
        self,
        klass: Any,
        domain: str,
        path: str | None = None,
        output_charset: str | None = None,
        supported_language_tags: Iterable[str] | None = None,
    ) -> Catalog:
        """Bind the text domain *domain* to *klass* and return its catalog."""
        logger.debug("textdomain_bound", domain=domain, target=_type_name(klass))
        with self._lock:
            catalog = self.bind(domain, path=path, charset=output_charset)
            self.bind_type(klass, catalog, supported_language_tags)
        return catalog

    def catalogs_for(self, klass: Any) -> tuple[Catalog, ...]:
        """Catalogs bound to exactly *klass*, most recently bound first."""
        binding = self._bindings.get(normalize_class(klass))
        return binding.catalogs if binding is not None else ()

    def tags_for(self, klass: Any) -> tuple[str, ...] | None:
        """Supported language tags of *klass*, or ``None`` when unrestricted."""
        binding = self._bindings.get(normalize_class(klass))
        return binding.supported_language_tags if binding is not None else None

    @property
    def bound_types(self) -> tuple[Any, ...]:
        return self._bound_types

    def related_types(self, klass: Any) -> list[Any]:
        """Bound types to search for *klass*, most specific first."""
        return related_types(klass, self._bound_types, self._graph)

    # ------------------------------------------------------------------
    # Memoization
    # ------------------------------------------------------------------

    @property
    def generation(self) -> int:
        """Counter bumped each time the cache is invalidated."""
        return self._generation

    def remember(self, key: Any, value: str, generation: int) -> bool:
        """Cache *value* unless the registry changed since *generation* was read.

        Returns whether the value was stored.
        """
        with self._lock:
            if generation != self._generation:
                return False
            self._cache.put(key, value)
            return True

    def reset(self) -> None:
        """Forget every domain, binding and cached translation."""
        with self._lock:
            self._domains = {}
            self._bindings = {}
            self._bound_types = ()
            self._graph.clear()
            self._invalidate("registry_reset")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _invalidate(self, reason: str) -> None:
        self._generation += 1
        if len(self._cache):
            logger.debug("cache_cleared", reason=reason, entries=len(self._cache))
        self._cache.clear()


def _type_name(klass: Any) -> str:
    target = normalize_class(klass)
    return getattr(target, "__qualname__", None) or getattr(target, "__name__", repr(target))
