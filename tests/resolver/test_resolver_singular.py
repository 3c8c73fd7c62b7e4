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
"""Tests for Resolver singular lookups: search order, fallback, divider, caching."""

import sys
from concurrent.futures import ThreadPoolExecutor
from types import ModuleType

import pytest

from textdomain.catalog.adapters.memory import InMemoryCatalog, InMemoryCatalogLoader
from textdomain.core.config import Config
from textdomain.core.properties import TextDomainProperties
from textdomain.locale import FixedLanguageProvider
from textdomain.registry import TranslationRegistry
from textdomain.resolver import Resolver


class Base:
    pass


class Child(Base):
    pass


class CountingCatalog(InMemoryCatalog):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.singular_calls = 0

    def lookup_singular(self, lang, msgid):
        self.singular_calls += 1
        return super().lookup_singular(lang, msgid)


class HookedCatalog(InMemoryCatalog):
    """Runs ``on_lookup`` once, the first time it is queried."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.on_lookup = None

    def lookup_singular(self, lang, msgid):
        hook, self.on_lookup = self.on_lookup, None
        if hook is not None:
            hook()
        return super().lookup_singular(lang, msgid)


def make_resolver(*catalogs: InMemoryCatalog, languages=("fr",), **registry_kwargs) -> Resolver:
    loader = InMemoryCatalogLoader({catalog.domain: catalog for catalog in catalogs})
    return Resolver(TranslationRegistry(loader, **registry_kwargs), FixedLanguageProvider(*languages))


class TestFallback:
    def test_unbound_msgid_is_returned(self):
        resolver = make_resolver()
        assert resolver.translate_singular(Child, "Hello", None) == "Hello"

    def test_missing_entry_is_returned(self):
        resolver = make_resolver(InMemoryCatalog("shop", messages={"fr": {"Bye": "Au revoir"}}))
        resolver.registry.bind_to(Child, "shop")
        assert resolver.translate_singular(Child, "Hello", None) == "Hello"

    def test_divider_truncates_untranslated_msgid(self):
        resolver = make_resolver()
        assert resolver.translate_singular(Child, "Category|Item") == "Item"
        assert resolver.translate_singular(Child, "a|b|c", "|") == "c"

    def test_no_divider_keeps_msgid(self):
        resolver = make_resolver()
        assert resolver.translate_singular(Child, "Category|Item", None) == "Category|Item"

    def test_msgid_without_divider_is_unchanged(self):
        assert make_resolver().translate_singular(Child, "Plain") == "Plain"

    def test_multi_character_divider(self):
        assert make_resolver().translate_singular(Child, "Menu::File::Open", "::") == "Open"

    def test_translation_is_not_truncated(self):
        resolver = make_resolver(InMemoryCatalog("shop", messages={"fr": {"Menu|Open": "Ouvrir|Fichier"}}))
        resolver.registry.bind_to(Child, "shop")
        assert resolver.translate_singular(Child, "Menu|Open") == "Ouvrir|Fichier"

    def test_translation_equal_to_msgid_is_truncated(self):
        resolver = make_resolver(InMemoryCatalog("shop", messages={"fr": {"Menu|Open": "Menu|Open"}}))
        resolver.registry.bind_to(Child, "shop")
        assert resolver.translate_singular(Child, "Menu|Open") == "Open"


class TestSearchOrder:
    def _resolver(self) -> Resolver:
        resolver = make_resolver(
            InMemoryCatalog("base", messages={"fr": {"Hello": "Salut", "Bye": "Au revoir"}}),
            InMemoryCatalog("child", messages={"fr": {"Hello": "Bonjour"}}),
        )
        resolver.registry.bind_to(Base, "base")
        resolver.registry.bind_to(Child, "child")
        return resolver

    def test_subtype_wins(self):
        resolver = self._resolver()
        assert resolver.translate_singular(Child, "Hello") == "Bonjour"
        assert resolver.translate_singular(Base, "Hello") == "Salut"

    def test_falls_back_to_supertype(self):
        assert self._resolver().translate_singular(Child, "Bye") == "Au revoir"

    def test_instance_lookup(self):
        assert self._resolver().translate_singular(Child(), "Hello") == "Bonjour"

    def test_most_recent_catalog_wins(self):
        resolver = make_resolver(
            InMemoryCatalog("one", messages={"fr": {"Hello": "Bonjour (one)"}}),
            InMemoryCatalog("two", messages={"fr": {"Hello": "Bonjour (two)"}}),
        )
        resolver.registry.bind_to(Child, "one")
        resolver.registry.bind_to(Child, "two")
        assert resolver.translate_singular(Child, "Hello") == "Bonjour (two)"

    def test_rebinding_does_not_promote(self):
        resolver = make_resolver(
            InMemoryCatalog("one", messages={"fr": {"Hello": "Bonjour (one)"}}),
            InMemoryCatalog("two", messages={"fr": {"Hello": "Bonjour (two)"}}),
        )
        resolver.registry.bind_to(Child, "one")
        resolver.registry.bind_to(Child, "two")
        resolver.registry.bind_to(Child, "one")
        assert resolver.translate_singular(Child, "Hello") == "Bonjour (two)"

    def test_declared_relation(self):
        class Helper:
            pass

        resolver = self._resolver()
        resolver.registry.graph.declare(Helper, Child)
        assert resolver.translate_singular(Helper, "Hello") == "Bonjour"

    def test_enclosing_module_binding(self, monkeypatch: pytest.MonkeyPatch):
        package = ModuleType("storefront")
        monkeypatch.setitem(sys.modules, "storefront", package)
        monkeypatch.setitem(sys.modules, "storefront.views", ModuleType("storefront.views"))
        view = type("CartView", (), {"__module__": "storefront.views"})

        resolver = make_resolver(InMemoryCatalog("store", messages={"fr": {"Cart": "Panier"}}))
        resolver.registry.bind_to(package, "store")
        assert resolver.translate_singular(view, "Cart") == "Panier"


class TestLanguageSelection:
    def test_region_falls_back_to_language_bundle(self):
        resolver = make_resolver(InMemoryCatalog("shop", messages={"fr": {"Hello": "Bonjour"}}), languages=("fr_CA",))
        resolver.registry.bind_to(Child, "shop")
        assert resolver.translate_singular(Child, "Hello") == "Bonjour"

    def test_supported_tags_restrict_language(self):
        resolver = make_resolver(
            InMemoryCatalog("shop", messages={"de": {"Hello": "Hallo"}, "fr": {"Hello": "Bonjour"}}),
            languages=("de", "fr"),
        )
        resolver.registry.bind_to(Child, "shop", supported_language_tags=["fr"])
        assert resolver.language_for(Child) == "fr"
        assert resolver.translate_singular(Child, "Hello") == "Bonjour"

    def test_no_candidate_misses(self):
        resolver = make_resolver(InMemoryCatalog("shop", messages={"fr": {"Shop|Hello": "Bonjour"}}))
        resolver.registry.bind_to(Child, "shop", supported_language_tags=["ja"])
        assert resolver.language_for(Child) is None
        assert resolver.translate_singular(Child, "Shop|Hello") == "Hello"

    def test_explicit_language(self):
        resolver = make_resolver(InMemoryCatalog("shop", messages={"de": {"Hello": "Hallo"}}))
        resolver.registry.bind_to(Child, "shop")
        assert resolver.translate_singular_to("de", Child, "Hello") == "Hallo"


class TestCaching:
    def _resolver(self, **registry_kwargs):
        catalog = CountingCatalog("shop", messages={"fr": {"Hello": "Bonjour"}})
        resolver = make_resolver(catalog, **registry_kwargs)
        resolver.registry.bind_to(Child, "shop")
        return resolver, catalog

    def test_repeated_lookup_hits_cache(self):
        resolver, catalog = self._resolver()
        assert resolver.translate_singular(Child, "Hello") == "Bonjour"
        assert resolver.translate_singular(Child, "Hello") == "Bonjour"
        assert catalog.singular_calls == 1
        assert resolver.registry.cache.get_stats()["hits"] == 1

    def test_fallbacks_are_cached(self):
        resolver, catalog = self._resolver()
        resolver.translate_singular(Child, "Missing|Thing")
        resolver.translate_singular(Child, "Missing|Thing")
        assert catalog.singular_calls == 1

    def test_divider_is_part_of_key(self):
        resolver, _ = self._resolver()
        assert resolver.translate_singular(Child, "a|b") == "b"
        assert resolver.translate_singular(Child, "a|b", None) == "a|b"

    def test_disabled_cache_queries_every_time(self):
        resolver, catalog = self._resolver()
        resolver.registry.set_cached(False)
        resolver.translate_singular(Child, "Hello")
        resolver.translate_singular(Child, "Hello")
        assert catalog.singular_calls == 2
        assert len(resolver.registry.cache) == 0

    def test_debug_mode_bypasses_cache(self):
        resolver, catalog = self._resolver(debug=True)
        resolver.translate_singular(Child, "Hello")
        resolver.translate_singular(Child, "Hello")
        assert catalog.singular_calls == 2

    def test_new_binding_invalidates_warm_entries(self):
        resolver = make_resolver(
            InMemoryCatalog("base", messages={"fr": {}}),
            InMemoryCatalog("child", messages={"fr": {"Hello": "Bonjour"}}),
        )
        resolver.registry.bind_to(Base, "base")
        assert resolver.translate_singular(Child, "Hello") == "Hello"
        resolver.registry.bind_to(Child, "child")
        assert resolver.translate_singular(Child, "Hello") == "Bonjour"

    def test_binding_during_lookup_is_not_cached_stale(self):
        shop = HookedCatalog("shop", messages={"fr": {}})
        late = InMemoryCatalog("late", messages={"fr": {"Hello": "Salut"}})
        resolver = make_resolver(shop, late)
        resolver.registry.bind_to(Child, "shop")
        shop.on_lookup = lambda: resolver.registry.bind_to(Child, "late")

        assert resolver.translate_singular(Child, "Hello") == "Hello"
        assert len(resolver.registry.cache) == 0
        assert resolver.translate_singular(Child, "Hello") == "Salut"
        assert len(resolver.registry.cache) == 1

    def test_concurrent_lookups(self):
        resolver, _ = self._resolver()

        def lookup(i: int) -> str:
            if i % 50 == 0:
                resolver.registry.set_cached(i % 100 == 0)
            return resolver.translate_singular(Child, "Hello" if i % 2 else f"Key|{i}")

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lookup, range(400)))

        assert results[1] == "Bonjour"
        assert results[2] == "2"


class TestDefaultLocale:
    @pytest.fixture(autouse=True)
    def _empty_locale_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for var in ("LANGUAGE", "LC_ALL", "LC_MESSAGES", "LANG"):
            monkeypatch.delenv(var, raising=False)

    def _loader(self) -> InMemoryCatalogLoader:
        return InMemoryCatalogLoader({"shop": InMemoryCatalog("shop", messages={"fr": {"Hello": "Bonjour"}})})

    def test_configured_default_locale_is_used(self):
        config = Config({"textdomain": {"default-locale": "fr"}})
        resolver = Resolver.from_config(config, self._loader())
        resolver.registry.bind_to(Child, "shop")
        assert resolver.language_for(Child) == "fr"
        assert resolver.translate_singular(Child, "Hello") == "Bonjour"

    def test_registry_default_locale_feeds_environment_provider(self):
        registry = TranslationRegistry.from_properties(TextDomainProperties(default_locale="fr"), self._loader())
        resolver = Resolver(registry)
        registry.bind_to(Child, "shop")
        assert resolver.translate_singular(Child, "Hello") == "Bonjour"

    def test_builtin_default_is_english(self):
        resolver = Resolver(TranslationRegistry(self._loader()))
        resolver.registry.bind_to(Child, "shop")
        assert resolver.language_for(Child) == "en"
        assert resolver.translate_singular(Child, "Hello") == "Hello"

    def test_explicit_provider_wins(self):
        config = Config({"textdomain": {"default-locale": "de"}})
        resolver = Resolver.from_config(config, self._loader(), FixedLanguageProvider("fr"))
        resolver.registry.bind_to(Child, "shop")
        assert resolver.translate_singular(Child, "Hello") == "Bonjour"
