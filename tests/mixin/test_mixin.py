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
"""Tests for GetTextMixin helpers and the default resolver."""

import pytest

from textdomain.catalog.adapters.memory import InMemoryCatalog, InMemoryCatalogLoader
from textdomain.locale import FixedLanguageProvider
from textdomain.mixin import GetTextMixin, get_default_resolver, set_default_resolver
from textdomain.registry import TranslationRegistry
from textdomain.resolver import Resolver


def make_resolver() -> Resolver:
    catalog = InMemoryCatalog(
        "shop",
        messages={
            "fr": {
                "Hello": "Bonjour",
                "Menu|Open": "Ouvrir",
                "verb\x04Open": "Ouvrir (verbe)",
                "apple": ["pomme", "pommes"],
                "unit\x04item": ["article", "articles"],
            }
        },
        plural_rules={"fr": "n > 1"},
    )
    return Resolver(TranslationRegistry(InMemoryCatalogLoader({"shop": catalog})), FixedLanguageProvider("fr"))


@pytest.fixture
def service_cls():
    class Service(GetTextMixin):
        textdomain_resolver = make_resolver()

    Service.bindtextdomain("shop")
    return Service


class TestGetTextMixin:
    def test_bindtextdomain_registers_class(self, service_cls):
        registry = service_cls.textdomain_resolver.registry
        assert registry.bound_types == (service_cls,)
        assert registry.catalogs_for(service_cls)[0].domain == "shop"

    def test_gettext_keeps_whole_msgid(self, service_cls):
        assert service_cls._("Hello") == "Bonjour"
        assert service_cls._("Menu|Close") == "Menu|Close"

    def test_sgettext_cuts_after_divider(self, service_cls):
        assert service_cls.s_("Menu|Open") == "Ouvrir"
        assert service_cls.s_("Menu|Close") == "Close"
        assert service_cls.s_("Menu/Close", "/") == "Close"

    def test_pgettext(self, service_cls):
        assert service_cls.p_("verb", "Open") == "Ouvrir (verbe)"
        assert service_cls.p_("noun", "Open") == "Open"

    def test_ngettext_both_forms(self, service_cls):
        assert service_cls.n_("apple", "apples", 1) == "pomme"
        assert service_cls.n_("apple", "apples", 2) == "pommes"
        assert service_cls.n_(["apple", "apples"], 2) == "pommes"
        assert service_cls.n_("Fruit|pear", "pears", 1) == "Fruit|pear"

    def test_nsgettext(self, service_cls):
        assert service_cls.ns_("Fruit|pear", "pears", 1) == "pear"
        assert service_cls.ns_(["Fruit|pear", "pears"], 1) == "pear"

    def test_npgettext(self, service_cls):
        assert service_cls.np_("unit", "item", "items", 3) == "articles"
        assert service_cls.np_("box", "item", "items", 1) == "item"

    def test_helpers_work_on_instances(self, service_cls):
        instance = service_cls()
        assert instance._("Hello") == "Bonjour"
        assert instance.n_("apple", "apples", 0) == "pomme"

    def test_subclass_sees_parent_domain(self, service_cls):
        class SpecialService(service_cls):
            pass

        assert SpecialService()._("Hello") == "Bonjour"


class TestDefaultResolver:
    def test_created_once(self):
        set_default_resolver(None)
        try:
            assert get_default_resolver() is get_default_resolver()
        finally:
            set_default_resolver(None)

    def test_mixin_uses_default_resolver(self):
        resolver = make_resolver()
        set_default_resolver(resolver)
        try:

            class Plain(GetTextMixin):
                pass

            Plain.bindtextdomain("shop")
            assert Plain._("Hello") == "Bonjour"
            assert resolver.registry.bound_types == (Plain,)
        finally:
            set_default_resolver(None)
