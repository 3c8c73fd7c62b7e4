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
"""Dict-backed catalog, for embedding translations in code and for tests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from textdomain.catalog.ports.outbound import DEFAULT_PLURAL_RULE, language_fallbacks


class InMemoryCatalog:
    """Catalog holding its messages in plain dicts.

    ``messages`` maps a language tag to ``{msgid: translation}``. A plural
    entry is keyed by its singular msgid and holds the list of forms;
    ``plural_rules`` maps a language tag to its plural expression.

    Example::

        InMemoryCatalog(
            "shop",
            messages={"fr": {"apple": ["pomme", "pommes"], "Hello": "Bonjour"}},
            plural_rules={"fr": "n > 1"},
        )
    """

    def __init__(
        self,
        domain: str,
        messages: Mapping[str, Mapping[str, Any]] | None = None,
        plural_rules: Mapping[str, str] | None = None,
        path: str | None = None,
        charset: str | None = None,
    ) -> None:
        self.domain = domain
        self.path = path
        self.charset = charset
        self.cached = True
        self._messages: dict[str, dict[str, Any]] = {lang: dict(entries) for lang, entries in (messages or {}).items()}
        self._plural_rules: dict[str, str] = dict(plural_rules or {})

    def add_messages(self, lang: str, entries: Mapping[str, Any], plural_rule: str | None = None) -> None:
        """Merge *entries* into the messages for *lang*."""
        self._messages.setdefault(lang, {}).update(entries)
        if plural_rule is not None:
            self._plural_rules[lang] = plural_rule

    def lookup_singular(self, lang: str, msgid: str) -> str | None:
        for tag in language_fallbacks(lang):
            entry = self._messages.get(tag, {}).get(msgid)
            if isinstance(entry, str):
                return entry
        return None

    def lookup_plural(self, lang: str, msgid: str, msgid_plural: str) -> tuple[list[str], str] | None:
        for tag in language_fallbacks(lang):
            entry = self._messages.get(tag, {}).get(msgid)
            if isinstance(entry, (list, tuple)) and entry:
                return list(entry), self._plural_rules.get(tag, DEFAULT_PLURAL_RULE)
        return None

    def __repr__(self) -> str:
        return f"InMemoryCatalog(domain={self.domain!r}, languages={sorted(self._messages)!r})"


class InMemoryCatalogLoader:
    """Loader handing out pre-registered :class:`InMemoryCatalog` objects.

    Domains that were never registered load as empty catalogs, so binding
    them is valid and every lookup simply misses.
    """

    def __init__(self, catalogs: Mapping[str, InMemoryCatalog] | None = None) -> None:
        self._catalogs: dict[str, InMemoryCatalog] = dict(catalogs or {})
        self.load_count = 0

    def register(self, catalog: InMemoryCatalog) -> None:
        self._catalogs[catalog.domain] = catalog

    def load(self, domain: str, path: str | None, charset: str | None) -> InMemoryCatalog:
        self.load_count += 1
        catalog = self._catalogs.get(domain)
        if catalog is None:
            catalog = InMemoryCatalog(domain)
            self._catalogs[domain] = catalog
        catalog.path = path
        catalog.charset = charset
        return catalog
