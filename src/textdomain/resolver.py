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
"""Resolver — finds the translation of a message for a type.

A lookup picks the first language candidate for the type, walks the
related bound types most specific first, and asks each type's catalogs
(most recently bound first) for the message. The first hit wins. A miss
falls back to the message id itself, shortened after the last divider.
"""

from __future__ import annotations

from collections.abc import Callable
from numbers import Number
from typing import Any

import structlog

from textdomain.cache import plural_key, singular_key
from textdomain.catalog.ports.outbound import DEFAULT_PLURAL_RULE, Catalog, CatalogLoader
from textdomain.core.config import Config
from textdomain.core.properties import TextDomainProperties
from textdomain.hierarchy import normalize_class
from textdomain.kernel.exceptions import InvalidArgumentException
from textdomain.locale import EnvironmentLanguageProvider, LanguageCandidateProvider
from textdomain.plural import select_form
from textdomain.registry import TranslationRegistry

logger = structlog.get_logger("textdomain.resolver")

DEFAULT_DIVIDER = "|"


def _apply_divider(msg: str, msgid: str, divider: str | None) -> str:
    """Shorten an untranslated *msg* to the part after the last *divider*.

    The check is value equality with *msgid*, so a translation identical
    to its msgid is shortened as well.
    """
    if divider and msg == msgid:
        index = msg.rfind(divider)
        if index != -1:
            return msg[index + len(divider):]
    return msg


class Resolver:
    """Translates messages for types bound in a :class:`TranslationRegistry`."""

    def __init__(
        self,
        registry: TranslationRegistry,
        languages: LanguageCandidateProvider | None = None,
    ) -> None:
        self._registry = registry
        if languages is None:
            languages = EnvironmentLanguageProvider(registry.default_locale)
        self._languages = languages

    @classmethod
    def from_properties(
        cls,
        properties: TextDomainProperties,
        loader: CatalogLoader | None = None,
        languages: LanguageCandidateProvider | None = None,
    ) -> Resolver:
        """Build a resolver and its registry from bound :class:`TextDomainProperties`."""
        return cls(TranslationRegistry.from_properties(properties, loader), languages)

    @classmethod
    def from_config(
        cls,
        config: Config,
        loader: CatalogLoader | None = None,
        languages: LanguageCandidateProvider | None = None,
    ) -> Resolver:
        """Build a resolver from the ``textdomain`` section of *config*."""
        return cls.from_properties(config.bind(TextDomainProperties), loader, languages)

    @property
    def registry(self) -> TranslationRegistry:
        return self._registry

    @property
    def languages(self) -> LanguageCandidateProvider:
        return self._languages

    def language_for(self, klass: Any) -> str | None:
        """The highest-ranked language for *klass*, ``None`` if there is none."""
        candidates = self._languages.candidates(self._registry.tags_for(klass))
        return candidates[0] if candidates else None

    # ------------------------------------------------------------------
    # Singular
    # ------------------------------------------------------------------

    def translate_singular(self, klass: Any, msgid: str, divider: str | None = DEFAULT_DIVIDER) -> str:
        """Translate *msgid* for *klass* in its preferred language."""
        return self.translate_singular_to(self.language_for(klass), klass, msgid, divider)

    def translate_singular_to(
        self,
        lang: str | None,
        klass: Any,
        msgid: str,
        divider: str | None = DEFAULT_DIVIDER,
    ) -> str:
        """Translate *msgid* for *klass* into *lang*, memoized when caching is on."""
        klass = normalize_class(klass)
        generation = self._registry.generation
        cached = self._registry.cached
        if cached:
            key = singular_key(lang or "", klass, msgid, divider)
            hit = self._registry.cache.get(key)
            if hit is not None:
                return hit

        msg: str | None = None
        if lang is not None:
            msg = self._find(klass, lambda catalog: catalog.lookup_singular(lang, msgid))
        if msg is None:
            logger.debug("translation_missing", msgid=msgid, lang=lang, target=getattr(klass, "__name__", repr(klass)))
            msg = msgid
        msg = _apply_divider(msg, msgid, divider)

        if cached:
            self._registry.remember(key, msg, generation)
        return msg

    # ------------------------------------------------------------------
    # Plural
    # ------------------------------------------------------------------

    def translate_plural(
        self,
        klass: Any,
        arg1: str | list[str] | tuple[str, str],
        arg2: Any,
        arg3: Any = DEFAULT_DIVIDER,
        arg4: str | None = DEFAULT_DIVIDER,
    ) -> str:
        """Translate a singular/plural pair for count *n*.

        Accepts ``(klass, msgid, msgid_plural, n, divider="|")`` or
        ``(klass, [msgid, msgid_plural], n, divider="|")``.

        Raises:
            InvalidArgumentException: the list form got a number where the
                divider belongs.
            PluralFormOutOfRangeException: the catalog's plural rule picked
                a form that does not exist.
        """
        if isinstance(arg1, (list, tuple)):
            if len(arg1) != 2:
                raise InvalidArgumentException(
                    f"Expected [msgid, msgid_plural], got {len(arg1)} item(s)",
                    context={"value": list(arg1)},
                )
            if arg3 is not None and isinstance(arg3, Number) and not isinstance(arg3, bool):
                raise InvalidArgumentException(
                    f"3rd parameter is wrong: value = {arg3}",
                    context={"value": arg3},
                )
            msgid, msgid_plural = arg1
            n, divider = arg2, arg3
        else:
            msgid, msgid_plural, n, divider = arg1, arg2, arg3, arg4

        if isinstance(n, bool) or not isinstance(n, int):
            raise InvalidArgumentException(f"Plural count must be an integer, got {n!r}", context={"value": n})

        return self.translate_plural_to(self.language_for(klass), klass, msgid, msgid_plural, n, divider)

    def translate_plural_to(
        self,
        lang: str | None,
        klass: Any,
        msgid: str,
        msgid_plural: str,
        n: int,
        divider: str | None = DEFAULT_DIVIDER,
    ) -> str:
        """Translate the pair for *n* into *lang*, memoized when caching is on."""
        klass = normalize_class(klass)
        generation = self._registry.generation
        cached = self._registry.cached
        if cached:
            key = plural_key(lang or "", klass, msgid, msgid_plural, n, divider)
            hit = self._registry.cache.get(key)
            if hit is not None:
                return hit

        found: tuple[list[str], str] | None = None
        if lang is not None:
            found = self._find(klass, lambda catalog: catalog.lookup_plural(lang, msgid, msgid_plural))
        if found is None:
            forms, rule = [msgid, msgid_plural], DEFAULT_PLURAL_RULE
        else:
            forms, rule = list(found[0]), found[1]

        forms[0] = _apply_divider(forms[0], msgid, divider)
        msg = select_form(forms, rule, n)

        if cached:
            self._registry.remember(key, msg, generation)
        return msg

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _find(self, klass: Any, lookup: Callable[[Catalog], Any]) -> Any:
        """First non-``None`` *lookup* result over the related types' catalogs."""
        for target in self._registry.related_types(klass):
            for catalog in self._registry.catalogs_for(target):
                result = lookup(catalog)
                if result is not None:
                    return result
        return None
