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
"""textdomain — message lookup across text domains bound to classes.

Bind catalogs to classes, then resolve messages for any class or instance;
lookups search the class hierarchy, pick the best language and are memoized::

    from textdomain import Resolver, TranslationRegistry

    registry = TranslationRegistry()
    registry.bind_to(OrderService, "shop", path="locale/")
    Resolver(registry).translate_singular(OrderService, "Order received")
"""

from textdomain.cache import TranslationCache
from textdomain.catalog.ports.outbound import Catalog, CatalogLoader
from textdomain.hierarchy import TypeGraph, normalize_class, related_types
from textdomain.kernel.exceptions import (
    CatalogLoadException,
    InvalidArgumentException,
    PluralFormOutOfRangeException,
    PluralRuleException,
    TextDomainException,
)
from textdomain.locale import (
    AcceptLanguageProvider,
    EnvironmentLanguageProvider,
    FixedLanguageProvider,
    LanguageCandidateProvider,
)
from textdomain.mixin import GetTextMixin, get_default_resolver, set_default_resolver
from textdomain.plural import PluralRule, compile_rule
from textdomain.registry import TranslationRegistry, TypeBinding
from textdomain.resolver import Resolver

__version__ = "0.1.0"

__all__ = [
    "AcceptLanguageProvider",
    "Catalog",
    "CatalogLoadException",
    "CatalogLoader",
    "EnvironmentLanguageProvider",
    "FixedLanguageProvider",
    "GetTextMixin",
    "InvalidArgumentException",
    "LanguageCandidateProvider",
    "PluralFormOutOfRangeException",
    "PluralRule",
    "PluralRuleException",
    "Resolver",
    "TextDomainException",
    "TranslationCache",
    "TranslationRegistry",
    "TypeBinding",
    "TypeGraph",
    "compile_rule",
    "get_default_resolver",
    "normalize_class",
    "related_types",
    "set_default_resolver",
]
