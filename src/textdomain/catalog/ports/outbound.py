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
"""Catalog protocols — ports for message catalogs and their loaders."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

DEFAULT_PLURAL_RULE = "n != 1"


@runtime_checkable
class Catalog(Protocol):
    """A named text domain holding translations for one or more languages.

    ``domain`` is the catalog's identity. ``charset`` and ``cached`` are
    pushed by the registry whenever the process-wide settings change.
    """

    domain: str
    path: str | None
    charset: str | None
    cached: bool

    def lookup_singular(self, lang: str, msgid: str) -> str | None:
        """Return the translation of *msgid* for *lang*, or ``None`` on miss."""
        ...

    def lookup_plural(self, lang: str, msgid: str, msgid_plural: str) -> tuple[list[str], str] | None:
        """Return ``(forms, plural_rule)`` for the pair, or ``None`` on miss."""
        ...


@runtime_checkable
class CatalogLoader(Protocol):
    """Builds a :class:`Catalog` for a domain.

    Loading happens once, eagerly, when the domain is first bound.
    Failures raise :class:`~textdomain.kernel.exceptions.CatalogLoadException`.
    """

    def load(self, domain: str, path: str | None, charset: str | None) -> Catalog: ...


def language_fallbacks(lang: str) -> list[str]:
    """Expand a POSIX tag into the tags a catalog should try, most specific first.

    >>> language_fallbacks("ja_JP")
    ['ja_JP', 'ja']
    """
    base = lang.split("_", 1)[0]
    return [lang] if base == lang else [lang, base]
