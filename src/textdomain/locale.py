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
"""Language candidates — protocol and built-in providers.

A provider ranks the languages a lookup should be attempted in, most
preferred first, as POSIX tags (``en_US``). When a type restricts its
supported languages, only candidates inside that set survive.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from typing import Protocol, runtime_checkable

_ENV_VARS = ("LC_ALL", "LC_MESSAGES", "LANG")


@runtime_checkable
class LanguageCandidateProvider(Protocol):
    """Port for ranking the languages a translation is looked up in."""

    def candidates(self, supported_language_tags: Iterable[str] | None = None) -> list[str]: ...


def to_posix(tag: str) -> str:
    """Convert a language tag to POSIX form.

    Drops any ``.charset`` and ``@modifier`` part, turns ``-`` into ``_``
    and upper-cases a two-letter region.

    >>> to_posix("en-us")
    'en_US'
    >>> to_posix("ja_JP.UTF-8")
    'ja_JP'
    """
    tag = tag.strip().split(".", 1)[0].split("@", 1)[0].replace("-", "_")
    parts = tag.split("_")
    lang = parts[0].lower()
    rest = [p.upper() if len(p) == 2 else p for p in parts[1:]]
    return "_".join([lang, *rest])


def expand(tags: Iterable[str], default_locale: str | None) -> list[str]:
    """Expand ranked *tags* with their base languages and the default.

    ``["ja_JP", "fr"]`` becomes ``["ja_JP", "ja", "fr", default]`` with
    duplicates removed, keeping the first occurrence.
    """
    ranked: list[str] = []
    for raw in tags:
        if not raw or raw in ("C", "POSIX"):
            continue
        tag = to_posix(raw)
        base = tag.split("_", 1)[0]
        for candidate in (tag, base):
            if candidate and candidate not in ranked:
                ranked.append(candidate)
    if default_locale:
        default = to_posix(default_locale)
        if default not in ranked:
            ranked.append(default)
    return ranked


def restrict(candidates: list[str], supported_language_tags: Iterable[str] | None) -> list[str]:
    """Keep only *candidates* present in *supported_language_tags*.

    ``None`` means unrestricted. The result may be empty.
    """
    if supported_language_tags is None:
        return list(candidates)
    supported = {to_posix(tag) for tag in supported_language_tags}
    return [tag for tag in candidates if tag in supported]


class EnvironmentLanguageProvider:
    """Ranks languages from the process environment, like gettext does.

    ``LANGUAGE`` (a colon-separated list) comes first, then the first of
    ``LC_ALL``, ``LC_MESSAGES`` and ``LANG`` that is set. The default
    locale always closes the list.
    """

    def __init__(self, default_locale: str = "en", environ: Mapping[str, str] | None = None) -> None:
        self._default = default_locale
        self._environ = environ

    def candidates(self, supported_language_tags: Iterable[str] | None = None) -> list[str]:
        environ = self._environ if self._environ is not None else os.environ
        tags: list[str] = []
        language = environ.get("LANGUAGE", "")
        if language:
            tags.extend(language.split(":"))
        for var in _ENV_VARS:
            value = environ.get(var)
            if value:
                tags.append(value)
                break
        return restrict(expand(tags, self._default), supported_language_tags)


class FixedLanguageProvider:
    """Always ranks the same pre-configured tags, in the given order."""

    def __init__(self, *tags: str) -> None:
        self._tags = [to_posix(tag) for tag in tags]

    def candidates(self, supported_language_tags: Iterable[str] | None = None) -> list[str]:
        return restrict(self._tags, supported_language_tags)


class AcceptLanguageProvider:
    """Ranks the tags of an HTTP ``Accept-Language`` header by quality.

    Tags with equal quality keep their header order; ``*`` is ignored.
    """

    def __init__(self, header: str, default_locale: str = "en") -> None:
        self._ranked = expand(_parse_accept_language(header), default_locale)

    def candidates(self, supported_language_tags: Iterable[str] | None = None) -> list[str]:
        return restrict(self._ranked, supported_language_tags)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _parse_accept_language(header: str) -> list[str]:
    """Return the language tags of *header* sorted by descending *q* value.

    Handles the standard ``Accept-Language`` format, e.g.
    ``en-US,en;q=0.9,fr;q=0.8``.
    """
    weighted: list[tuple[float, int, str]] = []

    for position, part in enumerate(header.split(",")):
        part = part.strip()
        if not part:
            continue

        tag, _, params = part.partition(";")
        quality = 1.0
        params = params.strip()
        if params[:2].lower() == "q=":
            try:
                quality = float(params[2:].strip())
            except ValueError:
                continue

        tag = tag.strip()
        if tag and tag != "*" and quality > 0:
            weighted.append((-quality, position, tag))

    return [tag for _, _, tag in sorted(weighted)]
