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
"""GetTextMixin — gettext-style helpers on application classes.

Usage::

    class OrderService(GetTextMixin):
        pass

    OrderService.bindtextdomain("shop", supported_language_tags=["en", "fr"])
    OrderService()._("Order received")
    OrderService.n_("%{n} item", "%{n} items", 3)

Classes resolve through :func:`get_default_resolver` unless they set a
``textdomain_resolver`` class attribute.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from typing import Any, ClassVar

from textdomain.catalog.ports.outbound import Catalog
from textdomain.registry import TranslationRegistry
from textdomain.resolver import DEFAULT_DIVIDER, Resolver

CONTEXT_SEPARATOR = "\x04"

_default_lock = threading.Lock()
_default_resolver: Resolver | None = None


def get_default_resolver() -> Resolver:
    """The process-wide resolver, created on first use."""
    global _default_resolver
    if _default_resolver is None:
        with _default_lock:
            if _default_resolver is None:
                _default_resolver = Resolver(TranslationRegistry())
    return _default_resolver


def set_default_resolver(resolver: Resolver | None) -> None:
    """Replace the process-wide resolver; ``None`` resets it."""
    global _default_resolver
    with _default_lock:
        _default_resolver = resolver


class GetTextMixin:
    """Adds text-domain binding and translation helpers to a class.

    Every helper is a classmethod, so it works on the class and on its
    instances alike; lookups start from the class.
    """

    textdomain_resolver: ClassVar[Resolver | None] = None

    @classmethod
    def _resolver(cls) -> Resolver:
        return cls.textdomain_resolver if cls.textdomain_resolver is not None else get_default_resolver()

    @classmethod
    def bindtextdomain(
        cls,
        domain: str,
        path: str | None = None,
        output_charset: str | None = None,
        supported_language_tags: Iterable[str] | None = None,
    ) -> Catalog:
        """Bind the text domain *domain* to this class."""
        return cls._resolver().registry.bind_to(
            cls,
            domain,
            path=path,
            output_charset=output_charset,
            supported_language_tags=supported_language_tags,
        )

    @classmethod
    def gettext(cls, msgid: str) -> str:
        """Translate *msgid*; an untranslated msgid is returned whole."""
        return cls._resolver().translate_singular(cls, msgid, None)

    @classmethod
    def sgettext(cls, msgid: str, divider: str | None = DEFAULT_DIVIDER) -> str:
        """Translate *msgid*; an untranslated msgid is cut after its last *divider*."""
        return cls._resolver().translate_singular(cls, msgid, divider)

    @classmethod
    def pgettext(cls, msgctxt: str, msgid: str) -> str:
        """Translate *msgid* in the context *msgctxt*."""
        return cls._resolver().translate_singular(cls, f"{msgctxt}{CONTEXT_SEPARATOR}{msgid}", CONTEXT_SEPARATOR)

    @classmethod
    def ngettext(cls, msgid: Any, msgid_plural: Any, n: Any = None) -> str:
        """Translate a singular/plural pair for count *n*.

        Also accepts ``ngettext([msgid, msgid_plural], n)``.
        """
        if isinstance(msgid, (list, tuple)):
            return cls._resolver().translate_plural(cls, msgid, msgid_plural, None)
        return cls._resolver().translate_plural(cls, msgid, msgid_plural, n, None)

    @classmethod
    def nsgettext(cls, msgid: Any, msgid_plural: Any, n: Any = DEFAULT_DIVIDER, divider: Any = DEFAULT_DIVIDER) -> str:
        """Like :meth:`ngettext`, cutting an untranslated singular after *divider*."""
        return cls._resolver().translate_plural(cls, msgid, msgid_plural, n, divider)

    @classmethod
    def npgettext(cls, msgctxt: str, msgid: str, msgid_plural: str, n: int) -> str:
        """Translate a singular/plural pair in the context *msgctxt*."""
        return cls._resolver().translate_plural(
            cls, f"{msgctxt}{CONTEXT_SEPARATOR}{msgid}", msgid_plural, n, CONTEXT_SEPARATOR
        )

    _ = gettext
    s_ = sgettext
    p_ = pgettext
    n_ = ngettext
    ns_ = nsgettext
    np_ = npgettext
