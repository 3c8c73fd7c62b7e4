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
"""Resource-bundle catalog — loads a text domain from YAML/JSON files."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml  # type: ignore[import-untyped]

from textdomain.catalog.ports.outbound import DEFAULT_PLURAL_RULE, language_fallbacks
from textdomain.kernel.exceptions import CatalogLoadException

logger = structlog.get_logger("textdomain.catalog")

_SUFFIXES = (".yaml", ".yml", ".json")


@dataclass
class _Bundle:
    """Messages of one language, with the file they came from."""

    source: Path
    mtime: float
    plural_rule: str = DEFAULT_PLURAL_RULE
    messages: dict[str, Any] = field(default_factory=dict)


class ResourceBundleCatalog:
    """Catalog reading ``{path}/{lang}/{domain}.yaml`` (or ``.yml`` / ``.json``).

    Each file looks like::

        plural_forms: "nplurals=2; plural=n != 1;"
        messages:
          Hello: Bonjour
          "%{n} apple": ["%{n} pomme", "%{n} pommes"]

    Plural entries are keyed by the singular msgid and hold the list of
    forms. All languages are read when the catalog is created. While
    ``cached`` is ``False`` a bundle is re-read whenever its file changes.
    """

    def __init__(self, domain: str, path: str | None = None, charset: str | None = None) -> None:
        self.domain = domain
        self.path = path
        self.charset = charset
        self.cached = True
        self._bundles: dict[str, _Bundle] = {}
        self._load_all()

    @property
    def languages(self) -> list[str]:
        """Language tags this catalog has a bundle for."""
        return sorted(self._bundles)

    def lookup_singular(self, lang: str, msgid: str) -> str | None:
        for tag in language_fallbacks(lang):
            bundle = self._bundle(tag)
            if bundle is None:
                continue
            entry = bundle.messages.get(msgid)
            if isinstance(entry, str):
                return entry
        return None

    def lookup_plural(self, lang: str, msgid: str, msgid_plural: str) -> tuple[list[str], str] | None:
        for tag in language_fallbacks(lang):
            bundle = self._bundle(tag)
            if bundle is None:
                continue
            entry = bundle.messages.get(msgid)
            if isinstance(entry, list) and entry:
                return [str(form) for form in entry], bundle.plural_rule
        return None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _bundle(self, lang: str) -> _Bundle | None:
        bundle = self._bundles.get(lang)
        if bundle is not None and not self.cached:
            try:
                mtime = bundle.source.stat().st_mtime
            except OSError:
                # File removed since it was loaded: forget it so lookups miss.
                self._bundles.pop(lang, None)
                logger.warning("catalog_missing", domain=self.domain, lang=lang, source=str(bundle.source))
                return None
            if mtime != bundle.mtime:
                bundle = self._read(bundle.source)
                self._bundles[lang] = bundle
                logger.debug("catalog_reloaded", domain=self.domain, lang=lang, source=str(bundle.source))
        return bundle

    def _load_all(self) -> None:
        if self.path is None:
            return

        root = Path(self.path)
        if not root.is_dir():
            logger.warning("catalog_path_missing", domain=self.domain, path=str(root))
            return

        for lang_dir in sorted(p for p in root.iterdir() if p.is_dir()):
            for suffix in _SUFFIXES:
                candidate = lang_dir / f"{self.domain}{suffix}"
                if candidate.is_file():
                    self._bundles[lang_dir.name] = self._read(candidate)
                    break

        logger.debug("catalog_loaded", domain=self.domain, path=str(root), languages=self.languages)

    def _read(self, source: Path) -> _Bundle:
        try:
            with source.open(encoding="utf-8") as fh:
                if source.suffix == ".json":
                    data = json.load(fh) or {}
                else:
                    data = yaml.safe_load(fh) or {}
        except (OSError, ValueError, yaml.YAMLError) as exc:
            raise CatalogLoadException(
                f"Cannot read catalog '{self.domain}' from {source}: {exc}",
                context={"domain": self.domain, "source": str(source)},
            ) from exc

        if not isinstance(data, dict) or not isinstance(data.get("messages", {}), dict):
            raise CatalogLoadException(
                f"Catalog file {source} must be a mapping with a 'messages' mapping",
                context={"domain": self.domain, "source": str(source)},
            )

        return _Bundle(
            source=source,
            mtime=source.stat().st_mtime,
            plural_rule=str(data.get("plural_forms") or DEFAULT_PLURAL_RULE),
            messages=dict(data.get("messages") or {}),
        )


class ResourceBundleCatalogLoader:
    """Creates :class:`ResourceBundleCatalog` instances.

    Domains bound without a path are looked up under *base_path*.
    """

    def __init__(self, base_path: str = "locale/") -> None:
        self._base_path = base_path

    def load(self, domain: str, path: str | None, charset: str | None) -> ResourceBundleCatalog:
        return ResourceBundleCatalog(domain, path if path is not None else self._base_path, charset)
