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
"""Translation cache — the memoization layer behind the resolver."""

from __future__ import annotations

import threading
from collections import OrderedDict
from collections.abc import Hashable
from typing import Any

_MISSING = object()


def singular_key(lang: str, klass: Any, msgid: str, divider: str | None) -> tuple[Any, ...]:
    """Cache key of a singular lookup."""
    return ("s", lang, klass, msgid, divider)


def plural_key(lang: str, klass: Any, msgid: str, msgid_plural: str, n: int, divider: str | None) -> tuple[Any, ...]:
    """Cache key of a plural lookup; *n* is part of the key."""
    return ("p", lang, klass, msgid, msgid_plural, n, divider)


class TranslationCache:
    """Thread-safe in-memory map of resolved translations.

    Unbounded by default. With *max_size* set, the least recently used
    entry is evicted once the cache is full. Hit and miss counters are
    kept so that cache population can be observed.
    """

    def __init__(self, max_size: int | None = None) -> None:
        if max_size is not None and max_size < 1:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self._max_size = max_size
        self._store: OrderedDict[Hashable, Any] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @property
    def max_size(self) -> int | None:
        return self._max_size

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Get a value by key, or *default* when missing."""
        with self._lock:
            value = self._store.get(key, _MISSING)
            if value is _MISSING:
                self._misses += 1
                return default
            self._hits += 1
            if self._max_size is not None:
                self._store.move_to_end(key)
            return value

    def put(self, key: Hashable, value: Any) -> None:
        """Store a value, evicting the oldest entry when bounded and full."""
        with self._lock:
            self._store[key] = value
            self._store.move_to_end(key)
            if self._max_size is not None:
                while len(self._store) > self._max_size:
                    self._store.popitem(last=False)

    def evict(self, key: Hashable) -> bool:
        """Remove a key. Returns True if the key existed."""
        with self._lock:
            return self._store.pop(key, _MISSING) is not _MISSING

    def clear(self) -> None:
        """Remove all entries. Counters are kept."""
        with self._lock:
            self._store.clear()

    def get_stats(self) -> dict[str, Any]:
        """Size, bound and hit/miss counters."""
        with self._lock:
            return {
                "type": "memory" if self._max_size is None else "lru",
                "size": len(self._store),
                "max_size": self._max_size,
                "hits": self._hits,
                "misses": self._misses,
            }

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._store

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
