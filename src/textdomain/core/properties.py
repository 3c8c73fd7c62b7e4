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
"""Bound configuration for the translation registry."""

from __future__ import annotations

from dataclasses import dataclass

from textdomain.core.config import config_properties


@config_properties(prefix="textdomain")
@dataclass
class TextDomainProperties:
    """Settings read from the ``textdomain`` configuration section.

    Attributes:
        output_charset: Default charset pushed onto every bound catalog.
        cached: Whether translate results are memoized.
        debug: Debug mode; disables memoization and logs every binding.
        default_locale: Language appended to every candidate list.
        cache_max_size: Bound for the LRU cache, ``None`` for unbounded.
        base_path: Root directory used when a domain is bound without a path.
    """

    output_charset: str | None = None
    cached: bool = True
    debug: bool = False
    default_locale: str = "en"
    cache_max_size: int | None = None
    base_path: str = "locale/"
