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
"""Unified exception hierarchy for textdomain.

All library exceptions inherit from TextDomainException, enabling unified
error handling. Lookup misses are never errors; they resolve to the
documented fallback value instead.

Categories:
- InvalidArgumentException: a translate call made with the wrong argument shape
- PluralRuleException: a catalog supplied a plural rule that cannot be parsed
- PluralFormOutOfRangeException: a plural rule selected a missing form
- CatalogLoadException: a catalog loader failed while binding a domain
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class TextDomainException(Exception):
    """Base exception for all textdomain errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "INVALID_ARGUMENT").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Call-site Exceptions
# =============================================================================


class InvalidArgumentException(TextDomainException, ValueError):
    """A translate call was made with a malformed argument list."""

    def __init__(self, message: str, code: str | None = "INVALID_ARGUMENT", context: dict | None = None) -> None:
        super().__init__(message, code=code, context=context)


# =============================================================================
# Plural Exceptions
# =============================================================================


class PluralRuleException(TextDomainException, ValueError):
    """A plural-rule expression is malformed or cannot be evaluated."""

    def __init__(self, message: str, code: str | None = "INVALID_PLURAL_RULE", context: dict | None = None) -> None:
        super().__init__(message, code=code, context=context)


class PluralFormOutOfRangeException(TextDomainException, IndexError):
    """A plural rule selected an index beyond the available forms."""

    def __init__(
        self,
        message: str,
        code: str | None = "PLURAL_FORM_OUT_OF_RANGE",
        context: dict | None = None,
    ) -> None:
        super().__init__(message, code=code, context=context)


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class CatalogLoadException(TextDomainException):
    """A catalog could not be loaded from its configured source."""

    def __init__(self, message: str, code: str | None = "CATALOG_LOAD_FAILED", context: dict | None = None) -> None:
        super().__init__(message, code=code, context=context)
