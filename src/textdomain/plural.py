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
"""Plural rules — a safe evaluator for gettext plural expressions.

Catalogs describe how a count selects a plural form with a C-like
expression over ``n``, e.g. ``n != 1`` or
``n%10==1 && n%100!=11 ? 0 : n != 0 ? 1 : 2``. The expression is parsed
by recursive descent into a tree of closures and evaluated without
``eval()`` or ``exec()``.

Grammar, lowest precedence first::

    ternary   := or ("?" ternary ":" ternary)?
    or        := and ("||" and)*
    and       := equality ("&&" equality)*
    equality  := relation (("==" | "!=") relation)*
    relation  := additive (("<" | "<=" | ">" | ">=") additive)*
    additive  := term (("+" | "-") term)*
    term      := unary (("*" | "/" | "%") unary)*
    unary     := ("!" | "-" | "+") unary | primary
    primary   := INTEGER | "n" | "(" ternary ")"

Comparisons and logical operators yield ``bool``; arithmetic yields ``int``.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import NoReturn

from textdomain.kernel.exceptions import PluralFormOutOfRangeException, PluralRuleException

Value = int | bool
Node = Callable[[int], Value]

_TOKEN_RE = re.compile(r"\s*(?:(\d+)|(n)\b|(&&|\|\||==|!=|<=|>=|[-+*/%<>!?:()]))")
_NPLURALS_RE = re.compile(r"nplurals\s*=\s*(\d+)")
_PLURAL_RE = re.compile(r"plural\s*=\s*([^;]*)")

_COMPARISONS: dict[str, Callable[[int, int], bool]] = {
    "==": lambda a, b: a == b,
    "!=": lambda a, b: a != b,
    "<": lambda a, b: a < b,
    "<=": lambda a, b: a <= b,
    ">": lambda a, b: a > b,
    ">=": lambda a, b: a >= b,
}


def _c_div(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    if b == 0:
        raise PluralRuleException("Division by zero in plural rule", code="PLURAL_RULE_DIVISION_BY_ZERO")
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b >= 0) else -quotient


def _c_mod(a: int, b: int) -> int:
    """Remainder with the sign of the dividend."""
    return a - b * _c_div(a, b)


_ARITHMETIC: dict[str, Callable[[int, int], int]] = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": _c_div,
    "%": _c_mod,
}


def _tokenize(expression: str) -> list[str]:
    tokens: list[str] = []
    pos = 0
    text = expression.rstrip()
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise PluralRuleException(
                f"Unexpected character {text[pos:].strip()[:1]!r} in plural rule '{expression}'",
                context={"expression": expression, "position": pos},
            )
        tokens.append(match.group(match.lastindex or 0))
        pos = match.end()
    return tokens


class _Parser:
    """Recursive-descent parser turning tokens into an evaluation tree."""

    def __init__(self, expression: str) -> None:
        self._expression = expression
        self._tokens = _tokenize(expression)
        self._pos = 0

    def parse(self) -> Node:
        if not self._tokens:
            raise PluralRuleException(f"Empty plural rule '{self._expression}'")
        node = self._ternary()
        if self._pos != len(self._tokens):
            self._fail(f"unexpected token {self._tokens[self._pos]!r}")
        return node

    # ------------------------------------------------------------------
    # Grammar rules
    # ------------------------------------------------------------------

    def _ternary(self) -> Node:
        cond = self._or()
        if not self._accept("?"):
            return cond
        then = self._ternary()
        self._expect(":")
        other = self._ternary()
        return lambda n: then(n) if cond(n) else other(n)

    def _or(self) -> Node:
        node = self._and()
        while self._accept("||"):
            left, right = node, self._and()
            node = lambda n, left=left, right=right: bool(left(n)) or bool(right(n))  # noqa: E731
        return node

    def _and(self) -> Node:
        node = self._equality()
        while self._accept("&&"):
            left, right = node, self._equality()
            node = lambda n, left=left, right=right: bool(left(n)) and bool(right(n))  # noqa: E731
        return node

    def _equality(self) -> Node:
        return self._binary(self._relation, _COMPARISONS, ("==", "!="))

    def _relation(self) -> Node:
        return self._binary(self._additive, _COMPARISONS, ("<", "<=", ">", ">="))

    def _additive(self) -> Node:
        return self._binary(self._term, _ARITHMETIC, ("+", "-"))

    def _term(self) -> Node:
        return self._binary(self._unary, _ARITHMETIC, ("*", "/", "%"))

    def _unary(self) -> Node:
        if self._accept("!"):
            operand = self._unary()
            return lambda n: not operand(n)
        if self._accept("-"):
            operand = self._unary()
            return lambda n: -int(operand(n))
        if self._accept("+"):
            operand = self._unary()
            return lambda n: int(operand(n))
        return self._primary()

    def _primary(self) -> Node:
        token = self._next()
        if token == "n":
            return lambda n: n
        if token.isdigit():
            value = int(token)
            return lambda n: value
        if token == "(":
            node = self._ternary()
            self._expect(")")
            return node
        self._fail(f"unexpected token {token!r}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _binary(
        self,
        operand: Callable[[], Node],
        table: dict[str, Callable[[int, int], Value]],
        operators: tuple[str, ...],
    ) -> Node:
        node = operand()
        while self._peek() in operators:
            func = table[self._next()]
            left, right = node, operand()
            node = lambda n, f=func, left=left, right=right: f(int(left(n)), int(right(n)))  # noqa: E731
        return node

    def _peek(self) -> str | None:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _next(self) -> str:
        token = self._peek()
        if token is None:
            self._fail("unexpected end of expression")
        self._pos += 1
        return token

    def _accept(self, token: str) -> bool:
        if self._peek() == token:
            self._pos += 1
            return True
        return False

    def _expect(self, token: str) -> None:
        if not self._accept(token):
            found = self._peek()
            self._fail(f"expected {token!r} but found {'end of expression' if found is None else repr(found)}")

    def _fail(self, reason: str) -> NoReturn:
        raise PluralRuleException(
            f"Invalid plural rule '{self._expression}': {reason}",
            context={"expression": self._expression, "position": self._pos},
        )


@dataclass(frozen=True)
class PluralRule:
    """A compiled plural rule.

    Attributes:
        expression: The ``plural=`` expression that was compiled.
        nplurals: Number of forms declared by a ``Plural-Forms`` header, if any.
    """

    expression: str
    nplurals: int | None
    _node: Node = field(repr=False, compare=False)

    def evaluate(self, n: int) -> Value:
        """Evaluate the rule for count *n*: a ``bool`` or an integer index."""
        return self._node(int(n))

    def select(self, forms: Sequence[str], n: int) -> str:
        """Pick the form for *n*.

        A boolean result picks ``forms[1]`` when true and ``forms[0]``
        otherwise; an integer result is used as the index. When the
        header declared ``nplurals``, forms past that count are unreachable.
        """
        result = self.evaluate(n)
        index = (1 if result else 0) if isinstance(result, bool) else result
        available = len(forms) if self.nplurals is None else min(len(forms), self.nplurals)
        if not 0 <= index < available:
            raise PluralFormOutOfRangeException(
                f"Plural rule '{self.expression}' selected form {index} for n={n}, but only {available} available",
                context={
                    "expression": self.expression,
                    "n": n,
                    "index": index,
                    "forms": len(forms),
                    "nplurals": self.nplurals,
                },
            )
        return forms[index]


@functools.lru_cache(maxsize=256)
def compile_rule(rule: str) -> PluralRule:
    """Compile a plural expression or a full ``Plural-Forms`` header.

    >>> compile_rule("nplurals=2; plural=n != 1;").evaluate(3)
    True
    """
    nplurals: int | None = None
    expression = rule.strip()
    plural_match = _PLURAL_RE.search(expression)
    if plural_match is None:
        expression = expression.rstrip(";").strip()
    if plural_match is not None:
        nplurals_match = _NPLURALS_RE.search(expression)
        if nplurals_match is not None:
            nplurals = int(nplurals_match.group(1))
        expression = plural_match.group(1).strip()
    return PluralRule(expression=expression, nplurals=nplurals, _node=_Parser(expression).parse())


def select_form(forms: Sequence[str], rule: str, n: int) -> str:
    """Compile *rule* (memoized) and pick the form for *n*."""
    return compile_rule(rule).select(forms, n)
