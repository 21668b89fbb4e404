"""
Filter builder for Consul's filter expression language.

Several endpoints accept a ``filter`` query parameter (see
``Features(filter=...)``). The builder handles quoting and escaping of values
so expressions can be composed safely from user input.

Example:
    from consulkit.filters import F

    expr = (
        F.selector("Service").equals("web") &
        F.selector("Tags").contains("primary")
    )
    client.catalog.service("web", features=Features(filter=expr))

    # Negation and alternatives
    expr = ~F.selector("Meta.env").equals("dev") | F.selector("Node").matches("^db-")

    # Raw filter string escape hatch
    expr = F.raw('Service.Port > 8000')
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel


def _escape_string(value: str) -> str:
    """
    Escape a string value for use inside double quotes.

    Backslashes are doubled first, then quotes and control characters escaped.
    """
    result = value.replace("\\", "\\\\")
    result = result.replace('"', '\\"')
    result = result.replace("\n", "\\n")
    result = result.replace("\t", "\\t")
    result = result.replace("\r", "\\r")
    return result


def _format_value(value: Any) -> str:
    """Format a Python value as a filter literal."""
    if value is None:
        raise ValueError("None is not a valid filter literal; use is_empty()/is_not_empty().")
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    text = value if isinstance(value, str) else str(value)
    return f'"{_escape_string(text)}"'


def _resolve_selector(entity: Any, selector: str) -> Any:
    """
    Walk a dotted selector (``Service.Meta.env``) through nested data.

    Pydantic models are dumped by alias first so selectors use the wire
    (PascalCase) names, as the server does.
    """
    current: Any = entity
    if isinstance(current, BaseModel):
        current = current.model_dump(by_alias=True)
    for part in selector.split("."):
        if isinstance(current, BaseModel):
            current = current.model_dump(by_alias=True)
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
        if current is None:
            return None
    return current


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class FilterExpression(ABC):
    """Base class for filter expressions."""

    @abstractmethod
    def to_string(self) -> str:
        """Render the expression in Consul filter syntax."""
        ...

    @abstractmethod
    def matches(self, entity: Any) -> bool:
        """
        Evaluate the expression client-side against a dict or model.

        Useful when filtering data that was already fetched (for example
        the output of an agent endpoint that has no server-side filter).
        """
        ...

    def __and__(self, other: FilterExpression) -> FilterExpression:
        return AndExpression(self, other)

    def __or__(self, other: FilterExpression) -> FilterExpression:
        return OrExpression(self, other)

    def __invert__(self) -> FilterExpression:
        return NotExpression(self)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Filter({self.to_string()!r})"


@dataclass
class SelectorComparison(FilterExpression):
    """``Selector == "value"`` and friends."""

    selector: str
    operator: str
    value: Any

    def to_string(self) -> str:
        return f"{self.selector} {self.operator} {_format_value(self.value)}"

    def matches(self, entity: Any) -> bool:
        actual = _resolve_selector(entity, self.selector)
        if self.operator == "==":
            return actual is not None and _as_text(actual) == _as_text(self.value)
        if self.operator == "!=":
            return actual is None or _as_text(actual) != _as_text(self.value)
        if self.operator in ("contains", "not contains"):
            found = _contains(actual, self.value)
            return found if self.operator == "contains" else not found
        if self.operator in ("matches", "not matches"):
            hit = actual is not None and re.search(str(self.value), _as_text(actual)) is not None
            return hit if self.operator == "matches" else not hit
        raise ValueError(f"Unsupported operator for client-side matching: {self.operator}")


@dataclass
class MembershipExpression(FilterExpression):
    """``"value" in Selector`` / ``"value" not in Selector``."""

    value: Any
    selector: str
    negated: bool = False

    def to_string(self) -> str:
        op = "not in" if self.negated else "in"
        return f"{_format_value(self.value)} {op} {self.selector}"

    def matches(self, entity: Any) -> bool:
        found = _contains(_resolve_selector(entity, self.selector), self.value)
        return not found if self.negated else found


@dataclass
class EmptinessCheck(FilterExpression):
    """``Selector is empty`` / ``Selector is not empty``."""

    selector: str
    negated: bool = False

    def to_string(self) -> str:
        return f"{self.selector} is {'not empty' if self.negated else 'empty'}"

    def matches(self, entity: Any) -> bool:
        actual = _resolve_selector(entity, self.selector)
        empty = actual is None or (hasattr(actual, "__len__") and len(actual) == 0)
        return not empty if self.negated else empty


def _contains(container: Any, value: Any) -> bool:
    if container is None:
        return False
    if isinstance(container, str):
        return _as_text(value) in container
    if isinstance(container, Mapping):
        return _as_text(value) in {str(k) for k in container}
    try:
        return any(_as_text(item) == _as_text(value) for item in container)
    except TypeError:
        return False


@dataclass
class RawFilter(FilterExpression):
    """A raw filter string passed through unchanged."""

    expression: str

    def to_string(self) -> str:
        return self.expression

    def matches(self, entity: Any) -> bool:
        raise NotImplementedError(
            "RawFilter cannot be evaluated client-side; build the expression with F.selector()."
        )


@dataclass
class AndExpression(FilterExpression):
    left: FilterExpression
    right: FilterExpression

    def to_string(self) -> str:
        return f"({self.left.to_string()}) and ({self.right.to_string()})"

    def matches(self, entity: Any) -> bool:
        return self.left.matches(entity) and self.right.matches(entity)


@dataclass
class OrExpression(FilterExpression):
    left: FilterExpression
    right: FilterExpression

    def to_string(self) -> str:
        return f"({self.left.to_string()}) or ({self.right.to_string()})"

    def matches(self, entity: Any) -> bool:
        return self.left.matches(entity) or self.right.matches(entity)


@dataclass
class NotExpression(FilterExpression):
    expr: FilterExpression

    def to_string(self) -> str:
        return f"not ({self.expr.to_string()})"

    def matches(self, entity: Any) -> bool:
        return not self.expr.matches(entity)


class SelectorBuilder:
    """Builder for expressions on a single selector."""

    def __init__(self, selector: str):
        if not selector or not selector.strip():
            raise ValueError("Selector cannot be empty")
        self._selector = selector.strip()

    def equals(self, value: Any) -> SelectorComparison:
        return SelectorComparison(self._selector, "==", value)

    def not_equals(self, value: Any) -> SelectorComparison:
        return SelectorComparison(self._selector, "!=", value)

    def contains(self, value: Any) -> SelectorComparison:
        """Selector (a list, map or string) contains value."""
        return SelectorComparison(self._selector, "contains", value)

    def not_contains(self, value: Any) -> SelectorComparison:
        return SelectorComparison(self._selector, "not contains", value)

    def matches(self, pattern: str) -> SelectorComparison:
        """Selector matches a regular expression."""
        return SelectorComparison(self._selector, "matches", pattern)

    def not_matches(self, pattern: str) -> SelectorComparison:
        return SelectorComparison(self._selector, "not matches", pattern)

    def in_(self, value: Any) -> MembershipExpression:
        """Value is an element (or key) of the selector."""
        return MembershipExpression(value, self._selector)

    def not_in(self, value: Any) -> MembershipExpression:
        return MembershipExpression(value, self._selector, negated=True)

    def is_empty(self) -> EmptinessCheck:
        return EmptinessCheck(self._selector)

    def is_not_empty(self) -> EmptinessCheck:
        return EmptinessCheck(self._selector, negated=True)

    def one_of(self, values: list[Any]) -> FilterExpression:
        """Selector equals any of the values (OR of equals)."""
        if not values:
            raise ValueError("one_of() requires at least one value")
        result: FilterExpression = self.equals(values[0])
        for value in values[1:]:
            result = result | self.equals(value)
        return result


class Filter:
    """
    Factory for building filter expressions.

    Example:
        Filter.selector("ServiceName").equals("web")
        Filter.and_(
            Filter.selector("Status").equals("passing"),
            Filter.selector("Node").matches("^app"),
        )
    """

    @staticmethod
    def selector(name: str) -> SelectorBuilder:
        return SelectorBuilder(name)

    @staticmethod
    def raw(expression: str) -> RawFilter:
        """Wrap a hand-written expression; it is sent to Consul unmodified."""
        return RawFilter(expression)

    @staticmethod
    def and_(*expressions: FilterExpression) -> FilterExpression:
        if not expressions:
            raise ValueError("and_() requires at least one expression")
        result = expressions[0]
        for expr in expressions[1:]:
            result = result & expr
        return result

    @staticmethod
    def or_(*expressions: FilterExpression) -> FilterExpression:
        if not expressions:
            raise ValueError("or_() requires at least one expression")
        result = expressions[0]
        for expr in expressions[1:]:
            result = result | expr
        return result


F = Filter
