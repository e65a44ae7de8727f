"""
Element conditions: read-only predicates over a resolved element.

A condition classifies the observed state as ACCEPT or REJECT. It also carries
a static policy, `accepts_when_unresolvable`, deciding whether an element that
cannot be resolved at all satisfies it (true for `hidden` and `absent`).
Conditions are stateless and safe to share across chains and threads.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .backends.protocol import ResolutionContext

_WHITESPACE_RE = re.compile(r"[\s\u00a0\u2007\u202f]+")


def normalize_text(value: Any) -> str:
    """Case-fold, collapse runs of whitespace into one space, trim."""
    if value is None:
        return ""
    return _WHITESPACE_RE.sub(" ", str(value).casefold()).strip()


class Verdict(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"


@dataclass(frozen=True)
class ConditionResult:
    verdict: Verdict
    actual: Any = None

    @property
    def passed(self) -> bool:
        return self.verdict is Verdict.ACCEPT

    @classmethod
    def of(cls, passed: bool, actual: Any = None) -> ConditionResult:
        return cls(verdict=Verdict.ACCEPT if passed else Verdict.REJECT, actual=actual)


class Condition(ABC):
    """Base class for element conditions."""

    name = "condition"
    accepts_when_unresolvable = False

    @abstractmethod
    def evaluate(self, context: ResolutionContext, handle: Any) -> ConditionResult:
        """Classify the observed state of a resolved element."""

    def describe(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return f"<Condition {self.describe()}>"


class _Visible(Condition):
    name = "visible"

    def evaluate(self, context: ResolutionContext, handle: Any) -> ConditionResult:
        shown = context.is_visible(handle)
        return ConditionResult.of(shown, actual="visible" if shown else "hidden")


class _Hidden(Condition):
    name = "hidden"
    accepts_when_unresolvable = True

    def evaluate(self, context: ResolutionContext, handle: Any) -> ConditionResult:
        shown = context.is_visible(handle)
        return ConditionResult.of(not shown, actual="visible" if shown else "hidden")


class _Exist(Condition):
    name = "exist"

    def evaluate(self, context: ResolutionContext, handle: Any) -> ConditionResult:
        return ConditionResult.of(True, actual="exists")


class _Absent(Condition):
    name = "absent"
    accepts_when_unresolvable = True

    def evaluate(self, context: ResolutionContext, handle: Any) -> ConditionResult:
        return ConditionResult.of(False, actual="exists")


class Text(Condition):
    """Normalized element text contains the normalized expected text."""

    name = "text"

    def __init__(self, expected: str) -> None:
        self.expected = expected

    def evaluate(self, context: ResolutionContext, handle: Any) -> ConditionResult:
        actual = context.text(handle)
        return ConditionResult.of(normalize_text(self.expected) in normalize_text(actual), actual)

    def describe(self) -> str:
        return f"{self.name} {self.expected!r}"


class ExactText(Text):
    name = "exact text"

    def evaluate(self, context: ResolutionContext, handle: Any) -> ConditionResult:
        actual = context.text(handle)
        return ConditionResult.of(normalize_text(self.expected) == normalize_text(actual), actual)


class Attribute(Condition):
    """Attribute is present (value None) or equals value exactly."""

    name = "attribute"

    def __init__(self, attr: str, value: str | None = None) -> None:
        self.attr = attr
        self.value = value

    def evaluate(self, context: ResolutionContext, handle: Any) -> ConditionResult:
        actual = context.attribute(handle, self.attr)
        if self.value is None:
            return ConditionResult.of(actual is not None, actual)
        return ConditionResult.of(actual == self.value, actual)

    def describe(self) -> str:
        if self.value is None:
            return f"{self.name} {self.attr}"
        return f"{self.name} {self.attr}={self.value!r}"


class CssClass(Condition):
    name = "css class"

    def __init__(self, class_name: str) -> None:
        self.class_name = class_name

    def evaluate(self, context: ResolutionContext, handle: Any) -> ConditionResult:
        actual = context.attribute(handle, "class") or ""
        return ConditionResult.of(self.class_name in actual.split(), actual)

    def describe(self) -> str:
        return f"{self.name} {self.class_name!r}"


class Not(Condition):
    """Inverts both the verdict and the missing-element policy of a condition."""

    def __init__(self, condition: Condition) -> None:
        self.condition = condition
        self.accepts_when_unresolvable = not condition.accepts_when_unresolvable

    @property
    def name(self) -> str:  # type: ignore[override]
        return f"not {self.condition.describe()}"

    def evaluate(self, context: ResolutionContext, handle: Any) -> ConditionResult:
        inner = self.condition.evaluate(context, handle)
        return ConditionResult.of(not inner.passed, inner.actual)


visible = _Visible()
hidden = _Hidden()
exist = _Exist()
absent = _Absent()


def text(expected: str) -> Condition:
    return Text(expected)


def exact_text(expected: str) -> Condition:
    return ExactText(expected)


def attribute(name: str, value: str | None = None) -> Condition:
    return Attribute(name, value)


def css_class(name: str) -> Condition:
    return CssClass(name)


def not_(condition: Condition) -> Condition:
    return Not(condition)
