"""
Collection conditions: predicates over the ordered list of elements a
CollectionChain currently resolves to.

Text-based collection conditions compare normalized texts (see
conditions.normalize_text) and use substring containment, not equality,
except for exact_texts.

Note on texts_in_any_order: every expected item must be *contained in* at
least one actual item, and actual items are not consumed. One actual item may
satisfy several expected items, and short expected fragments can match long
actual texts:

    actual   = ["Themes", "Resources", "Templates", "v8"]
    expected = ["He", "ate", "8", "PLATES"]   # passes
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from .conditions import ConditionResult, normalize_text
from .errors import InvalidArgumentError

if TYPE_CHECKING:
    from .backends.protocol import ResolutionContext


class CollectionCondition(ABC):
    name = "collection condition"
    accepts_when_unresolvable = False

    @abstractmethod
    def evaluate(self, context: ResolutionContext, handles: Sequence[Any]) -> ConditionResult:
        """Classify the observed list of resolved elements."""

    def describe(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return f"<CollectionCondition {self.describe()}>"


def _texts(context: ResolutionContext, handles: Sequence[Any]) -> list[str]:
    return [context.text(h) for h in handles]


class _ExpectedTexts(CollectionCondition):
    def __init__(self, expected: Sequence[str]) -> None:
        if not expected:
            raise InvalidArgumentError(f"No expected texts given for '{self.name}'")
        self.expected = list(expected)

    def describe(self) -> str:
        return f"{self.name} {self.expected!r}"


class TextsInAnyOrder(_ExpectedTexts):
    name = "texts in any order"

    def evaluate(self, context: ResolutionContext, handles: Sequence[Any]) -> ConditionResult:
        actual = _texts(context, handles)
        normalized_actual = [normalize_text(t) for t in actual]
        passed = all(
            any(normalize_text(want) in have for have in normalized_actual)
            for want in self.expected
        )
        return ConditionResult.of(passed, actual)


class Texts(_ExpectedTexts):
    """Same size; each actual text contains the expected text at the same position."""

    name = "texts"

    def _matches(self, want: str, have: str) -> bool:
        return normalize_text(want) in normalize_text(have)

    def evaluate(self, context: ResolutionContext, handles: Sequence[Any]) -> ConditionResult:
        actual = _texts(context, handles)
        if len(actual) != len(self.expected):
            return ConditionResult.of(False, actual)
        passed = all(self._matches(w, h) for w, h in zip(self.expected, actual))
        return ConditionResult.of(passed, actual)


class ExactTexts(Texts):
    name = "exact texts"

    def _matches(self, want: str, have: str) -> bool:
        return normalize_text(want) == normalize_text(have)


class Size(CollectionCondition):
    name = "size"

    def __init__(self, expected: int) -> None:
        if expected < 0:
            raise InvalidArgumentError(f"Size must be non-negative, got {expected}")
        self.expected = expected

    def _compare(self, actual: int) -> bool:
        return actual == self.expected

    def evaluate(self, context: ResolutionContext, handles: Sequence[Any]) -> ConditionResult:
        return ConditionResult.of(self._compare(len(handles)), len(handles))

    def describe(self) -> str:
        return f"{self.name} {self.expected}"


class SizeGreaterThan(Size):
    name = "size >"

    def _compare(self, actual: int) -> bool:
        return actual > self.expected


class _Empty(Size):
    name = "empty"
    accepts_when_unresolvable = True

    def __init__(self) -> None:
        super().__init__(0)

    def describe(self) -> str:
        return self.name


empty = _Empty()


def texts_in_any_order(*expected: str) -> CollectionCondition:
    return TextsInAnyOrder(expected)


def texts(*expected: str) -> CollectionCondition:
    return Texts(expected)


def exact_texts(*expected: str) -> CollectionCondition:
    return ExactTexts(expected)


def size(expected: int) -> CollectionCondition:
    return Size(expected)


def size_greater_than(expected: int) -> CollectionCondition:
    return SizeGreaterThan(expected)
