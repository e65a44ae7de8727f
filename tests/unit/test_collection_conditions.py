from __future__ import annotations

import pytest

from eventually import (
    InvalidArgumentError,
    empty,
    exact_texts,
    size,
    size_greater_than,
    texts,
    texts_in_any_order,
)
from eventually.backends import InMemoryDocument, node


def _items(*labels: str) -> tuple[InMemoryDocument, list]:
    doc = InMemoryDocument(node("ul", "", *(node("li", label) for label in labels)))
    return doc, doc.find_all("li")


def test_texts_in_any_order_uses_containment() -> None:
    doc, handles = _items("Themes", "Resources", "Templates", "v8")
    assert texts_in_any_order("He", "ate", "8", "PLATES").evaluate(doc, handles).passed


def test_texts_in_any_order_fails_when_an_item_matches_nothing() -> None:
    doc, handles = _items("Themes", "Resources", "Templates", "v8")
    result = texts_in_any_order("Zebra").evaluate(doc, handles)
    assert not result.passed
    assert result.actual == ["Themes", "Resources", "Templates", "v8"]


def test_texts_in_any_order_does_not_consume_actual_items() -> None:
    doc, handles = _items("Templates")
    assert texts_in_any_order("temp", "plates", "late").evaluate(doc, handles).passed


def test_texts_in_any_order_ignores_size() -> None:
    doc, handles = _items("Alpha", "Beta", "Gamma")
    assert texts_in_any_order("gamma").evaluate(doc, handles).passed


def test_expected_texts_must_not_be_empty() -> None:
    with pytest.raises(InvalidArgumentError):
        texts_in_any_order()
    with pytest.raises(InvalidArgumentError):
        texts()
    with pytest.raises(InvalidArgumentError):
        exact_texts()


def test_ordered_texts() -> None:
    doc, handles = _items("Alpha one", "Beta two")
    assert texts("alpha", "two").evaluate(doc, handles).passed
    assert not texts("two", "alpha").evaluate(doc, handles).passed
    assert not texts("alpha").evaluate(doc, handles).passed


def test_exact_texts() -> None:
    doc, handles = _items("Alpha", "Beta")
    assert exact_texts("alpha", " BETA ").evaluate(doc, handles).passed
    assert not exact_texts("alp", "beta").evaluate(doc, handles).passed


def test_size_conditions() -> None:
    doc, handles = _items("a", "b")
    assert size(2).evaluate(doc, handles).passed
    assert size(3).evaluate(doc, handles).actual == 2
    assert size_greater_than(1).evaluate(doc, handles).passed
    assert not size_greater_than(2).evaluate(doc, handles).passed
    assert not empty.evaluate(doc, handles).passed
    assert empty.evaluate(doc, []).passed
    with pytest.raises(InvalidArgumentError):
        size(-1)


def test_empty_accepts_missing_parent() -> None:
    assert empty.accepts_when_unresolvable
    assert not size(0).accepts_when_unresolvable
    assert not texts_in_any_order("a").accepts_when_unresolvable


def test_describe() -> None:
    assert texts_in_any_order("a", "b").describe() == "texts in any order ['a', 'b']"
    assert size(3).describe() == "size 3"
    assert empty.describe() == "empty"
