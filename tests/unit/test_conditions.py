from __future__ import annotations

import pytest

from eventually import (
    Verdict,
    absent,
    attribute,
    css_class,
    exact_text,
    exist,
    hidden,
    normalize_text,
    not_,
    text,
    visible,
)
from eventually.backends import InMemoryDocument, node


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("  Hello   World ", "hello world"),
        ("Line\none\ttwo", "line one two"),
        ("No\u00a0break\u202fspace", "no break space"),
        ("Straße", "strasse"),
        (None, ""),
        (42, "42"),
    ],
)
def test_normalize_text(raw: object, expected: str) -> None:
    assert normalize_text(raw) == expected


def _doc() -> tuple[InMemoryDocument, object, object]:
    doc = InMemoryDocument(
        node("h1", "Welcome\u00a0Back", id="title", class_="hero large"),
        node("p", "secret", id="hint", visible=False),
    )
    return doc, doc.find_all("#title")[0], doc.find_all("#hint")[0]


def test_visibility_conditions() -> None:
    doc, title, hint = _doc()
    assert visible.evaluate(doc, title).passed
    assert not visible.evaluate(doc, hint).passed
    assert hidden.evaluate(doc, hint).passed
    assert hidden.evaluate(doc, title).verdict is Verdict.REJECT


def test_existence_conditions() -> None:
    doc, title, _ = _doc()
    assert exist.evaluate(doc, title).passed
    assert not absent.evaluate(doc, title).passed


def test_text_is_normalized_containment() -> None:
    doc, title, _ = _doc()
    assert text("welcome back").evaluate(doc, title).passed
    assert text("BACK").evaluate(doc, title).passed
    result = text("goodbye").evaluate(doc, title)
    assert not result.passed
    assert result.actual == "Welcome\u00a0Back"


def test_exact_text_requires_full_match() -> None:
    doc, title, _ = _doc()
    assert exact_text("  welcome   back ").evaluate(doc, title).passed
    assert not exact_text("welcome").evaluate(doc, title).passed


def test_attribute_and_css_class() -> None:
    doc, title, _ = _doc()
    assert attribute("id").evaluate(doc, title).passed
    assert attribute("id", "title").evaluate(doc, title).passed
    assert not attribute("id", "Title").evaluate(doc, title).passed
    assert not attribute("data-x").evaluate(doc, title).passed
    assert css_class("hero").evaluate(doc, title).passed
    assert not css_class("her").evaluate(doc, title).passed


def test_missing_element_policy() -> None:
    assert hidden.accepts_when_unresolvable
    assert absent.accepts_when_unresolvable
    assert not visible.accepts_when_unresolvable
    assert not exist.accepts_when_unresolvable
    assert not text("x").accepts_when_unresolvable


def test_not_inverts_verdict_and_policy() -> None:
    doc, title, hint = _doc()
    not_visible = not_(visible)
    assert not_visible.evaluate(doc, hint).passed
    assert not not_visible.evaluate(doc, title).passed
    assert not_visible.accepts_when_unresolvable
    assert not not_(hidden).accepts_when_unresolvable
    assert not_(text("goodbye")).evaluate(doc, title).passed


def test_describe() -> None:
    assert visible.describe() == "visible"
    assert text("Hi").describe() == "text 'Hi'"
    assert attribute("href", "/x").describe() == "attribute href='/x'"
    assert not_(css_class("active")).describe() == "not css class 'active'"
    assert repr(exact_text("a")) == "<Condition exact text 'a'>"
