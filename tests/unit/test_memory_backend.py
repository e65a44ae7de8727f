from __future__ import annotations

import pytest

from eventually import (
    ElementNotInteractableError,
    InvalidArgumentError,
    RemoteEvaluationError,
    StaleElementError,
)
from eventually.backends import InMemoryDocument, ResolutionContext, node, parse_selector


def _page() -> InMemoryDocument:
    return InMemoryDocument(
        node(
            "form",
            "",
            node("input", name="q", type="text"),
            node("button", "Search", class_="btn primary", id="go"),
            node("button", "Reset", class_="btn", visible=False),
            id="search",
        ),
        node("div", "", node("p", "Nested ", node("b", "bold")), class_="content"),
        screenshot=b"\x89PNG",
    )


def test_in_memory_document_satisfies_protocol() -> None:
    assert isinstance(_page(), ResolutionContext)


@pytest.mark.parametrize(
    "selector,expected",
    [
        ("button", ["Search", "Reset"]),
        ("#go", ["Search"]),
        (".btn", ["Search", "Reset"]),
        ("button.btn.primary", ["Search"]),
        ("[type=text]", [""]),
        ("input[name='q']", [""]),
        ('input[name="q"]', [""]),
        ("form button", ["Search", "Reset"]),
        ("div.content b", ["bold"]),
    ],
)
def test_selector_matching(selector: str, expected: list[str]) -> None:
    doc = _page()
    assert [n.text for n in doc.find_all(selector)] == expected


def test_star_matches_every_descendant() -> None:
    doc = _page()
    form = doc.find_all("#search")[0]
    assert len(doc.find_all("*", form)) == 3


@pytest.mark.parametrize("selector", ["li[", "a]]", "#", ">>", "   ", "div..x"])
def test_malformed_selectors_raise_invalid_argument(selector: str) -> None:
    with pytest.raises(InvalidArgumentError):
        parse_selector(selector)


def test_non_string_selector_is_rejected() -> None:
    with pytest.raises(InvalidArgumentError):
        _page().find_all(42)


def test_scoped_descendant_ancestors_must_lie_inside_scope() -> None:
    doc = _page()
    content = doc.find_all(".content")[0]
    # "div" is the scope itself, so "div b" has no match under it
    assert doc.find_all("div b", content) == []
    assert [n.text for n in doc.find_all("p b", content)] == ["bold"]


def test_text_includes_visible_descendants_only() -> None:
    doc = _page()
    p = doc.find_all("p")[0]
    assert doc.text(p) == "Nested  bold"
    b = doc.find_all("b")[0]
    doc.set_visible(b, False)
    assert doc.text(p) == "Nested "


def test_visibility_is_inherited_from_ancestors() -> None:
    doc = _page()
    form = doc.find_all("form")[0]
    go = doc.find_all("#go")[0]
    assert doc.is_visible(go)
    doc.set_visible(form, False)
    assert not doc.is_visible(go)


def test_click_and_set_value() -> None:
    doc = _page()
    clicked = []
    go = doc.find_all("#go")[0]
    go.on_click = lambda n: clicked.append(n.text)
    doc.click(go)
    assert go.clicks == 1
    assert clicked == ["Search"]

    q = doc.find_all("input")[0]
    doc.set_value(q, "playwright")
    assert doc.attribute(q, "value") == "playwright"


def test_hidden_element_is_not_interactable() -> None:
    doc = _page()
    reset = doc.find_all("button")[1]
    with pytest.raises(ElementNotInteractableError):
        doc.click(reset)
    with pytest.raises(ElementNotInteractableError):
        doc.set_value(reset, "x")


def test_detached_handles_are_stale() -> None:
    doc = _page()
    go = doc.find_all("#go")[0]
    doc.remove(go)
    with pytest.raises(StaleElementError):
        doc.text(go)
    with pytest.raises(StaleElementError):
        doc.click(go)
    with pytest.raises(StaleElementError):
        doc.append(node("span"), go)


def test_mutators() -> None:
    doc = _page()
    form = doc.find_all("form")[0]
    doc.append(node("label", "Query"), form)
    label = doc.find_all("form label")[0]
    doc.set_text(label, "Search query")
    doc.set_attribute(label, "for", "q")
    assert doc.attribute(label, "for") == "q"
    doc.set_attribute(label, "for", None)
    assert doc.attribute(label, "for") is None
    assert doc.text(label) == "Search query"


def test_evaluate_runs_callables_only() -> None:
    doc = _page()
    go = doc.find_all("#go")[0]
    assert doc.evaluate(lambda n: n.attrs["id"], go) == "go"
    assert doc.evaluate(lambda n: n.tag) == "html"

    with pytest.raises(RemoteEvaluationError):
        doc.evaluate("el => el.id", go)
    with pytest.raises(RemoteEvaluationError) as exc_info:
        doc.evaluate(lambda n: 1 / 0, go)
    assert isinstance(exc_info.value.__cause__, ZeroDivisionError)


def test_screenshot_and_page_source() -> None:
    doc = _page()
    assert doc.screenshot_png() == b"\x89PNG"
    source = doc.page_source()
    assert source.startswith("<html>")
    assert '<button id="go" class="btn primary">Search</button>' in source
    assert 'hidden=""' in source

    with pytest.raises(NotImplementedError):
        InMemoryDocument().screenshot_png()
