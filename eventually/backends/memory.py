"""
In-memory ResolutionContext.

A small thread-safe element tree that behaves like a live document: tests (or
another thread) mutate it while a dispatcher polls it.

Selector grammar (a subset of CSS):
    compound   := [tag | "*"] ( "#" ident | "." ident | "[" ident [ "=" value ] "]" )*
    selector   := compound ( whitespace compound )*      # descendant combinator
Matching is scoped: ancestors named by a descendant selector must lie inside the scope.
"""

from __future__ import annotations

import html
import re
import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from ..errors import (
    ElementNotInteractableError,
    InvalidArgumentError,
    RemoteEvaluationError,
    StaleElementError,
)

_TAG_RE = re.compile(r"\*|[A-Za-z][\w-]*")
_PART_RE = re.compile(
    r"""
    \#(?P<id>[\w-]+)
    | \.(?P<cls>[\w-]+)
    | \[\s*(?P<attr>[\w-]+)\s*(?:=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[\w-]+))\s*)?\]
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class _Compound:
    tag: str | None
    ids: tuple[str, ...]
    classes: tuple[str, ...]
    attrs: tuple[tuple[str, str | None], ...]

    def matches(self, node: Node) -> bool:
        if self.tag is not None and self.tag != "*" and node.tag.lower() != self.tag.lower():
            return False
        if any(node.attrs.get("id") != i for i in self.ids):
            return False
        node_classes = set((node.attrs.get("class") or "").split())
        if any(c not in node_classes for c in self.classes):
            return False
        for name, value in self.attrs:
            if name not in node.attrs:
                return False
            if value is not None and node.attrs[name] != value:
                return False
        return True


def _split_compounds(selector: str) -> list[str]:
    out: list[str] = []
    buf: list[str] = []
    depth = 0
    quote: str | None = None
    for ch in selector:
        if quote:
            buf.append(ch)
            if ch == quote:
                quote = None
            continue
        if ch in "\"'" and depth:
            quote = ch
        elif ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth < 0:
                raise InvalidArgumentError(f"Invalid selector: unbalanced ']' in {selector!r}")
        elif ch.isspace() and depth == 0:
            if buf:
                out.append("".join(buf))
                buf = []
            continue
        buf.append(ch)
    if depth or quote:
        raise InvalidArgumentError(f"Invalid selector: unterminated bracket in {selector!r}")
    if buf:
        out.append("".join(buf))
    return out


def _parse_compound(text: str, selector: str) -> _Compound:
    pos = 0
    tag = None
    m = _TAG_RE.match(text)
    if m:
        tag = m.group(0)
        pos = m.end()
    ids: list[str] = []
    classes: list[str] = []
    attrs: list[tuple[str, str | None]] = []
    while pos < len(text):
        m = _PART_RE.match(text, pos)
        if not m:
            raise InvalidArgumentError(
                f"Invalid selector {selector!r}: unexpected {text[pos:]!r}"
            )
        if m.group("id"):
            ids.append(m.group("id"))
        elif m.group("cls"):
            classes.append(m.group("cls"))
        else:
            value = next(
                (v for v in (m.group("dq"), m.group("sq"), m.group("bare")) if v is not None),
                None,
            )
            attrs.append((m.group("attr"), value))
        pos = m.end()
    if tag is None and not (ids or classes or attrs):
        raise InvalidArgumentError(f"Invalid selector: {selector!r}")
    return _Compound(tag=tag, ids=tuple(ids), classes=tuple(classes), attrs=tuple(attrs))


def parse_selector(selector: Any) -> tuple[_Compound, ...]:
    if not isinstance(selector, str):
        raise InvalidArgumentError(f"Selector must be a string, got {type(selector).__name__}")
    return _parse_selector(selector)


@lru_cache(maxsize=256)
def _parse_selector(selector: str) -> tuple[_Compound, ...]:
    parts = _split_compounds(selector.strip())
    if not parts:
        raise InvalidArgumentError("Invalid selector: empty")
    return tuple(_parse_compound(p, selector) for p in parts)


@dataclass(eq=False)
class Node:
    tag: str
    text: str = ""
    attrs: dict[str, str] = field(default_factory=dict)
    visible: bool = True
    children: list[Node] = field(default_factory=list)
    parent: Node | None = field(default=None, repr=False)
    clicks: int = 0
    on_click: Callable[[Node], None] | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        for child in self.children:
            child.parent = self

    def full_text(self) -> str:
        pieces = [self.text] if self.text else []
        for child in self.children:
            if child.visible:
                t = child.full_text()
                if t:
                    pieces.append(t)
        return " ".join(pieces)

    def walk(self) -> Iterator[Node]:
        for child in self.children:
            yield child
            yield from child.walk()


def node(tag: str, text: str = "", *children: Node, visible: bool = True, **attrs: str) -> Node:
    """Build a Node; `class_` is accepted for the class attribute."""
    if "class_" in attrs:
        attrs["class"] = attrs.pop("class_")
    return Node(tag=tag, text=text, attrs=dict(attrs), visible=visible, children=list(children))


class InMemoryDocument:
    """Thread-safe in-memory document implementing ResolutionContext."""

    def __init__(self, *children: Node, screenshot: bytes | None = None) -> None:
        self.root = Node(tag="html", children=list(children))
        self._screenshot = screenshot
        self._lock = threading.RLock()
        self.queries = 0

    # ----- mutation -----

    def append(self, child: Node, parent: Node | None = None) -> Node:
        with self._lock:
            target = parent or self.root
            self._check_attached(target)
            child.parent = target
            target.children.append(child)
        return child

    def remove(self, target: Node) -> None:
        with self._lock:
            if target.parent is not None:
                target.parent.children.remove(target)
                target.parent = None

    def set_text(self, target: Node, text: str) -> None:
        with self._lock:
            target.text = text

    def set_attribute(self, target: Node, name: str, value: str | None) -> None:
        with self._lock:
            if value is None:
                target.attrs.pop(name, None)
            else:
                target.attrs[name] = value

    def set_visible(self, target: Node, visible: bool) -> None:
        with self._lock:
            target.visible = visible

    # ----- ResolutionContext -----

    def find_all(self, selector: Any, scope: Any | None = None) -> list[Node]:
        compounds = parse_selector(selector)
        with self._lock:
            self.queries += 1
            base = self.root if scope is None else scope
            self._check_attached(base)
            return [n for n in base.walk() if self._matches(n, compounds, base)]

    def same_element(self, a: Any, b: Any) -> bool:
        return a is b

    def text(self, handle: Any) -> str:
        with self._lock:
            self._check_attached(handle)
            return handle.full_text()

    def attribute(self, handle: Any, name: str) -> str | None:
        with self._lock:
            self._check_attached(handle)
            return handle.attrs.get(name)

    def is_visible(self, handle: Any) -> bool:
        with self._lock:
            self._check_attached(handle)
            n: Node | None = handle
            while n is not None:
                if not n.visible:
                    return False
                n = n.parent
            return True

    def click(self, handle: Any) -> None:
        with self._lock:
            if not self.is_visible(handle):
                raise ElementNotInteractableError(f"Element <{handle.tag}> is not visible")
            handle.clicks += 1
            callback = handle.on_click
        if callback is not None:
            callback(handle)

    def set_value(self, handle: Any, value: str) -> None:
        with self._lock:
            if not self.is_visible(handle):
                raise ElementNotInteractableError(f"Element <{handle.tag}> is not visible")
            handle.attrs["value"] = value

    def evaluate(self, expression: Any, handle: Any | None = None) -> Any:
        if not callable(expression):
            raise RemoteEvaluationError(
                f"InMemoryDocument can only evaluate callables, got {type(expression).__name__}"
            )
        with self._lock:
            target = self.root if handle is None else handle
            self._check_attached(target)
            try:
                return expression(target)
            except Exception as e:
                raise RemoteEvaluationError(f"Evaluation failed: {e}") from e

    def screenshot_png(self) -> bytes:
        if self._screenshot is None:
            raise NotImplementedError("InMemoryDocument has no screenshot configured")
        return self._screenshot

    def page_source(self) -> str:
        with self._lock:
            return self._render(self.root)

    # ----- internals -----

    def _check_attached(self, target: Node) -> None:
        n: Node | None = target
        while n is not None:
            if n is self.root:
                return
            n = n.parent
        raise StaleElementError(f"Element <{target.tag}> is no longer attached to the document")

    @staticmethod
    def _matches(candidate: Node, compounds: tuple[_Compound, ...], base: Node) -> bool:
        if not compounds[-1].matches(candidate):
            return False
        remaining = list(compounds[:-1])
        n = candidate.parent
        while remaining and n is not None and n is not base:
            if remaining[-1].matches(n):
                remaining.pop()
            n = n.parent
        return not remaining

    def _render(self, n: Node) -> str:
        attrs = "".join(f' {k}="{html.escape(v)}"' for k, v in n.attrs.items())
        if not n.visible:
            attrs += ' hidden=""'
        inner = html.escape(n.text) + "".join(self._render(c) for c in n.children)
        return f"<{n.tag}{attrs}>{inner}</{n.tag}>"
