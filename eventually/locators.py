"""
Lazy, immutable element locators.

A LocatorChain describes *how* to find an element, not the element itself.
Building one never touches the remote document; only resolve() does, and it
re-queries from scratch on every call because the document may have changed
since the previous attempt.

Example:
    menu = LocatorChain("#menu")
    third_item = menu.child("li", 2)      # nothing queried yet
    handle = third_item.resolve(context)  # root -> #menu -> li[2]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .errors import IndexOutOfRangeError, InvalidArgumentError, NotFoundError

if TYPE_CHECKING:
    from .backends.protocol import ResolutionContext


def _check_selector(selector: Any) -> None:
    if selector is None or (isinstance(selector, str) and not selector.strip()):
        raise InvalidArgumentError("Selector must be a non-empty value")


@dataclass(frozen=True)
class LocatorChain:
    """A single element: the index-th match of selector under parent (or the root)."""

    selector: Any
    index: int = 0
    parent: LocatorChain | None = None

    def __post_init__(self) -> None:
        _check_selector(self.selector)
        if not isinstance(self.index, int) or self.index < 0:
            raise InvalidArgumentError(f"Index must be a non-negative int, got {self.index!r}")

    def child(self, selector: Any, index: int = 0) -> LocatorChain:
        return LocatorChain(selector=selector, index=index, parent=self)

    def children(self, selector: Any) -> CollectionChain:
        return CollectionChain(selector=selector, parent=self)

    def lineage(self) -> list[LocatorChain]:
        """Nodes from the root-most ancestor down to this chain."""
        nodes: list[LocatorChain] = []
        node: LocatorChain | None = self
        while node is not None:
            nodes.append(node)
            node = node.parent
        nodes.reverse()
        return nodes

    def describe(self) -> str:
        parts = []
        for node in self.lineage():
            part = f"{node.selector!r}"
            if node.index:
                part += f"[{node.index}]"
            parts.append(part)
        return " > ".join(parts)

    def resolve(self, context: ResolutionContext) -> Any:
        """
        Resolve this chain against the current state of the document.

        Raises:
            NotFoundError: a level of the chain has no match
            IndexOutOfRangeError: a level has fewer matches than its index requires
        """
        scope: Any = None
        for node in self.lineage():
            matches = context.find_all(node.selector, scope)
            if not matches:
                raise NotFoundError(
                    f"Element not found {{{node.selector!r}}} while resolving {self.describe()}",
                    locator=self.describe(),
                    selector=node.selector,
                )
            if node.index >= len(matches):
                raise IndexOutOfRangeError(
                    f"Index {node.index} out of range for {{{node.selector!r}}} "
                    f"({len(matches)} match(es)) while resolving {self.describe()}",
                    locator=self.describe(),
                    selector=node.selector,
                    index=node.index,
                    size=len(matches),
                )
            scope = matches[node.index]
        return scope

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True)
class CollectionChain:
    """All matches of selector under parent (or the root), in document order."""

    selector: Any
    parent: LocatorChain | None = None

    def __post_init__(self) -> None:
        _check_selector(self.selector)

    def nth(self, index: int) -> LocatorChain:
        return LocatorChain(selector=self.selector, index=index, parent=self.parent)

    def describe(self) -> str:
        prefix = f"{self.parent.describe()} > " if self.parent is not None else ""
        return f"{prefix}{self.selector!r}[*]"

    def resolve(self, context: ResolutionContext) -> list[Any]:
        """
        Resolve to the (possibly empty) list of current matches.

        Only a missing parent is a resolution failure; zero matches is a valid state.
        """
        scope = self.parent.resolve(context) if self.parent is not None else None
        return list(context.find_all(self.selector, scope))

    def __str__(self) -> str:
        return self.describe()


def resolve(chain: LocatorChain | CollectionChain, context: ResolutionContext) -> Any:
    return chain.resolve(context)
