"""
Element / ElementsCollection: thin, lazy wrappers over chains.

Every method is an explicit call to a registered operation name; nothing is
resolved until a method runs, and every run re-resolves from the root.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .collection_conditions import CollectionCondition
from .conditions import Condition
from .locators import CollectionChain, LocatorChain

if TYPE_CHECKING:
    from .session import Session


class Element:
    def __init__(self, session: Session, chain: LocatorChain) -> None:
        self._session = session
        self._chain = chain

    @property
    def chain(self) -> LocatorChain:
        return self._chain

    def execute(
        self,
        name: str,
        *args: Any,
        timeout_s: float | None = None,
        poll_s: float | None = None,
    ) -> Any:
        return self._session.execute(name, self._chain, *args, timeout_s=timeout_s, poll_s=poll_s)

    def find(self, selector: Any, index: int = 0) -> Element:
        return self.execute("find", selector, index)

    def all(self, selector: Any) -> ElementsCollection:
        return self.execute("find_all", selector)

    def should(
        self,
        *conditions: Condition,
        timeout_s: float | None = None,
        poll_s: float | None = None,
    ) -> Element:
        self.execute("should", *conditions, timeout_s=timeout_s, poll_s=poll_s)
        return self

    def should_not(
        self,
        *conditions: Condition,
        timeout_s: float | None = None,
        poll_s: float | None = None,
    ) -> Element:
        self.execute("should_not", *conditions, timeout_s=timeout_s, poll_s=poll_s)
        return self

    should_be = should
    should_have = should

    def text(self, **kwargs: Any) -> str:
        return self.execute("text", **kwargs)

    def attribute(self, name: str, **kwargs: Any) -> str | None:
        return self.execute("attribute", name, **kwargs)

    def click(self, **kwargs: Any) -> Element:
        self.execute("click", **kwargs)
        return self

    def set_value(self, value: str, **kwargs: Any) -> Element:
        self.execute("set_value", value, **kwargs)
        return self

    def evaluate(self, expression: Any, **kwargs: Any) -> Any:
        return self.execute("evaluate", expression, **kwargs)

    def exists(self) -> bool:
        return self.execute("exists")

    def is_displayed(self) -> bool:
        return self.execute("is_displayed")

    def __repr__(self) -> str:
        return f"<Element {self._chain.describe()}>"


class ElementsCollection:
    def __init__(self, session: Session, chain: CollectionChain) -> None:
        self._session = session
        self._chain = chain

    @property
    def chain(self) -> CollectionChain:
        return self._chain

    def execute(
        self,
        name: str,
        *args: Any,
        timeout_s: float | None = None,
        poll_s: float | None = None,
    ) -> Any:
        return self._session.execute(name, self._chain, *args, timeout_s=timeout_s, poll_s=poll_s)

    def get(self, index: int) -> Element:
        return Element(self._session, self._chain.nth(index))

    def __getitem__(self, index: int) -> Element:
        return self.get(index)

    @property
    def first(self) -> Element:
        return self.get(0)

    def should(
        self,
        *conditions: CollectionCondition,
        timeout_s: float | None = None,
        poll_s: float | None = None,
    ) -> ElementsCollection:
        self.execute("should", *conditions, timeout_s=timeout_s, poll_s=poll_s)
        return self

    should_have = should
    should_be = should

    def texts(self, **kwargs: Any) -> list[str]:
        return self.execute("texts", **kwargs)

    def size(self, **kwargs: Any) -> int:
        return self.execute("size", **kwargs)

    def __repr__(self) -> str:
        return f"<ElementsCollection {self._chain.describe()}>"
