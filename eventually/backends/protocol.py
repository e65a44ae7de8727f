"""
ResolutionContext protocol.

Anything that can answer "which elements match this selector under this
scope" can back the engine. Scope None means the document root.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ResolutionContext(Protocol):
    def find_all(self, selector: Any, scope: Any | None = None) -> list[Any]:
        """
        Return current matches of selector under scope, in document order.

        Raises:
            InvalidArgumentError: selector is malformed
            StaleElementError: scope is no longer attached to the document
        """
        ...

    def same_element(self, a: Any, b: Any) -> bool: ...

    def text(self, handle: Any) -> str: ...

    def attribute(self, handle: Any, name: str) -> str | None: ...

    def is_visible(self, handle: Any) -> bool: ...

    def click(self, handle: Any) -> None: ...

    def set_value(self, handle: Any, value: str) -> None: ...

    def evaluate(self, expression: Any, handle: Any | None = None) -> Any:
        """Raises RemoteEvaluationError when the expression fails remotely."""
        ...

    def screenshot_png(self) -> bytes:
        """May raise NotImplementedError when capture is unsupported."""
        ...

    def page_source(self) -> str:
        """May raise NotImplementedError when capture is unsupported."""
        ...
