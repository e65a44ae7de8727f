"""
Playwright-backed ResolutionContext.

Wraps a Playwright *sync* Page. Element handles returned by find_all are
Playwright ElementHandle objects; they are never cached by the engine.

Usage:
    from playwright.sync_api import sync_playwright
    from eventually import Session
    from eventually.backends import PlaywrightContext

    with sync_playwright() as p:
        page = p.chromium.launch().new_page()
        page.goto("https://example.com")
        session = Session(PlaywrightContext(page))
        session.element("h1").should(text("Example"))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from playwright.sync_api import Error as PlaywrightError

from ..errors import (
    ElementNotInteractableError,
    InvalidArgumentError,
    RemoteEvaluationError,
    StaleElementError,
)

if TYPE_CHECKING:
    from playwright.sync_api import ElementHandle, Page


def _is_selector_syntax_error(e: Exception) -> bool:
    msg = str(e).lower()
    return (
        "is not a valid selector" in msg
        or "unexpected token" in msg
        or "unknown engine" in msg
        or "failed to parse selector" in msg
    )


def _is_detached_error(e: Exception) -> bool:
    """
    Playwright reports detached handles / torn-down documents with messages like:
    - "Element is not attached to the DOM"
    - "Execution context was destroyed, most likely because of a navigation"
    """
    msg = str(e).lower()
    return (
        "not attached to the dom" in msg
        or "execution context was destroyed" in msg
        or "cannot find context with specified id" in msg
        or "element handle is disposed" in msg
    )


class PlaywrightContext:
    def __init__(self, page: Page, *, action_timeout_ms: int = 1000) -> None:
        """
        Args:
            page: Playwright sync Page
            action_timeout_ms: Per-call timeout for click/fill; the engine's own
                               polling loop owns the overall wait.
        """
        self.page = page
        self.action_timeout_ms = action_timeout_ms

    def find_all(self, selector: Any, scope: Any | None = None) -> list[ElementHandle]:
        if not isinstance(selector, str):
            raise InvalidArgumentError(f"Selector must be a string, got {type(selector).__name__}")
        target = self.page if scope is None else scope
        try:
            return list(target.query_selector_all(selector))
        except PlaywrightError as e:
            self._translate(e, action=f"query {selector!r}")
            raise

    def same_element(self, a: Any, b: Any) -> bool:
        if a is b:
            return True
        try:
            return bool(a.evaluate("(el, other) => el === other", b))
        except PlaywrightError as e:
            self._translate(e, action="compare elements")
            raise

    def text(self, handle: Any) -> str:
        return self._call(handle.inner_text, action="read text") or ""

    def attribute(self, handle: Any, name: str) -> str | None:
        return self._call(handle.get_attribute, name, action=f"read attribute {name!r}")

    def is_visible(self, handle: Any) -> bool:
        return bool(self._call(handle.is_visible, action="check visibility"))

    def click(self, handle: Any) -> None:
        self._call(handle.click, timeout=self.action_timeout_ms, action="click")

    def set_value(self, handle: Any, value: str) -> None:
        self._call(handle.fill, value, timeout=self.action_timeout_ms, action="fill")

    def evaluate(self, expression: Any, handle: Any | None = None) -> Any:
        target = self.page if handle is None else handle
        try:
            return target.evaluate(expression)
        except PlaywrightError as e:
            if _is_detached_error(e):
                raise StaleElementError(f"Element went stale during evaluate: {e}") from e
            raise RemoteEvaluationError(f"Script evaluation failed: {e}") from e

    def screenshot_png(self) -> bytes:
        return self.page.screenshot(type="png")

    def page_source(self) -> str:
        return self.page.content()

    def _call(self, fn: Any, *args: Any, action: str, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except PlaywrightError as e:
            self._translate(e, action=action)
            raise

    @staticmethod
    def _translate(e: PlaywrightError, *, action: str) -> None:
        if _is_selector_syntax_error(e):
            raise InvalidArgumentError(f"Invalid selector ({action}): {e}") from e
        if _is_detached_error(e):
            raise StaleElementError(f"Element went stale ({action}): {e}") from e
        if "not visible" in str(e).lower() or "not enabled" in str(e).lower():
            raise ElementNotInteractableError(f"Cannot {action}: {e}") from e
