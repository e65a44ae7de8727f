"""
Session: the operation invocation surface.

A Session binds a ResolutionContext to a RetryDispatcher and hands out lazy
Element / ElementsCollection wrappers:

    session = Session(InMemoryDocument(...))
    session.element("#menu").find("li", 2).should(visible, text("Themes"))
    session.all("#menu li").should(texts_in_any_order("Themes", "v8"))
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from .config import Configuration, get_config
from .dispatcher import OnFailure, RetryDispatcher
from .element import Element, ElementsCollection
from .failure_artifacts import FailureArtifactsOptions, FailureReporter
from .locators import CollectionChain, LocatorChain
from .registry import CommandRegistry

if TYPE_CHECKING:
    from .backends.protocol import ResolutionContext


class Session:
    def __init__(
        self,
        context: ResolutionContext,
        *,
        registry: CommandRegistry | None = None,
        config: Configuration | None = None,
        on_failure: OnFailure | None = None,
        capture_artifacts: bool = True,
        time_fn: Callable[[], float] = time.monotonic,
        sleep_fn: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Args:
            context: Backend the chains are resolved against
            registry: Command table (defaults to the process-wide registry)
            config: Fixed configuration (defaults to get_config() per call)
            on_failure: Custom diagnostic hook; overrides the default reporter
            capture_artifacts: Install a FailureReporter when on_failure is not given
        """
        self.context = context
        if on_failure is None and capture_artifacts:
            on_failure = FailureReporter(
                options=FailureArtifactsOptions.from_config(config or get_config())
            )
        self.dispatcher = RetryDispatcher(
            registry,
            config=config,
            on_failure=on_failure,
            time_fn=time_fn,
            sleep_fn=sleep_fn,
        )

    @property
    def registry(self) -> CommandRegistry:
        return self.dispatcher.registry

    def element(self, selector: Any, index: int = 0) -> Element:
        return Element(self, LocatorChain(selector, index))

    def all(self, selector: Any) -> ElementsCollection:
        return ElementsCollection(self, CollectionChain(selector))

    def execute(
        self,
        name: str,
        chain: LocatorChain | CollectionChain,
        *args: Any,
        timeout_s: float | None = None,
        poll_s: float | None = None,
    ) -> Any:
        """Run one operation through the retry loop; chain results come back wrapped."""
        result = self.dispatcher.run(
            name, chain, self.context, args, timeout_s=timeout_s, poll_s=poll_s
        )
        return self.wrap(result)

    def wrap(self, value: Any) -> Any:
        if isinstance(value, LocatorChain):
            return Element(self, value)
        if isinstance(value, CollectionChain):
            return ElementsCollection(self, value)
        return value
