from __future__ import annotations

from typing import Any


class EngineError(RuntimeError):
    """
    Base class for every error raised by the engine.

    Attributes:
        reason_code: Stable machine-readable code (e.g. "not_found")
        operation: Operation name being dispatched when the error surfaced
        locator: Human-readable description of the chain involved
        artifacts: Diagnostic artifacts attached by a failure reporter
    """

    reason_code = "engine_error"

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        locator: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.locator = locator
        self.artifacts: Any | None = None


class UnknownOperationError(EngineError):
    reason_code = "unknown_operation"

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown operation: {name}", operation=name)
        self.name = name


class InvalidArgumentError(EngineError, ValueError):
    """Structurally malformed call: bad selector syntax, wrong arity, bad options."""

    reason_code = "invalid_argument"


class NotFoundError(EngineError):
    reason_code = "not_found"

    def __init__(self, message: str, *, locator: str | None = None, selector: Any = None) -> None:
        super().__init__(message, locator=locator)
        self.selector = selector


class IndexOutOfRangeError(NotFoundError):
    reason_code = "index_out_of_range"

    def __init__(
        self,
        message: str,
        *,
        locator: str | None = None,
        selector: Any = None,
        index: int = 0,
        size: int = 0,
    ) -> None:
        super().__init__(message, locator=locator, selector=selector)
        self.index = index
        self.size = size


class StaleElementError(NotFoundError):
    """A previously resolved handle is no longer attached to the document."""

    reason_code = "stale_element"


class ElementNotInteractableError(EngineError):
    """Element resolved but cannot receive input right now (e.g. hidden)."""

    reason_code = "not_interactable"


class RemoteEvaluationError(EngineError):
    reason_code = "remote_evaluation_error"


class PredicateNotSatisfiedError(EngineError):
    reason_code = "predicate_not_satisfied"

    def __init__(
        self,
        message: str,
        *,
        condition: Any = None,
        actual: Any = None,
        locator: str | None = None,
    ) -> None:
        super().__init__(message, locator=locator)
        self.condition = condition
        self.actual = actual


class WaitTimeoutError(EngineError):
    """Deadline exceeded while the last failure was retryable."""

    reason_code = "timeout"

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None,
        attempts: int,
        timeout_s: float,
        operation: str | None = None,
        locator: str | None = None,
        history: list[Any] | None = None,
    ) -> None:
        super().__init__(message, operation=operation, locator=locator)
        self.cause = cause
        self.history = list(history or [])
        self.attempts = attempts
        self.timeout_s = timeout_s
