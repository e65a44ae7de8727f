"""
RetryDispatcher: bounded polling over CommandRegistry.dispatch.

    ATTEMPTING -> SUCCEEDED | FATAL | RETRY_WAIT
    RETRY_WAIT -> ATTEMPTING (after poll_s) | TIMED_OUT (deadline passed)

Every attempt re-resolves the chain from scratch. The first success returns
immediately; a zero timeout still makes exactly one attempt. Fatal failures
propagate on first occurrence. Retryable failures are swallowed until the
deadline and then resurface as one WaitTimeoutError wrapping the *last* cause.

The failure hook runs at the boundary (run()), never inside the loop.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .commands import Chain, CommandResult, FatalFailure, RetryableFailure, Success
from .config import Configuration, get_config
from .errors import (
    EngineError,
    InvalidArgumentError,
    RemoteEvaluationError,
    UnknownOperationError,
    WaitTimeoutError,
)
from .models import AttemptRecord, WaitOptions
from .registry import CommandRegistry, default_registry

if TYPE_CHECKING:
    from .backends.protocol import ResolutionContext

logger = logging.getLogger(__name__)

OnFailure = Callable[["ResolutionContext", BaseException], BaseException]

# Failures that bypass the retry loop and propagate on first occurrence.
FATAL_ERRORS: tuple[type[BaseException], ...] = (
    UnknownOperationError,
    InvalidArgumentError,
    RemoteEvaluationError,
    TypeError,
    ValueError,
    AttributeError,
    ImportError,
    NotImplementedError,
)

MAX_HISTORY = 50


def classify(error: Exception) -> CommandResult:
    """Map any Exception to FatalFailure or RetryableFailure (total)."""
    if isinstance(error, FATAL_ERRORS):
        return FatalFailure(error)
    return RetryableFailure(error)


@dataclass
class PollState:
    """State of one in-flight run(); never shared between calls."""

    deadline: float
    poll_s: float
    started_at: float
    attempts: int = 0
    last_failure: BaseException | None = None
    history: deque[AttemptRecord] = field(default_factory=lambda: deque(maxlen=MAX_HISTORY))


class RetryDispatcher:
    def __init__(
        self,
        registry: CommandRegistry | None = None,
        *,
        config: Configuration | None = None,
        on_failure: OnFailure | None = None,
        time_fn: Callable[[], float] = time.monotonic,
        sleep_fn: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Args:
            registry: Command table (defaults to the process-wide registry)
            config: Fixed configuration; None reads get_config() on every call
            on_failure: Diagnostic hook run on FATAL/TIMED_OUT at the boundary
            time_fn: Monotonic clock in seconds
            sleep_fn: Sleep used between attempts
        """
        self.registry = registry or default_registry()
        self.on_failure = on_failure
        self._config = config
        self._time_fn = time_fn
        self._sleep_fn = sleep_fn

    @property
    def config(self) -> Configuration:
        return self._config or get_config()

    def run(
        self,
        name: str,
        chain: Chain,
        context: ResolutionContext,
        args: Sequence[Any] = (),
        *,
        timeout_s: float | None = None,
        poll_s: float | None = None,
    ) -> Any:
        """
        Dispatch `name` against `chain` until it succeeds, fails fatally, or times out.

        Returns:
            The command's success value (MISSING when a condition accepted absence)

        Raises:
            WaitTimeoutError: deadline passed while failures were retryable
            Any fatal error (UnknownOperationError, InvalidArgumentError, ...)
        """
        try:
            return self._poll(name, chain, context, args, timeout_s=timeout_s, poll_s=poll_s)
        except Exception as error:
            decorated = self._report(context, error)
            if decorated is error:
                raise
            raise decorated from error

    def _poll(
        self,
        name: str,
        chain: Chain,
        context: ResolutionContext,
        args: Sequence[Any],
        *,
        timeout_s: float | None,
        poll_s: float | None,
    ) -> Any:
        config = self.config
        options = WaitOptions.build(
            timeout_s=config.timeout_s if timeout_s is None else timeout_s,
            poll_s=config.poll_s if poll_s is None else poll_s,
        )
        now = self._time_fn()
        state = PollState(deadline=now + options.timeout_s, poll_s=options.poll_s, started_at=now)

        while True:
            state.attempts += 1
            try:
                outcome = self.registry.dispatch(name, chain, context, args)
            except Exception as e:
                outcome = classify(e)
            if isinstance(outcome, RetryableFailure):
                # the exception table overrides a command's own retry verdict
                outcome = classify(outcome.cause)
            elapsed = self._time_fn() - state.started_at

            if isinstance(outcome, Success):
                if state.attempts > 1:
                    logger.debug(
                        f"'{name}' on {chain} succeeded after {state.attempts} attempts "
                        f"({elapsed:.3f}s)"
                    )
                return outcome.value

            cause = outcome.cause
            state.history.append(
                AttemptRecord(
                    attempt=state.attempts,
                    outcome="fatal" if isinstance(outcome, FatalFailure) else "retryable",
                    error_type=type(cause).__name__,
                    message=str(cause),
                    elapsed_s=round(elapsed, 4),
                )
            )

            if isinstance(outcome, FatalFailure):
                logger.debug(f"'{name}' on {chain} failed fatally: {type(cause).__name__}: {cause}")
                if isinstance(cause, EngineError):
                    cause.operation = cause.operation or name
                    cause.locator = cause.locator or chain.describe()
                raise cause

            state.last_failure = cause
            if self._time_fn() >= state.deadline:
                raise WaitTimeoutError(
                    f"Timed out after {options.timeout_s}s waiting for '{name}' on "
                    f"{chain.describe()} ({state.attempts} attempt(s)): {cause}",
                    cause=cause,
                    attempts=state.attempts,
                    timeout_s=options.timeout_s,
                    operation=name,
                    locator=chain.describe(),
                    history=list(state.history),
                ) from cause

            logger.debug(
                f"Attempt {state.attempts} of '{name}' on {chain} failed "
                f"({type(cause).__name__}: {cause}); retrying in {state.poll_s}s"
            )
            self._sleep_fn(state.poll_s)

    def _report(self, context: ResolutionContext, error: BaseException) -> BaseException:
        if self.on_failure is None or getattr(error, "artifacts", None) is not None:
            return error
        try:
            return self.on_failure(context, error) or error
        except Exception as hook_error:
            logger.warning(
                f"Failure reporter raised {type(hook_error).__name__}: {hook_error}; "
                f"re-raising original {type(error).__name__}"
            )
            return error
