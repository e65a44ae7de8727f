"""
Commands: named, stateless units of work dispatched against a chain.

A command never raises to signal "try again": it returns a CommandResult,

    Success(value)            -> the dispatcher returns value immediately
    RetryableFailure(cause)   -> the dispatcher polls again until the deadline
    FatalFailure(cause)       -> the dispatcher raises cause immediately

Exceptions that still escape a command (backend errors, for example) are
classified by the dispatcher's exception table.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from .collection_conditions import CollectionCondition
from .conditions import Condition, not_
from .errors import InvalidArgumentError, NotFoundError, PredicateNotSatisfiedError
from .locators import CollectionChain, LocatorChain

if TYPE_CHECKING:
    from .backends.protocol import ResolutionContext
    from .registry import CommandRegistry


class _Missing:
    """Success value of a condition check that accepted an unresolvable element."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "<missing>"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


@dataclass(frozen=True)
class Success:
    value: Any = None


@dataclass(frozen=True)
class RetryableFailure:
    cause: BaseException


@dataclass(frozen=True)
class FatalFailure:
    cause: BaseException


CommandResult = Union[Success, RetryableFailure, FatalFailure]

Chain = Union[LocatorChain, CollectionChain]


@dataclass(frozen=True)
class CommandCall:
    """Everything a function-backed command receives."""

    name: str
    chain: Chain
    context: ResolutionContext
    args: tuple[Any, ...]
    handle: Any = None


class Command(ABC):
    """
    Base class for commands.

    Attributes:
        name: Default registration name
        requires_handle: Resolve the chain before execute() (registry does it)
        min_args / max_args: Accepted positional-argument count (max None = unbounded)
    """

    name = ""
    requires_handle = True
    min_args = 0
    max_args: int | None = 0

    def check_args(self, args: Sequence[Any], name: str | None = None) -> None:
        """Raise InvalidArgumentError on a bad call; `name` is the registered name, if any."""
        name = name or self.name or type(self).__name__
        n = len(args)
        if n < self.min_args or (self.max_args is not None and n > self.max_args):
            if self.max_args is None:
                expected = f"at least {self.min_args}"
            elif self.min_args == self.max_args:
                expected = str(self.min_args)
            else:
                expected = f"{self.min_args}..{self.max_args}"
            raise InvalidArgumentError(
                f"'{name}' takes {expected} argument(s), got {n}", operation=name
            )

    def on_unresolvable(self, cause: NotFoundError, args: Sequence[Any]) -> CommandResult:
        return RetryableFailure(cause)

    @abstractmethod
    def execute(
        self,
        chain: Chain,
        context: ResolutionContext,
        args: Sequence[Any],
        handle: Any = None,
    ) -> CommandResult:
        """Run against an already-resolved handle (or the bare chain)."""


class FunctionCommand(Command):
    """Adapts a plain function `fn(call: CommandCall) -> Any | CommandResult`."""

    def __init__(
        self,
        name: str,
        fn: Callable[[CommandCall], Any],
        *,
        requires_handle: bool = True,
        min_args: int = 0,
        max_args: int | None = None,
    ) -> None:
        self.name = name
        self.fn = fn
        self.requires_handle = requires_handle
        self.min_args = min_args
        self.max_args = max_args

    def execute(self, chain, context, args, handle=None) -> CommandResult:
        value = self.fn(CommandCall(self.name, chain, context, tuple(args), handle))
        if isinstance(value, (Success, RetryableFailure, FatalFailure)):
            return value
        return Success(value)


def _require_element(name: str, chain: Chain) -> LocatorChain:
    if not isinstance(chain, LocatorChain):
        raise InvalidArgumentError(f"'{name}' applies to a single element, not {chain}")
    return chain


def _require_collection(name: str, chain: Chain) -> CollectionChain:
    if not isinstance(chain, CollectionChain):
        raise InvalidArgumentError(f"'{name}' applies to a collection, not {chain}")
    return chain


class Find(Command):
    name = "find"
    requires_handle = False
    min_args = 1
    max_args = 2

    def execute(self, chain, context, args, handle=None) -> CommandResult:
        parent = _require_element(self.name, chain)
        return Success(parent.child(*args))


class FindAll(Command):
    name = "find_all"
    requires_handle = False
    min_args = 1
    max_args = 1

    def execute(self, chain, context, args, handle=None) -> CommandResult:
        parent = _require_element(self.name, chain)
        return Success(parent.children(args[0]))


class Exists(Command):
    """Single check, never waits: True if the chain resolves right now."""

    name = "exists"
    requires_handle = False

    def execute(self, chain, context, args, handle=None) -> CommandResult:
        try:
            chain.resolve(context)
        except NotFoundError:
            return Success(False)
        return Success(True)


class IsDisplayed(Command):
    name = "is_displayed"
    requires_handle = False

    def execute(self, chain, context, args, handle=None) -> CommandResult:
        try:
            resolved = _require_element(self.name, chain).resolve(context)
            return Success(context.is_visible(resolved))
        except NotFoundError:
            return Success(False)


class GetText(Command):
    name = "text"

    def execute(self, chain, context, args, handle=None) -> CommandResult:
        _require_element(self.name, chain)
        return Success(context.text(handle))


class GetAttribute(Command):
    name = "attribute"
    min_args = 1
    max_args = 1

    def execute(self, chain, context, args, handle=None) -> CommandResult:
        _require_element(self.name, chain)
        return Success(context.attribute(handle, args[0]))


class Click(Command):
    name = "click"

    def execute(self, chain, context, args, handle=None) -> CommandResult:
        element = _require_element(self.name, chain)
        context.click(handle)
        return Success(element)


class SetValue(Command):
    name = "set_value"
    min_args = 1
    max_args = 1

    def execute(self, chain, context, args, handle=None) -> CommandResult:
        element = _require_element(self.name, chain)
        context.set_value(handle, args[0])
        return Success(element)


class Evaluate(Command):
    name = "evaluate"
    min_args = 1
    max_args = 1

    def execute(self, chain, context, args, handle=None) -> CommandResult:
        _require_element(self.name, chain)
        return Success(context.evaluate(args[0], handle))


class Should(Command):
    """
    Check that every given condition accepts the element (or collection).

    REJECT becomes a retryable PredicateNotSatisfiedError. An unresolvable
    target succeeds with MISSING only when every condition accepts absence.
    """

    name = "should"
    min_args = 1
    max_args = None

    def conditions(self, args: Sequence[Any]) -> list[Condition | CollectionCondition]:
        return list(args)

    def check_args(self, args: Sequence[Any], name: str | None = None) -> None:
        super().check_args(args, name)
        name = name or self.name
        for arg in args:
            if not isinstance(arg, (Condition, CollectionCondition)):
                raise InvalidArgumentError(
                    f"'{name}' expects conditions, got {type(arg).__name__}",
                    operation=name,
                )

    def on_unresolvable(self, cause: NotFoundError, args: Sequence[Any]) -> CommandResult:
        if all(c.accepts_when_unresolvable for c in self.conditions(args)):
            return Success(MISSING)
        return RetryableFailure(cause)

    def execute(self, chain, context, args, handle=None) -> CommandResult:
        conditions = self.conditions(args)
        kind = CollectionCondition if isinstance(chain, CollectionChain) else Condition
        for condition in conditions:
            if not isinstance(condition, kind):
                return FatalFailure(
                    InvalidArgumentError(
                        f"{condition!r} cannot be checked against {chain}",
                        operation=self.name,
                        locator=chain.describe(),
                    )
                )
        for condition in conditions:
            try:
                result = condition.evaluate(context, handle)
            except NotFoundError as e:
                # handle went stale between resolution and evaluation
                return self.on_unresolvable(e, args)
            if not result.passed:
                return RetryableFailure(
                    PredicateNotSatisfiedError(
                        f"{chain.describe()} should match [{condition.describe()}]; "
                        f"actual: {result.actual!r}",
                        condition=condition,
                        actual=result.actual,
                        locator=chain.describe(),
                    )
                )
        return Success(chain)


class ShouldNot(Should):
    name = "should_not"

    def check_args(self, args: Sequence[Any], name: str | None = None) -> None:
        super().check_args(args, name)
        name = name or self.name
        for arg in args:
            if isinstance(arg, CollectionCondition):
                raise InvalidArgumentError(
                    f"'{name}' does not support collection conditions", operation=name
                )

    def conditions(self, args: Sequence[Any]) -> list[Condition | CollectionCondition]:
        return [not_(c) for c in args]


class Texts(Command):
    name = "texts"

    def execute(self, chain, context, args, handle=None) -> CommandResult:
        _require_collection(self.name, chain)
        return Success([context.text(h) for h in handle])


class Size(Command):
    name = "size"

    def execute(self, chain, context, args, handle=None) -> CommandResult:
        _require_collection(self.name, chain)
        return Success(len(handle))


DEFAULT_COMMANDS: tuple[type[Command], ...] = (
    Find,
    FindAll,
    Exists,
    IsDisplayed,
    GetText,
    GetAttribute,
    Click,
    SetValue,
    Evaluate,
    Should,
    ShouldNot,
    Texts,
    Size,
)


def register_default_commands(registry: CommandRegistry) -> CommandRegistry:
    registry.register_many({cls.name: cls() for cls in DEFAULT_COMMANDS})
    return registry
