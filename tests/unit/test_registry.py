from __future__ import annotations

import threading

import pytest

from eventually import (
    MISSING,
    Command,
    CommandCall,
    CommandRegistry,
    FatalFailure,
    InvalidArgumentError,
    LocatorChain,
    NotFoundError,
    RetryableFailure,
    Success,
    UnknownOperationError,
    default_registry,
    hidden,
    register_default_commands,
    visible,
)
from eventually.backends import InMemoryDocument, node


class ConstantCommand(Command):
    requires_handle = False
    max_args = None

    def __init__(self, value: object) -> None:
        self.value = value

    def execute(self, chain, context, args, handle=None):
        return Success(self.value)


def _doc() -> InMemoryDocument:
    return InMemoryDocument(node("div", "Hello", id="greeting"))


def test_register_get_and_names() -> None:
    registry = CommandRegistry()
    cmd = ConstantCommand(1)
    registry.register("one", cmd)
    assert registry.get("one") is cmd
    assert registry.has("one")
    assert not registry.has("two")
    assert registry.names() == ["one"]


def test_unknown_operation() -> None:
    registry = CommandRegistry()
    with pytest.raises(UnknownOperationError) as exc_info:
        registry.dispatch("nope", LocatorChain("div"), _doc())
    assert exc_info.value.name == "nope"
    assert exc_info.value.reason_code == "unknown_operation"


def test_register_overwrites_last_writer_wins() -> None:
    registry = CommandRegistry()
    registry.register("op", ConstantCommand("first"))
    registry.register("op", ConstantCommand("second"))
    assert registry.dispatch("op", LocatorChain("div"), _doc()) == Success("second")


def test_registering_same_binding_twice_is_idempotent() -> None:
    registry = CommandRegistry()
    cmd = ConstantCommand("v")
    registry.register("op", cmd)
    registry.register("op", cmd)
    assert registry.names() == ["op"]
    assert registry.dispatch("op", LocatorChain("div"), _doc()) == Success("v")


def test_register_validates_input() -> None:
    registry = CommandRegistry()
    with pytest.raises(ValueError):
        registry.register("", ConstantCommand(1))
    with pytest.raises(TypeError):
        registry.register("bad", lambda call: 1)  # type: ignore[arg-type]


def test_unregister() -> None:
    registry = CommandRegistry({"op": ConstantCommand(1)})
    registry.unregister("op")
    registry.unregister("op")
    assert not registry.has("op")


def test_snapshot_is_not_affected_by_later_writes() -> None:
    registry = CommandRegistry()
    registry.register("a", ConstantCommand(1))
    before = registry.snapshot()
    registry.register("b", ConstantCommand(2))
    assert "b" not in before
    assert "b" in registry.snapshot()


def test_decorator_registers_function_command() -> None:
    registry = CommandRegistry()
    doc = _doc()

    @registry.command("tag_name", max_args=0)
    def tag_name(call: CommandCall) -> str:
        assert call.name == "tag_name"
        assert call.context is doc
        return call.handle.tag

    assert registry.dispatch("tag_name", LocatorChain("#greeting"), doc) == Success("div")


def test_function_command_may_return_a_command_result() -> None:
    registry = CommandRegistry()

    @registry.command("always_fatal", requires_handle=False)
    def always_fatal(call: CommandCall) -> FatalFailure:
        return FatalFailure(ValueError("boom"))

    result = registry.dispatch("always_fatal", LocatorChain("div"), _doc())
    assert isinstance(result, FatalFailure)


def test_arity_is_checked_before_resolution() -> None:
    registry = register_default_commands(CommandRegistry())
    doc = _doc()
    with pytest.raises(InvalidArgumentError):
        registry.dispatch("attribute", LocatorChain("#greeting"), doc, ())
    with pytest.raises(InvalidArgumentError):
        registry.dispatch("text", LocatorChain("#greeting"), doc, ("extra",))
    with pytest.raises(InvalidArgumentError):
        registry.dispatch("should", LocatorChain("#greeting"), doc, ("not a condition",))
    assert doc.queries == 0


def test_unresolvable_chain_is_retryable_by_default() -> None:
    registry = register_default_commands(CommandRegistry())
    result = registry.dispatch("text", LocatorChain("#missing"), _doc())
    assert isinstance(result, RetryableFailure)
    assert isinstance(result.cause, NotFoundError)


def test_unresolvable_chain_with_accepting_condition_succeeds_with_missing() -> None:
    registry = register_default_commands(CommandRegistry())
    doc = _doc()
    assert registry.dispatch("should", LocatorChain("#missing"), doc, (hidden,)) == Success(MISSING)
    result = registry.dispatch("should", LocatorChain("#missing"), doc, (hidden, visible))
    assert isinstance(result, RetryableFailure)


def test_default_registry_is_shared_and_preloaded() -> None:
    registry = default_registry()
    assert registry is default_registry()
    for name in ("find", "find_all", "text", "click", "should", "should_not", "texts", "size"):
        assert registry.has(name)


def test_concurrent_registration_and_dispatch() -> None:
    registry = CommandRegistry({"base": ConstantCommand("base")})
    doc = _doc()
    chain = LocatorChain("div")
    errors: list[BaseException] = []

    def writer(i: int) -> None:
        try:
            for j in range(50):
                registry.register(f"w{i}-{j}", ConstantCommand(j))
        except BaseException as e:
            errors.append(e)

    def reader() -> None:
        try:
            for _ in range(200):
                assert registry.dispatch("base", chain, doc) == Success("base")
        except BaseException as e:
            errors.append(e)

    threads = [threading.Thread(target=writer, args=(i,)) for i in range(4)]
    threads += [threading.Thread(target=reader) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(registry.names()) == 1 + 4 * 50


def test_arity_error_names_the_registered_operation() -> None:
    class Unnamed(Command):
        requires_handle = False

        def execute(self, chain, context, args, handle=None):
            return Success(None)

    registry = CommandRegistry({"noop": Unnamed()})
    with pytest.raises(InvalidArgumentError) as exc_info:
        registry.dispatch("noop", LocatorChain("div"), _doc(), ("extra",))
    assert "'noop' takes 0 argument(s), got 1" in str(exc_info.value)
    assert exc_info.value.operation == "noop"


def test_arity_error_without_registered_name_uses_class_name() -> None:
    class Unnamed(Command):
        def execute(self, chain, context, args, handle=None):
            return Success(None)

    with pytest.raises(InvalidArgumentError) as exc_info:
        Unnamed().check_args(("extra",))
    assert "'Unnamed' takes 0 argument(s)" in str(exc_info.value)
