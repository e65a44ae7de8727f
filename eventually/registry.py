"""
CommandRegistry: operation name -> Command.

Copy-on-write: every write builds a new mapping under a lock and swaps it in
with a single reference assignment; reads grab the current mapping without
locking. A dispatch therefore sees either the old or the new binding, never a
half-applied update. Registration is visible to every chain that dispatches
through this registry afterwards (it is not scoped to a chain or session).
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping, Sequence
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from .commands import (
    Chain,
    Command,
    CommandCall,
    CommandResult,
    FunctionCommand,
    register_default_commands,
)
from .errors import NotFoundError, UnknownOperationError

if TYPE_CHECKING:
    from .backends.protocol import ResolutionContext

logger = logging.getLogger(__name__)


class CommandRegistry:
    def __init__(self, commands: Mapping[str, Command] | None = None) -> None:
        self._lock = threading.Lock()
        self._commands: Mapping[str, Command] = MappingProxyType(dict(commands or {}))

    def register(self, name: str, command: Command) -> None:
        """Install or overwrite a binding (last writer wins)."""
        self.register_many({name: command})

    def register_many(self, commands: Mapping[str, Command]) -> None:
        """Install several bindings in one atomic swap."""
        for name, command in commands.items():
            if not name:
                raise ValueError("Command name must be non-empty")
            if not isinstance(command, Command):
                raise TypeError(f"Expected Command for {name!r}, got {type(command).__name__}")
        with self._lock:
            updated = dict(self._commands)
            updated.update(commands)
            self._commands = MappingProxyType(updated)
        logger.debug(f"Registered command(s): {', '.join(commands)}")

    def unregister(self, name: str) -> None:
        with self._lock:
            if name not in self._commands:
                return
            updated = dict(self._commands)
            del updated[name]
            self._commands = MappingProxyType(updated)

    def command(
        self,
        name: str,
        *,
        requires_handle: bool = True,
        min_args: int = 0,
        max_args: int | None = None,
    ) -> Callable[[Callable[[CommandCall], Any]], Callable[[CommandCall], Any]]:
        """Decorator registering a plain function as a command."""

        def decorator(fn: Callable[[CommandCall], Any]) -> Callable[[CommandCall], Any]:
            self.register(
                name,
                FunctionCommand(
                    name,
                    fn,
                    requires_handle=requires_handle,
                    min_args=min_args,
                    max_args=max_args,
                ),
            )
            return fn

        return decorator

    def get(self, name: str) -> Command:
        command = self._commands.get(name)
        if command is None:
            raise UnknownOperationError(name)
        return command

    def has(self, name: str) -> bool:
        return name in self._commands

    def names(self) -> list[str]:
        return sorted(self._commands)

    def snapshot(self) -> Mapping[str, Command]:
        """Current immutable view of all bindings."""
        return self._commands

    def dispatch(
        self,
        name: str,
        chain: Chain,
        context: ResolutionContext,
        args: Sequence[Any] = (),
    ) -> CommandResult:
        """
        Look up, validate, resolve (if needed) and execute one command.

        Raises:
            UnknownOperationError: no binding for name
            InvalidArgumentError: wrong number/kind of arguments
        """
        command = self.get(name)
        command.check_args(args, name)
        handle = None
        if command.requires_handle:
            try:
                handle = chain.resolve(context)
            except NotFoundError as e:
                return command.on_unresolvable(e, args)
        return command.execute(chain, context, args, handle)


_default_registry: CommandRegistry | None = None
_default_lock = threading.Lock()


def default_registry() -> CommandRegistry:
    """Process-wide registry preloaded with the built-in commands."""
    global _default_registry
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                _default_registry = register_default_commands(CommandRegistry())
    return _default_registry
