"""Hook system types for modelforge.

Defines the core data structures shared by the event registry and the
hook runner:
- Scope: class-scope vs instance-scope argument binding
- Listener: a registered callable plus its registration flags
- Continuation: the ``done(err=None)`` callable handed to
  continuation-style hook listeners
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from modelforge.errors import HookAbort

# Lifecycle hook chains. Only these accept continuation-style listeners.
HOOK_EVENTS = ("saving", "creating", "updating", "removing")


class Scope(Enum):
    """Where a registry lives, which decides the listener argument shape.

    CLASS listeners receive the instance first, INSTANCE listeners receive
    only the event arguments (the instance is their implicit receiver).
    """

    CLASS = "class"
    INSTANCE = "instance"

    def bind(self, instance: Any, args: tuple) -> tuple:
        if self is Scope.CLASS:
            return (instance, *args)
        return tuple(args)


@dataclass(frozen=True, eq=False)
class Listener:
    """A single registration.

    Compared by identity, so registering the same function twice yields two
    independent listeners.

    Attributes:
        fn: The callable
        once: Remove after the first invocation
        continuation: Receives a Continuation as its last argument and
            completes only when it is called
    """

    fn: Callable[..., Any]
    once: bool = False
    continuation: bool = False


class Continuation:
    """Completion callable for continuation-style hooks.

    ``done()`` advances the chain, ``done(err)`` aborts it. Only the first
    call counts.
    """

    def __init__(self, future: asyncio.Future):
        self._future = future

    @property
    def called(self) -> bool:
        return self._future.done()

    def __call__(self, err: Any = None) -> None:
        if self._future.done():
            return
        self._future.set_result(err)


def as_error(value: Any) -> BaseException | None:
    """Normalize a continuation argument into an error or None."""
    if not value:
        return None
    if isinstance(value, BaseException):
        return value
    return HookAbort(value)
