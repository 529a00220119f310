"""Event registry for modelforge.

One registry type serves both scopes: every ModelClass owns a
``Scope.CLASS`` registry and every Instance owns a ``Scope.INSTANCE`` one.

Listener lists are copy-on-write. Registration and removal always replace
the list for an event, so a tuple snapshot taken by a running dispatch is
never mutated underneath it.
"""

import inspect
import logging
from collections.abc import Iterable
from typing import Any, Callable

from modelforge.hooks.types import HOOK_EVENTS, Listener, Scope

logger = logging.getLogger(__name__)

ListenerFn = Callable[..., Any]


def _split(events: str | Iterable[str]) -> list[str]:
    if isinstance(events, str):
        names = events.split()
    else:
        names = [name for event in events for name in event.split()]
    if not names:
        raise ValueError("At least one event name is required")
    return names


class EventRegistry:
    """Subscription storage plus synchronous snapshot dispatch.

    Example:
        registry = EventRegistry(Scope.INSTANCE)
        registry.on("change:name", lambda new, old: print(new, old))

        @registry.on("saving", continuation=True)
        def check(done):
            done()
    """

    def __init__(self, scope: Scope, owner: str = ""):
        self.scope = scope
        self.owner = owner
        self._listeners: dict[str, list[Listener]] = {}

    def __repr__(self) -> str:
        return f"EventRegistry({self.scope.value}, {self.owner!r})"

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def on(
        self,
        events: str | Iterable[str],
        fn: ListenerFn | None = None,
        *,
        continuation: bool = False,
    ) -> Any:
        """Subscribe ``fn`` to one or more space-separated events.

        Returns ``fn``, or a decorator when ``fn`` is omitted.

        Raises:
            ValueError: If ``continuation`` is requested for a non-hook event
        """
        return self._register(events, fn, once=False, continuation=continuation)

    def once(
        self,
        events: str | Iterable[str],
        fn: ListenerFn | None = None,
        *,
        continuation: bool = False,
    ) -> Any:
        """Like on(), but the listener is removed after it first fires."""
        return self._register(events, fn, once=True, continuation=continuation)

    def _register(
        self,
        events: str | Iterable[str],
        fn: ListenerFn | None,
        *,
        once: bool,
        continuation: bool,
    ) -> Any:
        names = _split(events)
        if continuation:
            invalid = [name for name in names if name not in HOOK_EVENTS]
            if invalid:
                raise ValueError(
                    f"Continuation listeners are only supported for hook events "
                    f"({', '.join(HOOK_EVENTS)}), got: {', '.join(invalid)}"
                )

        def decorator(func: ListenerFn) -> ListenerFn:
            if not callable(func):
                raise TypeError(f"Listener must be callable, got {func!r}")
            for name in names:
                listener = Listener(fn=func, once=once, continuation=continuation)
                self._listeners[name] = [*self._listeners.get(name, ()), listener]
            return func

        if fn is None:
            return decorator
        return decorator(fn)

    def off(
        self,
        events: str | Iterable[str] | None = None,
        fn: ListenerFn | None = None,
    ) -> None:
        """Unsubscribe listeners.

        - off(): remove everything
        - off("change"): remove every listener of the given event(s)
        - off("change", fn): remove ``fn`` from the given event(s)
        - off(fn=fn): remove ``fn`` from every event
        """
        if events is None and fn is None:
            self._listeners = {}
            return

        names = list(self._listeners) if events is None else _split(events)
        for name in names:
            if name not in self._listeners:
                continue
            if fn is None:
                del self._listeners[name]
                continue
            remaining = [l for l in self._listeners[name] if l.fn != fn]
            if remaining:
                self._listeners[name] = remaining
            else:
                del self._listeners[name]

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def listeners(self, event: str) -> tuple[Listener, ...]:
        """Snapshot of the listeners registered for ``event``."""
        return tuple(self._listeners.get(event, ()))

    def has_listeners(self, event: str) -> bool:
        return bool(self._listeners.get(event))

    def event_names(self) -> list[str]:
        return list(self._listeners)

    def consume(self, listener: Listener) -> bool:
        """Claim a listener for invocation.

        Persistent listeners are always claimable. A fire-once listener is
        removed from the live list and claimable only if it was still there,
        so it runs at most once even when several dispatches snapshotted it.
        """
        if not listener.once:
            return True
        for name, current in self._listeners.items():
            if any(l is listener for l in current):
                remaining = [l for l in current if l is not listener]
                if remaining:
                    self._listeners[name] = remaining
                else:
                    del self._listeners[name]
                return True
        return False

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def emit(self, event: str, instance: Any, *args: Any) -> None:
        """Synchronously call every listener of ``event`` in order.

        Listener exceptions are not caught.

        Raises:
            TypeError: If a listener returns an awaitable
        """
        for listener in self.listeners(event):
            if not self.consume(listener):
                continue
            result = listener.fn(*self.scope.bind(instance, args))
            if inspect.isawaitable(result):
                if inspect.iscoroutine(result):
                    result.close()
                raise TypeError(
                    f"Listener {listener.fn!r} for '{event}' returned an awaitable; "
                    "only hook events support asynchronous listeners"
                )
