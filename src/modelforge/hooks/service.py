"""Hook chain execution for modelforge.

Runs the listeners of a lifecycle hook event (saving, creating, updating,
removing) one after another, class scope first, stopping at the first
error.
"""

import asyncio
import inspect
import logging
from collections.abc import Sequence
from typing import Any, Callable

from modelforge.hooks.registry import EventRegistry
from modelforge.hooks.types import Continuation, Listener, as_error

logger = logging.getLogger(__name__)

# Checked after every listener; a non-None result aborts the chain.
Guard = Callable[[], BaseException | None]


class HookRunner:
    """Sequential, abortable, mixed sync/async hook chain runner.

    Listener contract:
    - plain listeners are called with the scope's arguments. An awaitable
      return value is awaited. Raising aborts the chain with that exception.
    - continuation listeners (registered with ``continuation=True``) also
      receive a Continuation; the chain waits until it is called and aborts
      if it is called with an error.

    The runner keeps no state between runs. Each run iterates its own
    snapshot, so concurrent runs never observe each other.
    """

    async def run(
        self,
        event: str,
        instance: Any,
        registries: Sequence[EventRegistry],
        guard: Guard | None = None,
    ) -> BaseException | None:
        """Execute the hook chain for ``event``.

        Args:
            event: Hook event name
            instance: The instance the lifecycle operation runs on
            registries: Registries to snapshot, in order (class scope first)
            guard: Optional check run after each listener

        Returns:
            The error that aborted the chain, or None if every listener completed.
        """
        snapshot = [
            (registry, listener)
            for registry in registries
            for listener in registry.listeners(event)
        ]
        if not snapshot:
            return None

        logger.debug("Running %d '%s' hook(s) for %r", len(snapshot), event, instance)

        for position, (registry, listener) in enumerate(snapshot, start=1):
            if not registry.consume(listener):
                continue

            error = await self._invoke(listener, registry.scope.bind(instance, ()))
            if error is None and guard is not None:
                error = guard()

            if error is not None:
                logger.debug(
                    "'%s' hook %d/%d aborted for %r: %s",
                    event,
                    position,
                    len(snapshot),
                    instance,
                    error,
                )
                return error

        return None

    async def _invoke(self, listener: Listener, args: tuple) -> BaseException | None:
        if not listener.continuation:
            try:
                result = listener.fn(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                return e
            return None

        future = asyncio.get_running_loop().create_future()
        done = Continuation(future)
        try:
            result = listener.fn(*args, done)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            return e

        return as_error(await future)
