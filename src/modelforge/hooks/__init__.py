"""modelforge event and hook system.

Two kinds of dispatch share one registry type:
- plain events (change, setting, valid, invalid, create, update, save,
  remove, error) are emitted synchronously to every listener
- hook events (saving, creating, updating, removing) run as sequential,
  abortable chains that may suspend on async listeners or continuations

Usage:
    from modelforge.hooks import EventRegistry, HookRunner, Scope

    events = EventRegistry(Scope.CLASS, "User")

    @events.on("saving", continuation=True)
    def check_quota(user, done):
        done(None if user.get("quota") else "quota exceeded")

    error = await HookRunner().run("saving", user, [events])
"""

from modelforge.hooks.registry import EventRegistry
from modelforge.hooks.service import HookRunner
from modelforge.hooks.types import (
    HOOK_EVENTS,
    Continuation,
    Listener,
    Scope,
    as_error,
)

__all__ = [
    "Continuation",
    "EventRegistry",
    "HOOK_EVENTS",
    "HookRunner",
    "Listener",
    "Scope",
    "as_error",
]
