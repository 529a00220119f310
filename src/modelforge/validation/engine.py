"""Validator registration and execution for a ModelClass.

Validators are stored as listeners of a dedicated class-scope registry,
so they share the registry's ordering and snapshot guarantees and are
dispatched through its synchronous emit path.
"""

from typing import Any

from modelforge.hooks.registry import EventRegistry
from modelforge.hooks.types import Scope
from modelforge.validation.types import ValidationError, ValidatorFn

VALIDATE_EVENT = "validate"


class ValidationEngine:
    """Ordered list of validators owned by one ModelClass.

    Example:
        engine = ValidationEngine("User")

        @engine.add
        def name_required(user):
            if not user.has("name"):
                user.error("name", "is required")
    """

    def __init__(self, owner: str = ""):
        self._registry = EventRegistry(Scope.CLASS, owner)

    def add(self, fn: ValidatorFn) -> ValidatorFn:
        """Register a validator. Usable as a decorator."""
        return self._registry.on(VALIDATE_EVENT, fn)

    def remove(self, fn: ValidatorFn) -> None:
        self._registry.off(VALIDATE_EVENT, fn)

    def validators(self) -> list[ValidatorFn]:
        """Registered validators in registration order."""
        return [listener.fn for listener in self._registry.listeners(VALIDATE_EVENT)]

    def __len__(self) -> int:
        return len(self._registry.listeners(VALIDATE_EVENT))

    def run(self, instance: Any) -> list[ValidationError]:
        """Run every validator against ``instance``.

        Validator exceptions propagate to the caller.

        Returns:
            The instance's error list after all validators ran
        """
        self._registry.emit(VALIDATE_EVENT, instance)
        return instance.errors
