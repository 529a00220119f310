"""Exception types raised or delivered by modelforge."""

from typing import Any


class ModelError(Exception):
    """Base class for modelforge errors."""
    pass


class ValidationFailure(ModelError):
    """The instance did not pass validation.

    Attributes:
        errors: Snapshot of the instance's validation errors at failure time
    """

    def __init__(self, errors: list | None = None):
        super().__init__("validation failed")
        self.errors = list(errors or [])


class NotSaved(ModelError):
    """remove() was called on an instance that was never persisted."""

    def __init__(self) -> None:
        super().__init__("not saved")


class HookAbort(ModelError):
    """A hook continuation was called with a non-exception error value."""

    def __init__(self, reason: Any):
        super().__init__(str(reason))
        self.reason = reason


class SchemaError(ModelError):
    """Invalid model declaration."""
    pass


class PersistenceError(ModelError):
    """Error raised by (or about) a persistence adapter."""
    pass


class RecordNotFoundError(PersistenceError):
    """The adapter has no record for the given primary key."""
    pass
