"""modelforge: in-process model runtime.

Declares typed attribute schemas, tracks dirty attributes, runs validators
and lifecycle hooks around create/update/remove, and delegates storage to
a pluggable persistence adapter.

Usage:
    from modelforge import MemoryAdapter, model, required

    User = model("User", adapter=MemoryAdapter()).attr("id").attr("name", "string")
    User.validate(required("name"))

    @User.on("creating", continuation=True)
    def stamp(user, done):
        done()

    user = User(name="Tobi")
    await user.save()
"""

from modelforge.core.types import (
    UNSET,
    AttributeDescriptor,
    AttributeType,
)
from modelforge.errors import (
    HookAbort,
    ModelError,
    NotSaved,
    PersistenceError,
    RecordNotFoundError,
    SchemaError,
    ValidationFailure,
)
from modelforge.hooks import HOOK_EVENTS, Continuation, EventRegistry, HookRunner, Scope
from modelforge.lifecycle import Lifecycle
from modelforge.model import Instance, ModelClass, model
from modelforge.persistence import (
    DatabaseConfig,
    MemoryAdapter,
    PersistenceAdapter,
    SQLAdapter,
    create_adapter,
)
from modelforge.validation import (
    ValidationError,
    length,
    pattern,
    required,
    type_of,
    value_range,
)

__all__ = [
    # Schema
    "AttributeDescriptor",
    "AttributeType",
    "Instance",
    "ModelClass",
    "UNSET",
    "model",
    # Events and hooks
    "Continuation",
    "EventRegistry",
    "HOOK_EVENTS",
    "HookRunner",
    "Lifecycle",
    "Scope",
    # Validation
    "ValidationError",
    "length",
    "pattern",
    "required",
    "type_of",
    "value_range",
    # Persistence
    "DatabaseConfig",
    "MemoryAdapter",
    "PersistenceAdapter",
    "SQLAdapter",
    "create_adapter",
    # Errors
    "HookAbort",
    "ModelError",
    "NotSaved",
    "PersistenceError",
    "RecordNotFoundError",
    "SchemaError",
    "ValidationFailure",
]
