"""Instance: attribute state, validation errors and instance-scope events."""

import logging
from typing import TYPE_CHECKING, Any, Callable

from modelforge.core.types import UNSET
from modelforge.hooks.registry import EventRegistry
from modelforge.hooks.types import Scope
from modelforge.model.store import AttributeStore, same_value
from modelforge.validation.types import ValidationError

if TYPE_CHECKING:
    from modelforge.lifecycle import Callback
    from modelforge.model.model_class import ModelClass

logger = logging.getLogger(__name__)


def _export(value: Any) -> Any:
    if isinstance(value, Instance):
        return value.to_json()
    if isinstance(value, dict):
        return {key: _export(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_export(item) for item in value]
    return value


class Instance:
    """A single record of a ModelClass.

    Declared attributes are reachable through get()/set() and, when the
    name does not clash with a member of this class, as plain Python
    attributes (``user.name``, ``user.name = "Bob"``).

    Attributes:
        events: Instance-scope event registry
        errors: Errors found by the latest validation pass
        removed: True once remove() succeeded
    """

    def __init__(self, model: "ModelClass", attrs: dict[str, Any] | None = None, /, **kwargs: Any):
        model.finalize()

        values: dict[str, Any] = {}
        for name, descriptor in model.schema.items():
            initial = descriptor.initial_value()
            if initial is not UNSET:
                values[name] = initial
        for name, value in {**(attrs or {}), **kwargs}.items():
            if name in model.schema:
                values[name] = value

        self.events = EventRegistry(Scope.INSTANCE, model.name)
        self.errors: list[ValidationError] = []
        self.removed = False
        self._store = AttributeStore(values)
        # Set last: __setattr__ routes declared attributes once _model exists.
        self._model = model

    def __repr__(self) -> str:
        key = self._model.primary_key
        return f"<{self._model.name} {key}={self._store.get(key)!r}>"

    def __getattr__(self, name: str) -> Any:
        model = self.__dict__.get("_model")
        if model is not None and name in model.schema:
            return self.get(name)
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        model = self.__dict__.get("_model")
        if (
            model is not None
            and name in model.schema
            and name not in self.__dict__
            and not hasattr(type(self), name)
        ):
            self.set(name, value)
            return
        object.__setattr__(self, name, value)

    @property
    def model(self) -> "ModelClass":
        return self._model

    @property
    def primary(self) -> Any:
        """Value of the primary-key attribute (None if unset)."""
        return self.get(self._model.primary_key)

    @primary.setter
    def primary(self, value: Any) -> None:
        self.set(self._model.primary_key, value)

    # ------------------------------------------------------------------
    # Attribute access
    # ------------------------------------------------------------------

    def get(self, name: str, default: Any = None) -> Any:
        value = self._store.get(name)
        return default if value is UNSET else value

    def set(self, name: str, value: Any) -> "Instance":
        """Set one attribute, marking it dirty and emitting change events.

        Undeclared names are ignored; setting the current value is a no-op.
        """
        if name not in self._model.schema:
            logger.debug("Ignoring undeclared attribute '%s' on %s", name, self._model.name)
            return self

        previous = self._store.get(name)
        if same_value(value, previous):
            return self

        self._store.put(name, value)
        self._emit(f"change:{name}", value, previous)
        self._emit("change", name, value, previous)
        return self

    def unset(self, name: str) -> "Instance":
        return self.set(name, UNSET)

    def has(self, name: str) -> bool:
        return self._store.get(name) is not UNSET

    def assign(self, attrs: dict[str, Any] | None = None, /, **kwargs: Any) -> "Instance":
        """Set several attributes at once.

        "setting" listeners receive the pending mapping and may edit it in
        place before it is applied. A plain dict passed without keyword
        arguments is handed over as is, so their edits show in the caller's
        dict; otherwise they see a merged copy.
        """
        if isinstance(attrs, dict) and not kwargs:
            pending = attrs
        else:
            pending = {**(attrs or {}), **kwargs}
        self._emit("setting", pending)
        for name, value in list(pending.items()):
            if name in self._model.schema:
                self.set(name, value)
        return self

    def changed(self, name: str | None = None) -> Any:
        """Dirty attributes as a fresh dict, or whether ``name`` is dirty."""
        if name is not None:
            return self._store.is_dirty(name)
        return self._store.dirty()

    def snapshot(self) -> dict[str, Any]:
        """Copy of the current attribute values."""
        return self._store.snapshot()

    def commit(
        self,
        values: dict[str, Any] | None = None,
        written: dict[str, Any] | None = None,
    ) -> "Instance":
        """Mark the instance as persisted, then merge ``values`` in.

        ``written`` is the snapshot the adapter stored; attributes changed
        after it was taken stay dirty. Used with adapter responses;
        undeclared keys are dropped and no change events fire.
        """
        merged = {name: value for name, value in (values or {}).items() if name in self._model.schema}
        self._store.commit(merged, written)
        return self

    def is_new(self) -> bool:
        return self._store.get(self._model.primary_key) is UNSET

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def error(self, attr: str, message: str) -> "Instance":
        self.errors.append(ValidationError(attr=attr, message=message))
        return self

    def is_valid(self) -> bool:
        self.errors = []
        self._model.validators.run(self)

        if self.errors:
            self._model.events.emit("invalid", self, list(self.errors))
            self.events.emit("invalid", self, list(self.errors))
            return False

        self._model.events.emit("valid", self, None)
        self.events.emit("valid", self, None)
        return True

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def save(self, callback: "Callback | None" = None) -> None:
        await self._model.lifecycle.save(self, callback)

    async def remove(self, callback: "Callback | None" = None) -> None:
        await self._model.lifecycle.remove(self, callback)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_json(self) -> dict[str, Any]:
        """Plain mapping of every attribute that holds a value."""
        return {
            name: _export(self._store.get(name))
            for name in self._model.schema
            if name in self._store
        }

    json = to_json

    # ------------------------------------------------------------------
    # Instance-scope events
    # ------------------------------------------------------------------

    def on(self, events: str, fn: Callable[..., Any] | None = None, *, continuation: bool = False) -> Any:
        return self.events.on(events, fn, continuation=continuation)

    def once(self, events: str, fn: Callable[..., Any] | None = None, *, continuation: bool = False) -> Any:
        return self.events.once(events, fn, continuation=continuation)

    def off(self, events: str | None = None, fn: Callable[..., Any] | None = None) -> None:
        self.events.off(events, fn)

    def _emit(self, event: str, *args: Any) -> None:
        self._model.events.emit(event, self, *args)
        self.events.emit(event, self, *args)
