"""ModelClass: schema, class-scope events and validators of one entity type."""

import logging
from typing import Any, Callable

from modelforge.core.types import UNSET, AttributeDescriptor, AttributeType, resolve_type
from modelforge.errors import SchemaError
from modelforge.hooks.registry import EventRegistry
from modelforge.hooks.types import Scope
from modelforge.lifecycle import Lifecycle
from modelforge.validation.engine import ValidationEngine
from modelforge.validation.types import ValidatorFn

logger = logging.getLogger(__name__)


class ModelClass:
    """Declared entity type.

    Every instance of the type shares its ModelClass by reference. There is
    no global registry: a ModelClass is a plain object that callers pass
    wherever it is needed.

    Example:
        User = (
            ModelClass("User", adapter=MemoryAdapter())
            .attr("id", "number")
            .attr("name", "string")
        )
        user = User(name="Tobi")
        await user.save()
    """

    def __init__(
        self,
        name: str,
        *,
        primary_key: str = "id",
        adapter: Any = None,
    ):
        self.name = name
        self.primary_key = primary_key
        self.adapter = adapter
        self.schema: dict[str, AttributeDescriptor] = {}
        self.events = EventRegistry(Scope.CLASS, name)
        self.validators = ValidationEngine(name)
        self.lifecycle = Lifecycle(self)
        self._final = False

    def __repr__(self) -> str:
        return f"ModelClass({self.name!r}, attributes={list(self.schema)})"

    def __call__(self, attrs: dict[str, Any] | None = None, /, **kwargs: Any) -> Any:
        """Construct a new instance."""
        from modelforge.model.instance import Instance

        return Instance(self, attrs, **kwargs)

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    def attr(
        self,
        name: str,
        type: AttributeType | str = AttributeType.ANY,
        *,
        default: Any = UNSET,
        default_factory: Callable[[], Any] | None = None,
        primary_key: bool = False,
    ) -> "ModelClass":
        """Declare an attribute. Returns the ModelClass for chaining.

        Raises:
            SchemaError: If the schema is final, the name is taken, the type
                is unknown, or a second primary key is declared
        """
        if self._final:
            raise SchemaError(
                f"Schema of '{self.name}' is final; declare attributes before "
                "creating instances"
            )
        if name in self.schema:
            raise SchemaError(f"Attribute '{name}' is already declared on '{self.name}'")
        if default is not UNSET and default_factory is not None:
            raise SchemaError(f"Attribute '{name}' cannot have both default and default_factory")
        try:
            attr_type = resolve_type(type)
        except ValueError as e:
            raise SchemaError(str(e)) from e

        if primary_key:
            declared = self.schema.get(self.primary_key)
            if declared is not None and declared.primary_key and self.primary_key != name:
                raise SchemaError(
                    f"'{self.name}' already has primary key '{self.primary_key}'"
                )
            self.primary_key = name

        self.schema[name] = AttributeDescriptor(
            name=name,
            type=attr_type,
            default=default,
            default_factory=default_factory,
            primary_key=name == self.primary_key,
        )
        return self

    def has_attr(self, name: str) -> bool:
        return name in self.schema

    def attributes(self) -> list[str]:
        return list(self.schema)

    @property
    def is_final(self) -> bool:
        return self._final

    def finalize(self) -> None:
        """Freeze the schema. Called when the first instance is built."""
        if not self._final:
            self._final = True
            logger.debug("Schema of '%s' finalized: %s", self.name, list(self.schema))

    # ------------------------------------------------------------------
    # Validators and class-scope events
    # ------------------------------------------------------------------

    def validate(self, fn: ValidatorFn) -> ValidatorFn:
        """Register a validator. Usable as a decorator."""
        return self.validators.add(fn)

    def on(self, events: str, fn: Callable[..., Any] | None = None, *, continuation: bool = False) -> Any:
        return self.events.on(events, fn, continuation=continuation)

    def once(self, events: str, fn: Callable[..., Any] | None = None, *, continuation: bool = False) -> Any:
        return self.events.once(events, fn, continuation=continuation)

    def off(self, events: str | None = None, fn: Callable[..., Any] | None = None) -> None:
        self.events.off(events, fn)


def model(name: str, *, primary_key: str = "id", adapter: Any = None) -> ModelClass:
    """Create a ModelClass."""
    return ModelClass(name, primary_key=primary_key, adapter=adapter)
