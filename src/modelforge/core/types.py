"""Attribute type registry and schema descriptors."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable


class _Unset:
    """Marker for an attribute that holds no value ("undefined").

    ``None`` is a real value and is kept; UNSET means the key is absent.
    """

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"

    def __copy__(self) -> "_Unset":
        return self

    def __deepcopy__(self, memo: dict) -> "_Unset":
        return self


UNSET: Any = _Unset()


class AttributeType(Enum):
    """Declared type tag of a model attribute."""

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    ANY = "any"


@dataclass(frozen=True)
class TypeInfo:
    name: str
    storage_type: str
    python_types: tuple[type, ...]


# Built-in attribute types
ATTRIBUTE_TYPES: dict[AttributeType, TypeInfo] = {
    AttributeType.NUMBER: TypeInfo(
        name="number",
        storage_type="REAL",
        python_types=(int, float),
    ),
    AttributeType.STRING: TypeInfo(
        name="string",
        storage_type="TEXT",
        python_types=(str,),
    ),
    AttributeType.BOOLEAN: TypeInfo(
        name="boolean",
        storage_type="INTEGER",
        python_types=(bool,),
    ),
    AttributeType.ANY: TypeInfo(
        name="any",
        storage_type="TEXT",  # JSON encoded
        python_types=(object,),
    ),
}


def resolve_type(value: "AttributeType | str") -> AttributeType:
    """Accept either an AttributeType or its string tag.

    Raises:
        ValueError: If the tag is not a known attribute type
    """
    if isinstance(value, AttributeType):
        return value
    try:
        return AttributeType(value)
    except ValueError:
        known = ", ".join(t.value for t in AttributeType)
        raise ValueError(f"Unknown attribute type '{value}'. Known types: {known}")


def get_storage_type(attr_type: AttributeType) -> str:
    """Get the SQL storage type for an attribute type."""
    return ATTRIBUTE_TYPES[attr_type].storage_type


def matches_type(attr_type: AttributeType, value: Any) -> bool:
    """Check a value against a declared type tag.

    ``bool`` is not accepted as a number even though it subclasses ``int``.
    """
    if attr_type is AttributeType.ANY:
        return True
    if attr_type is AttributeType.NUMBER and isinstance(value, bool):
        return False
    return isinstance(value, ATTRIBUTE_TYPES[attr_type].python_types)


@dataclass(frozen=True)
class AttributeDescriptor:
    """Declaration of a single model attribute.

    Attributes:
        name: Attribute name
        type: Declared type tag
        default: Value given to new instances when none is supplied
        default_factory: Called per instance instead of sharing ``default``
        primary_key: Whether this attribute identifies persisted records
    """

    name: str
    type: AttributeType = AttributeType.ANY
    default: Any = UNSET
    default_factory: Callable[[], Any] | None = None
    primary_key: bool = False

    def initial_value(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        return self.default

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name, "type": self.type.value}
        if self.default is not UNSET:
            result["default"] = self.default
        if self.primary_key:
            result["primaryKey"] = True
        return result
