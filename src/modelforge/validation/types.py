"""Core types for the modelforge validation system."""

from dataclasses import dataclass
from typing import Any, Callable

# Validator signature: (instance) -> None, reporting through instance.error()
ValidatorFn = Callable[[Any], None]


@dataclass(frozen=True)
class ValidationError:
    """A single validation failure.

    Attributes:
        attr: Attribute the failure relates to
        message: Human-readable message
    """

    attr: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"attr": self.attr, "message": self.message}
