"""modelforge validation system.

Validators are plain functions receiving the instance and reporting
failures through ``instance.error(attr, message)``:

    User.validate(required("name"))

    @User.validate
    def adult(user):
        if user.get("age", 0) < 18:
            user.error("age", "must be 18 or older")
"""

from modelforge.validation.engine import ValidationEngine
from modelforge.validation.types import ValidationError, ValidatorFn
from modelforge.validation.validators import (
    from_rules,
    length,
    pattern,
    required,
    type_of,
    value_range,
)

__all__ = [
    "ValidationEngine",
    "ValidationError",
    "ValidatorFn",
    "from_rules",
    "length",
    "pattern",
    "required",
    "type_of",
    "value_range",
]
