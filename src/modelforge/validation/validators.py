"""Canned attribute validators.

Each factory returns a validator function suitable for
``ModelClass.validate()``:

- required: attribute must hold a non-empty value
- type_of: value must match a declared type tag
- length: string length bounds
- value_range: numeric bounds
- pattern: regex match

All but ``required`` skip empty values, so optional attributes only get
checked when they hold something.
"""

import re
from typing import Any

from modelforge.core.types import AttributeType, matches_type, resolve_type
from modelforge.validation.types import ValidatorFn


def _is_empty(value: Any) -> bool:
    """Check if a value is considered empty."""
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    if isinstance(value, (list, dict)) and len(value) == 0:
        return True
    return False


def required(attr: str, message: str | None = None) -> ValidatorFn:
    msg = message or f"{attr} is required"

    def validate_required(instance: Any) -> None:
        if not instance.has(attr) or _is_empty(instance.get(attr)):
            instance.error(attr, msg)

    return validate_required


def type_of(
    attr: str,
    attr_type: AttributeType | str,
    message: str | None = None,
) -> ValidatorFn:
    resolved = resolve_type(attr_type)
    msg = message or f"{attr} must be a {resolved.value}"

    def validate_type(instance: Any) -> None:
        value = instance.get(attr)
        if value is None:
            return
        if not matches_type(resolved, value):
            instance.error(attr, msg)

    return validate_type


def length(
    attr: str,
    min: int | None = None,
    max: int | None = None,
) -> ValidatorFn:
    def validate_length(instance: Any) -> None:
        value = instance.get(attr)
        if not isinstance(value, str) or _is_empty(value):
            return
        if min is not None and len(value) < min:
            instance.error(attr, f"{attr} must be at least {min} characters")
        if max is not None and len(value) > max:
            instance.error(attr, f"{attr} must be at most {max} characters")

    return validate_length


def value_range(
    attr: str,
    min: float | None = None,
    max: float | None = None,
) -> ValidatorFn:
    def validate_range(instance: Any) -> None:
        value = instance.get(attr)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return
        if min is not None and value < min:
            instance.error(attr, f"{attr} must be at least {min}")
        if max is not None and value > max:
            instance.error(attr, f"{attr} must be at most {max}")

    return validate_range


def pattern(attr: str, regex: str, message: str | None = None) -> ValidatorFn:
    compiled = re.compile(regex)
    msg = message or f"{attr} has an invalid format"

    def validate_pattern(instance: Any) -> None:
        value = instance.get(attr)
        if not isinstance(value, str) or _is_empty(value):
            return
        if not compiled.search(value):
            instance.error(attr, msg)

    return validate_pattern


def from_rules(attr: str, rules: dict[str, Any]) -> list[ValidatorFn]:
    """Build validators from a schema-file ``validation:`` mapping.

    Recognised keys: required, minLength, maxLength, min, max, pattern.
    """
    validators: list[ValidatorFn] = []
    if rules.get("required"):
        validators.append(required(attr))
    if "minLength" in rules or "maxLength" in rules:
        validators.append(length(attr, rules.get("minLength"), rules.get("maxLength")))
    if "min" in rules or "max" in rules:
        validators.append(value_range(attr, rules.get("min"), rules.get("max")))
    if rules.get("pattern"):
        validators.append(pattern(attr, rules["pattern"]))
    return validators
