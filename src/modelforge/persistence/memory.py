"""In-memory persistence adapter."""

import copy
import itertools
from typing import Any

from modelforge.core.types import AttributeType
from modelforge.errors import RecordNotFoundError


class MemoryAdapter:
    """Keeps records in per-model dicts keyed by primary key.

    Missing primary keys are generated from a counter shared by all models:
    ints for ``number`` keys, strings otherwise.
    """

    def __init__(self, start: int = 1):
        self._tables: dict[str, dict[Any, dict[str, Any]]] = {}
        self._ids = itertools.count(start)

    def _table(self, model: Any) -> dict[Any, dict[str, Any]]:
        return self._tables.setdefault(model.name, {})

    def _next_id(self, model: Any) -> Any:
        value = next(self._ids)
        descriptor = model.schema.get(model.primary_key)
        if descriptor is not None and descriptor.type is AttributeType.NUMBER:
            return value
        return str(value)

    def create(self, instance: Any) -> dict[str, Any]:
        model = instance.model
        key = model.primary_key
        record = instance.to_json()
        if record.get(key) is None:
            record[key] = self._next_id(model)
        self._table(model)[record[key]] = record
        return {key: record[key]}

    def update(self, instance: Any) -> None:
        table = self._table(instance.model)
        if instance.primary not in table:
            raise RecordNotFoundError(
                f"{instance.model.name} '{instance.primary}' does not exist"
            )
        table[instance.primary] = instance.to_json()

    def remove(self, instance: Any) -> None:
        table = self._table(instance.model)
        if table.pop(instance.primary, None) is None:
            raise RecordNotFoundError(
                f"{instance.model.name} '{instance.primary}' does not exist"
            )

    def get(self, model: Any, key: Any) -> dict[str, Any] | None:
        """Copy of a stored record, or None."""
        record = self._table(model).get(key)
        return copy.deepcopy(record) if record is not None else None

    def records(self, model: Any) -> list[dict[str, Any]]:
        return [copy.deepcopy(record) for record in self._table(model).values()]
