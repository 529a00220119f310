"""Per-instance attribute bookkeeping.

Keeps the current values, the values at the last persistence point and
the set of attributes whose current value differs from the persisted one.
An absent key means UNSET.
"""

from collections.abc import Mapping
from typing import Any

from modelforge.core.types import UNSET

_SCALARS = (str, int, float, bool, bytes)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def same_value(a: Any, b: Any) -> bool:
    """Strict sameness: identity, or equality for scalars of the same type.

    ``int`` and ``float`` count as one number type, so ``1`` and ``1.0`` are
    the same value; ``bool`` never equals a number. Containers and other
    objects compare by identity, so assigning an equal but distinct list
    counts as a change.
    """
    if a is b:
        return True
    if _is_number(a) and _is_number(b):
        return a == b
    if type(a) is type(b) and isinstance(a, _SCALARS):
        return a == b
    return False


class AttributeStore:
    """Current/persisted value maps plus the dirty set."""

    def __init__(self, initial: Mapping[str, Any] | None = None):
        self._current: dict[str, Any] = {}
        self._persisted: dict[str, Any] = {}
        # dict used as an ordered set
        self._dirty: dict[str, None] = {}
        for name, value in (initial or {}).items():
            if value is not UNSET:
                self._current[name] = value
                self._persisted[name] = value

    def get(self, name: str) -> Any:
        return self._current.get(name, UNSET)

    def persisted(self, name: str) -> Any:
        return self._persisted.get(name, UNSET)

    def put(self, name: str, value: Any) -> Any:
        """Store a value and refresh its dirty flag. Returns the old value."""
        previous = self._current.get(name, UNSET)
        if value is UNSET:
            self._current.pop(name, None)
        else:
            self._current[name] = value

        if same_value(value, self._persisted.get(name, UNSET)):
            self._dirty.pop(name, None)
        else:
            self._dirty[name] = None
        return previous

    def is_dirty(self, name: str) -> bool:
        return name in self._dirty

    def dirty(self) -> dict[str, Any]:
        """Fresh mapping of dirty attribute -> current value (UNSET if removed)."""
        return {name: self._current.get(name, UNSET) for name in self._dirty}

    def snapshot(self) -> dict[str, Any]:
        """Copy of the current values, for handing to commit() later."""
        return dict(self._current)

    def commit(
        self,
        values: Mapping[str, Any] | None = None,
        written: Mapping[str, Any] | None = None,
    ) -> None:
        """Mark ``written`` as persisted, then merge ``values`` in.

        ``written`` is the state the adapter received (defaults to the
        current values). Merged values become both current and persisted.
        Attributes changed since ``written`` was taken stay dirty.
        """
        persisted = dict(self._current if written is None else written)
        for name, value in (values or {}).items():
            if value is UNSET:
                self._current.pop(name, None)
                persisted.pop(name, None)
            else:
                self._current[name] = value
                persisted[name] = value
        self._persisted = persisted

        self._dirty.clear()
        for name in [*self._current, *(n for n in persisted if n not in self._current)]:
            if not same_value(self._current.get(name, UNSET), persisted.get(name, UNSET)):
                self._dirty[name] = None

    def __contains__(self, name: object) -> bool:
        return name in self._current
