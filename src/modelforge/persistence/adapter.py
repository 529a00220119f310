"""PersistenceAdapter Protocol: the storage interface the lifecycle needs."""

from collections.abc import Awaitable, Mapping
from typing import Any, Protocol, runtime_checkable

AdapterResponse = Mapping[str, Any] | None


@runtime_checkable
class PersistenceAdapter(Protocol):
    """Interface every persistence adapter must implement.

    Methods may be plain or async. Failure is signalled by raising; the
    exception reaches the save()/remove() caller unchanged. A mapping
    returned by create/update is merged into the instance.
    """

    def create(self, instance: Any) -> AdapterResponse | Awaitable[AdapterResponse]: ...

    def update(self, instance: Any) -> AdapterResponse | Awaitable[AdapterResponse]: ...

    def remove(self, instance: Any) -> None | Awaitable[None]: ...
