"""Save/remove orchestration for modelforge instances.

Sequences validation, lifecycle hook chains, the persistence adapter call,
attribute merge-back and the "after" events.
"""

import inspect
import logging
from typing import TYPE_CHECKING, Any, Callable

from modelforge.errors import NotSaved, PersistenceError, ValidationFailure
from modelforge.hooks.service import Guard, HookRunner

if TYPE_CHECKING:
    from modelforge.model.instance import Instance
    from modelforge.model.model_class import ModelClass

logger = logging.getLogger(__name__)

# Completion callback: receives the error, or None on success.
Callback = Callable[[BaseException | None], Any]


class Lifecycle:
    """Coordinates the save and remove lifecycles of one ModelClass.

    save():
    1. Validate
    2. Run "saving" hooks
    3. Validate again (hooks may have changed attributes)
    4. New instance: "creating" hooks, adapter.create, emit create, emit save
       Otherwise: "updating" hooks, adapter.update, emit update, emit save

    remove():
    1. Refuse new instances ("not saved")
    2. Run "removing" hooks (no validation)
    3. adapter.remove, mark removed, emit remove

    Failures never raise out of the pipeline itself. They are delivered to
    the callback when one is given; otherwise save() raises the error and
    remove() emits it as an "error" event.
    """

    def __init__(self, model: "ModelClass", runner: HookRunner | None = None):
        self.model = model
        self.runner = runner or HookRunner()

    # ------------------------------------------------------------------
    # save
    # ------------------------------------------------------------------

    async def save(self, instance: "Instance", callback: Callback | None = None) -> None:
        error = await self._save(instance)
        if error is not None and callback is None:
            raise error
        await self._complete(callback, error)

    async def _save(self, instance: "Instance") -> BaseException | None:
        if not instance.is_valid():
            return self._validation_failed(instance, "before saving hooks")

        guard = self._errors_guard(instance)
        error = await self._run_hooks("saving", instance, guard)
        if error is not None:
            return error

        if not instance.is_valid():
            return self._validation_failed(instance, "after saving hooks")

        if instance.is_new():
            return await self._persist(instance, "creating", "create", guard)
        return await self._persist(instance, "updating", "update", guard)

    async def _persist(
        self,
        instance: "Instance",
        hook: str,
        operation: str,
        guard: Guard,
    ) -> BaseException | None:
        error = await self._run_hooks(hook, instance, guard)
        if error is not None:
            return error

        written = instance.snapshot()
        try:
            response = await self._call_adapter(operation, instance)
        except Exception as e:
            logger.warning("Adapter %s failed for %r: %s", operation, instance, e)
            return e

        instance.commit(response or {}, written)
        logger.info("%s %r", "Created" if operation == "create" else "Updated", instance)

        self._emit(operation, instance)
        self._emit("save", instance)
        return None

    # ------------------------------------------------------------------
    # remove
    # ------------------------------------------------------------------

    async def remove(self, instance: "Instance", callback: Callback | None = None) -> None:
        error = await self._remove(instance)
        if error is not None and callback is None:
            self._emit_error(instance, error)
            return
        await self._complete(callback, error)

    async def _remove(self, instance: "Instance") -> BaseException | None:
        if instance.is_new():
            return NotSaved()

        error = await self._run_hooks("removing", instance)
        if error is not None:
            return error

        try:
            await self._call_adapter("remove", instance)
        except Exception as e:
            logger.warning("Adapter remove failed for %r: %s", instance, e)
            return e

        instance.removed = True
        logger.info("Removed %r", instance)
        self._emit("remove", instance)
        return None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _run_hooks(
        self,
        event: str,
        instance: "Instance",
        guard: Guard | None = None,
    ) -> BaseException | None:
        error = await self.runner.run(
            event, instance, (self.model.events, instance.events), guard
        )
        if error is not None:
            logger.warning("'%s' hooks aborted for %r: %s", event, instance, error)
        return error

    async def _call_adapter(self, operation: str, instance: "Instance") -> Any:
        adapter = self.model.adapter
        if adapter is None:
            raise PersistenceError(
                f"No persistence adapter configured for '{self.model.name}'"
            )
        result = getattr(adapter, operation)(instance)
        if inspect.isawaitable(result):
            result = await result
        return result

    def _errors_guard(self, instance: "Instance") -> Guard:
        def guard() -> BaseException | None:
            if instance.errors:
                return ValidationFailure(instance.errors)
            return None

        return guard

    def _validation_failed(self, instance: "Instance", stage: str) -> ValidationFailure:
        logger.warning(
            "Validation failed for %r %s: %s",
            instance,
            stage,
            ", ".join(f"{e.attr} {e.message}" for e in instance.errors),
        )
        return ValidationFailure(instance.errors)

    def _emit(self, event: str, instance: "Instance", *args: Any) -> None:
        self.model.events.emit(event, instance, *args)
        instance.events.emit(event, instance, *args)

    def _emit_error(self, instance: "Instance", error: BaseException) -> None:
        listened = self.model.events.has_listeners("error") or instance.events.has_listeners(
            "error"
        )
        self._emit("error", instance, error)
        if not listened:
            raise error

    async def _complete(self, callback: Callback | None, error: BaseException | None) -> None:
        if callback is None:
            return
        result = callback(error)
        if inspect.isawaitable(result):
            await result
