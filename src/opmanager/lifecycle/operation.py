"""Operation — one unit of work with an idle → running → done lifecycle.

An operation never decides on its own to start: it is bound to one manager
at construction and listens to that manager's ACCEPT and REFUSE events.
Acceptance and the start of execution are two observable effects of the
same ACCEPT event; the manager never calls into the operation directly.

Lifecycle::

    __init__            subscribe (owned, by method name) to manager ACCEPT + REFUSE
        │
        ├── manager REFUSE(me, reason) ─► drop both relays, REFUSE(reason); idle forever
        │
        └── manager ACCEPT(me)
              drop both relays, subscribe to manager RELEASE
              ACCEPT ─► status RUNNING ─► RUN ─► _process(done)
                                                      │
                                      done(*result) ◄─┘  (whenever the work decides)
              status DONE, result fixed ─► DONE(*result)
                                           manager: DONE(me, *result), remove, RELEASE(me)
              manager RELEASE(me) ─► manager.off(me) ─► RELEASE

Concrete operations set ``kind`` and implement ``_process``::

    class FetchOperation(AbstractOperation):
        kind = "fetch"

        def _process(self, done):
            self._done = done          # finish later, e.g. from a callback

If ``_process`` raises, the exception is logged and becomes the sole
result value, so the manager's bookkeeping stays consistent.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Hashable, Iterable
from typing import TYPE_CHECKING, Any, ClassVar

from opmanager.core.errors import ContractViolationError
from opmanager.core.logging import get_logger
from opmanager.lifecycle.emitter import LifecycleEmitter
from opmanager.lifecycle.enums import LifecycleEvent, OperationStatus, validate_transition

if TYPE_CHECKING:
    from opmanager.core.events import OwnedListener
    from opmanager.lifecycle.manager import AbstractManager

logger = get_logger(__name__)

DoneCallback = Callable[..., None]


class AbstractOperation(LifecycleEmitter, ABC):
    """Base class for operations governed by an :class:`AbstractManager`.

    Args:
        manager: The manager whose jurisdiction this operation lives in
        events: Custom events the subclass fires with ``_trigger``
    """

    kind: ClassVar[Hashable | None] = None
    """Tag the manager's allowed kinds are matched against."""

    def __init__(self, manager: AbstractManager, events: Iterable[Hashable] = ()) -> None:
        super().__init__(events)
        self._manager = manager
        self._status = OperationStatus.IDLE
        self._result: tuple[Any, ...] | None = None
        self._refused = False
        self._relays: list[OwnedListener] = [
            manager.on_accept_owned(self, "_handle_manager_accept"),
            manager.on_refuse_owned(self, "_handle_manager_refuse"),
        ]

    @property
    def manager(self) -> AbstractManager:
        return self._manager

    @property
    def status(self) -> OperationStatus:
        return self._status

    @property
    def result(self) -> tuple[Any, ...] | None:
        """Values passed to the completion callback; ``None`` until done."""
        return self._result

    @property
    def is_idle(self) -> bool:
        return self._status is OperationStatus.IDLE

    @property
    def is_running(self) -> bool:
        return self._status is OperationStatus.RUNNING

    @property
    def is_done(self) -> bool:
        return self._status is OperationStatus.DONE

    @property
    def is_refused(self) -> bool:
        """True once the manager refused this operation; it will never run."""
        return self._refused

    def request(self) -> None:
        """Ask the bound manager to admit this operation.

        Prefer ``manager.request(operation)``; this is a shortcut for it.
        """
        self._manager.request(self)

    @abstractmethod
    def _process(self, done: DoneCallback) -> None:
        """Perform the work. Call ``done(*result)`` at most once, now or later.

        Never calling it is legitimate: the operation then stays running.
        """

    # ------------------------------------------------------------------ #
    # Manager relay
    # ------------------------------------------------------------------ #

    def _handle_manager_accept(self, operation: AbstractOperation) -> None:
        if operation is not self:
            return
        self._dispose_relays()
        self._manager.on_release_owned(self, "_handle_manager_release")
        self._trigger(LifecycleEvent.ACCEPT)
        self._run()

    def _handle_manager_refuse(self, operation: AbstractOperation, reason: str) -> None:
        if operation is not self:
            return
        self._refused = True
        self._dispose_relays()
        self._trigger(LifecycleEvent.REFUSE, reason)

    def _handle_manager_release(self, operation: AbstractOperation) -> None:
        if operation is not self:
            return
        self._manager.off(self)
        self._trigger(LifecycleEvent.RELEASE)

    def _dispose_relays(self) -> None:
        relays, self._relays = self._relays, []
        for listener in relays:
            listener.dispose()

    # ------------------------------------------------------------------ #
    # State machine
    # ------------------------------------------------------------------ #

    def _set_status(self, status: OperationStatus) -> None:
        validate_transition(self._status, status)
        self._status = status

    def _run(self) -> None:
        self._set_status(OperationStatus.RUNNING)
        self._trigger(LifecycleEvent.RUN)
        try:
            self._process(self._complete)
        except ContractViolationError:
            raise
        except Exception as error:
            # Already done: the error came from a DONE listener, not from the work.
            if not self.is_running:
                raise
            logger.exception(
                "operation_failed",
                operation=type(self).__name__,
                kind=self.kind,
                error=str(error),
            )
            self._complete(error)

    def _complete(self, *result: Any) -> None:
        if not self.is_running:
            raise ContractViolationError("The operation is not in a running state.").with_context(
                operation=type(self).__name__,
                status=self._status.value,
            )
        self._result = result
        self._set_status(OperationStatus.DONE)
        self._trigger(LifecycleEvent.DONE, *result)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r}, status={self._status.value})"


__all__ = ["AbstractOperation", "DoneCallback"]
