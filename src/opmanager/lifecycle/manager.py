"""Manager — admission controller and registry of active operations.

WHY
───
Rules like "only one import may run at a time" or "a refresh must wait
while a save is in flight" belong to neither operation. A manager owns
them: it decides whether a proposed operation may start, tracks which
operations are active, and broadcasts every lifecycle transition of the
operations it governs.

ARCHITECTURE
────────────
::

    AbstractManager(allowed_kinds)
      ├── .request(op)          ─ admission procedure (never raises on refusal)
      ├── .is_allowed(op)       ─ bound to me + kind allowed
      ├── .is_processable(op)   ─ ABSTRACT policy hook
      ├── ._prepare(op)         ─ pre-admission hook (default no-op)
      ├── .clean(target)        ─ drop target's listeners here and on active ops
      ├── .allowed / .operations ─ copies, never the live containers
      └── on_<event>[_owned]    ─ ACCEPT / REFUSE / RUN / DONE / RELEASE

    request(op):
      is_allowed → is_processable → op.is_idle → not refused → not active
        │ any failure                       │ success
        ▼                                   ▼
      REFUSE(op, reason)          wire RUN/DONE observers on op
                                  _prepare(op)
                                  add op to active set
                                  ACCEPT(op)  ──► op starts itself

    op completes:
      DONE(op, *result) → remove op from active set → RELEASE(op)

Example::

    class ImportManager(AbstractManager):
        def is_processable(self, operation):
            return not self._operations

    manager = ImportManager(["import", "export"])
    manager.on_refuse(lambda op, reason: print(reason))
    manager.request(ImportOperation(manager))
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Hashable, Iterable
from functools import partial
from typing import TYPE_CHECKING, Any

from opmanager.core.errors import (
    AdmissionError,
    AlreadyAcceptedError,
    AlreadyRefusedError,
    AlreadyStartedError,
    ConfigError,
    ContractViolationError,
    NotAllowedError,
    NotProcessableError,
)
from opmanager.core.events import OwnedListener
from opmanager.core.logging import get_logger
from opmanager.lifecycle.emitter import LifecycleEmitter
from opmanager.lifecycle.enums import LifecycleEvent

if TYPE_CHECKING:
    from opmanager.lifecycle.operation import AbstractOperation

logger = get_logger(__name__)


class AbstractManager(LifecycleEmitter, ABC):
    """Decides which operations may run and tracks the ones that are running.

    Concrete managers implement :meth:`is_processable` and may override
    :meth:`_prepare`. The active set is available to them as
    ``self._operations`` (an insertion-ordered dict used as a set).
    """

    def __init__(self, allowed: Iterable[Hashable]) -> None:
        super().__init__()
        kinds = tuple(dict.fromkeys(allowed))
        if not kinds:
            raise ConfigError("The list of allowed operations must not be empty.")
        if None in kinds:
            raise ConfigError("None is not a valid operation kind.")
        self._allowed: tuple[Hashable, ...] = kinds
        self._allowed_lookup: frozenset[Hashable] = frozenset(kinds)
        self._operations: dict[AbstractOperation, None] = {}

    @property
    def allowed(self) -> list[Hashable]:
        """Permitted operation kinds (a fresh copy on every access)."""
        return list(self._allowed)

    @property
    def operations(self) -> list[AbstractOperation]:
        """Active operations in admission order (a fresh copy on every access)."""
        return list(self._operations)

    # ------------------------------------------------------------------ #
    # Admission
    # ------------------------------------------------------------------ #

    def is_allowed(self, operation: AbstractOperation) -> bool:
        """True iff *operation* is bound to this manager and its kind is allowed."""
        if getattr(operation, "manager", None) is not self:
            return False
        kind = getattr(operation, "kind", None)
        return isinstance(kind, Hashable) and kind in self._allowed_lookup

    @abstractmethod
    def is_processable(self, operation: AbstractOperation) -> bool:
        """Evaluate whether *operation* may start given the active operations.

        For example, the operation may be incompatible with another operation
        currently being processed. Must not change any state.
        """

    def _prepare(self, operation: AbstractOperation) -> None:
        """Prepare the active operations for *operation* (default: nothing).

        Called after the admission checks passed and before *operation* joins
        the active set. Raise :class:`AdmissionError` to veto the admission.
        Requesting other operations from here is not supported.
        """

    def request(self, operation: AbstractOperation) -> None:
        """Admit *operation* (ACCEPT) or refuse it (REFUSE with a reason).

        Refusals are never raised to the caller.
        """
        try:
            self._admit(operation)
        except AdmissionError as error:
            logger.debug(
                "operation_refused",
                manager=type(self).__name__,
                operation=type(operation).__name__,
                reason=error.message,
            )
            self._trigger(LifecycleEvent.REFUSE, operation, error.message)
            return

        logger.debug(
            "operation_accepted",
            manager=type(self).__name__,
            operation=type(operation).__name__,
            active=len(self._operations),
        )
        self._trigger(LifecycleEvent.ACCEPT, operation)

    def _admit(self, operation: AbstractOperation) -> None:
        self._check_admission(operation)
        observers = self._setup(operation)
        try:
            self._prepare(operation)
        except BaseException:
            for listener in observers:
                listener.dispose()
            raise
        self._add_operation(operation)

    def _check_admission(self, operation: AbstractOperation) -> None:
        if not self.is_allowed(operation):
            raise NotAllowedError()
        if not self.is_processable(operation):
            raise NotProcessableError()
        if not operation.is_idle:
            raise AlreadyStartedError()
        if operation.is_refused:
            raise AlreadyRefusedError()
        if operation in self._operations:
            raise AlreadyAcceptedError()

    def _setup(self, operation: AbstractOperation) -> list[OwnedListener]:
        """Listen to *operation* so its RUN and DONE are relayed by this manager."""
        return [
            operation.on_done_owned(self, partial(self._handle_done, operation), once=True),
            operation.on_run_owned(self, partial(self._handle_run, operation), once=True),
        ]

    # ------------------------------------------------------------------ #
    # Active set
    # ------------------------------------------------------------------ #

    def _add_operation(self, operation: AbstractOperation) -> None:
        self._operations[operation] = None

    def _remove_operation(self, operation: AbstractOperation) -> None:
        if operation not in self._operations:
            raise ContractViolationError("The operation is not managed.").with_context(
                manager=type(self).__name__,
                operation=type(operation).__name__,
            )
        del self._operations[operation]
        logger.debug(
            "operation_released",
            manager=type(self).__name__,
            operation=type(operation).__name__,
            active=len(self._operations),
        )
        self._trigger(LifecycleEvent.RELEASE, operation)

    def _handle_run(self, operation: AbstractOperation) -> None:
        self._trigger(LifecycleEvent.RUN, operation)

    def _handle_done(self, operation: AbstractOperation, *result: Any) -> None:
        # Observers of DONE still find the operation in ``operations``.
        self._trigger(LifecycleEvent.DONE, operation, *result)
        self._remove_operation(operation)

    # ------------------------------------------------------------------ #
    # Cleanup
    # ------------------------------------------------------------------ #

    def clean(self, target: Any) -> None:
        """Dispose all listeners bound to *target*, here and on every active operation.

        Usually called when *target* is being torn down.
        """
        self.off(target)
        for operation in list(self._operations):
            operation.off(target)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(allowed={list(self._allowed)!r}, active={len(self._operations)})"


__all__ = ["AbstractManager"]
