"""Test Harness — utilities for testing managers and operations.

ARCHITECTURE
────────────
::

    Recorder:
      EventRecorder(emitter)        → records every lifecycle event in order
        .events                     → [(LifecycleEvent, args), ...]
        .names()                    → ["accept", "run", ...]
        .detach()                   → drop its listeners (clean / off)

    Test doubles (kind = "immediate", "pending", "deferred", "failing"):
      ImmediateOperation            → completes inside _process with RESULT
      PendingOperation              → never completes
      DeferredOperation             → completes when .finish(*result) is called
      FailingOperation              → raises from _process

Example::

    from opmanager.lifecycle import PermissiveManager
    from opmanager.testing import EventRecorder, ImmediateOperation

    manager = PermissiveManager([ImmediateOperation.kind])
    recorder = EventRecorder(manager)
    ImmediateOperation(manager).request()
    assert recorder.names() == ["accept", "run", "done", "release"]
"""

from __future__ import annotations

from typing import Any

from opmanager.lifecycle.emitter import LifecycleEmitter
from opmanager.lifecycle.enums import LIFECYCLE_EVENTS, LifecycleEvent
from opmanager.lifecycle.manager import AbstractManager
from opmanager.lifecycle.operation import AbstractOperation, DoneCallback


class EventRecorder:
    """Records the lifecycle events fired by a manager or an operation.

    The recorder subscribes as the owner of its listeners, so ``detach()`` (or
    ``manager.clean(recorder)``) removes them in one call.
    """

    def __init__(self, emitter: LifecycleEmitter) -> None:
        self.emitter = emitter
        self.events: list[tuple[LifecycleEvent, tuple[Any, ...]]] = []
        for event in LIFECYCLE_EVENTS:
            emitter.on_owned(event, self, self._recorder_for(event))

    def _recorder_for(self, event: LifecycleEvent):
        def record(*args: Any) -> None:
            self.events.append((event, args))

        return record

    def names(self) -> list[str]:
        """Event values in the order they fired."""
        return [event.value for event, _ in self.events]

    def of(self, event: LifecycleEvent) -> list[tuple[Any, ...]]:
        """Argument tuples of every occurrence of *event*."""
        return [args for recorded, args in self.events if recorded is event]

    def trace(self) -> list[tuple[str, str]]:
        """``(event, subject)`` pairs, the subject being the operation's class name."""
        rows = []
        for event, args in self.events:
            subject = args[0] if args and isinstance(args[0], AbstractOperation) else self.emitter
            rows.append((event.value, type(subject).__name__))
        return rows

    def clear(self) -> None:
        self.events.clear()

    def detach(self) -> None:
        """Dispose every listener this recorder registered."""
        if isinstance(self.emitter, AbstractManager):
            self.emitter.clean(self)
        else:
            self.emitter.off(self)


class ImmediateOperation(AbstractOperation):
    """Completes synchronously with ``RESULT``."""

    kind = "immediate"
    RESULT: tuple[Any, ...] = ()

    def _process(self, done: DoneCallback) -> None:
        done(*self.RESULT)


class PendingOperation(AbstractOperation):
    """Never completes."""

    kind = "pending"

    def _process(self, done: DoneCallback) -> None:
        pass


class DeferredOperation(AbstractOperation):
    """Completes when the test calls :meth:`finish`."""

    kind = "deferred"

    def __init__(self, manager: AbstractManager, events=()) -> None:
        super().__init__(manager, events)
        self._done: DoneCallback | None = None

    def _process(self, done: DoneCallback) -> None:
        self._done = done

    def finish(self, *result: Any) -> None:
        if self._done is None:
            raise RuntimeError("DeferredOperation.finish() called before the operation ran")
        self._done(*result)


class FailingOperation(AbstractOperation):
    """Raises ``ERROR`` from ``_process``."""

    kind = "failing"
    ERROR: type[Exception] = RuntimeError
    MESSAGE = "work failed"

    def _process(self, done: DoneCallback) -> None:
        raise self.ERROR(self.MESSAGE)


__all__ = [
    "EventRecorder",
    "ImmediateOperation",
    "PendingOperation",
    "DeferredOperation",
    "FailingOperation",
]
