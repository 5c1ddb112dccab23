"""
Walk-through of an exclusive admission policy, used by ``opmanager demo``.

Three kinds are allowed; the ``pending`` kind is exclusive. The script
requests an operation that finishes immediately, then one that never
finishes, then another immediate one, which is refused because the
exclusive operation is still active.
"""

from __future__ import annotations

from typing import Any

from opmanager.lifecycle import ExclusiveManager, LifecycleEvent
from opmanager.testing import DeferredOperation, EventRecorder, ImmediateOperation, PendingOperation


def run_demo() -> list[dict[str, Any]]:
    """Run the scenario and return the manager's event trace as rows."""
    manager = ExclusiveManager(
        [ImmediateOperation.kind, PendingOperation.kind, DeferredOperation.kind],
        exclusive=[PendingOperation.kind],
    )
    recorder = EventRecorder(manager)

    first = ImmediateOperation(manager)
    blocker = PendingOperation(manager)
    second = ImmediateOperation(manager)
    labels = {id(first): "A1", id(blocker): "B1", id(second): "A2"}

    for operation in (first, blocker, second):
        manager.request(operation)

    rows = []
    for step, (event, args) in enumerate(recorder.events, start=1):
        operation = args[0]
        rows.append(
            {
                "step": step,
                "event": event.value,
                "operation": labels[id(operation)],
                "kind": operation.kind,
                "detail": args[1] if event is LifecycleEvent.REFUSE else "",
            }
        )
    recorder.detach()
    return rows


__all__ = ["run_demo"]
