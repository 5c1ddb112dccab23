"""Shared lifecycle vocabulary for managers and operations.

Both components speak the same five events, with different scope: a
manager fires them for every operation it governs, an operation fires them
for itself only.

Valid status transitions::

    IDLE    → RUNNING
    RUNNING → DONE
    DONE    → (terminal)
"""

from enum import Enum

from opmanager.core.errors import InvalidTransitionError


class LifecycleEvent(str, Enum):
    """Lifecycle events fired by managers and operations."""

    ACCEPT = "accept"
    REFUSE = "refuse"
    RUN = "run"
    DONE = "done"
    RELEASE = "release"

    @property
    def description(self) -> str:
        return _EVENT_DESCRIPTIONS[self]


_EVENT_DESCRIPTIONS: dict[LifecycleEvent, str] = {
    LifecycleEvent.ACCEPT: "Admitted and about to run; already in the active set.",
    LifecycleEvent.REFUSE: "Rejected by the admission procedure; will never run.",
    LifecycleEvent.RUN: "An admitted operation has begun executing.",
    LifecycleEvent.DONE: "The work completed; carries the result values.",
    LifecycleEvent.RELEASE: "Removed from the manager's active set.",
}

LIFECYCLE_EVENTS: tuple[LifecycleEvent, ...] = tuple(LifecycleEvent)


class OperationStatus(str, Enum):
    """Status of an operation. Transitions are enforced by ``validate_transition``."""

    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"


STATUS_TRANSITIONS: dict[OperationStatus, frozenset[OperationStatus]] = {
    OperationStatus.IDLE: frozenset({OperationStatus.RUNNING}),
    OperationStatus.RUNNING: frozenset({OperationStatus.DONE}),
    OperationStatus.DONE: frozenset(),  # terminal
}


def validate_transition(current: OperationStatus, target: OperationStatus) -> None:
    """Raise :class:`InvalidTransitionError` if *current → target* is illegal.

    Example:
        >>> validate_transition(OperationStatus.IDLE, OperationStatus.RUNNING)
        >>> validate_transition(OperationStatus.DONE, OperationStatus.RUNNING)
        Traceback (most recent call last):
        ...
        opmanager.core.errors.InvalidTransitionError: Invalid OperationStatus transition: done → running
    """
    if target not in STATUS_TRANSITIONS.get(current, frozenset()):
        raise InvalidTransitionError(current.value, target.value)


__all__ = [
    "LifecycleEvent",
    "LIFECYCLE_EVENTS",
    "OperationStatus",
    "STATUS_TRANSITIONS",
    "validate_transition",
]
