"""
Structural contracts for managers and operations.

Collaborators that only need to *talk* to a manager or an operation (a
scheduler, a UI panel, a test recorder) should type against these
protocols instead of the abstract base classes.

Architecture:
    ::

        protocols.py
        ├── Subscribable       — the ten on_<event>/on_<event>_owned methods
        ├── ManagerProtocol    — allowed, operations, request, is_allowed,
        │                        is_processable, clean
        └── OperationProtocol  — manager, kind, status, result, request,
                                 is_idle / is_running / is_done / is_refused
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any, Protocol, runtime_checkable

from opmanager.core.events import Callback, Listener, OwnedCallback, OwnedListener
from opmanager.lifecycle.enums import OperationStatus


@runtime_checkable
class Subscribable(Protocol):
    """Anonymous and owner-bound subscription to the five lifecycle events."""

    def on_accept(self, callback: Callback, once: bool = False) -> Listener: ...

    def on_accept_owned(self, target: Any, callback: OwnedCallback, once: bool = False) -> OwnedListener: ...

    def on_refuse(self, callback: Callback, once: bool = False) -> Listener: ...

    def on_refuse_owned(self, target: Any, callback: OwnedCallback, once: bool = False) -> OwnedListener: ...

    def on_run(self, callback: Callback, once: bool = False) -> Listener: ...

    def on_run_owned(self, target: Any, callback: OwnedCallback, once: bool = False) -> OwnedListener: ...

    def on_done(self, callback: Callback, once: bool = False) -> Listener: ...

    def on_done_owned(self, target: Any, callback: OwnedCallback, once: bool = False) -> OwnedListener: ...

    def on_release(self, callback: Callback, once: bool = False) -> Listener: ...

    def on_release_owned(self, target: Any, callback: OwnedCallback, once: bool = False) -> OwnedListener: ...

    def off(self, target: Any) -> int: ...


@runtime_checkable
class ManagerProtocol(Subscribable, Protocol):
    """Admission authority and registry of active operations."""

    @property
    def allowed(self) -> list[Hashable]:
        """Copy of the permitted operation kinds."""
        ...

    @property
    def operations(self) -> list[OperationProtocol]:
        """Copy of the currently active operations."""
        ...

    def request(self, operation: OperationProtocol) -> None:
        """Run the admission procedure for *operation*."""
        ...

    def is_allowed(self, operation: OperationProtocol) -> bool:
        """Whether *operation* is bound to this manager and of an allowed kind."""
        ...

    def is_processable(self, operation: OperationProtocol) -> bool:
        """Whether admitting *operation* now is consistent with the active set."""
        ...

    def clean(self, target: Any) -> None:
        """Dispose every listener owned by *target* on the manager and its operations."""
        ...


@runtime_checkable
class OperationProtocol(Subscribable, Protocol):
    """A unit of work with an idle → running → done lifecycle."""

    kind: Hashable | None

    @property
    def manager(self) -> ManagerProtocol: ...

    @property
    def status(self) -> OperationStatus: ...

    @property
    def result(self) -> tuple[Any, ...] | None: ...

    @property
    def is_idle(self) -> bool: ...

    @property
    def is_running(self) -> bool: ...

    @property
    def is_done(self) -> bool: ...

    @property
    def is_refused(self) -> bool: ...

    def request(self) -> None:
        """Ask the bound manager to admit this operation."""
        ...


__all__ = ["Subscribable", "ManagerProtocol", "OperationProtocol"]
