"""
Test support utilities for op-manager tests.

Operation doubles shared by the lifecycle tests, plus helpers that don't fit
as pytest fixtures.

    AOperation  kind "a"  completes immediately with RESULT
    BOperation  kind "b"  never completes
    COperation  kind "c"  completes when ``done(*result)`` is called
    DOperation  kind "d"  never completes; not in ALLOWED
"""

from __future__ import annotations

from typing import Any

from opmanager.lifecycle import AbstractManager, AbstractOperation

ALLOWED = ("a", "b", "c")


class Manager(AbstractManager):
    def is_processable(self, operation: AbstractOperation) -> bool:
        return True


class AOperation(AbstractOperation):
    kind = "a"
    RESULT = ("result1", "result2", "result3")

    def _process(self, done):
        done(*AOperation.RESULT)


class BOperation(AbstractOperation):
    kind = "b"

    def _process(self, done):
        # This operation will never end.
        pass


class COperation(AbstractOperation):
    kind = "c"

    def __init__(self, manager, events=()):
        super().__init__(manager, events)
        self.done = None

    def _process(self, done):
        # Ends when the test calls self.done().
        self.done = done


class DOperation(AbstractOperation):
    kind = "d"

    def _process(self, done):
        pass


class Calls:
    """Minimal call recorder, usable as a plain or owner-bound callback."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    def __call__(self, *args: Any) -> None:
        self.calls.append(args)

    def __len__(self) -> int:
        return len(self.calls)


class Owner:
    """An owner object for owner-bound listeners; methods count their calls."""

    def __init__(self) -> None:
        self.received: dict[str, list[tuple[Any, ...]]] = {}

    def __getattr__(self, name: str):
        if not name.startswith("on_"):
            raise AttributeError(name)

        def handler(*args: Any) -> None:
            self.received.setdefault(name, []).append(args)

        return handler

    def count(self, name: str) -> int:
        return len(self.received.get(name, []))

