"""Ready-made admission policies.

These cover the common rules a coordinator is used for; anything more
specific subclasses :class:`AbstractManager` directly.

- ``PermissiveManager`` — every allowed operation is processable
- ``SerialManager``     — at most one active operation
- ``ExclusiveManager``  — while an exclusive-kind operation is active nothing
                          else is processable, and an exclusive-kind operation
                          only starts on an empty active set
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable
from typing import TYPE_CHECKING

from opmanager.core.errors import ConfigError
from opmanager.lifecycle.manager import AbstractManager

if TYPE_CHECKING:
    from opmanager.lifecycle.operation import AbstractOperation


class PermissiveManager(AbstractManager):
    """Admits every operation of an allowed kind."""

    def is_processable(self, operation: AbstractOperation) -> bool:
        return True


class SerialManager(AbstractManager):
    """Runs one operation at a time."""

    def is_processable(self, operation: AbstractOperation) -> bool:
        return not self._operations


class ExclusiveManager(AbstractManager):
    """Treats some kinds as exclusive: they never share the active set.

    Example:
        >>> manager = ExclusiveManager(["read", "write"], exclusive=["write"])
        >>> manager.exclusive
        ['write']
    """

    def __init__(self, allowed: Iterable[Hashable], exclusive: Iterable[Hashable]) -> None:
        super().__init__(allowed)
        kinds = tuple(dict.fromkeys(exclusive))
        unknown = [kind for kind in kinds if kind not in self._allowed_lookup]
        if unknown:
            raise ConfigError(f"Exclusive kinds must also be allowed: {unknown!r}")
        self._exclusive: frozenset[Hashable] = frozenset(kinds)
        self._exclusive_order: tuple[Hashable, ...] = kinds

    @property
    def exclusive(self) -> list[Hashable]:
        return list(self._exclusive_order)

    def is_processable(self, operation: AbstractOperation) -> bool:
        if any(active.kind in self._exclusive for active in self._operations):
            return False
        if operation.kind in self._exclusive:
            return not self._operations
        return True


__all__ = ["PermissiveManager", "SerialManager", "ExclusiveManager"]
