"""Synchronous event substrate shared by managers and operations.

Why This Package Exists
-----------------------
Managers and operations talk to each other (and to the outside world) only
through events. The coordinator needs a small, *synchronous* publish/subscribe
primitive with three properties the lifecycle depends on:

- listeners fire in registration order, on the caller's stack;
- dispatch works on a snapshot, so a listener may register or dispose other
  listeners (or re-enter the emitter) without corrupting the dispatch;
- listeners can be bound to an *owner* and disposed together by owner, so an
  object being torn down can drop every callback it registered in one call.

Owner-bound listeners hold their owner by weak reference when the owner
allows it, and dispose themselves once the owner is garbage collected. When
the callback is given as a method *name*, nothing but the weak reference
points back to the owner.

Usage::

    from opmanager.core.events import EventEmitter

    class Door(EventEmitter):
        def __init__(self):
            super().__init__(["open", "close"])

        def open(self):
            self._trigger("open", "front")

    door = Door()
    door.on("open", lambda side: print(f"{side} door opened"))
    door.on_owned("close", panel, "refresh")   # calls panel.refresh()
    door.off(panel)                            # drops panel's listeners
"""

from __future__ import annotations

import weakref
from collections.abc import Callable, Hashable, Iterable
from typing import Any

from opmanager.core.errors import UnknownEventError

__all__ = [
    "Callback",
    "OwnedCallback",
    "Listener",
    "OwnedListener",
    "EventEmitter",
]

Callback = Callable[..., Any]
"""Plain listener callback, invoked with the event arguments."""

OwnedCallback = Callable[..., Any] | str
"""Owner-bound callback: a callable, or the name of a method on the owner."""


class Listener:
    """One registration of a callback for one event on one emitter."""

    def __init__(
        self,
        emitter: EventEmitter,
        event: Hashable,
        callback: Callback,
        once: bool = False,
    ) -> None:
        self.event = event
        self.once = once
        self._emitter: EventEmitter | None = emitter
        self._callback = callback

    @property
    def disposed(self) -> bool:
        return self._emitter is None

    def dispose(self) -> None:
        """Unregister this listener. Safe to call more than once."""
        emitter, self._emitter = self._emitter, None
        if emitter is not None:
            emitter._discard(self)

    def _notify(self, args: tuple[Any, ...]) -> None:
        if self.once:
            self.dispose()
        self._callback(*args)

    def __repr__(self) -> str:
        state = "disposed" if self.disposed else "active"
        return f"{type(self).__name__}(event={self.event!r}, once={self.once}, {state})"


class OwnedListener(Listener):
    """A listener bound to an owner (``target``) for bulk disposal.

    The callback may be a callable or the name of a method on the target,
    looked up on every dispatch.
    """

    def __init__(
        self,
        emitter: EventEmitter,
        event: Hashable,
        target: Any,
        callback: OwnedCallback,
        once: bool = False,
    ) -> None:
        if isinstance(callback, str):
            if not callable(getattr(target, callback, None)):
                raise TypeError(f"{type(target).__name__} has no method named {callback!r}")
        elif not callable(callback):
            raise TypeError("callback must be callable or the name of a method on the target")
        super().__init__(emitter, event, callback, once)  # type: ignore[arg-type]
        try:
            self._target_ref = weakref.ref(target, self._on_target_collected)
        except TypeError:
            # str, int, dict and friends cannot be weakly referenced
            self._target_ref = lambda: target

    @property
    def target(self) -> Any:
        """The owner, or ``None`` once it has been garbage collected."""
        return self._target_ref()

    def _on_target_collected(self, _ref: weakref.ref) -> None:
        self.dispose()

    def _notify(self, args: tuple[Any, ...]) -> None:
        target = self.target
        if target is None:
            self.dispose()
            return
        if self.once:
            self.dispose()
        callback = self._callback
        if isinstance(callback, str):
            callback = getattr(target, callback)
        callback(*args)


class EventEmitter:
    """Base class for objects that expose a fixed vocabulary of events.

    Subclasses declare their events at construction and fire them with the
    protected :meth:`_trigger`; everything else may only subscribe.
    """

    def __init__(self, events: Iterable[Hashable]) -> None:
        self._listeners: dict[Hashable, list[Listener]] = {event: [] for event in events}

    @property
    def events(self) -> tuple[Hashable, ...]:
        """Events this emitter declares, in declaration order."""
        return tuple(self._listeners)

    def on(self, event: Hashable, callback: Callback, once: bool = False) -> Listener:
        """Register *callback* for *event*.

        Args:
            event: A declared event
            callback: Invoked with the event arguments
            once: Dispose the listener after its first call

        Returns:
            The listener, whose ``dispose()`` unregisters it
        """
        if not callable(callback):
            raise TypeError("callback must be callable")
        listener = Listener(self, event, callback, once)
        self._listeners_for(event).append(listener)
        return listener

    def on_owned(
        self,
        event: Hashable,
        target: Any,
        callback: OwnedCallback,
        once: bool = False,
    ) -> OwnedListener:
        """Register *callback* for *event* on behalf of *target*.

        All listeners registered for the same target can later be dropped
        with :meth:`off`.
        """
        listener = OwnedListener(self, event, target, callback, once)
        self._listeners_for(event).append(listener)
        return listener

    def off(self, target: Any) -> int:
        """Dispose every owned listener bound to *target*.

        Returns:
            Number of listeners disposed
        """
        owned = [
            listener
            for listeners in self._listeners.values()
            for listener in listeners
            if isinstance(listener, OwnedListener) and listener.target is target
        ]
        for listener in owned:
            listener.dispose()
        return len(owned)

    def listener_count(self, event: Hashable | None = None) -> int:
        """Number of live listeners, for one event or across all of them."""
        if event is not None:
            return len(self._listeners_for(event))
        return sum(len(listeners) for listeners in self._listeners.values())

    def _trigger(self, event: Hashable, *args: Any) -> None:
        """Synchronously call every listener of *event* with *args*.

        Iterates a snapshot taken at entry: listeners added during dispatch
        wait for the next emission, listeners disposed during dispatch are
        skipped.
        """
        for listener in tuple(self._listeners_for(event)):
            if listener.disposed:
                continue
            listener._notify(args)

    def _listeners_for(self, event: Hashable) -> list[Listener]:
        try:
            return self._listeners[event]
        except KeyError:
            raise UnknownEventError(event, type(self).__name__) from None
        except TypeError:
            raise UnknownEventError(event, type(self).__name__) from None

    def _discard(self, listener: Listener) -> None:
        listeners = self._listeners.get(listener.event)
        if listeners is not None and listener in listeners:
            listeners.remove(listener)
