"""EventEmitter that exposes the five lifecycle events as named subscriptions.

Each event gets two entry points: ``on_<event>(callback, once=False)`` for
an anonymous listener and ``on_<event>_owned(target, callback, once=False)``
for a listener that ``off(target)`` / ``clean(target)`` can drop later.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable
from typing import Any

from opmanager.core.events import Callback, EventEmitter, Listener, OwnedCallback, OwnedListener
from opmanager.lifecycle.enums import LIFECYCLE_EVENTS, LifecycleEvent


class LifecycleEmitter(EventEmitter):
    """Base for managers and operations."""

    def __init__(self, events: Iterable[Hashable] = ()) -> None:
        extra = [event for event in events if event not in LIFECYCLE_EVENTS]
        super().__init__([*LIFECYCLE_EVENTS, *extra])

    def on_accept(self, callback: Callback, once: bool = False) -> Listener:
        return self.on(LifecycleEvent.ACCEPT, callback, once)

    def on_accept_owned(self, target: Any, callback: OwnedCallback, once: bool = False) -> OwnedListener:
        return self.on_owned(LifecycleEvent.ACCEPT, target, callback, once)

    def on_refuse(self, callback: Callback, once: bool = False) -> Listener:
        return self.on(LifecycleEvent.REFUSE, callback, once)

    def on_refuse_owned(self, target: Any, callback: OwnedCallback, once: bool = False) -> OwnedListener:
        return self.on_owned(LifecycleEvent.REFUSE, target, callback, once)

    def on_run(self, callback: Callback, once: bool = False) -> Listener:
        return self.on(LifecycleEvent.RUN, callback, once)

    def on_run_owned(self, target: Any, callback: OwnedCallback, once: bool = False) -> OwnedListener:
        return self.on_owned(LifecycleEvent.RUN, target, callback, once)

    def on_done(self, callback: Callback, once: bool = False) -> Listener:
        return self.on(LifecycleEvent.DONE, callback, once)

    def on_done_owned(self, target: Any, callback: OwnedCallback, once: bool = False) -> OwnedListener:
        return self.on_owned(LifecycleEvent.DONE, target, callback, once)

    def on_release(self, callback: Callback, once: bool = False) -> Listener:
        return self.on(LifecycleEvent.RELEASE, callback, once)

    def on_release_owned(self, target: Any, callback: OwnedCallback, once: bool = False) -> OwnedListener:
        return self.on_owned(LifecycleEvent.RELEASE, target, callback, once)


__all__ = ["LifecycleEmitter"]
