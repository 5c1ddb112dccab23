"""
Tests for the synchronous event substrate.

Tests verify:
- Listeners fire in registration order, synchronously
- Dispatch iterates a snapshot (add / dispose during dispatch)
- once listeners are disposed before they are invoked
- Owner-bound listeners: off(target), method names, weak owners
- Undeclared events are contract violations
"""

import gc

import pytest

from opmanager.core.errors import ContractViolationError, UnknownEventError
from opmanager.core.events import EventEmitter, Listener, OwnedListener
from tests._support import Calls, Owner


class Door(EventEmitter):
    def __init__(self):
        super().__init__(["open", "close"])

    def open(self, *args):
        self._trigger("open", *args)

    def close(self, *args):
        self._trigger("close", *args)


class Plain:
    """Owner with a real method (no __getattr__ magic)."""

    def __init__(self):
        self.calls = []

    def refresh(self, *args):
        self.calls.append(args)


@pytest.fixture
def door():
    return Door()


class TestDeclaration:
    def test_events_in_declaration_order(self, door):
        assert door.events == ("open", "close")

    def test_subscribing_to_unknown_event_raises(self, door):
        with pytest.raises(UnknownEventError) as exc_info:
            door.on("slam", Calls())
        assert isinstance(exc_info.value, ContractViolationError)
        assert "slam" in str(exc_info.value)

    def test_triggering_unknown_event_raises(self, door):
        with pytest.raises(UnknownEventError):
            door._trigger("slam")

    def test_unhashable_event_is_unknown(self, door):
        with pytest.raises(UnknownEventError):
            door.on(["open"], Calls())

    def test_listener_count_of_unknown_event_raises(self, door):
        with pytest.raises(UnknownEventError):
            door.listener_count("slam")

    def test_non_callable_callback_rejected(self, door):
        with pytest.raises(TypeError):
            door.on("open", "not callable")


class TestDispatch:
    def test_arguments_are_passed_through(self, door):
        calls = Calls()
        door.on("open", calls)
        door.open("front", 2)
        assert calls.calls == [("front", 2)]

    def test_registration_order(self, door):
        order = []
        door.on("open", lambda: order.append(1))
        door.on("open", lambda: order.append(2))
        door.on("open", lambda: order.append(3))
        door.open()
        assert order == [1, 2, 3]

    def test_events_are_independent(self, door):
        opened, closed = Calls(), Calls()
        door.on("open", opened)
        door.on("close", closed)
        door.open()
        assert len(opened) == 1
        assert len(closed) == 0

    def test_no_listeners_is_fine(self, door):
        door.open("front")

    def test_listener_added_during_dispatch_waits_for_next_emission(self, door):
        late = Calls()
        door.on("open", lambda: door.on("open", late), once=True)
        door.open()
        assert len(late) == 0
        door.open()
        assert len(late) == 1

    def test_listener_disposed_during_dispatch_is_skipped(self, door):
        second = Calls()
        holder = {}
        door.on("open", lambda: holder["second"].dispose())
        holder["second"] = door.on("open", second)
        door.open()
        assert len(second) == 0

    def test_reentrant_trigger(self, door):
        order = []

        def on_open(depth):
            order.append(depth)
            if depth < 2:
                door.open(depth + 1)

        door.on("open", on_open)
        door.open(0)
        assert order == [0, 1, 2]

    def test_listener_exception_propagates_to_trigger(self, door):
        after = Calls()

        def boom():
            raise ValueError("boom")

        door.on("open", boom)
        door.on("open", after)
        with pytest.raises(ValueError, match="boom"):
            door.open()
        assert len(after) == 0


class TestListener:
    def test_on_returns_listener(self, door):
        listener = door.on("open", Calls())
        assert isinstance(listener, Listener)
        assert listener.event == "open"
        assert listener.once is False
        assert listener.disposed is False

    def test_dispose_unregisters(self, door):
        calls = Calls()
        listener = door.on("open", calls)
        listener.dispose()
        door.open()
        assert listener.disposed
        assert len(calls) == 0
        assert door.listener_count("open") == 0

    def test_dispose_is_idempotent(self, door):
        listener = door.on("open", Calls())
        listener.dispose()
        listener.dispose()
        assert door.listener_count() == 0

    def test_once_fires_a_single_time(self, door):
        calls = Calls()
        door.on("open", calls, once=True)
        door.open()
        door.open()
        assert len(calls) == 1
        assert door.listener_count("open") == 0

    def test_once_is_disposed_before_invocation(self, door):
        seen = []
        holder = {}

        def callback():
            seen.append(holder["listener"].disposed)
            door.open()  # re-entrant emission must not call us again

        holder["listener"] = door.on("open", callback, once=True)
        door.open()
        assert seen == [True]

    def test_listener_count(self, door):
        door.on("open", Calls())
        door.on("open", Calls())
        door.on("close", Calls())
        assert door.listener_count("open") == 2
        assert door.listener_count() == 3


class TestOwnedListener:
    def test_method_name_is_resolved_on_target(self, door):
        owner = Plain()
        listener = door.on_owned("open", owner, "refresh")
        door.open("front")
        assert isinstance(listener, OwnedListener)
        assert listener.target is owner
        assert owner.calls == [("front",)]

    def test_method_name_is_looked_up_at_dispatch(self, door):
        owner = Plain()
        door.on_owned("open", owner, "refresh")
        replaced = Calls()
        owner.refresh = replaced
        door.open()
        assert len(replaced) == 1
        assert owner.calls == []

    def test_unknown_method_name_rejected(self, door):
        with pytest.raises(TypeError, match="no method named"):
            door.on_owned("open", Plain(), "missing")

    def test_non_callable_rejected(self, door):
        with pytest.raises(TypeError):
            door.on_owned("open", Plain(), 42)

    def test_off_disposes_only_the_target(self, door):
        target, other = Owner(), Owner()
        door.on_owned("open", target, "on_open")
        door.on_owned("close", target, "on_close")
        door.on_owned("open", other, "on_open")
        plain = Calls()
        door.on("open", plain)

        assert door.off(target) == 2
        door.open()
        door.close()

        assert target.count("on_open") == 0
        assert target.count("on_close") == 0
        assert other.count("on_open") == 1
        assert len(plain) == 1

    def test_off_matches_by_identity(self, door):
        first, second = [], []
        door.on_owned("open", first, first.append)
        door.on_owned("open", second, second.append)
        assert first == second
        door.off(first)
        door.open("x")
        assert first == []
        assert second == ["x"]

    def test_off_without_listeners_returns_zero(self, door):
        assert door.off(Owner()) == 0

    def test_off_during_dispatch_skips_remaining_owned(self, door):
        target = Owner()
        door.on("open", lambda: door.off(target))
        door.on_owned("open", target, "on_open")
        door.open()
        assert target.count("on_open") == 0

    def test_once_owned(self, door):
        owner = Owner()
        door.on_owned("open", owner, "on_open", once=True)
        door.open()
        door.open()
        assert owner.count("on_open") == 1

    def test_collected_owner_disposes_listener(self, door):
        owner = Plain()
        listener = door.on_owned("open", owner, "refresh")
        del owner
        gc.collect()
        assert listener.target is None
        assert listener.disposed
        assert door.listener_count("open") == 0

    def test_bound_method_callback_keeps_owner_alive(self, door):
        owner = Plain()
        door.on_owned("open", owner, owner.refresh)
        calls = owner.calls
        del owner
        gc.collect()
        door.open("still here")
        assert calls == [("still here",)]

    def test_non_weakrefable_target_is_held_strongly(self, door):
        calls = Calls()
        listener = door.on_owned("open", "owner-key", calls)
        gc.collect()
        door.open()
        assert listener.target == "owner-key"
        assert len(calls) == 1
        assert door.off("owner-key") == 1
