"""
Tests for run event fan-out.
"""

import logging

from buildcrew.memory.events import EventHub
from buildcrew.models import RunEvent, RunState


def run_event(state=RunState.running):
    return RunEvent(kind="run", run_id="run-1", state=state)


class TestEventHub:
    """Test subscribe / publish."""

    def test_publish_in_registration_order(self):
        """Listeners are called in the order they subscribed."""
        hub = EventHub()
        calls = []
        hub.subscribe(lambda e: calls.append(("first", e.state)))
        hub.subscribe(lambda e: calls.append(("second", e.state)))

        hub.publish(run_event())

        assert calls == [("first", RunState.running), ("second", RunState.running)]

    def test_unsubscribe_is_idempotent(self):
        """Unsubscribing twice is harmless."""
        hub = EventHub()
        received = []
        unsubscribe = hub.subscribe(received.append)

        unsubscribe()
        unsubscribe()
        hub.publish(run_event())

        assert received == []
        assert hub.listener_count == 0

    def test_listener_error_logged_and_isolated(self, caplog):
        """A failing listener does not stop delivery to the others."""
        hub = EventHub()
        received = []

        def broken(event):
            raise RuntimeError("boom")

        hub.subscribe(broken)
        hub.subscribe(received.append)

        with caplog.at_level(logging.ERROR, logger="buildcrew.memory.events"):
            hub.publish(run_event(RunState.failed))

        assert [e.state for e in received] == [RunState.failed]
        assert "failed on run event" in caplog.text

    def test_listener_may_unsubscribe_during_publish(self):
        """Delivery iterates over a copy of the listener list."""
        hub = EventHub()
        received = []
        holder = {}

        def once(event):
            received.append(event)
            holder["unsubscribe"]()

        holder["unsubscribe"] = hub.subscribe(once)
        hub.publish(run_event())
        hub.publish(run_event())

        assert len(received) == 1
