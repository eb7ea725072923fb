"""
Event bus tests.
"""

import json

from plotnft.events import (
    AuthorityConfigured,
    Event,
    EventBus,
    MintFeeChanged,
    PlotBurned,
    PlotMinted,
    get_event_bus,
)


class TestEvent:

    def test_event_type_and_dict(self):
        event = PlotMinted(token_id=3, owner="ST1")
        data = event.to_dict()
        assert data["event_type"] == "PlotMinted"
        assert data["token_id"] == 3
        assert json.loads(event.to_json())["owner"] == "ST1"

    def test_digest_is_stable(self):
        event = PlotBurned(token_id=1, owner="ST1")
        assert event.digest() == event.digest()
        assert len(event.digest()) == 64

    def test_distinct_ids(self):
        assert PlotBurned().event_id != PlotBurned().event_id


class TestEventBus:

    def test_typed_subscription(self):
        bus = EventBus()
        minted = []

        @bus.subscribe(PlotMinted)
        def on_mint(event):
            minted.append(event.token_id)

        bus.publish(PlotMinted(token_id=1))
        bus.publish(PlotBurned(token_id=1))
        assert minted == [1]

    def test_catch_all_and_priority(self):
        bus = EventBus()
        order = []

        @bus.subscribe(priority=1)
        def low(event):
            order.append("low")

        @bus.subscribe(Event, priority=10)
        def high(event):
            order.append("high")

        bus.publish(AuthorityConfigured(authority="ST2"))
        assert order == ["high", "low"]

    def test_filter(self):
        bus = EventBus()
        seen = []
        bus.subscribe(MintFeeChanged, filter_func=lambda e: e.new_fee > 100)(seen.append)
        bus.publish(MintFeeChanged(old_fee=0, new_fee=50))
        bus.publish(MintFeeChanged(old_fee=50, new_fee=500))
        assert [e.new_fee for e in seen] == [500]

    def test_unsubscribe(self):
        bus = EventBus()
        seen = []
        handler = bus.subscribe(PlotMinted)(seen.append)
        assert bus.unsubscribe(handler) is True
        assert bus.unsubscribe(handler) is False
        bus.publish(PlotMinted())
        assert seen == []

    def test_errors_are_reported_not_raised(self):
        errors = []
        bus = EventBus(on_error=errors.append)
        after = []

        @bus.subscribe(PlotMinted, priority=5)
        def broken(event):
            raise ValueError("boom")

        @bus.subscribe(PlotMinted)
        def fine(event):
            after.append(event)

        bus.publish(PlotMinted(token_id=1))
        assert len(after) == 1
        assert len(errors) == 1
        assert isinstance(errors[0].cause, ValueError)
        assert bus.metrics == {
            "published_count": 1,
            "handled_count": 1,
            "error_count": 1,
            "handler_count": 2,
        }

    def test_default_bus_is_shared(self):
        assert get_event_bus() is get_event_bus()
