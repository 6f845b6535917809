import pytest

from launch_curve.common.enums import EventType
from launch_curve.common.events import (
    EventBus,
    GraduationCompleted,
    PriceUpdated,
    PurchaseCompleted,
    SaleCompleted,
)


def test_event_types_are_fixed():
    assert PurchaseCompleted().event_type == EventType.PURCHASE_COMPLETED
    assert SaleCompleted().event_type == EventType.SALE_COMPLETED
    assert PriceUpdated().event_type == EventType.PRICE_UPDATED
    assert GraduationCompleted().event_type == EventType.GRADUATION_COMPLETED


def test_events_are_immutable():
    event = PurchaseCompleted(buyer="alice", asset_amount=1, reserve_amount=1)
    with pytest.raises(Exception):
        event.asset_amount = 2


def test_publish_dispatches_by_type():
    bus = EventBus()
    purchases, prices = [], []
    bus.subscribe(EventType.PURCHASE_COMPLETED, purchases.append)
    bus.subscribe(EventType.PRICE_UPDATED, prices.append)

    bus.publish(PurchaseCompleted(buyer="alice", asset_amount=10, reserve_amount=10))

    assert len(purchases) == 1
    assert prices == []
    assert bus.events_of(EventType.PURCHASE_COMPLETED) == purchases


def test_unsubscribe():
    bus = EventBus()
    received = []
    bus.subscribe(EventType.PRICE_UPDATED, received.append)
    bus.unsubscribe(EventType.PRICE_UPDATED, received.append)
    bus.publish(PriceUpdated(price=1))
    assert received == []
    assert len(bus.history) == 1


def test_failing_handler_does_not_stop_others():
    bus = EventBus()
    received = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(EventType.PRICE_UPDATED, broken)
    bus.subscribe(EventType.PRICE_UPDATED, received.append)
    bus.publish(PriceUpdated(price=5))

    assert len(received) == 1
    assert bus.error_count == 1
