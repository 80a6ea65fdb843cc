from __future__ import annotations

import logging

from offline_queue.application.dto.events import StatusUpdate
from offline_queue.domain.value_objects.enums import DeliveryStatus
from offline_queue.services.notifier import EventNotifier


def test_callbacks_run_in_subscription_order():
    notifier = EventNotifier()
    calls: list[str] = []
    notifier.subscribe_queue_changed(lambda: calls.append("first"))
    notifier.subscribe_queue_changed(lambda: calls.append("second"))

    notifier.publish_queue_changed()

    assert calls == ["first", "second"]


def test_registries_are_independent():
    notifier = EventNotifier()
    changed: list[None] = []
    statuses: list[StatusUpdate] = []
    notifier.subscribe_queue_changed(lambda: changed.append(None))
    notifier.subscribe_status(statuses.append)

    update = StatusUpdate("req-1", DeliveryStatus.SENT)
    notifier.publish_status(update)

    assert changed == []
    assert statuses == [update]


def test_raising_callback_does_not_block_others(caplog):
    notifier = EventNotifier()
    received: list[StatusUpdate] = []

    def boom(_update: StatusUpdate) -> None:
        raise RuntimeError("listener bug")

    notifier.subscribe_status(boom)
    notifier.subscribe_status(received.append)

    with caplog.at_level(logging.ERROR):
        notifier.publish_status(StatusUpdate("req-1", DeliveryStatus.FAILED, attempt_count=3))

    assert len(received) == 1
    assert "Status listener" in caplog.text


def test_unsubscribe_during_publish_keeps_iteration_intact():
    notifier = EventNotifier()
    calls: list[str] = []
    handles = {}

    def first() -> None:
        calls.append("first")
        handles["second"]()

    def second() -> None:
        calls.append("second")

    handles["first"] = notifier.subscribe_queue_changed(first)
    handles["second"] = notifier.subscribe_queue_changed(second)

    notifier.publish_queue_changed()
    notifier.publish_queue_changed()

    # the snapshot taken for the first publish still includes "second"
    assert calls == ["first", "second", "first"]


def test_unsubscribe_is_idempotent():
    notifier = EventNotifier()
    unsubscribe = notifier.subscribe_queue_changed(lambda: None)

    unsubscribe()
    unsubscribe()

    assert notifier.listener_count == 0


def test_late_subscriber_misses_earlier_events():
    notifier = EventNotifier()
    notifier.publish_status(StatusUpdate("req-1", DeliveryStatus.SENT))
    received: list[StatusUpdate] = []

    notifier.subscribe_status(received.append)

    assert received == []


def test_same_callback_registered_twice_gets_separate_handles():
    notifier = EventNotifier()
    calls: list[int] = []

    def callback() -> None:
        calls.append(1)

    first = notifier.subscribe_queue_changed(callback)
    notifier.subscribe_queue_changed(callback)
    first()
    notifier.publish_queue_changed()

    assert calls == [1]


def test_status_update_payload_shape():
    assert StatusUpdate("a", DeliveryStatus.SENT).to_dict() == {"queueId": "a", "status": "sent"}
    assert StatusUpdate("b", DeliveryStatus.FAILED, attempt_count=3).to_dict() == {
        "queueId": "b",
        "status": "failed",
        "attemptCount": 3,
    }


def test_clear_drops_all_subscriptions():
    notifier = EventNotifier()
    notifier.subscribe_queue_changed(lambda: None)
    notifier.subscribe_status(lambda _u: None)

    notifier.clear()

    assert notifier.listener_count == 0
