"""Tests for persisted notifications and their realtime fan-out."""

from __future__ import annotations

from dispatch.application.use_cases.notifications import (
    NOTIFICATION_EVENT_TYPE,
    NotificationDispatcher,
    notify_load_cancelled,
    notify_load_posted,
)
from dispatch.domain.entities import (
    LOAD_EVENT_STATUS,
    NOTIFICATION_CATEGORY_LOAD_POSTED,
    NOTIFICATION_CATEGORY_WARNING,
    LoadStatus,
    UserRole,
)
from dispatch.infrastructure.notifications import load_topic, user_topic


def test_notify_persists_and_publishes(dispatcher, publisher, customer) -> None:
    notification = dispatcher.notify(
        customer.id, "Hello", "First message", "Success", "/loads/1", load_id=None
    )

    assert notification.id is not None
    assert notification.is_read is False
    [(event_type, payload)] = publisher.for_topic(user_topic(customer.id))
    assert event_type == NOTIFICATION_EVENT_TYPE
    assert payload["id"] == notification.id
    assert payload["title"] == "Hello"
    assert payload["action_url"] == "/loads/1"
    assert isinstance(payload["created_at"], str)


def test_queries_and_read_state(dispatcher, customer, make_user) -> None:
    other = make_user(UserRole.CUSTOMER)
    first = dispatcher.notify(customer.id, "One", "m1")
    second = dispatcher.notify(customer.id, "Two", "m2")
    dispatcher.notify(customer.id, "Three", "m3")
    foreign = dispatcher.notify(other.id, "Other", "m4")

    assert [n.title for n in dispatcher.list_for_user(customer.id, limit=2)] == ["Three", "Two"]
    assert dispatcher.unread_count(customer.id) == 3

    assert dispatcher.mark_as_read(first.id, user_id=customer.id) is True
    assert dispatcher.mark_as_read(first.id, user_id=customer.id) is True
    assert dispatcher.mark_as_read(foreign.id, user_id=customer.id) is False
    assert dispatcher.mark_as_read(9999, user_id=customer.id) is False
    assert dispatcher.unread_count(customer.id) == 2
    assert dispatcher.unread_count(other.id) == 1

    assert dispatcher.mark_many_as_read([second.id, foreign.id], user_id=customer.id) == 1
    assert [n.title for n in dispatcher.list_unread(customer.id)] == ["Three"]
    assert dispatcher.mark_all_as_read(customer.id) == 1
    assert dispatcher.mark_all_as_read(customer.id) == 0


def test_broadcast_does_not_persist(dispatcher, publisher, customer) -> None:
    dispatcher.broadcast("load:7", "load.status", {"status": "Accepted"})

    assert publisher.events == [("load:7", "load.status", {"status": "Accepted"})]
    assert dispatcher.unread_count(customer.id) == 0


def test_load_posted_reaches_each_driver(dispatcher, customer, make_user, make_load) -> None:
    drivers = [make_user(UserRole.DRIVER), make_user(UserRole.DRIVER)]
    load = make_load(customer, title="Steel beams")

    sent = notify_load_posted(dispatcher, load=load, driver_ids=[d.id for d in drivers])

    assert sent == 2
    for driver in drivers:
        [notification] = dispatcher.list_for_user(driver.id)
        assert notification.title == "New Load Available"
        assert notification.category == NOTIFICATION_CATEGORY_LOAD_POSTED
        assert notification.action_url == f"/loads/{load.id}"
        assert notification.load_id == load.id
        assert "Steel beams" in notification.message


def test_cancellation_before_acceptance_only_broadcasts(
    dispatcher, publisher, customer, make_load
) -> None:
    load = make_load(customer)

    notify_load_cancelled(dispatcher, load=load, cancelled_by=customer.id, reason="No longer needed")

    assert dispatcher.unread_count(customer.id) == 0
    [(event_type, event)] = publisher.for_topic(load_topic(load.id))
    assert event_type == LOAD_EVENT_STATUS
    assert event.status == LoadStatus.CANCELLED.value
    assert event.message == "Load cancelled: No longer needed"


def test_cancellation_by_driver_warns_customer(dispatcher, customer, driver, make_load) -> None:
    load = make_load(customer, status=LoadStatus.ACCEPTED, assigned_driver_id=driver.id)

    notify_load_cancelled(dispatcher, load=load, cancelled_by=driver.id, reason="Breakdown")

    [notification] = dispatcher.list_for_user(customer.id)
    assert notification.category == NOTIFICATION_CATEGORY_WARNING
    assert notification.message == "Driver cancelled the load. Reason: Breakdown"
    assert dispatcher.list_for_user(driver.id) == []


def test_notify_keeps_the_record_when_publishing_fails(
    session, failing_publisher, customer, caplog
) -> None:
    dispatcher = NotificationDispatcher(session, failing_publisher)

    notification = dispatcher.notify(customer.id, "Hello", "Stored anyway")
    dispatcher.broadcast(load_topic(1), LOAD_EVENT_STATUS, {"load_id": 1})

    assert notification.id is not None
    assert [n.message for n in dispatcher.list_unread(customer.id)] == ["Stored anyway"]
    assert failing_publisher.attempts == 2
    assert "Could not publish" in caplog.text
