"""Tests for driver location tracking and ETA refresh."""

from __future__ import annotations

from datetime import timedelta

import pytest

from dispatch.application.use_cases.locations import LocationTracker
from dispatch.domain.entities import (
    LOAD_EVENT_ETA,
    LOAD_EVENT_LOCATION,
    LoadStatus,
    LocationUpdate,
    UserRole,
)
from dispatch.infrastructure.notifications import load_topic
from dispatch.infrastructure.repositories import LoadRepository, LocationUpdateRepository
from dispatch.utils import now_in_app_timezone


def test_record_sample_publishes_for_loads(tracker, publisher, customer, driver, make_load) -> None:
    load = make_load(customer)

    sample = tracker.record_sample(driver.id, -33.92, 18.42, load_id=load.id, notes="N1")
    tracker.record_sample(driver.id, -33.93, 18.43)

    assert sample.id is not None
    assert sample.notes == "N1"
    [(event_type, event)] = publisher.for_topic(load_topic(load.id))
    assert event_type == LOAD_EVENT_LOCATION
    assert (event.driver_id, event.latitude, event.longitude) == (driver.id, -33.92, 18.42)
    assert len(publisher.events) == 1


def test_latest_sample_and_histories(session, tracker, customer, driver, make_load) -> None:
    load = make_load(customer)
    repository = LocationUpdateRepository(session)
    now = now_in_app_timezone()
    for minutes_ago, lat in [(30, 1.0), (20, 2.0), (10, 3.0)]:
        repository.create(
            LocationUpdate(
                id=None,
                driver_id=driver.id,
                latitude=lat,
                longitude=0.0,
                reported_at=now - timedelta(minutes=minutes_ago),
                load_id=load.id if lat != 1.0 else None,
            )
        )

    assert tracker.latest_sample(driver.id).latitude == 3.0
    assert [s.latitude for s in tracker.driver_history(driver.id)] == [1.0, 2.0, 3.0]
    recent = tracker.driver_history(driver.id, now - timedelta(minutes=25))
    assert [s.latitude for s in recent] == [2.0, 3.0]
    assert [s.latitude for s in tracker.load_history(load.id)] == [2.0, 3.0]


def test_estimate_minutes_without_samples_is_zero(tracker, driver, caplog) -> None:
    with caplog.at_level("WARNING"):
        assert tracker.estimate_minutes(driver.id, -33.93, 18.86) == 0
    assert "No location data" in caplog.text


def test_estimate_minutes_uses_configured_speed(tracker, driver) -> None:
    tracker.record_sample(driver.id, 0.0, 0.0)

    # One degree of latitude is roughly 111.19 km.
    assert tracker.estimate_minutes(driver.id, 1.0, 0.0) == 112
    assert tracker.estimate_minutes(driver.id, 1.0, 0.0, speed_kmh=120) == 56


def test_refresh_load_eta_failures(tracker, customer, driver, make_user, make_load) -> None:
    stranger = make_user(UserRole.DRIVER)
    no_coordinates = make_load(
        customer, status=LoadStatus.IN_TRANSIT, assigned_driver_id=driver.id
    )
    with_coordinates = make_load(
        customer,
        status=LoadStatus.IN_TRANSIT,
        assigned_driver_id=driver.id,
        dropoff_latitude=1.0,
        dropoff_longitude=0.0,
    )

    with pytest.raises(LookupError):
        tracker.refresh_load_eta(9999, driver.id)
    with pytest.raises(PermissionError):
        tracker.refresh_load_eta(with_coordinates.id, stranger.id)
    with pytest.raises(LookupError):
        tracker.refresh_load_eta(no_coordinates.id, driver.id)
    with pytest.raises(LookupError):
        tracker.refresh_load_eta(with_coordinates.id, driver.id)


def test_refresh_load_eta_stores_and_publishes(
    session, tracker, publisher, customer, driver, make_load
) -> None:
    load = make_load(
        customer,
        status=LoadStatus.IN_TRANSIT,
        assigned_driver_id=driver.id,
        estimated_minutes=30,
        dropoff_latitude=1.0,
        dropoff_longitude=0.0,
    )
    tracker.record_sample(driver.id, 0.0, 0.0)

    minutes = tracker.refresh_load_eta(load.id, driver.id)

    assert minutes == 112
    assert LoadRepository(session).get(load.id).estimated_minutes == 112
    [(event_type, event)] = publisher.for_topic(load_topic(load.id))
    assert event_type == LOAD_EVENT_ETA
    assert event.estimated_minutes == 112


def test_purge_stale_samples(session, tracker, driver) -> None:
    repository = LocationUpdateRepository(session)
    now = now_in_app_timezone()
    for days_ago in (45, 31, 2):
        repository.create(
            LocationUpdate(
                id=None,
                driver_id=driver.id,
                latitude=0.0,
                longitude=0.0,
                reported_at=now - timedelta(days=days_ago),
            )
        )

    assert tracker.purge_stale_samples() == 2
    assert len(tracker.driver_history(driver.id)) == 1
    assert tracker.purge_stale_samples(retention_days=1) == 1


def test_explicit_zero_speed_is_rejected(tracker, driver) -> None:
    tracker.record_sample(driver.id, 0.0, 0.0)

    with pytest.raises(ValueError, match="greater than zero"):
        tracker.estimate_minutes(driver.id, 1.0, 0.0, speed_kmh=0)


def test_explicit_zero_retention_is_rejected(tracker) -> None:
    with pytest.raises(ValueError, match="at least one day"):
        tracker.purge_stale_samples(retention_days=0)


def test_samples_survive_a_failing_publisher(
    session, settings, failing_publisher, customer, driver, make_load, caplog
) -> None:
    load = make_load(customer)
    tracker = LocationTracker(session, failing_publisher, settings)

    with caplog.at_level("WARNING"):
        sample = tracker.record_sample(driver.id, 1.0, 2.0, load_id=load.id)

    assert failing_publisher.attempts == 1
    assert [s.id for s in tracker.load_history(load.id)] == [sample.id]
    assert "Could not publish load.location" in caplog.text
