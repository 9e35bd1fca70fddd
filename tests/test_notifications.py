"""Degraded-assessment event log."""

from __future__ import annotations

from harvest_guard.services.notifications import DegradedEventLog


def test_newest_first_and_capped():
    log = DegradedEventLog(max_items=2)
    log.record("a", "Dhaka", "timed out after 10.0s")
    log.record("b", "Khulna", "station offline")
    log.record("c", "Sylhet", "location not found")

    assert [event.batch_id for event in log.recent()] == ["c", "b"]
    assert len(log) == 2


def test_filter_by_location_and_limit():
    log = DegradedEventLog(max_items=10)
    for batch_id in ("a", "b", "c"):
        log.record(batch_id, "Barisal", "station offline")
    log.record("d", "Dhaka", "station offline")

    assert [event.batch_id for event in log.recent(2, location="Barisal")] == ["c", "b"]
    assert log.recent(location="Rajshahi") == []
    assert log.affected_locations() == ["Barisal", "Dhaka"]


def test_event_fields():
    event = DegradedEventLog(max_items=5).record(None, "Rangpur", "malformed response")

    assert event.batch_id is None
    assert event.occurred_at.tzinfo is not None
