"""Tests for the daily quota tracker."""

import json
from datetime import date
from unittest.mock import Mock

import pytest

from proheadshot.core.quota_store import InMemoryQuotaStore
from proheadshot.core.rate_limit import QuotaTracker, today_key
from tests.conftest import TODAY, TOMORROW


def test_today_key_matches_date_string_format():
    assert today_key(date(2026, 10, 19)) == "Mon Oct 19 2026"


def test_fresh_device_may_generate(tracker):
    assert tracker.may_generate(TODAY) is True


def test_limit_reached_after_daily_limit_attempts(tracker):
    for _ in range(10):
        assert tracker.may_generate(TODAY) is True
        tracker.record_attempt(TODAY)

    assert tracker.may_generate(TODAY) is False


def test_new_day_resets_regardless_of_count(tracker, store):
    store.set(tracker.key, json.dumps({"date": TODAY, "count": 57}))

    assert tracker.may_generate(TODAY) is False
    assert tracker.may_generate(TOMORROW) is True


def test_record_attempt_increments_same_day(tracker, store):
    tracker.record_attempt(TODAY)
    tracker.record_attempt(TODAY)

    assert json.loads(store.get(tracker.key)) == {"date": TODAY, "count": 2}


def test_record_attempt_on_new_day_restarts_at_one(tracker, store):
    store.set(tracker.key, json.dumps({"date": TODAY, "count": 9}))

    tracker.record_attempt(TOMORROW)

    assert json.loads(store.get(tracker.key)) == {"date": TOMORROW, "count": 1}


def test_nine_of_ten_then_one_more_blocks(tracker, store):
    store.set(tracker.key, json.dumps({"date": TODAY, "count": 9}))
    assert tracker.may_generate(TODAY) is True

    tracker.record_attempt(TODAY)

    assert json.loads(store.get(tracker.key))["count"] == 10
    assert tracker.may_generate(TODAY) is False


@pytest.mark.parametrize(
    "raw",
    [
        "not json at all",
        "[1, 2, 3]",
        json.dumps({"date": TODAY}),
        json.dumps({"date": TODAY, "count": "9"}),
        json.dumps({"date": TODAY, "count": -3}),
        json.dumps({"count": 99}),
    ],
)
def test_corrupt_record_fails_open(tracker, store, raw):
    store.set(tracker.key, raw)

    assert tracker.may_generate(TODAY) is True


def test_corrupt_record_is_overwritten_on_attempt(tracker, store):
    store.set(tracker.key, "{broken")

    tracker.record_attempt(TODAY)

    assert json.loads(store.get(tracker.key)) == {"date": TODAY, "count": 1}


def test_read_failure_fails_open():
    failing = Mock()
    failing.get.side_effect = OSError("disk unavailable")
    tracker = QuotaTracker(failing, key="k", limit=10)

    assert tracker.may_generate(TODAY) is True


def test_write_failure_is_swallowed():
    failing = Mock()
    failing.get.return_value = None
    failing.set.side_effect = OSError("read-only")
    tracker = QuotaTracker(failing, key="k", limit=10)

    tracker.record_attempt(TODAY)

    failing.set.assert_called_once()


def test_status_reports_usage(tracker):
    for _ in range(3):
        tracker.record_attempt(TODAY)

    assert tracker.status(TODAY) == {
        "allowed": True,
        "remaining": 7,
        "total_today": 3,
        "limit": 10,
    }
    assert tracker.status(TOMORROW)["total_today"] == 0


def test_separate_keys_are_counted_separately():
    store = InMemoryQuotaStore()
    first = QuotaTracker(store, key="device-a", limit=1)
    second = QuotaTracker(store, key="device-b", limit=1)

    first.record_attempt(TODAY)

    assert first.may_generate(TODAY) is False
    assert second.may_generate(TODAY) is True
