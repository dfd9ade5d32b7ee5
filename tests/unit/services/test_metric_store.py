from datetime import datetime, timezone

import pytest

from meeting_dashboard.domain.errors import UnknownMetric
from meeting_dashboard.services.metric_store import MetricStore, percentage
from shared.constants import MetricKeys

NOW = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def store():
    return MetricStore(MetricKeys.fetched(), clock=lambda: NOW)


def test_get_unknown_metric_raises(store):
    with pytest.raises(UnknownMetric):
        store.get("quorum")
    with pytest.raises(UnknownMetric):
        store.update("quorum", 1)


def test_registered_metrics_start_at_zero(store):
    assert store.keys == MetricKeys.fetched()
    snap = store.get(MetricKeys.ATTENDANCE_COUNT)
    assert (snap.previous_value, snap.current_value) == (0, 0)
    assert snap.last_updated_at is None


def test_register_is_idempotent(store):
    store.update(MetricKeys.ATTENDANCE_COUNT, 7)
    store.register(MetricKeys.ATTENDANCE_COUNT)
    assert store.get(MetricKeys.ATTENDANCE_COUNT).current_value == 7


def test_previous_is_value_immediately_before_update(store):
    key = MetricKeys.ATTENDANCE_COUNT
    for value in [10, 50, 80, 80, 3]:
        before = store.get(key).current_value
        snap = store.update(key, value)
        assert snap.previous_value == before
        assert snap.current_value == value
        assert snap.last_updated_at == NOW


def test_update_touches_only_its_metric(store):
    store.update(MetricKeys.TOTAL_SUBSCRIBED_CAPITAL, 1_000_000)
    untouched = store.get(MetricKeys.ATTENDED_SUBSCRIBED_CAPITAL)

    store.update(MetricKeys.ATTENDANCE_COUNT, 120)

    assert store.get(MetricKeys.ATTENDED_SUBSCRIBED_CAPITAL) is untouched
    assert store.get(MetricKeys.TOTAL_SUBSCRIBED_CAPITAL).current_value == 1_000_000


def test_update_replaces_snapshot_in_one_step(store):
    key = MetricKeys.ATTENDANCE_COUNT
    store.update(key, 10)
    held = store.get(key)

    store.update(key, 20)

    # A reader holding the old snapshot still sees a consistent pair
    assert (held.previous_value, held.current_value) == (0, 10)
    assert (store.get(key).previous_value, store.get(key).current_value) == (10, 20)


def test_derive_percentage(store):
    store.update(MetricKeys.TOTAL_SUBSCRIBED_CAPITAL, 1_000_000)
    store.update(MetricKeys.ATTENDED_SUBSCRIBED_CAPITAL, 250_000)
    pct = store.derive(
        MetricKeys.ATTENDED_SUBSCRIBED_CAPITAL, over=MetricKeys.TOTAL_SUBSCRIBED_CAPITAL
    )
    assert pct == 25.0
    assert f"{pct:.2f}" == "25.00"


@pytest.mark.parametrize("numerator", [0, 1, 250_000, 10**12])
def test_derive_is_zero_for_zero_divisor(store, numerator):
    store.update(MetricKeys.ATTENDED_SUBSCRIBED_CAPITAL, numerator)
    store.update(MetricKeys.TOTAL_SUBSCRIBED_CAPITAL, 0)
    assert (
        store.derive(
            MetricKeys.ATTENDED_SUBSCRIBED_CAPITAL,
            over=MetricKeys.TOTAL_SUBSCRIBED_CAPITAL,
        )
        == 0
    )


def test_percentage_helper():
    assert percentage(1, 4) == 25.0
    assert percentage(5, 0) == 0.0


def test_subscribers_receive_new_snapshot_until_unsubscribed(store):
    seen = []
    unsubscribe = store.subscribe(lambda key, snap: seen.append((key, snap.current_value)))

    store.update(MetricKeys.ATTENDANCE_COUNT, 1)
    unsubscribe()
    store.update(MetricKeys.ATTENDANCE_COUNT, 2)

    assert seen == [(MetricKeys.ATTENDANCE_COUNT, 1)]
    unsubscribe()  # second call is harmless


def test_snapshots_returns_copy(store):
    snaps = store.snapshots()
    snaps.clear()
    assert len(store.snapshots()) == 3
