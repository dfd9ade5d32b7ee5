import asyncio

import pytest
from helpers.backend import ATTENDED, TOTAL

from meeting_dashboard.services.dashboard_view import (
    DashboardView,
    format_value,
    profile_for,
)
from shared.constants import MetricKeys


@pytest.fixture
def view(client, notifier, scheduler):
    return DashboardView(
        client, notifier=notifier, profile=profile_for("primary"), scheduler=scheduler
    )


def test_profiles():
    primary = profile_for("primary")
    printable = profile_for("print")
    assert (primary.poll_interval_ms, primary.animate) == (45_000, True)
    assert (printable.poll_interval_ms, printable.animate) == (15_000, False)
    with pytest.raises(ValueError):
        profile_for("kiosk")


def test_format_value():
    assert format_value(1_000_000, 0) == "1,000,000"
    assert format_value(25, 2, "%") == "25.00%"


@pytest.mark.asyncio
async def test_end_to_end_counts_and_percentage(view, scheduler, notifier):
    view.mount("operator-token")
    await view.aggregator.wait_idle()

    state = view.state()
    assert state.status == "idle"
    assert state.last_updated_at is not None
    pct = state.displays[MetricKeys.ATTENDANCE_PERCENTAGE]
    assert pct.target == 25.0
    assert pct.decimals == 2
    # Still counting up from zero
    assert pct.value == 0

    scheduler.advance(1_500)
    state = view.state()
    assert state.displays[MetricKeys.ATTENDANCE_COUNT].value == 120
    assert state.displays[MetricKeys.ATTENDANCE_COUNT].text == "120"
    assert state.displays[MetricKeys.TOTAL_SUBSCRIBED_CAPITAL].text == "1,000,000"
    assert state.displays[MetricKeys.ATTENDED_SUBSCRIBED_CAPITAL].value == 250_000
    assert state.displays[MetricKeys.ATTENDANCE_PERCENTAGE].text == "25.00%"
    assert [n.title for n in notifier.recent()] == ["Data Updated"]
    view.unmount()


@pytest.mark.asyncio
async def test_zero_total_capital_gives_zero_percentage(view, backend, scheduler):
    backend.responses[TOTAL] = 0
    backend.responses[ATTENDED] = 250_000
    view.mount("operator-token")
    await view.aggregator.wait_idle()
    scheduler.advance(1_500)

    display = view.state().displays[MetricKeys.ATTENDANCE_PERCENTAGE]
    assert display.target == 0
    assert display.value == 0
    view.unmount()


@pytest.mark.asyncio
async def test_failed_metric_keeps_last_known_value(view, backend, scheduler):
    view.mount("operator-token")
    await view.aggregator.wait_idle()
    first = view.state().snapshots[MetricKeys.TOTAL_SUBSCRIBED_CAPITAL]
    refreshed_at = view.state().last_updated_at

    backend.responses[TOTAL] = "garbage"
    scheduler.advance(45_000)
    await view.aggregator.wait_idle()
    scheduler.advance(1_500)

    state = view.state()
    assert state.snapshots[MetricKeys.TOTAL_SUBSCRIBED_CAPITAL] == first
    assert state.displays[MetricKeys.TOTAL_SUBSCRIBED_CAPITAL].value == 1_000_000
    assert state.last_updated_at == refreshed_at
    view.unmount()


@pytest.mark.asyncio
async def test_print_profile_shows_values_without_animation(client, notifier, scheduler):
    view = DashboardView(
        client, notifier=notifier, profile=profile_for("print"), scheduler=scheduler
    )
    view.mount("operator-token")
    await view.aggregator.wait_idle()

    state = view.state()
    assert state.poll_interval_ms == 15_000
    assert state.displays[MetricKeys.ATTENDANCE_COUNT].value == 120
    assert state.displays[MetricKeys.ATTENDANCE_PERCENTAGE].text == "25.00%"
    assert notifier.recent()[-1].description == "Meeting statistics updated successfully"
    view.unmount()


@pytest.mark.asyncio
async def test_unmount_cancels_timer_and_frame_loop(view, scheduler):
    view.mount("operator-token")
    await view.aggregator.wait_idle()
    assert len(scheduler.active) == 2  # poll timer + frame loop

    view.unmount()

    assert scheduler.active == []
    assert not view.mounted
    assert view.refresh_now() is None


@pytest.mark.asyncio
async def test_refresh_now_and_credential_handoff(view, backend, notifier):
    view.mount()
    await view.aggregator.wait_idle()
    assert backend.requests == []
    assert notifier.recent()[-1].title == "Authentication Error"

    view.set_credential("operator-token")
    task = view.refresh_now()
    assert task is not None
    await task
    assert len(backend.requests) == 3
    view.unmount()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "held,landed",
    [
        (TOTAL, MetricKeys.ATTENDED_SUBSCRIBED_CAPITAL),
        (ATTENDED, MetricKeys.TOTAL_SUBSCRIBED_CAPITAL),
    ],
)
async def test_percentage_moves_only_after_cycle_settles(
    view, backend, scheduler, held, landed
):
    view.mount("operator-token")
    await view.aggregator.wait_idle()
    scheduler.advance(1_500)

    backend.responses[ATTENDED] = 5_000_000
    backend.responses[TOTAL] = 10_000_000
    gate = backend.gate(held)
    scheduler.advance(43_500)
    for _ in range(100):
        if view.store.get(landed).current_value in (5_000_000, 10_000_000):
            break
        await asyncio.sleep(0.001)
    assert view.store.get(landed).current_value in (5_000_000, 10_000_000)

    # One input is new and the other is old: the percentage holds still
    assert view.state().displays[MetricKeys.ATTENDANCE_PERCENTAGE].target == 25.0
    assert view.interpolator.target(MetricKeys.ATTENDANCE_PERCENTAGE) == 25.0

    gate.set()
    await view.aggregator.wait_idle()

    assert view.state().displays[MetricKeys.ATTENDANCE_PERCENTAGE].target == 50.0
    assert view.interpolator.target(MetricKeys.ATTENDANCE_PERCENTAGE) == 50.0
    view.unmount()
