from shared.metrics import get_counter, get_gauge, get_histogram

SERVICE = "dashboard"

# Poll cycles
POLL_CYCLES_TOTAL = get_counter(
    "poll_cycles_total", "Completed poll cycles by result.", SERVICE, ["result"]
)
POLL_CYCLES_SKIPPED_TOTAL = get_counter(
    "poll_cycles_skipped_total",
    "Timer firings skipped because a cycle was still running.",
    SERVICE,
)
POLL_CYCLES_IN_FLIGHT = get_gauge(
    "poll_cycles_in_flight", "Poll cycles currently waiting on fetch tasks.", SERVICE
)

# Fetch tasks
FETCH_FAILURES_TOTAL = get_counter(
    "fetch_failures_total",
    "Failed metric fetches by metric and error kind.",
    SERVICE,
    ["metric", "kind"],
)
FETCH_LATENCY_SECONDS = get_histogram(
    "fetch_latency_seconds",
    "Latency of backend metric fetches.",
    SERVICE,
    labelnames=["metric"],
)

# Notifications
NOTIFICATIONS_TOTAL = get_counter(
    "notifications_total", "User-facing notifications emitted.", SERVICE, ["variant"]
)
