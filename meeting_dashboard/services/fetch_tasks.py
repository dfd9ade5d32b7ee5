"""One retrieval task per metric, each resolving to a tagged outcome."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

import httpx

from meeting_dashboard.core.config import settings
from meeting_dashboard.core.logger import get_logger
from meeting_dashboard.domain.errors import (
    AuthMissing,
    FetchError,
    MalformedResponse,
    NetworkFailure,
    Unauthorized,
    UnknownMetric,
)
from meeting_dashboard.infrastructure.http.client import BackendClient
from meeting_dashboard.infrastructure.metrics import (
    FETCH_FAILURES_TOTAL,
    FETCH_LATENCY_SECONDS,
)
from meeting_dashboard.services.notifications import Notifier
from shared.constants import MetricKeys

logger = get_logger("dashboard.fetch_tasks")


@dataclass(frozen=True)
class FetchTask:
    key: str
    path: str
    label: str  # used in the failure notification
    timeout_seconds: float


@dataclass(frozen=True)
class FetchOutcome:
    key: str
    value: Optional[float] = None
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def default_tasks(timeout_seconds: float | None = None) -> List[FetchTask]:
    timeout = (
        timeout_seconds if timeout_seconds is not None else settings.backend_timeout_seconds
    )
    return [
        FetchTask(
            MetricKeys.ATTENDANCE_COUNT,
            settings.attendance_count_path,
            "attendance count",
            timeout,
        ),
        FetchTask(
            MetricKeys.TOTAL_SUBSCRIBED_CAPITAL,
            settings.total_subscribed_capital_path,
            "subscription data",
            timeout,
        ),
        FetchTask(
            MetricKeys.ATTENDED_SUBSCRIBED_CAPITAL,
            settings.attended_subscribed_capital_path,
            "voting data",
            timeout,
        ),
    ]


def parse_numeric(key: str, body: Any) -> float:
    """Coerce a response body into a finite number or raise MalformedResponse."""
    if isinstance(body, bool):
        raise MalformedResponse(key, f"boolean body for {key}")
    if isinstance(body, (int, float)):
        value = float(body)
    elif isinstance(body, str):
        try:
            value = float(body.strip())
        except ValueError:
            raise MalformedResponse(key, f"non-numeric body for {key}") from None
    else:
        raise MalformedResponse(key, f"unexpected {type(body).__name__} body for {key}")
    if not math.isfinite(value):
        raise MalformedResponse(key, f"non-finite value for {key}")
    return value


class FetchTaskSet:
    """Adapts each backend endpoint into ``fetch(key) -> FetchOutcome``.

    ``fetch`` never raises. A failed fetch emits exactly one notification
    naming the metric, except for a missing credential, which issues no
    request and leaves the single authentication notification to the caller.
    Callers that may be torn down while a request is in flight pass a
    ``should_notify`` predicate so a late failure stays silent.
    """

    def __init__(
        self,
        client: BackendClient,
        notifier: Notifier,
        credential: Optional[str] = None,
        tasks: Iterable[FetchTask] | None = None,
    ):
        self.client = client
        self.notifier = notifier
        self.credential = credential
        self._tasks: Dict[str, FetchTask] = {
            t.key: t for t in (tasks if tasks is not None else default_tasks())
        }

    @property
    def keys(self) -> List[str]:
        return list(self._tasks)

    @property
    def has_credential(self) -> bool:
        return bool(self.credential)

    def set_credential(self, credential: Optional[str]):
        self.credential = credential or None

    def task(self, key: str) -> FetchTask:
        try:
            return self._tasks[key]
        except KeyError:
            raise UnknownMetric(key) from None

    async def fetch(
        self, key: str, should_notify: Callable[[], bool] | None = None
    ) -> FetchOutcome:
        """Resolve one metric. ``should_notify`` is consulted when a failure lands."""
        task = self.task(key)
        if not self.credential:
            logger.warning("fetch_skipped_auth_missing", extra={"metric": key})
            return FetchOutcome(key, error=AuthMissing(key))

        logger.debug("fetch_started", extra={"metric": key, "path": task.path})
        start = time.perf_counter()
        try:
            body = await self.client.get_json(
                task.path, self.credential, timeout=task.timeout_seconds
            )
            value = parse_numeric(key, body)
        except FetchError as e:
            error: FetchError = e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status in (401, 403):
                error = Unauthorized(key, f"HTTP {status}")
            else:
                error = NetworkFailure(key, f"HTTP {status}")
        except httpx.TimeoutException:
            error = NetworkFailure(key, "timed out")
        except httpx.RequestError as e:
            error = NetworkFailure(key, str(e) or type(e).__name__)
        except ValueError as e:  # undecodable JSON
            error = MalformedResponse(key, str(e))
        else:
            logger.info("fetch_succeeded", extra={"metric": key, "value": value})
            return FetchOutcome(key, value=value)
        finally:
            FETCH_LATENCY_SECONDS.labels(metric=key).observe(
                time.perf_counter() - start
            )

        return self._failed(task, error, should_notify)

    def _failed(
        self,
        task: FetchTask,
        error: FetchError,
        should_notify: Callable[[], bool] | None,
    ) -> FetchOutcome:
        FETCH_FAILURES_TOTAL.labels(metric=task.key, kind=error.kind.value).inc()
        if isinstance(error, MalformedResponse):
            logger.error(
                "fetch_malformed_response",
                extra={"metric": task.key, "error": str(error)},
            )
        else:
            logger.warning(
                "fetch_failed",
                extra={
                    "metric": task.key,
                    "kind": error.kind.value,
                    "error": str(error),
                },
            )
        if should_notify is None or should_notify():
            self.notifier.fetch_failed(task.label)
        else:
            logger.debug("fetch_failure_not_notified", extra={"metric": task.key})
        return FetchOutcome(task.key, error=error)
