"""Error taxonomy for the dashboard.

``UnknownMetric`` is a programming error and propagates. Every
``FetchError`` is recovered locally: fetch tasks convert them into failed
outcomes and the poll cycle carries on.
"""

from __future__ import annotations

from enum import Enum


class FetchErrorKind(str, Enum):
    NETWORK = "network"
    UNAUTHORIZED = "unauthorized"
    MALFORMED_RESPONSE = "malformed_response"


class DashboardError(Exception):
    """Base class for all dashboard errors."""


class UnknownMetric(DashboardError):
    def __init__(self, key: str):
        super().__init__(f"Unknown metric: {key}")
        self.key = key


class FetchError(DashboardError):
    kind: FetchErrorKind = FetchErrorKind.NETWORK

    def __init__(self, key: str, message: str = ""):
        super().__init__(message or f"{self.kind.value} error fetching {key}")
        self.key = key


class AuthMissing(FetchError):
    """No credential present; no request was attempted."""

    kind = FetchErrorKind.UNAUTHORIZED


class Unauthorized(FetchError):
    """The backend rejected the credential (401/403)."""

    kind = FetchErrorKind.UNAUTHORIZED


class NetworkFailure(FetchError):
    kind = FetchErrorKind.NETWORK


class MalformedResponse(FetchError):
    kind = FetchErrorKind.MALFORMED_RESPONSE
