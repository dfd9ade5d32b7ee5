"""Shared utilities and components for the dashboard service."""

from .config import BaseHttpClientConfig, BaseLoggingConfig, BaseServiceConfig
from .constants import BackendEndpoints, MetricKeys

__all__ = [
    "BackendEndpoints",
    "MetricKeys",
    "BaseServiceConfig",
    "BaseLoggingConfig",
    "BaseHttpClientConfig",
]
