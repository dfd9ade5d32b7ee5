from .endpoints import BackendEndpoints, MetricKeys

__all__ = ["BackendEndpoints", "MetricKeys"]
