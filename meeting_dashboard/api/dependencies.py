from fastapi import Request

from meeting_dashboard.services.dashboard_view import DashboardView
from meeting_dashboard.services.notifications import Notifier


def get_view(request: Request) -> DashboardView:
    return request.app.state.view  # type: ignore[return-value]


def get_notifier(request: Request) -> Notifier:
    return request.app.state.view.notifier  # type: ignore[return-value]
