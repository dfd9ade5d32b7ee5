from typing import Literal, Optional

from shared.config import BaseServiceConfig
from shared.constants import BackendEndpoints


class Settings(BaseServiceConfig):
    # Backend
    backend_token: Optional[str] = None  # operator bearer credential, if pre-issued
    attendance_count_path: str = BackendEndpoints.ATTENDANCE_COUNT
    total_subscribed_capital_path: str = BackendEndpoints.TOTAL_SUBSCRIBED_CAPITAL
    attended_subscribed_capital_path: str = BackendEndpoints.ATTENDED_SUBSCRIBED_CAPITAL

    # Polling
    dashboard_profile: Literal["primary", "print"] = "primary"
    primary_poll_interval_ms: int = 45_000
    print_poll_interval_ms: int = 15_000
    poll_single_flight: bool = True  # skip timer firings while a cycle runs

    # Animation
    animation_duration_ms: int = 1_500
    animation_frame_interval_ms: int = 16  # ~60 fps

    # Notifications
    notification_history_size: int = 50

    otel_service_name: str = "dashboard"


settings = Settings()
