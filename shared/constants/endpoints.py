class MetricKeys:
    """Centralised metric key definitions"""

    ATTENDANCE_COUNT = "attendance_count"
    TOTAL_SUBSCRIBED_CAPITAL = "total_subscribed_capital"
    ATTENDED_SUBSCRIBED_CAPITAL = "attended_subscribed_capital"

    # Derived, never fetched
    ATTENDANCE_PERCENTAGE = "attendance_percentage"

    @classmethod
    def fetched(cls) -> list[str]:
        return [
            cls.ATTENDANCE_COUNT,
            cls.TOTAL_SUBSCRIBED_CAPITAL,
            cls.ATTENDED_SUBSCRIBED_CAPITAL,
        ]

    @classmethod
    def displayed(cls) -> list[str]:
        return cls.fetched() + [cls.ATTENDANCE_PERCENTAGE]


class BackendEndpoints:
    """Centralised backend endpoint paths (relative to the API base URL)"""

    ATTENDANCE_COUNT = "admin/countp"
    TOTAL_SUBSCRIBED_CAPITAL = "admin/sumsub"
    ATTENDED_SUBSCRIBED_CAPITAL = "admin/sumvoting"
