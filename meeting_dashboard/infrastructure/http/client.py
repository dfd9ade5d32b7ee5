from __future__ import annotations

from typing import Any, Optional

import httpx

from meeting_dashboard.core.config import settings
from meeting_dashboard.core.logger import get_logger

logger = get_logger("dashboard.backend_client")


class BackendClient:
    """Async client for the meeting backend's counter endpoints.

    Returns decoded JSON bodies and lets httpx errors propagate; fetch tasks
    decide how each failure is classified.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.backend_base_url
        self.timeout = timeout if timeout is not None else settings.backend_timeout_seconds
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def get_json(
        self, path: str, token: str, timeout: float | None = None
    ) -> Any:
        resp = await self._client.get(
            path,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout if timeout is not None else self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    async def aclose(self):
        await self._client.aclose()
        logger.info("backend_client_closed")
