from typing import List

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from meeting_dashboard.api.dependencies import get_notifier, get_view
from meeting_dashboard.domain.models import DashboardState, Notification
from meeting_dashboard.services.dashboard_view import DashboardView
from meeting_dashboard.services.notifications import Notifier

router = APIRouter(prefix="/dashboard")


class CredentialIn(BaseModel):
    token: str


@router.get("", response_model=DashboardState)
async def dashboard_state(view: DashboardView = Depends(get_view)):
    return view.state()


@router.post("/refresh", status_code=202)
async def refresh(view: DashboardView = Depends(get_view)):
    task = view.refresh_now()
    return {"launched": task is not None, "status": view.aggregator.status}


@router.put("/credential", status_code=204)
async def set_credential(body: CredentialIn, view: DashboardView = Depends(get_view)):
    view.set_credential(body.token)


@router.delete("/credential", status_code=204)
async def clear_credential(view: DashboardView = Depends(get_view)):
    view.set_credential(None)


@router.get("/notifications", response_model=List[Notification])
async def notifications(
    limit: int = Query(20, ge=0), notifier: Notifier = Depends(get_notifier)
):
    return notifier.recent(limit)
