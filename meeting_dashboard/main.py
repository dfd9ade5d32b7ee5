from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from meeting_dashboard import __version__
from meeting_dashboard.api.router import api_router
from meeting_dashboard.core.config import settings
from meeting_dashboard.core.logger import configure_logging, get_logger
from meeting_dashboard.infrastructure.http.client import BackendClient
from meeting_dashboard.services.dashboard_view import DashboardView

# Configure logging once and get service logger
configure_logging()
logger = get_logger("dashboard.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "dashboard_service_starting", extra={"profile": settings.dashboard_profile}
    )
    app.state.client = BackendClient()
    app.state.view = DashboardView(app.state.client)
    app.state.view.mount(settings.backend_token)
    try:
        yield
    finally:
        logger.info("dashboard_service_stopping")
        app.state.view.unmount()
        await app.state.client.aclose()


app = FastAPI(title="Meeting Live Dashboard", version=__version__, lifespan=lifespan)
app.include_router(api_router)


@app.get("/metrics")
async def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
