from fastapi import APIRouter, Request, Response

router = APIRouter()


@router.get("/healthz")
async def healthz(request: Request):
    view = request.app.state.view
    if not view.mounted:
        return Response(status_code=503, content="dashboard not mounted")
    return {"status": "ok", "profile": view.profile.name}


@router.get("/readyz")
async def readyz(request: Request):
    if request.app.state.view.aggregator.first_cycle_done.is_set():
        return {"status": "ready"}
    return Response(status_code=503, content="not ready")
