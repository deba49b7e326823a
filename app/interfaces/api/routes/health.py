"""Liveness endpoint for load balancers and the web client."""

from fastapi import APIRouter, Request

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health(request: Request) -> dict[str, object]:
    hub = getattr(request.app.state, "realtime", None)
    if hub is None:
        return {"status": "ok", "realtime": False, "online_users": 0}
    return {
        "status": "ok",
        "realtime": hub.running,
        "online_users": len(hub.list_online()),
    }
