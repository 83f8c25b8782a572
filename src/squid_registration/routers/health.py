import time
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Request

health = APIRouter(prefix="/api")


def _uptime(request: Request) -> float:
    return round(time.monotonic() - request.app.state.started_at, 3)


@health.get("/health")
async def health_check(request: Request):
    """Basic health check endpoint"""
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": _uptime(request),
    }


@health.get("/health/detailed")
async def detailed_health_check(request: Request):
    """Detailed health check with database and configuration checks"""
    config = request.app.state.config
    health_status = {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": _uptime(request),
        "environment": config.get("environment"),
        "checks": {},
    }

    # Database connectivity check
    try:
        healthy = request.app.state.database.ping()
        health_status["checks"]["database"] = "healthy" if healthy else "unhealthy"
        if not healthy:
            health_status["status"] = "unhealthy"
    except Exception as e:
        health_status["checks"]["database"] = f"unhealthy: {str(e)}"
        health_status["status"] = "unhealthy"

    # Missing webhook URL is reported but does not make the service unhealthy
    health_status["checks"]["webhook"] = (
        "configured"
        if request.app.state.webhook_client.is_configured
        else "not configured"
    )
    health_status["checks"]["submissions"] = (
        "accepting" if request.app.state.submission_gate.accepting else "draining"
    )

    if health_status["status"] == "unhealthy":
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
