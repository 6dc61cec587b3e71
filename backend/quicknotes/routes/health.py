"""
QuickNotes Backend — Health Check Route
=========================================

What:  Liveness endpoint for monitoring and load balancer probes.
How:   Returns a constant payload. The only dependency is the in-memory store,
       which is available whenever the process can answer at all.
Who:   Called by container health checks and uptime monitors.
"""

from fastapi import APIRouter

from quicknotes.schemas.note import HealthResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns {\"status\": \"ok\"} while the service is able to handle requests.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok")
