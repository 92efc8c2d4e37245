"""
Notes API Backend - Health Check Route
=======================================

What:  Liveness endpoint for load balancers and container health checks.
How:   Returns {"status": "ok"} whenever the process is serving requests.
       It does not touch the database; request logging skips this path.
"""

from fastapi import APIRouter

from notes_api.schemas.note import HealthResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok")
