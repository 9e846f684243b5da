"""
Health check endpoints, shared by both services
"""
from fastapi import APIRouter, HTTPException, status
from datetime import datetime, timezone
from typing import Any, Callable, Dict


def build_health_router(service: str, check_db: Callable[[], bool]) -> APIRouter:
    """
    Build the `/health` and `/ready` routes for a service.

    Args:
        service: Name reported in the response body
        check_db: Returns True when the service's database answers

    Returns:
        APIRouter with both routes, no auth required
    """
    router = APIRouter(tags=["health"])

    @router.get("/health", status_code=status.HTTP_200_OK)
    async def health_check() -> Dict[str, Any]:
        """Liveness: the process is up and serving requests."""
        return {
            "status": "ok",
            "service": service,
            "time": datetime.now(timezone.utc).isoformat(),
        }

    @router.get("/ready", status_code=status.HTTP_200_OK)
    def readiness_check() -> Dict[str, Any]:
        """
        Readiness check with database status.

        Raises:
            HTTPException: 503 if the database is unreachable
        """
        db_connected = check_db()

        response = {
            "status": "ready" if db_connected else "not_ready",
            "service": service,
            "database": "connected" if db_connected else "disconnected",
            "time": datetime.now(timezone.utc).isoformat(),
        }

        if not db_connected:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=response,
            )

        return response

    return router
