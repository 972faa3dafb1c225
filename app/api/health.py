"""Health check and monitoring endpoints"""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_image_service, get_initialization_gate
from app.db.session import get_pool_stats
from app.features.initialization.service import InitializationGate
from app.services.image import ImageService

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/pool")
async def get_pool_health():
    """
    Get connection pool health statistics for the gate record database.

    Returns pool utilization, connection counts, and health status.
    """
    stats = get_pool_stats()
    in_use = stats["checked_out"]
    total_capacity = stats["size"] + stats["max_overflow"]
    utilization = (in_use / total_capacity * 100) if total_capacity > 0 else 0

    if utilization >= 90:
        status = "critical"
    elif utilization >= 80:
        status = "warning"
    else:
        status = "healthy"

    return {
        "status": status,
        "pool_size": stats["size"],
        "available": stats["checked_in"],
        "in_use": in_use,
        "overflow": stats["overflow"],
        "utilization_percent": round(utilization, 2),
    }


@router.get("/")
async def health_check(gate: InitializationGate = Depends(get_initialization_gate)):
    """Basic health check; reports the gate state without resolving it"""
    return {
        "status": "healthy",
        "service": "todo-backend",
        "initialization": gate.state.value,
    }


@router.get("/images")
async def image_host_health(service: ImageService = Depends(get_image_service)):
    """Ping the image CDN; unconfigured means uploads are stored inline"""
    if not service.is_configured:
        return {"status": "not_configured"}
    reachable = await service.test_connection()
    return {"status": "healthy" if reachable else "unreachable"}
