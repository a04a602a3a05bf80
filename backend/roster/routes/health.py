from fastapi import APIRouter, Depends, HTTPException
from datetime import datetime
from roster.context import RosterContext
from roster.utils.auth import get_context

router = APIRouter()

@router.get("/health")
async def health_check(context: RosterContext = Depends(get_context)):
    """
    Basic health check endpoint for production monitoring
    """
    health_status = {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "version": "1.0.0",
        "checks": {}
    }

    # Store connectivity check
    try:
        await context.store.ping()
        health_status["checks"]["store"] = {"status": "healthy"}
    except Exception as e:
        health_status["checks"]["store"] = {"status": "unhealthy", "error": str(e)}
        health_status["status"] = "degraded"

    # Live collection subscriptions
    for cache in (context.users, context.skills):
        if cache.error:
            health_status["checks"][cache.name] = {"status": "unhealthy", "error": cache.error}
            health_status["status"] = "degraded"
        else:
            health_status["checks"][cache.name] = {
                "status": "loading" if cache.loading else "healthy",
                "records": len(cache.records),
            }

    health_status["checks"]["websockets"] = {
        "status": "healthy",
        **context.connections.get_connection_stats(),
    }

    return health_status

@router.get("/health/ready")
async def readiness_check(context: RosterContext = Depends(get_context)):
    """
    Ready once both collections have delivered their first snapshot
    """
    if context.loading or context.error:
        raise HTTPException(
            status_code=503,
            detail={
                "status": "not_ready",
                "timestamp": datetime.utcnow().isoformat(),
                "error": context.error,
            }
        )
    return {
        "status": "ready",
        "timestamp": datetime.utcnow().isoformat()
    }

@router.get("/health/live")
async def liveness_check():
    return {
        "status": "alive",
        "timestamp": datetime.utcnow().isoformat()
    }
