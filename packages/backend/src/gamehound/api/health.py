"""Health check endpoints.

Learn: /health verifies the server is running and its dependencies are
reachable. The database is required; Redis is optional, so a missing
Redis only marks the service "degraded". /test is the plain liveness
ping the frontend used during bring-up.
"""

from fastapi import APIRouter, Request
from sqlalchemy import text

from gamehound import __version__
from gamehound.db.redis import get_redis

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Check server health and dependency connectivity."""
    checks = {"server": "ok", "version": __version__}

    # Check the database
    try:
        async with request.app.state.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"error: {e}"

    # Check Redis
    try:
        await get_redis().ping()
        checks["redis"] = "ok"
    except Exception as e:
        checks["redis"] = f"error: {e}"

    if checks["database"] != "ok":
        status = "unhealthy"
    elif checks["redis"] != "ok":
        status = "degraded"
    else:
        status = "healthy"

    return {"status": status, **checks}


@router.get("/test")
async def ping():
    return {"message": "Server is running! GameHound API is ready."}
