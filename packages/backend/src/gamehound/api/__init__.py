"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter. This protects all routes in the projects router
without modifying individual handlers; handlers that need the identity
declare the same dependency and FastAPI resolves it once per request.
Health and auth routers are open (no auth required) — /me declares its
own dependency.
"""

from fastapi import APIRouter, Depends

from gamehound.api.auth import router as auth_router
from gamehound.api.health import router as health_router
from gamehound.api.projects import router as projects_router
from gamehound.auth.dependencies import get_current_user

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix="/api")

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes — require a valid bearer token
api_router.include_router(projects_router, tags=["projects"], dependencies=_auth)
