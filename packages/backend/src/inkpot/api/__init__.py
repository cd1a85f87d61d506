"""API route aggregation.

All routers registered here get mounted in main.py. Health and user
routes are open; the blog router authenticates per route through
get_current_user, so the identity is available to each handler.
"""

from fastapi import APIRouter

from inkpot.api.blogs import router as blogs_router
from inkpot.api.health import router as health_router
from inkpot.api.users import router as users_router

api_router = APIRouter(prefix="/api/v1")

# Open routes, no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(users_router, tags=["user"])

# Token-protected routes
api_router.include_router(blogs_router, tags=["blog"])
