"""
Main API router - aggregates all sub-routers.
"""

from fastapi import APIRouter


def create_router(prefix: str = "") -> APIRouter:
    """
    Create the main agentrun API router.

    Args:
        prefix: URL prefix for all routes

    Example:
        from fastapi import FastAPI
        from agentrun.api import create_router

        app = FastAPI()
        app.include_router(create_router(prefix="/acp"))
    """
    from .routes import agents, health, runs

    router = APIRouter(prefix=prefix)

    # Health check
    router.include_router(health.router, tags=["Health"])

    # Agent discovery
    router.include_router(agents.router, tags=["Agents"])

    # Run lifecycle
    router.include_router(runs.router, tags=["Runs"])

    return router
