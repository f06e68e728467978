"""
Health check routes.
"""

from fastapi import APIRouter

from agentrun.api.schemas import HealthResponse

router = APIRouter(prefix="/health")


@router.get("", response_model=HealthResponse)
async def health_check():
    """Basic health check."""
    from agentrun import __version__

    return HealthResponse(status="healthy", version=__version__)
