"""
Agent discovery routes.
"""

from fastapi import APIRouter, Depends

from agentrun.agent import AgentManifest, AgentRegistry
from agentrun.api.deps import get_agent_registry
from agentrun.api.schemas import ErrorResponse, PaginatedResponse

router = APIRouter(
    prefix="/agents",
    responses={404: {"model": ErrorResponse, "description": "Unknown agent"}},
)


@router.get("", response_model=PaginatedResponse[AgentManifest])
async def list_agents(registry: AgentRegistry = Depends(get_agent_registry)):
    """List registered agents."""
    items = registry.list()
    return PaginatedResponse(total=len(items), items=items, limit=len(items))


@router.get("/{name}", response_model=AgentManifest)
async def get_agent(name: str, registry: AgentRegistry = Depends(get_agent_registry)):
    """Get agent manifest. Unknown names map to 404 through NotFoundError."""
    return registry.get(name).manifest
