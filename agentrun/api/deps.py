"""
API dependency injection.
"""

from fastapi import Request

from agentrun.agent import AgentRegistry
from agentrun.runtime import RunController


def get_controller(request: Request) -> RunController:
    """Get the RunController owned by the application."""
    return request.app.state.controller


def get_agent_registry(request: Request) -> AgentRegistry:
    return request.app.state.controller.registry
