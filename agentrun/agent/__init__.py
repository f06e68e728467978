"""
Agent module - agent definitions, run context, and registry.
"""

from .base import Agent, AgentGenerator, AgentManifest, AgentYield, agent
from .context import Context
from .registry import AgentRegistry, get_registry

__all__ = [
    "Agent",
    "AgentGenerator",
    "AgentManifest",
    "AgentYield",
    "AgentRegistry",
    "Context",
    "agent",
    "get_registry",
]
