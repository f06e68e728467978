"""
Agent Registry - lookup of agents by name.
"""

from __future__ import annotations

from agentrun.agent.base import Agent, AgentManifest
from agentrun.exceptions import NotFoundError
from agentrun.utils.logging import get_logger

logger = get_logger(__name__)


class AgentRegistry:
    """Central registry for runnable agents."""

    # Example agents: name -> (module_path, attribute)
    BUILTIN_AGENTS: dict[str, tuple[str, str]] = {
        "password_generator": (
            "agentrun.agent.example.password",
            "password_generator",
        ),
        "echo": (
            "agentrun.agent.example.echo",
            "echo",
        ),
    }

    def __init__(self) -> None:
        self._agents: dict[str, Agent] = {}

    def register(self, agent: Agent, *, replace: bool = False) -> Agent:
        """
        Register an agent under its manifest name.

        Raises:
            ValueError: Name already taken and replace is False
        """
        if agent.name in self._agents and not replace:
            raise ValueError(f"Agent '{agent.name}' is already registered")
        self._agents[agent.name] = agent
        logger.debug("agent_registered", agent_name=agent.name)
        return agent

    def register_builtins(self) -> None:
        """Import and register the example agents."""
        import importlib

        for name, (module_path, attribute) in self.BUILTIN_AGENTS.items():
            module = importlib.import_module(module_path)
            self.register(getattr(module, attribute), replace=True)
            logger.debug("builtin_agent_loaded", agent_name=name, module=module_path)

    def unregister(self, name: str) -> None:
        self._agents.pop(name, None)

    def get(self, name: str) -> Agent:
        """
        Get agent by name.

        Raises:
            NotFoundError: Unknown agent name
        """
        try:
            return self._agents[name]
        except KeyError:
            raise NotFoundError(f"Agent '{name}' not found") from None

    def list(self) -> list[AgentManifest]:
        return [a.manifest for a in self._agents.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._agents

    def __len__(self) -> int:
        return len(self._agents)


_default_registry: AgentRegistry | None = None


def get_registry() -> AgentRegistry:
    """Get the process-wide registry."""
    global _default_registry
    if _default_registry is None:
        _default_registry = AgentRegistry()
    return _default_registry


__all__ = ["AgentRegistry", "get_registry"]
