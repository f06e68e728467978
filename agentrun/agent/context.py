"""
Run context handed to agent logic.
"""

from dataclasses import dataclass, field
from typing import Any

from agentrun.utils.logging import get_logger


@dataclass(frozen=True)
class Context:
    """
    Immutable per-run context.

    Attributes:
        run_id: Current run identifier
        agent_name: Name of the agent being executed
        session_id: Session identifier (optional)
        metadata: Additional metadata
    """

    run_id: str
    agent_name: str
    session_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def logger(self):
        """Logger bound to this run."""
        return get_logger("agentrun.agent").bind(
            run_id=self.run_id, agent_name=self.agent_name
        )

    def __repr__(self) -> str:
        return (
            f"Context(run_id={self.run_id!r}, "
            f"agent_name={self.agent_name!r}, "
            f"session_id={self.session_id!r})"
        )


__all__ = ["Context"]
