"""
agentrun - pausable agent runs.

Agents suspend by yielding an AwaitRequest and continue when an external
party submits the matching AwaitResume through the RunController.
"""

from agentrun.agent import Agent, AgentRegistry, Context, agent, get_registry
from agentrun.domain import (
    AwaitRequest,
    AwaitResume,
    EventType,
    Message,
    MessagePart,
    Run,
    RunEvent,
    RunStatus,
)
from agentrun.exceptions import (
    AgentRunError,
    ExecutionFailure,
    InvalidRunStateError,
    NotFoundError,
    RunCancelledError,
)
from agentrun.runtime import RunController

__version__ = "0.1.0"

__all__ = [
    "Agent",
    "AgentRegistry",
    "Context",
    "agent",
    "get_registry",
    "AwaitRequest",
    "AwaitResume",
    "EventType",
    "Message",
    "MessagePart",
    "Run",
    "RunEvent",
    "RunStatus",
    "RunController",
    "AgentRunError",
    "ExecutionFailure",
    "InvalidRunStateError",
    "NotFoundError",
    "RunCancelledError",
]
