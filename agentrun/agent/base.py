"""
Agent definitions.

An agent is an async generator function receiving the run input and a
Context. Everything it yields is run output, except an AwaitRequest which
suspends the run; the resume message is sent back as the value of that
yield expression:

    @agent(description="Asks before doing anything")
    async def careful(input: list[Message], context: Context):
        answer = yield AwaitRequest(message=Message.text("Proceed?", role="agent"))
        yield Message.text(f"You said {answer}", role="agent")

Plain coroutine functions are accepted too; they cannot await external
input and their return value becomes the single output message.
"""

import inspect
from typing import Any, AsyncGenerator, Callable

from pydantic import BaseModel, Field

from agentrun.agent.context import Context
from agentrun.domain import AwaitRequest, Message, MessagePart

AgentYield = str | Message | MessagePart | AwaitRequest
AgentGenerator = AsyncGenerator[AgentYield, Message | None]
AgentFunction = Callable[..., Any]


class AgentManifest(BaseModel):
    """Public description of a registered agent."""

    name: str
    description: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class Agent:
    """Callable agent wrapper with a manifest."""

    def __init__(
        self,
        fn: AgentFunction,
        name: str | None = None,
        description: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        if not (inspect.isasyncgenfunction(fn) or inspect.iscoroutinefunction(fn)):
            raise TypeError(
                f"Agent '{fn.__name__}' must be an async generator or coroutine function"
            )
        self._fn = fn
        self._takes_context = len(inspect.signature(fn).parameters) > 1
        self.manifest = AgentManifest(
            name=name or fn.__name__,
            description=description or inspect.getdoc(fn),
            metadata=metadata or {},
        )

    @property
    def name(self) -> str:
        return self.manifest.name

    def run(self, input: list[Message], context: Context) -> AgentGenerator:
        """Start the agent. Returns an async generator whatever the function kind."""
        args = (input, context) if self._takes_context else (input,)
        if inspect.isasyncgenfunction(self._fn):
            return self._fn(*args)
        return self._run_coroutine(*args)

    async def _run_coroutine(self, *args: Any) -> AgentGenerator:
        result = await self._fn(*args)
        if result is not None:
            yield result

    def __repr__(self) -> str:
        return f"Agent(name={self.name!r})"


def agent(
    name: str | None = None,
    description: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> Callable[[AgentFunction], Agent]:
    """Decorator turning an async function into an Agent."""

    def decorator(fn: AgentFunction) -> Agent:
        return Agent(fn, name=name, description=description, metadata=metadata)

    return decorator


__all__ = ["Agent", "AgentManifest", "AgentGenerator", "AgentYield", "agent"]
