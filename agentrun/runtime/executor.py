"""
AgentExecutor - drives one agent generator between suspension points.

The generator frame is the saved execution state: locals, position and
already emitted output survive suspension untouched. Each call to step()
resumes it with one injected value and runs it until it either yields an
AwaitRequest or is exhausted.

Output is reported through callbacks so the controller can append it to
the run and emit events in the order it was produced.
"""

from datetime import datetime
from typing import Awaitable, Callable

from agentrun.agent.base import Agent, AgentGenerator
from agentrun.agent.context import Context
from agentrun.domain import AwaitRequest, Message, MessagePart
from agentrun.exceptions import ExecutionFailure
from agentrun.utils.logging import get_logger

logger = get_logger(__name__)

PartCallback = Callable[[MessagePart], None]
MessageCallback = Callable[[Message], Awaitable[None]]


class AgentExecutor:
    """
    Cooperative driver for a single run's agent generator.

    Usage:
        executor = AgentExecutor(agent, input, context, on_part, on_message)
        result = await executor.step()            # first step
        result = await executor.step(answer)      # after a resume
        await executor.aclose()
    """

    def __init__(
        self,
        agent: Agent,
        input: list[Message],
        context: Context,
        on_part: PartCallback,
        on_message: MessageCallback,
    ) -> None:
        self.agent = agent
        self.context = context
        self._on_part = on_part
        self._on_message = on_message
        self._generator: AgentGenerator = agent.run(input, context)
        self._started = False
        self._finished = False
        self._pending_parts: list[MessagePart] = []

    @property
    def role(self) -> str:
        return f"agent/{self.agent.name}"

    @property
    def finished(self) -> bool:
        return self._finished

    async def step(self, send_value: Message | None = None) -> AwaitRequest | None:
        """
        Resume the agent until its next suspension point.

        Args:
            send_value: Value delivered as the result of the pending yield;
                ignored on the first step

        Returns:
            The AwaitRequest the agent suspended on, or None when finished

        Raises:
            ExecutionFailure: The agent raised an unhandled exception
        """
        if self._finished:
            raise RuntimeError("Agent generator is already exhausted")

        value = send_value if self._started else None
        self._started = True

        try:
            while True:
                try:
                    item = await self._generator.asend(value)
                except StopAsyncIteration:
                    self._finished = True
                    await self._flush_parts()
                    return None
                value = None

                if isinstance(item, AwaitRequest):
                    await self._flush_parts()
                    return item
                await self._emit(item)
        except ExecutionFailure:
            self._finished = True
            raise
        except Exception as e:
            self._finished = True
            # Output streamed before the failure stays on the run
            await self._flush_parts()
            logger.error(
                "agent_execution_failed",
                run_id=self.context.run_id,
                agent_name=self.agent.name,
                error=str(e),
                exc_info=True,
            )
            raise ExecutionFailure(f"Agent '{self.agent.name}' failed: {e}") from e

    async def aclose(self) -> None:
        """Close the generator, running its cleanup code."""
        self._finished = True
        await self._generator.aclose()

    async def _emit(self, item: object) -> None:
        if isinstance(item, str):
            item = MessagePart(content=item)

        if isinstance(item, MessagePart):
            self._pending_parts.append(item)
            self._on_part(item)
        elif isinstance(item, Message):
            await self._flush_parts()
            if item.completed_at is None:
                item = item.model_copy(update={"completed_at": datetime.now()})
            await self._on_message(item)
        else:
            raise ExecutionFailure(
                f"Agent '{self.agent.name}' yielded unsupported value of type "
                f"{type(item).__name__}"
            )

    async def _flush_parts(self) -> None:
        """Close the streamed parts into one output message."""
        if not self._pending_parts:
            return
        message = Message(
            role=self.role,
            parts=self._pending_parts,
            completed_at=datetime.now(),
        )
        self._pending_parts = []
        await self._on_message(message)


__all__ = ["AgentExecutor"]
