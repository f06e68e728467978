"""
Tests for AgentExecutor: stepping an agent between suspension points.
"""

from unittest.mock import patch

import pytest

from agentrun.agent import Context, agent
from agentrun.domain import AwaitRequest, Message, MessagePart
from agentrun.exceptions import ExecutionFailure
from agentrun.runtime.executor import AgentExecutor


class Collector:
    def __init__(self):
        self.parts: list[MessagePart] = []
        self.messages: list[Message] = []

    def executor(self, target, input=None) -> AgentExecutor:
        return AgentExecutor(
            target,
            input or [Message.text("hi")],
            Context(run_id="run-1", agent_name=target.name),
            on_part=self.parts.append,
            on_message=self.on_message,
        )

    async def on_message(self, message: Message) -> None:
        self.messages.append(message)


@agent(name="counter")
async def counter(input, context):
    total = 0
    while True:
        answer = yield AwaitRequest(message=Message.text(f"total={total}", role="agent"))
        if str(answer) == "stop":
            break
        total += int(str(answer))
    yield f"final={total}"


@pytest.fixture
def collector():
    return Collector()


@pytest.mark.asyncio
async def test_locals_survive_suspension(collector):
    executor = collector.executor(counter)

    first = await executor.step()
    assert str(first.message) == "total=0"

    await executor.step(Message.text("2"))
    after = await executor.step(Message.text("5"))
    assert str(after.message) == "total=7"

    assert await executor.step(Message.text("stop")) is None
    assert executor.finished
    assert [str(m) for m in collector.messages] == ["final=7"]


@pytest.mark.asyncio
async def test_parts_are_grouped_into_one_message(collector):
    @agent(name="streamer")
    async def streamer(input, context):
        yield "Hel"
        yield MessagePart(content="lo")
        yield Message.text("second", role="agent")

    executor = collector.executor(streamer)
    assert await executor.step() is None

    assert [p.content for p in collector.parts] == ["Hel", "lo"]
    assert [str(m) for m in collector.messages] == ["Hello", "second"]
    assert collector.messages[0].role == "agent/streamer"
    assert all(m.completed_at is not None for m in collector.messages)


@pytest.mark.asyncio
async def test_parts_are_flushed_before_await(collector):
    @agent(name="asker")
    async def asker(input, context):
        yield "thinking"
        yield AwaitRequest(message=Message.text("ok?", role="agent"))

    executor = collector.executor(asker)
    assert isinstance(await executor.step(), AwaitRequest)
    assert [str(m) for m in collector.messages] == ["thinking"]


@pytest.mark.asyncio
async def test_agent_error_is_wrapped_and_logged(collector):
    @agent(name="broken")
    async def broken(input, context):
        yield "partial"
        raise RuntimeError("boom")

    executor = collector.executor(broken)

    with patch("agentrun.runtime.executor.logger") as mock_logger:
        with pytest.raises(ExecutionFailure) as exc_info:
            await executor.step()

    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert executor.finished
    assert [str(m) for m in collector.messages] == ["partial"]

    call_args = mock_logger.error.call_args
    assert call_args[0][0] == "agent_execution_failed"
    assert call_args[1]["agent_name"] == "broken"
    assert call_args[1]["exc_info"] is True


@pytest.mark.asyncio
async def test_unsupported_yield_fails(collector):
    @agent(name="odd")
    async def odd(input, context):
        yield 42

    executor = collector.executor(odd)
    with pytest.raises(ExecutionFailure, match="unsupported value"):
        await executor.step()


@pytest.mark.asyncio
async def test_step_after_exhaustion_raises(collector):
    executor = collector.executor(counter)
    await executor.step()
    await executor.step(Message.text("stop"))

    with pytest.raises(RuntimeError):
        await executor.step()


@pytest.mark.asyncio
async def test_aclose_runs_agent_cleanup(collector):
    cleaned = []

    @agent(name="cleanup")
    async def cleanup(input, context):
        try:
            yield AwaitRequest(message=Message.text("wait", role="agent"))
        finally:
            cleaned.append(context.run_id)

    executor = collector.executor(cleanup)
    await executor.step()
    await executor.aclose()

    assert cleaned == ["run-1"]
    assert executor.finished


@pytest.mark.asyncio
async def test_single_argument_coroutine_agent(collector):
    @agent(name="plain")
    async def plain(input):
        return Message.text(f"{len(input)} messages", role="agent")

    executor = collector.executor(plain, [Message.text("a"), Message.text("b")])
    assert await executor.step() is None
    assert [str(m) for m in collector.messages] == ["2 messages"]
