"""
Shared fixtures: a fresh registry of test agents and a controller per test.
"""

import asyncio

import pytest

from agentrun.agent import AgentRegistry, Context, agent
from agentrun.agent.example.echo import echo
from agentrun.agent.example.password import password_generator
from agentrun.domain import AwaitRequest, Message, MessagePart
from agentrun.runtime import RunController


class AgentProbe:
    """Records what the test agents observed."""

    def __init__(self) -> None:
        self.answers: list[str] = []
        self.closed: list[str] = []
        self.started = asyncio.Event()
        self.release = asyncio.Event()


def build_test_agents(probe: AgentProbe):
    @agent(name="two_questions", description="Asks twice and keeps a tally")
    async def two_questions(input: list[Message], context: Context):
        tally = len(input)
        first = yield AwaitRequest(message=Message.text("First?", role="agent"))
        tally += 1
        probe.answers.append(str(first))
        yield MessagePart(content=f"got {first}")
        second = yield AwaitRequest(message=Message.text("Second?", role="agent"))
        tally += 1
        probe.answers.append(str(second))
        yield Message.text(f"{first}+{second} tally={tally}", role="agent")

    @agent(name="failing")
    async def failing(input: list[Message], context: Context):
        yield "partial"
        raise ValueError("Simulated agent failure")

    @agent(name="blocking")
    async def blocking(input: list[Message], context: Context):
        try:
            probe.started.set()
            await probe.release.wait()
            yield "released"
        finally:
            probe.closed.append(context.run_id)

    @agent(name="parked")
    async def parked(input: list[Message], context: Context):
        try:
            yield AwaitRequest(message=Message.text("Waiting", role="agent"))
            yield "resumed"
        finally:
            probe.closed.append(context.run_id)

    @agent(name="coroutine")
    async def coroutine(input):
        return Message.text("done", role="agent")

    return [two_questions, failing, blocking, parked, coroutine]


@pytest.fixture
def probe():
    return AgentProbe()


@pytest.fixture
def registry(probe):
    registry = AgentRegistry()
    registry.register(password_generator)
    registry.register(echo)
    for test_agent in build_test_agents(probe):
        registry.register(test_agent)
    return registry


@pytest.fixture
def controller(registry):
    return RunController(registry)
