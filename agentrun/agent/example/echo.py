from agentrun.agent.base import agent
from agentrun.agent.context import Context
from agentrun.domain import Message


@agent(name="echo", description="Streams the input back, one part at a time.")
async def echo(input: list[Message], context: Context):
    for message in input:
        for part in message.parts:
            yield part
