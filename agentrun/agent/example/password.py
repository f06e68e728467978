"""
Password generator that asks for confirmation before generating.

The run awaits after the first prompt; answering "yes" produces a
random password, anything else declines.
"""

import secrets
import string

from agentrun.agent.base import agent
from agentrun.agent.context import Context
from agentrun.domain import AwaitRequest, Message

ALPHABET = string.ascii_letters + string.digits + "!@#$%^&*"
PASSWORD_LENGTH = 16

CONFIRMATION_PROMPT = (
    "I can generate a password for you. Do you want me to do that?"
)
DECLINED = "Password generation declined."


def generate_password(length: int = PASSWORD_LENGTH) -> str:
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


@agent(
    name="password_generator",
    description="Generates a random password after asking for confirmation.",
)
async def password_generator(input: list[Message], context: Context):
    answer = yield AwaitRequest(
        message=Message.text(CONFIRMATION_PROMPT, role="agent/password_generator")
    )

    if answer is not None and str(answer).strip().lower() == "yes":
        password = generate_password()
        context.logger.info("password_generated", length=len(password))
        yield Message.text(
            f"Generated password: {password}", role="agent/password_generator"
        )
    else:
        yield Message.text(DECLINED, role="agent/password_generator")
