"""
Tests for the async HTTP client against the ASGI app.
"""

import httpx
import pytest
import pytest_asyncio

from agentrun.client import Client
from agentrun.api.app import create_app
from agentrun.domain import RunStatus
from agentrun.exceptions import InvalidRunStateError, NotFoundError
from agentrun.runtime import RunController


@pytest.fixture
def app(registry):
    return create_app(controller=RunController(registry))


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with Client("http://testserver", transport=transport) as client:
        yield client


@pytest.mark.asyncio
async def test_agents(client):
    manifests = await client.agents()
    assert "password_generator" in [m.name for m in manifests]

    echo = await client.agent("echo")
    assert echo.name == "echo"


@pytest.mark.asyncio
async def test_password_flow(client):
    run = await client.run_sync("password_generator", "Generate a password")
    assert run.status == RunStatus.AWAITING
    assert str(run.await_request.message).endswith("Do you want me to do that?")

    run = await client.run_resume_sync(run.id, "yes")
    assert run.status == RunStatus.COMPLETED
    assert str(run.final_message).startswith("Generated password: ")

    events = await client.run_events(run.id)
    assert events[-1].type.value == "run.completed"


@pytest.mark.asyncio
async def test_cancel(client):
    run = await client.run_sync("parked", "x")
    cancelled = await client.run_cancel(run.id)
    assert cancelled.status == RunStatus.CANCELLED

    status = await client.run_status(run.id)
    assert status.status == RunStatus.CANCELLED


@pytest.mark.asyncio
async def test_errors_map_to_exceptions(client):
    with pytest.raises(NotFoundError):
        await client.run_status("nope")

    run = await client.run_sync("echo", "x")
    with pytest.raises(InvalidRunStateError):
        await client.run_resume_sync(run.id, "yes")
