"""
Async HTTP client for an agentrun server.

Used by the external party of a run: start it, watch it await, answer
the await, or cancel it.

    async with Client("http://localhost:8000") as client:
        run = await client.run_sync("password_generator", "Generate a password")
        if run.status == RunStatus.AWAITING:
            run = await client.run_resume_sync(run.id, "yes")
"""

from typing import Any

import httpx

from agentrun.agent import AgentManifest
from agentrun.domain import AwaitResume, Message, Run, RunEvent
from agentrun.exceptions import AgentRunError, InvalidRunStateError, NotFoundError
from agentrun.runtime.controller import RunInput, normalize_input
from agentrun.utils.logging import get_logger

logger = get_logger(__name__)

STATUS_ERRORS: dict[int, type[AgentRunError]] = {
    404: NotFoundError,
    409: InvalidRunStateError,
}


class Client:
    """Async client for the runs API."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            base_url: Server base URL
            timeout: Request timeout in seconds
            transport: Custom httpx transport (e.g. ASGITransport in tests)
        """
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    # --- Agents ------------------------------------------------------------------

    async def agents(self) -> list[AgentManifest]:
        data = await self._request("GET", "/agents")
        return [AgentManifest.model_validate(item) for item in data["items"]]

    async def agent(self, name: str) -> AgentManifest:
        return AgentManifest.model_validate(await self._request("GET", f"/agents/{name}"))

    # --- Runs --------------------------------------------------------------------

    async def run_sync(
        self, agent_name: str, input: RunInput, session_id: str | None = None
    ) -> Run:
        """Start a run and wait until it awaits or finishes."""
        return await self._create_run(agent_name, input, session_id, "sync")

    async def run_async(
        self, agent_name: str, input: RunInput, session_id: str | None = None
    ) -> Run:
        """Start a run and return while it is in progress."""
        return await self._create_run(agent_name, input, session_id, "async")

    async def run_status(self, run_id: str) -> Run:
        return Run.model_validate(await self._request("GET", f"/runs/{run_id}"))

    async def run_resume_sync(self, run_id: str, answer: str | Message) -> Run:
        """Answer the run's await and wait until it awaits again or finishes."""
        return await self._resume_run(run_id, answer, "sync")

    async def run_resume_async(self, run_id: str, answer: str | Message) -> Run:
        return await self._resume_run(run_id, answer, "async")

    async def run_cancel(self, run_id: str) -> Run:
        return Run.model_validate(await self._request("POST", f"/runs/{run_id}/cancel"))

    async def run_events(self, run_id: str) -> list[RunEvent]:
        data = await self._request("GET", f"/runs/{run_id}/events")
        return [RunEvent.model_validate(item) for item in data]

    # --- Internals ---------------------------------------------------------------

    async def _create_run(
        self, agent_name: str, input: RunInput, session_id: str | None, mode: str
    ) -> Run:
        payload = {
            "agent_name": agent_name,
            "input": [m.model_dump(mode="json") for m in normalize_input(input)],
            "session_id": session_id,
            "mode": mode,
        }
        return Run.model_validate(await self._request("POST", "/runs", json=payload))

    async def _resume_run(self, run_id: str, answer: str | Message, mode: str) -> Run:
        message = Message.text(answer) if isinstance(answer, str) else answer
        payload = {
            "await_resume": AwaitResume(message=message).model_dump(mode="json"),
            "mode": mode,
        }
        return Run.model_validate(
            await self._request("POST", f"/runs/{run_id}", json=payload)
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        logger.debug("http_request", method=method, path=path)
        response = await self._client.request(method, path, **kwargs)

        if response.is_error:
            error_cls = STATUS_ERRORS.get(response.status_code, AgentRunError)
            try:
                message = response.json()["error"]["message"]
            except (ValueError, KeyError, TypeError):
                message = response.text
            logger.warning(
                "http_request_failed",
                method=method,
                path=path,
                status_code=response.status_code,
                error=message,
            )
            raise error_cls(message)

        return response.json()


__all__ = ["Client"]
