"""
Run routes with SSE streaming support.

Modes:
- sync: drive the run to its next suspension or completion, return the run
- async: return as soon as the run is in progress; poll or subscribe
- stream: SSE of the run's events until the run awaits or ends
"""

import asyncio
from typing import AsyncGenerator

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sse_starlette.sse import EventSourceResponse

from agentrun.api.deps import get_controller
from agentrun.api.schemas import (
    ErrorResponse,
    PaginatedResponse,
    RunCreateRequest,
    RunResponse,
    RunResumeRequest,
)
from agentrun.domain import EventType, RunEvent, RunStatus
from agentrun.exceptions import (
    ExecutionFailure,
    InvalidRunStateError,
    RunCancelledError,
)
from agentrun.runtime import RunController
from agentrun.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/runs",
    responses={
        404: {"model": ErrorResponse, "description": "Unknown run or agent"},
        409: {"model": ErrorResponse, "description": "Run is in the wrong status"},
    },
)

SSE_HEADERS = {
    # Prevent proxy buffering
    "X-Accel-Buffering": "no",
}


@router.post("", response_model=RunResponse)
async def create_run(
    request: RunCreateRequest,
    controller: RunController = Depends(get_controller),
):
    """Start a run of an agent."""
    run = await controller.start_run(
        request.agent_name, request.input, session_id=request.session_id
    )

    if request.mode == "stream":
        # History first: run.created was published before any subscriber existed
        history = controller.events(run.id)
        events = controller.subscribe(run.id)
        await controller.run_in_background(run.id)
        return _event_source(controller, run.id, history, events)

    if request.mode == "async":
        run = await controller.run_in_background(run.id)
        return _accepted(run)

    try:
        await controller.advance(run.id)
    except (ExecutionFailure, RunCancelledError) as e:
        # Outcome is recorded on the run itself
        logger.info("run_not_completed", run_id=run.id, reason=str(e))
    return await controller.get_run(run.id)


@router.get("", response_model=PaginatedResponse[RunResponse])
async def list_runs(
    agent_name: str | None = None,
    run_status: RunStatus | None = Query(None, alias="status"),
    session_id: str | None = None,
    limit: int = 20,
    offset: int = 0,
    controller: RunController = Depends(get_controller),
):
    """List runs with filtering, newest first."""
    runs = await controller.list_runs(
        agent_name=agent_name,
        status=run_status,
        session_id=session_id,
        limit=limit,
        offset=offset,
    )
    return PaginatedResponse(total=len(runs), items=runs, limit=limit, offset=offset)


@router.get("/{run_id}", response_model=RunResponse)
async def get_run(run_id: str, controller: RunController = Depends(get_controller)):
    """Get run by ID."""
    return await controller.get_run(run_id)


@router.post("/{run_id}", response_model=RunResponse)
async def resume_run(
    run_id: str,
    request: RunResumeRequest,
    controller: RunController = Depends(get_controller),
):
    """Answer the outstanding await of a run."""
    if request.mode == "stream":
        run = await controller.get_run(run_id)
        if run.status != RunStatus.AWAITING:
            # Checked before subscribing so a rejected resume leaves no subscriber
            raise InvalidRunStateError(
                f"Cannot resume run '{run_id}' in status {run.status.value}"
            )
        events = controller.subscribe(run_id)
        await controller.resume_in_background(run_id, request.await_resume)
        return _event_source(controller, run_id, [], events)

    if request.mode == "async":
        run = await controller.resume_in_background(run_id, request.await_resume)
        return _accepted(run)

    try:
        await controller.submit_resume(run_id, request.await_resume)
    except (ExecutionFailure, RunCancelledError) as e:
        logger.info("run_not_completed", run_id=run_id, reason=str(e))
    return await controller.get_run(run_id)


@router.post(
    "/{run_id}/cancel",
    response_model=RunResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def cancel_run(run_id: str, controller: RunController = Depends(get_controller)):
    """Cancel a run. Cancelling a finished run returns it unchanged."""
    return await controller.cancel(run_id)


@router.get("/{run_id}/events", response_model=list[RunEvent])
async def list_run_events(
    run_id: str, controller: RunController = Depends(get_controller)
):
    """Event history of a run, in emission order."""
    return controller.events(run_id)


@router.get("/{run_id}/events/stream")
async def stream_run_events(
    run_id: str, controller: RunController = Depends(get_controller)
):
    """Live SSE subscription until the run ends."""
    events = controller.subscribe(run_id)
    return _event_source(controller, run_id, [], events, stop_on_await=False)


def _accepted(run: RunResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_202_ACCEPTED,
        content=run.model_dump(mode="json"),
    )


def _event_source(
    controller: RunController,
    run_id: str,
    history: list[RunEvent],
    events: AsyncGenerator[RunEvent, None],
    *,
    stop_on_await: bool = True,
) -> EventSourceResponse:
    return EventSourceResponse(
        _stream_events(controller, run_id, history, events, stop_on_await),
        sep="\n",
        headers=SSE_HEADERS,
    )


async def _stream_events(
    controller: RunController,
    run_id: str,
    history: list[RunEvent],
    events: AsyncGenerator[RunEvent, None],
    stop_on_await: bool,
):
    """
    Stream run events as SSE.

    In request-scoped streams the response ends when the run awaits; the
    answer arrives in a new request. A client that disconnects from a
    request-scoped stream cancels the run.
    """
    finished = False
    try:
        for event in history:
            yield event.to_sse()
        async for event in events:
            yield event.to_sse()
            if event.type.is_terminal:
                finished = True
                break
            if stop_on_await and event.type == EventType.RUN_AWAITING:
                finished = True
                break
    except asyncio.CancelledError:
        logger.info("run_stream_disconnected", run_id=run_id)
        raise
    finally:
        await events.aclose()
        if stop_on_await and not finished:
            await controller.cancel(run_id)
