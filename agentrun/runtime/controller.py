"""
RunController - lifecycle owner for agent runs.

Responsibilities:
- Create runs and keep one execution handle per run
- Drive the agent between suspension points (AgentExecutor)
- Apply status transitions (lifecycle) and publish them as events
- Fan events out to subscriber Wires and keep the event history
- Save run snapshots to the RunStore

Each run has a single logical thread of control. Status checks and the
transition that follows them never have an await in between, so a second
resume arriving while the run is in progress sees `in_progress` and is
rejected instead of queued.
"""

import asyncio
from dataclasses import dataclass, field
from typing import AsyncGenerator

from agentrun.agent.context import Context
from agentrun.agent.registry import AgentRegistry, get_registry
from agentrun.domain import (
    AwaitRequest,
    AwaitResume,
    Message,
    MessagePart,
    Run,
    RunEvent,
    RunStatus,
    create_message_completed_event,
    create_message_part_event,
    create_status_event,
)
from agentrun.exceptions import (
    AgentRunError,
    ExecutionFailure,
    InvalidRunStateError,
    NotFoundError,
    RunCancelledError,
)
from agentrun.runtime.executor import AgentExecutor
from agentrun.runtime.lifecycle import transition
from agentrun.runtime.wire import Wire
from agentrun.storage import InMemoryRunStore, RunStore
from agentrun.utils.logging import get_logger

logger = get_logger(__name__)

RunInput = str | Message | list[Message] | list[str]
RunResult = AwaitRequest | Message


@dataclass
class _RunHandle:
    """Mutable per-run execution state. Never shared between runs."""

    run: Run
    executor: AgentExecutor
    events: list[RunEvent] = field(default_factory=list)
    wires: list[Wire] = field(default_factory=list)
    task: asyncio.Task | None = None
    timeout_task: asyncio.Task | None = None
    cancel_requested: bool = False
    awaits: int = 0

    @property
    def last_event(self) -> RunEvent | None:
        return self.events[-1] if self.events else None


def normalize_input(input: RunInput) -> list[Message]:
    """Accept a string, a message, or a list of either."""
    if isinstance(input, (str, Message)):
        input = [input]
    return [Message.text(item) if isinstance(item, str) else item for item in input]


class RunController:
    """
    Owner of all runs of one server process.

    Usage:
        controller = RunController(registry)
        run = await controller.start_run("password_generator", "Generate one")
        result = await controller.advance(run.id)       # AwaitRequest
        result = await controller.submit_resume(
            run.id, AwaitResume(message=Message.text("yes"))
        )                                               # final Message
    """

    def __init__(
        self,
        registry: AgentRegistry | None = None,
        store: RunStore | None = None,
        *,
        await_timeout: float | None = None,
        event_queue_size: int = 0,
    ) -> None:
        """
        Initialize RunController.

        Args:
            registry: Agents available to start_run (defaults to the global registry)
            store: Run snapshot store (defaults to in-memory)
            await_timeout: Seconds a run may stay awaiting before it is cancelled;
                None waits forever
            event_queue_size: Per-subscriber pending event limit (0 = unlimited)
        """
        self.registry = registry or get_registry()
        self.store = store or InMemoryRunStore()
        self.await_timeout = await_timeout
        self.event_queue_size = event_queue_size
        self._handles: dict[str, _RunHandle] = {}

    # --- Public API --------------------------------------------------------------

    async def start_run(
        self,
        agent_name: str,
        input: RunInput,
        session_id: str | None = None,
    ) -> Run:
        """
        Create a run in `created` without executing the agent.

        Raises:
            NotFoundError: Unknown agent name
        """
        agent = self.registry.get(agent_name)
        messages = normalize_input(input)

        run = Run(agent_name=agent.name, session_id=session_id, input=messages)
        context = Context(run_id=run.id, agent_name=agent.name, session_id=session_id)
        executor = AgentExecutor(
            agent,
            messages,
            context,
            on_part=lambda part: self._on_part(handle, part),
            on_message=lambda message: self._on_message(handle, message),
        )
        handle = _RunHandle(run=run, executor=executor)
        self._handles[run.id] = handle

        self._publish(handle, create_status_event(run))
        await self._persist(handle)

        logger.info(
            "run_created",
            run_id=run.id,
            agent_name=agent.name,
            session_id=session_id,
            input_messages=len(messages),
        )
        return self._snapshot(handle)

    async def advance(self, run_id: str) -> RunResult:
        """
        Drive a newly created run to its first suspension or to completion.

        Returns:
            The AwaitRequest the run is waiting on, or the final Message

        Raises:
            NotFoundError: Unknown run id
            InvalidRunStateError: Run is not in `created`
            ExecutionFailure: The agent raised; the run is `failed`
            RunCancelledError: The run was cancelled while being driven
        """
        handle = self._get_handle(run_id)
        self._require_status(handle, RunStatus.CREATED, "advance")
        task = self._begin_drive(handle, None)
        return await self._join(handle, task)

    async def submit_resume(self, run_id: str, resume: AwaitResume) -> RunResult:
        """
        Answer the outstanding await of a run and drive it to the next
        suspension or to completion.

        Raises:
            NotFoundError: Unknown run id
            InvalidRunStateError: Run is not `awaiting`; run state is unchanged
            ExecutionFailure: The agent raised; the run is `failed`
            RunCancelledError: The run was cancelled while being driven
        """
        handle = self._get_handle(run_id)
        self._require_status(handle, RunStatus.AWAITING, "resume")
        self._check_resume(handle, resume)
        task = self._begin_drive(handle, resume.message)
        return await self._join(handle, task)

    async def run_in_background(self, run_id: str) -> Run:
        """Like advance(), but returns as soon as the run is `in_progress`."""
        handle = self._get_handle(run_id)
        self._require_status(handle, RunStatus.CREATED, "advance")
        self._begin_drive(handle, None)
        return self._snapshot(handle)

    async def resume_in_background(self, run_id: str, resume: AwaitResume) -> Run:
        """Like submit_resume(), but returns as soon as the run is `in_progress`."""
        handle = self._get_handle(run_id)
        self._require_status(handle, RunStatus.AWAITING, "resume")
        self._check_resume(handle, resume)
        self._begin_drive(handle, resume.message)
        return self._snapshot(handle)

    async def cancel(self, run_id: str) -> Run:
        """
        Cancel a run. Cancelling a terminal run is a no-op.

        Raises:
            NotFoundError: Unknown run id
        """
        handle = self._get_handle(run_id)
        if handle.run.status.is_terminal:
            logger.debug(
                "run_cancel_ignored", run_id=run_id, status=handle.run.status.value
            )
            return self._snapshot(handle)

        handle.cancel_requested = True
        self._stop_timeout(handle)

        if handle.task is not None and not handle.task.done():
            handle.task.cancel()
            try:
                await handle.task
            except (asyncio.CancelledError, AgentRunError):
                pass

        if not handle.run.status.is_terminal:
            # created, awaiting, or a drive cancelled before it started
            await self._close_executor(handle)
            self._transition(handle, RunStatus.CANCELLED)
            await self._persist(handle)

        logger.info("run_cancelled", run_id=run_id, status=handle.run.status.value)
        return self._snapshot(handle)

    def subscribe(self, run_id: str) -> AsyncGenerator[RunEvent, None]:
        """
        Subscribe to a run's events from now on.

        The stream ends after the terminal event. A terminal run yields
        its terminal event once.

        Raises:
            NotFoundError: Unknown run id
        """
        handle = self._get_handle(run_id)
        wire = Wire(maxsize=self.event_queue_size)
        if handle.run.status.is_terminal:
            if handle.last_event is not None:
                wire.write(handle.last_event)
            wire.close()
        else:
            handle.wires.append(wire)
        logger.debug("run_subscribed", run_id=run_id, subscribers=len(handle.wires))
        return self._read(handle, wire)

    async def _read(
        self, handle: _RunHandle, wire: Wire
    ) -> AsyncGenerator[RunEvent, None]:
        try:
            async for event in wire.read():
                yield event
        finally:
            if wire in handle.wires:
                handle.wires.remove(wire)

    async def get_run(self, run_id: str) -> Run:
        """
        Raises:
            NotFoundError: Unknown run id
        """
        handle = self._handles.get(run_id)
        if handle is not None:
            return self._snapshot(handle)
        run = await self.store.get_run(run_id)
        if run is None:
            raise NotFoundError(f"Run '{run_id}' not found")
        return run

    async def list_runs(
        self,
        agent_name: str | None = None,
        status: RunStatus | None = None,
        session_id: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Run]:
        return await self.store.list_runs(
            agent_name=agent_name,
            status=status,
            session_id=session_id,
            limit=limit,
            offset=offset,
        )

    def events(self, run_id: str) -> list[RunEvent]:
        """Full event history of a live run, in emission order."""
        return list(self._get_handle(run_id).events)

    async def wait(self, run_id: str) -> Run:
        """Wait until the run is no longer being driven."""
        handle = self._get_handle(run_id)
        if handle.task is not None and not handle.task.done():
            try:
                await asyncio.shield(handle.task)
            except (asyncio.CancelledError, AgentRunError):
                pass
        return self._snapshot(handle)

    async def release(self, run_id: str) -> None:
        """
        Drop the in-memory handle of a terminal run. Its snapshot stays
        in the store; the event history is discarded.

        Raises:
            NotFoundError: Unknown run id
            InvalidRunStateError: Run is not terminal
        """
        handle = self._get_handle(run_id)
        if not handle.run.status.is_terminal:
            raise InvalidRunStateError(
                f"Run '{run_id}' is {handle.run.status.value} and cannot be released"
            )
        del self._handles[run_id]
        logger.debug("run_released", run_id=run_id)

    async def shutdown(self) -> None:
        """Cancel every run that has not finished."""
        live = [
            run_id
            for run_id, handle in self._handles.items()
            if not handle.run.status.is_terminal
        ]
        for run_id in live:
            await self.cancel(run_id)
        logger.info("run_controller_shutdown", cancelled=len(live))

    # --- Driving -----------------------------------------------------------------

    def _begin_drive(self, handle: _RunHandle, value: Message | None) -> asyncio.Task:
        self._stop_timeout(handle)
        self._transition(handle, RunStatus.IN_PROGRESS)
        handle.task = asyncio.create_task(self._drive(handle, value))
        handle.task.add_done_callback(_consume_task_result)
        return handle.task

    async def _join(self, handle: _RunHandle, task: asyncio.Task) -> RunResult:
        try:
            return await task
        except asyncio.CancelledError:
            if handle.cancel_requested:
                raise RunCancelledError(f"Run '{handle.run.id}' was cancelled") from None
            raise

    async def _drive(self, handle: _RunHandle, value: Message | None) -> RunResult:
        run = handle.run
        # First thing in the task so the in_progress snapshot precedes any later one
        await self._persist(handle)

        try:
            await_request = await handle.executor.step(value)
        except asyncio.CancelledError:
            await self._finish_cancelled(handle)
            raise
        except ExecutionFailure as e:
            run.error = e.to_error()
            self._transition(handle, RunStatus.FAILED)
            await self._close_executor(handle)
            await self._persist(handle)
            logger.error("run_failed", run_id=run.id, error=str(e))
            raise

        if handle.cancel_requested:
            # The agent swallowed the cancellation; it still ends cancelled
            await self._finish_cancelled(handle)
            raise asyncio.CancelledError()

        if await_request is not None:
            handle.awaits += 1
            self._transition(handle, RunStatus.AWAITING, await_request=await_request)
            self._start_timeout(handle)
            await self._persist(handle)
            logger.info("run_awaiting", run_id=run.id, awaits=handle.awaits)
            return await_request

        self._transition(handle, RunStatus.COMPLETED)
        await self._persist(handle)
        logger.info("run_completed", run_id=run.id, output_messages=len(run.output))
        return run.final_message or Message(role=handle.executor.role)

    async def _finish_cancelled(self, handle: _RunHandle) -> None:
        if handle.run.status.is_terminal:
            return
        await self._close_executor(handle)
        self._transition(handle, RunStatus.CANCELLED)
        await self._persist(handle)

    async def _close_executor(self, handle: _RunHandle) -> None:
        try:
            await handle.executor.aclose()
        except Exception as e:
            logger.warning(
                "agent_close_failed", run_id=handle.run.id, error=str(e), exc_info=True
            )

    # --- Await timeout -----------------------------------------------------------

    def _start_timeout(self, handle: _RunHandle) -> None:
        if self.await_timeout is None:
            return
        handle.timeout_task = asyncio.create_task(
            self._expire_await(handle.run.id, handle.awaits)
        )

    def _stop_timeout(self, handle: _RunHandle) -> None:
        if handle.timeout_task is not None and not handle.timeout_task.done():
            if handle.timeout_task is not asyncio.current_task():
                handle.timeout_task.cancel()
        handle.timeout_task = None

    async def _expire_await(self, run_id: str, awaits: int) -> None:
        await asyncio.sleep(self.await_timeout)
        handle = self._handles.get(run_id)
        if handle is None:
            return
        if handle.run.status == RunStatus.AWAITING and handle.awaits == awaits:
            logger.warning("run_await_expired", run_id=run_id, timeout=self.await_timeout)
            await self.cancel(run_id)

    # --- State & events ----------------------------------------------------------

    def _transition(
        self,
        handle: _RunHandle,
        target: RunStatus,
        await_request: AwaitRequest | None = None,
    ) -> None:
        previous = handle.run.status
        transition(handle.run, target, await_request=await_request)
        self._publish(handle, create_status_event(handle.run))
        logger.debug(
            "run_status_changed",
            run_id=handle.run.id,
            previous=previous.value,
            status=target.value,
        )

    def _publish(self, handle: _RunHandle, event: RunEvent) -> None:
        event.sequence = len(handle.events) + 1
        handle.events.append(event)

        # The terminal event is never dropped so every stream ends with the outcome
        for wire in handle.wires:
            if not wire.write(event, force=event.type.is_terminal):
                logger.warning(
                    "run_event_dropped",
                    run_id=handle.run.id,
                    event_type=event.type.value,
                    sequence=event.sequence,
                )

        if event.type.is_terminal:
            for wire in handle.wires:
                wire.close()
            handle.wires.clear()

    def _on_part(self, handle: _RunHandle, part: MessagePart) -> None:
        self._publish(handle, create_message_part_event(handle.run.id, part))

    async def _on_message(self, handle: _RunHandle, message: Message) -> None:
        handle.run.output.append(message)
        self._publish(handle, create_message_completed_event(handle.run.id, message))
        await self._persist(handle)

    async def _persist(self, handle: _RunHandle) -> None:
        await self.store.save_run(handle.run)

    # --- Helpers -----------------------------------------------------------------

    def _get_handle(self, run_id: str) -> _RunHandle:
        handle = self._handles.get(run_id)
        if handle is None:
            raise NotFoundError(f"Run '{run_id}' not found")
        return handle

    @staticmethod
    def _require_status(handle: _RunHandle, status: RunStatus, operation: str) -> None:
        if handle.run.status != status:
            raise InvalidRunStateError(
                f"Cannot {operation} run '{handle.run.id}' "
                f"in status {handle.run.status.value}"
            )

    @staticmethod
    def _check_resume(handle: _RunHandle, resume: AwaitResume) -> None:
        await_request = handle.run.await_request
        if await_request is None or await_request.type != resume.type:
            raise InvalidRunStateError(
                f"Resume of type '{resume.type}' does not match the await "
                f"of run '{handle.run.id}'"
            )

    @staticmethod
    def _snapshot(handle: _RunHandle) -> Run:
        return handle.run.model_copy(deep=True)


def _consume_task_result(task: asyncio.Task) -> None:
    """Mark background drive failures as retrieved; they live on the run."""
    if not task.cancelled():
        task.exception()


__all__ = ["RunController", "normalize_input"]
