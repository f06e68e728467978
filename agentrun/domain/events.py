"""
Event protocol for run lifecycle streaming.

Events describe state transitions and output of a single Run. Clients
receive them over SSE or from the run's event history.
"""

import json
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from .messages import AwaitRequest, Message, MessagePart
from .run import Error, Run, RunStatus


class EventType(str, Enum):
    """Event types for run streaming"""

    # Run-level events
    RUN_CREATED = "run.created"
    RUN_IN_PROGRESS = "run.in_progress"
    RUN_AWAITING = "run.awaiting"
    RUN_COMPLETED = "run.completed"
    RUN_FAILED = "run.failed"
    RUN_CANCELLED = "run.cancelled"

    # Output events
    MESSAGE_PART = "message.part"
    MESSAGE_COMPLETED = "message.completed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_EVENTS


TERMINAL_EVENTS = frozenset(
    {EventType.RUN_COMPLETED, EventType.RUN_FAILED, EventType.RUN_CANCELLED}
)

STATUS_EVENTS: dict[RunStatus, EventType] = {
    RunStatus.CREATED: EventType.RUN_CREATED,
    RunStatus.IN_PROGRESS: EventType.RUN_IN_PROGRESS,
    RunStatus.AWAITING: EventType.RUN_AWAITING,
    RunStatus.COMPLETED: EventType.RUN_COMPLETED,
    RunStatus.FAILED: EventType.RUN_FAILED,
    RunStatus.CANCELLED: EventType.RUN_CANCELLED,
}


class RunEvent(BaseModel):
    """
    Unified event for run streaming.

    Run-level events carry a snapshot of the run after the transition.
    `run.awaiting` additionally carries the await request, `run.failed`
    the error detail; output events carry the message or part.
    """

    type: EventType
    run_id: str
    sequence: int = 0
    timestamp: datetime = Field(default_factory=datetime.now)

    run: Run | None = None
    message: Message | None = None
    part: MessagePart | None = None
    await_request: AwaitRequest | None = None
    error: Error | None = None

    def to_sse(self) -> dict[str, str]:
        """Convert to the dict form accepted by sse-starlette."""
        data = self.model_dump(mode="json", exclude_none=True)
        return {"event": self.type.value, "data": json.dumps(data)}


# ============================================================================
# Event Factory Functions
# ============================================================================


def create_status_event(run: Run) -> RunEvent:
    """Create the run-level event matching the run's current status"""
    return RunEvent(
        type=STATUS_EVENTS[run.status],
        run_id=run.id,
        run=run.model_copy(deep=True),
        await_request=run.await_request if run.status == RunStatus.AWAITING else None,
        error=run.error if run.status == RunStatus.FAILED else None,
    )


def create_message_part_event(run_id: str, part: MessagePart) -> RunEvent:
    return RunEvent(type=EventType.MESSAGE_PART, run_id=run_id, part=part)


def create_message_completed_event(run_id: str, message: Message) -> RunEvent:
    return RunEvent(type=EventType.MESSAGE_COMPLETED, run_id=run_id, message=message)
