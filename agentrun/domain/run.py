from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

from .messages import AwaitRequest, Message


class RunStatus(str, Enum):
    CREATED = "created"
    IN_PROGRESS = "in_progress"
    AWAITING = "awaiting"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.CANCELLED)


class ErrorCode(str, Enum):
    SERVER_ERROR = "server_error"
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"


class Error(BaseModel):
    code: ErrorCode = ErrorCode.SERVER_ERROR
    message: str


class Run(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    agent_name: str
    session_id: str | None = None

    status: RunStatus = RunStatus.CREATED
    input: list[Message] = Field(default_factory=list)
    output: list[Message] = Field(default_factory=list)
    await_request: AwaitRequest | None = None
    error: Error | None = None

    created_at: datetime = Field(default_factory=datetime.now)
    finished_at: datetime | None = None

    @property
    def final_message(self) -> Message | None:
        return self.output[-1] if self.output else None
