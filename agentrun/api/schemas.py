"""
Pydantic schemas for API requests and responses.
"""

from datetime import datetime
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, Field

from agentrun.domain import AwaitResume, Message, Run

T = TypeVar("T")

RunMode = Literal["sync", "async", "stream"]


class PaginatedResponse(BaseModel, Generic[T]):
    """Paginated response."""

    total: int
    items: list[T]
    limit: int = 20
    offset: int = 0


class ErrorBody(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Error response."""

    error: ErrorBody


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: datetime = Field(default_factory=datetime.now)


class RunCreateRequest(BaseModel):
    agent_name: str
    input: list[Message] = Field(min_length=1)
    session_id: str | None = None
    mode: RunMode = "sync"


class RunResumeRequest(BaseModel):
    await_resume: AwaitResume
    mode: RunMode = "sync"


RunResponse = Run
