from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


class MessagePart(BaseModel):
    """Atomic unit of message content. Named parts are artifacts."""

    name: str | None = None
    content_type: str = "text/plain"
    content: str | None = None
    content_url: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class Message(BaseModel):
    role: str = "user"  # "user" | "agent" | "agent/<name>"
    parts: list[MessagePart] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)
    completed_at: datetime | None = None

    @classmethod
    def text(cls, content: str, role: str = "user") -> "Message":
        """Build a single-part text message."""
        return cls(role=role, parts=[MessagePart(content=content)])

    def __str__(self) -> str:
        return "".join(
            part.content
            for part in self.parts
            if part.content is not None and part.content_type.startswith("text/")
        )

    def __add__(self, other: "Message") -> "Message":
        if not isinstance(other, Message):
            return NotImplemented
        if self.role != other.role:
            raise ValueError("Message roles must match for concatenation")
        return Message(
            role=self.role,
            parts=self.parts + other.parts,
            created_at=self.created_at,
            completed_at=other.completed_at,
        )


class AwaitRequest(BaseModel):
    """Emitted by an agent to suspend until an external party answers."""

    type: Literal["message"] = "message"
    message: Message


class AwaitResume(BaseModel):
    """External answer to the outstanding AwaitRequest of a run."""

    type: Literal["message"] = "message"
    message: Message
