"""
Domain module - Pure domain models with no runtime dependencies.

This module contains messages, runs, and lifecycle events.
"""

# Messages
from .messages import AwaitRequest, AwaitResume, Message, MessagePart

# Runs
from .run import Error, ErrorCode, Run, RunStatus

# Events
from .events import (
    STATUS_EVENTS,
    TERMINAL_EVENTS,
    EventType,
    RunEvent,
    create_message_completed_event,
    create_message_part_event,
    create_status_event,
)

__all__ = [
    # Messages
    "Message",
    "MessagePart",
    "AwaitRequest",
    "AwaitResume",
    # Runs
    "Run",
    "RunStatus",
    "Error",
    "ErrorCode",
    # Events
    "RunEvent",
    "EventType",
    "STATUS_EVENTS",
    "TERMINAL_EVENTS",
    "create_status_event",
    "create_message_part_event",
    "create_message_completed_event",
]
