"""
Runtime module - run lifecycle, agent driving, and event streaming.
"""

from .controller import RunController, normalize_input
from .executor import AgentExecutor
from .lifecycle import TRANSITIONS, can_transition, transition
from .wire import Wire

__all__ = [
    "RunController",
    "AgentExecutor",
    "Wire",
    "TRANSITIONS",
    "can_transition",
    "transition",
    "normalize_input",
]
