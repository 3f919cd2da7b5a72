"""Run-scoped state shared between the orchestrator and its agents."""

from .events import EventHub
from .message_bus import MessageBus
from .project_state import FIELD_PRODUCERS, ProjectStateAccumulator
from .status_tracker import ALLOWED_TRANSITIONS, StatusTracker


__all__ = [
    "ALLOWED_TRANSITIONS",
    "EventHub",
    "FIELD_PRODUCERS",
    "MessageBus",
    "ProjectStateAccumulator",
    "StatusTracker",
]
