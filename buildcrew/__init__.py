"""
buildcrew: multi-agent build orchestration.

Takes one natural-language requirement and drives a fixed team of agents
(architect, frontend, backend, database, code generator, devops) to a
complete project description.
"""

from .exceptions import (
    AgentExecutionError,
    AlreadyRunningError,
    BuildCrewError,
    DependencyNotReadyError,
    DuplicateWriteError,
    GenerationError,
    InvalidTransitionError,
    MalformationError,
    ValidationError,
)
from .generation import GenerationService, LiteLLMGenerationService
from .models import (
    Agent,
    AgentId,
    AgentStatus,
    GeneratedFile,
    Message,
    MessageType,
    ProjectState,
    RunEvent,
    RunState,
)
from .workflows.pipeline import Orchestrator

__version__ = "0.1.0"

__all__ = [
    "Orchestrator",
    "GenerationService",
    "LiteLLMGenerationService",
    # Models
    "Agent",
    "AgentId",
    "AgentStatus",
    "GeneratedFile",
    "Message",
    "MessageType",
    "ProjectState",
    "RunEvent",
    "RunState",
    # Errors
    "BuildCrewError",
    "ValidationError",
    "AlreadyRunningError",
    "GenerationError",
    "MalformationError",
    "AgentExecutionError",
    "InvalidTransitionError",
    "DependencyNotReadyError",
    "DuplicateWriteError",
]
