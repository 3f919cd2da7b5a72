"""
Error taxonomy for build orchestration.

Caller errors (ValidationError, AlreadyRunningError) are raised before a run
starts. Generation failures (GenerationError, MalformationError) come from a
single agent call and reach the caller wrapped in AgentExecutionError.
InvariantError subclasses signal programming errors inside the core.
"""

from typing import Optional


class BuildCrewError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(BuildCrewError, ValueError):
    """The requirement handed to run() is empty or otherwise unusable."""


class AlreadyRunningError(BuildCrewError, RuntimeError):
    """run() was called while a previous run on the same orchestrator is in progress."""


class AgentFailure(BuildCrewError):
    """A single agent call failed."""


class GenerationError(AgentFailure):
    """The Generation Service call itself failed (network, auth, quota, ...)."""


class MalformationError(AgentFailure):
    """The Generation Service answered, but the payload failed structural validation."""


class AgentExecutionError(BuildCrewError):
    """
    Terminal error of a failed run.

    Carries the name of the phase that failed and the agent that ran it; the
    originating AgentFailure is available as ``cause`` (and ``__cause__``).
    """

    def __init__(self, phase: str, agent_id: str, cause: AgentFailure):
        super().__init__(f"Phase '{phase}' failed: {cause}")
        self.phase = phase
        self.agent_id = agent_id
        self.cause = cause


class InvariantError(BuildCrewError, RuntimeError):
    """Internal invariant violated; indicates a bug, not a user-facing condition."""


class InvalidTransitionError(InvariantError):
    """An agent status change is not reachable from the agent's current status."""

    def __init__(self, agent_id: str, current: str, target: str, detail: Optional[str] = None):
        message = f"Agent '{agent_id}' cannot move from {current} to {target}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.agent_id = agent_id
        self.current = current
        self.target = target


class DependencyNotReadyError(InvariantError):
    """A project field was read before its producing phase completed."""


class DuplicateWriteError(InvariantError):
    """A project field was written twice in the same run."""
