"""
Agent lifecycle tracking.

Each agent moves idle -> working -> (completed | error) within a run. The
only other edge is working -> working, used to advance progress, which may
never decrease. reset() is the single way back to idle.
"""

import logging
from typing import Callable, Dict, Iterable, Optional, Tuple

from ..exceptions import InvalidTransitionError
from ..models import AGENT_ROSTER, Agent, AgentId, AgentStatus, RunEvent

logger = logging.getLogger(__name__)


ALLOWED_TRANSITIONS: Dict[AgentStatus, frozenset] = {
    AgentStatus.idle: frozenset({AgentStatus.working}),
    AgentStatus.working: frozenset({AgentStatus.working, AgentStatus.completed, AgentStatus.error}),
    AgentStatus.completed: frozenset(),
    AgentStatus.error: frozenset(),
}


class StatusTracker:
    """Holds per-agent status and progress; the only writer of Agent state."""

    def __init__(
        self,
        roster: Iterable[Agent] = AGENT_ROSTER,
        on_change: Optional[Callable[[RunEvent], None]] = None,
    ):
        self._roster: Tuple[Agent, ...] = tuple(roster)
        self._on_change = on_change
        self._agents: Dict[AgentId, Agent] = {}
        self.reset()

    def reset(self) -> None:
        """Put every agent back to idle with zero progress."""
        self._agents = {
            agent.id: agent.model_copy(update={"status": AgentStatus.idle, "progress": 0})
            for agent in self._roster
        }

    def get(self, agent_id: AgentId) -> Agent:
        return self._agents[AgentId(agent_id)]

    def transition(
        self,
        agent_id: AgentId,
        status: AgentStatus,
        progress: Optional[int] = None,
    ) -> Agent:
        """
        Apply a status change.

        Args:
            agent_id: Agent to update
            status: Target status
            progress: New progress. When omitted, "completed" uses 100 and the
                other statuses keep the current value.

        Returns:
            The updated Agent snapshot

        Raises:
            InvalidTransitionError: If the target is unreachable from the current
                status or the progress value breaks the progress rules
        """
        agent_id = AgentId(agent_id)
        status = AgentStatus(status)
        current = self._agents[agent_id]

        if status not in ALLOWED_TRANSITIONS[current.status]:
            raise InvalidTransitionError(agent_id.value, current.status.value, status.value)

        if progress is None:
            progress = 100 if status == AgentStatus.completed else current.progress

        if not 0 <= progress <= 100:
            raise InvalidTransitionError(
                agent_id.value, current.status.value, status.value,
                f"progress {progress} outside [0, 100]",
            )
        if status == AgentStatus.completed and progress != 100:
            raise InvalidTransitionError(
                agent_id.value, current.status.value, status.value,
                "completed agents must report progress 100",
            )
        if status == AgentStatus.working and current.status == AgentStatus.working and progress < current.progress:
            raise InvalidTransitionError(
                agent_id.value, current.status.value, status.value,
                f"progress may not decrease ({current.progress} -> {progress})",
            )

        updated = current.model_copy(update={"status": status, "progress": progress})
        self._agents[agent_id] = updated
        logger.debug(f"Agent {agent_id.value}: {current.status.value} -> {status.value} ({progress}%)")

        if self._on_change is not None:
            self._on_change(RunEvent(kind="status", agent=updated))

        return updated

    def snapshot(self) -> Tuple[Agent, ...]:
        """Current agents in roster order; safe to call at any time."""
        return tuple(self._agents[agent.id] for agent in self._roster)
