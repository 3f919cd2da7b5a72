"""
AgentRunner: executes one agent call against the Generation Service.

The runner is the only component that moves agents through their lifecycle
and the only writer of the message log during a run. Every write is checked
against the run it belongs to, so a straggling call from an earlier run can
never touch the state of the current one.
"""

import logging
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError as SchemaValidationError

from ..core.logging_config import AgentAdapter
from ..exceptions import AgentFailure, GenerationError, MalformationError
from ..generation import GenerationService
from ..memory.message_bus import MessageBus
from ..memory.status_tracker import StatusTracker
from ..models import AgentId, AgentStatus, Message, MessageType, SYSTEM_SENDER, agent_name
from .base import AgentRequest

logger = logging.getLogger(__name__)


class AgentRunner:
    """Invokes the Generation Service for an agent and records the outcome."""

    def __init__(
        self,
        service: GenerationService,
        tracker: StatusTracker,
        bus: MessageBus,
        is_current: Callable[[], bool] = lambda: True,
    ):
        self.service = service
        self.tracker = tracker
        self.bus = bus
        self._is_current = is_current

    @property
    def is_current(self) -> bool:
        return self._is_current()

    async def execute(
        self,
        agent_id: AgentId,
        request: AgentRequest,
        initial_progress: int = 0,
        finalize: bool = True,
    ) -> Any:
        """
        Run one agent call.

        Marks the agent working, awaits the Generation Service, validates the
        response and reports it on the message bus.

        Args:
            agent_id: Agent performing the call
            request: Prompt, expected shape and summary helper
            initial_progress: Progress to report when the agent starts working
            finalize: Mark the agent completed on success. Multi-call agents
                (the code generator) pass False and are completed by the caller.

        Returns:
            The validated shape instance, or cleaned text for text requests

        Raises:
            GenerationError: The Generation Service call failed
            MalformationError: The response failed structural validation
        """
        agent_id = AgentId(agent_id)
        log = AgentAdapter(logger, {"agent_id": agent_id.value})

        self.start(agent_id, initial_progress)
        log.info(f"Calling generation service ({'structured' if request.structured else 'text'})")

        try:
            result = await self._call(request)
        except AgentFailure as e:
            log.warning(f"Agent call failed: {e}")
            self.fail(agent_id, e)
            raise

        if not self.is_current:
            log.info("Discarding result of a superseded run")
            return result

        if finalize:
            self.complete(agent_id)
        if request.summarize is not None:
            self.send(agent_name(agent_id), request.summarize(result), MessageType.response)

        log.info("Agent call succeeded")
        return result

    async def _call(self, request: AgentRequest) -> Any:
        if request.structured:
            try:
                payload = await self.service.generate_structured(request.prompt, request.shape_description)
            except AgentFailure:
                raise
            except Exception as e:
                raise GenerationError(f"Generation service error: {e}") from e

            try:
                return request.shape.model_validate(payload)
            except SchemaValidationError as e:
                raise MalformationError(
                    f"Response does not match {request.shape.__name__}: {e.error_count()} validation error(s)"
                ) from e

        try:
            text = await self.service.generate_text(request.prompt)
        except AgentFailure:
            raise
        except Exception as e:
            raise GenerationError(f"Generation service error: {e}") from e

        if not isinstance(text, str):
            raise MalformationError(f"Expected text, got {type(text).__name__}")
        if request.clean is not None:
            text = request.clean(text)
        if not text.strip():
            raise MalformationError("Generation service returned empty content")
        return text

    # Lifecycle helpers; all no-ops once the run has been superseded

    def start(self, agent_id: AgentId, progress: int = 0) -> None:
        """Mark the agent working, or advance it if it is already working."""
        if not self.is_current:
            return
        agent = self.tracker.get(agent_id)
        if agent.status == AgentStatus.idle:
            self.tracker.transition(agent_id, AgentStatus.working, progress)
        elif agent.status == AgentStatus.working and progress > agent.progress:
            self.tracker.transition(agent_id, AgentStatus.working, progress)

    def advance(self, agent_id: AgentId, progress: int) -> None:
        if not self.is_current:
            return
        self.tracker.transition(agent_id, AgentStatus.working, progress)

    def complete(self, agent_id: AgentId) -> None:
        if not self.is_current:
            return
        self.tracker.transition(agent_id, AgentStatus.completed, 100)

    def fail(self, agent_id: AgentId, error: Union[Exception, str]) -> None:
        """Mark a working agent as errored and log the failure on the bus."""
        if not self.is_current:
            return
        if self.tracker.get(agent_id).status != AgentStatus.working:
            return
        self.tracker.transition(agent_id, AgentStatus.error)
        self.send(agent_name(agent_id), f"Failed: {error}", MessageType.error)

    def send(
        self,
        sender: str,
        content: str,
        message_type: MessageType,
        recipient: Optional[str] = None,
    ) -> Optional[Message]:
        if not self.is_current:
            return None
        return self.bus.post(sender, content, message_type, recipient)

    def system(self, content: str, message_type: MessageType = MessageType.task, recipient: Optional[str] = None) -> Optional[Message]:
        return self.send(SYSTEM_SENDER, content, message_type, recipient)
