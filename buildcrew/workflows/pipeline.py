"""Multi-agent build pipeline."""

import asyncio
import logging
from typing import Any, Callable, List, Optional, Set, Tuple
from uuid import uuid4

from ..agents.runner import AgentRunner
from ..audit import AuditEventType, audit_log
from ..core.config import Settings, settings as default_settings
from ..exceptions import (
    AgentExecutionError,
    AgentFailure,
    AlreadyRunningError,
    ValidationError,
)
from ..generation import GenerationService
from ..memory.events import EventHub, Listener
from ..memory.message_bus import MessageBus
from ..memory.project_state import ProjectStateAccumulator
from ..memory.status_tracker import StatusTracker
from ..models import Agent, AgentStatus, Message, MessageType, ProjectState, ProjectType, RunEvent, RunState
from .phases import PIPELINE, Phase, RunContext


logger = logging.getLogger(__name__)


class Orchestrator:
    """
    Drives the fixed agent pipeline for one requirement at a time.

    Flow:
    1. Architect defines the stack
    2. Frontend and Backend design run concurrently (fork-join)
    3. Database refines the backend models
    4. Code generator writes files one at a time
    5. DevOps produces deployment configuration

    The first failure ends the run: the caller gets an AgentExecutionError and
    never a partial ProjectState. Agent status and the message log stay
    readable through status_snapshot() and message_log() at all times.
    """

    def __init__(
        self,
        service: GenerationService,
        config: Optional[Settings] = None,
        pipeline: Tuple[Tuple[Phase, ...], ...] = PIPELINE,
    ):
        self.service = service
        self.config = config or default_settings
        self.pipeline = pipeline

        self._events = EventHub()
        self.tracker = StatusTracker(on_change=self._relay)
        self.bus = MessageBus(on_change=self._relay)
        self.accumulator = ProjectStateAccumulator(self.tracker)

        self._state = RunState.idle
        self._run_id: Optional[str] = None
        self._last_error: Optional[BaseException] = None
        self._detached: Set[asyncio.Task] = set()

    # Observability side-channel

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def run_id(self) -> Optional[str]:
        return self._run_id

    @property
    def last_error(self) -> Optional[BaseException]:
        """Terminal error of the most recent failed run, if any."""
        return self._last_error

    def status_snapshot(self) -> Tuple[Agent, ...]:
        return self.tracker.snapshot()

    def message_log(self) -> Tuple[Message, ...]:
        return self.bus.all()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a RunEvent listener; returns the unsubscribe callable."""
        return self._events.subscribe(listener)

    def _relay(self, event: RunEvent) -> None:
        self._events.publish(event.model_copy(update={"run_id": self._run_id}))

    def _set_state(self, state: RunState) -> None:
        self._state = state
        self._events.publish(RunEvent(kind="run", run_id=self._run_id, state=state))

    # Run

    async def run(self, requirement: str, project_type: Optional[str] = None) -> ProjectState:
        """
        Execute the whole pipeline for ``requirement``.

        Args:
            requirement: Natural-language description of the application
            project_type: "web" or "mobile"; defaults to the PROJECT_TYPE setting

        Returns:
            Fully populated ProjectState

        Raises:
            AlreadyRunningError: A run is already in progress on this orchestrator
            ValidationError: The requirement is empty or whitespace
            AgentExecutionError: A phase failed; ``phase`` names it
        """
        # Both guards run before the first await, so rejection is synchronous
        if self._state == RunState.running:
            audit_log(
                AuditEventType.WORKFLOW_REJECTED,
                {"reason": "already_running"},
                resource=self._run_id,
                outcome="failure",
            )
            raise AlreadyRunningError(f"Run {self._run_id} is still in progress")

        if not isinstance(requirement, str) or not requirement.strip():
            raise ValidationError("Please enter a project description.")

        try:
            kind = ProjectType(project_type or self.config.PROJECT_TYPE)
        except ValueError as e:
            raise ValidationError(f"Unknown project type: {project_type}") from e

        ctx = self._begin(requirement.strip(), kind)

        stage: Tuple[Phase, ...] = ()
        try:
            for stage in self.pipeline:
                await self._run_stage(ctx, stage)
            project = ctx.state.build()
        except asyncio.CancelledError as e:
            self._abandon_working_agents(ctx, stage)
            self._finish_failed(ctx, e)
            raise
        except Exception as e:
            self._finish_failed(ctx, e)
            raise

        self._finish_succeeded(ctx, project)
        return project

    def _begin(self, requirement: str, project_type: ProjectType) -> RunContext:
        run_id = str(uuid4())
        self._run_id = run_id
        self._last_error = None

        self.tracker.reset()
        self.bus.reset()
        self.accumulator.reset(requirement, project_type)
        self._set_state(RunState.running)

        logger.info(f"Run {run_id}: starting multi-agent workflow ({project_type.value})")
        audit_log(
            AuditEventType.WORKFLOW_STARTED,
            {"requirement_length": len(requirement), "project_type": project_type.value},
            resource=run_id,
        )

        runner = AgentRunner(
            self.service,
            self.tracker,
            self.bus,
            is_current=lambda: self._run_id == run_id,
        )
        runner.system(f'Starting multi-agent workflow for: "{requirement}"')

        return RunContext(
            run_id=run_id,
            runner=runner,
            state=self.accumulator,
            project_type=project_type,
            max_component_files=self.config.MAX_COMPONENT_FILES,
            max_model_files=self.config.MAX_MODEL_FILES,
            max_input_length=self.config.MAX_REQUIREMENT_LENGTH,
        )

    async def _run_stage(self, ctx: RunContext, stage: Tuple[Phase, ...]) -> None:
        if len(stage) == 1:
            results = [await self._run_phase(ctx, stage[0])]
        else:
            results = await self._fork_join(ctx, stage)

        # Commit after the whole stage so concurrent phases never interleave writes
        for phase, result in zip(stage, results):
            if phase.produces is not None:
                ctx.state.set(phase.produces, result)

    async def _run_phase(self, ctx: RunContext, phase: Phase) -> Any:
        ctx.state.require(phase.depends_on)
        logger.info(f"Run {ctx.run_id}: phase {phase.name.value} started")
        try:
            result = await phase.run(ctx)
        except AgentFailure as e:
            raise AgentExecutionError(phase.name.value, phase.agent_id.value, e) from e
        logger.info(f"Run {ctx.run_id}: phase {phase.name.value} completed")
        return result

    async def _fork_join(self, ctx: RunContext, stage: Tuple[Phase, ...]) -> List[Any]:
        """
        Start every phase of the stage and wait until all succeed or one fails.

        A failure fails the join immediately. Siblings still in flight are not
        cancelled; they finish in the background and their results are dropped.
        """
        tasks = [
            asyncio.create_task(self._run_phase(ctx, phase), name=f"{ctx.run_id}:{phase.name.value}")
            for phase in stage
        ]
        try:
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        except asyncio.CancelledError:
            for task in tasks:
                self._detach(task)
            raise

        failures = [task.exception() for task in tasks if task in done and task.exception() is not None]
        if failures:
            for task in pending:
                self._detach(task)
            raise failures[0]

        return [task.result() for task in tasks]

    def _detach(self, task: asyncio.Task) -> None:
        self._detached.add(task)
        task.add_done_callback(self._on_detached_done)

    def _on_detached_done(self, task: asyncio.Task) -> None:
        self._detached.discard(task)
        if task.cancelled():
            logger.info(f"Detached phase {task.get_name()} was cancelled")
        elif task.exception() is not None:
            logger.info(f"Detached phase {task.get_name()} failed after the run ended: {task.exception()}")
        else:
            logger.info(f"Detached phase {task.get_name()} finished after the run ended; result discarded")

    async def drain(self) -> None:
        """Wait for design-phase siblings left running by a failed join."""
        while self._detached:
            await asyncio.gather(*list(self._detached), return_exceptions=True)

    @property
    def detached_count(self) -> int:
        return len(self._detached)

    def _abandon_working_agents(self, ctx: RunContext, stage: Tuple[Phase, ...]) -> None:
        """Put agents interrupted by cancellation into error; a fork-join stage keeps running detached."""
        detached = {phase.agent_id for phase in stage} if len(stage) > 1 else set()
        for agent in self.tracker.snapshot():
            if agent.status == AgentStatus.working and agent.id not in detached:
                ctx.runner.fail(agent.id, "run cancelled")

    def _finish_succeeded(self, ctx: RunContext, project: ProjectState) -> None:
        ctx.runner.system(
            "All tasks completed successfully. Project is ready for review.",
            MessageType.response,
        )
        self._set_state(RunState.succeeded)
        logger.info(f"Run {ctx.run_id}: completed with {len(project.generated_files)} files")
        audit_log(
            AuditEventType.WORKFLOW_COMPLETED,
            {"files_generated": len(project.generated_files)},
            resource=ctx.run_id,
        )

    def _finish_failed(self, ctx: RunContext, error: BaseException) -> None:
        self._last_error = error
        reason = str(error) or type(error).__name__
        ctx.runner.system(f"Task failed: {reason}", MessageType.error)
        self._set_state(RunState.failed)

        phase = getattr(error, "phase", None)
        if isinstance(error, AgentExecutionError):
            logger.error(f"Run {ctx.run_id}: {error}")
        else:
            logger.error(f"Run {ctx.run_id}: aborted by {type(error).__name__}: {reason}", exc_info=error)
        audit_log(
            AuditEventType.WORKFLOW_FAILED,
            {"phase": phase, "error": reason, "error_type": type(error).__name__},
            resource=ctx.run_id,
            outcome="failure",
        )
