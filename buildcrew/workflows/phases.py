"""
Phase table of the build pipeline.

A phase is one agent's step: it declares the project fields it reads, the
field it produces, and the coroutine that does the work. Stages group phases
that run together; a stage with more than one phase is a fork-join point.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from ..agents.architect import build_architecture_request
from ..agents.backend import build_backend_request
from ..agents.coder import build_code_request, plan_files, stack_for, to_generated_file
from ..agents.database import build_database_request
from ..agents.devops import build_deployment_request, config_files_to_generated
from ..agents.frontend import build_frontend_request
from ..agents.runner import AgentRunner
from ..design_models import DeploymentConfig
from ..exceptions import AgentFailure
from ..memory.project_state import ProjectStateAccumulator
from ..models import AgentId, GeneratedFile, MessageType, ProjectType, agent_name


class PhaseName(str, Enum):
    architecture = "architecture"
    frontend_design = "frontend_design"
    backend_design = "backend_design"
    data_modeling = "data_modeling"
    implementation = "implementation"
    deployment_config = "deployment_config"


# Progress an agent reports when it starts working
INITIAL_PROGRESS = {
    AgentId.architect: 20,
    AgentId.frontend: 10,
    AgentId.backend: 10,
    AgentId.database: 50,
    AgentId.code_generator: 0,
    AgentId.devops: 80,
}


@dataclass
class RunContext:
    """Everything a phase needs for one run; owned by the orchestrator."""
    run_id: str
    runner: AgentRunner
    state: ProjectStateAccumulator
    project_type: ProjectType = ProjectType.web
    max_component_files: int = 3
    max_model_files: int = 2
    max_input_length: int = 10000


@dataclass(frozen=True)
class Phase:
    name: PhaseName
    agent_id: AgentId
    run: Callable[[RunContext], Awaitable[Any]]
    depends_on: Tuple[str, ...] = field(default_factory=tuple)
    produces: Optional[str] = None


async def run_architecture(ctx: RunContext):
    ctx.runner.start(AgentId.architect, INITIAL_PROGRESS[AgentId.architect])
    ctx.runner.system(
        "Analyze requirements and define architecture.",
        recipient=agent_name(AgentId.architect),
    )
    request = build_architecture_request(ctx.state.requirement, ctx.max_input_length)
    return await ctx.runner.execute(AgentId.architect, request, INITIAL_PROGRESS[AgentId.architect])


async def run_frontend_design(ctx: RunContext):
    architecture = ctx.state.get("architecture")
    ctx.runner.start(AgentId.frontend, INITIAL_PROGRESS[AgentId.frontend])
    ctx.runner.send(
        agent_name(AgentId.architect),
        "Design UI components and routes.",
        MessageType.collaboration,
        recipient=agent_name(AgentId.frontend),
    )
    request = build_frontend_request(ctx.state.requirement, architecture, ctx.max_input_length)
    return await ctx.runner.execute(AgentId.frontend, request, INITIAL_PROGRESS[AgentId.frontend])


async def run_backend_design(ctx: RunContext):
    architecture = ctx.state.get("architecture")
    ctx.runner.start(AgentId.backend, INITIAL_PROGRESS[AgentId.backend])
    ctx.runner.send(
        agent_name(AgentId.architect),
        "Design API endpoints and DB schema.",
        MessageType.collaboration,
        recipient=agent_name(AgentId.backend),
    )
    request = build_backend_request(ctx.state.requirement, architecture, ctx.max_input_length)
    return await ctx.runner.execute(AgentId.backend, request, INITIAL_PROGRESS[AgentId.backend])


async def run_data_modeling(ctx: RunContext):
    architecture = ctx.state.get("architecture")
    backend = ctx.state.get("backend_design")
    ctx.runner.start(AgentId.database, INITIAL_PROGRESS[AgentId.database])
    ctx.runner.send(
        agent_name(AgentId.backend),
        "Finalize schema details.",
        MessageType.collaboration,
        recipient=agent_name(AgentId.database),
    )
    request = build_database_request(ctx.state.requirement, architecture, backend.models, ctx.max_input_length)
    return await ctx.runner.execute(AgentId.database, request, INITIAL_PROGRESS[AgentId.database])


async def run_implementation(ctx: RunContext) -> List[GeneratedFile]:
    """
    Generate the planned files one at a time.

    Progress counts the deployment step as one more batch, so the code
    generator stays below 100 until deployment config succeeds.
    """
    architecture = ctx.state.get("architecture")
    frontend = ctx.state.get("frontend_design")
    backend = ctx.state.get("backend_design")

    ctx.runner.start(AgentId.code_generator, INITIAL_PROGRESS[AgentId.code_generator])
    ctx.runner.system(
        "Begin generating source code files.",
        recipient=agent_name(AgentId.code_generator),
    )

    files = plan_files(frontend, backend, ctx.max_component_files, ctx.max_model_files)
    stack = stack_for(architecture.stack, ctx.project_type)
    total_batches = len(files) + 1

    generated = []
    for done, planned in enumerate(files, start=1):
        ctx.runner.send(agent_name(AgentId.code_generator), f"Generating {planned.name}...", MessageType.task)
        code = await ctx.runner.execute(
            AgentId.code_generator,
            build_code_request(planned, stack, ctx.max_input_length),
            finalize=False,
        )
        generated_file = to_generated_file(planned, code)
        ctx.state.append_file(generated_file)
        generated.append(generated_file)
        ctx.runner.advance(AgentId.code_generator, min(99, 100 * done // total_batches))

    return generated


async def run_deployment_config(ctx: RunContext) -> DeploymentConfig:
    architecture = ctx.state.get("architecture")
    ctx.runner.start(AgentId.devops, INITIAL_PROGRESS[AgentId.devops])
    ctx.runner.send(agent_name(AgentId.devops), "Preparing deployment configuration...", MessageType.task)

    try:
        config = await ctx.runner.execute(
            AgentId.devops,
            build_deployment_request(ctx.state.requirement, architecture, ctx.max_input_length),
            INITIAL_PROGRESS[AgentId.devops],
        )
    except AgentFailure as e:
        # the code generator's last batch is the deployment step
        ctx.runner.fail(AgentId.code_generator, e)
        raise

    for generated_file in config_files_to_generated(config):
        ctx.state.append_file(generated_file)
    ctx.runner.complete(AgentId.code_generator)
    return config


ARCHITECTURE = Phase(
    name=PhaseName.architecture,
    agent_id=AgentId.architect,
    run=run_architecture,
    produces="architecture",
)
FRONTEND_DESIGN = Phase(
    name=PhaseName.frontend_design,
    agent_id=AgentId.frontend,
    run=run_frontend_design,
    depends_on=("architecture",),
    produces="frontend_design",
)
BACKEND_DESIGN = Phase(
    name=PhaseName.backend_design,
    agent_id=AgentId.backend,
    run=run_backend_design,
    depends_on=("architecture",),
    produces="backend_design",
)
DATA_MODELING = Phase(
    name=PhaseName.data_modeling,
    agent_id=AgentId.database,
    run=run_data_modeling,
    depends_on=("architecture", "backend_design"),
    produces="database_design",
)
IMPLEMENTATION = Phase(
    name=PhaseName.implementation,
    agent_id=AgentId.code_generator,
    run=run_implementation,
    depends_on=("architecture", "frontend_design", "backend_design"),
)
DEPLOYMENT_CONFIG = Phase(
    name=PhaseName.deployment_config,
    agent_id=AgentId.devops,
    run=run_deployment_config,
    depends_on=("architecture",),
    produces="deployment_config",
)

# Fixed order; the second stage is the only fork-join point
PIPELINE: Tuple[Tuple[Phase, ...], ...] = (
    (ARCHITECTURE,),
    (FRONTEND_DESIGN, BACKEND_DESIGN),
    (DATA_MODELING,),
    (IMPLEMENTATION,),
    (DEPLOYMENT_CONFIG,),
)
