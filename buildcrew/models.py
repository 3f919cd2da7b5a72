"""Pydantic models for agents, messages, run events and the project document."""

from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .design_models import (
    Architecture,
    BackendDesign,
    DatabaseDesign,
    DeploymentConfig,
    FrontendDesign,
)


# Enums
class AgentId(str, Enum):
    """Fixed agent roles; the set never changes for the process lifetime."""
    architect = "architect-agent"
    frontend = "frontend-agent"
    backend = "backend-agent"
    database = "database-agent"
    devops = "devops-agent"
    code_generator = "code-agent"


class AgentStatus(str, Enum):
    """Agent lifecycle status."""
    idle = "idle"
    working = "working"
    completed = "completed"
    error = "error"


class MessageType(str, Enum):
    """Message kinds on the bus."""
    task = "task"
    response = "response"
    collaboration = "collaboration"
    error = "error"


class RunState(str, Enum):
    """Overall orchestrator run state."""
    idle = "idle"
    running = "running"
    succeeded = "succeeded"
    failed = "failed"


class ProjectType(str, Enum):
    web = "web"
    mobile = "mobile"


SYSTEM_SENDER = "System"


# Agent and message models
class Agent(BaseModel):
    """Snapshot of one agent's lifecycle state."""
    model_config = ConfigDict(frozen=True)

    id: AgentId
    name: str
    role: str
    specialty: str
    status: AgentStatus = AgentStatus.idle
    progress: int = Field(default=0, ge=0, le=100)


class Message(BaseModel):
    """
    Entry of the message log.

    ``id`` and ``timestamp`` are assigned by the MessageBus on append; the
    values given by the sender are ignored.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = 0
    sender: str = Field(..., alias="from")
    recipient: Optional[str] = Field(None, alias="to")
    content: str
    type: MessageType
    timestamp: Optional[datetime] = None


class RunEvent(BaseModel):
    """Change notification delivered to orchestrator subscribers."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["status", "message", "run"]
    run_id: Optional[str] = None
    agent: Optional[Agent] = None
    message: Optional[Message] = None
    state: Optional[RunState] = None


# Project document
class GeneratedFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    content: str
    language: str


class ProjectState(BaseModel):
    """Fully populated output of a successful run."""
    requirement: str
    project_type: ProjectType = ProjectType.web
    architecture: Optional[Architecture] = None
    frontend_design: Optional[FrontendDesign] = None
    backend_design: Optional[BackendDesign] = None
    database_design: Optional[DatabaseDesign] = None
    generated_files: List[GeneratedFile] = Field(default_factory=list)
    deployment_config: Optional[DeploymentConfig] = None


# Static roster, in display order
AGENT_ROSTER: Tuple[Agent, ...] = (
    Agent(
        id=AgentId.architect,
        name="Chief Architect",
        role="System Design",
        specialty="Architecture, Stack Selection, High-Level Design",
    ),
    Agent(
        id=AgentId.frontend,
        name="Frontend Architect",
        role="UI/UX Developer",
        specialty="React, Vue, React Native, Flutter, UI Design",
    ),
    Agent(
        id=AgentId.backend,
        name="Backend Engineer",
        role="API Developer",
        specialty="Node.js, Python, Go, REST APIs, GraphQL",
    ),
    Agent(
        id=AgentId.database,
        name="Data Architect",
        role="Database Designer",
        specialty="PostgreSQL, MongoDB, Redis, Schema Design",
    ),
    Agent(
        id=AgentId.devops,
        name="DevOps Engineer",
        role="Infrastructure",
        specialty="Docker, Kubernetes, CI/CD, Cloud Deployment",
    ),
    Agent(
        id=AgentId.code_generator,
        name="Code Generator",
        role="Implementation",
        specialty="Code Generation, Refactoring, Optimization",
    ),
)


def agent_name(agent_id: AgentId) -> str:
    for agent in AGENT_ROSTER:
        if agent.id == agent_id:
            return agent.name
    raise KeyError(agent_id)
