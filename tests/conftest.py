import asyncio
import inspect
from typing import Any, Dict, List, Optional

import pytest

from buildcrew.agents.architect import ARCHITECTURE_SHAPE
from buildcrew.agents.backend import BACKEND_SHAPE
from buildcrew.agents.database import DATABASE_SHAPE
from buildcrew.agents.devops import DEPLOYMENT_SHAPE
from buildcrew.agents.frontend import FRONTEND_SHAPE
from buildcrew.core.config import Settings
from buildcrew.memory.message_bus import MessageBus
from buildcrew.memory.status_tracker import StatusTracker
from buildcrew.workflows.pipeline import Orchestrator


SHAPE_KEYS = {
    ARCHITECTURE_SHAPE: "architecture",
    FRONTEND_SHAPE: "frontend",
    BACKEND_SHAPE: "backend",
    DATABASE_SHAPE: "database",
    DEPLOYMENT_SHAPE: "deployment",
}


def default_payloads() -> Dict[str, Any]:
    """Todo app design: 3 components, 2 models, 2 deployment files."""
    return {
        "architecture": {
            "stack": {"frontend": "React", "backend": "Express", "database": "PostgreSQL"},
            "structure": ["/src", "/src/components", "server.ts"],
            "summary": "Single page app with a REST API",
        },
        "frontend": {
            "components": [
                {"name": "TodoList", "description": "Lists todos", "props": ["todos"]},
                {"name": "TodoItem", "description": "One todo", "props": ["todo"]},
                {"name": "AddTodo", "description": "Form to add a todo", "props": []},
                {"name": "Footer", "description": "Filters", "props": []},
            ],
            "routes": [{"path": "/", "component": "TodoList"}],
            "theme": "Light, blue accents",
        },
        "backend": {
            "endpoints": [
                {"method": "GET", "path": "/todos", "description": "List todos"},
                {"method": "POST", "path": "/todos", "description": "Create todo"},
            ],
            "models": [
                {"name": "Todo", "fields": {"id": "uuid", "title": "string", "done": "boolean"}},
                {"name": "User", "fields": {"id": "uuid", "email": "string"}},
                {"name": "Tag", "fields": {"id": "uuid", "label": "string"}},
            ],
        },
        "database": {
            "schema": "Index todos by user_id",
            "migrations": ["create users", "create todos"],
        },
        "deployment": {
            "configFiles": [
                {"name": "Dockerfile", "content": "FROM node:20"},
                {"name": "docker-compose.yml", "content": "services: {}"},
            ],
            "instructions": "Run docker compose up to start the stack locally.",
        },
    }


class ScriptedGenerationService:
    """
    In-memory GenerationService.

    ``responses`` maps a phase key (architecture, frontend, backend, database,
    deployment, code) to a payload, an exception instance to raise, or a
    callable receiving the prompt. ``gates`` maps a phase key to an
    asyncio.Event the call waits for before answering.
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None, gates: Optional[Dict[str, asyncio.Event]] = None):
        self.responses = default_payloads()
        self.responses["code"] = "```tsx\nexport const Component = () => null;\n```"
        self.responses.update(responses or {})
        self.gates = gates or {}
        self.started: List[str] = []
        self.finished: List[str] = []
        self.timeline: List[str] = []
        self.prompts: Dict[str, List[str]] = {}

    async def _answer(self, key: str, prompt: str) -> Any:
        self.started.append(key)
        self.timeline.append(f"start:{key}")
        self.prompts.setdefault(key, []).append(prompt)
        if key in self.gates:
            await self.gates[key].wait()
        else:
            await asyncio.sleep(0)

        response = self.responses[key]
        self.finished.append(key)
        self.timeline.append(f"finish:{key}")
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            response = response(prompt)
            if inspect.isawaitable(response):
                response = await response
        return response

    async def generate_structured(self, prompt: str, shape_description: str) -> Dict[str, Any]:
        return await self._answer(SHAPE_KEYS[shape_description], prompt)

    async def generate_text(self, prompt: str) -> str:
        return await self._answer("code", prompt)


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        MODEL_PROVIDER="mistral",
        MISTRAL_API_KEY="test-key",
        PROJECT_TYPE="web",
    )


@pytest.fixture
def service():
    return ScriptedGenerationService()


@pytest.fixture
def orchestrator(service, test_settings):
    return Orchestrator(service, config=test_settings)


@pytest.fixture
def tracker():
    return StatusTracker()


@pytest.fixture
def bus():
    return MessageBus()


class EventRecorder:
    """Collects RunEvents and per-agent status histories."""

    def __init__(self):
        self.events = []

    def __call__(self, event):
        self.events.append(event)

    def statuses(self, agent_id) -> List[str]:
        return [
            e.agent.status.value
            for e in self.events
            if e.kind == "status" and e.agent.id == agent_id
        ]

    def progress(self, agent_id) -> List[int]:
        return [
            e.agent.progress
            for e in self.events
            if e.kind == "status" and e.agent.id == agent_id
        ]


@pytest.fixture
def recorder():
    return EventRecorder()
