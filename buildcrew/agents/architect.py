"""
Architect Agent: high-level system design and stack selection.

First phase of every run. Everything downstream reads the chosen stack.
"""

from ..design_models import Architecture
from .base import AgentRequest, build_structured_prompt


ARCHITECTURE_SHAPE = "{ stack: { frontend, backend, database }, structure: [], summary: string }"

ARCHITECT_INSTRUCTIONS = """
Analyze the application requirement below and propose a high-level architecture.

Output a JSON object with:
- "stack": { "frontend": string, "backend": string, "database": string }
- "structure": A list of key directories and files (e.g., ["/src", "/src/components", "server.ts"])
- "summary": A brief description of the architecture.
"""


def build_architecture_request(requirement: str, max_input_length: int = 10000) -> AgentRequest:
    return AgentRequest(
        prompt=build_structured_prompt(ARCHITECT_INSTRUCTIONS, requirement, max_input_length),
        shape=Architecture,
        shape_description=ARCHITECTURE_SHAPE,
        summarize=summarize_architecture,
    )


def summarize_architecture(architecture: Architecture) -> str:
    stack = architecture.stack
    return (
        f"Architecture defined: {architecture.summary}. "
        f"Stack: {stack.frontend} + {stack.backend}."
    )
