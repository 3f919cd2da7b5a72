"""Backend Agent: API endpoints and data models for the chosen backend stack."""

from ..design_models import Architecture, BackendDesign
from .base import AgentRequest, build_structured_prompt


BACKEND_SHAPE = "{ endpoints: [], models: [] }"


def build_backend_request(requirement: str, architecture: Architecture, max_input_length: int = 10000) -> AgentRequest:
    instructions = f"""
You are an expert Backend Engineer using {architecture.stack.backend}.
Design the API and database schema for the application requirement below.

Output a JSON object with:
- "endpoints": Array of {{ "method": string, "path": string, "description": string }}
- "models": Array of {{ "name": string, "fields": Record<string, string> }}
"""
    return AgentRequest(
        prompt=build_structured_prompt(instructions, requirement, max_input_length),
        shape=BackendDesign,
        shape_description=BACKEND_SHAPE,
        summarize=summarize_backend,
    )


def summarize_backend(design: BackendDesign) -> str:
    return f"Designed {len(design.endpoints)} endpoints and {len(design.models)} models."
