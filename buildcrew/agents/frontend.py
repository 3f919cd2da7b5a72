"""Frontend Agent: UI components, routes and theme for the chosen frontend stack."""

from ..design_models import Architecture, FrontendDesign
from .base import AgentRequest, build_structured_prompt


FRONTEND_SHAPE = "{ components: [], routes: [], theme: string }"


def build_frontend_request(requirement: str, architecture: Architecture, max_input_length: int = 10000) -> AgentRequest:
    instructions = f"""
You are an expert Frontend Architect using {architecture.stack.frontend}.
Design the UI components for the application requirement below.

Output a JSON object with:
- "components": Array of {{ "name": string, "description": string, "props": string[] }}
- "routes": Array of {{ "path": string, "component": string }}
- "theme": Description of the color palette and typography.
"""
    return AgentRequest(
        prompt=build_structured_prompt(instructions, requirement, max_input_length),
        shape=FrontendDesign,
        shape_description=FRONTEND_SHAPE,
        summarize=summarize_frontend,
    )


def summarize_frontend(design: FrontendDesign) -> str:
    return f"Designed {len(design.components)} components."
