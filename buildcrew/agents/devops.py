"""DevOps Agent: deployment configuration files and instructions."""

from pathlib import PurePosixPath
from typing import List

from ..design_models import Architecture, DeploymentConfig
from ..models import GeneratedFile
from .base import AgentRequest, build_structured_prompt


DEPLOYMENT_SHAPE = "{ configFiles: [], instructions: string }"

DEFAULT_CONFIG_LANGUAGE = "yaml"

_LANGUAGE_BY_SUFFIX = {
    ".yml": "yaml",
    ".yaml": "yaml",
    ".json": "json",
    ".toml": "toml",
    ".sh": "shell",
    ".tf": "hcl",
}


def build_deployment_request(requirement: str, architecture: Architecture, max_input_length: int = 10000) -> AgentRequest:
    stack = architecture.stack
    instructions = f"""
You are an expert DevOps Engineer.
Prepare deployment configuration for a {stack.frontend} and {stack.backend} application.

Output a JSON object with:
- "configFiles": Array of {{ "name": string, "content": string }} (e.g., Dockerfile, vercel.json)
- "instructions": String deployment instructions.
"""
    return AgentRequest(
        prompt=build_structured_prompt(instructions, requirement, max_input_length),
        shape=DeploymentConfig,
        shape_description=DEPLOYMENT_SHAPE,
        summarize=summarize_deployment,
    )


def summarize_deployment(config: DeploymentConfig) -> str:
    return f"Configuration ready. {config.instructions[:100]}..."


def config_language(file_name: str) -> str:
    path = PurePosixPath(file_name)
    if path.name.lower().startswith("dockerfile"):
        return "dockerfile"
    return _LANGUAGE_BY_SUFFIX.get(path.suffix.lower(), DEFAULT_CONFIG_LANGUAGE)


def config_files_to_generated(config: DeploymentConfig) -> List[GeneratedFile]:
    return [
        GeneratedFile(path=f.name, content=f.content, language=config_language(f.name))
        for f in config.config_files
    ]
