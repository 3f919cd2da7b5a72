"""
Coder Agent: generates source files one at a time.

Only a bounded subset of the design is implemented: the first few frontend
components and the first few backend models.
"""

import json
import re
from dataclasses import dataclass
from typing import List

from ..design_models import BackendDesign, FrontendDesign, Stack
from ..models import GeneratedFile, ProjectType
from .base import AgentRequest, build_structured_prompt


CODE_LANGUAGE = "typescript"
MOBILE_FRONTEND = "React Native"

_CODE_FENCE = re.compile(r"```(?:typescript|javascript|tsx|ts|jsx|js)?\n?|```")


@dataclass(frozen=True)
class FileSpec:
    """A file the code generator has been asked to write."""
    name: str
    description: str
    layer: str  # "frontend" or "backend"


def plan_files(
    frontend: FrontendDesign,
    backend: BackendDesign,
    max_components: int = 3,
    max_models: int = 2,
) -> List[FileSpec]:
    """
    Pick the files to generate, components first, then models.

    Args:
        frontend: Completed frontend design
        backend: Completed backend design
        max_components: Components turned into ``<name>.tsx`` files
        max_models: Models turned into ``<name>.ts`` files

    Returns:
        Ordered list of file specs
    """
    files = [
        FileSpec(name=f"{c.name}.tsx", description=c.description, layer="frontend")
        for c in frontend.components[:max_components]
    ]
    files.extend(
        FileSpec(
            name=f"{m.name}.ts",
            description=f"Model with fields: {json.dumps(m.fields)}",
            layer="backend",
        )
        for m in backend.models[:max_models]
    )
    return files


def stack_for(stack: Stack, project_type: ProjectType) -> Stack:
    if ProjectType(project_type) == ProjectType.mobile:
        return stack.model_copy(update={"frontend": MOBILE_FRONTEND})
    return stack


def build_code_request(file: FileSpec, stack: Stack, max_input_length: int = 10000) -> AgentRequest:
    instructions = f"""
You are an elite Code Generator and Software Engineer. Generate production-ready code for the file "{file.name}".

Tech Stack: {json.dumps(stack.model_dump())}

Requirements:
- Follow best practices and design patterns
- Include comprehensive error handling
- Add proper TypeScript types (if applicable)
- Include JSDoc comments for functions/classes
- Include input validation and sanitization
- Make code testable and maintainable

Return ONLY the code. No markdown, no explanations.
"""
    return AgentRequest(
        prompt=build_structured_prompt(instructions, f"Context: {file.description}", max_input_length),
        clean=strip_code_fences,
        summarize=lambda code: f"Generated {file.name} ({code.count(chr(10)) + 1} lines).",
    )


def strip_code_fences(code: str) -> str:
    """Remove Markdown code fences the model may wrap around the code."""
    return _CODE_FENCE.sub("", code or "").strip()


def to_generated_file(file: FileSpec, code: str) -> GeneratedFile:
    return GeneratedFile(path=file.name, content=code, language=CODE_LANGUAGE)
