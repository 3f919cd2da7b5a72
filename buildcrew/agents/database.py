"""Database Agent: schema optimization and migrations for the backend models."""

import json
from typing import List

from ..design_models import Architecture, DatabaseDesign, DataModel
from .base import AgentRequest, build_structured_prompt


DATABASE_SHAPE = "{ schema: string, migrations: string[] }"


def build_database_request(
    requirement: str,
    architecture: Architecture,
    models: List[DataModel],
    max_input_length: int = 10000,
) -> AgentRequest:
    models_json = json.dumps([m.model_dump() for m in models])
    instructions = f"""
You are an expert Data Architect using {architecture.stack.database}.
Analyze the following models and optimize the schema for the application requirement below.
Models: {models_json}

Output a JSON object with:
- "schema": String description of the schema optimization (indexes, relations).
- "migrations": Array of strings describing necessary migrations.
"""
    return AgentRequest(
        prompt=build_structured_prompt(instructions, requirement, max_input_length),
        shape=DatabaseDesign,
        shape_description=DATABASE_SHAPE,
        summarize=summarize_database,
    )


def summarize_database(design: DatabaseDesign) -> str:
    return f"Schema optimized. Planned {len(design.migrations)} migrations."
