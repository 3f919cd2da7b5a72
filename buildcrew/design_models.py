"""
Pydantic models for the structured output of each design phase.

Only the top-level keys and their container types are checked. Entries the
later phases never read (routes, endpoints, structure, model fields) are
kept as the model returned them. Components and data models must carry a
name, since it becomes a file name.
"""

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field


class Stack(BaseModel):
    """Technology choices made by the architect."""
    model_config = ConfigDict(extra="allow")

    frontend: str
    backend: str
    database: str


class Architecture(BaseModel):
    model_config = ConfigDict(extra="allow")

    stack: Stack
    structure: List[Any]
    summary: str


class Component(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    props: List[Any] = Field(default_factory=list)


class FrontendDesign(BaseModel):
    model_config = ConfigDict(extra="allow")

    components: List[Component]
    routes: List[Any]
    theme: str


class DataModel(BaseModel):
    name: str = Field(..., min_length=1)
    fields: Any = Field(default_factory=dict)


class BackendDesign(BaseModel):
    model_config = ConfigDict(extra="allow")

    endpoints: List[Any]
    models: List[DataModel]


class DatabaseDesign(BaseModel):
    # "schema" would shadow a BaseModel attribute, hence the alias
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    schema_description: str = Field(..., alias="schema")
    migrations: List[Any]


class ConfigFile(BaseModel):
    name: str = Field(..., min_length=1)
    content: str


class DeploymentConfig(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    config_files: List[ConfigFile] = Field(..., alias="configFiles")
    instructions: str
