"""Data models for compiled tool definitions.

The compiler turns every OpenAPI operation into a ToolDefinition:
a JSON-Schema parameter description for the caller plus an execution
recipe for the HTTP layer.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ParameterLocation(str, Enum):
    """Where a parameter travels on the wire."""

    HEADER = "header"
    QUERY = "query"
    PATH = "path"
    BODY = "body"
    FILE = "file"


class ParameterSpec(BaseModel):
    """A single wire parameter of the execution recipe."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    location: ParameterLocation
    type: str = "string"  # JSON Schema type of the original parameter
    derived_from: str | None = Field(default=None, alias="derivedFrom")


class ToolParameters(BaseModel):
    """User-facing JSON Schema for the tool's arguments."""

    type: str = "object"
    properties: dict[str, Any] = {}
    required: list[str] | None = None


class ExecuteConfig(BaseModel):
    """HTTP recipe consumed by the execution engine."""

    model_config = ConfigDict(populate_by_name=True)

    method: str  # GET / POST / PUT / DELETE / PATCH ...
    url: str  # https://api.example.com/users/{id}
    body_type: str = Field(default="json", alias="bodyType")  # json / form-data / form
    params: list[ParameterSpec] = []

    def param(self, name: str) -> ParameterSpec | None:
        for param in self.params:
            if param.name == name:
                return param
        return None


class ToolDefinition(BaseModel):
    """One compiled operation."""

    name: str
    description: str = ""
    parameters: ToolParameters
    execute: ExecuteConfig

    def to_dict(self) -> dict[str, Any]:
        """Wire form with camelCase keys and unset optionals omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
