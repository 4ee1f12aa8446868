"""Compile OpenAPI 3.x documents into self-contained tool definitions."""

from openapi_tool_compiler.config import CompilerSettings
from openapi_tool_compiler.errors import (
    CircularReferenceError,
    CompilerError,
    DocumentLoadError,
    InvalidReferencePathError,
    MissingOperationIdError,
    SchemaReferenceError,
    UnsupportedReferenceError,
)
from openapi_tool_compiler.parser.base import (
    ExecuteConfig,
    ParameterLocation,
    ParameterSpec,
    ToolDefinition,
    ToolParameters,
)
from openapi_tool_compiler.parser.compiler import OpenAPICompiler
from openapi_tool_compiler.parser.swagger import load_document, parse_openapi

__all__ = [
    "CircularReferenceError",
    "CompilerError",
    "CompilerSettings",
    "DocumentLoadError",
    "ExecuteConfig",
    "InvalidReferencePathError",
    "MissingOperationIdError",
    "OpenAPICompiler",
    "ParameterLocation",
    "ParameterSpec",
    "SchemaReferenceError",
    "ToolDefinition",
    "ToolParameters",
    "UnsupportedReferenceError",
    "load_document",
    "parse_openapi",
]
