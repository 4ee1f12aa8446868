"""OpenAPI document file loading.

Reads an OpenAPI 3.x document from disk (JSON or YAML) and compiles it
into tool definitions.
"""

from pathlib import Path
from typing import Any

from openapi_tool_compiler.config import CompilerSettings
from openapi_tool_compiler.errors import DocumentLoadError
from openapi_tool_compiler.parser.base import ToolDefinition
from openapi_tool_compiler.parser.compiler import OpenAPICompiler
from openapi_tool_compiler.parser.detect import load_document_text


def load_document(file_path: Path) -> dict[str, Any]:
    """Read and parse an OpenAPI document file."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentLoadError(f"Error loading document from file {file_path}: {e}") from e
    return load_document_text(text)


def parse_openapi(file_path: Path, settings: CompilerSettings | None = None) -> dict[str, ToolDefinition]:
    """Parse an OpenAPI file into tool definitions keyed by operationId."""
    document = load_document(file_path)
    return OpenAPICompiler(document, settings).compile_all()
