"""Parse OpenAPI document text and check the document version."""

import json
from typing import Any

import yaml

from openapi_tool_compiler.errors import DocumentLoadError


def detect_version(document: Any) -> str | None:
    """Return the declared OpenAPI version ('3.0.3', '3.1.0', ...), if any.

    Swagger 2.0 documents report their 'swagger' field.
    """
    if not isinstance(document, dict):
        return None
    version = document.get("openapi") or document.get("swagger")
    return str(version) if version is not None else None


def load_document_text(text: str) -> dict[str, Any]:
    """Parse JSON or YAML text into an OpenAPI 3.x document.

    Raises DocumentLoadError if the text cannot be parsed or is not
    an OpenAPI 3.x document.
    """
    document = None

    try:
        document = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        try:
            document = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DocumentLoadError(f"Document is neither valid JSON nor YAML: {e}") from e

    if not isinstance(document, dict):
        raise DocumentLoadError("Document root must be a mapping")

    version = detect_version(document)
    if version is None or not version.startswith("3."):
        raise DocumentLoadError(f"Unsupported document version: {version or 'unknown'} (expected OpenAPI 3.x)")
    return document
