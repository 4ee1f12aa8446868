"""Decide which wire location a parameter or body property occupies."""

from typing import Any

from openapi_tool_compiler.parser.base import ParameterLocation

FILE_FORMATS = frozenset({"binary", "base64"})

# OpenAPI 'in' values; cookies are sent as a Cookie header
_DECLARED_LOCATIONS: dict[str, ParameterLocation] = {
    "header": ParameterLocation.HEADER,
    "query": ParameterLocation.QUERY,
    "path": ParameterLocation.PATH,
    "cookie": ParameterLocation.HEADER,
}


def is_file_schema(schema: Any) -> bool:
    """True for a string schema carrying file content, directly or as array items."""
    if not isinstance(schema, dict):
        return False
    if schema.get("type") == "string" and schema.get("format") in FILE_FORMATS:
        return True
    if schema.get("type") == "array":
        items = schema.get("items")
        return isinstance(items, dict) and items.get("type") == "string" and items.get("format") in FILE_FORMATS
    return False


def classify(node: dict[str, Any]) -> ParameterLocation:
    """Classify a declared parameter (has 'in') or a request-body property schema."""
    if "in" in node:
        return _DECLARED_LOCATIONS.get(node["in"], ParameterLocation.BODY)
    if is_file_schema(node):
        return ParameterLocation.FILE
    return ParameterLocation.BODY
