"""OpenAPI operation compiler.

Compiles every operation of an OpenAPI 3.x document into a ToolDefinition.
A broken parameter is skipped, a broken operation is left out of the
catalog; neither stops the rest of the document from compiling.
"""

import logging
import re
from typing import Any

from openapi_tool_compiler.config import CompilerSettings
from openapi_tool_compiler.errors import (
    CircularReferenceError,
    CompilerError,
    MissingOperationIdError,
    UnsupportedReferenceError,
)
from openapi_tool_compiler.parser.base import (
    ExecuteConfig,
    ParameterLocation,
    ParameterSpec,
    ToolDefinition,
    ToolParameters,
)
from openapi_tool_compiler.parser.classify import classify
from openapi_tool_compiler.parser.detect import load_document_text
from openapi_tool_compiler.parser.files import is_file_upload_operation, simplify_file_upload_parameters
from openapi_tool_compiler.parser.refs import is_local_ref, walk_pointer
from openapi_tool_compiler.parser.schema import SchemaMerger, is_nullable

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

# Request body media types in order of preference, with the body encoding they map to
BODY_CONTENT_TYPES = (
    ("application/json", "json"),
    ("multipart/form-data", "form-data"),
    ("application/x-www-form-urlencoded", "form"),
)

_SERVER_VARIABLE = re.compile(r"\{([^}]+)\}")


class OpenAPICompiler:
    """Compiles one OpenAPI document into tool definitions."""

    def __init__(self, document: dict[str, Any], settings: CompilerSettings | None = None):
        self.document = document
        self.settings = settings or CompilerSettings()
        self.merger = SchemaMerger(document, self.settings)
        self.base_url = (self.settings.base_url or self._determine_base_url()).rstrip("/")

    @classmethod
    def from_string(cls, text: str, settings: CompilerSettings | None = None) -> "OpenAPICompiler":
        """Create a compiler from JSON or YAML text."""
        return cls(load_document_text(text), settings)

    def _determine_base_url(self) -> str:
        servers = self.document.get("servers") or []
        if not servers or not isinstance(servers[0], dict) or not servers[0].get("url"):
            return self.settings.default_base_url

        server = servers[0]
        variables = server.get("variables") or {}

        def _default(match: re.Match) -> str:
            variable = variables.get(match.group(1))
            if isinstance(variable, dict) and "default" in variable:
                return str(variable["default"])
            return match.group(0)

        return _SERVER_VARIABLE.sub(_default, server["url"])

    def compile_all(self) -> dict[str, ToolDefinition]:
        """Compile every operation of the document, keyed by operationId."""
        tools: dict[str, ToolDefinition] = {}
        paths = self.document.get("paths") or {}
        if not isinstance(paths, dict):
            logger.warning("Ignoring 'paths': expected a mapping, got %s", type(paths).__name__)
            paths = {}

        for path, path_item in paths.items():
            if not isinstance(path_item, dict):
                continue

            path_parameters = path_item.get("parameters") or []
            for method, operation in self.extract_operations(path_item):
                try:
                    tool = self.compile_operation(path, method, operation, path_parameters)
                except (CompilerError, KeyError, TypeError, AttributeError, ValueError) as e:
                    logger.warning("Skipping operation %s %s: %s", method.upper(), path, e)
                    continue

                if tool.name in tools:
                    logger.warning(
                        "Duplicate operationId '%s' at %s %s replaces an earlier operation",
                        tool.name, method.upper(), path,
                    )
                tools[tool.name] = tool

        logger.info("Compiled %d tools from %d paths", len(tools), len(paths))
        return tools

    def extract_operations(self, path_item: dict[str, Any]) -> list[tuple[str, dict[str, Any]]]:
        """Return (method, operation) pairs in a fixed method order."""
        return [
            (method, path_item[method])
            for method in HTTP_METHODS
            if isinstance(path_item.get(method), dict)
        ]

    def compile_operation(
        self,
        path: str,
        method: str,
        operation: dict[str, Any],
        path_parameters: list[dict[str, Any]] | tuple = (),
    ) -> ToolDefinition:
        name = operation.get("operationId")
        if not isinstance(name, str) or not name.strip():
            raise MissingOperationIdError(method, path)

        logger.debug("Compiling %s (%s %s)", name, method.upper(), path)
        body_schema, body_type = self.parse_request_body(operation)

        # Scratch state, local to this operation
        properties: dict[str, Any] = {}
        locations: dict[str, ParameterLocation] = {}
        required: list[str] = []

        for param in self._collect_parameters(name, path_parameters, operation.get("parameters") or []):
            try:
                param_name = param["name"]
                schema = dict(param.get("schema") or {})
                if "description" in param:
                    schema["description"] = param["description"]
                merged = self.merger.merge(schema)
            except (CompilerError, KeyError, TypeError) as e:
                logger.warning("Skipping parameter %r of %s: %s", param.get("name"), name, e)
                continue

            location = classify(param)
            properties[param_name] = merged
            locations[param_name] = location
            if param.get("required") and param_name not in required:
                if location == ParameterLocation.PATH or not is_nullable(merged):
                    required.append(param_name)

        if isinstance(body_schema, dict):
            for prop_name, prop_schema in (body_schema.get("properties") or {}).items():
                properties[prop_name] = prop_schema
                locations[prop_name] = classify(prop_schema)
            required.extend(n for n in body_schema.get("required") or [] if n not in required)
        elif body_schema is not None:
            logger.debug("Ignoring non-object request body of %s", name)

        # Wire types come from the schemas as declared, before simplification
        wire_properties = properties
        derived: dict[str, str] = {}
        ui_only: frozenset[str] = frozenset()

        if is_file_upload_operation(locations, body_schema, self.settings):
            simplified = simplify_file_upload_parameters(properties, locations, required, self.settings)
            properties, locations, required = simplified.properties, simplified.locations, simplified.required
            derived, ui_only = simplified.derived, simplified.ui_only

        removed = self.settings.removed_params
        properties = {key: value for key, value in properties.items() if key not in removed}
        required = [key for key in required if key not in removed]

        params = [
            ParameterSpec(
                name=param_name,
                location=location,
                type=_schema_type(wire_properties.get(param_name)),
                derived_from=derived.get(param_name),
            )
            for param_name, location in locations.items()
            if param_name not in ui_only and param_name not in removed
        ]

        return ToolDefinition(
            name=name,
            description=operation.get("summary") or operation.get("description") or "",
            parameters=ToolParameters(properties=properties, required=required or None),
            execute=ExecuteConfig(
                method=method.upper(),
                url=f"{self.base_url}{path}",
                body_type=body_type or "json",
                params=params,
            ),
        )

    def _collect_parameters(
        self,
        operation_name: str,
        path_parameters: list[dict[str, Any]] | tuple,
        operation_parameters: list[dict[str, Any]],
    ) -> list[dict[str, Any]]:
        """Resolve path-level and operation-level parameters.

        Operation-level parameters replace path-level ones with the same
        name and location. Unresolvable and excluded parameters are dropped.
        """
        collected: dict[tuple[str, str], dict[str, Any]] = {}
        for param in [*path_parameters, *operation_parameters]:
            try:
                resolved = self.resolve_parameter(param)
            except CompilerError as e:
                logger.warning("Skipping parameter of %s: %s", operation_name, e)
                continue
            if not isinstance(resolved, dict) or not isinstance(resolved.get("name"), str):
                logger.warning("Skipping malformed parameter of %s: %r", operation_name, param)
                continue
            if self.settings.is_excluded(resolved["name"], resolved):
                logger.debug("Excluding parameter %s of %s", resolved["name"], operation_name)
                continue
            collected[(resolved["name"], str(resolved.get("in")))] = resolved
        return list(collected.values())

    def resolve_parameter(self, param: dict[str, Any]) -> dict[str, Any]:
        """Follow a parameter $ref (and any chain of them) to the parameter object."""
        return self._follow_refs(param)

    def parse_request_body(self, operation: dict[str, Any]) -> tuple[Any, str | None]:
        """Return (merged schema, body type) for the preferred supported media type."""
        request_body = operation.get("requestBody")
        if not request_body:
            return None, None

        request_body = self._follow_refs(request_body)
        content = request_body.get("content") or {}
        for content_type, body_type in BODY_CONTENT_TYPES:
            if content_type in content:
                media = content[content_type] or {}
                return self.merger.merge(media.get("schema") or {}), body_type

        logger.debug("No supported request body media type in %s", sorted(content))
        return None, None

    def _follow_refs(self, node: dict[str, Any]) -> dict[str, Any]:
        visited: set[str] = set()
        while isinstance(node, dict) and isinstance(node.get("$ref"), str):
            ref = node["$ref"]
            if not is_local_ref(ref):
                raise UnsupportedReferenceError(ref)
            if ref in visited:
                raise CircularReferenceError(ref, frozenset(visited))
            visited.add(ref)
            node = walk_pointer(self.document, ref)
        return node


def _schema_type(schema: Any) -> str:
    if not isinstance(schema, dict):
        return "string"
    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        schema_type = next((t for t in schema_type if t != "null"), None)
    return schema_type if isinstance(schema_type, str) else "string"
