"""Schema normalisation: $ref resolution, allOf merging and filtering.

Every call returns a fresh tree, so schemas compiled for one operation
never share nodes with the document or with another operation.

Handles:
- local $ref resolution with per-branch cycle detection
- sibling keys overlaid on a resolved $ref (siblings merged too, allOf included)
- allOf composition (properties union, required union, first-wins otherwise)
- vendor extension stripping
- deprecated / caller-removed property filtering, also through $ref chains
- nullable properties dropped from 'required'
"""

import copy
import logging
from typing import Any

from openapi_tool_compiler.config import CompilerSettings
from openapi_tool_compiler.errors import CircularReferenceError, UnsupportedReferenceError
from openapi_tool_compiler.parser.refs import is_local_ref, walk_pointer

logger = logging.getLogger(__name__)

# Keywords whose values are data, not schemas
LITERAL_KEYS = frozenset({"enum", "const", "default", "example", "examples"})

# Keywords whose values map arbitrary names to schemas
NAME_MAP_KEYS = frozenset({"patternProperties", "$defs", "definitions", "dependentSchemas"})

NO_VISITS: frozenset[str] = frozenset()
NO_NAMES: frozenset[str] = frozenset()


def is_nullable(schema: Any) -> bool:
    """True for 3.0 'nullable: true' and 3.1 'type: [..., "null"]'."""
    if not isinstance(schema, dict):
        return False
    if schema.get("nullable") is True:
        return True
    schema_type = schema.get("type")
    return isinstance(schema_type, list) and "null" in schema_type


class SchemaMerger:
    """Turns raw schema nodes of one document into concrete schemas."""

    def __init__(self, document: dict[str, Any], settings: CompilerSettings | None = None):
        self.document = document
        self.settings = settings or CompilerSettings()

    def resolve_ref(self, ref: str, visited: frozenset[str] = NO_VISITS) -> Any:
        """Resolve a local reference and merge its target.

        `visited` holds the references already open on this branch only;
        siblings each get their own chain.
        """
        return self._resolve_ref(ref, visited)[0]

    def merge(self, node: Any, visited: frozenset[str] = NO_VISITS) -> Any:
        return self._merge(node, visited)[0]

    # The private steps return (schema, dropped): `dropped` names the
    # properties filtered out of the schema, so an enclosing allOf or $ref
    # overlay can keep them out of its own 'required'.

    def _resolve_ref(self, ref: str, visited: frozenset[str]) -> tuple[Any, frozenset[str]]:
        if not is_local_ref(ref):
            raise UnsupportedReferenceError(ref)
        if ref in visited:
            raise CircularReferenceError(ref, visited)

        target = walk_pointer(self.document, ref)
        return self._merge(target, visited | {ref})

    def _merge(self, node: Any, visited: frozenset[str]) -> tuple[Any, frozenset[str]]:
        if isinstance(node, list):
            return [self.merge(item, visited) for item in node], NO_NAMES
        if not isinstance(node, dict):
            return node, NO_NAMES

        if node.get("deprecated") is True:
            return {}, NO_NAMES
        if isinstance(node.get("$ref"), str):
            return self._merge_ref(node, visited)
        if isinstance(node.get("allOf"), list):
            return self._merge_all_of(node, visited)
        return self._merge_concrete(node, visited)

    def _merge_ref(self, node: dict[str, Any], visited: frozenset[str]) -> tuple[Any, frozenset[str]]:
        resolved, dropped = self._resolve_ref(node["$ref"], visited)
        siblings = {key: value for key, value in node.items() if key != "$ref"}
        if not isinstance(resolved, dict) or not siblings:
            return resolved, dropped

        # Annotations written next to the $ref override the target
        overlay, overlay_dropped = self._merge(siblings, visited)
        merged = dict(resolved)
        if isinstance(overlay, dict):
            self._fold(merged, overlay, override=True)
        return self._finish(merged, dropped | overlay_dropped)

    def _merge_all_of(self, node: dict[str, Any], visited: frozenset[str]) -> tuple[dict[str, Any], frozenset[str]]:
        rest = {key: value for key, value in node.items() if key != "allOf"}
        merged, dropped = self._merge(rest, visited)
        if not isinstance(merged, dict):
            merged = {}
        if not isinstance(merged.get("required", []), list):
            merged.pop("required")

        for branch in node["allOf"]:
            resolved, branch_dropped = self._merge(branch, visited)
            dropped |= branch_dropped
            if isinstance(resolved, dict):
                self._fold(merged, resolved, override=False)

        return self._finish(merged, dropped)

    def _merge_concrete(self, node: dict[str, Any], visited: frozenset[str]) -> tuple[dict[str, Any], frozenset[str]]:
        result: dict[str, Any] = {}
        dropped: frozenset[str] = NO_NAMES

        for key, value in node.items():
            if self.settings.is_vendor_extension(key):
                continue

            if key == "properties" and isinstance(value, dict):
                result[key], dropped = self._merge_properties(value, visited)
            elif key in NAME_MAP_KEYS and isinstance(value, dict):
                result[key] = {name: self.merge(sub, visited) for name, sub in value.items()}
            elif key in LITERAL_KEYS:
                result[key] = copy.deepcopy(value)
            else:
                result[key] = self.merge(value, visited)

        return self._finish(result, dropped)

    def _merge_properties(
        self, properties: dict[str, Any], visited: frozenset[str]
    ) -> tuple[dict[str, Any], frozenset[str]]:
        merged: dict[str, Any] = {}
        dropped: set[str] = set()
        for name, schema in properties.items():
            if self.settings.is_excluded(name, schema):
                logger.debug("Dropping property %s", name)
                dropped.add(name)
                continue

            merged_schema = self.merge(schema, visited)
            if self._references_deprecated(schema):
                logger.debug("Dropping property %s (deprecated reference)", name)
                dropped.add(name)
                continue
            merged[name] = merged_schema
        return merged, frozenset(dropped)

    def _references_deprecated(self, schema: Any) -> bool:
        """True when a $ref chain starting at `schema` reaches a deprecated node."""
        seen: set[str] = set()
        node = schema
        while isinstance(node, dict) and isinstance(node.get("$ref"), str):
            ref = node["$ref"]
            if not is_local_ref(ref) or ref in seen:
                return False
            seen.add(ref)
            node = walk_pointer(self.document, ref)
            if isinstance(node, dict) and node.get("deprecated") is True:
                return True
        return False

    @staticmethod
    def _fold(merged: dict[str, Any], schema: dict[str, Any], override: bool) -> None:
        """Fold `schema` into `merged`: properties and required are unioned."""
        for key, value in schema.items():
            if key == "properties" and isinstance(value, dict):
                merged["properties"] = {**(merged.get("properties") or {}), **value}
            elif key == "required" and isinstance(value, list):
                required = merged.get("required")
                required = list(required) if isinstance(required, list) else []
                required.extend(name for name in value if name not in required)
                merged["required"] = required
            elif override or key not in merged:
                merged[key] = value

    def _finish(self, schema: dict[str, Any], dropped: frozenset[str]) -> tuple[dict[str, Any], frozenset[str]]:
        """Filter 'required' and report the names still missing from 'properties'."""
        properties = schema.get("properties")
        if not isinstance(properties, dict):
            properties = {}
        # A name dropped in one branch but defined in another stays
        dropped = frozenset(name for name in dropped if name not in properties)

        if isinstance(schema.get("required"), list):
            required: list[str] = []
            for name in schema["required"]:
                if name in required or name in dropped or self.settings.is_removed(name):
                    continue
                if is_nullable(properties.get(name)):
                    continue
                required.append(name)
            if required:
                schema["required"] = required
            else:
                schema.pop("required", None)
        return schema, dropped
