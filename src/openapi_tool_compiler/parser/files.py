"""File-upload simplification.

Upload endpoints usually expose several low-level fields (raw content,
file name, format) that can all be derived from one local path. The
simplifier hides them behind a single ``file_path`` argument and records,
for each hidden field, that its wire value is derived from ``file_path``.
"""

from dataclasses import dataclass, field
from typing import Any

from openapi_tool_compiler.config import FILE_PATH_PARAM, CompilerSettings
from openapi_tool_compiler.parser.base import ParameterLocation

FILE_PATH_DESCRIPTION = (
    "Path to the file to upload. The filename and format will be automatically extracted from the path."
)


@dataclass(frozen=True)
class FileUploadSimplification:
    """Result of simplifying one operation's parameters.

    `derived` maps each hidden wire parameter to the user-facing parameter
    it is rebuilt from; `ui_only` names user-facing parameters that have
    no wire representation. The two never overlap.
    """

    properties: dict[str, Any]
    locations: dict[str, ParameterLocation]
    required: list[str]
    derived: dict[str, str] = field(default_factory=dict)
    ui_only: frozenset[str] = frozenset()


def is_file_upload_operation(
    locations: dict[str, ParameterLocation],
    body_schema: Any = None,
    settings: CompilerSettings | None = None,
) -> bool:
    settings = settings or CompilerSettings()
    if any(location == ParameterLocation.FILE for location in locations.values()):
        return True

    if not isinstance(body_schema, dict) or not isinstance(body_schema.get("properties"), dict):
        return False

    properties = body_schema["properties"]
    if any(name in properties for name in settings.file_detection_names):
        return True
    return any(isinstance(prop, dict) and prop.get("format") == "binary" for prop in properties.values())


def simplify_file_upload_parameters(
    properties: dict[str, Any],
    locations: dict[str, ParameterLocation],
    required: list[str],
    settings: CompilerSettings | None = None,
) -> FileUploadSimplification:
    """Collapse the file fields of an upload operation into ``file_path``.

    The inputs are left untouched. Calling this again on an already
    simplified set of parameters returns them unchanged.
    """
    settings = settings or CompilerSettings()
    if FILE_PATH_PARAM in properties:
        return FileUploadSimplification(dict(properties), dict(locations), list(required))

    file_params = [name for name in settings.file_parameter_names if name in properties]
    derived = {name: FILE_PATH_PARAM for name in file_params}

    new_properties = {name: schema for name, schema in properties.items() if name not in derived}
    new_properties[FILE_PATH_PARAM] = {"type": "string", "description": FILE_PATH_DESCRIPTION}

    new_locations = dict(locations)
    new_locations[FILE_PATH_PARAM] = ParameterLocation.FILE

    new_required = [name for name in required if name not in settings.file_parameter_names]
    new_required.append(FILE_PATH_PARAM)

    return FileUploadSimplification(
        properties=new_properties,
        locations=new_locations,
        required=new_required,
        derived=derived,
        ui_only=frozenset({FILE_PATH_PARAM}),
    )
