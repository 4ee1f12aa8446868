"""Local JSON-pointer lookup inside an OpenAPI document."""

from typing import Any

from openapi_tool_compiler.errors import InvalidReferencePathError, UnsupportedReferenceError

LOCAL_PREFIX = "#/"


def is_local_ref(ref: str) -> bool:
    return ref.startswith(LOCAL_PREFIX)


def split_pointer(ref: str) -> list[str]:
    """Split '#/a/b~1c' into ['a', 'b/c']."""
    if not is_local_ref(ref):
        raise UnsupportedReferenceError(ref)
    return [part.replace("~1", "/").replace("~0", "~") for part in ref[len(LOCAL_PREFIX):].split("/")]


def walk_pointer(document: dict[str, Any], ref: str) -> Any:
    """Return the raw node a local reference points at.

    Raises UnsupportedReferenceError for anything but '#/...' and
    InvalidReferencePathError when a segment is missing or the walk
    hits a scalar.
    """
    node: Any = document
    for segment in split_pointer(ref):
        if isinstance(node, dict):
            if segment not in node:
                raise InvalidReferencePathError(ref, segment)
            node = node[segment]
        elif isinstance(node, list):
            try:
                node = node[int(segment)]
            except (ValueError, IndexError):
                raise InvalidReferencePathError(ref, segment) from None
        else:
            raise InvalidReferencePathError(ref, segment)
    return node
