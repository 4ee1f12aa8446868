"""Compiler configuration.

Settings are immutable and passed by value into the compiler, so every
recursive merge sees the same exclusion rules.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict

DEFAULT_FILE_DETECTION_NAMES = ("content", "file", "file_format")
DEFAULT_FILE_PARAMETER_NAMES = ("name", "content", "file_format")
FILE_PATH_PARAM = "file_path"


class CompilerSettings(BaseModel):
    """Caller-supplied options for one compilation run."""

    model_config = ConfigDict(frozen=True)

    base_url: str | None = None
    default_base_url: str = ""
    removed_params: frozenset[str] = frozenset()
    file_detection_names: tuple[str, ...] = DEFAULT_FILE_DETECTION_NAMES
    file_parameter_names: tuple[str, ...] = DEFAULT_FILE_PARAMETER_NAMES
    vendor_extension_prefix: str = "x-"

    def is_removed(self, name: str) -> bool:
        return name in self.removed_params

    def is_excluded(self, name: str, node: Any) -> bool:
        """True when a named property or parameter must not reach the output."""
        if self.is_removed(name):
            return True
        return isinstance(node, dict) and node.get("deprecated") is True

    def is_vendor_extension(self, key: str) -> bool:
        return key.startswith(self.vendor_extension_prefix)
