from openapi_tool_compiler.parser.base import (
    ExecuteConfig,
    ParameterLocation,
    ParameterSpec,
    ToolDefinition,
    ToolParameters,
)


class TestParameterSpec:
    def test_defaults(self):
        p = ParameterSpec(name="id", location=ParameterLocation.PATH)
        assert p.type == "string"
        assert p.derived_from is None

    def test_accepts_wire_alias(self):
        p = ParameterSpec(name="content", location="file", derivedFrom="file_path")
        assert p.location is ParameterLocation.FILE
        assert p.derived_from == "file_path"


class TestToolDefinition:
    def _make_tool(self) -> ToolDefinition:
        return ToolDefinition(
            name="upload_file",
            description="Upload file",
            parameters=ToolParameters(
                properties={"file_path": {"type": "string"}, "note": {"type": "string"}},
                required=["file_path"],
            ),
            execute=ExecuteConfig(
                method="POST",
                url="https://api.example.com/files",
                body_type="form-data",
                params=[
                    ParameterSpec(name="content", location=ParameterLocation.FILE, derived_from="file_path"),
                    ParameterSpec(name="note", location=ParameterLocation.BODY),
                ],
            ),
        )

    def test_to_dict_uses_camel_case(self):
        data = self._make_tool().to_dict()
        assert data["execute"]["bodyType"] == "form-data"
        assert data["execute"]["params"][0] == {
            "name": "content",
            "location": "file",
            "type": "string",
            "derivedFrom": "file_path",
        }
        assert "derivedFrom" not in data["execute"]["params"][1]

    def test_to_dict_omits_empty_required(self):
        tool = ToolDefinition(
            name="ping",
            parameters=ToolParameters(),
            execute=ExecuteConfig(method="GET", url="/ping"),
        )
        data = tool.to_dict()
        assert data["parameters"] == {"type": "object", "properties": {}}
        assert data["execute"]["bodyType"] == "json"
        assert data["description"] == ""

    def test_roundtrip_from_wire_form(self):
        tool = self._make_tool()
        again = ToolDefinition(**tool.to_dict())
        assert again == tool

    def test_param_lookup(self):
        execute = self._make_tool().execute
        assert execute.param("note").location == ParameterLocation.BODY
        assert execute.param("missing") is None
