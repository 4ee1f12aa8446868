from pathlib import Path

import pytest

from openapi_tool_compiler.config import CompilerSettings
from openapi_tool_compiler.errors import DocumentLoadError
from openapi_tool_compiler.parser.base import ParameterLocation
from openapi_tool_compiler.parser.detect import detect_version, load_document_text
from openapi_tool_compiler.parser.swagger import load_document, parse_openapi

FIXTURES = Path(__file__).parent / "fixtures"


class TestLoadDocument:
    def test_load_yaml(self):
        doc = load_document(FIXTURES / "petstore.yaml")
        assert detect_version(doc) == "3.0.3"

    def test_load_json(self):
        doc = load_document(FIXTURES / "documents.json")
        assert detect_version(doc) == "3.1.0"

    def test_missing_file(self, tmp_path):
        with pytest.raises(DocumentLoadError):
            load_document(tmp_path / "nope.json")

    def test_swagger_2_rejected(self):
        with pytest.raises(DocumentLoadError, match="OpenAPI 3.x"):
            load_document_text('{"swagger": "2.0", "paths": {}}')

    def test_non_mapping_rejected(self):
        with pytest.raises(DocumentLoadError):
            load_document_text("- just\n- a list\n")

    def test_invalid_yaml_rejected(self):
        with pytest.raises(DocumentLoadError):
            load_document_text("openapi: [unclosed\n")


class TestPetstore:
    def test_endpoints_count(self):
        tools = parse_openapi(FIXTURES / "petstore.yaml")
        # DELETE /pets/{petId} has no operationId and is left out
        assert sorted(tools) == ["createPet", "listPets", "showPetById"]

    def test_list_pets(self):
        tool = parse_openapi(FIXTURES / "petstore.yaml")["listPets"]
        assert tool.description == "List all pets"
        assert tool.execute.method == "GET"
        assert tool.execute.url == "https://petstore.example.com/v1/pets"
        assert tool.execute.body_type == "json"
        assert set(tool.parameters.properties) == {"limit", "X-Trace-Id"}
        assert tool.parameters.properties["limit"] == {
            "type": "integer",
            "format": "int32",
            "description": "How many items to return at one time (max 100)",
        }
        assert tool.parameters.required == ["X-Trace-Id"]
        assert tool.execute.param("X-Trace-Id").location == ParameterLocation.HEADER
        assert tool.execute.param("limit").type == "integer"
        assert tool.execute.param("legacy_filter") is None

    def test_create_pet_merges_all_of_body(self):
        tool = parse_openapi(FIXTURES / "petstore.yaml")["createPet"]
        assert list(tool.parameters.properties) == ["name", "tag", "id"]
        # tag is nullable, nickname is deprecated
        assert tool.parameters.required == ["name", "id"]
        assert tool.parameters.properties["id"] == {"type": "integer", "format": "int64"}
        assert all(p.location == ParameterLocation.BODY for p in tool.execute.params)

    def test_path_level_parameter(self):
        tool = parse_openapi(FIXTURES / "petstore.yaml")["showPetById"]
        assert tool.execute.url == "https://petstore.example.com/v1/pets/{petId}"
        assert tool.parameters.required == ["petId"]
        assert tool.execute.param("petId").location == ParameterLocation.PATH

    def test_custom_base_url(self):
        settings = CompilerSettings(base_url="https://staging.example.com")
        tools = parse_openapi(FIXTURES / "petstore.yaml", settings)
        assert tools["listPets"].execute.url == "https://staging.example.com/pets"


class TestDocumentsUpload:
    def test_server_variables_use_defaults(self):
        tools = parse_openapi(FIXTURES / "documents.json")
        assert tools["documents_list_files"].execute.url == "https://eu.documents.example.com/documents/files"

    def test_upload_is_simplified(self):
        tool = parse_openapi(FIXTURES / "documents.json")["documents_upload_file"]
        assert tool.execute.body_type == "form-data"
        assert set(tool.parameters.properties) == {"x-account-id", "category_id", "source_value", "file_path"}
        assert tool.parameters.required == ["x-account-id", "file_path"]

        names = [p.name for p in tool.execute.params]
        assert "file_path" not in names
        for name in ("name", "content", "file_format"):
            assert tool.execute.param(name).derived_from == "file_path"
        assert tool.execute.param("content").location == ParameterLocation.FILE
        assert tool.execute.param("file_format").type == "object"
        assert tool.execute.param("category_id").derived_from is None
        assert tool.execute.param("category_id").type == "string"

    def test_excluded_names_removed_everywhere(self):
        settings = CompilerSettings(removed_params=["source_value"])
        tools = parse_openapi(FIXTURES / "documents.json", settings)
        for tool in tools.values():
            assert "source_value" not in tool.parameters.properties
            assert tool.execute.param("source_value") is None
