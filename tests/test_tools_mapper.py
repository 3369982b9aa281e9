"""Tests for the tools mapper.

Tests cover:
- Parameter schema to JSON Schema conversion
- Argument coercion and validation
- Record classification and content conversion
"""

import json

import pytest
from mcp import types

from commandry.hosting import ParameterDefinition, ParameterSchema, ParameterType
from commandry_mcp.errors import ArgumentMappingError
from commandry_mcp.tools.mapper import ScalarRecord, StructuredRecord, ToolsMapper


@pytest.fixture
def mapper():
    return ToolsMapper()


@pytest.fixture
def deploy_schema():
    return ParameterSchema.of(
        ParameterDefinition(
            "environment",
            ParameterType.STRING,
            description="Target environment",
            required=True,
            enum=("staging", "production"),
        ),
        ParameterDefinition("replicas", ParameterType.INTEGER, default=1),
        ParameterDefinition("ratio", ParameterType.NUMBER),
        ParameterDefinition("dry_run", ParameterType.BOOLEAN, default=False),
        ParameterDefinition("tags", ParameterType.ARRAY, items=ParameterType.STRING),
        ParameterDefinition("labels", ParameterType.OBJECT),
        ParameterDefinition("extra", ParameterType.ANY),
    )


@pytest.mark.unit
class TestToJsonSchema:
    """Test parameter schema conversion."""

    def test_empty_schema(self, mapper):
        expected = {"type": "object", "properties": {}}

        assert mapper.to_json_schema(None) == expected
        assert mapper.to_json_schema(ParameterSchema()) == expected

    def test_full_schema(self, mapper, deploy_schema):
        schema = mapper.to_json_schema(deploy_schema)

        assert schema["type"] == "object"
        assert schema["required"] == ["environment"]
        assert schema["properties"]["environment"] == {
            "type": "string",
            "description": "Target environment",
            "enum": ["staging", "production"],
        }
        assert schema["properties"]["replicas"] == {"type": "integer", "default": 1}
        assert schema["properties"]["dry_run"] == {"type": "boolean", "default": False}
        assert schema["properties"]["tags"] == {"type": "array", "items": {"type": "string"}}
        assert schema["properties"]["labels"] == {"type": "object"}
        assert schema["properties"]["extra"] == {}

    def test_property_order_follows_schema(self, mapper, deploy_schema):
        schema = mapper.to_json_schema(deploy_schema)
        assert list(schema["properties"]) == deploy_schema.names

    def test_deterministic(self, mapper, deploy_schema):
        assert mapper.to_json_schema(deploy_schema) == mapper.to_json_schema(deploy_schema)

    def test_schema_is_json_serializable(self, mapper, deploy_schema):
        json.dumps(mapper.to_json_schema(deploy_schema))


@pytest.mark.unit
class TestToParameters:
    """Test argument mapping."""

    def test_absent_arguments_with_empty_schema(self, mapper):
        assert mapper.to_parameters(None, ParameterSchema()) == {}
        assert mapper.to_parameters({}, None) == {}

    def test_defaults_applied(self, mapper, deploy_schema):
        parameters = mapper.to_parameters({"environment": "staging"}, deploy_schema)

        assert parameters == {"environment": "staging", "replicas": 1, "dry_run": False}

    def test_values_coerced(self, mapper, deploy_schema):
        parameters = mapper.to_parameters(
            {
                "environment": "production",
                "replicas": "3",
                "ratio": "0.5",
                "dry_run": "true",
                "tags": ["a", 2],
                "labels": {"team": "core"},
                "extra": [1, {"x": None}],
            },
            deploy_schema,
        )

        assert parameters == {
            "environment": "production",
            "replicas": 3,
            "ratio": 0.5,
            "dry_run": True,
            "tags": ["a", "2"],
            "labels": {"team": "core"},
            "extra": [1, {"x": None}],
        }

    def test_integral_float_accepted_as_integer(self, mapper, deploy_schema):
        parameters = mapper.to_parameters({"environment": "staging", "replicas": 4.0}, deploy_schema)
        assert parameters["replicas"] == 4
        assert isinstance(parameters["replicas"], int)

    def test_explicit_null_counts_as_missing(self, mapper, deploy_schema):
        parameters = mapper.to_parameters({"environment": "staging", "replicas": None}, deploy_schema)
        assert parameters["replicas"] == 1

    def test_missing_required(self, mapper, deploy_schema):
        with pytest.raises(ArgumentMappingError, match="Missing required argument 'environment'"):
            mapper.to_parameters({}, deploy_schema)

    def test_unknown_argument_rejected(self, mapper, deploy_schema):
        with pytest.raises(ArgumentMappingError, match="Unknown argument 'colour'") as exc_info:
            mapper.to_parameters({"environment": "staging", "colour": "blue"}, deploy_schema)

        assert exc_info.value.parameter == "colour"

    @pytest.mark.parametrize(
        "name, value, expected",
        [
            ("replicas", "many", "an integer"),
            ("replicas", True, "an integer"),
            ("replicas", 1.5, "an integer"),
            ("ratio", "half", "a number"),
            ("dry_run", "maybe", "a boolean"),
            ("tags", "a,b", "an array"),
            ("labels", ["team"], "an object"),
            ("environment", {"name": "x"}, "a string"),
        ],
    )
    def test_invalid_values(self, mapper, deploy_schema, name, value, expected):
        arguments = {"environment": "staging", name: value}

        with pytest.raises(ArgumentMappingError, match=f"Argument '{name}' must be {expected}"):
            mapper.to_parameters(arguments, deploy_schema)

    def test_invalid_array_item_names_index(self, mapper):
        schema = ParameterSchema.of(
            ParameterDefinition("ports", ParameterType.ARRAY, items=ParameterType.INTEGER),
        )

        with pytest.raises(ArgumentMappingError, match=r"Argument 'ports\[1\]' must be an integer"):
            mapper.to_parameters({"ports": [80, "http"]}, schema)

    def test_enum_violation(self, mapper, deploy_schema):
        with pytest.raises(ArgumentMappingError, match="must be one of"):
            mapper.to_parameters({"environment": "qa"}, deploy_schema)

    def test_arguments_must_be_mapping(self, mapper, deploy_schema):
        with pytest.raises(ArgumentMappingError, match="must be an object"):
            mapper.to_parameters(["staging"], deploy_schema)


@pytest.mark.unit
class TestRecordMapping:
    """Test record classification and content conversion."""

    def test_classify_record(self, mapper):
        assert mapper.classify_record(None) is None
        assert mapper.classify_record({"a": 1}) == StructuredRecord({"a": 1})
        assert mapper.classify_record(42) == ScalarRecord("42")
        assert mapper.classify_record("done") == ScalarRecord("done")

    def test_scalar_record_becomes_text(self, mapper):
        content = mapper.record_to_content(3.5)

        assert isinstance(content, types.TextContent)
        assert content.type == "text"
        assert content.text == "3.5"

    def test_null_record_dropped(self, mapper):
        assert mapper.record_to_content(None) is None

    def test_plain_mapping_becomes_json_text(self, mapper):
        content = mapper.to_content({"name": "build", "count": 2})

        assert isinstance(content, types.TextContent)
        assert json.loads(content.text) == {"name": "build", "count": 2}

    def test_non_json_values_are_stringified(self, mapper):
        class Version:
            def __str__(self):
                return "1.2.3"

        content = mapper.to_content({"version": Version()})
        assert json.loads(content.text) == {"version": "1.2.3"}

    def test_non_string_keys_are_stringified(self, mapper):
        content = mapper.to_content({(1, 2): "x", "nested": {3: [{None: True}]}})

        assert json.loads(content.text) == {"(1, 2)": "x", "nested": {"3": [{"None": True}]}}

    def test_typed_text_mapping(self, mapper):
        content = mapper.to_content({"type": "text", "text": "hello"})

        assert isinstance(content, types.TextContent)
        assert content.text == "hello"

    def test_typed_image_mapping(self, mapper):
        content = mapper.to_content({"type": "image", "data": "aGVsbG8=", "mimeType": "image/png"})

        assert isinstance(content, types.ImageContent)
        assert content.mimeType == "image/png"

    def test_typed_resource_mapping(self, mapper):
        content = mapper.to_content(
            {
                "type": "resource",
                "resource": {"uri": "file:///tmp/report.txt", "text": "report"},
            }
        )

        assert isinstance(content, types.EmbeddedResource)
        assert content.resource.text == "report"

    def test_invalid_typed_mapping_falls_back_to_json(self, mapper):
        content = mapper.to_content({"type": "image", "caption": "no data"})

        assert isinstance(content, types.TextContent)
        assert json.loads(content.text) == {"type": "image", "caption": "no data"}

    def test_structured_record_routed_through_to_content(self, mapper):
        content = mapper.record_to_content({"type": "text", "text": "via mapping"})
        assert content.text == "via mapping"
