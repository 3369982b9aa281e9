"""Schema, argument and result mapping between commands and MCP tools.

This module translates command parameter schemas into JSON Schema, maps
untyped tool call arguments onto command parameters, and turns command
result records into MCP content.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Union

from mcp import types

from commandry.hosting import ParameterDefinition, ParameterSchema, ParameterType

from ..constants import ErrorMessage
from ..errors import ArgumentMappingError
from ..outcome import Content

logger = logging.getLogger(__name__)

# MCP content models a structured record can describe directly via its "type" key
CONTENT_MODELS: dict[str, type] = {
    "text": types.TextContent,
    "image": types.ImageContent,
    "resource": types.EmbeddedResource,
}

_TRUE_STRINGS = {"true", "yes", "1"}
_FALSE_STRINGS = {"false", "no", "0"}


@dataclass(frozen=True)
class ScalarRecord:
    """Result record rendered as plain text."""

    text: str


@dataclass(frozen=True)
class StructuredRecord:
    """Result record carrying a key/value mapping."""

    value: dict[str, Any]


RecordShape = Union[ScalarRecord, StructuredRecord]


class ToolsMapper:
    """Maps command schemas, arguments and records to and from MCP types."""

    def to_json_schema(self, schema: ParameterSchema | None) -> dict[str, Any]:
        """Convert a command parameter schema into a JSON Schema object.

        Args:
            schema: Command parameter schema (None maps to an empty schema)

        Returns:
            JSON Schema dictionary of type "object"
        """
        json_schema: dict[str, Any] = {"type": "object", "properties": {}}
        if not schema:
            return json_schema

        required = []
        for parameter in schema:
            json_schema["properties"][parameter.name] = self._parameter_schema(parameter)
            if parameter.required:
                required.append(parameter.name)

        if required:
            json_schema["required"] = required
        return json_schema

    @staticmethod
    def _parameter_schema(parameter: ParameterDefinition) -> dict[str, Any]:
        prop: dict[str, Any] = {}
        if parameter.type is not ParameterType.ANY:
            prop["type"] = parameter.type.value
        if parameter.type is ParameterType.ARRAY and parameter.items not in (None, ParameterType.ANY):
            prop["items"] = {"type": parameter.items.value}
        if parameter.description:
            prop["description"] = parameter.description
        if parameter.enum:
            prop["enum"] = list(parameter.enum)
        if parameter.default is not None:
            prop["default"] = parameter.default
        return prop

    def to_parameters(
        self,
        arguments: Mapping[str, Any] | None,
        schema: ParameterSchema | None,
    ) -> dict[str, Any]:
        """Map tool call arguments onto command parameters.

        Unknown argument names are rejected. Missing optional parameters take
        their declared default when one exists; an explicit null counts as
        missing.

        Args:
            arguments: Raw arguments from the tool call (may be None)
            schema: Command parameter schema

        Returns:
            Dictionary of coerced parameter values

        Raises:
            ArgumentMappingError: If an argument is unknown, missing or
                cannot be coerced to its declared type
        """
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            raise ArgumentMappingError(ErrorMessage.ARGUMENTS_NOT_OBJECT)

        schema = schema or ParameterSchema()
        for name in arguments:
            if schema.get(name) is None:
                raise ArgumentMappingError(ErrorMessage.UNKNOWN_ARGUMENT.format(name=name), name)

        parameters: dict[str, Any] = {}
        for definition in schema:
            value = arguments.get(definition.name)
            if value is None:
                if definition.required:
                    raise ArgumentMappingError(
                        ErrorMessage.MISSING_ARGUMENT.format(name=definition.name),
                        definition.name,
                    )
                if definition.default is not None:
                    parameters[definition.name] = definition.default
                continue

            coerced = _coerce(definition.name, definition.type, value, definition.items)
            if definition.enum and coerced not in definition.enum:
                raise ArgumentMappingError(
                    ErrorMessage.INVALID_CHOICE.format(
                        name=definition.name,
                        choices=list(definition.enum),
                        actual=value,
                    ),
                    definition.name,
                )
            parameters[definition.name] = coerced

        return parameters

    def classify_record(self, record: Any) -> RecordShape | None:
        """Classify a result record by shape; None records yield None."""
        if record is None:
            return None
        if isinstance(record, Mapping):
            return StructuredRecord(dict(record))
        return ScalarRecord(str(record))

    def to_content(self, record: Mapping[str, Any]) -> Content:
        """Convert a structured record into MCP content.

        A record whose "type" names an MCP content type (text, image,
        resource) and validates against it becomes that content item. Any
        other record is serialized to JSON text content.

        Args:
            record: Key/value record

        Returns:
            MCP content item
        """
        content_type = record.get("type")
        model = CONTENT_MODELS.get(content_type) if isinstance(content_type, str) else None
        if model is not None:
            try:
                return model.model_validate(dict(record))
            except ValueError as e:
                logger.debug(f"Record does not match {content_type} content, using JSON text: {e}")

        text = json.dumps(_string_keys(record), indent=2, default=str, ensure_ascii=False)
        return types.TextContent(type="text", text=text)

    def record_to_content(self, record: Any) -> Content | None:
        """Convert any result record into MCP content (None for null records)."""
        shape = self.classify_record(record)
        if shape is None:
            return None
        if isinstance(shape, StructuredRecord):
            return self.to_content(shape.value)
        return types.TextContent(type="text", text=shape.text)


def _string_keys(value: Any) -> Any:
    # JSON objects only have string keys
    if isinstance(value, Mapping):
        return {str(key): _string_keys(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_string_keys(item) for item in value]
    return value


def _coerce(
    name: str,
    parameter_type: ParameterType,
    value: Any,
    items: ParameterType | None = None,
) -> Any:
    def invalid(expected: str) -> ArgumentMappingError:
        return ArgumentMappingError(
            ErrorMessage.INVALID_ARGUMENT.format(name=name, expected=expected, actual=value),
            name,
        )

    if parameter_type is ParameterType.ANY:
        return value

    if parameter_type is ParameterType.STRING:
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        raise invalid("a string")

    if parameter_type is ParameterType.INTEGER:
        if isinstance(value, bool):
            raise invalid("an integer")
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                raise invalid("an integer") from None
        raise invalid("an integer")

    if parameter_type is ParameterType.NUMBER:
        if isinstance(value, bool):
            raise invalid("a number")
        if isinstance(value, (int, float)):
            return value
        if isinstance(value, str):
            try:
                return float(value.strip())
            except ValueError:
                raise invalid("a number") from None
        raise invalid("a number")

    if parameter_type is ParameterType.BOOLEAN:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
        raise invalid("a boolean")

    if parameter_type is ParameterType.ARRAY:
        if not isinstance(value, (list, tuple)):
            raise invalid("an array")
        if items is None or items is ParameterType.ANY:
            return list(value)
        return [_coerce(f"{name}[{index}]", items, item) for index, item in enumerate(value)]

    if parameter_type is ParameterType.OBJECT:
        if not isinstance(value, Mapping):
            raise invalid("an object")
        return dict(value)

    raise invalid(parameter_type.value)
