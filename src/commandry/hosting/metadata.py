"""Command metadata model.

This module defines the descriptive snapshot a command produces about itself:
its name, title, description, an extensible property set and the schema of
its parameters.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Iterator, Mapping


class ParameterType(str, Enum):
    """Closed set of parameter types a command can declare."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    ANY = "any"


@dataclass(frozen=True)
class ParameterDefinition:
    """Declaration of a single named command parameter."""

    name: str
    type: ParameterType = ParameterType.STRING
    description: str | None = None
    required: bool = False
    default: Any = None
    enum: tuple[Any, ...] | None = None
    items: ParameterType | None = None  # element type for arrays


@dataclass(frozen=True)
class ParameterSchema:
    """Ordered collection of parameter definitions."""

    parameters: tuple[ParameterDefinition, ...] = ()

    def __iter__(self) -> Iterator[ParameterDefinition]:
        return iter(self.parameters)

    def __len__(self) -> int:
        return len(self.parameters)

    def get(self, name: str) -> ParameterDefinition | None:
        """Get a parameter definition by name.

        Args:
            name: Parameter name

        Returns:
            ParameterDefinition if declared, None otherwise
        """
        for parameter in self.parameters:
            if parameter.name == name:
                return parameter
        return None

    @property
    def names(self) -> list[str]:
        return [parameter.name for parameter in self.parameters]

    @classmethod
    def of(cls, *parameters: ParameterDefinition) -> "ParameterSchema":
        return cls(tuple(parameters))


class CommandProperties(Mapping[str, tuple[str, ...]]):
    """Immutable, multi-valued, string-keyed property set.

    A key may carry several values. A key carrying no value acts as a
    boolean flag: ``has("Flag")`` is true as soon as the key is present.
    """

    def __init__(self, values: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None):
        items = values.items() if isinstance(values, Mapping) else (values or [])
        self._values: dict[str, tuple[str, ...]] = {}
        for key, value in items:
            self._values[key] = self._normalize(value)

    @staticmethod
    def _normalize(value: Any) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, (list, tuple, set, frozenset)):
            return tuple(str(item) for item in value)
        return (str(value),)

    def __getitem__(self, key: str) -> tuple[str, ...]:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"CommandProperties({self._values!r})"

    def has(self, key: str, value: str | None = None, ignore_case: bool = False) -> bool:
        """Check whether a property is present, optionally with a given value.

        Args:
            key: Property key
            value: Expected value, or None to only test for presence
            ignore_case: Compare values case-insensitively

        Returns:
            True if the key is present (and one of its values matches)
        """
        if key not in self._values:
            return False
        if value is None:
            return True
        if ignore_case:
            expected = value.casefold()
            return any(item.casefold() == expected for item in self._values[key])
        return value in self._values[key]

    def first(self, key: str) -> str | None:
        """Get the first value of a property, or None if absent or valueless."""
        values = self._values.get(key, ())
        return values[0] if values else None


@dataclass(frozen=True)
class CommandMetadata:
    """Point-in-time description of a command."""

    name: str
    title: str | None = None
    description: str | None = None
    properties: CommandProperties = field(default_factory=CommandProperties)
    schema: ParameterSchema = field(default_factory=ParameterSchema)

    def has_property(self, key: str, value: str | None = None, ignore_case: bool = False) -> bool:
        return self.properties.has(key, value, ignore_case)

    def get_property(self, key: str) -> str | None:
        return self.properties.first(key)
