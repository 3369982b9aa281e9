"""Typed view over the command metadata properties used by the tools adapter.

Only the keys listed in ``PropertyKey`` are interpreted; any other property
is ignored.
"""

from dataclasses import dataclass

from commandry.hosting import CommandMetadata

from ..constants import MCP_TOOL_ROLE, TRUE_VALUE, PropertyKey


@dataclass(frozen=True)
class ToolProperties:
    """Tool-related properties of a command."""

    exposed: bool = False
    name: str | None = None
    idempotent_hint: bool = False
    destructive_hint: bool = False
    open_world_hint: bool = False
    read_only_hint: bool = False

    @classmethod
    def from_metadata(cls, metadata: CommandMetadata) -> "ToolProperties":
        """Read tool properties from command metadata.

        The Role must equal the MCP tool role exactly. A hint is set only
        when its property is present and equals the true value, ignoring
        case; an absent property leaves the hint unset.

        Args:
            metadata: Command metadata

        Returns:
            ToolProperties instance
        """
        def flag(key: PropertyKey) -> bool:
            return metadata.has_property(key.value, TRUE_VALUE, ignore_case=True)

        return cls(
            exposed=metadata.has_property(PropertyKey.ROLE.value, MCP_TOOL_ROLE),
            name=metadata.get_property(PropertyKey.NAME.value),
            idempotent_hint=flag(PropertyKey.IDEMPOTENT_HINT),
            destructive_hint=flag(PropertyKey.DESTRUCTIVE_HINT),
            open_world_hint=flag(PropertyKey.OPEN_WORLD_HINT),
            read_only_hint=flag(PropertyKey.READ_ONLY_HINT),
        )

    def tool_name(self, metadata: CommandMetadata) -> str:
        """Name the command is advertised under: the Name override, else its own name."""
        return self.name or metadata.name
