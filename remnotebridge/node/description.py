"""Static description of the RemNote workflow node."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from remnotebridge.bridge.correlator import DEFAULT_PORT


@dataclass(slots=True)
class NodeOption:
    name: str
    value: str
    description: str | None = None
    action: str | None = None


@dataclass(slots=True)
class NodeProperty:
    """One host-facing parameter."""

    display_name: str
    name: str
    type: str
    default: Any = None
    required: bool = False
    description: str | None = None
    placeholder: str | None = None
    options: list[NodeOption] = field(default_factory=list)
    no_data_expression: bool = False


@dataclass(slots=True)
class NodeDescription:
    display_name: str
    name: str
    group: list[str]
    version: int
    description: str
    properties: list[NodeProperty] = field(default_factory=list)
    inputs: list[str] = field(default_factory=lambda: ["main"])
    outputs: list[str] = field(default_factory=lambda: ["main"])

    def defaults(self) -> dict[str, Any]:
        return {prop.name: prop.default for prop in self.properties}

    def get_property(self, name: str) -> NodeProperty | None:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    def option_values(self, name: str) -> list[str]:
        prop = self.get_property(name)
        return [opt.value for opt in prop.options] if prop else []


REMNOTE_NODE_DESCRIPTION = NodeDescription(
    display_name="RemNote",
    name="remNote",
    group=["transform"],
    version=1,
    description="Create rems through the local RemNote bridge",
    properties=[
        NodeProperty(
            display_name="Resource",
            name="resource",
            type="options",
            default="rem",
            required=True,
            no_data_expression=True,
            options=[NodeOption(name="Rem", value="rem")],
        ),
        NodeProperty(
            display_name="Operation",
            name="operation",
            type="options",
            default="create",
            no_data_expression=True,
            options=[
                NodeOption(name="Create", value="create", description="Create a rem", action="Create a rem"),
            ],
        ),
        NodeProperty(
            display_name="Content",
            name="content",
            type="string",
            default="",
            required=True,
            description="Text of the new rem",
        ),
        NodeProperty(
            display_name="Parent ID",
            name="parentId",
            type="string",
            default="",
            description="Rem to create the new rem under; empty for top level",
        ),
        NodeProperty(
            display_name="Port",
            name="port",
            type="number",
            default=DEFAULT_PORT,
            description="Port of the local RemNote bridge listener",
        ),
    ],
)
