"""Host-facing RemNote node."""

from .description import REMNOTE_NODE_DESCRIPTION, NodeDescription, NodeOption, NodeProperty
from .remnote_node import RemNoteNode

__all__ = [
    "REMNOTE_NODE_DESCRIPTION",
    "NodeDescription",
    "NodeOption",
    "NodeProperty",
    "RemNoteNode",
]
