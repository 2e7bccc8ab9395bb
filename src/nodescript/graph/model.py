from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from ..utils.coerce import coerce_to

DEFAULT_PORT = "Exec"


class NodeCategory(str, Enum):
    EVENT = "Event"
    CONDITION = "Condition"
    ACTION = "Action"
    FLOW = "Flow"
    VARIABLE = "Variable"
    DIALOGUE = "Dialogue"


def _fold(value: Optional[str]) -> str:
    return (value or "").casefold()


def same_name(a: Optional[str], b: Optional[str]) -> bool:
    """Case-insensitive identifier comparison used for ids, ports and tags."""
    return _fold(a) == _fold(b)


class Node(BaseModel):
    """A typed behaviour unit placed in a script graph by the authoring tool."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), alias="Id")
    type_tag: str = Field(..., alias="NodeType", description="Handler tag, e.g. Action_ShowMessage")
    category: Optional[NodeCategory] = Field(default=None, alias="Category")
    properties: Dict[str, Any] = Field(default_factory=dict, alias="Properties")
    comment: Optional[str] = Field(default=None, alias="Comment")

    @field_validator("category", mode="before")
    @classmethod
    def _category_from_name_or_index(cls, v: Any) -> Any:
        # The authoring tool may serialise the category as its enum index
        if v is None or isinstance(v, NodeCategory):
            return v
        members = list(NodeCategory)
        if isinstance(v, int) and not isinstance(v, bool):
            return members[v] if 0 <= v < len(members) else None
        text = str(v).strip().lower()
        for member in members:
            if member.value.lower() == text:
                return member
        return None

    @field_validator("properties", mode="before")
    @classmethod
    def _properties_default(cls, v: Any) -> Any:
        return dict(v or {})

    def raw(self, key: str) -> Any:
        """Return the stored property value, matching the key case-insensitively."""
        if key in self.properties:
            return self.properties[key]
        folded = _fold(key)
        for name, value in self.properties.items():
            if _fold(name) == folded:
                return value
        return None

    def prop(self, key: str, kind: type = str, default: Any = None) -> Any:
        """Read a property as ``kind`` (str, int, float or bool) without ever raising.

        Directly typed values are returned as-is; other values are coerced
        when they look like the requested kind; otherwise ``default``.
        """
        return coerce_to(self.raw(key), kind, default)

    def text(self, key: str, default: str = "") -> str:
        return self.prop(key, str, default)

    def integer(self, key: str, default: int = 0) -> int:
        return self.prop(key, int, default)

    def number(self, key: str, default: float = 0.0) -> float:
        return self.prop(key, float, default)

    def flag(self, key: str, default: bool = False) -> bool:
        return self.prop(key, bool, default)


class Connection(BaseModel):
    """Directed edge from an output port of one node to an input port of another."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), alias="Id")
    from_node_id: str = Field(..., alias="FromNodeId")
    from_port: str = Field(DEFAULT_PORT, alias="FromPortName")
    to_node_id: str = Field(..., alias="ToNodeId")
    to_port: str = Field(DEFAULT_PORT, alias="ToPortName")

    def leaves(self, node_id: str, port: str) -> bool:
        return same_name(self.from_node_id, node_id) and same_name(self.from_port, port)

    def enters(self, node_id: str, port: str) -> bool:
        return same_name(self.to_node_id, node_id) and same_name(self.to_port, port)


class ScriptGraph(BaseModel):
    """Authored node graph bound to one (owner_type, owner_id) pair.

    Graphs are immutable during play; lookups are case-insensitive.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), alias="Id")
    name: str = Field("", alias="Name")
    owner_type: str = Field("", alias="OwnerType")
    owner_id: str = Field("", alias="OwnerId")
    nodes: List[Node] = Field(default_factory=list, alias="Nodes")
    connections: List[Connection] = Field(default_factory=list, alias="Connections")

    _node_index: Dict[str, Node] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        index: Dict[str, Node] = {}
        for node in self.nodes:
            # first declaration wins, like a linear scan would
            index.setdefault(_fold(node.id), node)
        self._node_index = index

    @classmethod
    def for_single_node(cls, node: Node) -> "ScriptGraph":
        """Throwaway one-node graph used to execute a node in isolation."""
        return cls(name=f"single:{node.type_tag}", nodes=[node])

    def owned_by(self, owner_type: str, owner_id: str) -> bool:
        return same_name(self.owner_type, owner_type) and same_name(self.owner_id, owner_id)

    def node(self, node_id: Optional[str]) -> Optional[Node]:
        if node_id is None:
            return None
        return self._node_index.get(_fold(node_id))

    def connection_from(self, node_id: str, port: str) -> Optional[Connection]:
        """First declared connection leaving ``(node_id, port)``."""
        for conn in self.connections:
            if conn.leaves(node_id, port):
                return conn
        return None

    def connection_into(self, node_id: str, port: str) -> Optional[Connection]:
        """First declared connection arriving at ``(node_id, port)``."""
        for conn in self.connections:
            if conn.enters(node_id, port):
                return conn
        return None

    def outgoing(self, node_id: str) -> Iterator[Connection]:
        return (c for c in self.connections if same_name(c.from_node_id, node_id))

    def nodes_of_type(self, type_tag: str) -> Iterator[Node]:
        return (n for n in self.nodes if same_name(n.type_tag, type_tag))

    def first_of_type(self, type_tag: str) -> Optional[Node]:
        return next(self.nodes_of_type(type_tag), None)

    def duplicate_node_ids(self) -> List[str]:
        seen: Dict[str, int] = {}
        for node in self.nodes:
            seen[_fold(node.id)] = seen.get(_fold(node.id), 0) + 1
        return sorted(k for k, count in seen.items() if count > 1)

    def owner(self) -> Tuple[str, str]:
        return self.owner_type, self.owner_id
