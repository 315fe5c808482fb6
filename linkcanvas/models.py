"""Data models for link graphs and persisted canvases."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Any, Literal

# Vault-relative POSIX path of a markdown note, e.g. "notes/Alpha.md"
DocumentRef = str

# Source document -> documents it links to
ConnectionSet = dict[DocumentRef, set[DocumentRef]]

Direction = Literal["left", "right"]

CENTER_NODE_ID = "center-node"


def display_name(document: DocumentRef) -> str:
    """Basename of a document without its extension."""
    return PurePosixPath(document).stem


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-05-01T10:00:00.000Z."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class GraphNode:
    """A document discovered during exploration."""

    document: DocumentRef
    level: int  # traversal distance from the seed
    is_backlink: bool  # discovered by following a backlink

    @property
    def display_name(self) -> str:
        return display_name(self.document)


Layer = list[GraphNode]


@dataclass(frozen=True)
class LayoutConfig:
    """Canvas geometry shared by full builds and expansions."""

    canvas_width: float = 800
    canvas_height: float = 600
    node_width: float = 300
    node_height: float = 200
    horizontal_spacing: float = 450
    vertical_spacing: float = 280

    @property
    def center(self) -> tuple[float, float]:
        return self.canvas_width / 2, self.canvas_height / 2


@dataclass
class DiagramNode:
    """A file node on the canvas. Coordinates are the node's anchor point."""

    id: str
    document: DocumentRef
    x: float
    y: float
    width: float
    height: float
    extra: dict[str, Any] = field(default_factory=dict, compare=False)  # viewer keys (color, subpath)

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.extra,
            "id": self.id,
            "type": "file",
            "file": self.document,
            "x": _number(self.x),
            "y": _number(self.y),
            "width": _number(self.width),
            "height": _number(self.height),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DiagramNode":
        document = data.get("file", data.get("document"))
        if not isinstance(document, str):
            raise ValueError(f"node {data.get('id')!r} has no file path")
        known = {"id", "type", "file", "document", "x", "y", "width", "height"}
        return cls(
            id=str(data["id"]),
            document=document,
            x=float(data["x"]),
            y=float(data["y"]),
            width=float(data["width"]),
            height=float(data["height"]),
            extra={k: v for k, v in data.items() if k not in known},
        )


@dataclass
class DiagramEdge:
    """An edge drawn left to right between two canvas nodes."""

    id: str
    from_node: str
    to_node: str
    from_side: str = "right"
    to_side: str = "left"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "fromNode": self.from_node,
            "fromSide": self.from_side,
            "toNode": self.to_node,
            "toSide": self.to_side,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DiagramEdge":
        return cls(
            id=str(data["id"]),
            from_node=str(data["fromNode"]),
            to_node=str(data["toNode"]),
            from_side=str(data.get("fromSide", "right")),
            to_side=str(data.get("toSide", "left")),
        )


@dataclass
class DiagramMeta:
    created: str
    modified: str

    @classmethod
    def now(cls, now: datetime | None = None) -> "DiagramMeta":
        stamp = utc_timestamp(now)
        return cls(created=stamp, modified=stamp)


@dataclass
class ExpansionResult:
    """Delta produced by a single expansion; empty when nothing was added."""

    focus: DocumentRef
    direction: Direction
    added_nodes: list[DiagramNode] = field(default_factory=list)
    added_edges: list[DiagramEdge] = field(default_factory=list)
    reason: str | None = None  # why nothing was added

    @property
    def is_noop(self) -> bool:
        return not self.added_nodes


@dataclass
class Diagram:
    """A persisted node-link canvas."""

    nodes: list[DiagramNode] = field(default_factory=list)
    edges: list[DiagramEdge] = field(default_factory=list)
    meta: DiagramMeta = field(default_factory=DiagramMeta.now)
    # Text cards, groups and their edges: kept verbatim with their position in the
    # file (array order is the drawing order), never laid out
    other_nodes: list[tuple[int, dict[str, Any]]] = field(default_factory=list, compare=False)
    other_edges: list[tuple[int, dict[str, Any]]] = field(default_factory=list, compare=False)

    def documents(self) -> set[DocumentRef]:
        return {node.document for node in self.nodes}

    def node_for(self, document: DocumentRef) -> DiagramNode | None:
        for node in self.nodes:
            if node.document == document:
                return node
        return None

    def node_by_id(self, node_id: str) -> DiagramNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def merge(self, result: ExpansionResult, now: datetime | None = None) -> None:
        """Append an expansion delta and bump the modified timestamp."""
        if result.is_noop:
            return
        self.nodes.extend(result.added_nodes)
        self.edges.extend(result.added_edges)
        self.meta.modified = utc_timestamp(now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": _interleave([node.to_dict() for node in self.nodes], self.other_nodes),
            "edges": _interleave([edge.to_dict() for edge in self.edges], self.other_edges),
            "meta": {"created": self.meta.created, "modified": self.meta.modified},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Diagram":
        """Build a diagram from its JSON payload.

        Raises ValueError (or KeyError/TypeError) when the payload is not a diagram.
        Only file nodes take part in the link graph; other nodes and the edges touching
        them are carried through untouched.
        """
        if not isinstance(data, dict):
            raise ValueError("diagram payload must be a JSON object")

        raw_nodes = data.get("nodes", [])
        raw_edges = data.get("edges", [])
        if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
            raise ValueError("nodes and edges must be lists")

        nodes: list[DiagramNode] = []
        other_nodes: list[tuple[int, dict[str, Any]]] = []
        for position, raw in enumerate(raw_nodes):
            if raw.get("type", "file") == "file":
                nodes.append(DiagramNode.from_dict(raw))
            else:
                other_nodes.append((position, raw))

        node_ids = {n.id for n in nodes}
        edges: list[DiagramEdge] = []
        other_edges: list[tuple[int, dict[str, Any]]] = []
        for position, raw in enumerate(raw_edges):
            edge = DiagramEdge.from_dict(raw)
            if edge.from_node in node_ids and edge.to_node in node_ids:
                edges.append(edge)
            else:
                other_edges.append((position, raw))

        raw_meta = data.get("meta") or {}
        created = raw_meta.get("created") or utc_timestamp()
        modified = raw_meta.get("modified") or created
        return cls(
            nodes=nodes,
            edges=edges,
            meta=DiagramMeta(created=str(created), modified=str(modified)),
            other_nodes=other_nodes,
            other_edges=other_edges,
        )


def _interleave(items: list[dict[str, Any]], kept: list[tuple[int, dict[str, Any]]]) -> list[dict[str, Any]]:
    """Put kept entries back at their original positions; appended items stay at the end."""
    result = list(items)
    for position, raw in sorted(kept, key=lambda entry: entry[0]):
        result.insert(position, raw)
    return result


def _number(value: float) -> float | int:
    """Write integral floats as integers so canvases stay readable."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value
