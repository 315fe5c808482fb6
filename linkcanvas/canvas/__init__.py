"""Canvas construction: exploration, layering, placement and expansion."""

from __future__ import annotations

from datetime import datetime

from ..models import Diagram, DocumentRef, LayoutConfig
from ..vault.index import LinkIndex
from .expander import DiagramExpander
from .explorer import GraphExplorer, explore
from .layers import OrganizedLayers, organize
from .placer import place
from .store import DiagramStore, canvas_path_for, focus_document_for


def build_diagram(
    link_index: LinkIndex,
    seed: DocumentRef,
    max_depth: int,
    config: LayoutConfig,
    now: datetime | None = None,
) -> Diagram:
    """Build a full canvas for `seed`: explore, organize into columns, place."""
    nodes, connections = GraphExplorer(link_index).explore(seed, max_depth)
    organized = organize(seed, nodes)
    return place(seed, organized.layers, connections, config, organized.center_index, now=now)


__all__ = [
    "build_diagram",
    "DiagramExpander",
    "DiagramStore",
    "GraphExplorer",
    "OrganizedLayers",
    "canvas_path_for",
    "explore",
    "focus_document_for",
    "organize",
    "place",
]
