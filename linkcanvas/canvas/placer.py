"""Coordinate assignment for a layered link canvas."""

from __future__ import annotations

import logging
from datetime import datetime

from ..models import (
    CENTER_NODE_ID,
    ConnectionSet,
    Diagram,
    DiagramEdge,
    DiagramMeta,
    DiagramNode,
    DocumentRef,
    Layer,
    LayoutConfig,
)

logger = logging.getLogger(__name__)


def column_x(layer_index: int, center_index: int, config: LayoutConfig) -> float:
    """Horizontal coordinate of a column.

    The seed occupies a virtual column between the backlink columns
    (`layer_index < center_index`) and the forward columns.
    """
    offset = layer_index - center_index
    if layer_index >= center_index:
        offset += 1
    return config.canvas_width / 2 + offset * config.horizontal_spacing


def stacked_ys(count: int, center_y: float, spacing: float) -> list[float]:
    """`count` positions spaced by `spacing`, centred on `center_y`."""
    start = center_y - (count - 1) * spacing / 2
    return [start + i * spacing for i in range(count)]


def place(
    seed: DocumentRef,
    layers: list[Layer],
    connections: ConnectionSet,
    config: LayoutConfig,
    center_index: int,
    now: datetime | None = None,
) -> Diagram:
    """Lay out the seed and its columns and connect them.

    Deterministic for the same inputs; only the metadata timestamps depend on
    the clock, and `now` pins them.
    """
    center_x, center_y = config.center
    nodes = [
        DiagramNode(
            id=CENTER_NODE_ID,
            document=seed,
            x=center_x,
            y=center_y,
            width=config.node_width,
            height=config.node_height,
        )
    ]
    node_ids: dict[DocumentRef, str] = {seed: CENTER_NODE_ID}

    node_index = 0
    for layer_index, layer in enumerate(layers):
        x = column_x(layer_index, center_index, config)
        for node_info, y in zip(layer, stacked_ys(len(layer), center_y, config.vertical_spacing)):
            if node_info.document in node_ids:
                continue
            node_id = f"node-{node_index}"
            node_index += 1
            node_ids[node_info.document] = node_id
            nodes.append(
                DiagramNode(
                    id=node_id,
                    document=node_info.document,
                    x=x,
                    y=y,
                    width=config.node_width,
                    height=config.node_height,
                )
            )

    edges: list[DiagramEdge] = []
    for source, targets in connections.items():
        from_id = node_ids.get(source)
        if from_id is None:
            continue
        for target in sorted(targets):
            to_id = node_ids.get(target)
            # Targets outside the explored set are expected, not an error
            if to_id is None or to_id == from_id:
                continue
            edges.append(DiagramEdge(id=f"edge-{len(edges)}", from_node=from_id, to_node=to_id))

    logger.debug("Placed %d nodes in %d columns with %d edges", len(nodes), len(layers), len(edges))
    return Diagram(nodes=nodes, edges=edges, meta=DiagramMeta.now(now))
