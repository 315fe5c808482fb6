"""Incremental growth of an existing canvas.

An expansion adds the not-yet-present links of one focus document as a new
column next to it (backlinks to the left, forward links to the right) without
touching the layout of nodes already on the canvas. New nodes are slotted into
the target column so they do not overlap what is there:

1. ideal slot: the new nodes stacked around the focus node's y;
2. on conflict, directly above the first conflicting node, else directly below it;
3. else centred in the first vertical gap of the column that is tall enough;
4. else appended below the lowest node of the column.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Literal

from ..models import (
    Diagram,
    DiagramEdge,
    DiagramNode,
    Direction,
    DocumentRef,
    ExpansionResult,
    LayoutConfig,
)
from ..vault.index import LinkIndex
from .placer import stacked_ys

logger = logging.getLogger(__name__)

# Columns drift slightly over repeated expansions; nodes this close in x share a column
COLUMN_TOLERANCE = 100

# Vertical clearance kept around existing nodes
CONFLICT_BUFFER = 20

FOCUS_NOT_FOUND = "focus-not-found"
NO_NEW_LINKS = "no-new-links"


def column_ys(diagram: Diagram, target_x: float, config: LayoutConfig) -> list[float]:
    """y coordinates of the nodes sharing the column at `target_x`."""
    reach = config.node_width + COLUMN_TOLERANCE
    return [node.y for node in diagram.nodes if abs(node.x - target_x) < reach]


def conflicting(y: float, occupied: Iterable[float], config: LayoutConfig) -> list[float]:
    """Occupied slots whose buffered box overlaps a node centred at `y`."""
    half = config.node_height / 2
    top, bottom = y - half, y + half
    return [
        other
        for other in occupied
        if top < other + half + CONFLICT_BUFFER and bottom > other - half - CONFLICT_BUFFER
    ]


def find_slot(ideal_y: float, occupied: list[float], config: LayoutConfig) -> float:
    """Pick a non-conflicting y for a new node, starting from `ideal_y`."""
    conflicts = conflicting(ideal_y, occupied, config)
    if not conflicts:
        return ideal_y

    height, spacing = config.node_height, config.vertical_spacing
    conflict_y = conflicts[0]

    above = conflict_y - height - spacing
    if not conflicting(above, occupied, config):
        return above

    below = conflict_y + height + spacing
    if not conflicting(below, occupied, config):
        return below

    ys = sorted(occupied)
    for upper, lower in zip(ys, ys[1:]):
        gap_start = upper + height / 2 + spacing
        gap_end = lower - height / 2 - spacing
        if gap_end - gap_start >= height:
            candidate = gap_start + (gap_end - gap_start) / 2
            if not conflicting(candidate, occupied, config):
                return candidate

    # Spacing below the buffer would still touch the lowest node
    return max(ys) + height + max(spacing, CONFLICT_BUFFER)


@dataclass
class DiagramExpander:
    """Computes expansion deltas for a canvas.

    With `include_pending` (the default) nodes placed earlier in the same
    expansion also block later ones. Turning it off checks new nodes only
    against the nodes present when the expansion started, so two relocated
    nodes may land on the same slot.
    """

    config: LayoutConfig
    include_pending: bool = True

    def expand(
        self,
        diagram: Diagram,
        focus: DocumentRef,
        direction: Direction,
        new_links: Iterable[DocumentRef],
    ) -> ExpansionResult:
        """Compute the nodes and edges to add for `focus` in `direction`.

        `new_links` may contain documents already on the canvas; they are
        filtered out here. The diagram itself is not modified.
        """
        if direction not in ("left", "right"):
            raise ValueError(f"direction must be 'left' or 'right', got {direction!r}")

        present = diagram.documents()
        to_add = [doc for doc in dict.fromkeys(new_links) if doc not in present]
        if not to_add:
            logger.info("No new %s links for %s", direction, focus)
            return ExpansionResult(focus=focus, direction=direction, reason=NO_NEW_LINKS)

        focus_node = diagram.node_for(focus)
        if focus_node is None:
            logger.warning("Could not find focus node for %s", focus)
            return ExpansionResult(focus=focus, direction=direction, reason=FOCUS_NOT_FOUND)

        config = self.config
        step = config.horizontal_spacing
        target_x = focus_node.x - step if direction == "left" else focus_node.x + step

        occupied = column_ys(diagram, target_x, config)
        logger.debug("Found %d existing nodes at target x %s", len(occupied), target_x)

        result = ExpansionResult(focus=focus, direction=direction)
        ideal = stacked_ys(len(to_add), focus_node.y, config.vertical_spacing)
        for document, ideal_y in zip(to_add, ideal):
            y = find_slot(ideal_y, occupied, config)
            if self.include_pending:
                occupied.append(y)

            node = DiagramNode(
                id=f"node-{uuid.uuid4().hex}",
                document=document,
                x=target_x,
                y=y,
                width=config.node_width,
                height=config.node_height,
            )
            # Edges always run left to right on the canvas
            source, target = (node, focus_node) if direction == "left" else (focus_node, node)
            result.added_nodes.append(node)
            result.added_edges.append(
                DiagramEdge(id=f"edge-{uuid.uuid4().hex}", from_node=source.id, to_node=target.id)
            )
            logger.debug("Added node %s at (%s, %s)", document, target_x, y)

        return result

    def saturate(
        self,
        diagram: Diagram,
        link_index: LinkIndex,
        direction: Literal["left", "right", "both"],
        now: datetime | None = None,
    ) -> list[ExpansionResult]:
        """Expand every node present at the start by one level, merging as it goes.

        For "both", each node grows right (forward links) and then left
        (backlinks). Returns the expansions that added something; running it
        again over the same nodes adds nothing new for them.
        """
        directions: list[Direction] = ["right", "left"] if direction == "both" else [direction]
        results: list[ExpansionResult] = []

        for node in list(diagram.nodes):
            for d in directions:
                if d == "left":
                    links = link_index.backlinks(node.document)
                else:
                    links = link_index.forward_links(node.document)
                result = self.expand(diagram, node.document, d, links)
                if result.is_noop:
                    continue
                diagram.merge(result, now)
                results.append(result)

        added = sum(len(r.added_nodes) for r in results)
        logger.info("Expanded %s: %d expansions, %d nodes added", direction, len(results), added)
        return results
