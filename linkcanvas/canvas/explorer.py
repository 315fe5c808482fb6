"""Bounded-depth bidirectional traversal of the link graph."""

from __future__ import annotations

import logging
from typing import Iterator

from ..models import ConnectionSet, DocumentRef, GraphNode
from ..vault.index import LinkIndex

logger = logging.getLogger(__name__)


class GraphExplorer:
    """Collects the link neighborhood of a seed document.

    Traversal is depth-first: a newly discovered document is expanded before
    its later siblings. For every document, forward links are processed before
    backlinks, so a document reachable both ways from the same parent is
    classified as a forward link. The first discovery of a document fixes its
    level and direction; visited documents are never expanded again, which is
    what makes cyclic link graphs terminate.
    """

    def __init__(self, link_index: LinkIndex):
        self.link_index = link_index

    def explore(self, seed: DocumentRef, max_depth: int) -> tuple[list[GraphNode], ConnectionSet]:
        """Explore up to `max_depth` link hops from `seed`.

        Returns the discovered nodes (seed first, discovery order) and the
        connection set, where every edge points from the linking document to
        the linked one.
        """
        if max_depth < 0:
            raise ValueError("max_depth must be >= 0")

        visited = {seed}
        nodes = [GraphNode(document=seed, level=0, is_backlink=False)]
        connections: ConnectionSet = {seed: set()}

        # Explicit stack of (document, depth, pending links) frames; same order as recursion
        stack: list[tuple[DocumentRef, int, Iterator[tuple[bool, DocumentRef]]]] = []
        if max_depth > 0:
            stack.append((seed, 0, self._links(seed)))

        while stack:
            document, depth, pending = stack[-1]
            item = next(pending, None)
            if item is None:
                stack.pop()
                continue

            is_backlink, other = item
            if other == document:
                continue

            if is_backlink:
                connections.setdefault(other, set()).add(document)
            else:
                connections.setdefault(document, set()).add(other)

            if other in visited:
                continue

            visited.add(other)
            nodes.append(GraphNode(document=other, level=depth + 1, is_backlink=is_backlink))
            connections.setdefault(other, set())
            logger.debug(
                "Discovered %s at level %d via %s",
                other,
                depth + 1,
                "backlink" if is_backlink else "forward link",
            )

            if depth + 1 < max_depth:
                stack.append((other, depth + 1, self._links(other)))

        logger.debug("Explored %s to depth %d: %d nodes", seed, max_depth, len(nodes))
        return nodes, connections

    def _links(self, document: DocumentRef) -> Iterator[tuple[bool, DocumentRef]]:
        """Query both link sets up front, then yield forward links before backlinks."""
        forward = list(self.link_index.forward_links(document) or [])
        backward = list(self.link_index.backlinks(document) or [])
        return iter([(False, d) for d in forward] + [(True, d) for d in backward])


def explore(link_index: LinkIndex, seed: DocumentRef, max_depth: int) -> tuple[list[GraphNode], ConnectionSet]:
    """Convenience wrapper around GraphExplorer.explore."""
    return GraphExplorer(link_index).explore(seed, max_depth)
