"""Partition explored nodes into ordered canvas columns."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..models import DocumentRef, GraphNode, Layer


@dataclass
class OrganizedLayers:
    """Columns left to right, without the seed.

    `center_index` is the number of backlink columns: columns before it sit left
    of the seed, columns from it onwards sit right of the seed.
    """

    layers: list[Layer] = field(default_factory=list)
    center_index: int = 0

    @property
    def backlink_layers(self) -> list[Layer]:
        return self.layers[: self.center_index]

    @property
    def forward_layers(self) -> list[Layer]:
        return self.layers[self.center_index :]


def display_sort_key(node: GraphNode) -> tuple[str, str, str]:
    """Case-insensitive name first, then lower case before upper case, then path.

    Matches the editor's collation for names that differ only in case.
    """
    name = node.display_name
    return name.casefold(), name.swapcase(), node.document


def organize(seed: DocumentRef, nodes: list[GraphNode]) -> OrganizedLayers:
    """Group nodes by direction and level.

    Backlink columns run from the deepest level down to level 1, followed by
    forward columns from level 1 up to the deepest. Empty levels are skipped.
    """
    max_back = max((n.level for n in nodes if n.is_backlink), default=0)
    max_forward = max((n.level for n in nodes if not n.is_backlink), default=0)

    backlink_levels: list[Layer] = [[] for _ in range(max_back + 1)]
    forward_levels: list[Layer] = [[] for _ in range(max_forward + 1)]

    for node in nodes:
        if node.document == seed:
            continue
        if node.is_backlink:
            backlink_levels[node.level].append(node)
        else:
            forward_levels[node.level].append(node)

    for layer in backlink_levels + forward_levels:
        layer.sort(key=display_sort_key)

    # Level 0 only ever holds the seed, which is placed separately
    left = [layer for layer in reversed(backlink_levels[1:]) if layer]
    right = [layer for layer in forward_levels[1:] if layer]
    return OrganizedLayers(layers=left + right, center_index=len(left))
