import random

import pytest

from linkcanvas.canvas import build_diagram
from linkcanvas.canvas.expander import (
    FOCUS_NOT_FOUND,
    NO_NEW_LINKS,
    DiagramExpander,
    conflicting,
    find_slot,
)
from linkcanvas.models import CENTER_NODE_ID, Diagram, DiagramNode, LayoutConfig
from linkcanvas.vault.index import DictLinkIndex


def _node(node_id: str, document: str, x: float, y: float) -> DiagramNode:
    return DiagramNode(id=node_id, document=document, x=x, y=y, width=300, height=200)


def _diagram_with_column(*ys: float) -> Diagram:
    """Focus F at (0, 0) and existing nodes at x=450 with the given ys."""
    nodes = [_node("focus", "F", 0, 0)]
    nodes += [_node(f"e{i}", f"E{i}", 450, y) for i, y in enumerate(ys)]
    return Diagram(nodes=nodes)


def _assert_no_overlaps(diagram: Diagram, config: LayoutConfig) -> None:
    nodes = diagram.nodes
    for i, a in enumerate(nodes):
        for b in nodes[i + 1 :]:
            if abs(a.x - b.x) < config.node_width + 100:
                assert not conflicting(a.y, [b.y], config), (a, b)


def test_expand_right_from_lone_center(config: LayoutConfig) -> None:
    diagram = Diagram(nodes=[_node(CENTER_NODE_ID, "A", 400, 300)])

    result = DiagramExpander(config).expand(diagram, "A", "right", ["C", "D"])

    assert not result.is_noop
    assert [(n.document, n.x, n.y) for n in result.added_nodes] == [("C", 850, 160), ("D", 850, 440)]
    ids = {n.id: n.document for n in result.added_nodes}
    ids[CENTER_NODE_ID] = "A"
    assert [(ids[e.from_node], ids[e.to_node]) for e in result.added_edges] == [("A", "C"), ("A", "D")]
    assert all((e.from_side, e.to_side) == ("right", "left") for e in result.added_edges)
    # expand computes a delta only
    assert len(diagram.nodes) == 1


def test_expand_left_makes_new_node_the_edge_source(config: LayoutConfig) -> None:
    diagram = Diagram(nodes=[_node(CENTER_NODE_ID, "A", 400, 300)])

    result = DiagramExpander(config).expand(diagram, "A", "left", ["X"])

    (node,) = result.added_nodes
    (edge,) = result.added_edges
    assert (node.x, node.y) == (-50, 300)
    assert (edge.from_node, edge.to_node) == (node.id, CENTER_NODE_ID)


def test_second_expansion_with_same_links_is_noop(config: LayoutConfig) -> None:
    diagram = Diagram(nodes=[_node(CENTER_NODE_ID, "A", 400, 300)])
    expander = DiagramExpander(config)

    diagram.merge(expander.expand(diagram, "A", "right", ["C", "D"]))
    before = diagram.to_dict()
    again = expander.expand(diagram, "A", "right", ["C"])

    assert again.is_noop
    assert again.reason == NO_NEW_LINKS
    diagram.merge(again)
    assert diagram.to_dict() == before


def test_missing_focus_is_reported_not_raised(config: LayoutConfig) -> None:
    diagram = Diagram(nodes=[_node(CENTER_NODE_ID, "A", 400, 300)])

    result = DiagramExpander(config).expand(diagram, "Z", "right", ["C"])

    assert result.is_noop
    assert result.reason == FOCUS_NOT_FOUND


def test_duplicate_new_links_are_added_once(config: LayoutConfig) -> None:
    diagram = Diagram(nodes=[_node(CENTER_NODE_ID, "A", 400, 300)])

    result = DiagramExpander(config).expand(diagram, "A", "right", ["C", "C", "A"])

    assert [n.document for n in result.added_nodes] == ["C"]
    assert result.added_nodes[0].y == 300


def test_invalid_direction(config: LayoutConfig) -> None:
    with pytest.raises(ValueError):
        DiagramExpander(config).expand(Diagram(), "A", "up", ["B"])


def test_conflict_moves_node_above(config: LayoutConfig) -> None:
    result = DiagramExpander(config).expand(_diagram_with_column(0), "F", "right", ["N"])

    assert [(n.x, n.y) for n in result.added_nodes] == [(450, -480)]


def test_conflict_moves_node_below_when_above_is_taken(config: LayoutConfig) -> None:
    result = DiagramExpander(config).expand(_diagram_with_column(0, -480), "F", "right", ["N"])

    assert result.added_nodes[0].y == 480


def test_conflict_uses_first_large_enough_gap(config: LayoutConfig) -> None:
    result = DiagramExpander(config).expand(_diagram_with_column(0, -480, 480, 1600), "F", "right", ["N"])

    # Gap between 480 and 1600: free from 860 to 1220
    assert result.added_nodes[0].y == 1040


def test_conflict_appends_below_column_without_gaps(config: LayoutConfig) -> None:
    result = DiagramExpander(config).expand(_diagram_with_column(0, -480, 480), "F", "right", ["N"])

    assert result.added_nodes[0].y == 960


def test_nodes_outside_the_column_band_do_not_block(config: LayoutConfig) -> None:
    diagram = Diagram(nodes=[_node("focus", "F", 0, 0), _node("far", "G", 900, 0)])

    result = DiagramExpander(config).expand(diagram, "F", "right", ["N"])

    assert result.added_nodes[0].y == 0


def test_pending_nodes_block_later_ones_by_default(config: LayoutConfig) -> None:
    diagram = _diagram_with_column(0, -480, 480)

    result = DiagramExpander(config).expand(diagram, "F", "right", ["N1", "N2"])

    assert [n.y for n in result.added_nodes] == [960, 1440]


def test_pending_nodes_ignored_when_disabled(config: LayoutConfig) -> None:
    diagram = _diagram_with_column(0, -480, 480)

    result = DiagramExpander(config, include_pending=False).expand(diagram, "F", "right", ["N1", "N2"])

    # Both relocated nodes land on the same slot
    assert [n.y for n in result.added_nodes] == [960, 960]


def test_find_slot_keeps_ideal_when_free(config: LayoutConfig) -> None:
    assert find_slot(100, [], config) == 100
    assert find_slot(100, [-200, 400], config) == 100


def test_find_slot_with_spacing_below_buffer_never_touches_column() -> None:
    tight = LayoutConfig(vertical_spacing=10)

    # Above and below are within the buffer, so the node goes below the column
    assert find_slot(0, [0], tight) == 220
    # The gap between 0 and 430 is tall enough on paper but its centre touches both
    assert find_slot(0, [0, 430], tight) == 650
    for occupied in ([0], [0, 430], [0, 215, 430]):
        assert conflicting(find_slot(0, occupied, tight), occupied, tight) == []


def test_conflicting_uses_twenty_unit_buffer(config: LayoutConfig) -> None:
    # Boxes 200 high: centres closer than 220 touch, the buffer pushes it to 220
    assert conflicting(0, [219], config) == [219]
    assert conflicting(0, [220], config) == []
    assert conflicting(0, [-219, 500], config) == [-219]


def test_saturate_grows_one_level_and_is_idempotent(config: LayoutConfig) -> None:
    index = DictLinkIndex({"A": ["B"], "B": ["C", "D"], "E": ["A"]})
    diagram = build_diagram(index, "A", 1, config)
    assert diagram.documents() == {"A", "B", "E"}

    expander = DiagramExpander(config)
    results = expander.saturate(diagram, index, "right")

    assert [(r.focus, r.direction) for r in results] == [("B", "right")]
    assert diagram.documents() == {"A", "B", "C", "D", "E"}
    c = diagram.node_for("C")
    assert c.x == diagram.node_for("B").x + config.horizontal_spacing

    assert expander.saturate(diagram, index, "right") == []
    assert expander.saturate(diagram, index, "left") == []


def test_saturate_both_runs_right_then_left(config: LayoutConfig) -> None:
    index = DictLinkIndex({"A": ["B"], "P": ["B"]})
    diagram = build_diagram(index, "A", 1, config)

    results = DiagramExpander(config).saturate(diagram, index, "both")

    assert [(r.focus, r.direction) for r in results] == [("B", "left")]
    p = diagram.node_for("P")
    assert p.x == diagram.node_for("A").x
    # A sits at the same column and y, so P is moved above it
    assert p.y == diagram.node_for("A").y - config.node_height - config.vertical_spacing
    edge = diagram.edges[-1]
    assert (edge.from_node, edge.to_node) == (p.id, diagram.node_for("B").id)


def test_merge_updates_modified_timestamp(config: LayoutConfig) -> None:
    diagram = Diagram(nodes=[_node(CENTER_NODE_ID, "A", 400, 300)])
    diagram.meta.created = diagram.meta.modified = "2000-01-01T00:00:00.000Z"

    diagram.merge(DiagramExpander(config).expand(diagram, "A", "right", ["C"]))

    assert diagram.meta.created == "2000-01-01T00:00:00.000Z"
    assert diagram.meta.modified != diagram.meta.created
    assert len(diagram.edges) == 1


@pytest.mark.parametrize("seed", range(12))
def test_repeated_expansions_never_overlap(seed: int, config: LayoutConfig) -> None:
    rng = random.Random(seed)
    docs = [f"n{i}" for i in range(20)]
    index = DictLinkIndex({d: rng.sample(docs, rng.randint(0, 4)) for d in docs})
    diagram = build_diagram(index, "n0", rng.randint(0, 2), config)
    expander = DiagramExpander(config)

    for _ in range(4):
        expander.saturate(diagram, index, rng.choice(["left", "right", "both"]))
        _assert_no_overlaps(diagram, config)

    documents = [n.document for n in diagram.nodes]
    assert len(documents) == len(set(documents))
    node_ids = {n.id for n in diagram.nodes}
    assert all(e.from_node in node_ids and e.to_node in node_ids for e in diagram.edges)
