"""Deterministic layout of the expanded part of a hierarchy.

Each expanded manager reserves the summed width of its children's subtrees
(plus gaps) and centres that block beneath itself. Collapsed nodes and leaves
take a single node width. Depth levels are a fixed ``vertical_gap`` apart.
"""

import logging

from orgchart.config import DEFAULT_LAYOUT, LayoutConfig
from orgchart.hierarchy.models import HierarchyNode
from orgchart.hierarchy.visibility import get_visible_links, get_visible_nodes

logger = logging.getLogger(__name__)

type Bounds = dict[str, float]


def _widths(node: HierarchyNode, config: LayoutConfig) -> dict[int, float]:
    """Subtree width per visible node (keyed by ``id()``), children before parents."""
    widths: dict[int, float] = {}
    for current in reversed(get_visible_nodes(node)):
        if current.expanded and current.children:
            child_widths = [widths[id(child)] for child in current.children]
            widths[id(current)] = max(
                config.node_width,
                sum(child_widths) + (len(child_widths) - 1) * config.horizontal_gap,
            )
        else:
            widths[id(current)] = config.node_width
    return widths


def subtree_width(node: HierarchyNode, config: LayoutConfig | None = None) -> float:
    """Horizontal space for a node and its visible descendants. Does not mutate."""
    config = config or DEFAULT_LAYOUT
    return _widths(node, config)[id(node)]


def _measure(node: HierarchyNode, config: LayoutConfig) -> None:
    for current in reversed(get_visible_nodes(node)):
        if current.expanded and current.children:
            current.subtree_width = max(
                config.node_width,
                sum(child.subtree_width for child in current.children)
                + (len(current.children) - 1) * config.horizontal_gap,
            )
        else:
            current.subtree_width = config.node_width


def _place(node: HierarchyNode, x: float, y: float, config: LayoutConfig) -> None:
    stack = [(node, x, y)]
    while stack:
        current, cx, cy = stack.pop()
        current.x = cx
        current.y = cy
        if not current.expanded or not current.children:
            continue

        block = sum(child.subtree_width for child in current.children)
        block += (len(current.children) - 1) * config.horizontal_gap
        offset = cx - block / 2
        for child in current.children:
            stack.append((child, offset + child.subtree_width / 2, cy + config.vertical_gap))
            offset += child.subtree_width + config.horizontal_gap


def calculate_layout(
    node: HierarchyNode,
    x: float = 0.0,
    y: float = 0.0,
    config: LayoutConfig | None = None,
) -> None:
    """Assign ``x``, ``y`` and ``subtree_width`` to every visible node in place."""
    if not isinstance(node, HierarchyNode):
        raise TypeError(f"calculate_layout needs a HierarchyNode, got {type(node).__name__}")

    config = config or DEFAULT_LAYOUT
    _measure(node, config)
    _place(node, x, y, config)


def layout_bounds(nodes: list[HierarchyNode], config: LayoutConfig | None = None) -> Bounds | None:
    """Bounding box of laid-out nodes including their card extents."""
    if not nodes:
        return None

    config = config or DEFAULT_LAYOUT
    half_w = config.node_width / 2
    half_h = config.node_height / 2
    min_x = min(n.x for n in nodes) - half_w
    max_x = max(n.x for n in nodes) + half_w
    min_y = min(n.y for n in nodes) - half_h
    max_y = max(n.y for n in nodes) + half_h
    return {
        "min_x": min_x,
        "max_x": max_x,
        "min_y": min_y,
        "max_y": max_y,
        "width": max_x - min_x,
        "height": max_y - min_y,
    }


def layout_payload(root: HierarchyNode, config: LayoutConfig | None = None) -> dict:
    """Lay out a tree and return the JSON-ready view a renderer consumes."""
    config = config or DEFAULT_LAYOUT
    calculate_layout(root, 0.0, 0.0, config)
    nodes = get_visible_nodes(root)
    links = get_visible_links(root)
    logger.info("Laid out %d visible nodes, %d links", len(nodes), len(links))
    return {
        "nodes": [node.as_dict() for node in nodes],
        "links": [link.as_dict() for link in links],
        "bounds": layout_bounds(nodes, config),
    }
