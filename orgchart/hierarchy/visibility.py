"""Visible nodes and links derived from per-node expand flags.

Everything here is recomputed from the tree on each call; nothing is cached,
so the result always matches the current ``expanded`` state.
"""

from dataclasses import dataclass

from orgchart.hierarchy.models import HierarchyNode
from orgchart.utils.ids import normalize_id
from orgchart.utils.types import ChangeType


@dataclass(frozen=True)
class VisibleLink:
    source: HierarchyNode
    target: HierarchyNode
    change_type: ChangeType | None = None

    def as_dict(self) -> dict[str, str | None]:
        return {
            "source": self.source.id,
            "target": self.target.id,
            "change_type": str(self.change_type) if self.change_type else None,
        }


def get_visible_nodes(root: HierarchyNode | None) -> list[HierarchyNode]:
    """Pre-order list of nodes whose every ancestor is expanded."""
    if root is None:
        return []

    visible = []
    stack = [root]
    while stack:
        node = stack.pop()
        visible.append(node)
        if node.expanded:
            stack.extend(reversed(node.children))
    return visible


def get_visible_links(root: HierarchyNode | None) -> list[VisibleLink]:
    """Parent -> child edges out of every visible, expanded node."""
    links = []
    for node in get_visible_nodes(root):
        if node.expanded:
            links.extend(VisibleLink(node, child, child.change_type) for child in node.children)
    return links


def find_node(root: HierarchyNode | None, employee_id: str) -> HierarchyNode | None:
    if root is None:
        return None
    key = normalize_id(employee_id)
    return next((node for node in root.walk() if node.key == key), None)


def toggle_node(root: HierarchyNode | None, employee_id: str) -> bool | None:
    """Flip one node's expand flag; returns the new state, or None if not found."""
    node = find_node(root, employee_id)
    if node is None:
        return None
    node.expanded = not node.expanded
    return node.expanded


def expand_all(root: HierarchyNode | None) -> None:
    if root is None:
        return
    for node in root.walk():
        if node.children:
            node.expanded = True


def collapse_all(root: HierarchyNode | None) -> None:
    """Collapse every manager except the root, which stays open."""
    if root is None:
        return
    for node in root.walk():
        if node.children:
            node.expanded = False
    root.expanded = True


def build_parent_index(root: HierarchyNode | None) -> dict[str, str]:
    """Normalized child id -> normalized parent id, rebuilt from the tree."""
    if root is None:
        return {}
    return {child.key: node.key for node in root.walk() for child in node.children}


def find_ancestors(root: HierarchyNode | None, employee_id: str) -> list[str]:
    """Normalized ids of every ancestor, nearest manager first."""
    parents = build_parent_index(root)
    ancestors = []
    current = normalize_id(employee_id)
    while current in parents:
        current = parents[current]
        ancestors.append(current)
    return ancestors


def expand_path_to(root: HierarchyNode | None, employee_id: str) -> bool:
    """Expand every ancestor of an employee so that it becomes visible."""
    if find_node(root, employee_id) is None:
        return False
    ancestors = set(find_ancestors(root, employee_id))
    for node in root.walk():
        if node.key in ancestors:
            node.expanded = True
    return True
