"""Write a change analysis onto the nodes of a target-snapshot tree."""

import logging

from orgchart.comparison.diff import ChangeAnalysis
from orgchart.hierarchy.models import HierarchyNode
from orgchart.utils.types import ChangeType

logger = logging.getLogger(__name__)

# Children with these tags are ordered first (leftmost) under their manager.
_LEADING_CHANGES = {ChangeType.NEW, ChangeType.MOVED}


def clear_change_types(root: HierarchyNode | None) -> None:
    if root is None:
        return
    for node in root.walk():
        node.change_type = None
        node.previous_manager_id = None
        node.previous_manager_name = None


def apply_change_types(root: HierarchyNode | None, analysis: ChangeAnalysis | None) -> HierarchyNode | None:
    """Tag every node with its change type and move new/moved reports to the left.

    Without an analysis (baseline view) every annotation is cleared instead.
    """
    if root is None:
        return None
    if analysis is None:
        clear_change_types(root)
        return root

    tags = analysis.classification()
    moved = {change.record.key: change for change in analysis.moved}

    nodes = list(root.walk())
    for node in nodes:
        node.change_type = tags.get(node.key)
        change = moved.get(node.key)
        node.previous_manager_id = change.previous_manager_id if change else None
        node.previous_manager_name = change.previous_manager_name if change else None

    # list.sort is stable: relative order within each group is kept
    for node in nodes:
        node.children.sort(key=lambda child: child.change_type not in _LEADING_CHANGES)

    logger.info("Annotated %d nodes with change types", len(nodes))
    return root
