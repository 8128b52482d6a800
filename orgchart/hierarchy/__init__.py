"""Tree construction, layout and visibility for a single snapshot."""

from orgchart.hierarchy.models import EmployeeRecord, HierarchyNode, coerce_records
from orgchart.hierarchy.builder import build_hierarchy, flatten_hierarchy
from orgchart.hierarchy.layout import calculate_layout, subtree_width, layout_payload
from orgchart.hierarchy.visibility import (
    VisibleLink,
    get_visible_nodes,
    get_visible_links,
    expand_all,
    collapse_all,
    toggle_node,
    find_node,
    find_ancestors,
    build_parent_index,
    expand_path_to,
)
from orgchart.hierarchy.statistics import (
    NodeStatistics,
    compute_node_statistics,
    hierarchy_frame,
    span_of_control_summary,
)
