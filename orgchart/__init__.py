"""Org chart core: snapshot validation, hierarchy layout and structural diff."""

from orgchart.utils.ids import normalize_id
from orgchart.utils.types import ChangeType, ErrorType
from orgchart.hierarchy import (
    EmployeeRecord,
    HierarchyNode,
    build_hierarchy,
    flatten_hierarchy,
    calculate_layout,
    subtree_width,
    get_visible_nodes,
    get_visible_links,
)
from orgchart.validation import StructuralError, validate_relations, detect_cycles
from orgchart.comparison import ChangeAnalysis, CascadeEffect, analyze_changes, apply_change_types

__all__ = [
    "normalize_id",
    "ChangeType",
    "ErrorType",
    "EmployeeRecord",
    "HierarchyNode",
    "build_hierarchy",
    "flatten_hierarchy",
    "calculate_layout",
    "subtree_width",
    "get_visible_nodes",
    "get_visible_links",
    "StructuralError",
    "validate_relations",
    "detect_cycles",
    "ChangeAnalysis",
    "CascadeEffect",
    "analyze_changes",
    "apply_change_types",
]
