"""Per-node team statistics and org-wide span-of-control metrics."""

import logging
from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from orgchart.hierarchy.models import HierarchyNode
from orgchart.utils.types import ChangeType

logger = logging.getLogger(__name__)

HIERARCHY_COLUMNS = [
    "employee_id",
    "manager_id",
    "name",
    "title",
    "depth",
    "org_level",
    "direct_reports",
    "total_reports",
    "total_fte",
]


@dataclass
class NodeStatistics:
    id: str
    name: str
    title: str
    fte: float
    direct_reports: int
    total_reports: int
    total_fte: float
    change_type: ChangeType | None = None
    previous_manager_name: str | None = None
    direct_reports_added: list[str] = field(default_factory=list)
    direct_reports_removed: list[str] = field(default_factory=list)
    direct_reports_net_change: int = 0
    total_reports_net_change: int = 0


def _classify_org_level(depth: int) -> str:
    """Classify the organizational level based on depth from the CEO."""
    match depth:
        case 0:
            return "CEO"
        case 1:
            return "C-Suite"
        case 2:
            return "VP"
        case 3:
            return "Director"
        case 4:
            return "Manager"
        case 5:
            return "Lead"
        case d if d <= 8:
            return "IC"
        case _:
            return "Deep IC"


def _team_totals(node: HierarchyNode) -> tuple[int, float]:
    """Descendant count and FTE sum (including the node itself) of a subtree."""
    members = list(node.walk())
    return len(members) - 1, sum(m.record.fte for m in members)


def compute_node_statistics(
    node: HierarchyNode,
    baseline_root: HierarchyNode | None = None,
) -> NodeStatistics:
    """Team size and FTE for one node, with deltas against a baseline tree if given."""
    total_reports, total_fte = _team_totals(node)
    stats = NodeStatistics(
        id=node.id,
        name=node.name,
        title=node.record.title,
        fte=node.record.fte,
        direct_reports=len(node.children),
        total_reports=total_reports,
        total_fte=round(total_fte, 2),
        change_type=node.change_type,
        previous_manager_name=node.previous_manager_name,
    )
    if baseline_root is None:
        return stats

    baseline = next((n for n in baseline_root.walk() if n.key == node.key), None)
    if baseline is None:
        return stats

    baseline_keys = {c.key for c in baseline.children}
    current_keys = {c.key for c in node.children}
    stats.direct_reports_added = [
        c.record.display_name for c in node.children if c.key not in baseline_keys
    ]
    stats.direct_reports_removed = [
        c.record.display_name for c in baseline.children if c.key not in current_keys
    ]
    stats.direct_reports_net_change = len(stats.direct_reports_added) - len(stats.direct_reports_removed)
    baseline_total, _ = _team_totals(baseline)
    stats.total_reports_net_change = total_reports - baseline_total
    return stats


def hierarchy_frame(root: HierarchyNode | None) -> pd.DataFrame:
    """Flatten the tree into a DataFrame with depth and span-of-control metrics."""
    if root is None:
        return pd.DataFrame(columns=HIERARCHY_COLUMNS)

    # pre-order with depth; totals are then summed children-first over the reversed order
    ordered: list[tuple[HierarchyNode, int]] = []
    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        ordered.append((node, depth))
        stack.extend((child, depth + 1) for child in reversed(node.children))

    totals: dict[int, tuple[int, float]] = {}
    for node, _ in reversed(ordered):
        total_reports, total_fte = 0, node.record.fte
        for child in node.children:
            reports, fte = totals[id(child)]
            total_reports += reports + 1
            total_fte += fte
        totals[id(node)] = (total_reports, total_fte)

    flat_rows = [
        {
            "employee_id": node.id,
            "manager_id": node.manager_id,
            "name": node.name,
            "title": node.record.title,
            "depth": depth,
            "org_level": _classify_org_level(depth),
            "direct_reports": len(node.children),
            "total_reports": totals[id(node)][0],
            "total_fte": round(totals[id(node)][1], 2),
        }
        for node, depth in ordered
    ]
    result = pd.DataFrame(flat_rows, columns=HIERARCHY_COLUMNS)
    logger.info("Resolved org hierarchy: %d nodes, max depth %d", len(result), result["depth"].max())
    return result


def span_of_control_summary(frame: pd.DataFrame) -> dict[str, int | float]:
    """Span-of-control metrics over every employee with at least one direct report."""
    spans = frame.loc[frame["direct_reports"] > 0, "direct_reports"].to_numpy(dtype=float)
    if spans.size == 0:
        return {"managers": 0, "mean_span": 0.0, "median_span": 0.0, "max_span": 0, "max_depth": 0}

    return {
        "managers": int(spans.size),
        "mean_span": float(np.round(spans.mean(), 2)),
        "median_span": float(np.median(spans)),
        "max_span": int(spans.max()),
        "max_depth": int(frame["depth"].max()),
    }
