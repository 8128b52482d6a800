"""Build a rooted reporting tree from a flat employee snapshot."""

import logging
from collections.abc import Mapping, Sequence

from orgchart.hierarchy.models import EmployeeRecord, HierarchyNode, coerce_records

logger = logging.getLogger(__name__)


def _index_nodes(records: list[EmployeeRecord]) -> dict[str, HierarchyNode]:
    """Build a normalized id -> node map; the first record per id is canonical."""
    nodes: dict[str, HierarchyNode] = {}
    for record in records:
        key = record.key
        if not key:
            logger.warning("Skipping employee without an id (name=%r)", record.name)
            continue
        if key in nodes:
            logger.warning("Duplicate employee id %r, keeping first occurrence", record.id)
            continue
        nodes[key] = HierarchyNode(record=record)
    return nodes


def _select_root(potential_roots: list[HierarchyNode]) -> HierarchyNode | None:
    """Pick the tree root.

    Exactly one blank-manager candidate wins outright. Anything else (several
    blank managers, or only dangling/self-managed candidates) falls back to
    the candidate with the most direct reports, earliest in input order on a
    tie. The fallback is a best-effort view of malformed input, not a fix.
    """
    blank_manager = [n for n in potential_roots if not n.record.manager_key]
    if len(blank_manager) == 1:
        return blank_manager[0]
    if not potential_roots:
        return None

    root = max(potential_roots, key=lambda n: len(n.children))
    logger.warning(
        "Ambiguous root (%d candidates), falling back to %r with %d direct reports",
        len(potential_roots),
        root.id,
        len(root.children),
    )
    return root


def build_hierarchy(employees: Sequence[EmployeeRecord | Mapping]) -> HierarchyNode | None:
    """Convert a flat snapshot into a tree rooted at the CEO.

    Never raises on bad data: validation findings are advisory, so dangling
    managers and self-references become root candidates and cycles are left
    out of the tree. Returns ``None`` for an empty snapshot or when no record
    can serve as a root.
    """
    records = coerce_records(employees)
    if not records:
        return None

    nodes = _index_nodes(records)
    potential_roots: list[HierarchyNode] = []

    for key, node in nodes.items():
        manager_key = node.record.manager_key
        match manager_key:
            case "":
                potential_roots.append(node)
            case _ if manager_key == key:
                logger.warning("Employee %r is their own manager, treating as a root", node.id)
                potential_roots.append(node)
            case _ if manager_key in nodes:
                nodes[manager_key].children.append(node)
            case _:
                logger.warning(
                    "Manager %r of employee %r not found, treating as a root",
                    node.manager_id,
                    node.id,
                )
                potential_roots.append(node)

    root = _select_root(potential_roots)
    if root is None:
        logger.warning("No root among %d employees; every record sits in a reporting cycle", len(nodes))
        return None

    root.expanded = True
    reachable = sum(1 for _ in root.walk())
    if reachable < len(nodes):
        logger.warning("%d employee(s) unreachable from root %r", len(nodes) - reachable, root.id)

    logger.info("Built hierarchy: %d nodes under root %r", reachable, root.id)
    return root


def flatten_hierarchy(root: HierarchyNode | None) -> list[EmployeeRecord]:
    """Flatten every node of a tree back into records, ignoring expand state."""
    if root is None:
        return []
    return [node.record for node in root.walk()]
