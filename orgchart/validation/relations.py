"""Structural checks on one flat snapshot before it becomes a tree.

Four passes over the same normalized view of the rows:

  1. missing / duplicate ids, self-references, root candidates
  2. root count (exactly one CEO expected)
  3. every manager id refers to a known employee
  4. reporting cycles (employee -> manager graph)

Findings are advisory. ``validate_relations`` never raises for bad data; it
returns every finding so the caller can show them next to a best-effort tree.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from orgchart.hierarchy.models import EmployeeRecord
from orgchart.utils.ids import normalize_id
from orgchart.utils.types import ErrorType, Row

logger = logging.getLogger(__name__)

# Spreadsheet row numbers: 1-based plus the header row.
_ROW_OFFSET = 2


@dataclass(frozen=True)
class StructuralError:
    type: ErrorType
    message: str
    details: str

    def as_dict(self) -> dict[str, str]:
        return {"type": str(self.type), "message": self.message, "details": self.details}


def _check_rows(
    rows: Sequence[Row],
    employee_id_field: str,
    manager_id_field: str,
) -> tuple[list[StructuralError], dict[str, int], list[str]]:
    errors: list[StructuralError] = []
    first_seen: dict[str, int] = {}
    root_candidates: list[str] = []

    for index, row in enumerate(rows):
        employee_id = normalize_id(row.get(employee_id_field))
        manager_id = normalize_id(row.get(manager_id_field))
        row_number = index + _ROW_OFFSET

        if not employee_id:
            errors.append(StructuralError(
                ErrorType.MISSING_ID,
                "An employee is missing their unique ID, which is required.",
                f"Row {row_number}",
            ))
        elif employee_id in first_seen:
            errors.append(StructuralError(
                ErrorType.DUPLICATE_ID,
                f'The employee ID "{employee_id}" is used more than once. All IDs must be unique.',
                f"Row {row_number} is a duplicate of row {first_seen[employee_id] + _ROW_OFFSET}",
            ))
        else:
            first_seen[employee_id] = index

        if employee_id and manager_id and employee_id == manager_id:
            errors.append(StructuralError(
                ErrorType.SELF_REFERENCE,
                f'Employee "{employee_id}" cannot be their own manager.',
                f"Row {row_number}",
            ))

        if not manager_id:
            root_candidates.append(employee_id)

    return errors, first_seen, root_candidates


def _check_root_count(rows: Sequence[Row], root_candidates: list[str]) -> list[StructuralError]:
    match len(root_candidates):
        case 0 if rows:
            return [StructuralError(
                ErrorType.NO_ROOT,
                "No employee was found without a manager. Your organization must have "
                "one top-level person (CEO).",
                "Please ensure at least one employee has a blank manager field.",
            )]
        case 0 | 1:
            return []
        case n:
            listed = ", ".join(c or "<blank id>" for c in root_candidates)
            return [StructuralError(
                ErrorType.MULTIPLE_ROOTS,
                "Your organization has more than one person without a manager. "
                "There should be only one CEO.",
                f"Found {n} top-level employees: {listed}",
            )]


def _check_managers_exist(
    rows: Sequence[Row],
    employee_id_field: str,
    manager_id_field: str,
    known_ids: dict[str, int],
) -> list[StructuralError]:
    errors = []
    for index, row in enumerate(rows):
        manager_id = normalize_id(row.get(manager_id_field))
        if manager_id and manager_id not in known_ids:
            errors.append(StructuralError(
                ErrorType.MISSING_MANAGER,
                "A manager listed for an employee does not exist as an employee in the file.",
                f'Row {index + _ROW_OFFSET}: Manager "{manager_id}" for Employee '
                f'"{row.get(employee_id_field)}" is not a valid employee.',
            ))
    return errors


def detect_cycles(
    rows: Sequence[Row],
    employee_id_field: str,
    manager_id_field: str,
) -> list[list[str]]:
    """Find reporting loops in the employee -> manager graph.

    Only edges whose manager is itself a known employee are considered.
    Depth-first search runs from every unvisited employee in row order and
    keeps the current path as a recursion stack; re-entering a node on the
    stack yields the stack slice from that node as one cycle. Cycles with the
    same member set are reported once, whatever node the search entered from.
    """
    known: dict[str, None] = {}
    for row in rows:
        employee_id = normalize_id(row.get(employee_id_field))
        if employee_id:
            known.setdefault(employee_id, None)

    managers: dict[str, list[str]] = {}
    for row in rows:
        employee_id = normalize_id(row.get(employee_id_field))
        manager_id = normalize_id(row.get(manager_id_field))
        # self-loops are reported as Self-Reference, not as cycles
        if employee_id and manager_id and manager_id != employee_id and manager_id in known:
            managers.setdefault(employee_id, []).append(manager_id)

    cycles: list[list[str]] = []
    visited: set[str] = set()

    for start in known:
        if start in visited:
            continue
        # Iterative DFS: (node, index of next neighbour) frames mirror the call stack.
        path: list[str] = [start]
        on_stack: set[str] = {start}
        frames: list[tuple[str, int]] = [(start, 0)]
        visited.add(start)

        while frames:
            node, idx = frames[-1]
            neighbours = managers.get(node, [])
            if idx >= len(neighbours):
                frames.pop()
                path.pop()
                on_stack.discard(node)
                continue

            frames[-1] = (node, idx + 1)
            nbr = neighbours[idx]
            if nbr in on_stack:
                cycles.append(path[path.index(nbr):])
            elif nbr not in visited:
                visited.add(nbr)
                on_stack.add(nbr)
                path.append(nbr)
                frames.append((nbr, 0))

    unique: list[list[str]] = []
    seen: set[tuple[str, ...]] = set()
    for cycle in cycles:
        signature = tuple(sorted(cycle))
        if signature not in seen:
            seen.add(signature)
            unique.append(cycle)
    return unique


def validate_relations(
    rows: Sequence[Row],
    employee_id_field: str = "id",
    manager_id_field: str = "manager_id",
) -> list[StructuralError]:
    """Run every structural check over one snapshot and return all findings."""
    if not isinstance(rows, (list, tuple)):
        raise TypeError(f"Expected a list of rows, got {type(rows).__name__}")
    rows = [r.as_dict() if isinstance(r, EmployeeRecord) else r for r in rows]

    errors, known_ids, root_candidates = _check_rows(rows, employee_id_field, manager_id_field)
    errors.extend(_check_root_count(rows, root_candidates))
    errors.extend(_check_managers_exist(rows, employee_id_field, manager_id_field, known_ids))

    for cycle in detect_cycles(rows, employee_id_field, manager_id_field):
        errors.append(StructuralError(
            ErrorType.CIRCULAR_REFERENCE,
            "A circular reporting structure (a loop) was detected.",
            f"Cycle path: {' → '.join(cycle)} → {cycle[0]}",
        ))

    logger.info("Validated %d rows: %d structural finding(s)", len(rows), len(errors))
    return errors
