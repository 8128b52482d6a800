"""Structural diff between a baseline and a target org snapshot.

Every employee in the union of both snapshots lands in exactly one of:

  - new:        in the target only
  - exit:       in the baseline only
  - moved:      in both, with a different (normalized) manager id
  - unchanged:  in both, same manager

On top of that partition, each move carries a cascade effect: every direct
and transitive subordinate of the moved employee in the target snapshot. A
subordinate below two moved managers is counted under both; the totals in
the summary compound on purpose, one count per move that affects it.
"""

import logging
from collections import defaultdict
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from orgchart.hierarchy.models import EmployeeRecord, coerce_records
from orgchart.utils.ids import normalize_id
from orgchart.utils.types import ChangeType, Summary

logger = logging.getLogger(__name__)

type Snapshot = Sequence[EmployeeRecord | Mapping]


@dataclass(frozen=True)
class EmployeeChange:
    record: EmployeeRecord
    change_type: ChangeType
    previous_manager_id: str | None = None
    previous_manager_name: str | None = None

    @property
    def id(self) -> str:
        return self.record.id

    def as_dict(self) -> dict:
        return {
            **self.record.as_dict(),
            "change_type": str(self.change_type),
            "previous_manager_id": self.previous_manager_id,
            "previous_manager_name": self.previous_manager_name,
        }


@dataclass(frozen=True)
class CascadeEffect:
    moved_employee_id: str
    affected_subordinate_ids: tuple[str, ...]
    count: int

    def as_dict(self) -> dict:
        return {
            "moved_employee_id": self.moved_employee_id,
            "affected_subordinate_ids": list(self.affected_subordinate_ids),
            "count": self.count,
        }


@dataclass
class ChangeAnalysis:
    new: list[EmployeeChange] = field(default_factory=list)
    moved: list[EmployeeChange] = field(default_factory=list)
    exit: list[EmployeeChange] = field(default_factory=list)
    unchanged: list[EmployeeChange] = field(default_factory=list)
    cascade_effects: list[CascadeEffect] = field(default_factory=list)
    summary: Summary = field(default_factory=dict)

    def classification(self) -> dict[str, ChangeType]:
        """Normalized id -> tag; unchanged subordinates of a move read as cascade."""
        tags: dict[str, ChangeType] = {}
        for changes in (self.new, self.moved, self.exit, self.unchanged):
            for change in changes:
                tags[change.record.key] = change.change_type

        for effect in self.cascade_effects:
            for subordinate_id in effect.affected_subordinate_ids:
                key = normalize_id(subordinate_id)
                if tags.get(key) == ChangeType.UNCHANGED:
                    tags[key] = ChangeType.CASCADE
        return tags

    def as_dict(self) -> dict:
        return {
            "summary": dict(self.summary),
            "new": [c.as_dict() for c in self.new],
            "moved": [c.as_dict() for c in self.moved],
            "exit": [c.as_dict() for c in self.exit],
            "unchanged": [c.as_dict() for c in self.unchanged],
            "cascade_effects": [e.as_dict() for e in self.cascade_effects],
        }


def _index_snapshot(records: list[EmployeeRecord]) -> dict[str, EmployeeRecord]:
    """Normalized id -> record, first occurrence wins, blank ids dropped."""
    index: dict[str, EmployeeRecord] = {}
    for record in records:
        key = record.key
        if key and key not in index:
            index[key] = record
    return index


def _build_reports_map(index: dict[str, EmployeeRecord]) -> dict[str, list[str]]:
    """Manager key -> direct report keys, in snapshot order."""
    reports: dict[str, list[str]] = defaultdict(list)
    for key, record in index.items():
        manager_key = record.manager_key
        if manager_key and manager_key != key:
            reports[manager_key].append(key)
    return dict(reports)


def _collect_subordinates(employee_key: str, reports: dict[str, list[str]]) -> list[str]:
    """All direct and transitive reports, pre-order; terminates on cyclic data."""
    seen = {employee_key}
    ordered = []
    stack = list(reversed(reports.get(employee_key, [])))
    while stack:
        key = stack.pop()
        if key in seen:
            continue
        seen.add(key)
        ordered.append(key)
        stack.extend(reversed(reports.get(key, [])))
    return ordered


def _summarize(analysis: ChangeAnalysis, baseline_count: int, target_count: int) -> Summary:
    """Counts per group plus cascade totals.

    ``total_cascade`` and ``total_affected`` are the same compounded sum of
    every cascade count; ``cascade_moves`` is the number of moves with reports.
    """
    total_cascade = sum(e.count for e in analysis.cascade_effects)
    return {
        "new": len(analysis.new),
        "moved": len(analysis.moved),
        "exit": len(analysis.exit),
        "unchanged": len(analysis.unchanged),
        "total_direct_changes": len(analysis.new) + len(analysis.moved) + len(analysis.exit),
        "cascade_moves": len(analysis.cascade_effects),
        "total_cascade": total_cascade,
        "total_affected": total_cascade,
        "baseline_count": baseline_count,
        "target_count": target_count,
        "net_change": target_count - baseline_count,
    }


def analyze_changes(baseline: Snapshot | None, target: Snapshot | None) -> ChangeAnalysis | None:
    """Classify every employee across two snapshots and collect cascade effects.

    Returns ``None`` when either snapshot is missing or empty; callers check
    for it before offering a comparison view.
    """
    if baseline is None or target is None:
        logger.info("Comparison skipped: a snapshot is missing")
        return None

    baseline_index = _index_snapshot(coerce_records(baseline))
    target_index = _index_snapshot(coerce_records(target))
    if not baseline_index or not target_index:
        logger.info(
            "Comparison skipped: baseline has %d employee(s), target has %d",
            len(baseline_index),
            len(target_index),
        )
        return None

    analysis = ChangeAnalysis()

    for key, record in target_index.items():
        previous = baseline_index.get(key)
        if previous is None:
            analysis.new.append(EmployeeChange(record, ChangeType.NEW))
        elif previous.manager_key != record.manager_key:
            previous_manager = baseline_index.get(previous.manager_key)
            analysis.moved.append(EmployeeChange(
                record,
                ChangeType.MOVED,
                previous_manager_id=previous.manager_id,
                previous_manager_name=(previous_manager.name or None) if previous_manager else None,
            ))
        else:
            analysis.unchanged.append(EmployeeChange(record, ChangeType.UNCHANGED))

    for key, record in baseline_index.items():
        if key not in target_index:
            analysis.exit.append(EmployeeChange(record, ChangeType.EXIT))

    reports = _build_reports_map(target_index)
    for change in analysis.moved:
        subordinates = _collect_subordinates(change.record.key, reports)
        if subordinates:
            analysis.cascade_effects.append(CascadeEffect(
                moved_employee_id=change.id,
                affected_subordinate_ids=tuple(target_index[k].id for k in subordinates),
                count=len(subordinates),
            ))

    analysis.summary = _summarize(analysis, len(baseline_index), len(target_index))
    logger.info(
        "Change analysis: %d new, %d moved, %d exit, %d unchanged, %d affected by moves",
        analysis.summary["new"],
        analysis.summary["moved"],
        analysis.summary["exit"],
        analysis.summary["unchanged"],
        analysis.summary["total_affected"],
    )
    return analysis
