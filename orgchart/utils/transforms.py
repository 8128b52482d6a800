"""Mapping between pandas frames and employee records."""

import logging

import pandas as pd

from orgchart.config import ColumnMapping
from orgchart.hierarchy.models import RECORD_FIELDS, EmployeeRecord

logger = logging.getLogger(__name__)


class MissingColumnsError(KeyError):
    """A snapshot lacks the employee or manager id column."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


# Header keywords per record field, most specific first.
COLUMN_KEYWORDS: dict[str, list[str]] = {
    "employee_id": ["employee id", "worker id", "employee number", "personnel number", "id"],
    "manager_id": ["manager id", "supervisor id", "reports to", "manager", "supervisor"],
    "name": ["name", "employee name", "full name", "worker name", "employee", "person"],
    "title": ["title", "job title", "position", "role", "position title"],
    "fte": ["fte", "full time equivalent", "workload", "hours"],
    "location": ["location", "office", "site", "city", "country"],
    "job_family": ["job family", "department", "function", "team", "division"],
    "management_level": ["management level", "level", "grade", "band", "tier"],
}


def suggest_column_mapping(columns: list[str]) -> ColumnMapping:
    """Guess which header feeds which field from keyword matches.

    Exact (case-insensitive) header matches are claimed first across all
    fields, then headers containing a keyword. A header is used at most once.
    Fields with no match keep the ColumnMapping default.
    """
    lowered = {str(col).strip().lower(): col for col in columns}
    claimed: set[str] = set()
    chosen: dict[str, str] = {}

    for field_name, keywords in COLUMN_KEYWORDS.items():
        for keyword in keywords:
            if keyword in lowered and lowered[keyword] not in claimed:
                chosen[field_name] = lowered[keyword]
                claimed.add(lowered[keyword])
                break

    for field_name, keywords in COLUMN_KEYWORDS.items():
        if field_name in chosen:
            continue
        found = next(
            (
                original
                for keyword in keywords
                if len(keyword) > 2
                for header, original in lowered.items()
                if keyword in header and original not in claimed
            ),
            None,
        )
        if found is not None:
            chosen[field_name] = found
            claimed.add(found)

    return ColumnMapping(**chosen)


def resolve_column_mapping(columns: list[str], mapping: ColumnMapping) -> ColumnMapping:
    """Keep the configured mapping when its id columns exist, otherwise auto-detect."""
    if mapping.employee_id in columns and mapping.manager_id in columns:
        return mapping

    suggested = suggest_column_mapping(columns)
    logger.warning(
        "Configured id columns %r/%r not found, detected %r/%r instead",
        mapping.employee_id,
        mapping.manager_id,
        suggested.employee_id,
        suggested.manager_id,
    )
    return suggested


def records_from_frame(df: pd.DataFrame, mapping: ColumnMapping | None = None) -> list[EmployeeRecord]:
    """Turn a field-mapped frame into records, dropping fully blank rows."""
    mapping = mapping or ColumnMapping()
    sources = mapping.as_dict()

    missing = [sources[f] for f in ("id", "manager_id") if sources[f] not in df.columns]
    if missing:
        raise MissingColumnsError(f"Snapshot is missing required columns: {missing}")

    present = {column: field for field, column in sources.items() if column in df.columns}
    frame = df[list(present)].rename(columns=present)

    records = []
    for row in frame.to_dict(orient="records"):
        record = EmployeeRecord.from_row(row)
        if record.id or record.name:
            records.append(record)

    dropped = len(frame) - len(records)
    if dropped:
        logger.info("Dropped %d blank row(s)", dropped)
    logger.info("Mapped %d employee records", len(records))
    return records


def records_to_frame(records: list[EmployeeRecord]) -> pd.DataFrame:
    """Flat record frame for persistence, one column per record field."""
    return pd.DataFrame([r.as_dict() for r in records], columns=list(RECORD_FIELDS))
