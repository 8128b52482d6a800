"""Shared type definitions for the org chart core."""

from collections.abc import Mapping
from enum import StrEnum


type EmployeeID = str
type Row = Mapping[str, object]
type ReportFormat = str  # "table" | "json" | "summary"
type Summary = dict[str, int]


class ChangeType(StrEnum):
    NEW = "new"
    MOVED = "moved"
    EXIT = "exit"
    CASCADE = "cascade"
    UNCHANGED = "unchanged"


class ErrorType(StrEnum):
    """Stable tags of structural findings, shown to users as-is."""

    MISSING_ID = "Missing Employee ID"
    DUPLICATE_ID = "Duplicate Employee ID"
    SELF_REFERENCE = "Self-Reference"
    NO_ROOT = "No CEO Found"
    MULTIPLE_ROOTS = "Multiple CEOs Found"
    MISSING_MANAGER = "Manager Does Not Exist"
    CIRCULAR_REFERENCE = "Circular Reference Found"
