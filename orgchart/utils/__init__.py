"""Shared utilities for the org chart core."""

from orgchart.utils.ids import normalize_id, is_blank
from orgchart.utils.types import ChangeType, ErrorType, EmployeeID, Row
from orgchart.utils.validators import validate_dataframe
