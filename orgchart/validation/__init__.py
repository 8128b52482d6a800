"""Structural validation of flat employee snapshots."""

from orgchart.validation.relations import StructuralError, validate_relations, detect_cycles
from orgchart.validation.schemas import snapshot_schema
from orgchart.validation.reporters import build_validation_report, save_report
