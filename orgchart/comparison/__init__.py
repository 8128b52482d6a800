"""Baseline vs target comparison of two org snapshots."""

from orgchart.comparison.diff import ChangeAnalysis, EmployeeChange, CascadeEffect, analyze_changes
from orgchart.comparison.annotate import apply_change_types, clear_change_types
from orgchart.comparison.reporters import build_change_table, build_moves_table, save_analysis
