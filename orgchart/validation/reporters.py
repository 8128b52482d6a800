"""Structural finding reporting and formatting.

Converts StructuralError lists into table, JSON or one-line summary form for
the console, for saved reports and for upload gating.
"""

import json
from collections import Counter
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.table import Table

from orgchart.utils.types import ReportFormat
from orgchart.validation.relations import StructuralError

console = Console()


def build_validation_report(
    snapshot: str,
    errors: list[StructuralError],
    output_format: ReportFormat = "table",
) -> str:
    """Render the findings for one snapshot in the requested format."""
    match output_format:
        case "json":
            return _to_json(snapshot, errors)
        case "summary":
            return _to_summary(snapshot, errors)
        case "table" | _:
            return _to_table(snapshot, errors)


def _to_json(snapshot: str, errors: list[StructuralError]) -> str:
    report = {
        "snapshot": snapshot,
        "timestamp": datetime.now().isoformat(),
        "total": len(errors),
        "by_type": dict(Counter(str(e.type) for e in errors)),
        "errors": [e.as_dict() for e in errors],
    }
    return json.dumps(report, indent=2, ensure_ascii=False)


def _to_summary(snapshot: str, errors: list[StructuralError]) -> str:
    if not errors:
        return f"[{snapshot}] no structural issues"

    lines = [f"[{snapshot}] {len(errors)} structural issue(s)"]
    for error_type, count in Counter(str(e.type) for e in errors).items():
        lines.append(f"  {error_type}: {count}")
    return "\n".join(lines)


def _to_table(snapshot: str, errors: list[StructuralError]) -> str:
    table = Table(title=f"Validation: {snapshot}")
    table.add_column("Type", style="bold red")
    table.add_column("Message")
    table.add_column("Details", style="cyan")

    for e in errors:
        table.add_row(str(e.type), e.message, e.details)

    buf = Console(file=None, force_terminal=False)
    with buf.capture() as capture:
        buf.print(table)
    return capture.get()


def save_report(
    report: str,
    output_dir: Path,
    snapshot: str,
    fmt: ReportFormat = "json",
) -> Path:
    """Persist a validation report to disk."""
    output_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    match fmt:
        case "json":
            path = output_dir / f"{snapshot}_validation_{timestamp}.json"
        case _:
            path = output_dir / f"{snapshot}_validation_{timestamp}.txt"

    path.write_text(report, encoding="utf-8")
    console.print(f"  Report saved: {path}")
    return path
