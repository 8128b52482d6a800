"""Change analysis reporting for the console and for saved output."""

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from orgchart.comparison.diff import ChangeAnalysis

console = Console()

_SUMMARY_ROWS = [
    ("baseline_count", "Baseline employees"),
    ("target_count", "Target employees"),
    ("net_change", "Net change"),
    ("new", "New positions"),
    ("exit", "Exits"),
    ("moved", "Moved employees"),
    ("unchanged", "Unchanged"),
    ("cascade_moves", "Moves with reports"),
    ("total_affected", "Affected by moves"),
]


def build_change_table(analysis: ChangeAnalysis, title: str = "Change analysis") -> Table:
    table = Table(title=title)
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right")

    for key, label in _SUMMARY_ROWS:
        value = analysis.summary.get(key, 0)
        match key:
            case "net_change" if value > 0:
                shown = f"[green]+{value}[/green]"
            case "net_change" if value < 0:
                shown = f"[red]{value}[/red]"
            case _:
                shown = str(value)
        table.add_row(label, shown)
    return table


def build_moves_table(analysis: ChangeAnalysis) -> Table:
    table = Table(title="Moved employees")
    table.add_column("Employee")
    table.add_column("Previous manager")
    table.add_column("New manager")
    table.add_column("Reports affected", justify="right")

    affected = {e.moved_employee_id: e.count for e in analysis.cascade_effects}
    for change in analysis.moved:
        table.add_row(
            change.record.display_name,
            change.previous_manager_name or change.previous_manager_id or "-",
            change.record.manager_id or "-",
            str(affected.get(change.id, 0)),
        )
    return table


def save_analysis(analysis: ChangeAnalysis, output_dir: Path, filename: str = "changes.json") -> Path:
    """Persist a change analysis as JSON."""
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / filename
    path.write_text(json.dumps(analysis.as_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
    console.print(f"  Changes saved: {path}")
    return path
