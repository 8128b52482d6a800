"""Command-line runner: validate, lay out and compare org snapshots."""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from orgchart.comparison import analyze_changes, apply_change_types, build_change_table, build_moves_table, save_analysis
from orgchart.config import ChartConfig, config_from_mapping, get_env_config
from orgchart.hierarchy import (
    EmployeeRecord,
    build_hierarchy,
    expand_all,
    hierarchy_frame,
    layout_payload,
    span_of_control_summary,
)
from orgchart.utils.io import read_snapshot, write_json
from orgchart.utils.transforms import MissingColumnsError, records_from_frame, records_to_frame, resolve_column_mapping
from orgchart.utils.validators import validate_dataframe
from orgchart.validation import build_validation_report, save_report, snapshot_schema, validate_relations

console = Console()


def load_config(path: Path | None = None) -> ChartConfig:
    config_path = path or Path.cwd() / "orgchart.yaml"
    if config_path.exists():
        import yaml
        with open(config_path) as f:
            return config_from_mapping(yaml.safe_load(f) or {})

    # Fall back to pyproject.toml metadata
    return config_from_mapping(get_env_config())


def _load_records(path: str, config: ChartConfig) -> tuple[list[dict], list[EmployeeRecord], str, str]:
    """Read a snapshot and return its raw rows, its records and the id column names."""
    df = read_snapshot(path)
    mapping = resolve_column_mapping(list(df.columns), config.columns)
    rows = df.to_dict(orient="records")
    return rows, records_from_frame(df, mapping), mapping.employee_id, mapping.manager_id


def cmd_validate(args, config: ChartConfig) -> int:
    rows, records, id_col, manager_col = _load_records(args.snapshot, config)
    errors = validate_relations(rows, id_col, manager_col)

    snapshot = Path(args.snapshot).stem
    fmt = args.format or config.report_format
    report = build_validation_report(snapshot, errors, fmt)
    console.print(report, markup=False, highlight=False)
    if args.output:
        save_report(report, Path(args.output), snapshot, fmt)

    frame_check = validate_dataframe(records_to_frame(records), snapshot_schema)
    for message in frame_check["errors"]:
        console.print(f"[yellow]{escape(message)}[/yellow]")

    if errors or not frame_check["valid"]:
        console.print(f"[red]{len(errors)} structural issue(s) in {snapshot}[/red]")
        return 1
    console.print(f"[green]{snapshot}: {len(records)} employees, no structural issues[/green]")
    return 0


def cmd_layout(args, config: ChartConfig) -> int:
    _, records, _, _ = _load_records(args.snapshot, config)
    root = build_hierarchy(records)
    if root is None:
        console.print("[red]No hierarchy could be built from this snapshot[/red]")
        return 1

    if args.expand_all:
        expand_all(root)

    payload = layout_payload(root, config.layout)
    output = Path(args.output or config.output_dir)
    write_json(payload, output / "layout.json")

    frame = hierarchy_frame(root)
    spans = span_of_control_summary(frame)
    table = Table(title=f"Hierarchy: {Path(args.snapshot).stem}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Employees in tree", str(len(frame)))
    table.add_row("Visible nodes", str(len(payload["nodes"])))
    for key, value in spans.items():
        table.add_row(key.replace("_", " ").capitalize(), str(value))
    console.print(table)
    return 0


def cmd_compare(args, config: ChartConfig) -> int:
    _, baseline, _, _ = _load_records(args.baseline, config)
    _, target, _, _ = _load_records(args.target, config)

    analysis = analyze_changes(baseline, target)
    if analysis is None:
        console.print("[yellow]Both snapshots need employees before they can be compared[/yellow]")
        return 1

    output = Path(args.output or config.output_dir)
    save_analysis(analysis, output)

    root = build_hierarchy(target)
    if root is not None:
        apply_change_types(root, analysis)
        if args.expand_all:
            expand_all(root)
        write_json(layout_payload(root, config.layout), output / "comparison_layout.json")

    console.print(build_change_table(analysis))
    if analysis.moved:
        console.print(build_moves_table(analysis))
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Validate, lay out and compare org chart snapshots")
    parser.add_argument("--config", type=Path, help="Path to an orgchart.yaml file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show info logging")
    subparsers = parser.add_subparsers(dest="command")

    validate_parser = subparsers.add_parser("validate", help="Check one snapshot for structural issues")
    validate_parser.add_argument("snapshot", help="Snapshot file (.csv, .xlsx, .json)")
    validate_parser.add_argument("--format", choices=["table", "json", "summary"], help="Report format")
    validate_parser.add_argument("-o", "--output", help="Directory to save the report in")

    layout_parser = subparsers.add_parser("layout", help="Build and lay out the hierarchy of one snapshot")
    layout_parser.add_argument("snapshot", help="Snapshot file (.csv, .xlsx, .json)")
    layout_parser.add_argument("--expand-all", action="store_true", help="Lay out every level, not just the root")
    layout_parser.add_argument("-o", "--output", help="Output directory for layout.json")

    compare_parser = subparsers.add_parser("compare", help="Compare a baseline and a target snapshot")
    compare_parser.add_argument("baseline", help="Baseline snapshot file")
    compare_parser.add_argument("target", help="Target snapshot file")
    compare_parser.add_argument("--expand-all", action="store_true", help="Expand the annotated target tree")
    compare_parser.add_argument("-o", "--output", help="Output directory for changes.json")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    config = load_config(args.config)

    match args.command:
        case "validate":
            command = cmd_validate
        case "layout":
            command = cmd_layout
        case "compare":
            command = cmd_compare
        case _:
            parser.print_help()
            return

    try:
        status = command(args, config)
    except MissingColumnsError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        status = 1
    sys.exit(status)


if __name__ == "__main__":
    main()
