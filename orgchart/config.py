"""Chart configuration: layout geometry, column mapping and output settings."""

import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

type ConfigDict = dict[str, str | int | float | dict]


@dataclass(frozen=True)
class LayoutConfig:
    node_width: float = 180.0
    node_height: float = 70.0
    horizontal_gap: float = 40.0
    vertical_gap: float = 80.0


@dataclass(frozen=True)
class ColumnMapping:
    """Which spreadsheet column feeds which EmployeeRecord field."""

    employee_id: str = "id"
    manager_id: str = "manager_id"
    name: str = "name"
    title: str = "title"
    fte: str = "fte"
    location: str = "location"
    job_family: str = "job_family"
    management_level: str = "management_level"

    def as_dict(self) -> dict[str, str]:
        """Record field name -> source column name."""
        mapping = {f.name: getattr(self, f.name) for f in fields(self)}
        mapping["id"] = mapping.pop("employee_id")
        return mapping


@dataclass(frozen=True)
class ChartConfig:
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    columns: ColumnMapping = field(default_factory=ColumnMapping)
    output_dir: Path = Path("output")
    report_format: str = "table"


DEFAULT_LAYOUT = LayoutConfig()


def load_chart_config(env: str = "production") -> ChartConfig:
    match env:
        case "production":
            layout = DEFAULT_LAYOUT
            report_format = "table"
        case "compact":
            layout = LayoutConfig(
                node_width=140.0,
                node_height=50.0,
                horizontal_gap=20.0,
                vertical_gap=70.0,
            )
            report_format = "summary"
        case "development":
            layout = DEFAULT_LAYOUT
            report_format = "json"
        case other:
            raise ValueError(f"Unknown environment: {other}")

    return ChartConfig(layout=layout, report_format=report_format)


def config_from_mapping(data: ConfigDict) -> ChartConfig:
    """Overlay a ``[tool.orgchart]``-shaped mapping onto an environment preset."""
    base = load_chart_config(data.get("environment", "production"))
    layout = replace(base.layout, **{k: float(v) for k, v in data.get("layout", {}).items()})
    columns = replace(base.columns, **data.get("columns", {}))
    return ChartConfig(
        layout=layout,
        columns=columns,
        output_dir=Path(data.get("output_dir", base.output_dir)),
        report_format=data.get("report_format", base.report_format),
    )


def get_env_config() -> ConfigDict:
    """Read chart config from pyproject.toml."""
    pyproject = Path(__file__).parent.parent / "pyproject.toml"
    if not pyproject.exists():
        return {}
    with open(pyproject, "rb") as f:
        data = tomllib.load(f)
    return data.get("tool", {}).get("orgchart", {})
