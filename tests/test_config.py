from pathlib import Path

import pytest

from orgchart.config import ColumnMapping, LayoutConfig, config_from_mapping, get_env_config, load_chart_config


def test_default_layout_constants():
    layout = LayoutConfig()
    assert (layout.node_width, layout.node_height) == (180.0, 70.0)
    assert (layout.horizontal_gap, layout.vertical_gap) == (40.0, 80.0)


def test_environment_presets():
    assert load_chart_config("compact").layout.node_width == 140.0
    assert load_chart_config("development").report_format == "json"
    with pytest.raises(ValueError):
        load_chart_config("staging")


def test_mapping_overlays_preset():
    config = config_from_mapping({
        "environment": "compact",
        "output_dir": "charts",
        "layout": {"node_width": 200},
        "columns": {"employee_id": "Employee ID"},
    })
    assert config.layout.node_width == 200.0
    assert config.layout.vertical_gap == 70.0
    assert config.columns.employee_id == "Employee ID"
    assert config.columns.manager_id == "manager_id"
    assert config.output_dir == Path("charts")
    assert config.report_format == "summary"


def test_column_mapping_keyed_by_record_field():
    sources = ColumnMapping(employee_id="Emp").as_dict()
    assert sources["id"] == "Emp"
    assert "employee_id" not in sources


def test_project_settings_keep_default_columns():
    config = config_from_mapping(get_env_config())
    assert config.columns == ColumnMapping()
    assert config.layout == LayoutConfig()
