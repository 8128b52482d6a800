import pytest

from orgchart.hierarchy.models import EmployeeRecord
from orgchart.utils.types import ErrorType
from orgchart.validation.relations import detect_cycles, validate_relations


def _row(id, manager_id="", name=""):
    return {"id": id, "manager_id": manager_id, "name": name}


def _types(errors):
    return [e.type for e in errors]


def test_clean_snapshot_has_no_findings():
    rows = [_row("1"), _row("2", "1"), _row("3", "1"), _row("4", "2")]
    assert validate_relations(rows) == []


def test_two_person_loop_reports_no_root_and_one_cycle():
    rows = [{"id": "A", "managerId": "B"}, {"id": "B", "managerId": "A"}]
    errors = validate_relations(rows, "id", "managerId")
    assert _types(errors).count(ErrorType.NO_ROOT) == 1
    assert _types(errors).count(ErrorType.CIRCULAR_REFERENCE) == 1
    cycle = next(e for e in errors if e.type == ErrorType.CIRCULAR_REFERENCE)
    assert cycle.details == "Cycle path: a → b → a"


@pytest.mark.parametrize("order", [[0, 1, 2, 3], [3, 2, 1, 0], [2, 0, 3, 1]])
def test_three_cycle_reported_once_regardless_of_row_order(order):
    rows = [_row("ceo"), _row("x", "z"), _row("y", "x"), _row("z", "y")]
    errors = validate_relations([rows[i] for i in order])
    assert _types(errors).count(ErrorType.CIRCULAR_REFERENCE) == 1


def test_detect_cycles_returns_members():
    rows = [_row("1"), _row("2", "3"), _row("3", "2")]
    cycles = detect_cycles(rows, "id", "manager_id")
    assert len(cycles) == 1
    assert sorted(cycles[0]) == ["2", "3"]


def test_two_disjoint_cycles():
    rows = [_row("1"), _row("a", "b"), _row("b", "a"), _row("c", "d"), _row("d", "c")]
    assert len(detect_cycles(rows, "id", "manager_id")) == 2


def test_missing_id():
    errors = validate_relations([_row("1"), _row("  ", "1", name="Ghost")])
    missing = [e for e in errors if e.type == ErrorType.MISSING_ID]
    assert len(missing) == 1
    assert missing[0].details == "Row 3"


def test_duplicate_id_points_at_first_row():
    errors = validate_relations([_row("1"), _row("2", "1"), _row(" 2 ", "1")])
    duplicates = [e for e in errors if e.type == ErrorType.DUPLICATE_ID]
    assert len(duplicates) == 1
    assert duplicates[0].details == "Row 4 is a duplicate of row 3"


def test_self_reference_is_not_a_cycle():
    errors = validate_relations([_row("1"), _row("2", "2")])
    assert ErrorType.SELF_REFERENCE in _types(errors)
    assert ErrorType.CIRCULAR_REFERENCE not in _types(errors)


def test_manager_does_not_exist():
    errors = validate_relations([_row("1"), _row("2", "99")])
    missing = [e for e in errors if e.type == ErrorType.MISSING_MANAGER]
    assert len(missing) == 1
    assert '"99"' in missing[0].details


def test_multiple_ceos_listed():
    errors = validate_relations([_row("1"), _row("2"), _row("3", "1")])
    multiple = [e for e in errors if e.type == ErrorType.MULTIPLE_ROOTS]
    assert len(multiple) == 1
    assert multiple[0].details == "Found 2 top-level employees: 1, 2"


def test_ids_compared_case_insensitively():
    assert validate_relations([_row("CEO"), _row("e1", " ceo ")]) == []


def test_empty_snapshot_has_no_findings():
    assert validate_relations([]) == []


def test_accepts_employee_records():
    records = [EmployeeRecord(id="1"), EmployeeRecord(id="2", manager_id="1")]
    assert validate_relations(records) == []


def test_non_list_input_raises():
    with pytest.raises(TypeError):
        validate_relations(None)
    with pytest.raises(TypeError):
        validate_relations("1,2")


def test_error_as_dict_uses_tag_text():
    errors = validate_relations([_row("1"), _row("2", "2")])
    assert errors[0].as_dict()["type"] == "Self-Reference"
