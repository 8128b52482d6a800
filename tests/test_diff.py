import pytest

from orgchart.comparison.diff import analyze_changes
from orgchart.hierarchy.models import EmployeeRecord
from orgchart.utils.types import ChangeType


def _make_record(id, manager_id="", name=""):
    return EmployeeRecord(id=id, manager_id=manager_id, name=name)


def _ids(changes):
    return [c.id for c in changes]


def test_new_hire():
    baseline = [{"id": 1, "managerId": ""}, {"id": 2, "managerId": "1"}]
    target = [{"id": 1, "managerId": ""}, {"id": 2, "managerId": "1"}, {"id": 3, "managerId": "1"}]
    analysis = analyze_changes(baseline, target)
    assert _ids(analysis.new) == ["3"]
    assert analysis.moved == []
    assert analysis.exit == []
    assert _ids(analysis.unchanged) == ["1", "2"]
    assert analysis.cascade_effects == []


def test_move_without_reports_has_no_cascade():
    baseline = [{"id": 1, "managerId": ""}, {"id": 2, "managerId": "1"}, {"id": 3, "managerId": "2"}]
    target = [{"id": 1, "managerId": ""}, {"id": 2, "managerId": "1"}, {"id": 3, "managerId": "1"}]
    analysis = analyze_changes(baseline, target)
    assert _ids(analysis.moved) == ["3"]
    assert analysis.moved[0].previous_manager_id == "2"
    assert analysis.moved[0].previous_manager_name is None
    assert analysis.summary["total_affected"] == 0


def test_exit():
    baseline = [_make_record("1"), _make_record("2", "1"), _make_record("3", "1")]
    target = [_make_record("1"), _make_record("2", "1")]
    analysis = analyze_changes(baseline, target)
    assert _ids(analysis.exit) == ["3"]
    assert analysis.exit[0].change_type == ChangeType.EXIT
    assert analysis.summary["net_change"] == -1


def test_previous_manager_name_from_baseline():
    baseline = [_make_record("1", name="Ceo"), _make_record("2", "1", name="Vp"), _make_record("3", "2")]
    target = [_make_record("1", name="Ceo"), _make_record("2", "1", name="Vp"), _make_record("3", "1")]
    analysis = analyze_changes(baseline, target)
    assert analysis.moved[0].previous_manager_name == "Vp"


def test_cascade_lists_transitive_reports():
    baseline = [_make_record("1"), _make_record("2", "1"), _make_record("3", "1"), _make_record("4", "2"), _make_record("5", "4")]
    target = [_make_record("1"), _make_record("2", "3"), _make_record("3", "1"), _make_record("4", "2"), _make_record("5", "4")]
    analysis = analyze_changes(baseline, target)
    assert _ids(analysis.moved) == ["2"]
    effect = analysis.cascade_effects[0]
    assert effect.moved_employee_id == "2"
    assert effect.affected_subordinate_ids == ("4", "5")
    assert effect.count == 2
    assert analysis.summary["cascade_moves"] == 1


def test_cascade_counts_compound_across_moved_managers():
    baseline = [_make_record("1"), _make_record("2", "1"), _make_record("3", "1"), _make_record("4", "3"), _make_record("5", "4")]
    target = [_make_record("1"), _make_record("3", "1"), _make_record("2", "3"), _make_record("4", "2"), _make_record("5", "4")]
    analysis = analyze_changes(baseline, target)
    assert _ids(analysis.moved) == ["2", "4"]
    counts = {e.moved_employee_id: e.count for e in analysis.cascade_effects}
    assert counts == {"2": 2, "4": 1}
    # employee 5 sits under both moves and is counted once per move
    assert analysis.summary["total_affected"] == 3
    assert analysis.summary["total_cascade"] == 3


def test_classification_marks_unchanged_subordinates_as_cascade():
    baseline = [_make_record("1"), _make_record("2", "1"), _make_record("3", "1"), _make_record("4", "2")]
    target = [_make_record("1"), _make_record("2", "3"), _make_record("3", "1"), _make_record("4", "2")]
    tags = analyze_changes(baseline, target).classification()
    assert tags["2"] == ChangeType.MOVED
    assert tags["4"] == ChangeType.CASCADE
    assert tags["3"] == ChangeType.UNCHANGED


def test_every_employee_classified_exactly_once():
    baseline = [_make_record("1"), _make_record("2", "1"), _make_record("3", "2"), _make_record("4", "2")]
    target = [_make_record("1"), _make_record("3", "1"), _make_record("4", "3"), _make_record("5", "4")]
    analysis = analyze_changes(baseline, target)
    groups = [analysis.new, analysis.moved, analysis.exit, analysis.unchanged]
    keys = [c.record.key for group in groups for c in group]
    assert len(keys) == len(set(keys)) == 5
    summary = analysis.summary
    assert summary["new"] + summary["moved"] + summary["unchanged"] == summary["target_count"]
    assert summary["exit"] + summary["moved"] + summary["unchanged"] == summary["baseline_count"]


def test_ids_matched_case_insensitively():
    baseline = [_make_record("CEO"), _make_record("E1", "CEO")]
    target = [_make_record("ceo"), _make_record(" e1 ", "Ceo")]
    analysis = analyze_changes(baseline, target)
    assert len(analysis.unchanged) == 2
    assert analysis.summary["total_direct_changes"] == 0


def test_duplicates_first_occurrence_wins():
    baseline = [_make_record("1"), _make_record("2", "1")]
    target = [_make_record("1"), _make_record("2", "1"), _make_record("2", "9")]
    analysis = analyze_changes(baseline, target)
    assert analysis.moved == []
    assert analysis.summary["target_count"] == 2


@pytest.mark.parametrize("baseline, target", [
    (None, [{"id": "1"}]),
    ([{"id": "1"}], None),
    ([], [{"id": "1"}]),
    ([{"id": "1"}], []),
])
def test_missing_or_empty_snapshot_gives_none(baseline, target):
    assert analyze_changes(baseline, target) is None


def test_cyclic_target_terminates():
    baseline = [_make_record("1"), _make_record("a", "1"), _make_record("b", "1")]
    target = [_make_record("1"), _make_record("a", "b"), _make_record("b", "a")]
    analysis = analyze_changes(baseline, target)
    counts = {e.moved_employee_id: e.count for e in analysis.cascade_effects}
    assert counts == {"a": 1, "b": 1}


def test_as_dict_is_json_ready():
    analysis = analyze_changes([_make_record("1")], [_make_record("1"), _make_record("2", "1")])
    data = analysis.as_dict()
    assert data["new"][0]["change_type"] == "new"
    assert data["summary"]["net_change"] == 1
