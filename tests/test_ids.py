from orgchart.utils.ids import is_blank, normalize_id


def test_trims_and_casefolds():
    assert normalize_id("  E-100 ") == "e-100"
    assert normalize_id("ABC") == normalize_id("abc")


def test_blank_values_normalize_to_empty():
    assert normalize_id(None) == ""
    assert normalize_id("   ") == ""
    assert normalize_id(float("nan")) == ""
    assert is_blank("  ")
    assert not is_blank("0")


def test_numeric_ids_match_their_text_form():
    assert normalize_id(1001) == "1001"
    assert normalize_id(1001.0) == "1001"
    assert normalize_id(" 1001 ") == normalize_id(1001.0)


def test_non_integral_float_kept():
    assert normalize_id(12.5) == "12.5"
