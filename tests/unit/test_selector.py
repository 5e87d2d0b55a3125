import pytest

from policystore.selector import FieldFilter, build_filter_selector


def test_window_from_first_field():
    assert build_filter_selector("p", 0, ["alice", "data1"]) == {
        "ptype": "p",
        "v0": "alice",
        "v1": "data1",
    }


def test_field_index_shifts_constrained_column():
    assert build_filter_selector("p", 2, ["read"]) == {"ptype": "p", "v2": "read"}


@pytest.mark.parametrize(
    "field_index, values, expected",
    [
        (0, ["", "data1"], {"ptype": "p", "v1": "data1"}),
        (1, ["data1", "", "allow"], {"ptype": "p", "v1": "data1", "v3": "allow"}),
        (0, ["", "", ""], {"ptype": "p"}),
    ],
)
def test_empty_values_leave_column_unconstrained(field_index, values, expected):
    assert build_filter_selector("p", field_index, values) == expected


def test_no_values_only_constrains_type():
    assert build_filter_selector("g", 0, []) == {"ptype": "g"}


def test_negative_field_index_drops_leading_values():
    assert build_filter_selector("p", -1, ["skipped", "alice"]) == {"ptype": "p", "v0": "alice"}


def test_window_past_last_column_is_ignored():
    assert build_filter_selector("p", 5, ["x", "y"]) == {"ptype": "p", "v5": "x"}
    assert build_filter_selector("p", 6, ["x"]) == {"ptype": "p"}


def test_field_filter_to_selector():
    flt = FieldFilter(ptype="p", field_index=1, field_values=["data1"])
    assert flt.to_selector() == {"ptype": "p", "v1": "data1"}
