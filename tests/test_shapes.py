import pytest
from influxdb3_mcp.core import shapes
from influxdb3_mcp.core.errors import MalformedResponseError

EXPECTED = [{"name": "sensors"}, {"name": "metrics"}]


@pytest.mark.parametrize(
    "payload",
    [
        ["sensors", "metrics"],
        {"databases": ["sensors", "metrics"]},
        {"data": {"databases": ["sensors", "metrics"]}},
        {"result": {"databases": ["sensors", "metrics"]}},
    ],
)
def test_database_list_shapes_normalize_to_names(payload):
    assert shapes.database_names(payload) == EXPECTED


def test_database_entries_legacy_and_named_objects():
    payload = [{"iox::database": "sensors"}, {"name": "metrics"}]
    assert shapes.database_names(payload) == EXPECTED


def test_unrecognized_shape_is_malformed_not_empty():
    with pytest.raises(MalformedResponseError) as exc:
        shapes.database_names({"items": ["sensors"]})
    assert "items" in exc.value.message


def test_unrecognized_entry_is_malformed():
    with pytest.raises(MalformedResponseError):
        shapes.database_names([{"id": 7}])


def test_empty_list_is_a_valid_answer():
    assert shapes.database_names({"databases": []}) == []


def test_matchers_are_tried_in_order():
    # both keys present: the top-level key wins over the nested one
    payload = {"databases": ["a"], "data": {"databases": ["b"]}}
    assert shapes.database_names(payload) == [{"name": "a"}]


def test_rows_accepts_bare_and_wrapped_lists():
    row = {"table_name": "cpu"}
    assert shapes.rows([row]) == [row]
    assert shapes.rows({"data": [row]}) == [row]
    with pytest.raises(MalformedResponseError):
        shapes.rows({"unexpected": True})
