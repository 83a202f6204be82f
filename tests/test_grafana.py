import pytest

from telemetry.grafana import (
    decode_frame,
    first_frame,
    parse_grafana_response,
)


def test_decode_frame_transposes_columns_into_rows():
    rows = decode_frame(["c", "nodes"], [["US", "DE", "FR"], [600, 400, 12]])
    assert rows == [
        {"c": "US", "nodes": 600},
        {"c": "DE", "nodes": 400},
        {"c": "FR", "nodes": 12},
    ]


def test_decode_frame_rejects_ragged_columns():
    with pytest.raises(ValueError, match="rectangular"):
        decode_frame(["a", "b"], [[1, 2], [3]])


def test_decode_frame_rejects_field_count_mismatch():
    with pytest.raises(ValueError, match="2 fields but 1 value arrays"):
        decode_frame(["a", "b"], [[1, 2]])


def test_decode_frame_with_no_fields_has_no_rows():
    assert decode_frame([], []) == []


@pytest.mark.parametrize(
    "response",
    [
        None,
        {},
        {"results": {}},
        {"results": {"A": {}}},
        {"results": {"A": {"frames": []}}},
        {"results": {"A": {"frames": {"x": 1}}}},
        {"results": {"A": {"frames": "frame"}}},
        {"results": {"B": {"frames": [{"schema": {"fields": []}, "data": {"values": []}}]}}},
        {"results": {"A": {"frames": [{"schema": {"fields": [{"name": "x"}]}}]}}},
    ],
)
def test_parse_grafana_response_degrades_to_empty(response):
    assert parse_grafana_response(response) == []


def test_parse_grafana_response_uses_first_frame(grafana_response):
    response = grafana_response({"ts": [1, 2], "node_cnt": [10, 20]})
    response["results"]["A"]["frames"].append(
        {"schema": {"fields": [{"name": "other"}]}, "data": {"values": [[99]]}}
    )
    rows = parse_grafana_response(response)
    assert rows == [{"ts": 1, "node_cnt": 10}, {"ts": 2, "node_cnt": 20}]
    assert first_frame(response)["schema"]["fields"][0]["name"] == "ts"


def test_parse_grafana_response_with_zero_rows(grafana_response):
    assert parse_grafana_response(grafana_response({"c": [], "nodes": []})) == []
