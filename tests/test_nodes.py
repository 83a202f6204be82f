import pytest

from telemetry import (
    DEFAULT_NODE_TYPES,
    NodeData,
    NodeTypeCounts,
    aggregate_node_data,
    build_geographical_data,
    detect_anomalies,
    nodes_by_country,
    parse_historical_data,
    parse_node_types,
)


def test_parse_node_types_defaults_when_no_row():
    counts = parse_node_types([])
    assert counts == NodeTypeCounts(api_nodes=0, validators=0, relays=78, archivers=19)
    assert counts is DEFAULT_NODE_TYPES


def test_parse_node_types_coerces_values():
    counts = parse_node_types(
        [
            {
                "series": "nodes",
                "apiNodes": "1200",
                "validators": 850.0,
                "relays": 80,
                "archivers": 21,
            }
        ]
    )
    assert counts == NodeTypeCounts(api_nodes=1200, validators=850, relays=80, archivers=21)
    assert isinstance(counts.validators, int)


def test_parse_node_types_falls_back_per_field():
    counts = parse_node_types(
        [{"apiNodes": None, "validators": "n/a", "relays": 0, "archivers": "bogus"}]
    )
    assert counts.api_nodes == 0
    assert counts.validators == 0
    assert counts.relays == 78
    assert counts.archivers == 19


def test_parse_node_types_keeps_negative_values():
    row = {"apiNodes": -40, "validators": 1100, "relays": 78, "archivers": 19}
    counts = parse_node_types([row])
    assert counts.api_nodes == -40


def test_parse_historical_data_parses_strings_and_epoch_millis():
    rows = [
        {"ts": "2024-03-01 00:00:00", "node_cnt": 1500},
        {"ts": 1709337600000, "node_cnt": "1510"},
        {"ts": "2024-03-03T23:30:00Z", "node_cnt": 1490},
    ]
    points = parse_historical_data(rows)
    assert [(p.date, p.node_count) for p in points] == [
        ("2024-03-01", 1500),
        ("2024-03-02", 1510),
        ("2024-03-03", 1490),
    ]


def test_parse_historical_data_drops_unparseable_timestamps():
    rows = [
        {"ts": "not a date", "node_cnt": 1},
        {"ts": None, "node_cnt": 2},
        {"ts": True, "node_cnt": 3},
        {"node_cnt": 4},
        {"ts": "2024-01-05", "node_cnt": None},
    ]
    points = parse_historical_data(rows)
    assert len(points) == 1
    assert points[0].date == "2024-01-05"
    assert points[0].node_count == 0


def test_detect_anomalies_validators_exceed_total():
    counts = NodeTypeCounts(api_nodes=-597, validators=1000, relays=78, archivers=19)
    anomalies = detect_anomalies(counts, 500)
    assert any("exceeds total nodes (500)" in message for message in anomalies)
    assert any("API nodes count is negative" in message for message in anomalies)


def test_detect_anomalies_negative_counts():
    counts = NodeTypeCounts(api_nodes=10, validators=5, relays=-1, archivers=19)
    assert detect_anomalies(counts, counts.total) == ["One or more node type counts are negative."]


def test_detect_anomalies_consistent_counts():
    counts = NodeTypeCounts(api_nodes=1000, validators=500, relays=78, archivers=19)
    assert detect_anomalies(counts, counts.total) == []


def test_aggregate_node_data_sums_parts():
    result = aggregate_node_data(
        [{"apiNodes": 1000, "validators": 500, "relays": 78, "archivers": 19}],
        [{"ts": "2024-01-01", "node_cnt": 1590}],
        "2024-01-02T00:00:00.000Z",
    )
    assert not result.has_anomalies
    assert result.data.total_nodes == 1597
    payload = result.data.to_dict()
    assert payload["totalNodes"] == 1597
    assert payload["historicalData"] == [{"date": "2024-01-01", "nodeCount": 1590}]


def test_aggregate_node_data_without_history_omits_key():
    result = aggregate_node_data([], [], "2024-01-02T00:00:00.000Z")
    assert result.data.historical_data is None
    assert "historicalData" not in result.data.to_dict()
    assert result.data.total_nodes == 97


def test_aggregate_node_data_reports_anomalies(caplog: pytest.LogCaptureFixture):
    with caplog.at_level("WARNING", logger="telemetry"):
        result = aggregate_node_data(
            [{"apiNodes": -200, "validators": 1500, "relays": 78, "archivers": 19}],
            [],
            "2024-01-02T00:00:00.000Z",
        )
    assert result.has_anomalies
    assert "anomalies detected" in caplog.text


def test_node_data_round_trips_through_dict():
    data = aggregate_node_data(
        [{"apiNodes": 3, "validators": 2, "relays": 1, "archivers": 1}],
        [{"ts": "2024-01-01", "node_cnt": 7}],
        "t",
    ).data
    assert NodeData.from_dict(data.to_dict()) == data


def test_nodes_by_country_filters_and_sorts():
    rows = [
        {"c": "de", "nodes": 400},
        {"c": "US", "nodes": 600},
        {"c": "", "nodes": 50},
        {"c": None, "nodes": 20},
        {"c": "FR", "nodes": 0},
        {"c": "JP", "nodes": "12"},
    ]
    entries = nodes_by_country(rows)
    assert [(e.country_code, e.node_count) for e in entries] == [
        ("US", 600),
        ("DE", 400),
        ("JP", 12),
    ]


def test_build_geographical_data_counts_countries():
    geo = build_geographical_data([{"c": "US", "nodes": 3}], "t")
    payload = geo.to_dict()
    assert payload["totalCountries"] == 1
    assert payload["nodesByCountry"] == [{"countryCode": "US", "nodeCount": 3}]
    assert payload["metadata"]["source"] == "Nodely Node Telemetry Service"
