import math

import numpy as np
import pytest

from carbon_intensity import CountryIntensity
from country_emissions import (
    country_code_to_alpha3,
    country_emissions_frame,
    country_flag,
    country_name,
    merge_country_emissions,
)
from telemetry import CountryNodeCount


def _nodes(*pairs):
    return [CountryNodeCount(code, count) for code, count in pairs]


def _carbon(*pairs):
    return [CountryIntensity(code, code, intensity, 2023) for code, intensity in pairs]


def test_country_code_lookups():
    assert country_code_to_alpha3("US") == "USA"
    assert country_code_to_alpha3("de") == "DEU"
    assert country_code_to_alpha3("XX") is None
    assert country_name("DE") == "Germany"
    assert country_name("XX") == "XX"


def test_country_flag_uses_regional_indicators():
    assert country_flag("US") == "\U0001F1FA\U0001F1F8"
    assert country_flag("de") == "\U0001F1E9\U0001F1EA"


def test_merge_two_countries():
    merged = merge_country_emissions(
        _nodes(("US", 600), ("DE", 400)),
        _carbon(("USA", 400.0), ("DEU", 200.0)),
    )
    us, de = merged
    assert us.country_code3 == "USA"
    assert us.country_name == "United States"
    assert us.node_percentage == pytest.approx(60.0)
    assert us.emissions_percentage == pytest.approx(75.0)
    assert us.relative_emissions == pytest.approx(1.25)
    assert de.node_percentage == pytest.approx(40.0)
    assert de.emissions_percentage == pytest.approx(25.0)
    assert de.relative_emissions == pytest.approx(0.625)


def test_merge_unmapped_country_keeps_node_share():
    merged = merge_country_emissions(
        _nodes(("US", 600), ("DE", 300), ("XX", 100)),
        _carbon(("USA", 400.0), ("DEU", 200.0)),
    )
    unmapped = merged[2]
    assert unmapped.country_code3 is None
    assert unmapped.carbon_intensity is None
    assert unmapped.emissions_percentage is None
    assert unmapped.relative_emissions is None
    assert unmapped.node_percentage == pytest.approx(10.0)
    assert merged[0].node_percentage == pytest.approx(60.0)
    assert merged[0].emissions_percentage == pytest.approx(80.0)


def test_merge_mapped_country_without_intensity():
    merged = merge_country_emissions(
        _nodes(("US", 50), ("FR", 50)),
        _carbon(("USA", 400.0)),
    )
    assert merged[1].country_code3 == "FRA"
    assert merged[1].carbon_intensity is None
    assert merged[1].emissions_percentage is None
    assert merged[0].emissions_percentage == pytest.approx(100.0)
    assert merged[0].relative_emissions == pytest.approx(2.0)


def test_merge_percentages_sum_to_hundred():
    merged = merge_country_emissions(
        _nodes(("US", 417), ("DE", 233), ("FR", 91), ("JP", 17)),
        _carbon(("USA", 369.5), ("DEU", 381.0), ("FRA", 56.0), ("JPN", 480.2)),
    )
    assert math.fsum(m.node_percentage for m in merged) == pytest.approx(100.0)
    assert math.fsum(m.emissions_percentage for m in merged) == pytest.approx(100.0)


def test_merge_zero_intensity_everywhere_has_no_emissions_share():
    merged = merge_country_emissions(_nodes(("US", 10)), _carbon(("USA", 0.0)))
    assert merged[0].carbon_intensity == 0.0
    assert merged[0].emissions_percentage is None
    assert merged[0].relative_emissions is None


def test_merge_empty_distribution():
    assert merge_country_emissions([], _carbon(("USA", 400.0))) == []


def test_merge_is_deterministic_and_keeps_order():
    nodes = _nodes(("DE", 400), ("US", 400), ("XX", 3))
    carbon = _carbon(("USA", 400.0), ("DEU", 200.0))
    first = merge_country_emissions(nodes, carbon)
    assert first == merge_country_emissions(nodes, carbon)
    assert [m.country_code2 for m in first] == ["DE", "US", "XX"]


def test_merged_to_dict_uses_camel_case():
    merged = merge_country_emissions(_nodes(("XX", 1)), [])
    assert merged[0].to_dict() == {
        "countryCode2": "XX",
        "countryCode3": None,
        "countryName": "XX",
        "flagEmoji": country_flag("XX"),
        "nodeCount": 1,
        "nodePercentage": 100.0,
        "carbonIntensity": None,
        "emissionsPercentage": None,
        "relativeEmissions": None,
    }


def test_country_emissions_frame():
    merged = merge_country_emissions(
        _nodes(("US", 600), ("XX", 400)),
        _carbon(("USA", 400.0)),
    )
    frame = country_emissions_frame(merged)
    assert frame["country_code2"].tolist() == ["US", "XX"]
    assert frame["emissions_percentage"].dtype == float
    assert math.isnan(frame.loc[1, "relative_emissions"])
    np.testing.assert_allclose(frame["node_percentage"], [60.0, 40.0])
