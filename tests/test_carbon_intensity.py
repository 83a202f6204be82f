import pytest

from carbon_intensity import (
    CarbonIntensityData,
    CountryIntensity,
    EntityInfo,
    build_carbon_intensity_data,
    entity_table,
    global_average,
    latest_by_entity,
    resolve_country_intensities,
)


def test_latest_by_entity_keeps_most_recent_year():
    latest = latest_by_entity([7, 7], [2021, 2023], [410.0, 395.0])
    assert latest == {7: (2023, 395.0)}


def test_latest_by_entity_ignores_older_year_seen_later():
    latest = latest_by_entity([7, 7], [2023, 2021], [395.0, 410.0])
    assert latest == {7: (2023, 395.0)}


def test_latest_by_entity_keeps_first_record_of_repeated_year():
    latest = latest_by_entity([7, 7], [2023, 2023], [395.0, 999.0])
    assert latest == {7: (2023, 395.0)}


def test_latest_by_entity_rejects_misaligned_arrays():
    with pytest.raises(ValueError, match="aligned"):
        latest_by_entity([1, 2], [2023], [1.0, 2.0])


def test_entity_table_reads_dimensions(owid_metadata):
    table = entity_table(owid_metadata)
    assert table[1] == EntityInfo(name="United States", code="USA")
    assert table[4].code is None
    assert entity_table({}) == {}


def test_resolve_country_intensities_filters_and_sorts(owid_data, owid_metadata):
    countries = resolve_country_intensities(owid_data, entity_table(owid_metadata))
    assert [c.code for c in countries] == ["DEU", "USA", "FRA"]
    usa = countries[1]
    assert usa == CountryIntensity(code="USA", name="United States", intensity=369.5, year=2023)
    assert countries[0].intensity == 381.0


def test_resolve_country_intensities_warns_on_unknown_entity(
    owid_metadata, caplog: pytest.LogCaptureFixture
):
    data = {"entities": [1, 99], "years": [2023, 2023], "values": [369.5, 12.0]}
    with caplog.at_level("WARNING", logger="carbon_intensity"):
        countries = resolve_country_intensities(data, entity_table(owid_metadata))
    assert [c.code for c in countries] == ["USA"]
    assert "Unknown entity ID: 99" in caplog.text


def test_resolve_country_intensities_sort_is_stable():
    entities = {1: EntityInfo("A", "AAA"), 2: EntityInfo("B", "BBB"), 3: EntityInfo("C", "CCC")}
    data = {"entities": [2, 1, 3], "years": [2023, 2023, 2023], "values": [100.0, 100.0, 300.0]}
    countries = resolve_country_intensities(data, entities)
    assert [c.code for c in countries] == ["CCC", "BBB", "AAA"]


def test_global_average():
    countries = [
        CountryIntensity("AAA", "A", 100.0, 2023),
        CountryIntensity("BBB", "B", 300.0, 2022),
    ]
    assert global_average(countries) == pytest.approx(200.0)
    assert global_average([]) is None


def test_build_carbon_intensity_data_payload(owid_data, owid_metadata):
    result = build_carbon_intensity_data(owid_data, owid_metadata, "2024-05-01T00:00:00.000Z")
    payload = result.to_dict()
    assert payload["timestamp"] == "2024-05-01T00:00:00.000Z"
    assert payload["globalAverage"] == pytest.approx((381.0 + 369.5 + 56.0) / 3)
    assert payload["metadata"] == {
        "unit": "gCO2e/kWh",
        "description": "Greenhouse gas emissions per unit of electricity generated.",
        "source": "Ember",
    }
    assert payload["countries"][0] == {
        "code": "DEU",
        "name": "Germany",
        "intensity": 381.0,
        "year": 2023,
    }


def test_build_carbon_intensity_data_without_countries(owid_metadata):
    empty = {"entities": [], "years": [], "values": []}
    result = build_carbon_intensity_data(empty, owid_metadata, "t")
    assert result.countries == ()
    assert "globalAverage" not in result.to_dict()


def test_carbon_intensity_data_from_dict(owid_data, owid_metadata):
    result = build_carbon_intensity_data(owid_data, owid_metadata, "t")
    assert CarbonIntensityData.from_dict(result.to_dict()) == result
