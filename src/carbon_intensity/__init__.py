from .resolver import (
    CarbonIntensityData,
    CountryIntensity,
    EntityInfo,
    build_carbon_intensity_data,
    entity_table,
    global_average,
    latest_by_entity,
    resolve_country_intensities,
)

__all__ = [
    "CarbonIntensityData",
    "CountryIntensity",
    "EntityInfo",
    "build_carbon_intensity_data",
    "entity_table",
    "global_average",
    "latest_by_entity",
    "resolve_country_intensities",
]
